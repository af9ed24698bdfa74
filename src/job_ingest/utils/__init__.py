"""Shared helpers: ATS detection, field extraction chains, HTTP and text utilities"""
