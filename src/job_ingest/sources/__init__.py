"""Aggregator connectors: Adzuna, Remotive, Programathor"""
