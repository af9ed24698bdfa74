"""Ingestion jobs: normalizer, manual import, crawl orchestrator, scheduler"""
