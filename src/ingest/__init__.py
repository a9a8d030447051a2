"""Feed ingestion pipeline.

This module fetches and parses the remote CSV feed.
It orchestrates mapping, author resolution, and chunked writes.
"""
