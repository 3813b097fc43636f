"""Adapters package initialization."""
from product_preview.adapters.page_fetcher import PageFetcher, FetchedPage

__all__ = ["PageFetcher", "FetchedPage"]
