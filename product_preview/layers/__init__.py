"""Layers package initialization."""
from product_preview.layers.structured_data import StructuredDataExtractor
from product_preview.layers.markup import MarkupCandidateCollector
from product_preview.layers.image_selection import ImageSelector, SCORING_POLICY, score_image_url
from product_preview.layers.price import normalize_price
from product_preview.layers.metadata import ProductMetadataLayer, get_product_data

__all__ = [
    "StructuredDataExtractor",
    "MarkupCandidateCollector",
    "ImageSelector",
    "SCORING_POLICY",
    "score_image_url",
    "normalize_price",
    "ProductMetadataLayer",
    "get_product_data",
]
