"""
Product preview models.

ProductMetadata is the engine's output contract. The remaining types are
intermediate candidate pools that live only for one extraction call.
"""
from dataclasses import dataclass, field
from typing import List, Optional

from pydantic import BaseModel, Field


class ProductMetadata(BaseModel):
    """Best-effort product data for one URL."""
    title: str
    image: str = ""  # absolute http(s) URL or empty
    price: Optional[str] = None  # canonical decimal string, e.g. "1234.56"
    source_url: str = ""  # URL after redirects

    def get_present_fields(self) -> List[str]:
        """Return list of non-empty fields."""
        present = ["title"]
        if self.image:
            present.append("image")
        if self.price is not None:
            present.append("price")
        return present

    def get_missing_fields(self) -> List[str]:
        """Return list of empty fields."""
        return [f for f in ("title", "image", "price") if f not in self.get_present_fields()]


class PreviewResponse(BaseModel):
    """Wishlist preview body returned by the HTTP layer."""
    title: str
    image_url: Optional[str] = Field(default=None, alias="imageUrl")
    price: Optional[float] = Field(default=None, ge=0)
    source_url: str = Field(alias="sourceUrl")

    model_config = {"populate_by_name": True}


def _add_unique(values: List[str], value: str) -> None:
    if value not in values:
        values.append(value)


@dataclass
class StructuredDataExtraction:
    """
    Candidates found in one structured-data block.

    Each list behaves as an insertion-ordered set.
    """
    titles: List[str] = field(default_factory=list)
    images: List[str] = field(default_factory=list)
    prices: List[str] = field(default_factory=list)

    def add_title(self, value: str) -> None:
        _add_unique(self.titles, value)

    def add_image(self, value: str) -> None:
        _add_unique(self.images, value)

    def add_price(self, value: str) -> None:
        _add_unique(self.prices, value)

    def is_empty(self) -> bool:
        return not (self.titles or self.images or self.prices)


@dataclass
class MarkupFallbacks:
    """Candidates collected from meta tags and DOM selectors."""
    og_title: Optional[str] = None
    twitter_title: Optional[str] = None
    document_title: Optional[str] = None
    images: List[str] = field(default_factory=list)
    meta_price: Optional[str] = None
    selector_price: Optional[str] = None

    @property
    def title(self) -> Optional[str]:
        """First available markup title: og:title, twitter:title, <title>."""
        return self.og_title or self.twitter_title or self.document_title

    def add_image(self, value: str) -> None:
        _add_unique(self.images, value)


@dataclass
class ImageCandidate:
    """A resolved image URL and its heuristic score."""
    url: str
    score: int
