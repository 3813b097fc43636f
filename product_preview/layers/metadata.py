"""
Product Metadata Layer for the product preview engine.
Sequences fetch, extraction, image selection and price normalization.
"""
from typing import List, Optional

from bs4 import BeautifulSoup

from product_preview.adapters.page_fetcher import PageFetcher
from product_preview.layers.image_selection import ImageSelector
from product_preview.layers.markup import MarkupCandidateCollector
from product_preview.layers.price import normalize_price
from product_preview.layers.structured_data import StructuredDataExtractor
from product_preview.models.product import (
    MarkupFallbacks,
    ProductMetadata,
    StructuredDataExtraction,
)
from product_preview.utils.errors import InvalidProductUrlError
from product_preview.utils.fallback import first_available
from product_preview.utils.logger import LayerLogger
from product_preview.utils.urls import fallback_title_from_url, parse_http_url


class ProductMetadataLayer:
    """
    Product metadata orchestration.

    This layer:
    - Rejects malformed and non-http(s) URLs before any network call
    - Lets fetch failures propagate
    - Resolves every field through its priority chain, so a fetched page
      always yields a result
    """

    def __init__(
        self,
        fetcher: Optional[PageFetcher] = None,
        structured_data: Optional[StructuredDataExtractor] = None,
        markup: Optional[MarkupCandidateCollector] = None,
        image_selector: Optional[ImageSelector] = None,
    ):
        self.logger = LayerLogger("product_metadata")
        self.fetcher = fetcher or PageFetcher()
        self.structured_data = structured_data or StructuredDataExtractor()
        self.markup = markup or MarkupCandidateCollector()
        self.image_selector = image_selector or ImageSelector()

    async def get_product_data(self, url: str) -> ProductMetadata:
        """
        Extract product metadata for a URL.

        Args:
            url: Absolute http/https product URL

        Returns:
            ProductMetadata with title always set

        Raises:
            InvalidProductUrlError: URL is malformed or not http/https
            FetchFailedError: page could not be fetched
        """
        if not isinstance(url, str) or parse_http_url(url.strip()) is None:
            self.logger.log_error("Invalid product URL", error_type="invalid_url", url=url)
            raise InvalidProductUrlError("Invalid URL: only http/https URLs are supported")
        url = url.strip()

        self.logger.log_action("product_metadata", "started", url=url)

        page = await self.fetcher.fetch(url)
        return self.extract(page.html, url, page.final_url)

    def extract(self, html: str, url: str, final_url: Optional[str] = None) -> ProductMetadata:
        """Build ProductMetadata from already fetched HTML."""
        base_url = final_url or url
        soup = BeautifulSoup(html, "lxml")

        extractions = self.structured_data.extract_all(soup)
        fallbacks = self.markup.collect_fallbacks(soup)

        title = self._select_title(extractions, fallbacks, url)
        image = self.image_selector.select_best(self._image_pool(extractions, fallbacks), base_url)
        price = self._select_price(extractions, fallbacks, url)

        metadata = ProductMetadata(title=title, image=image, price=price, source_url=base_url)

        self.logger.log_extraction(
            source="html",
            fields_present=metadata.get_present_fields(),
            fields_missing=metadata.get_missing_fields(),
            url=url,
            jsonld_blocks=len(extractions)
        )
        return metadata

    def _select_title(
        self,
        extractions: List[StructuredDataExtraction],
        fallbacks: MarkupFallbacks,
        url: str,
    ) -> str:
        source, title = first_available([
            ("structured_data", lambda: next((t for e in extractions for t in e.titles), None)),
            ("markup", lambda: fallbacks.title),
        ])

        if title is None:
            title = fallback_title_from_url(url)
            self.logger.log_fallback(
                from_source="page_markup",
                to_source="url",
                reason="No title found in page",
                url=url,
                title=title
            )
            return title

        self.logger.log_selection("title", source, url=url, title=title)
        return title

    def _image_pool(
        self,
        extractions: List[StructuredDataExtraction],
        fallbacks: MarkupFallbacks,
    ) -> List[str]:
        """Structured-data images followed by meta-tag images, de-duplicated."""
        pool: List[str] = []
        for candidate in [img for e in extractions for img in e.images] + fallbacks.images:
            if candidate not in pool:
                pool.append(candidate)
        return pool

    def _select_price(
        self,
        extractions: List[StructuredDataExtraction],
        fallbacks: MarkupFallbacks,
        url: str,
    ) -> Optional[str]:
        def structured_price() -> Optional[str]:
            for extraction in extractions:
                for raw in extraction.prices:
                    normalized = normalize_price(raw)
                    if normalized is not None:
                        return normalized
            return None

        source, price = first_available([
            ("structured_data", structured_price),
            ("meta", lambda: normalize_price(fallbacks.meta_price)),
            ("selector", lambda: normalize_price(fallbacks.selector_price)),
        ])

        if price is None:
            self.logger.log_selection("price", None, url=url, reason="No normalizable price found")
        else:
            self.logger.log_selection("price", source, url=url, price=price)
        return price


async def get_product_data(url: str) -> ProductMetadata:
    """Extract product metadata with default components."""
    return await ProductMetadataLayer().get_product_data(url)
