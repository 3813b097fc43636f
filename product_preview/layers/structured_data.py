"""
Structured-Data Extractor for the product preview engine.
Walks every JSON-LD block on a page and collects title, image and price candidates.
"""
import json
import re
from collections import deque
from typing import Any, Dict, List, Union

from bs4 import BeautifulSoup

from product_preview.models.product import StructuredDataExtraction
from product_preview.utils.logger import LayerLogger

JSONLD_TYPE = re.compile(r"^\s*application/ld\+json\s*(;.*)?$", re.IGNORECASE)

# Checked in order; the first non-empty string is the object's title.
TITLE_FIELDS = ("name", "title", "headline")
PRICE_FIELDS = ("price", "lowPrice", "highPrice")
PRICE_CONTAINERS = ("priceSpecification", "offers")


class StructuredDataExtractor:
    """
    JSON-LD candidate extractor.

    Every object in a block is visited breadth-first, whatever its @type,
    so products wrapped in @graph arrays or nested offers are still found.
    """

    def __init__(self):
        self.logger = LayerLogger("structured_data")

    def extract_all(self, html: Union[str, BeautifulSoup]) -> List[StructuredDataExtraction]:
        """Return one extraction per JSON-LD script block, in document order."""
        soup = html if isinstance(html, BeautifulSoup) else BeautifulSoup(html, "lxml")

        extractions = []
        for script in soup.find_all("script", attrs={"type": JSONLD_TYPE}):
            extractions.append(self.extract_block(script.string or ""))

        self.logger.log_action(
            "jsonld_extraction",
            "completed",
            blocks=len(extractions),
            empty_blocks=sum(1 for e in extractions if e.is_empty()),
            titles=sum(len(e.titles) for e in extractions),
            images=sum(len(e.images) for e in extractions),
            prices=sum(len(e.prices) for e in extractions),
        )
        return extractions

    def extract_block(self, raw: str) -> StructuredDataExtraction:
        """Parse one block's text. Malformed JSON yields an empty extraction."""
        extraction = StructuredDataExtraction()

        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, RecursionError) as e:
            self.logger.log_skip("jsonld_block", reason=f"invalid JSON: {e}")
            return extraction

        queue = deque([data])
        while queue:
            current = queue.popleft()

            if isinstance(current, list):
                queue.extend(current)
                continue

            if not isinstance(current, dict):
                continue

            title = self._title_of(current)
            if title:
                extraction.add_title(title)

            for image in self._normalize_images(current.get("image")):
                extraction.add_image(image)

            for price in self._collect_prices(current):
                extraction.add_price(price)

            for value in current.values():
                if isinstance(value, (dict, list)):
                    queue.append(value)

        return extraction

    def _title_of(self, node: Dict[str, Any]) -> str:
        """First non-empty string among name, title, headline."""
        for key in TITLE_FIELDS:
            value = node.get(key)
            if isinstance(value, str):
                value = " ".join(value.split())
                if value:
                    return value
        return ""

    def _normalize_images(self, image_data: Any) -> List[str]:
        """
        Normalize a JSON-LD image field to a list of URLs.

        Handles:
        - String: single URL
        - List[str]: array of URLs
        - List[dict]: array of ImageObject with url
        - dict: single ImageObject with url
        """
        images = []

        if isinstance(image_data, str):
            images.append(image_data)
        elif isinstance(image_data, list):
            for img in image_data:
                if isinstance(img, str):
                    images.append(img)
                elif isinstance(img, dict) and isinstance(img.get("url"), str):
                    images.append(img["url"])
        elif isinstance(image_data, dict) and isinstance(image_data.get("url"), str):
            images.append(image_data["url"])

        return [img.strip() for img in images if img.strip()]

    def _collect_prices(self, node: Any) -> List[str]:
        """Prices on this node and inside its priceSpecification/offers."""
        if isinstance(node, list):
            prices = []
            for item in node:
                prices.extend(self._collect_prices(item))
            return prices

        if not isinstance(node, dict):
            return []

        prices = []
        for key in PRICE_FIELDS:
            price = self._price_to_string(node.get(key))
            if price:
                prices.append(price)

        for key in PRICE_CONTAINERS:
            if key in node:
                prices.extend(self._collect_prices(node[key]))

        return prices

    def _price_to_string(self, value: Any) -> str:
        # bool is an int subclass but never a price
        if isinstance(value, bool):
            return ""
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str):
            return value.strip()
        return ""
