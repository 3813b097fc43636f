"""
Markup Candidate Collector for the product preview engine.
Reads Open Graph, Twitter card, itemprop and price-class markup as fallback sources.
"""
import re
from typing import Iterable, Optional, Tuple, Union

from bs4 import BeautifulSoup

from product_preview.models.product import MarkupFallbacks
from product_preview.utils.logger import LayerLogger

# (attribute names to match, attribute value); Open Graph and Twitter keys
# show up under either attribute in the wild.
MetaKey = Tuple[Tuple[str, ...], str]

OG_TITLE: MetaKey = (("property", "name"), "og:title")
TWITTER_TITLE: MetaKey = (("name", "property"), "twitter:title")

IMAGE_META_KEYS: Tuple[MetaKey, ...] = (
    (("property", "name"), "og:image:secure_url"),
    (("property", "name"), "og:image:url"),
    (("property", "name"), "og:image"),
    (("name", "property"), "twitter:image"),
    (("name", "property"), "twitter:image:src"),
)

PRICE_META_KEYS: Tuple[MetaKey, ...] = (
    (("property",), "product:price:amount"),
    (("property",), "og:price:amount"),
    (("name",), "price"),
    (("itemprop",), "price:amount"),
    (("itemprop",), "price"),
)

PRICE_SELECTORS = (
    ".price",
    "#price",
    "[itemprop='price']",
    "[class*='price']",
)


class MarkupCandidateCollector:
    """
    Meta-tag and DOM-selector fallback collector.

    Used when structured data is missing or incomplete.
    """

    def __init__(self):
        self.logger = LayerLogger("markup_collector")

    def collect_fallbacks(self, html: Union[str, BeautifulSoup]) -> MarkupFallbacks:
        """Collect title, image and price fallbacks from the document."""
        soup = html if isinstance(html, BeautifulSoup) else BeautifulSoup(html, "lxml")

        fallbacks = MarkupFallbacks(
            og_title=self._meta_title(soup, OG_TITLE),
            twitter_title=self._meta_title(soup, TWITTER_TITLE),
            document_title=self._extract_document_title(soup),
            meta_price=self._first_meta(soup, PRICE_META_KEYS),
            selector_price=self._extract_selector_price(soup),
        )

        for key in IMAGE_META_KEYS:
            for content in self._meta_contents(soup, key):
                fallbacks.add_image(content)

        self.logger.log_action(
            "markup_collection",
            "completed",
            has_og_title=bool(fallbacks.og_title),
            has_twitter_title=bool(fallbacks.twitter_title),
            has_document_title=bool(fallbacks.document_title),
            images=len(fallbacks.images),
            has_meta_price=bool(fallbacks.meta_price),
            has_selector_price=bool(fallbacks.selector_price),
        )
        return fallbacks

    def _meta_contents(self, soup: BeautifulSoup, key: MetaKey) -> Iterable[str]:
        """Non-empty content attributes of every meta tag matching key."""
        attr_names, value = key
        seen = set()
        for attr_name in attr_names:
            pattern = re.compile(rf"^\s*{re.escape(value)}\s*$", re.IGNORECASE)
            for tag in soup.find_all("meta", attrs={attr_name: pattern}):
                if id(tag) in seen:
                    continue
                seen.add(id(tag))
                content = (tag.get("content") or "").strip()
                if content:
                    yield content

    def _meta_content(self, soup: BeautifulSoup, key: MetaKey) -> Optional[str]:
        return next(iter(self._meta_contents(soup, key)), None)

    def _meta_title(self, soup: BeautifulSoup, key: MetaKey) -> Optional[str]:
        """First meta title for key with whitespace collapsed."""
        for content in self._meta_contents(soup, key):
            title = " ".join(content.split())
            if title:
                return title
        return None

    def _first_meta(self, soup: BeautifulSoup, keys: Iterable[MetaKey]) -> Optional[str]:
        """Content of the first key, in order, that has a non-empty value."""
        for key in keys:
            content = self._meta_content(soup, key)
            if content:
                return content
        return None

    def _extract_document_title(self, soup: BeautifulSoup) -> Optional[str]:
        """<title> text with whitespace collapsed."""
        title_tag = soup.find("title")
        if not title_tag:
            return None
        title = " ".join(title_tag.get_text().split())
        return title or None

    def _extract_selector_price(self, soup: BeautifulSoup) -> Optional[str]:
        """Text of the first element matched by each price selector, in order."""
        for selector in PRICE_SELECTORS:
            elem = soup.select_one(selector)
            if elem is None:
                continue
            text = " ".join(elem.get_text(" ").split())
            if text:
                return text
        return None
