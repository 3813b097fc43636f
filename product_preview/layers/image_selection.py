"""
Image Scorer & Selector for the product preview engine.
Resolves image candidates to absolute URLs and picks the most product-like one.
"""
from typing import Callable, Iterable, List, Optional, Tuple
from urllib.parse import urljoin, urlparse

from product_preview.models.product import ImageCandidate
from product_preview.utils.logger import LayerLogger

ScoreRule = Tuple[str, Callable[[str], bool], int]

# (rule name, predicate on the lower-cased URL, score delta). Deltas add up.
SCORING_POLICY: List[ScoreRule] = [
    ("img_directory", lambda url: "/img/" in url, 5),
    ("product_path", lambda url: "/product" in url, 4),
    ("secure", lambda url: "secure" in url, 2),
    ("photo_extension", lambda url: url.endswith((".jpg", ".jpeg", ".webp")), 2),
    ("branding", lambda url: any(word in url for word in ("logo", "favicon", "icon")), -8),
]


def score_image_url(url: str, policy: Optional[List[ScoreRule]] = None) -> int:
    """Sum the deltas of every rule whose predicate matches the URL."""
    normalized = url.lower()
    return sum(delta for _, matches, delta in (policy or SCORING_POLICY) if matches(normalized))


def to_absolute_url(value: str, base_url: str) -> Optional[str]:
    """Resolve value against base_url; None unless the result is http(s)."""
    try:
        resolved = urljoin(base_url, value.strip())
        parsed = urlparse(resolved)
    except ValueError:
        return None

    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return resolved


class ImageSelector:
    """
    Picks a single representative image from the candidate pool.

    Highest score wins; ties go to the candidate seen first.
    """

    def __init__(self, policy: Optional[List[ScoreRule]] = None):
        self.policy = policy or SCORING_POLICY
        self.logger = LayerLogger("image_selector")

    def score_candidates(self, candidates: Iterable[str], base_url: str) -> List[ImageCandidate]:
        """Resolve and score candidates, dropping unresolvable ones and duplicates."""
        scored: List[ImageCandidate] = []
        seen = set()

        for raw in candidates:
            url = to_absolute_url(raw, base_url)
            if url is None:
                self.logger.log_skip("image_candidate", reason="not an http(s) URL", candidate=raw)
                continue
            if url in seen:
                continue
            seen.add(url)
            scored.append(ImageCandidate(url=url, score=score_image_url(url, self.policy)))

        return scored

    def select_best(self, candidates: Iterable[str], base_url: str) -> str:
        """Return the best absolute image URL, or an empty string."""
        scored = self.score_candidates(candidates, base_url)
        if not scored:
            self.logger.log_selection("image", None, url=base_url, reason="No resolvable image candidates")
            return ""

        # max() keeps the first of equal scores
        best = max(scored, key=lambda candidate: candidate.score)

        self.logger.log_selection(
            "image",
            "highest_score",
            url=base_url,
            image=best.url,
            score=best.score,
            candidates=len(scored)
        )
        return best.url
