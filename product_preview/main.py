"""
Product Preview Service - FastAPI Application
Main entry point with REST API endpoints.
"""
import math
from typing import Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from product_preview import __version__
from product_preview.config import config
from product_preview.layers.metadata import ProductMetadataLayer
from product_preview.models.product import PreviewResponse
from product_preview.utils.errors import ProductDataError
from product_preview.utils.logger import get_logger, set_trace_id
from product_preview.utils.urls import fallback_title_from_url, is_blocked_host, parse_http_url


# Initialize FastAPI app
app = FastAPI(
    title="Product Preview Service",
    description="Best-effort title, image and price extraction for wishlist product URLs",
    version=__version__,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize layers
metadata_layer = ProductMetadataLayer()

logger = get_logger("main")


def _price_to_number(price: Optional[str]) -> Optional[float]:
    """Convert a canonical price string, keeping only finite non-negative values."""
    if price is None:
        return None
    try:
        value = float(price)
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value


def _fallback_preview(url: str) -> PreviewResponse:
    """Preview built from the URL alone."""
    return PreviewResponse(
        title=fallback_title_from_url(url),
        image_url=None,
        price=None,
        source_url=url,
    )


# API Routes
@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": __version__}


@app.get("/api/wishlist/preview", response_model=PreviewResponse, response_model_by_alias=True)
async def preview_wishlist_product(url: str = Query(..., description="Product page URL")):
    """
    Preview a product page for a wishlist item.

    Rejects malformed URLs and private-network hosts with 400. Any failure
    inside the extraction engine degrades to a URL-derived preview.
    """
    trace_id = set_trace_id()
    normalized_url = url.strip()

    logger.info("wishlist_preview_request", url=normalized_url, trace_id=trace_id)

    hostname = parse_http_url(normalized_url)
    if hostname is None:
        raise HTTPException(status_code=400, detail="Only http/https URLs are supported")

    if is_blocked_host(hostname):
        logger.warning("wishlist_preview_blocked_host", url=normalized_url, hostname=hostname)
        raise HTTPException(status_code=400, detail="This host is not allowed")

    try:
        metadata = await metadata_layer.get_product_data(normalized_url)
    except ProductDataError as e:
        logger.warning(
            "wishlist_preview_fallback",
            url=normalized_url,
            error=e.message,
            status_code=e.status_code
        )
        return _fallback_preview(normalized_url)
    except Exception as e:
        logger.error("wishlist_preview_error", error=str(e), error_type=type(e).__name__, url=normalized_url)
        return _fallback_preview(normalized_url)

    logger.info(
        "wishlist_preview_extracted",
        url=normalized_url,
        title=metadata.title,
        image=metadata.image,
        price=metadata.price,
        source_url=metadata.source_url
    )

    return PreviewResponse(
        title=metadata.title,
        image_url=metadata.image or None,
        price=_price_to_number(metadata.price),
        source_url=metadata.source_url or normalized_url,
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=config.HOST, port=config.PORT)
