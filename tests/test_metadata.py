import json

import httpx
import pytest
import structlog.testing

from product_preview.adapters.page_fetcher import PageFetcher
from product_preview.layers.metadata import ProductMetadataLayer
from product_preview.utils.errors import FetchFailedError, InvalidProductUrlError

PRODUCT_URL = "https://shop.example.com/items/red-chair-42"


def _layer(handler):
    return ProductMetadataLayer(fetcher=PageFetcher(transport=httpx.MockTransport(handler)))


def _serve(html):
    def handler(request):
        return httpx.Response(200, html=html)
    return handler


def _jsonld(data):
    return f'<script type="application/ld+json">{json.dumps(data)}</script>'


@pytest.mark.asyncio
async def test_nested_structured_data():
    html = "<html><head>" + _jsonld(
        {"@graph": [{"@type": "Product", "name": "Chair", "offers": {"price": "199.00"}}]}
    ) + "<title>Ignored</title></head></html>"

    metadata = await _layer(_serve(html)).get_product_data(PRODUCT_URL)

    assert metadata.title == "Chair"
    assert metadata.price == "199.00"


@pytest.mark.asyncio
async def test_empty_page_falls_back_to_url():
    metadata = await _layer(_serve("<html><body></body></html>")).get_product_data(PRODUCT_URL)

    assert metadata.title == "red chair 42"
    assert metadata.image == ""
    assert metadata.price is None


@pytest.mark.asyncio
async def test_document_title_is_collapsed():
    html = "<html><head><title>  Acme   Widget  </title></head></html>"

    metadata = await _layer(_serve(html)).get_product_data(PRODUCT_URL)

    assert metadata.title == "Acme Widget"


@pytest.mark.asyncio
async def test_hostname_fallback_for_root_url():
    metadata = await _layer(_serve("")).get_product_data("https://shop.example.com/")

    assert metadata.title == "shop.example.com"


@pytest.mark.asyncio
async def test_image_resolves_against_final_url():
    html = """
    <head>
      <meta property="og:image" content="/assets/logo.png">
      <meta name="twitter:image" content="img/product/chair.jpg">
    </head>
    """

    def handler(request):
        if request.url.path == "/c/42":
            return httpx.Response(302, headers={"Location": "https://www.shop.example.com/p/chair"})
        return httpx.Response(200, html=html)

    metadata = await _layer(handler).get_product_data("https://shop.example.com/c/42")

    assert metadata.image == "https://www.shop.example.com/p/img/product/chair.jpg"
    assert metadata.source_url == "https://www.shop.example.com/p/chair"


@pytest.mark.asyncio
async def test_structured_and_markup_images_share_one_pool():
    html = (
        "<head>"
        '<meta property="og:image" content="https://cdn.example.com/img/product/chair.webp">'
        + _jsonld({"@type": "Product", "name": "Chair", "image": "https://cdn.example.com/favicon.png"})
        + "</head>"
    )

    metadata = await _layer(_serve(html)).get_product_data(PRODUCT_URL)

    assert metadata.image == "https://cdn.example.com/img/product/chair.webp"


def test_title_priority():
    layer = ProductMetadataLayer()
    html = (
        "<head><title>Doc</title>"
        '<meta name="twitter:title" content="Twitter">'
        '<meta property="og:title" content="OG">'
        + _jsonld({"@type": "WebPage"})
        + _jsonld({"@type": "Product", "headline": "Structured"})
        + "</head>"
    )

    assert layer.extract(html, PRODUCT_URL).title == "Structured"
    assert layer.extract(html.replace("headline", "sku"), PRODUCT_URL).title == "OG"


def test_price_priority():
    layer = ProductMetadataLayer()
    meta = '<meta property="product:price:amount" content="1.234,56">'
    selector = '<span class="price">kr 999</span>'

    html = "<head>" + meta + _jsonld({"offers": {"price": 10}}) + "</head><body>" + selector + "</body>"
    assert layer.extract(html, PRODUCT_URL).price == "10"

    html = "<head>" + meta + _jsonld({"offers": {"price": "TBA"}}) + "</head><body>" + selector + "</body>"
    assert layer.extract(html, PRODUCT_URL).price == "1234.56"

    html = "<body>" + selector + "</body>"
    assert layer.extract(html, PRODUCT_URL).price == "999"


def test_malformed_block_does_not_hide_other_sources():
    layer = ProductMetadataLayer()
    html = (
        '<head><script type="application/ld+json">{broken</script>'
        + _jsonld({"name": "Lamp", "offers": {"lowPrice": "49,90"}})
        + "</head>"
    )

    metadata = layer.extract(html, PRODUCT_URL)

    assert metadata.title == "Lamp"
    assert metadata.price == "49.90"


@pytest.mark.asyncio
@pytest.mark.parametrize("url", ["ftp://shop.example.com/chair", "not a url", "", "https://"])
async def test_invalid_url_never_fetches(url):
    def handler(request):
        raise AssertionError("no request expected")

    with pytest.raises(InvalidProductUrlError) as exc_info:
        await _layer(handler).get_product_data(url)

    assert exc_info.value.status_code == 400


@pytest.mark.asyncio
async def test_server_error_propagates():
    def handler(request):
        return httpx.Response(500)

    with pytest.raises(FetchFailedError):
        await _layer(handler).get_product_data(PRODUCT_URL)


@pytest.mark.asyncio
async def test_timeout_propagates():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(FetchFailedError):
        await _layer(handler).get_product_data(PRODUCT_URL)


def test_selected_sources_are_logged():
    html = (
        '<head><meta property="og:title" content="Chair">'
        '<meta property="og:image" content="/img/chair.jpg">'
        '<meta property="product:price:amount" content="199,00"></head>'
    )

    with structlog.testing.capture_logs() as logs:
        ProductMetadataLayer().extract(html, PRODUCT_URL)

    sources = {e["field"]: e["source"] for e in logs if e["event"] == "field_selected"}
    assert sources == {"title": "markup", "image": "highest_score", "price": "meta"}


def test_exhausted_fields_are_logged_with_no_source():
    with structlog.testing.capture_logs() as logs:
        ProductMetadataLayer().extract("<html></html>", PRODUCT_URL)

    sources = {e["field"]: e["source"] for e in logs if e["event"] == "field_selected"}
    assert sources == {"image": "none", "price": "none"}
    assert any(e["event"] == "fallback_triggered" and e["to_source"] == "url" for e in logs)
