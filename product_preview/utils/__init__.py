"""Utils package initialization."""
from product_preview.utils.logger import get_logger, LayerLogger, set_trace_id, get_trace_id
from product_preview.utils.errors import ProductDataError, InvalidProductUrlError, FetchFailedError
from product_preview.utils.fallback import first_available

__all__ = [
    "get_logger",
    "LayerLogger",
    "set_trace_id",
    "get_trace_id",
    "ProductDataError",
    "InvalidProductUrlError",
    "FetchFailedError",
    "first_available",
]
