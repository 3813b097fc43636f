"""Product preview service: best-effort title, image and price for a product URL."""

__version__ = "1.0.0"
