"""Download PlayStation 3 title updates from the vendor CDN."""

__version__ = "1.0.0"
