"""Single-domain sitemap generator."""

__version__ = "0.1.0"
