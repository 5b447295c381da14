"""trexport: Trade Republic timeline retrieval and enrichment."""

__version__ = "0.1.0"
__author__ = "trexport Team"

__all__ = ["__version__", "__author__"]
