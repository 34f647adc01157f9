"""
XLIFF Conversion Service package.

This module provides a FastAPI application exposing `POST
/convert/{source-lang}/{target-lang}`, which turns an uploaded document into
an XLIFF translation file.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
