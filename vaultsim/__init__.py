"""Projection engine for pooled, multi-strand savings commitments."""

__version__ = "0.1.0"
