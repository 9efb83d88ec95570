"""Spec tier list: performance aggregation and tiering pipeline."""

__version__ = "0.1.0"
