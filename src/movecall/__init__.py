"""Validate and encode Move call arguments from raw form input."""

__version__ = "0.1.0"
