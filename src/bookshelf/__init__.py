"""Bookshelf: book catalog API with permission-driven authorization."""

__version__ = "0.1.0"
