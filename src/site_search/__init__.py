"""Embedded full-text search and static file server for HTML sites."""

__version__ = "0.1.0"
