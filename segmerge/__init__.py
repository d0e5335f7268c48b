"""Segment extraction and translation merge for HTML documents."""

__version__ = "1.0.0"
