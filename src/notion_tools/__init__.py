"""Notion data source tools: property extraction and People linking."""

__version__ = "0.1.0"
