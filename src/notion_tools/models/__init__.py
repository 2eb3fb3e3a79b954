"""Data models for Notion pages and property values."""

from notion_tools.models.pages import DEFAULT_PAGE_SIZE, Page, QueryRequest, QueryResponse
from notion_tools.models.properties import (
    PropertyValue,
    RelationRef,
    UnsupportedValue,
    parse_property_value,
)

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "Page",
    "PropertyValue",
    "QueryRequest",
    "QueryResponse",
    "RelationRef",
    "UnsupportedValue",
    "parse_property_value",
]
