"""Paginated data source queries and property value extraction.

Batches are yielded one at a time, so a consumer finishes processing a batch
before the next request goes out. Any page missing the requested property
aborts the traversal immediately.
"""

import logging
from collections.abc import AsyncIterator, Iterable
from typing import Any

from pydantic import ValidationError

from notion_tools.errors import ConfigError, PropertyNotFoundError, ResponseDecodeError
from notion_tools.models.pages import DEFAULT_PAGE_SIZE, QueryRequest, QueryResponse
from notion_tools.notion.client import api_request
from notion_tools.notion.extract import extract_strings

logger = logging.getLogger(__name__)

FILTER_PROPERTIES_PARAM = "filter_properties[]"


def _query_path(data_source_id: str) -> str:
    return f"data_sources/{data_source_id}/query"


def validate_property_name(property_name: str) -> str:
    """Return the trimmed property name, rejecting blank names."""
    name = property_name.strip()
    if not name:
        raise ConfigError("field name cannot be empty")
    return name


async def iter_query_batches(
    data_source_id: str,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
    filter_properties: Iterable[str] | None = None,
    filter: dict[str, Any] | None = None,
) -> AsyncIterator[QueryResponse]:
    """Yield every batch of a data source query, following next_cursor.

    Args:
        data_source_id: Data source to query.
        page_size: Results per request (Notion caps this at 100).
        filter_properties: Property names to keep in the response payload.
        filter: Optional Notion filter object.
    """
    path = _query_path(data_source_id)
    props = list(filter_properties or [])
    query = {FILTER_PROPERTIES_PARAM: props} if props else None
    cursor: str | None = None
    batch_number = 0

    while True:
        request = QueryRequest(page_size=page_size, start_cursor=cursor, filter=filter)
        data = await api_request("POST", path, query=query, body=request.to_body())
        try:
            response = QueryResponse.model_validate(data)
        except ValidationError as exc:
            raise ResponseDecodeError(f"notion API POST {path}: unexpected response: {exc}") from exc

        batch_number += 1
        logger.info(
            "Fetched query batch",
            extra={
                "data_source_id": data_source_id,
                "batch": batch_number,
                "results": len(response.results),
                "has_more": response.has_more,
            },
        )
        yield response

        cursor = response.continuation
        if cursor is None:
            if response.has_more:
                logger.warning(
                    "Query reported more results without a cursor, stopping",
                    extra={"data_source_id": data_source_id, "batch": batch_number},
                )
            break


async def iter_property_values(
    data_source_id: str,
    property_name: str,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> AsyncIterator[str]:
    """Yield the extracted, trimmed, non-empty values of one property across all pages.

    Values come out in traversal order. Raises PropertyNotFoundError on the
    first page that lacks the property.
    """
    name = validate_property_name(property_name)
    async for batch in iter_query_batches(data_source_id, page_size=page_size, filter_properties=[name]):
        for page in batch.results:
            value = page.properties.get(name)
            if value is None:
                raise PropertyNotFoundError(name, page.id)
            for text in extract_strings(value):
                text = text.strip()
                if text:
                    yield text


async def collect_property_values(
    data_source_id: str,
    property_name: str,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
    unique: bool = False,
) -> list[str]:
    """Return all extracted values after a full traversal.

    With ``unique`` the result is deduplicated and sorted.
    """
    values = [
        value
        async for value in iter_property_values(data_source_id, property_name, page_size=page_size)
    ]
    if unique:
        return sorted(set(values))
    return values
