"""Async Notion client singleton, request wrapper and data source discovery.

Creates a cached AsyncClient pinned to the 2025-09-03 API version with a
30 second per-request timeout and retries disabled: a rate-limited, failed or
timed-out request ends the run. Every call goes through ``_api_errors``, which
maps notion-client and httpx failures onto the notion-tools error hierarchy
so callers only ever see ``NotionToolsError`` subclasses.
"""

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import httpx
from notion_client import AsyncClient
from notion_client import errors as notion_errors

from notion_tools.config import get_settings
from notion_tools.errors import ConfigError, NotionAPIError, ResponseDecodeError, TransportError

logger = logging.getLogger(__name__)

NOTION_VERSION = "2025-09-03"
HTTP_TIMEOUT_MS = 30_000

_client: AsyncClient | None = None
_data_source_ids: dict[str, str] = {}


def init_client(token: str, http_client: httpx.AsyncClient | None = None) -> AsyncClient:
    """Create the cached client with an explicit token, replacing any previous one.

    ``http_client`` swaps in a preconfigured httpx client (e.g. one with a
    mock transport); notion-client still applies its base URL and headers.
    """
    global _client
    token = token.strip()
    if not token:
        raise ConfigError("missing token: pass --token or set NOTION_TOKEN")
    _client = AsyncClient(
        client=http_client,
        auth=token,
        notion_version=NOTION_VERSION,
        timeout_ms=HTTP_TIMEOUT_MS,
        retry=False,
    )
    return _client


async def get_notion_client() -> AsyncClient:
    """Return the cached async Notion client instance.

    Creates the client on first call using notion_token from settings when
    ``init_client`` has not been called.
    """
    if _client is None:
        return init_client(get_settings().notion_token)
    return _client


@contextmanager
def _api_errors(method: str, path: str) -> Iterator[None]:
    try:
        yield
    except notion_errors.HTTPResponseError as exc:
        raise NotionAPIError(method, path, exc.status, exc.body or "") from exc
    except notion_errors.RequestTimeoutError as exc:
        raise TransportError(method, path, "request timed out") from exc
    except httpx.HTTPError as exc:
        raise TransportError(method, path, str(exc) or type(exc).__name__) from exc
    except json.JSONDecodeError as exc:
        raise ResponseDecodeError(f"notion API {method} {path}: response is not JSON: {exc}") from exc


def _as_object(method: str, path: str, response: Any) -> dict[str, Any]:
    if not isinstance(response, dict):
        raise ResponseDecodeError(
            f"notion API {method} {path}: expected a JSON object, got {type(response).__name__}"
        )
    return response


async def api_request(
    method: str,
    path: str,
    *,
    query: dict[str, Any] | None = None,
    body: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Issue one authenticated request and return the decoded JSON body.

    ``path`` is relative to the API root, e.g. ``data_sources/{id}/query``.
    List values in ``query`` become repeated query parameters.
    """
    client = await get_notion_client()
    with _api_errors(method, path):
        response = await client.request(path=path, method=method, query=query, body=body)
    return _as_object(method, path, response)


async def create_page(parent: dict[str, Any], properties: dict[str, Any]) -> dict[str, Any]:
    """Create a page via ``pages.create`` and return the page object."""
    client = await get_notion_client()
    with _api_errors("POST", "pages"):
        created = await client.pages.create(parent=parent, properties=properties)
    return _as_object("POST", "pages", created)


async def update_page(page_id: str, properties: dict[str, Any]) -> dict[str, Any]:
    """Patch page properties via ``pages.update`` and return the page object."""
    client = await get_notion_client()
    path = f"pages/{page_id}"
    with _api_errors("PATCH", path):
        updated = await client.pages.update(page_id=page_id, properties=properties)
    return _as_object("PATCH", path, updated)


async def resolve_data_source_id(database_id: str) -> str:
    """Discover and cache the first data source of a database.

    Since API version 2025-09-03 a database holds one or more data sources and
    queries target the data source. Raises ConfigError if none are found.
    """
    if database_id not in _data_source_ids:
        db = await api_request("GET", f"databases/{database_id}")
        data_sources = db.get("data_sources") or []
        if not data_sources:
            raise ConfigError(
                f"No data sources found for database {database_id}. "
                "Ensure the database exists and is shared with the integration."
            )
        _data_source_ids[database_id] = data_sources[0]["id"]
        logger.info(
            "Resolved data source",
            extra={"database_id": database_id, "data_source_id": _data_source_ids[database_id]},
        )
    return _data_source_ids[database_id]


async def close_client() -> None:
    """Close the underlying HTTP connection pool, if a client was created."""
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None


def reset_client() -> None:
    """Reset cached client and data source ids. Used for testing."""
    global _client
    _client = None
    _data_source_ids.clear()
