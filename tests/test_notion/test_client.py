"""Tests for the Notion client singleton, request wrapper and data source discovery."""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from notion_client import AsyncClient

from notion_tools.errors import ConfigError, NotionAPIError, ResponseDecodeError, TransportError
from notion_tools.notion.client import (
    NOTION_VERSION,
    api_request,
    close_client,
    create_page,
    get_notion_client,
    init_client,
    resolve_data_source_id,
    update_page,
)


# --- singleton ---


def test_init_client_creates_async_client():
    client = init_client("  secret  ")
    assert isinstance(client, AsyncClient)
    assert client.options.notion_version == NOTION_VERSION
    assert client.options.timeout_ms == 30_000


def test_init_client_rejects_blank_token():
    with pytest.raises(ConfigError, match="missing token"):
        init_client("   ")


@patch("notion_tools.notion.client.get_settings")
async def test_get_notion_client_uses_settings(mock_get_settings: MagicMock):
    """Without init_client, the token comes from settings and the client is cached."""
    settings = MagicMock()
    settings.notion_token = "env-token"
    mock_get_settings.return_value = settings

    first = await get_notion_client()
    second = await get_notion_client()

    assert isinstance(first, AsyncClient)
    assert first is second
    mock_get_settings.assert_called_once()


@patch("notion_tools.notion.client.get_settings")
async def test_get_notion_client_missing_token(mock_get_settings: MagicMock):
    settings = MagicMock()
    settings.notion_token = ""
    mock_get_settings.return_value = settings

    with pytest.raises(ConfigError):
        await get_notion_client()


async def test_close_client_resets_singleton():
    first = init_client("secret")
    await close_client()
    with patch("notion_tools.notion.client.get_settings") as mock_get_settings:
        mock_get_settings.return_value = MagicMock(notion_token="other")
        second = await get_notion_client()
    assert second is not first


# --- api_request ---


@patch("notion_tools.notion.client.get_notion_client", new_callable=AsyncMock)
async def test_api_request_passes_through(mock_get_client):
    mock_client = AsyncMock()
    mock_get_client.return_value = mock_client
    mock_client.request.return_value = {"object": "list", "results": []}

    result = await api_request(
        "POST",
        "data_sources/ds-1/query",
        query={"filter_properties[]": ["Who"]},
        body={"page_size": 100},
    )

    assert result == {"object": "list", "results": []}
    mock_client.request.assert_awaited_once_with(
        path="data_sources/ds-1/query",
        method="POST",
        query={"filter_properties[]": ["Who"]},
        body={"page_size": 100},
    )


def _mock_transport_client(handler) -> None:
    """Route the cached client through an in-process transport."""
    init_client("secret", http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)))


def _error_handler(status: int, body: str, seen: list[httpx.Request]):
    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(status, text=body, headers={"content-type": "application/json"})

    return handler


async def test_api_request_maps_non_2xx():
    """Non-2xx responses carry method, path, status and raw body."""
    seen: list[httpx.Request] = []
    body = '{"object":"error","status":404,"code":"object_not_found","message":"Could not find"}'
    _mock_transport_client(_error_handler(404, body, seen))

    with pytest.raises(NotionAPIError) as exc_info:
        await api_request("POST", "data_sources/ds-1/query", body={})

    err = exc_info.value
    assert err.method == "POST"
    assert err.path == "data_sources/ds-1/query"
    assert err.status == 404
    assert err.body == body
    assert "status=404" in str(err)
    assert "object_not_found" in str(err)
    assert seen[0].url.path == "/v1/data_sources/ds-1/query"
    assert seen[0].headers["Notion-Version"] == NOTION_VERSION


async def test_api_request_does_not_retry_rate_limit():
    """A 429 is sent exactly once and surfaces as NotionAPIError."""
    seen: list[httpx.Request] = []
    body = '{"object":"error","status":429,"code":"rate_limited","message":"Rate limited"}'
    _mock_transport_client(_error_handler(429, body, seen))

    with pytest.raises(NotionAPIError) as exc_info:
        await api_request("POST", "data_sources/ds-1/query", body={"page_size": 100})

    assert exc_info.value.status == 429
    assert len(seen) == 1


async def test_api_request_does_not_retry_server_error():
    seen: list[httpx.Request] = []
    body = '{"object":"error","status":503,"code":"service_unavailable","message":"Unavailable"}'
    _mock_transport_client(_error_handler(503, body, seen))

    with pytest.raises(NotionAPIError) as exc_info:
        await api_request("GET", "databases/db-1")

    assert exc_info.value.status == 503
    assert len(seen) == 1


async def test_api_request_maps_timeout():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        raise httpx.ReadTimeout("read timed out", request=request)

    _mock_transport_client(handler)

    with pytest.raises(TransportError) as exc_info:
        await api_request("PATCH", "pages/p-1", body={})

    assert exc_info.value.method == "PATCH"
    assert "timed out" in str(exc_info.value)
    assert len(seen) == 1


async def test_api_request_maps_connection_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    _mock_transport_client(handler)

    with pytest.raises(TransportError, match="connection refused"):
        await api_request("GET", "databases/db-1")


@patch("notion_tools.notion.client.get_notion_client", new_callable=AsyncMock)
async def test_api_request_maps_bad_json(mock_get_client):
    mock_client = AsyncMock()
    mock_get_client.return_value = mock_client
    mock_client.request.side_effect = json.JSONDecodeError("Expecting value", "<html>", 0)

    with pytest.raises(ResponseDecodeError, match="not JSON"):
        await api_request("GET", "databases/db-1")


@patch("notion_tools.notion.client.get_notion_client", new_callable=AsyncMock)
async def test_api_request_rejects_non_object(mock_get_client):
    mock_client = AsyncMock()
    mock_get_client.return_value = mock_client
    mock_client.request.return_value = ["not", "an", "object"]

    with pytest.raises(ResponseDecodeError, match="expected a JSON object"):
        await api_request("GET", "databases/db-1")


# --- page endpoints ---


async def test_create_page_posts_parent_and_properties():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"object": "page", "id": "person-1"})

    _mock_transport_client(handler)
    parent = {"type": "data_source_id", "data_source_id": "people-ds"}
    properties = {"Name": {"title": [{"text": {"content": "Alice"}}]}}

    page = await create_page(parent, properties)

    assert page["id"] == "person-1"
    assert seen[0].method == "POST"
    assert seen[0].url.path == "/v1/pages"
    sent = json.loads(seen[0].content)
    assert sent["parent"] == parent
    assert sent["properties"] == properties


async def test_update_page_patches_properties():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"object": "page", "id": "p-1"})

    _mock_transport_client(handler)
    properties = {"People": {"relation": [{"id": "person-1"}]}}

    await update_page("p-1", properties)

    assert seen[0].method == "PATCH"
    assert seen[0].url.path == "/v1/pages/p-1"
    assert json.loads(seen[0].content)["properties"] == properties


async def test_update_page_maps_non_2xx():
    seen: list[httpx.Request] = []
    body = '{"object":"error","status":400,"code":"validation_error","message":"People is not a property"}'
    _mock_transport_client(_error_handler(400, body, seen))

    with pytest.raises(NotionAPIError) as exc_info:
        await update_page("p-1", {"People": {"relation": []}})

    assert exc_info.value.method == "PATCH"
    assert exc_info.value.path == "pages/p-1"
    assert exc_info.value.status == 400
    assert len(seen) == 1


# --- data source discovery ---


@patch("notion_tools.notion.client.api_request", new_callable=AsyncMock)
async def test_resolve_data_source_id_caches(mock_request):
    mock_request.return_value = {"object": "database", "data_sources": [{"id": "ds-1", "name": "Main"}]}

    first = await resolve_data_source_id("db-1")
    second = await resolve_data_source_id("db-1")

    assert first == second == "ds-1"
    mock_request.assert_awaited_once_with("GET", "databases/db-1")


@patch("notion_tools.notion.client.api_request", new_callable=AsyncMock)
async def test_resolve_data_source_id_none_found(mock_request):
    mock_request.return_value = {"object": "database", "data_sources": []}

    with pytest.raises(ConfigError, match="No data sources"):
        await resolve_data_source_id("db-1")
