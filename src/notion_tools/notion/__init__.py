"""Notion API access: client, extraction, queries and People linking."""

from notion_tools.notion.client import (
    api_request,
    close_client,
    create_page,
    get_notion_client,
    init_client,
    reset_client,
    resolve_data_source_id,
    update_page,
)
from notion_tools.notion.extract import extract_strings, extract_text, format_number
from notion_tools.notion.models import LinkResult, PeopleLinkConfig, SyncSummary
from notion_tools.notion.people import link_page_people, split_person_names, sync_people, upsert_person
from notion_tools.notion.query import collect_property_values, iter_property_values, iter_query_batches

__all__ = [
    "api_request",
    "close_client",
    "collect_property_values",
    "create_page",
    "extract_strings",
    "extract_text",
    "format_number",
    "get_notion_client",
    "init_client",
    "iter_property_values",
    "iter_query_batches",
    "link_page_people",
    "LinkResult",
    "PeopleLinkConfig",
    "reset_client",
    "resolve_data_source_id",
    "split_person_names",
    "SyncSummary",
    "sync_people",
    "update_page",
    "upsert_person",
]
