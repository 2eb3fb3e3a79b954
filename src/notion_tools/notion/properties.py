"""Pure functions building Notion API property payloads for writes.

Handles the 2000-character rich_text limit by splitting long text into
multiple rich_text objects.
"""

from collections.abc import Iterable

from notion_tools.models.properties import RelationRef


def _split_rich_text(text: str, limit: int = 2000) -> list[dict]:
    """Split text into multiple rich_text objects respecting Notion's 2000-char limit."""
    if not text:
        return [{"type": "text", "text": {"content": ""}}]
    chunks = []
    for i in range(0, len(text), limit):
        chunks.append({"type": "text", "text": {"content": text[i : i + limit]}})
    return chunks


def build_title(text: str) -> dict:
    """Title property value for pages.create / pages.update."""
    return {"title": _split_rich_text(text)}


def build_relation(page_ids: Iterable[str]) -> dict:
    """Relation property value that replaces all existing targets."""
    return {"relation": [RelationRef(id=page_id).model_dump() for page_id in page_ids]}


def data_source_parent(data_source_id: str) -> dict:
    return {"type": "data_source_id", "data_source_id": data_source_id}
