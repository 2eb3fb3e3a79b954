"""Page and query envelope models for the data source query endpoint."""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator

from notion_tools.models.properties import PropertyValue

DEFAULT_PAGE_SIZE = 100


class Page(BaseModel):
    """A Notion page: its id and properties keyed by display name."""

    object: str = "page"
    id: str
    properties: dict[str, PropertyValue] = {}


class QueryRequest(BaseModel):
    """Body of ``POST /data_sources/{id}/query``."""

    page_size: int = DEFAULT_PAGE_SIZE
    start_cursor: str | None = None
    filter: dict[str, Any] | None = None

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class QueryResponse(BaseModel):
    """One batch of query results plus the pagination state."""

    object: str = "list"
    results: Annotated[list[Page], BeforeValidator(lambda v: [] if v is None else v)] = []
    has_more: bool = False
    next_cursor: str | None = None

    @property
    def continuation(self) -> str | None:
        """Cursor for the next batch, or None when traversal is finished.

        A server claiming more results without a usable cursor ends the
        traversal as well.
        """
        if self.has_more and self.next_cursor:
            return self.next_cursor
        return None
