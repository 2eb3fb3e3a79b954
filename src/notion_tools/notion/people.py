"""Find-or-create person pages and relate source pages to them.

For every page of the source data source, the "Who" property is split into
names; each name resolves to a People page by exact title match, or a new
page is created. The source page's relation property is then overwritten with
the resolved ids. Lookups always run before creates, so re-running over the
same data reuses the pages created earlier instead of duplicating them.
"""

import logging
from collections.abc import AsyncIterator, Callable

from pydantic import ValidationError

from notion_tools.errors import PropertyNotFoundError, ResponseDecodeError
from notion_tools.models.pages import DEFAULT_PAGE_SIZE, Page, QueryRequest, QueryResponse
from notion_tools.notion.client import api_request, create_page, update_page
from notion_tools.notion.extract import extract_text
from notion_tools.notion.models import PERSON_SEPARATOR, LinkResult, PeopleLinkConfig, SyncSummary
from notion_tools.notion.properties import build_relation, build_title, data_source_parent
from notion_tools.notion.query import iter_query_batches, validate_property_name

logger = logging.getLogger(__name__)


def split_person_names(text: str, separator: str = PERSON_SEPARATOR) -> list[str]:
    """Split on the literal separator and trim each token.

    Blank tokens are kept; callers skip them. Only the exact separator
    splits, so with the default ``", "`` the text ``"A,B, C"`` gives
    ``["A,B", "C"]``.
    """
    return [token.strip() for token in text.split(separator)]


async def find_person(config: PeopleLinkConfig, name: str) -> str | None:
    """Return the id of the People page titled exactly ``name``, if any."""
    path = f"data_sources/{config.people_data_source_id}/query"
    request = QueryRequest(
        page_size=1,
        filter={"property": config.title_property, "title": {"equals": name}},
    )
    data = await api_request("POST", path, body=request.to_body())
    try:
        response = QueryResponse.model_validate(data)
    except ValidationError as exc:
        raise ResponseDecodeError(f"notion API POST {path}: unexpected response: {exc}") from exc
    if not response.results:
        return None
    return response.results[0].id


async def create_person(config: PeopleLinkConfig, name: str) -> str:
    """Create a People page titled ``name`` and return its id."""
    created = await create_page(
        data_source_parent(config.people_data_source_id),
        {config.title_property: build_title(name)},
    )
    page_id = created.get("id")
    if not page_id:
        raise ResponseDecodeError("notion API POST pages: response has no page id")
    logger.info("Created person page", extra={"person": name, "page_id": page_id})
    return page_id


async def upsert_person(config: PeopleLinkConfig, name: str) -> tuple[str, bool]:
    """Resolve ``name`` to a People page id. Returns (page_id, created)."""
    existing = await find_person(config, name)
    if existing is not None:
        logger.debug("Reusing person page", extra={"person": name, "page_id": existing})
        return existing, False
    return await create_person(config, name), True


async def set_relation(page_id: str, relation_property: str, person_ids: list[str]) -> None:
    """Replace the relation targets of ``page_id`` with ``person_ids``."""
    await update_page(page_id, {relation_property: build_relation(person_ids)})
    logger.info(
        "Updated relation",
        extra={"page_id": page_id, "property": relation_property, "targets": len(person_ids)},
    )


async def link_page_people(page: Page, config: PeopleLinkConfig) -> LinkResult:
    """Upsert every person named on ``page`` and write the relation back.

    Ids are collected in name order without deduplication. When no names
    resolve, the existing relation is left untouched.
    """
    value = page.properties.get(config.who_property)
    if value is None:
        raise PropertyNotFoundError(config.who_property, page.id)

    result = LinkResult(page_id=page.id)
    for name in split_person_names(extract_text(value, config.separator), config.separator):
        if not name:
            continue
        person_id, created = await upsert_person(config, name)
        result.person_ids.append(person_id)
        if created:
            result.created += 1
        else:
            result.reused += 1

    if result.person_ids:
        await set_relation(page.id, config.relation_property, result.person_ids)
    return result


async def iter_link_results(
    source_data_source_id: str,
    config: PeopleLinkConfig,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
) -> AsyncIterator[LinkResult]:
    """Link every page of the source data source, yielding one result per page."""
    who = validate_property_name(config.who_property)
    validate_property_name(config.relation_property)
    config = config.model_copy(update={"who_property": who})
    async for batch in iter_query_batches(
        source_data_source_id, page_size=page_size, filter_properties=[who]
    ):
        for page in batch.results:
            yield await link_page_people(page, config)


async def sync_people(
    source_data_source_id: str,
    config: PeopleLinkConfig,
    *,
    page_size: int = DEFAULT_PAGE_SIZE,
    on_result: Callable[[LinkResult], None] | None = None,
) -> SyncSummary:
    """Run the link flow over all pages and return the totals.

    ``on_result`` is called with each page's result as soon as it is linked.
    """
    summary = SyncSummary()
    async for result in iter_link_results(source_data_source_id, config, page_size=page_size):
        summary.add(result)
        if on_result is not None:
            on_result(result)
    logger.info("People sync finished", extra=summary.model_dump())
    return summary
