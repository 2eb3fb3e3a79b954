"""Command-line entry point.

    notion-tools extract --data-source <id> --field Who --unique
    notion-tools link-people --data-source <id> --people-data-source <id>

Values go to stdout one per line; diagnostics and JSON logs go to stderr.
Any error ends the run with a single ``Error: ...`` line and exit status 1.
"""

import asyncio

import click

from notion_tools.config import get_settings
from notion_tools.errors import ConfigError, NotionToolsError
from notion_tools.logging_config import configure_logging
from notion_tools.notion.client import close_client, init_client, resolve_data_source_id
from notion_tools.notion.models import PERSON_SEPARATOR, PeopleLinkConfig
from notion_tools.notion.people import sync_people
from notion_tools.notion.query import collect_property_values, iter_property_values, validate_property_name


async def _resolve_source(data_source_id: str, database_id: str, label: str, flag: str) -> str:
    data_source_id = data_source_id.strip()
    if data_source_id:
        return data_source_id
    database_id = database_id.strip()
    if database_id:
        return await resolve_data_source_id(database_id)
    raise ConfigError(f"missing {label} data source: pass {flag} or {flag.replace('data-source', 'database')}")


def _run(coro) -> None:
    try:
        asyncio.run(coro)
    except NotionToolsError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group()
@click.option("--token", default="", help="Notion integration token (or set NOTION_TOKEN)")
@click.option("--log-level", default=None, help="Log level for stderr JSON logs (default: LOG_LEVEL or INFO)")
@click.pass_context
def cli(ctx: click.Context, token: str, log_level: str | None) -> None:
    """Query Notion data sources and link People pages."""
    try:
        settings = get_settings()
    except NotionToolsError as exc:
        raise click.ClickException(str(exc)) from exc
    configure_logging(log_level or settings.log_level)
    ctx.obj = {"token": token.strip() or settings.notion_token.strip(), "settings": settings}


async def _extract(
    token: str,
    data_source_id: str,
    database_id: str,
    field: str,
    unique: bool,
    page_size: int,
) -> None:
    init_client(token)
    try:
        field = validate_property_name(field)
        source = await _resolve_source(data_source_id, database_id, "source", "--data-source")
        if unique:
            for value in await collect_property_values(source, field, page_size=page_size, unique=True):
                click.echo(value)
        else:
            async for value in iter_property_values(source, field, page_size=page_size):
                click.echo(value)
    finally:
        await close_client()


@cli.command()
@click.option("--data-source", "data_source_id", default=None, help="Data source id (or NOTION_DATA_SOURCE_ID)")
@click.option("--database", "database_id", default=None, help="Database id whose first data source is queried")
@click.option("--field", default=None, help="Property name to extract (default: Who)")
@click.option("--unique", is_flag=True, help="Print unique values only (sorted)")
@click.option("--page-size", type=click.IntRange(1, 100), default=None, help="Results per request (max 100)")
@click.pass_context
def extract(
    ctx: click.Context,
    data_source_id: str | None,
    database_id: str | None,
    field: str | None,
    unique: bool,
    page_size: int | None,
) -> None:
    """Print the values of one property across every page of a data source."""
    settings = ctx.obj["settings"]
    _run(
        _extract(
            ctx.obj["token"],
            data_source_id if data_source_id is not None else settings.notion_data_source_id,
            database_id if database_id is not None else settings.notion_database_id,
            field if field is not None else settings.who_property,
            unique,
            page_size or settings.page_size,
        )
    )


async def _link_people(
    token: str,
    source_ids: tuple[str, str],
    people_ids: tuple[str, str],
    config: dict,
    page_size: int,
) -> None:
    init_client(token)
    try:
        source = await _resolve_source(*source_ids, "source", "--data-source")
        people = await _resolve_source(*people_ids, "People", "--people-data-source")
        link_config = PeopleLinkConfig(people_data_source_id=people, **config)
        await sync_people(
            source,
            link_config,
            page_size=page_size,
            on_result=lambda result: click.echo(f"{result.page_id}\t{len(result.person_ids)} people"),
        )
    finally:
        await close_client()


@cli.command("link-people")
@click.option("--data-source", "data_source_id", default=None, help="Source data source id (or NOTION_DATA_SOURCE_ID)")
@click.option("--database", "database_id", default=None, help="Source database id")
@click.option("--people-data-source", "people_data_source_id", default=None, help="People data source id")
@click.option("--people-database", "people_database_id", default=None, help="People database id")
@click.option("--field", default=None, help="Property holding person names (default: Who)")
@click.option("--relation", default=None, help="Relation property to overwrite (default: People)")
@click.option("--title-property", default=None, help="Title property of People pages (default: Name)")
@click.option("--separator", default=PERSON_SEPARATOR, show_default=True, help="Literal text between names")
@click.option("--page-size", type=click.IntRange(1, 100), default=None, help="Results per request (max 100)")
@click.pass_context
def link_people(
    ctx: click.Context,
    data_source_id: str | None,
    database_id: str | None,
    people_data_source_id: str | None,
    people_database_id: str | None,
    field: str | None,
    relation: str | None,
    title_property: str | None,
    separator: str,
    page_size: int | None,
) -> None:
    """Create or reuse a People page per name and relate each source page to them."""
    settings = ctx.obj["settings"]
    if not separator:
        raise click.BadParameter("separator cannot be empty", param_hint="--separator")
    _run(
        _link_people(
            ctx.obj["token"],
            (
                data_source_id if data_source_id is not None else settings.notion_data_source_id,
                database_id if database_id is not None else settings.notion_database_id,
            ),
            (
                people_data_source_id if people_data_source_id is not None else settings.people_data_source_id,
                people_database_id if people_database_id is not None else settings.people_database_id,
            ),
            {
                "who_property": field if field is not None else settings.who_property,
                "relation_property": relation if relation is not None else settings.relation_property,
                "title_property": title_property if title_property is not None else settings.people_title_property,
                "separator": separator,
            },
            page_size or settings.page_size,
        )
    )


if __name__ == "__main__":
    cli()
