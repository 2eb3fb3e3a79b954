"""Settings and result types for the People linking flow."""

from pydantic import BaseModel

PERSON_SEPARATOR = ", "


class PeopleLinkConfig(BaseModel):
    """Where person names come from and where person pages live."""

    people_data_source_id: str
    who_property: str = "Who"
    relation_property: str = "People"
    title_property: str = "Name"
    separator: str = PERSON_SEPARATOR


class LinkResult(BaseModel):
    """Outcome for one source page."""

    page_id: str
    person_ids: list[str] = []
    created: int = 0
    reused: int = 0

    @property
    def linked(self) -> bool:
        """Whether the relation was written (pages without names are left untouched)."""
        return bool(self.person_ids)


class SyncSummary(BaseModel):
    """Totals across a link-people run."""

    pages: int = 0
    pages_linked: int = 0
    people_created: int = 0
    people_reused: int = 0

    def add(self, result: LinkResult) -> None:
        self.pages += 1
        self.pages_linked += int(result.linked)
        self.people_created += result.created
        self.people_reused += result.reused
