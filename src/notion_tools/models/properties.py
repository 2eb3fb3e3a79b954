"""Typed Notion property values.

Notion sends property values as a JSON object tagged by ``type`` whose payload
lives under the key of the same name. Each variant below carries only its own
payload; unknown tags validate into ``UnsupportedValue`` instead of failing, so
new Notion property types never abort a run. Formula and rollup results nest a
second tagged union, and rollup arrays nest full property values.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, BeforeValidator, Discriminator, Tag, TypeAdapter


def _none_to_empty(value: Any) -> Any:
    return [] if value is None else value


def _tagged_by_type(known: frozenset[str], fallback: str):
    """Build a discriminator routing unknown ``type`` values to ``fallback``."""

    def discriminator(value: Any) -> str:
        if isinstance(value, dict):
            kind = value.get("type")
        else:
            kind = getattr(value, "type", None)
        return kind if kind in known else fallback

    return discriminator


# --- Payload pieces ---


class RichText(BaseModel):
    """A rich text fragment; only the rendered plain text matters here."""

    plain_text: str = ""


class SelectOption(BaseModel):
    name: str = ""


class User(BaseModel):
    """A Notion user or bot. ``name`` is absent for users the integration cannot see."""

    id: str = ""
    name: str | None = None


class DateRange(BaseModel):
    start: str | None = None
    end: str | None = None


class RelationRef(BaseModel):
    """Reference to a related page. Used both when reading and writing relations."""

    id: str


# --- Formula results ---


class FormulaString(BaseModel):
    type: Literal["string"] = "string"
    string: str | None = None


class FormulaNumber(BaseModel):
    type: Literal["number"] = "number"
    number: float | None = None


class FormulaBoolean(BaseModel):
    type: Literal["boolean"] = "boolean"
    boolean: bool | None = None


class FormulaDate(BaseModel):
    type: Literal["date"] = "date"
    date: DateRange | None = None


class FormulaUnsupported(BaseModel):
    type: str


FormulaResult = Annotated[
    Annotated[FormulaString, Tag("string")]
    | Annotated[FormulaNumber, Tag("number")]
    | Annotated[FormulaBoolean, Tag("boolean")]
    | Annotated[FormulaDate, Tag("date")]
    | Annotated[FormulaUnsupported, Tag("unsupported")],
    Discriminator(_tagged_by_type(frozenset({"string", "number", "boolean", "date"}), "unsupported")),
]


# --- Rollup results ---


class RollupNumber(BaseModel):
    type: Literal["number"] = "number"
    number: float | None = None
    function: str | None = None


class RollupDate(BaseModel):
    type: Literal["date"] = "date"
    date: DateRange | None = None
    function: str | None = None


class RollupArray(BaseModel):
    type: Literal["array"] = "array"
    array: Annotated[list["PropertyValue"], BeforeValidator(_none_to_empty)] = []
    function: str | None = None


class RollupUnsupported(BaseModel):
    type: str
    function: str | None = None


RollupResult = Annotated[
    Annotated[RollupNumber, Tag("number")]
    | Annotated[RollupDate, Tag("date")]
    | Annotated[RollupArray, Tag("array")]
    | Annotated[RollupUnsupported, Tag("unsupported")],
    Discriminator(_tagged_by_type(frozenset({"number", "date", "array"}), "unsupported")),
]


# --- Property values ---


class _Value(BaseModel):
    # Rollup array items carry no property id.
    id: str | None = None


class TitleValue(_Value):
    type: Literal["title"] = "title"
    title: Annotated[list[RichText], BeforeValidator(_none_to_empty)] = []


class RichTextValue(_Value):
    type: Literal["rich_text"] = "rich_text"
    rich_text: Annotated[list[RichText], BeforeValidator(_none_to_empty)] = []


class SelectValue(_Value):
    type: Literal["select"] = "select"
    select: SelectOption | None = None


class StatusValue(_Value):
    type: Literal["status"] = "status"
    status: SelectOption | None = None


class MultiSelectValue(_Value):
    type: Literal["multi_select"] = "multi_select"
    multi_select: Annotated[list[SelectOption], BeforeValidator(_none_to_empty)] = []


class PeopleValue(_Value):
    type: Literal["people"] = "people"
    people: Annotated[list[User], BeforeValidator(_none_to_empty)] = []


class EmailValue(_Value):
    type: Literal["email"] = "email"
    email: str | None = None


class UrlValue(_Value):
    type: Literal["url"] = "url"
    url: str | None = None


class PhoneNumberValue(_Value):
    type: Literal["phone_number"] = "phone_number"
    phone_number: str | None = None


class NumberValue(_Value):
    type: Literal["number"] = "number"
    number: float | None = None


class CheckboxValue(_Value):
    type: Literal["checkbox"] = "checkbox"
    checkbox: bool | None = None


class DateValue(_Value):
    type: Literal["date"] = "date"
    date: DateRange | None = None


class RelationValue(_Value):
    type: Literal["relation"] = "relation"
    relation: Annotated[list[RelationRef], BeforeValidator(_none_to_empty)] = []
    has_more: bool = False


class FormulaValue(_Value):
    type: Literal["formula"] = "formula"
    formula: FormulaResult | None = None


class RollupValue(_Value):
    type: Literal["rollup"] = "rollup"
    rollup: RollupResult | None = None


class UnsupportedValue(_Value):
    """Any property type this tool does not render (files, created_by, button, ...)."""

    type: str


PROPERTY_TYPES = frozenset(
    {
        "title",
        "rich_text",
        "select",
        "status",
        "multi_select",
        "people",
        "email",
        "url",
        "phone_number",
        "number",
        "checkbox",
        "date",
        "relation",
        "formula",
        "rollup",
    }
)

PropertyValue = Annotated[
    Annotated[TitleValue, Tag("title")]
    | Annotated[RichTextValue, Tag("rich_text")]
    | Annotated[SelectValue, Tag("select")]
    | Annotated[StatusValue, Tag("status")]
    | Annotated[MultiSelectValue, Tag("multi_select")]
    | Annotated[PeopleValue, Tag("people")]
    | Annotated[EmailValue, Tag("email")]
    | Annotated[UrlValue, Tag("url")]
    | Annotated[PhoneNumberValue, Tag("phone_number")]
    | Annotated[NumberValue, Tag("number")]
    | Annotated[CheckboxValue, Tag("checkbox")]
    | Annotated[DateValue, Tag("date")]
    | Annotated[RelationValue, Tag("relation")]
    | Annotated[FormulaValue, Tag("formula")]
    | Annotated[RollupValue, Tag("rollup")]
    | Annotated[UnsupportedValue, Tag("unsupported")],
    Discriminator(_tagged_by_type(PROPERTY_TYPES, "unsupported")),
]

RollupArray.model_rebuild()
RollupValue.model_rebuild()

_property_value_adapter: TypeAdapter = TypeAdapter(PropertyValue)


def parse_property_value(data: dict) -> PropertyValue:
    """Validate a raw Notion property value dict into its typed variant."""
    return _property_value_adapter.validate_python(data)
