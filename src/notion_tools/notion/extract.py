"""Pure functions mapping typed property values to display strings.

``extract_strings`` never raises and never returns blank strings: absent or
empty content yields an empty list. Output order follows the source order of
options, people, relations and rollup array items.
"""

import math
from collections.abc import Callable
from decimal import Decimal

from notion_tools.models.properties import (
    CheckboxValue,
    DateRange,
    DateValue,
    EmailValue,
    FormulaBoolean,
    FormulaDate,
    FormulaNumber,
    FormulaString,
    FormulaValue,
    MultiSelectValue,
    NumberValue,
    PeopleValue,
    PhoneNumberValue,
    PropertyValue,
    RelationValue,
    RichText,
    RichTextValue,
    RollupArray,
    RollupDate,
    RollupNumber,
    RollupValue,
    SelectOption,
    SelectValue,
    StatusValue,
    TitleValue,
    UrlValue,
)

DATE_RANGE_SEPARATOR = " → "


def format_number(value: float) -> str:
    """Shortest round-trip decimal form, never in scientific notation.

    ``1.0`` renders as ``"1"``, ``2.5`` as ``"2.5"``, ``1e20`` as
    ``"100000000000000000000"``.
    """
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    text = format(Decimal(repr(float(value))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_bool(value: bool) -> str:
    return "true" if value else "false"


def concat_rich_text(fragments: list[RichText]) -> str:
    """Join rich text fragments and trim surrounding whitespace."""
    return "".join(fragment.plain_text for fragment in fragments).strip()


def _text(value: str | None) -> list[str]:
    return [value] if value else []


def _number(value: float | None) -> list[str]:
    return [] if value is None else [format_number(value)]


def _boolean(value: bool | None) -> list[str]:
    return [] if value is None else [format_bool(value)]


def _option(option: SelectOption | None) -> list[str]:
    return [option.name] if option is not None and option.name else []


def _date(date: DateRange | None) -> list[str]:
    if date is None or not date.start:
        return []
    if date.end:
        return [f"{date.start}{DATE_RANGE_SEPARATOR}{date.end}"]
    return [date.start]


def _formula(value: FormulaValue) -> list[str]:
    result = value.formula
    if isinstance(result, FormulaString):
        return _text(result.string)
    if isinstance(result, FormulaNumber):
        return _number(result.number)
    if isinstance(result, FormulaBoolean):
        return _boolean(result.boolean)
    if isinstance(result, FormulaDate):
        return _date(result.date)
    return []


def _rollup(value: RollupValue) -> list[str]:
    result = value.rollup
    if isinstance(result, RollupNumber):
        return _number(result.number)
    if isinstance(result, RollupDate):
        return _date(result.date)
    if isinstance(result, RollupArray):
        out: list[str] = []
        for item in result.array:
            out.extend(extract_strings(item))
        return out
    return []


def _people(value: PeopleValue) -> list[str]:
    out = []
    for person in value.people:
        if person.name:
            out.append(person.name)
        elif person.id:
            out.append(person.id)
    return out


_EXTRACTORS: dict[type, Callable[..., list[str]]] = {
    TitleValue: lambda v: _text(concat_rich_text(v.title)),
    RichTextValue: lambda v: _text(concat_rich_text(v.rich_text)),
    SelectValue: lambda v: _option(v.select),
    StatusValue: lambda v: _option(v.status),
    MultiSelectValue: lambda v: [o.name for o in v.multi_select if o.name],
    PeopleValue: _people,
    EmailValue: lambda v: _text(v.email),
    UrlValue: lambda v: _text(v.url),
    PhoneNumberValue: lambda v: _text(v.phone_number),
    NumberValue: lambda v: _number(v.number),
    CheckboxValue: lambda v: _boolean(v.checkbox),
    DateValue: lambda v: _date(v.date),
    RelationValue: lambda v: [ref.id for ref in v.relation if ref.id],
    FormulaValue: _formula,
    RollupValue: _rollup,
}


def extract_strings(value: PropertyValue) -> list[str]:
    """Map a property value to zero or more non-empty display strings.

    Unrecognized property types (``UnsupportedValue``) yield an empty list.
    """
    extractor = _EXTRACTORS.get(type(value))
    if extractor is None:
        return []
    return extractor(value)


def extract_text(value: PropertyValue, separator: str = ", ") -> str:
    """Render a property value as one string.

    Title and rich text properties give their concatenated plain text; any
    other variant gives its extracted strings joined with ``separator``.
    """
    if isinstance(value, TitleValue):
        return concat_rich_text(value.title)
    if isinstance(value, RichTextValue):
        return concat_rich_text(value.rich_text)
    return separator.join(extract_strings(value))
