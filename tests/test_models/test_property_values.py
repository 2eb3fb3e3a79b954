"""Tests for the typed property value union."""

import pytest
from pydantic import ValidationError

from notion_tools.models.properties import (
    CheckboxValue,
    DateValue,
    FormulaNumber,
    FormulaUnsupported,
    FormulaValue,
    MultiSelectValue,
    NumberValue,
    PeopleValue,
    RollupArray,
    RollupUnsupported,
    RollupValue,
    SelectValue,
    TitleValue,
    UnsupportedValue,
    parse_property_value,
)


def test_title_parsed_with_extras_ignored():
    """Notion's extra keys (annotations, href, id) are tolerated."""
    value = parse_property_value(
        {
            "id": "title",
            "type": "title",
            "title": [
                {
                    "type": "text",
                    "text": {"content": "Hello", "link": None},
                    "annotations": {"bold": False},
                    "plain_text": "Hello",
                    "href": None,
                }
            ],
        }
    )
    assert isinstance(value, TitleValue)
    assert value.id == "title"
    assert value.title[0].plain_text == "Hello"


def test_null_payloads_accepted():
    """Notion sends null for empty select, number, date and checkbox values."""
    assert isinstance(parse_property_value({"type": "select", "select": None}), SelectValue)
    assert parse_property_value({"type": "number", "number": None}).number is None
    assert parse_property_value({"type": "date", "date": None}).date is None
    assert isinstance(parse_property_value({"type": "checkbox", "checkbox": True}), CheckboxValue)


def test_missing_list_payload_defaults_empty():
    """List payloads that are missing or null become empty lists."""
    assert parse_property_value({"type": "multi_select"}).multi_select == []
    assert parse_property_value({"type": "people", "people": None}).people == []


def test_integer_number_coerced_to_float():
    value = parse_property_value({"type": "number", "number": 3})
    assert isinstance(value, NumberValue)
    assert value.number == 3.0


def test_unknown_type_is_unsupported():
    """New or unrendered property types do not fail validation."""
    value = parse_property_value({"id": "x", "type": "files", "files": [{"name": "a.pdf"}]})
    assert isinstance(value, UnsupportedValue)
    assert value.type == "files"


def test_formula_inner_union():
    value = parse_property_value({"type": "formula", "formula": {"type": "number", "number": 4.5}})
    assert isinstance(value, FormulaValue)
    assert isinstance(value.formula, FormulaNumber)
    assert value.formula.number == 4.5


def test_formula_unknown_inner_type():
    value = parse_property_value({"type": "formula", "formula": {"type": "mystery"}})
    assert isinstance(value.formula, FormulaUnsupported)


def test_rollup_array_nests_property_values():
    """Rollup arrays hold full property values, recursively typed."""
    value = parse_property_value(
        {
            "type": "rollup",
            "rollup": {
                "type": "array",
                "function": "show_original",
                "array": [
                    {"type": "number", "number": 1},
                    {"type": "multi_select", "multi_select": [{"name": "A"}]},
                    {
                        "type": "rollup",
                        "rollup": {"type": "array", "array": [{"type": "date", "date": {"start": "2024-01-01"}}]},
                    },
                ],
            },
        }
    )
    assert isinstance(value, RollupValue)
    assert isinstance(value.rollup, RollupArray)
    items = value.rollup.array
    assert isinstance(items[0], NumberValue)
    assert isinstance(items[1], MultiSelectValue)
    assert isinstance(items[2], RollupValue)
    assert isinstance(items[2].rollup.array[0], DateValue)


def test_rollup_unknown_inner_type():
    value = parse_property_value({"type": "rollup", "rollup": {"type": "incomplete", "function": "sum"}})
    assert isinstance(value.rollup, RollupUnsupported)


def test_people_name_optional():
    value = parse_property_value({"type": "people", "people": [{"object": "user", "id": "u-1"}]})
    assert isinstance(value, PeopleValue)
    assert value.people[0].id == "u-1"
    assert value.people[0].name is None


def test_missing_type_rejected():
    """A value with no type at all cannot be represented."""
    with pytest.raises(ValidationError):
        parse_property_value({"title": []})
