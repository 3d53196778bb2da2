"""
Tests for the wire helpers in zenkit.utils.
"""
from dataclasses import dataclass, field
from typing import Any

import pytest

from zenkit.dates import DateTime
from zenkit.errors import InvalidValueError, MalformedResponseError
from zenkit.types import SortDirection
from zenkit.utils import (
    check_uuid,
    enum_or_raw,
    float_or_str,
    instantiate_from_payload,
    instantiate_many,
    is_integer_id,
    is_uuid,
    safe_instantiate_entry,
    to_wire_dict,
    wire_field,
)

VALID_UUID = "2b3c4d5e-1111-4a2b-8c3d-0123456789ab"


@dataclass(frozen=True, slots=True)
class _Sample:
    id: int
    display_name: str = wire_field('displayname')
    created_at: DateTime | None = wire_field(parse=lambda raw: None if raw is None else DateTime.parse(raw),
                                             default=None)
    sort_order: float = wire_field('sortOrder', parse=float_or_str, default=0.0)
    new_api_kwargs: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class _NoExtras:
    id: int


@dataclass(frozen=True, slots=True)
class _Body:
    direction: SortDirection
    list_id: int | None = wire_field('listId', default=None)
    when: DateTime | None = None
    nested: tuple[_Sample, ...] = ()


def test_safe_instantiate_entry_maps_wire_names():
    sample = safe_instantiate_entry(_Sample, id=1, displayname="Ann", sortOrder="-99")

    assert sample.id == 1
    assert sample.display_name == "Ann"
    assert sample.sort_order == -99.0
    assert sample.created_at is None
    assert sample.new_api_kwargs == {}


def test_safe_instantiate_entry_keeps_unknown_keys():
    sample = safe_instantiate_entry(_Sample, id=1, displayname="Ann", color="red", abc_text="hi")

    assert sample.new_api_kwargs == {"color": "red", "abc_text": "hi"}


def test_safe_instantiate_entry_requires_new_api_kwargs():
    with pytest.raises(AssertionError):
        safe_instantiate_entry(_NoExtras, id=1)


def test_missing_required_field_is_malformed():
    with pytest.raises(MalformedResponseError, match="displayname"):
        safe_instantiate_entry(_Sample, id=1)


def test_parser_error_is_malformed():
    with pytest.raises(MalformedResponseError):
        safe_instantiate_entry(_Sample, id=1, displayname="Ann", sortOrder="high")
    with pytest.raises(MalformedResponseError):
        safe_instantiate_entry(_Sample, id=1, displayname="Ann", created_at="yesterday")


def test_instantiate_from_payload_rejects_non_objects():
    with pytest.raises(MalformedResponseError):
        instantiate_from_payload(_Sample, [1, 2])
    with pytest.raises(MalformedResponseError):
        instantiate_many(_Sample, {"id": 1})


def test_instantiate_many():
    samples = instantiate_many(_Sample, [{"id": 1, "displayname": "A"}, {"id": 2, "displayname": "B"}])

    assert [s.id for s in samples] == [1, 2]


@pytest.mark.parametrize("value, expected", [
    (-99, -99.0),
    (1.5, 1.5),
    ("-99", -99.0),
    ("2.25", 2.25),
])
def test_float_or_str_accepts_numbers_and_numeric_strings(value, expected):
    assert float_or_str(value) == expected


@pytest.mark.parametrize("value", ["abc", None, True, [1]])
def test_float_or_str_rejects_other_values(value):
    with pytest.raises(ValueError, match="not a valid float value"):
        float_or_str(value)


def test_enum_or_raw_passes_unknown_codes_through():
    parse = enum_or_raw(SortDirection)

    assert parse("asc") is SortDirection.ASC
    assert parse("sideways") == "sideways"
    assert parse(None) is None


def test_is_uuid():
    assert is_uuid(VALID_UUID)
    assert is_uuid(VALID_UUID.upper())
    assert not is_uuid("")
    assert not is_uuid(VALID_UUID[:-1])
    assert not is_uuid(VALID_UUID.replace("-", "x"))
    assert not is_uuid("2b3c4d5e-1111-4a2b-8c3d-0123456789ag")
    assert not is_uuid("2b3c4d5e11-11-4a2b-8c3d-0123456789a")
    assert not is_uuid(12345)  # type: ignore[arg-type]


def test_check_uuid_names_the_field():
    check_uuid(VALID_UUID, "Parent")

    with pytest.raises(InvalidValueError, match="Not a valid uuid 'nope' for field 'Parent'"):
        check_uuid("nope", "Parent")


def test_is_integer_id():
    assert is_integer_id(42)
    assert is_integer_id("42")
    assert not is_integer_id("4a")
    assert not is_integer_id(True)
    assert not is_integer_id(VALID_UUID)


def test_to_wire_dict_uses_wire_names_and_serializes_values():
    body = _Body(
        direction=SortDirection.DESC,
        list_id=3,
        when=DateTime.parse("2020-01-01"),
        nested=(_Sample(id=1, display_name="A", new_api_kwargs={"extra": True}),),
    )

    assert to_wire_dict(body) == {
        "direction": "desc",
        "listId": 3,
        "when": "2020-01-01T00:00:00Z",
        "nested": [{"id": 1, "displayname": "A", "created_at": None, "sortOrder": 0.0, "extra": True}],
    }


def test_to_wire_dict_can_omit_none():
    assert to_wire_dict(_Body(direction=SortDirection.ASC), omit_none=True) == {"direction": "asc", "nested": []}


def test_decoded_entity_round_trips_its_unknown_keys():
    sample = instantiate_from_payload(_Sample, {"id": 5, "displayname": "Z", "isArchived": False})

    assert to_wire_dict(sample)["isArchived"] is False
