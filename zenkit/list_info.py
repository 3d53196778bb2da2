"""A list together with its field definitions, and the helpers that encode field values."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Iterable

from loguru import logger

from zenkit.constants import ENTRIES_PAGE_SIZE, EntryKey, FieldSuffix
from zenkit.errors import InvalidValueError, NotFoundError
from zenkit.item import Item, find_field
from zenkit.types import (
    Element,
    ElementCategoryId,
    Entry,
    GetEntriesRequest,
    List,
    NewComment,
    NumericType,
    TextFormat,
    UpdateAction,
)
from zenkit.utils import check_uuid

if TYPE_CHECKING:
    from zenkit.activity import Activity
    from zenkit.database.base import ApiClient


class FieldValKind(StrEnum):
    STR = "str"
    FORMATTED = "formatted"
    ARR_STR = "arr_str"
    ARR_ID = "arr_id"
    INT = "int"
    FLOAT = "float"


@dataclass(frozen=True, slots=True)
class FieldVal:
    """A value to write into a field, tagged with how it was given."""

    kind: FieldValKind
    value: Any
    text_format: TextFormat | None = None

    def __str__(self) -> str:
        if self.kind == FieldValKind.FORMATTED:
            return f"({self.value},{self.text_format})"
        return str(self.value)


@dataclass(frozen=True, slots=True)
class FieldSetVal:
    field: str
    value: FieldVal
    action: UpdateAction = UpdateAction.NULL


def fup_s(fname: str, val: str, act: UpdateAction) -> FieldSetVal:
    return FieldSetVal(fname, FieldVal(FieldValKind.STR, str(val)), act)


def fset_s(fname: str, val: str) -> FieldSetVal:
    """Set a text value; number, date and link fields also accept strings."""
    return fup_s(fname, val, UpdateAction.NULL)


def fup_t(fname: str, val: str, fmt: TextFormat, act: UpdateAction) -> FieldSetVal:
    return FieldSetVal(fname, FieldVal(FieldValKind.FORMATTED, str(val), TextFormat(fmt)), act)


def fset_t(fname: str, val: str, fmt: TextFormat = TextFormat.PLAIN) -> FieldSetVal:
    return fup_t(fname, val, fmt, UpdateAction.NULL)


def fup_i(fname: str, val: int, act: UpdateAction) -> FieldSetVal:
    return FieldSetVal(fname, FieldVal(FieldValKind.INT, int(val)), act)


def fset_i(fname: str, val: int) -> FieldSetVal:
    return fup_i(fname, val, UpdateAction.NULL)


def fup_id(fname: str, val: int, act: UpdateAction) -> FieldSetVal:
    return fup_i(fname, val, act)


def fset_id(fname: str, val: int) -> FieldSetVal:
    """Set a person, choice or reference by id."""
    return fup_id(fname, val, UpdateAction.NULL)


def fup_f(fname: str, val: float, act: UpdateAction) -> FieldSetVal:
    return FieldSetVal(fname, FieldVal(FieldValKind.FLOAT, float(val)), act)


def fset_f(fname: str, val: float) -> FieldSetVal:
    return fup_f(fname, val, UpdateAction.NULL)


def fup_vid(fname: str, val: Iterable[int], act: UpdateAction) -> FieldSetVal:
    return FieldSetVal(fname, FieldVal(FieldValKind.ARR_ID, tuple(int(v) for v in val)), act)


def fset_vid(fname: str, val: Iterable[int]) -> FieldSetVal:
    return fup_vid(fname, val, UpdateAction.NULL)


def fup_vs(fname: str, val: Iterable[str], act: UpdateAction) -> FieldSetVal:
    return FieldSetVal(fname, FieldVal(FieldValKind.ARR_STR, tuple(str(v) for v in val)), act)


def fset_vs(fname: str, val: Iterable[str]) -> FieldSetVal:
    """Set several persons, choices or references by name or uuid."""
    return fup_vs(fname, val, UpdateAction.NULL)


def _check_multiple(field: Element, count: int, noun: str) -> None:
    if not field.element_data.multiple and count > 1:
        raise InvalidValueError(
            f"Field {field.name} can't accept more than one {noun} but {count} were provided")


def _finite(value: float) -> float:
    if math.isnan(value) or math.isinf(value):
        raise InvalidValueError("Float values cannot be Infinite or NaN")
    return value


class ListInfo:
    """
    Read-only view of a list and its fields.

    Items fetched through it are wrapped as ``Item`` so their values can be
    read by field name. Writes go through ``create_item`` / ``update_item``
    with values built by the ``fset_*`` / ``fup_*`` helpers.
    """

    def __init__(self, lst: List, fields: Iterable[Element], api: ApiClient) -> None:
        self._list = lst
        self._fields = tuple(fields)
        self._api = api

    def __str__(self) -> str:
        return (f"ListInfo({self._list.id},{self._list.uuid},{self._list.name}, "
                f"nFields:{len(self._fields)}, ws:{self._list.workspace_id})")

    def __getattr__(self, name: str) -> Any:
        if name.startswith('_'):
            raise AttributeError(name)
        return getattr(self._list, name)

    @property
    def list(self) -> List:
        return self._list

    @property
    def id(self) -> int:
        return self._list.id

    @property
    def uuid(self) -> str:
        return self._list.uuid

    @property
    def fields(self) -> tuple[Element, ...]:
        return self._fields

    def has_id(self, list_id: str | int) -> bool:
        return self._list.has_id(list_id)

    def get_field(self, field_id: str | int) -> Element:
        return find_field(self._fields, field_id, self._list.name)

    def _new_item(self, entry: Entry) -> Item:
        return Item(entry=entry, list_name=self._list.name, list_id=self._list.id, fields=self._fields)

    def get_item(self, item_id: str | int) -> Item:
        """Fetch one item by id, short id or uuid."""
        return self._new_item(self._api.get_entry(self._list.id, item_id))

    def get_items(self) -> list[Item]:
        """Fetch all items of the list, unsorted, one page at a time."""
        items: list[Item] = []
        skip = 0
        while True:
            entries = self._api.get_list_entries(
                self._list.uuid, GetEntriesRequest(limit=ENTRIES_PAGE_SIZE, skip=skip)
            )
            if not entries:
                break
            skip += len(entries)
            items.extend(self._new_item(entry) for entry in entries)
        logger.debug(f"Fetched {len(items)} items", list=self._list.name)
        return items

    def create_item(self, values: Iterable[FieldSetVal]) -> Item:
        """Create an item; the returned item carries the server-assigned id, uuid and timestamps."""
        payload = self.encode_values(values)
        return self._new_item(self._api.create_entry(self._list.id, payload))

    def update_item(self, item_id: int, values: Iterable[FieldSetVal]) -> Item:
        """
        Apply field changes to an item and return the updated item.

        Use the ``fup_*`` helpers so multi-valued fields get the intended
        update action. Persons may be given by name, choices by name.
        """
        payload = self.encode_values(values)
        return self._new_item(self._api.update_entry(self._list.id, item_id, payload))

    def add_item_comment(self, item_id: str | int, message: str) -> Activity:
        item = self.get_item(item_id)
        return self._api.create_entry_comment(self._list.id, item.id, NewComment(message=message))

    def add_list_comment(self, message: str) -> Activity:
        return self._api.create_list_comment(self._list.id, NewComment(message=message))

    def encode_values(self, values: Iterable[FieldSetVal]) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        for field_val in values:
            self.generic_set(payload, field_val)
        return payload

    def generic_set(self, obj: dict[str, Any], field_val: FieldSetVal) -> None:
        """Write one field value into an entry payload under ``<field uuid>_<suffix>`` keys."""
        field = self.get_field(field_val.field)
        category = field.element_category
        kind = field_val.value.kind
        value = field_val.value.value
        action = field_val.action
        replaces = action in (UpdateAction.REPLACE, UpdateAction.NULL)

        def key(suffix: FieldSuffix) -> str:
            return f"{field.uuid}_{suffix}"

        if category == ElementCategoryId.TEXT and replaces and kind in (FieldValKind.STR, FieldValKind.FORMATTED):
            obj[key(FieldSuffix.TEXT)] = value
            if kind == FieldValKind.FORMATTED:
                obj[key(FieldSuffix.TEXT_TYPE)] = str(field_val.value.text_format)
            return
        if category == ElementCategoryId.NUMBER and replaces and kind in (
                FieldValKind.INT, FieldValKind.FLOAT, FieldValKind.STR):
            obj[key(FieldSuffix.NUMBER)] = self._encode_number(field, field_val.value)
            return
        if category == ElementCategoryId.URL and replaces and kind == FieldValKind.STR:
            obj[key(FieldSuffix.LINK)] = value
            return
        if category == ElementCategoryId.DATE and replaces and kind == FieldValKind.STR:
            obj[key(FieldSuffix.DATE)] = value
            return

        if category == ElementCategoryId.PERSONS:
            encoded = self._encode_persons(field, field_val.value)
            suffix = FieldSuffix.PERSONS
        elif category == ElementCategoryId.CATEGORIES:
            encoded = self._encode_categories(field, field_val.value)
            suffix = FieldSuffix.CATEGORIES
        elif category == ElementCategoryId.REFERENCES:
            encoded = self._encode_references(field, field_val.value)
            suffix = FieldSuffix.REFERENCES
        else:
            encoded = None
        if encoded is None:
            raise InvalidValueError(
                f"Invalid value ({field_val.value}) or action ({action!r}) "
                f"for field {field.name} (type {category!r})")
        obj[key(suffix)] = encoded
        if action != UpdateAction.NULL:
            obj[EntryKey.UPDATE_ACTION] = str(action)

    @staticmethod
    def _encode_number(field: Element, field_value: FieldVal) -> int | float:
        if field_value.kind == FieldValKind.INT:
            return field_value.value
        if field_value.kind == FieldValKind.FLOAT:
            return _finite(field_value.value)
        text = field_value.value
        match field.numeric_type():
            case NumericType.INTEGER:
                try:
                    return int(text)
                except ValueError as exc:
                    raise InvalidValueError(f"Invalid int value {text} for field {field.name}") from exc
            case NumericType.DECIMAL:
                try:
                    return _finite(float(text))
                except ValueError as exc:
                    raise InvalidValueError(f"Invalid float value {text} for field {field.name}") from exc
            case _:
                raise InvalidValueError(f"Unknown numeric type at field {field.name}")

    def _user_id(self, name: str) -> int:
        user_id = self._api.get_user_id(self._list.workspace_id, name)
        if user_id is None:
            raise NotFoundError(f"User not found: '{name}'")
        return user_id

    def _encode_persons(self, field: Element, field_value: FieldVal) -> list[int] | None:
        match field_value.kind:
            case FieldValKind.STR:
                return [self._user_id(field_value.value)]
            case FieldValKind.INT:
                return [field_value.value]
            case FieldValKind.ARR_STR:
                _check_multiple(field, len(field_value.value), "person")
                return [self._user_id(name) for name in field_value.value]
            case FieldValKind.ARR_ID:
                _check_multiple(field, len(field_value.value), "person")
                return list(field_value.value)
        return None

    @staticmethod
    def _encode_categories(field: Element, field_value: FieldVal) -> list[int] | None:
        match field_value.kind:
            case FieldValKind.STR:
                return [field.get_choice_id(field_value.value)]
            case FieldValKind.INT:
                return [field_value.value]
            case FieldValKind.ARR_ID:
                _check_multiple(field, len(field_value.value), "category")
                return list(field_value.value)
            case FieldValKind.ARR_STR:
                _check_multiple(field, len(field_value.value), "label")
                return [field.get_choice_id(choice) for choice in field_value.value]
        return None

    @staticmethod
    def _encode_references(field: Element, field_value: FieldVal) -> list[str | int] | None:
        match field_value.kind:
            case FieldValKind.STR:
                check_uuid(field_value.value, field.name)
                return [field_value.value]
            case FieldValKind.INT:
                return [field_value.value]
            case FieldValKind.ARR_STR:
                _check_multiple(field, len(field_value.value), "reference")
                for uuid in field_value.value:
                    check_uuid(uuid, field.name)
                return list(field_value.value)
        return None
