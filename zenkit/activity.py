"""Activity records, their "changed data" diffs, and webhook payload decoding."""

import json
from dataclasses import dataclass, field
from enum import Enum, StrEnum
from typing import Any

from loguru import logger

from zenkit.dates import DateTime, parse_optional
from zenkit.errors import MalformedResponseError
from zenkit.types import ActivityCreatedIn, ActivityType, ElementCategoryId
from zenkit.utils import enum_or_raw, float_or_str, instantiate_from_payload, text_or_empty, wire_field

CATEGORY_ID_KEY = 'elementcategoryId'


class FromTo(Enum):
    FROM = 'from'
    TO = 'to'


class ChangeKind(StrEnum):
    TEXT = 'text'
    NUMBER = 'number'
    DATE = 'date'
    CATEGORIES = 'categories'
    PERSONS = 'persons'
    REFERENCES = 'references'
    OTHER = 'other'


_KIND_BY_CATEGORY = {
    ElementCategoryId.TEXT: ChangeKind.TEXT,
    ElementCategoryId.NUMBER: ChangeKind.NUMBER,
    ElementCategoryId.DATE: ChangeKind.DATE,
    ElementCategoryId.CATEGORIES: ChangeKind.CATEGORIES,
    ElementCategoryId.PERSONS: ChangeKind.PERSONS,
    ElementCategoryId.REFERENCES: ChangeKind.REFERENCES,
}


@dataclass(frozen=True, slots=True)
class DateValue:
    date: str | None = None
    end_date: str | None = wire_field('endDate', default=None)
    has_time: bool = wire_field('hasTime', parse=bool, default=False)
    duration: str | None = None
    new_api_kwargs: dict[str, Any] = field(default_factory=dict)


def _format_number(value: float) -> str:
    return str(int(value)) if value.is_integer() else str(value)


@dataclass(frozen=True, slots=True)
class ChangedData:
    """
    Previous and new value of the field touched by an activity.

    Text, number and date changes hold single values (``None`` when unset);
    categories, persons and references hold tuples plus their string forms.
    Changes of other field types keep the undecoded JSON in ``raw``.
    """

    kind: ChangeKind
    value_from: Any = None
    value_to: Any = None
    value_from_as_strings: tuple[str, ...] = ()
    value_to_as_strings: tuple[str, ...] = ()
    raw: Any = None

    def get(self, ft: FromTo) -> Any:
        return self.value_from if ft is FromTo.FROM else self.value_to

    def as_strings(self, ft: FromTo) -> tuple[str, ...]:
        return self.value_from_as_strings if ft is FromTo.FROM else self.value_to_as_strings

    def val_to_string(self, ft: FromTo) -> str:
        """Printable form of the previous (``FROM``) or new (``TO``) value."""
        value = self.get(ft)
        match self.kind:
            case ChangeKind.TEXT:
                return '' if value is None else str(value)
            case ChangeKind.NUMBER:
                return '' if value is None else _format_number(value)
            case ChangeKind.DATE:
                return value.date if value is not None and value.date is not None else ''
            case ChangeKind.CATEGORIES | ChangeKind.PERSONS:
                return ','.join(self.as_strings(ft))
            case ChangeKind.REFERENCES:
                return ','.join(str(v) for v in value)
            case _:
                return '<value>'


def _single(kind: ChangeKind, raw: dict[str, Any], key: str) -> Any:
    value = raw.get(key)
    if value is None:
        return None
    if kind == ChangeKind.NUMBER:
        return float_or_str(value)
    if kind == ChangeKind.DATE:
        return instantiate_from_payload(DateValue, value)
    return str(value)


def _strings(raw: dict[str, Any], key: str) -> tuple[str, ...]:
    return tuple(str(v) for v in raw.get(key) or ())


def _decode_change(kind: ChangeKind, raw: dict[str, Any]) -> ChangedData:
    if kind in (ChangeKind.TEXT, ChangeKind.NUMBER, ChangeKind.DATE):
        return ChangedData(
            kind=kind,
            value_from=_single(kind, raw, 'valueFrom'),
            value_to=_single(kind, raw, 'valueTo'),
            raw=raw,
        )
    return ChangedData(
        kind=kind,
        value_from=tuple(raw.get('valueFrom') or ()),
        value_to=tuple(raw.get('valueTo') or ()),
        value_from_as_strings=_strings(raw, 'valueFromAsStrings'),
        value_to_as_strings=_strings(raw, 'valueToAsStrings'),
        raw=raw,
    )


@dataclass(frozen=True, slots=True)
class ElementChange:
    """The field category of a change (``None`` when not decoded) and its data."""

    category_id: ElementCategoryId | None
    data: ChangedData

    @classmethod
    def empty(cls) -> "ElementChange":
        return cls(category_id=None, data=ChangedData(kind=ChangeKind.OTHER))

    @classmethod
    def from_payload(cls, value: Any) -> "ElementChange":
        """
        Decode the ``changedData`` object of an activity.

        Its first value describes the change; ``elementcategoryId`` in there
        selects how the from/to values are read. Comments and other
        activities without a field change carry ``null``.
        """
        if value is None:
            return cls.empty()
        if not isinstance(value, dict):
            raise MalformedResponseError(f"Parse error in changed_data val={value!r}")
        if not value:
            return cls(category_id=None, data=ChangedData(kind=ChangeKind.OTHER, raw=value))

        change = next(iter(value.values()))
        category = enum_or_raw(ElementCategoryId)(change.get(CATEGORY_ID_KEY)) if isinstance(change, dict) else None
        kind = _KIND_BY_CATEGORY.get(category) if isinstance(category, ElementCategoryId) else None
        if kind is None:
            raw = change if isinstance(category, ElementCategoryId) else value
            return cls(category_id=None, data=ChangedData(kind=ChangeKind.OTHER, raw=raw))
        try:
            data = _decode_change(kind, change)
        except (ValueError, TypeError) as exc:
            raise MalformedResponseError(f"Parse error in changed_data for {kind}: {change!r}") from exc
        return cls(category_id=category, data=data)


@dataclass(frozen=True, slots=True)
class Activity:
    """An entry of a list or item activity feed, also delivered by activity webhooks."""

    id: int
    uuid: str
    activity_type: ActivityType | int = wire_field('type', parse=enum_or_raw(ActivityType))
    created_at: DateTime = wire_field(parse=DateTime.parse)
    created_in: ActivityCreatedIn | int | None = wire_field(parse=enum_or_raw(ActivityCreatedIn), default=None)
    message: str | None = None
    is_bulk: bool = wire_field('isBulk', default=False)
    bulk_rowcount: int | None = None
    changed_data: ElementChange = wire_field('changedData', parse=ElementChange.from_payload,
                                             default_factory=ElementChange.empty)
    changed_data_element_id: int | None = wire_field('changedDataElementId', default=None)
    workspace_id: int | None = wire_field('workspaceId', default=None)
    workspace_short_id: str | None = wire_field('workspaceShortId', default=None)
    workspace_uuid: str | None = wire_field('workspaceUUID', default=None)
    workspace_name: str | None = wire_field('workspaceName', default=None)
    workspace_deprecated_at: DateTime | None = wire_field('workspaceDeprecated_at', parse=parse_optional,
                                                          default=None)
    parent_uuid: str | None = wire_field('parentUUID', default=None)
    list_id: int | None = wire_field('listId', default=None)
    list_short_id: str | None = wire_field('listShortId', default=None)
    list_uuid: str | None = wire_field('listUUID', default=None)
    list_name: str | None = wire_field('listName', default=None)
    list_deprecated_at: DateTime | None = wire_field('listDeprecated_at', parse=parse_optional, default=None)
    list_entry_id: int | None = wire_field('listEntryId', default=None)
    list_entry_uuid: str | None = wire_field('listEntryUUID', default=None)
    list_entry_name: str | None = wire_field('listEntryName', default=None)
    list_entry_description: str | None = wire_field('listEntryDescription', default=None)
    list_entry_deprecated_at: DateTime | None = wire_field('listEntryDeprecated_at', parse=parse_optional,
                                                           default=None)
    element_name: str | None = wire_field('elementName', default=None)
    updated_at: DateTime | None = wire_field(parse=parse_optional, default=None)
    deprecated_at: DateTime | None = wire_field(parse=parse_optional, default=None)
    user_id: int | None = wire_field('userId', default=None)
    user_display_name: str = wire_field('userDisplayname', parse=text_or_empty, default='')
    user_full_name: str = wire_field('userFullname', parse=text_or_empty, default='')
    user_username: str = wire_field('userUsername', parse=text_or_empty, default='')
    user_initials: str = wire_field('userInitials', parse=text_or_empty, default='')
    user_is_image_preferred: bool = wire_field('userIsImagePreferred', default=False)
    new_api_kwargs: dict[str, Any] = field(default_factory=dict)

    def __repr__(self):
        return f'Activity {self.id} ({self.created_at}) {self.activity_type!r}'

    @property
    def is_comment(self) -> bool:
        return self.activity_type == ActivityType.COMMENT


def decode_activity(payload: Any) -> Activity:
    return instantiate_from_payload(Activity, payload)


def decode_activities(payload: Any) -> list[Activity]:
    """Decode a single activity object or an array of them."""
    if isinstance(payload, dict):
        return [decode_activity(payload)]
    if isinstance(payload, list):
        return [decode_activity(raw) for raw in payload]
    raise MalformedResponseError(f"Expected activity object or array, got {type(payload).__name__}")


def decode_webhook_payload(body: bytes | str | dict | list) -> list[Activity]:
    """
    Decode the body of an activity webhook call.

    ``body`` may be the raw request body (bytes or text) or already parsed JSON.
    """
    if isinstance(body, (bytes, bytearray)):
        try:
            body = body.decode('utf-8')
        except UnicodeDecodeError as exc:
            raise MalformedResponseError("Webhook payload is not valid UTF-8") from exc
    if isinstance(body, str):
        try:
            body = json.loads(body)
        except ValueError as exc:
            raise MalformedResponseError("Webhook payload is not valid JSON") from exc
    activities = decode_activities(body)
    logger.debug("Decoded webhook payload", activities=len(activities))
    return activities
