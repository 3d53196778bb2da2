"""Typed entities of the Zenkit REST API and the request bodies sent to it."""

from dataclasses import dataclass, field
from enum import IntEnum, StrEnum
from typing import Any

from zenkit.constants import FieldSuffix
from zenkit.dates import DateTime, parse_optional
from zenkit.errors import InvalidValueError
from zenkit.utils import (
    entity_tuple,
    enum_or_raw,
    float_or_str,
    instantiate_from_payload,
    optional_entity,
    text_or_empty,
    wire_field,
)


class ElementCategoryId(IntEnum):
    TEXT = 1
    NUMBER = 2
    URL = 3
    DATE = 4
    CHECKBOX = 5
    CATEGORIES = 6
    FORMULA = 7
    DATE_CREATED = 8
    DATE_UPDATED = 9
    DATE_DEPRECATED = 10
    USER_CREATED_BY = 11
    USER_UPDATED_BY = 12
    USER_DEPRECATED_BY = 13
    PERSONS = 14
    FILES = 15
    REFERENCES = 16
    HIERARCHY = 17
    SUB_ENTRIES = 18
    DEPENDENCIES = 19


class ActivityFilter(IntEnum):
    ALL = 0
    SYSTEM_MESSAGES = 1
    COMMENTS = 2
    DELETED = 3


class ActivityType(IntEnum):
    COMMENT = 0
    RESOURCE_CREATED = 1
    RESOURCE_UPDATED = 2
    RESOURCE_DEPRECATED = 3
    RESOURCE_IMPORTED = 4
    RESOURCE_COPIED = 5
    RESOURCE_RESTORED = 6
    BULK_OPERATION_IN_LIST = 7
    RESOURCE_DELETED = 8


class ActivityCreatedIn(IntEnum):
    WORKSPACE = 0
    LIST = 1
    LIST_ENTRY = 2
    LIST_ELEMENT = 3


class ActivityBulkAction(IntEnum):
    ADD = 0
    SET = 1
    REMOVE = 2
    REPLACE = 3


class WebhookTriggerType(IntEnum):
    ENTRY = 0
    ACTIVITY = 1
    NOTIFICATION = 2
    SYSTEM_MESSAGE = 3
    COMMENT = 4
    ELEMENT = 5


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


class TextFormat(StrEnum):
    PLAIN = "plain"
    HTML = "html"
    MARKDOWN = "markdown"

    @classmethod
    def parse(cls, text: str) -> "TextFormat":
        try:
            return cls(text)
        except ValueError as exc:
            raise InvalidValueError(
                f"TextFormat parse error: '{text}' not 'plain', 'html', or 'markdown'") from exc


class UpdateAction(StrEnum):
    """How new values combine with the stored ones; ``NULL`` sends no action at all."""

    REPLACE = "replace"
    APPEND = "append"
    REMOVE = "remove"
    NULL = ""

    @classmethod
    def from_char(cls, char: str) -> "UpdateAction":
        """'=' replaces, '+' appends, '-' removes; anything else is NULL."""
        return {'=': cls.REPLACE, '+': cls.APPEND, '-': cls.REMOVE}.get(char, cls.NULL)


class NumericType(StrEnum):
    INTEGER = "integer"
    DECIMAL = "decimal"


class RoleId(StrEnum):
    LIST_OWNER = "listOwner"
    LIST_ADMIN = "listAdmin"
    LIST_USER = "listUser"
    COMMENT_ONLY_LIST_USER = "commentOnlyListUser"
    READ_ONLY_LIST_USER = "readOnlyListUser"
    WORKSPACE_OWNER = "workspaceOwner"
    WORKSPACE_USER = "workspaceUser"
    WORKSPACE_ADMIN = "workspaceAdmin"
    COMMENT_ONLY_WORKSPACE_USER = "commentOnlyWorkspaceUser"
    READ_ONLY_WORKSPACE_USER = "readOnlyWorkspaceUser"
    ORGANIZATION_OWNER = "organizationOwner"
    ORGANIZATION_USER = "organizationUser"


class AccessType(StrEnum):
    ORGANIZATION = "Organization"
    WORKSPACE = "Workspace"
    LIST = "List"
    PROJECT = "Project"


def _matches(text: str, *candidates: Any) -> bool:
    return any(candidate is not None and str(candidate) == text for candidate in candidates)


@dataclass(frozen=True, slots=True)
class PredefinedCategory:
    """One choice of a categories (label) field."""

    id: int
    uuid: str
    name: str
    short_id: str = wire_field('shortId', default='')
    color: str = wire_field('colorHex', parse=text_or_empty, default='')
    element_id: int | None = wire_field('elementId', default=None)
    list_id: int | None = wire_field('listId', default=None)
    sort_order: float = wire_field('sortOrder', parse=float_or_str, default=0.0)
    created_at: DateTime | None = wire_field(parse=parse_optional, default=None)
    updated_at: DateTime | None = wire_field(parse=parse_optional, default=None)
    deprecated_at: DateTime | None = wire_field(parse=parse_optional, default=None)
    new_api_kwargs: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ElementData:
    """Type-specific settings of a field; keys not modelled here stay in ``new_api_kwargs``."""

    predefined_categories: tuple[PredefinedCategory, ...] = wire_field(
        'predefinedCategories', parse=entity_tuple(PredefinedCategory), default=())
    multiple: bool = wire_field(parse=bool, default=False)
    child_list: dict[str, Any] | None = wire_field('childList', default=None)
    child_list_uuid: str | None = wire_field('childListUUID', default=None)
    mirror_element_uuid: str | None = wire_field('mirrorElementUUID', default=None)
    new_api_kwargs: dict[str, Any] = field(default_factory=dict)


def _element_data(raw: Any) -> ElementData:
    return instantiate_from_payload(ElementData, raw or {})


@dataclass(frozen=True, slots=True)
class Element:
    """Field definition of a list."""

    id: int
    uuid: str
    name: str
    element_category: ElementCategoryId | int = wire_field('elementcategory', parse=enum_or_raw(ElementCategoryId))
    short_id: str = wire_field('shortId', default='')
    description: str | None = None
    business_data: dict[str, Any] = wire_field('businessData', parse=lambda raw: dict(raw or {}),
                                               default_factory=dict)
    element_data: ElementData = wire_field('elementData', parse=_element_data, default_factory=ElementData)
    is_primary: bool = wire_field('isPrimary', default=False)
    is_auto_created: bool = wire_field('isAutoCreated', default=False)
    sort_order: float = wire_field('sortOrder', parse=float_or_str, default=0.0)
    visible: bool = True
    created_at: DateTime | None = wire_field(parse=parse_optional, default=None)
    updated_at: DateTime | None = wire_field(parse=parse_optional, default=None)
    deprecated_at: DateTime | None = wire_field(parse=parse_optional, default=None)
    list_id: int | None = wire_field('listId', default=None)
    visible_in_public_list: bool | None = wire_field('visibleInPublicList', default=None)
    new_api_kwargs: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f'Field {self.name}'

    def get_description(self) -> str:
        return self.description or ''

    def matches(self, field_id: str | int) -> bool:
        text = str(field_id)
        return _matches(text, self.name, self.uuid, self.id)

    def get_choice_id(self, choice: str) -> int:
        """Lookup a choice id by its name or uuid."""
        if self.element_category == ElementCategoryId.CATEGORIES:
            for category in self.element_data.predefined_categories:
                if choice in (category.uuid, category.name):
                    return category.id
        raise InvalidValueError(f"Invalid choice '{choice}' for field '{self.name}'")

    def numeric_type(self) -> NumericType | None:
        """Integer or decimal for number fields, ``None`` for everything else."""
        if self.element_category != ElementCategoryId.NUMBER:
            return None
        number_format = self.element_data.new_api_kwargs.get('format')
        if not isinstance(number_format, dict):
            return None
        try:
            return NumericType(number_format.get('name'))
        except ValueError:
            return None


Field = Element


@dataclass(frozen=True, slots=True)
class List:
    id: int
    uuid: str
    workspace_id: int = wire_field('workspaceId')
    short_id: str = wire_field('shortId', default='')
    name: str = wire_field(parse=text_or_empty, default='')
    description: str = wire_field(parse=text_or_empty, default='')
    item_name: str | None = wire_field('itemName', default=None)
    item_name_plural: str | None = wire_field('itemNamePlural', default=None)
    is_building: bool = wire_field('isBuilding', default=False)
    is_migrating: bool = wire_field('isMigrating', default=False)
    sort_order: float = wire_field('sortOrder', parse=float_or_str, default=0.0)
    formula_tsort_order: str | None = wire_field('formulaTSortOrder', default=None)
    list_file_policy: str | None = wire_field('listFilePolicy', default=None)
    origin_provider: str | None = wire_field('originProvider', default=None)
    origin_data: Any = wire_field('originData', default=None)
    default_view_modus: int = wire_field('defaultViewModus', default=0)
    created_at: DateTime | None = wire_field(parse=parse_optional, default=None)
    updated_at: DateTime | None = wire_field(parse=parse_optional, default=None)
    deprecated_at: DateTime | None = wire_field(parse=parse_optional, default=None)
    origin_created_at: DateTime | None = wire_field(parse=parse_optional, default=None)
    origin_updated_at: DateTime | None = wire_field(parse=parse_optional, default=None)
    origin_deprecated_at: DateTime | None = wire_field(parse=parse_optional, default=None)
    background_id: str | None = wire_field('backgroundId', default=None)
    visibility: int = 0
    icon_color: str | None = wire_field('iconColor', default=None)
    icon_background_color: str | None = wire_field('iconBackgroundColor', default=None)
    created_by: int | None = None
    new_api_kwargs: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f'{self.id:<7} {self.uuid} {self.name}'

    def has_id(self, list_id: str | int) -> bool:
        """True if ``list_id`` is this list's id, uuid, short id or name."""
        return _matches(str(list_id), self.uuid, self.name, self.short_id, self.id)


@dataclass(frozen=True, slots=True)
class Workspace:
    id: int
    uuid: str
    name: str
    short_id: str = wire_field('shortId', default='')
    description: str | None = None
    is_default: bool = wire_field('isDefault', default=False)
    created_at: DateTime | None = wire_field(parse=parse_optional, default=None)
    updated_at: DateTime | None = wire_field(parse=parse_optional, default=None)
    deprecated_at: DateTime | None = wire_field(parse=parse_optional, default=None)
    background_id: int | None = wire_field('backgroundId', default=None)
    created_by: int | None = None
    lists: tuple[List, ...] = wire_field(parse=entity_tuple(List), default=())
    new_api_kwargs: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f'{self.id:<7} {self.uuid} {self.name}'

    def get_description(self) -> str:
        return self.description or ''

    def has_id(self, workspace_id: str | int) -> bool:
        """True if ``workspace_id`` is this workspace's id, uuid, short id or name."""
        return _matches(str(workspace_id), self.uuid, self.name, self.short_id, self.id)

    def find_list(self, list_id: str | int) -> List | None:
        return next((lst for lst in self.lists if lst.has_id(list_id)), None)


@dataclass(frozen=True, slots=True)
class ChecklistItem:
    checked: bool
    text: str
    new_api_kwargs: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Checklist:
    name: str
    items: tuple[ChecklistItem, ...] = wire_field(parse=entity_tuple(ChecklistItem), default=())
    uuid: str | None = None
    should_checked_items_be_hidden: bool = wire_field('shouldCheckedItemsBeHidden', default=False)
    new_api_kwargs: dict[str, Any] = field(default_factory=dict)


def _int_or_none(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _float_or_none(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


@dataclass(frozen=True, slots=True)
class Entry:
    """
    A list item as returned by the API.

    User-defined field values are not modelled as attributes: they arrive under
    keys such as ``"<field uuid>_text"`` and are kept in ``values``. The getters
    below take the field uuid; ``Item`` offers the same getters by field name.
    """

    id: int
    uuid: str
    list_id: int = wire_field('listId')
    short_id: str = wire_field('shortId', default='')
    created_at: DateTime | None = wire_field(parse=parse_optional, default=None)
    updated_at: DateTime | None = wire_field(parse=parse_optional, default=None)
    deprecated_at: DateTime | None = wire_field(parse=parse_optional, default=None)
    created_by_displayname: str | None = None
    updated_by_displayname: str | None = None
    deprecated_by_displayname: str | None = None
    created_by: int | None = None
    updated_by: int | None = None
    deprecated_by: int | None = None
    # null after creating an entry without a title
    display_string: str = wire_field('displayString', parse=text_or_empty, default='')
    sort_order: float = wire_field('sortOrder', parse=float_or_str, default=0.0)
    comment_count: int = 0
    checklists: tuple[Checklist, ...] = wire_field(parse=entity_tuple(Checklist), default=())
    new_api_kwargs: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f'Entry {self.display_string}'

    @property
    def values(self) -> dict[str, Any]:
        return self.new_api_kwargs

    def _value(self, field_uuid: str, suffix: FieldSuffix) -> Any:
        return self.new_api_kwargs.get(f'{field_uuid}_{suffix}')

    def get_text_value(self, field_uuid: str) -> str | None:
        value = self._value(field_uuid, FieldSuffix.TEXT)
        return value if isinstance(value, str) else None

    def get_int_value(self, field_uuid: str) -> int | None:
        return _int_or_none(self._value(field_uuid, FieldSuffix.NUMBER))

    def get_float_value(self, field_uuid: str) -> float | None:
        return _float_or_none(self._value(field_uuid, FieldSuffix.NUMBER))

    def get_date_value(self, field_uuid: str) -> str | None:
        value = self._value(field_uuid, FieldSuffix.DATE)
        return value if isinstance(value, str) else None

    def get_category_names(self, field_uuid: str) -> list[str]:
        return self._map_values(field_uuid, FieldSuffix.CATEGORIES_SORT, 'name', str)

    def get_category_ids(self, field_uuid: str) -> list[int]:
        return self._map_values(field_uuid, FieldSuffix.CATEGORIES_SORT, 'id', int)

    def get_person_names(self, field_uuid: str) -> list[str]:
        return self._map_values(field_uuid, FieldSuffix.PERSONS_SORT, 'displayname', str)

    def get_person_ids(self, field_uuid: str) -> list[int]:
        return self._map_values(field_uuid, FieldSuffix.PERSONS_SORT, 'id', int)

    def get_references(self, field_uuid: str) -> list[str]:
        """Uuids of the referenced entries."""
        return self._map_values(field_uuid, FieldSuffix.REFERENCES_SORT, 'uuid', str)

    def _map_values(self, field_uuid: str, suffix: FieldSuffix, key: str, kind: type) -> list:
        values = self._value(field_uuid, suffix)
        if not isinstance(values, list):
            return []
        return [
            value[key] for value in values
            if isinstance(value, dict) and isinstance(value.get(key), kind) and not isinstance(value.get(key), bool)
        ]


@dataclass(frozen=True, slots=True)
class DeleteListEntryDetail:
    id: int
    uuid: str
    short_id: str = wire_field('shortId', default='')
    new_api_kwargs: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class DeleteListEntryResponse:
    action: str
    list_entry: DeleteListEntryDetail | None = wire_field(
        'listEntry', parse=optional_entity(DeleteListEntryDetail), default=None)
    new_api_kwargs: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class User:
    id: int
    uuid: str
    display_name: str = wire_field('displayname', parse=text_or_empty)
    short_id: str = wire_field('shortId', default='')
    full_name: str = wire_field('fullname', parse=text_or_empty, default='')
    initials: str = wire_field(parse=text_or_empty, default='')
    user_name: str = wire_field('username', parse=text_or_empty, default='')
    background_id: int | None = wire_field('backgroundId', default=None)
    api_key: str | None = None
    image_link: Any = wire_field('imageLink', default=None)
    is_image_preferred: bool = wire_field('isImagePreferred', default=False)
    anonymous: bool | None = None
    locale: str | None = None
    timezone: str | None = None
    is_super_admin: bool | None = wire_field('isSuperAdmin', default=None)
    registered_at: Any = None
    trello_token: str | None = None
    settings: Any = None
    email_count: int = wire_field('emailCount', default=0)
    new_api_kwargs: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f'User {self.display_name}'


@dataclass(frozen=True, slots=True)
class Access:
    """Access type and role of the current user on one resource."""

    access_type: AccessType | str = wire_field('accessType', parse=enum_or_raw(AccessType))
    role_id: RoleId | str = wire_field('roleId', parse=enum_or_raw(RoleId))
    id: int | None = None
    short_id: str | None = wire_field('shortId', default=None)
    uuid: str | None = None
    user_id: int | None = wire_field('userId', default=None)
    workspace_id: int | None = wire_field('workspaceId', default=None)
    list_id: int | None = wire_field('listId', default=None)
    organization_id: int | None = wire_field('organizationId', default=None)
    created_at: DateTime | None = wire_field(parse=parse_optional, default=None)
    new_api_kwargs: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SharedAccesses:
    list_ids: tuple[int, ...] = wire_field('listIds', parse=lambda raw: tuple(raw or ()), default=())
    workspace_ids: tuple[int, ...] = wire_field('workspaceIds', parse=lambda raw: tuple(raw or ()), default=())
    new_api_kwargs: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Webhook:
    id: int
    uuid: str
    trigger_type: WebhookTriggerType | int = wire_field('triggerType', parse=enum_or_raw(WebhookTriggerType))
    url: str
    short_id: str = wire_field('shortId', default='')
    user_id: int | None = wire_field('userId', default=None)
    workspace_id: int | None = wire_field('workspaceId', default=None)
    list_id: int | None = wire_field('listId', default=None)
    list_entry_id: int | None = wire_field('listEntryId', default=None)
    element_id: int | None = wire_field('elementId', default=None)
    provider: str | None = None
    locale: str = wire_field(parse=text_or_empty, default='')
    new_api_kwargs: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class NewWebhook:
    """Body of a create-webhook call; the optional ids restrict what the webhook reports."""

    trigger_type: WebhookTriggerType = wire_field('triggerType')
    url: str = wire_field()
    workspace_id: int | None = wire_field('workspaceId', default=None)
    list_id: int | None = wire_field('listId', default=None)
    list_entry_id: int | None = wire_field('listEntryId', default=None)
    element_id: int | None = wire_field('elementId', default=None)
    locale: str = 'en'


@dataclass(frozen=True, slots=True)
class NewComment:
    message: str


@dataclass(frozen=True, slots=True)
class OrderBy:
    direction: SortDirection
    column: str | None = None


@dataclass(frozen=True, slots=True)
class GetEntriesRequest:
    filter: dict[str, Any] = field(default_factory=dict)
    limit: int = 0
    skip: int = 0
    allow_deprecated: bool = wire_field('allowDeprecated', default=False)
    order_by: tuple[OrderBy, ...] = wire_field('orderBy', default=())


@dataclass(frozen=True, slots=True)
class GetEntriesViewRequest:
    """
    Parameters of the list-view query.

    ``task_style`` splits the result into ``todo`` and ``done`` groups and only
    works for lists with the task addon enabled.
    """

    filter: dict[str, Any] = field(default_factory=dict)
    group_by_element_id: int = wire_field('groupByElementId', default=0)
    limit: int = 0
    skip: int = 0
    allow_deprecated: bool = wire_field('allowDeprecated', default=False)
    task_style: bool = wire_field('taskStyle', default=False)


@dataclass(frozen=True, slots=True)
class FilterCountData:
    total: int = 0
    filtered_total: int = wire_field('filteredTotal', default=0)
    new_api_kwargs: dict[str, Any] = field(default_factory=dict)


def _count_data_per_group(raw: Any) -> dict[str, FilterCountData] | tuple[FilterCountData, ...]:
    if raw is None:
        return ()
    if isinstance(raw, dict):
        return {group: instantiate_from_payload(FilterCountData, counts) for group, counts in raw.items()}
    return entity_tuple(FilterCountData)(raw)


@dataclass(frozen=True, slots=True)
class GetEntriesViewResponse:
    count_data: FilterCountData = wire_field(
        'countData', parse=lambda raw: instantiate_from_payload(FilterCountData, raw or {}),
        default_factory=FilterCountData)
    count_data_per_group: dict[str, FilterCountData] | tuple[FilterCountData, ...] = wire_field(
        'countDataPerGroup', parse=_count_data_per_group, default=())
    list_entries: tuple[Entry, ...] = wire_field('listEntries', parse=entity_tuple(Entry), default=())
    new_api_kwargs: dict[str, Any] = field(default_factory=dict)
