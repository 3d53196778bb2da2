"""
Tests for decoding Zenkit entities and the helpers they carry.
"""
import pytest

from zenkit.dates import DateTime
from zenkit.errors import InvalidValueError, MalformedResponseError
from zenkit.types import (
    Access,
    AccessType,
    DeleteListEntryResponse,
    Element,
    ElementCategoryId,
    Entry,
    GetEntriesViewResponse,
    NumericType,
    RoleId,
    TextFormat,
    UpdateAction,
    Webhook,
    WebhookTriggerType,
    Workspace,
)
from zenkit.utils import instantiate_from_payload

FIELD_UUID = "f0000000-0000-4000-8000-000000000001"


def _category_element(multiple=False):
    return instantiate_from_payload(Element, {
        "id": 11,
        "uuid": FIELD_UUID,
        "name": "Status",
        "elementcategory": 6,
        "elementData": {
            "multiple": multiple,
            "predefinedCategories": [
                {"id": 101, "uuid": "c1", "name": "Todo", "colorHex": None},
                {"id": 102, "uuid": "c2", "name": "Done"},
            ],
        },
    })


def _number_element(format_name):
    return instantiate_from_payload(Element, {
        "id": 12,
        "uuid": "f-num",
        "name": "Estimate",
        "elementcategory": 2,
        "elementData": {"format": {"name": format_name}},
    })


def _entry(**values):
    payload = {
        "id": 7,
        "uuid": "e0000000-0000-4000-8000-000000000007",
        "listId": 3,
        "displayString": "Write tests",
        "sortOrder": "-99",
        "created_at": "2020-01-01T00:00:00.000Z",
        "comment_count": 2,
    }
    payload.update(values)
    return instantiate_from_payload(Entry, payload)


def test_element_decodes_category_and_choices():
    element = _category_element()

    assert element.element_category is ElementCategoryId.CATEGORIES
    assert [c.name for c in element.element_data.predefined_categories] == ["Todo", "Done"]
    assert element.element_data.predefined_categories[0].color == ""
    assert element.get_choice_id("Done") == 102
    assert element.get_choice_id("c1") == 101


def test_element_invalid_choice():
    with pytest.raises(InvalidValueError, match="Invalid choice 'Blocked'"):
        _category_element().get_choice_id("Blocked")


def test_element_get_choice_id_requires_categories_field():
    with pytest.raises(InvalidValueError):
        _number_element("integer").get_choice_id("Todo")


def test_element_matches_name_uuid_and_id():
    element = _category_element()

    assert element.matches("Status")
    assert element.matches(FIELD_UUID)
    assert element.matches(11)
    assert element.matches("11")
    assert not element.matches("status")


def test_element_unknown_category_is_kept_raw():
    element = instantiate_from_payload(Element, {"id": 1, "uuid": "u", "name": "X", "elementcategory": 99})

    assert element.element_category == 99
    assert element.numeric_type() is None


@pytest.mark.parametrize("format_name, expected", [
    ("integer", NumericType.INTEGER),
    ("decimal", NumericType.DECIMAL),
    ("percent", None),
])
def test_element_numeric_type(format_name, expected):
    assert _number_element(format_name).numeric_type() == expected


def test_element_numeric_type_of_non_number_field():
    assert _category_element().numeric_type() is None


def test_entry_common_attributes():
    entry = _entry()

    assert entry.id == 7
    assert entry.list_id == 3
    assert entry.display_string == "Write tests"
    assert entry.sort_order == -99.0
    assert entry.comment_count == 2
    assert entry.created_at == DateTime.parse("2020-01-01")
    assert entry.checklists == ()


def test_entry_null_display_string_becomes_empty():
    assert _entry(displayString=None).display_string == ""


def test_entry_value_getters():
    entry = _entry(**{
        f"{FIELD_UUID}_text": "hello",
        f"{FIELD_UUID}_number": 3.0,
        f"{FIELD_UUID}_date": "2021-02-03",
        f"{FIELD_UUID}_categories_sort": [{"id": 101, "name": "Todo"}, {"id": 102, "name": "Done"}],
        f"{FIELD_UUID}_persons_sort": [{"id": 5, "displayname": "Ann"}],
        f"{FIELD_UUID}_references_sort": [{"uuid": "r1"}, {"uuid": "r2"}],
    })

    assert entry.get_text_value(FIELD_UUID) == "hello"
    assert entry.get_int_value(FIELD_UUID) == 3
    assert entry.get_float_value(FIELD_UUID) == 3.0
    assert entry.get_date_value(FIELD_UUID) == "2021-02-03"
    assert entry.get_category_names(FIELD_UUID) == ["Todo", "Done"]
    assert entry.get_category_ids(FIELD_UUID) == [101, 102]
    assert entry.get_person_names(FIELD_UUID) == ["Ann"]
    assert entry.get_person_ids(FIELD_UUID) == [5]
    assert entry.get_references(FIELD_UUID) == ["r1", "r2"]


def test_entry_getters_on_missing_or_mistyped_values():
    entry = _entry(**{f"{FIELD_UUID}_number": 2.5, f"{FIELD_UUID}_text": 12})

    assert entry.get_int_value(FIELD_UUID) is None
    assert entry.get_float_value(FIELD_UUID) == 2.5
    assert entry.get_text_value(FIELD_UUID) is None
    assert entry.get_date_value(FIELD_UUID) is None
    assert entry.get_category_names(FIELD_UUID) == []
    assert entry.get_references("other") == []


def test_entry_checklists():
    entry = _entry(checklists=[{
        "name": "Steps",
        "uuid": "cl1",
        "shouldCheckedItemsBeHidden": True,
        "items": [{"checked": True, "text": "one"}, {"checked": False, "text": "two"}],
    }])

    checklist = entry.checklists[0]
    assert checklist.name == "Steps"
    assert checklist.should_checked_items_be_hidden is True
    assert [(i.checked, i.text) for i in checklist.items] == [(True, "one"), (False, "two")]


def test_entry_missing_id_is_malformed():
    with pytest.raises(MalformedResponseError):
        instantiate_from_payload(Entry, {"uuid": "u", "listId": 1})


def test_workspace_with_lists():
    workspace = instantiate_from_payload(Workspace, {
        "id": 1,
        "uuid": "w1",
        "shortId": "ws",
        "name": "Engineering",
        "lists": [
            {"id": 3, "uuid": "l3", "shortId": "abc", "name": "Tasks", "workspaceId": 1},
            {"id": 4, "uuid": "l4", "name": None, "workspaceId": 1},
        ],
    })

    assert workspace.has_id(1)
    assert workspace.has_id("ws")
    assert workspace.has_id("Engineering")
    assert workspace.has_id("w1")
    assert not workspace.has_id("engineering")
    assert workspace.find_list("abc").id == 3
    assert workspace.find_list(4).name == ""
    assert workspace.find_list("Bugs") is None
    assert workspace.get_description() == ""


def test_access_and_unknown_role():
    known = instantiate_from_payload(Access, {"accessType": "List", "roleId": "listOwner", "listId": 3})
    unknown = instantiate_from_payload(Access, {"accessType": "Team", "roleId": "teamMember"})

    assert known.access_type is AccessType.LIST
    assert known.role_id is RoleId.LIST_OWNER
    assert unknown.access_type == "Team"
    assert unknown.role_id == "teamMember"


def test_webhook_trigger_type():
    webhook = instantiate_from_payload(Webhook, {"id": 1, "uuid": "h", "triggerType": 1, "url": "https://x/y"})

    assert webhook.trigger_type is WebhookTriggerType.ACTIVITY
    assert webhook.locale == ""


def test_delete_response():
    response = instantiate_from_payload(DeleteListEntryResponse, {
        "action": "deprecated",
        "listEntry": {"id": 7, "uuid": "e7", "shortId": "s7"},
    })

    assert response.action == "deprecated"
    assert response.list_entry.id == 7


def test_list_view_response_with_groups():
    response = instantiate_from_payload(GetEntriesViewResponse, {
        "countData": {"total": 3, "filteredTotal": 2},
        "countDataPerGroup": {"todo": {"total": 2, "filteredTotal": 1}},
        "listEntries": [{"id": 1, "uuid": "a", "listId": 3}],
    })

    assert response.count_data.filtered_total == 2
    assert response.count_data_per_group["todo"].total == 2
    assert [e.id for e in response.list_entries] == [1]


def test_text_format_parse():
    assert TextFormat.parse("markdown") is TextFormat.MARKDOWN
    with pytest.raises(InvalidValueError):
        TextFormat.parse("rtf")


@pytest.mark.parametrize("char, action", [
    ("=", UpdateAction.REPLACE),
    ("+", UpdateAction.APPEND),
    ("-", UpdateAction.REMOVE),
    ("?", UpdateAction.NULL),
])
def test_update_action_from_char(char, action):
    assert UpdateAction.from_char(char) is action
