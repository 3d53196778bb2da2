"""
Tests for reading entry values by field name through Item.
"""
import pytest

from zenkit.dates import DateTime
from zenkit.errors import MultiCategoryError, NotFoundError
from zenkit.item import Item
from zenkit.types import Element, Entry
from zenkit.utils import instantiate_from_payload

STATUS_UUID = "f0000000-0000-4000-8000-000000000001"
DUE_UUID = "f0000000-0000-4000-8000-000000000002"
OWNER_UUID = "f0000000-0000-4000-8000-000000000003"


@pytest.fixture
def fields():
    return tuple(instantiate_from_payload(Element, raw) for raw in [
        {"id": 1, "uuid": STATUS_UUID, "name": "Status", "elementcategory": 6},
        {"id": 2, "uuid": DUE_UUID, "name": "Due", "elementcategory": 4},
        {"id": 3, "uuid": OWNER_UUID, "name": "Owner", "elementcategory": 14},
    ])


def _item(fields, **values):
    entry = instantiate_from_payload(Entry, {"id": 7, "uuid": "e7", "listId": 3, "displayString": "Task", **values})
    return Item(entry=entry, list_name="Tasks", list_id=3, fields=fields)


def test_item_exposes_entry_attributes(fields):
    item = _item(fields)

    assert item.id == 7
    assert item.uuid == "e7"
    assert item.display_string == "Task"
    assert item.list_name == "Tasks"


def test_item_unknown_attribute_raises(fields):
    with pytest.raises(AttributeError):
        _item(fields).not_an_attribute  # pylint: disable=expression-not-assigned


def test_get_choice_single_value(fields):
    item = _item(fields, **{f"{STATUS_UUID}_categories_sort": [{"id": 101, "name": "Todo"}]})

    assert item.get_choice("Status") == "Todo"
    assert item.get_choices("Status") == ["Todo"]
    assert item.get_choice_ids(STATUS_UUID) == [101]


def test_get_choice_none_when_unset(fields):
    assert _item(fields).get_choice("Status") is None


def test_get_choice_multiple_values_raises(fields):
    item = _item(fields, **{f"{STATUS_UUID}_categories_sort": [
        {"id": 101, "name": "Todo"}, {"id": 102, "name": "Done"},
    ]})

    with pytest.raises(MultiCategoryError):
        item.get_choice("Status")


def test_date_and_person_getters(fields):
    item = _item(fields, **{
        f"{DUE_UUID}_date": "2021-02-03",
        f"{OWNER_UUID}_persons_sort": [{"id": 5, "displayname": "Ann"}, {"id": 6, "displayname": "Bob"}],
    })

    assert item.get_date_value("Due") == "2021-02-03"
    assert item.get_datetime_value("Due") == DateTime.parse("2021-02-03")
    assert item.get_person_names("Owner") == ["Ann", "Bob"]
    assert item.get_person_ids(3) == [5, 6]


def test_unknown_field_raises_not_found(fields):
    with pytest.raises(NotFoundError, match="Invalid field 'Priority' in list Tasks"):
        _item(fields).get_text_value("Priority")
