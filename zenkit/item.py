from dataclasses import dataclass
from typing import Any, Iterable

from zenkit.dates import DateTime
from zenkit.errors import MultiCategoryError, NotFoundError
from zenkit.types import Element, Entry


def find_field(fields: Iterable[Element], field_id: str | int, list_name: str) -> Element:
    """Field definition by name, uuid or id."""
    found = next((f for f in fields if f.matches(field_id)), None)
    if found is None:
        raise NotFoundError(f"Invalid field '{field_id}' in list {list_name}")
    return found


@dataclass(frozen=True, slots=True)
class Item:
    """
    An entry bound to the field definitions of its list.

    Getters accept a field name, id or uuid. Attributes of the underlying
    ``Entry`` are reachable directly on the item.
    """

    entry: Entry
    list_name: str
    list_id: int
    fields: tuple[Element, ...]

    def __getattr__(self, name: str) -> Any:
        if name == 'entry':
            raise AttributeError(name)
        return getattr(self.entry, name)

    def __str__(self) -> str:
        return f'Item {self.entry.display_string} ({self.list_name})'

    @property
    def id(self) -> int:
        return self.entry.id

    @property
    def uuid(self) -> str:
        return self.entry.uuid

    def get_field(self, field_id: str | int) -> Element:
        return find_field(self.fields, field_id, self.list_name)

    def get_text_value(self, fname: str | int) -> str | None:
        return self.entry.get_text_value(self.get_field(fname).uuid)

    def get_int_value(self, fname: str | int) -> int | None:
        return self.entry.get_int_value(self.get_field(fname).uuid)

    def get_float_value(self, fname: str | int) -> float | None:
        return self.entry.get_float_value(self.get_field(fname).uuid)

    def get_date_value(self, fname: str | int) -> str | None:
        return self.entry.get_date_value(self.get_field(fname).uuid)

    def get_datetime_value(self, fname: str | int) -> DateTime | None:
        value = self.get_date_value(fname)
        return None if value is None else DateTime.parse(value)

    def get_person_names(self, fname: str | int) -> list[str]:
        return self.entry.get_person_names(self.get_field(fname).uuid)

    def get_person_ids(self, fname: str | int) -> list[int]:
        return self.entry.get_person_ids(self.get_field(fname).uuid)

    def get_references(self, fname: str | int) -> list[str]:
        return self.entry.get_references(self.get_field(fname).uuid)

    def get_choices(self, fname: str | int) -> list[str]:
        """Selected choice (label) names; empty when nothing is selected."""
        return self.entry.get_category_names(self.get_field(fname).uuid)

    def get_choice_ids(self, fname: str | int) -> list[int]:
        return self.entry.get_category_ids(self.get_field(fname).uuid)

    def get_choice(self, fname: str | int) -> str | None:
        """
        The single selected choice, or ``None``.

        Several selected values mean the field allows multiple choices although
        the caller expected one; that raises ``MultiCategoryError``.
        """
        names = self.get_choices(fname)
        if not names:
            return None
        if len(names) > 1:
            raise MultiCategoryError(
                f"Configuration error: label field '{fname}' not expected to contain multiple values")
        return names[0]
