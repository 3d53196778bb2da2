"""Centralized Zenkit constant definitions."""

from enum import StrEnum

DEFAULT_ENDPOINT = "https://zenkit.com/api/v1"
ENTRIES_PAGE_SIZE = 500


class Header(StrEnum):
    API_KEY = "Zenkit-API-Key"
    CONTENT_TYPE = "Content-Type"
    USER_AGENT = "User-Agent"
    RATE_LIMIT_LIMIT = "X-RateLimit-Limit"
    RATE_LIMIT_REMAINING = "X-RateLimit-Remaining"
    RATE_LIMIT_RESET = "X-RateLimit-Reset"
    RETRY_AFTER = "Retry-After"


class FieldSuffix(StrEnum):
    """Suffixes appended to a field uuid to form entry value keys."""

    TEXT = "text"
    TEXT_TYPE = "textType"
    NUMBER = "number"
    LINK = "link"
    DATE = "date"
    PERSONS = "persons"
    PERSONS_SORT = "persons_sort"
    CATEGORIES = "categories"
    CATEGORIES_SORT = "categories_sort"
    REFERENCES = "references"
    REFERENCES_SORT = "references_sort"


class EntryKey(StrEnum):
    UPDATE_ACTION = "updateAction"
    DISPLAY_STRING = "displayString"
    CHECKLISTS = "checklists"
