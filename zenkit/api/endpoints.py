"""Definitions for Zenkit API endpoints."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote


@dataclass(frozen=True, slots=True)
class Endpoint:
    """A strongly typed definition of an API endpoint.

    ``url`` is a path relative to the configured API root, e.g. ``/lists/{list_id}/elements``.
    """

    name: str
    method: str
    url: str

    def format(self, **kwargs) -> "Endpoint":
        """Return a new endpoint with path placeholders filled from ``kwargs``."""

        quoted = {key: quote(str(value), safe="") for key, value in kwargs.items()}
        return Endpoint(name=self.name, method=self.method, url=self.url.format(**quoted))


class ZenkitEndpoints:
    """Central registry of Zenkit HTTP endpoints."""

    # Workspaces
    WORKSPACES_WITH_LISTS = Endpoint("workspaces_with_lists", "GET", "/users/me/workspacesWithLists")
    GET_WORKSPACE = Endpoint("get_workspace", "GET", "/workspaces/{workspace_id}")
    WORKSPACE_USERS = Endpoint("workspace_users", "GET", "/workspaces/{workspace_id}/users")

    # Users
    USER_ACCESSES = Endpoint("user_accesses", "GET", "/users/me/access")
    MATCHING_ACCESSES = Endpoint("matching_accesses", "GET", "/users/me/matching-access/{user_id}")

    # Lists
    LIST_ELEMENTS = Endpoint("list_elements", "GET", "/lists/{list_id}/elements")

    # Entries
    GET_ENTRY = Endpoint("get_entry", "GET", "/lists/{list_id}/entries/{entry_id}")
    FILTER_ENTRIES = Endpoint("filter_entries", "POST", "/lists/{list_id}/entries/filter")
    FILTER_ENTRIES_LIST_VIEW = Endpoint("filter_entries_list_view", "POST", "/lists/{list_id}/entries/filter/list")
    CREATE_ENTRY = Endpoint("create_entry", "POST", "/lists/{list_id}/entries")
    UPDATE_ENTRY = Endpoint("update_entry", "PUT", "/lists/{list_id}/entries/{entry_id}")
    DELETE_ENTRY = Endpoint("delete_entry", "DELETE", "/lists/{list_id}/deprecated-entries/{entry_id}")
    UPDATE_CHECKLISTS = Endpoint("update_checklists", "PUT", "/lists/{list_id}/entries/{entry_id}/checklists")

    # Comments
    CREATE_LIST_COMMENT = Endpoint("create_list_comment", "POST", "/users/me/lists/{list_id}/activities")
    CREATE_ENTRY_COMMENT = Endpoint(
        "create_entry_comment", "POST", "/users/me/lists/{list_id}/entries/{entry_id}/activities"
    )

    # Webhooks
    CREATE_WEBHOOK = Endpoint("create_webhook", "POST", "/webhooks")
    DELETE_WEBHOOK = Endpoint("delete_webhook", "DELETE", "/webhooks/{webhook_id}")
    LIST_WEBHOOKS = Endpoint("list_webhooks", "GET", "/users/me/webhooks")
