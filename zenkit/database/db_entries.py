from typing import Any, Iterable

from loguru import logger

from zenkit.activity import Activity, decode_activity
from zenkit.api import RequestSpec, ZenkitAPIClient, ZenkitEndpoints
from zenkit.types import (
    Checklist,
    DeleteListEntryResponse,
    Entry,
    GetEntriesRequest,
    GetEntriesViewRequest,
    GetEntriesViewResponse,
    NewComment,
    OrderBy,
    SortDirection,
)
from zenkit.utils import instantiate_from_payload, instantiate_many, to_wire_dict


def _comment(comment: NewComment | str) -> NewComment:
    return comment if isinstance(comment, NewComment) else NewComment(message=comment)


class DatabaseEntries:
    def __init__(self):
        super().__init__()
        if getattr(self, '_api_client', None) is None:
            self._api_client = ZenkitAPIClient(getattr(self, 'settings', None))

    def reset(self):
        pass

    def get_entry(self, list_id: str | int, entry_id: str | int) -> Entry:
        spec = RequestSpec(endpoint=ZenkitEndpoints.GET_ENTRY.format(list_id=list_id, entry_id=entry_id))
        payload = self._api_client.request_json(spec, operation_name=f"get entry {entry_id} of list {list_id}")
        return instantiate_from_payload(Entry, payload)

    def get_list_entries(self, list_id: str | int, request: GetEntriesRequest | None = None) -> list[Entry]:
        """Entries matching a filter request; a default request returns the first page unfiltered."""
        request = request or GetEntriesRequest()
        spec = RequestSpec(
            endpoint=ZenkitEndpoints.FILTER_ENTRIES.format(list_id=list_id),
            json_body=to_wire_dict(request),
        )
        payload = self._api_client.request_json(spec, operation_name=f"filter entries of list {list_id}")
        entries = instantiate_many(Entry, payload)
        logger.debug(f"Fetched {len(entries)} entries", list=list_id, skip=request.skip, limit=request.limit)
        return entries

    def get_list_entries_sorted(
        self,
        list_id: str | int,
        sort: tuple[str, SortDirection] | None = None,
        limit: int = 0,
        skip: int = 0,
    ) -> list[Entry]:
        """
        Entries ordered by one column.

        ``limit`` is the page size (0 for no limit) and ``skip`` the number of
        entries to pass over.
        """
        order_by: tuple[OrderBy, ...] = ()
        if sort is not None:
            column, direction = sort
            order_by = (OrderBy(column=column, direction=SortDirection(direction)),)
        request = GetEntriesRequest(limit=limit, skip=skip, order_by=order_by)
        return self.get_list_entries(list_id, request)

    def get_list_entries_for_view(
        self, list_id: int, request: GetEntriesViewRequest | None = None
    ) -> GetEntriesViewResponse:
        request = request or GetEntriesViewRequest()
        spec = RequestSpec(
            endpoint=ZenkitEndpoints.FILTER_ENTRIES_LIST_VIEW.format(list_id=list_id),
            json_body=to_wire_dict(request),
        )
        payload = self._api_client.request_json(spec, operation_name=f"list view of list {list_id}")
        return instantiate_from_payload(GetEntriesViewResponse, payload)

    def create_entry(self, list_id: int, values: dict[str, Any]) -> Entry:
        spec = RequestSpec(endpoint=ZenkitEndpoints.CREATE_ENTRY.format(list_id=list_id), json_body=values)
        payload = self._api_client.request_json(spec, operation_name=f"create entry in list {list_id}")
        entry = instantiate_from_payload(Entry, payload)
        logger.info(f"Created entry {entry.id}", list=list_id)
        return entry

    def update_entry(self, list_id: int, entry_id: int, values: dict[str, Any]) -> Entry:
        spec = RequestSpec(
            endpoint=ZenkitEndpoints.UPDATE_ENTRY.format(list_id=list_id, entry_id=entry_id),
            json_body=values,
        )
        payload = self._api_client.request_json(spec, operation_name=f"update entry {entry_id}")
        return instantiate_from_payload(Entry, payload)

    def delete_entry(self, list_id: str | int, entry_id: str | int) -> DeleteListEntryResponse:
        """Move an entry to the list's deprecated (deleted) entries."""
        spec = RequestSpec(endpoint=ZenkitEndpoints.DELETE_ENTRY.format(list_id=list_id, entry_id=entry_id))
        payload = self._api_client.request_json(spec, operation_name=f"delete entry {entry_id}")
        logger.info(f"Deleted entry {entry_id}", list=list_id)
        return instantiate_from_payload(DeleteListEntryResponse, payload)

    def update_checklists(
        self, list_id: str | int, entry_id: str | int, checklists: Iterable[Checklist]
    ) -> dict[str, Any]:
        """Replace the checklists of an entry; returns the response body, ``{}`` when empty."""
        spec = RequestSpec(
            endpoint=ZenkitEndpoints.UPDATE_CHECKLISTS.format(list_id=list_id, entry_id=entry_id),
            json_body={"checklists": [to_wire_dict(checklist) for checklist in checklists]},
        )
        result = self._api_client.request(
            spec, expect_json=True, operation_name=f"update checklists of entry {entry_id}"
        )
        return result.json if isinstance(result.json, dict) else {}

    def create_list_comment(self, list_id: int, comment: NewComment | str) -> Activity:
        spec = RequestSpec(
            endpoint=ZenkitEndpoints.CREATE_LIST_COMMENT.format(list_id=list_id),
            json_body=to_wire_dict(_comment(comment)),
        )
        payload = self._api_client.request_json(spec, operation_name=f"comment on list {list_id}")
        return decode_activity(payload)

    def create_entry_comment(self, list_id: int, entry_id: int, comment: NewComment | str) -> Activity:
        spec = RequestSpec(
            endpoint=ZenkitEndpoints.CREATE_ENTRY_COMMENT.format(list_id=list_id, entry_id=entry_id),
            json_body=to_wire_dict(_comment(comment)),
        )
        payload = self._api_client.request_json(spec, operation_name=f"comment on entry {entry_id}")
        return decode_activity(payload)
