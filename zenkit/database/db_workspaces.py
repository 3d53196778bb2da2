from loguru import logger

from zenkit.api import RequestSpec, ZenkitAPIClient, ZenkitEndpoints
from zenkit.api.client import EndpointCallResult
from zenkit.cache import EntityCache
from zenkit.errors import NotFoundError
from zenkit.list_info import ListInfo
from zenkit.types import Element, Workspace
from zenkit.utils import instantiate_from_payload, instantiate_many, is_integer_id, is_uuid


class DatabaseWorkspaces:
    """Workspaces, lists and field definitions, cached for the lifetime of the client."""

    def __init__(self):
        super().__init__()
        if getattr(self, '_api_client', None) is None:
            self._api_client = ZenkitAPIClient(getattr(self, 'settings', None))
        self.workspaces_cache: EntityCache[int, Workspace] = EntityCache('workspaces')
        self.lists_cache: EntityCache[int, ListInfo] = EntityCache('list info')
        self._all_workspaces_loaded = False

    def reset(self):
        self.clear_workspace_cache()
        self.clear_list_cache()

    @property
    def last_call_details(self) -> EndpointCallResult | None:
        """Expose metadata about the most recent API call."""

        return self._api_client.last_call_result

    def get_all_workspaces_and_lists(self) -> list[Workspace]:
        """All workspaces of the user, each with its lists; fetched once, then served from cache."""
        if self._all_workspaces_loaded:
            logger.debug("Using cached workspaces")
            return self.workspaces_cache.values()
        logger.debug("Workspaces not fetched yet. Fetching now.")

        spec = RequestSpec(endpoint=ZenkitEndpoints.WORKSPACES_WITH_LISTS)
        payload = self._api_client.request_json(spec, operation_name="get workspaces with lists")
        workspaces = instantiate_many(Workspace, payload)
        for workspace in workspaces:
            if workspace.id not in self.workspaces_cache:
                self.workspaces_cache.put(workspace.id, workspace)
        self._all_workspaces_loaded = True
        logger.info(f"Fetched {len(workspaces)} workspaces")
        return self.workspaces_cache.values()

    def get_workspace(self, workspace_id: str | int) -> Workspace:
        """
        Workspace by id, uuid, short id or name.

        Cached workspaces are searched first. An id or uuid is fetched on its
        own; a name needs the full workspace listing since the API cannot look
        workspaces up by name.
        """
        text = str(workspace_id)
        cached = self.workspaces_cache.find(lambda workspace: workspace.has_id(text))
        if cached is not None:
            logger.debug("Using cached workspace", workspace=text)
            return cached

        if is_integer_id(text) or is_uuid(text):
            spec = RequestSpec(endpoint=ZenkitEndpoints.GET_WORKSPACE.format(workspace_id=text))
            payload = self._api_client.request_json(spec, operation_name=f"get workspace {text}")
            workspace = instantiate_from_payload(Workspace, payload)
            return self.workspaces_cache.put(workspace.id, workspace)

        for workspace in self.get_all_workspaces_and_lists():
            if workspace.has_id(text):
                return workspace
        raise NotFoundError(f"Workspace '{text}' not found")

    def get_list_elements(self, list_id: str | int) -> list[Element]:
        """Field definitions of a list (not cached)."""
        spec = RequestSpec(endpoint=ZenkitEndpoints.LIST_ELEMENTS.format(list_id=list_id))
        payload = self._api_client.request_json(spec, operation_name=f"get elements of list {list_id}")
        return instantiate_many(Element, payload)

    def get_list_info(self, workspace_id: str | int, list_id: str | int) -> ListInfo:
        """List by id, uuid, short id or name within a workspace, with its field definitions."""
        text = str(list_id)
        cached = self.lists_cache.find(lambda info: info.has_id(text))
        if cached is not None:
            logger.debug("Using cached list info", list=text)
            return cached

        workspace = self.get_workspace(workspace_id)
        lst = workspace.find_list(text)
        if lst is None:
            raise NotFoundError(
                f"get_list_info: invalid list '{text}' in workspace '{workspace.name}' ({workspace_id})")

        fields = self.get_list_elements(lst.id)
        info = ListInfo(lst, fields, api=self)
        return self.lists_cache.put(lst.id, info)

    def clear_workspace_cache(self) -> None:
        self.workspaces_cache.clear()
        self._all_workspaces_loaded = False

    def clear_list_cache(self) -> None:
        self.lists_cache.clear()
