from typing import Callable

from zenkit.api import RequestSpec, ZenkitAPIClient, ZenkitEndpoints
from zenkit.cache import EntityCache
from zenkit.types import Access, SharedAccesses, User
from zenkit.utils import instantiate_from_payload, instantiate_many


class DatabaseUsers:
    """Workspace members (cached per workspace) and the current user's accesses."""

    def __init__(self):
        super().__init__()
        if getattr(self, '_api_client', None) is None:
            self._api_client = ZenkitAPIClient(getattr(self, 'settings', None))
        self.users_cache: EntityCache[int, tuple[User, ...]] = EntityCache('workspace users')

    def reset(self):
        self.clear_user_cache()

    def get_users_raw(self, workspace_id: int) -> list[User]:
        """Members of a workspace, always fetched."""
        spec = RequestSpec(endpoint=ZenkitEndpoints.WORKSPACE_USERS.format(workspace_id=workspace_id))
        payload = self._api_client.request_json(spec, operation_name=f"get users of workspace {workspace_id}")
        return instantiate_many(User, payload)

    def get_users(self, workspace_id: int) -> tuple[User, ...]:
        return self.users_cache.get_or_fetch(
            int(workspace_id), lambda: tuple(self.get_users_raw(workspace_id))
        )

    def find_user(self, workspace_id: int, predicate: Callable[[User], bool]) -> User | None:
        return next((user for user in self.get_users(workspace_id) if predicate(user)), None)

    def get_user_id(self, workspace_id: int, name: str) -> int | None:
        """Id of the member whose display name, full name or uuid matches ``name``, ignoring case."""
        lc_name = name.lower()
        user = self.find_user(
            workspace_id,
            lambda u: lc_name in (u.display_name.lower(), u.full_name.lower(), u.uuid.lower()),
        )
        return None if user is None else user.id

    def get_user_accesses(self) -> list[Access]:
        spec = RequestSpec(endpoint=ZenkitEndpoints.USER_ACCESSES)
        payload = self._api_client.request_json(spec, operation_name="get user accesses")
        return instantiate_many(Access, payload)

    def get_shared_accesses(self, user_id: str | int) -> SharedAccesses:
        """Lists and workspaces shared between the current user and ``user_id`` (id, short id or uuid)."""
        spec = RequestSpec(endpoint=ZenkitEndpoints.MATCHING_ACCESSES.format(user_id=user_id))
        payload = self._api_client.request_json(spec, operation_name=f"get shared accesses with {user_id}")
        return instantiate_from_payload(SharedAccesses, payload)

    def clear_user_cache(self) -> None:
        self.users_cache.clear()
