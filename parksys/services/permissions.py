"""Authorization hook consulted before an export runs."""

from collections.abc import Iterable, Mapping
from typing import Protocol

from parksys.export.entities import EntityRegistry


class PermissionChecker(Protocol):
    async def check_permission(self, entity: str, actor_id: str | None) -> bool:
        """Return True when ``actor_id`` may export ``entity``."""
        ...


class AllowAllPermissionChecker:
    """Grants every export. Used when no authorization policy is wired in."""

    async def check_permission(self, entity: str, actor_id: str | None) -> bool:
        return True


class CapabilityPermissionChecker:
    """Allows actors holding at least one of an entity's permission tags.

    Entities without permission tags are open to any identified actor.
    """

    def __init__(self, registry: EntityRegistry, grants: Mapping[str, Iterable[str]]) -> None:
        self.registry = registry
        self.grants = {str(actor): frozenset(tags) for actor, tags in grants.items()}

    async def check_permission(self, entity: str, actor_id: str | None) -> bool:
        if actor_id is None:
            return False
        config = self.registry.get(entity)
        if config is None:
            return False
        if not config.permissions:
            return True
        held = self.grants.get(str(actor_id), frozenset())
        return not held.isdisjoint(config.permissions)
