"""Application layer - Per-node cache of constructed instances."""

from typing import Any, Dict, Optional, Type


class InstanceCache:
    """Append-only mapping from concrete type to the instance a node created.

    Entries are never evicted or replaced for the lifetime of the owning node.
    """

    def __init__(self) -> None:
        self._instances: Dict[Type, Any] = {}

    def get(self, concrete_type: Type) -> Optional[Any]:
        """Return the cached instance of ``concrete_type``, or None."""
        return self._instances.get(concrete_type)

    def add(self, concrete_type: Type, instance: Any) -> None:
        """Cache ``instance`` under ``concrete_type``.

        Raises:
            KeyError: If an instance is already cached for the type.
        """
        if concrete_type in self._instances:
            raise KeyError(f"An instance of {concrete_type.__name__} is already cached")
        self._instances[concrete_type] = instance

    def __contains__(self, concrete_type: object) -> bool:
        return concrete_type in self._instances

    def __len__(self) -> int:
        return len(self._instances)
