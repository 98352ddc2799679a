"""Application layer - Registration driven by ``@dependency`` markers."""

import logging
from types import ModuleType
from typing import TYPE_CHECKING, Any, Iterable, List, Mapping, Tuple, Type, Union

from needle_di.domain import Lifetime, get_dependency_marker

if TYPE_CHECKING:
    from needle_di.application.container import DIContainer

logger = logging.getLogger(__name__)

Source = Union[ModuleType, Mapping[str, Any], type]


class AutoRegistrar:
    """Finds marked classes and registers them with their declared lifetime.

    Sources may be modules, namespaces (e.g. ``globals()``) or classes. Types
    are registered without interface binding or stored arguments, and their
    constructors are not checked until they are first resolved.
    """

    def collect(self, *sources: Source) -> List[Tuple[Type, Lifetime]]:
        """Return ``(type, lifetime)`` pairs for every marked class in ``sources``.

        Each class appears once, in the order it is first found.
        """
        found: List[Tuple[Type, Lifetime]] = []
        seen = set()
        for candidate in self._candidates(sources):
            marker = get_dependency_marker(candidate)
            if marker is None or candidate in seen:
                continue
            seen.add(candidate)
            found.append((candidate, marker.lifetime))
        return found

    def register_all(self, node: "DIContainer", *sources: Source) -> int:
        """Register every marked class of ``sources`` at ``node``.

        Returns:
            Number of types newly registered (duplicates are ignored).
        """
        registered = 0
        for dependency_type, lifetime in self.collect(*sources):
            if node.type_store.register(dependency_type, lifetime):
                registered += 1
        logger.debug("Auto-registered %d type(s)", registered)
        return registered

    @staticmethod
    def _candidates(sources: Iterable[Source]) -> Iterable[Any]:
        for source in sources:
            if isinstance(source, type):
                yield source
            elif isinstance(source, ModuleType):
                yield from vars(source).values()
            elif isinstance(source, Mapping):
                yield from source.values()
            else:
                raise TypeError(f"Cannot scan {source!r} for dependencies; expected a module, mapping or class")
