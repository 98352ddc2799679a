from enum import Enum


class Lifetime(str, Enum):
    """Defines how instances of a registered type are reused.

    Attributes:
        TRANSIENT: New instance created on each resolution.
        SCOPED: One instance per branch of the container tree, owned by the
            first container that creates it.
        SINGLETON: Single instance for the whole tree, anchored at the root.
    """

    TRANSIENT = "transient"
    SCOPED = "scoped"
    SINGLETON = "singleton"

    def __str__(self) -> str:
        return self.value
