from typing import Any, Callable, Optional, Sequence, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field, field_validator

from needle_di.domain.enums import Lifetime


def coerce_args(value: Optional[Sequence[Any]]) -> Optional[Tuple[Any, ...]]:
    """Normalize constructor arguments to a tuple, keeping None as "not given".

    Raises:
        ValueError: If ``value`` is a string or bytes, which would otherwise be
            split into single characters.
    """
    if value is None or isinstance(value, tuple):
        return value
    if isinstance(value, (str, bytes)):
        raise ValueError("args must be a sequence of constructor arguments, not a string")
    return tuple(value)


class TypeDefinition(BaseModel):
    """Value object describing how a concrete type is provided at one container level.

    Attributes:
        lifetime: How instances of the type are reused.
        args: Stored constructor arguments, or None when none were given.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    lifetime: Lifetime = Field(default=Lifetime.TRANSIENT, description="The lifetime of the registered type.")
    args: Optional[Tuple[Any, ...]] = Field(
        default=None,
        description="Positional constructor arguments stored at registration time.",
    )

    @field_validator("args", mode="before")
    @classmethod
    def _coerce_args(cls, value: Any) -> Any:
        return coerce_args(value)


class DependencyMarker(BaseModel):
    """Per-type lifetime tag consumed by auto-registration."""

    model_config = ConfigDict(frozen=True)

    lifetime: Lifetime = Field(default=Lifetime.TRANSIENT, description="The lifetime to register the type with.")


class InjectionSlot(BaseModel):
    """A member of a type that the container populates after construction.

    Attributes:
        name: Attribute name of the member.
        dependency_type: The type resolved for the member.
        assign: Privileged setter, called as ``assign(instance, value)``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str = Field(..., description="Attribute name of the injection target.")
    dependency_type: Type = Field(..., description="The type resolved and injected into the member.")
    assign: Callable[[Any, Any], None] = Field(..., description="Setter used by the container.")
