"""Type-level metadata consumed by the container.

Two markers exist:

- ``@dependency(lifetime)`` tags a class with the lifetime auto-registration uses.
- ``Inject`` declares an injection target, populated after construction.
"""

import sys
from typing import Any, Callable, Dict, ForwardRef, Generic, List, Optional, Type, TypeVar, Union

from needle_di.domain.enums import Lifetime
from needle_di.domain.exceptions import InjectionError
from needle_di.domain.models import DependencyMarker, InjectionSlot

T = TypeVar("T")
C = TypeVar("C", bound=type)

MARKER_ATTRIBUTE = "__di_dependency__"


def dependency(lifetime: Union[Lifetime, str] = Lifetime.TRANSIENT) -> Callable[[C], C]:
    """Tag a class with the lifetime it is auto-registered with.

    Args:
        lifetime: Lifetime used by ``DIContainer.auto_register``.

    Returns:
        A class decorator returning the class unchanged apart from the tag.

    Example:
        >>> @dependency(Lifetime.SCOPED)
        ... class UnitOfWork:
        ...     pass
    """
    marker = DependencyMarker(lifetime=lifetime)

    def decorator(cls: C) -> C:
        setattr(cls, MARKER_ATTRIBUTE, marker)
        return cls

    return decorator


def get_dependency_marker(cls: Any) -> Optional[DependencyMarker]:
    """Return the lifetime tag declared on ``cls`` itself, ignoring base classes."""
    if not isinstance(cls, type):
        return None
    marker = cls.__dict__.get(MARKER_ATTRIBUTE)
    return marker if isinstance(marker, DependencyMarker) else None


class Inject(Generic[T]):
    """Descriptor declaring an injection target.

    The member is read-only to normal code: only the container assigns it,
    through ``inject``. Reading it before injection raises ``AttributeError``.

    Example:
        >>> class ReportService:
        ...     repository = Inject(ReportRepository)
        ...     clock: Clock = Inject()
    """

    def __init__(self, dependency_type: Optional[Type[T]] = None) -> None:
        self._dependency_type = dependency_type
        self.name: Optional[str] = None
        self.owner: Optional[type] = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.owner = owner
        self.name = name

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        if instance is None:
            return self
        try:
            return instance.__dict__[self.name]
        except KeyError:
            raise AttributeError(
                f"'{type(instance).__name__}.{self.name}' has not been injected; "
                "resolve the instance through a container"
            ) from None

    def __set__(self, instance: Any, value: Any) -> None:
        raise AttributeError(f"'{type(instance).__name__}.{self.name}' is an injected member and is read-only")

    def inject(self, instance: Any, value: Any) -> None:
        """Assign the resolved dependency, bypassing the read-only guard.

        Raises:
            InjectionError: If the instance has no ``__dict__``; classes declaring
                ``__slots__`` cannot hold injected members.
        """
        try:
            namespace = instance.__dict__
        except AttributeError:
            raise InjectionError(
                type(instance), self.name, "instances without a __dict__ (e.g. __slots__ classes) cannot be injected"
            ) from None
        namespace[self.name] = value

    @property
    def dependency_type(self) -> Type[T]:
        """The declared dependency type, falling back to the attribute annotation.

        Only this member's annotation is evaluated, in the namespace of the
        module declaring the class, so unrelated annotations (for instance ones
        importing names under ``TYPE_CHECKING``) never take part.

        Raises:
            InjectionError: If there is no type, or the annotation cannot be evaluated.
        """
        if self._dependency_type is not None:
            return self._dependency_type

        annotation = _member_annotation(self.owner, self.name)
        if annotation is None:
            raise InjectionError(self.owner, self.name, "needs an explicit type or an annotation")
        if not isinstance(annotation, str):
            return annotation

        module = sys.modules.get(self.owner.__module__)
        module_globals = vars(module) if module is not None else {}
        try:
            return eval(annotation, module_globals, dict(vars(self.owner)))
        except (NameError, AttributeError, SyntaxError, TypeError) as e:
            raise InjectionError(
                self.owner, self.name, f"annotation {annotation!r} cannot be evaluated: {e}"
            ) from e


def _member_annotation(owner: type, name: str) -> Any:
    """Return the unevaluated annotation of ``owner.name``, or None."""
    if sys.version_info >= (3, 14):
        import annotationlib

        annotations = annotationlib.get_annotations(owner, format=annotationlib.Format.FORWARDREF)
    else:
        annotations = owner.__dict__.get("__annotations__", {})

    annotation = annotations.get(name)
    if isinstance(annotation, ForwardRef):
        return annotation.__forward_arg__
    return annotation


def injection_slots(cls: type) -> List[InjectionSlot]:
    """Collect the injection targets of ``cls`` in declaration order.

    Base class members come first; a subclass redeclaring a member by name
    replaces the base declaration in place.
    """
    descriptors: Dict[str, Inject] = {}
    for klass in reversed(cls.__mro__):
        for name, value in vars(klass).items():
            if isinstance(value, Inject):
                descriptors[name] = value
            else:
                descriptors.pop(name, None)

    return [
        InjectionSlot(name=name, dependency_type=descriptor.dependency_type, assign=descriptor.inject)
        for name, descriptor in descriptors.items()
    ]
