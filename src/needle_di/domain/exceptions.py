from typing import Any, Optional, Sequence, Type


class DIException(Exception):
    """Base exception for DI-related errors."""


class UnresolvableError(DIException):
    """Raised when a required dependency cannot be resolved.

    This occurs when:
    - No registration exists for the requested type anywhere in the container chain.
    - The requested type is an interface with no bound implementation.
    - The type is a singleton registered only below the root container.

    Attributes:
        cls: The class type that could not be resolved.
        reason: Optional reason for the failure.
    """

    def __init__(self, cls: Type, reason: Optional[str] = None) -> None:
        self.cls = cls
        self.reason = reason
        message = f"Cannot resolve dependency for type: {getattr(cls, '__name__', repr(cls))}"
        if reason:
            message += f". Reason: {reason}"
        super().__init__(message)


class ConstructorMismatchError(DIException):
    """Raised when the supplied arguments do not match the constructor of a type.

    Raised at instantiation time, i.e. on first resolution, never at registration.

    Attributes:
        cls: The concrete type that failed to construct.
        args: The arguments that were supplied.
        reason: Description of the mismatch.
    """

    def __init__(self, cls: Type, args: Sequence[Any], reason: str) -> None:
        self.cls = cls
        self.args_supplied = tuple(args)
        self.reason = reason
        super().__init__(
            f"No constructor of {cls.__name__} accepts {len(self.args_supplied)} argument(s). Reason: {reason}"
        )


class RegistrationError(DIException):
    """Raised for invalid registrations.

    This occurs when:
    - An implementation does not satisfy the interface it is registered under.
    - The registered object is not a class.
    """


class InjectionError(DIException):
    """Raised when an injection target cannot be declared or assigned.

    This occurs when:
    - The member has neither an explicit type nor an evaluable annotation.
    - The instance has no ``__dict__`` (classes using ``__slots__``).

    Attributes:
        owner: The class declaring the member.
        name: The member name.
        reason: Description of the failure.
    """

    def __init__(self, owner: Type, name: str, reason: str) -> None:
        self.owner = owner
        self.name = name
        self.reason = reason
        super().__init__(f"Cannot inject '{owner.__name__}.{name}'. Reason: {reason}")
