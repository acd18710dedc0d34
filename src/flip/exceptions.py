"""Error protocol for flip value objects."""

from __future__ import annotations


class FlipError(Exception):
    """Base class for every contract violation raised by flip.

    These are programmer errors: a malformed declaration or a call that breaks
    the value-object contract. None of them is transient, so nothing in flip
    retries or recovers from them.
    """

    def __init__(self, message: str, *, type_name: str = "") -> None:
        super().__init__(message)
        self.type_name = type_name

    @property
    def payload_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "error": type(self).__name__,
            "message": str(self),
            "type_name": self.type_name,
        }
        for key in ("field_name", "member"):
            value = getattr(self, key, None)
            if value is not None:
                payload[key] = value if isinstance(value, str) else repr(value)
        return payload


class DefinitionError(FlipError, TypeError):
    """A field-set class declares a malformed shape."""

    def __init__(self, message: str, *, type_name: str, field_name: str) -> None:
        super().__init__(message, type_name=type_name)
        self.field_name = field_name


class UnknownFieldError(FlipError, AttributeError):
    """A read or fluent update named a field outside the declared shape."""

    def __init__(self, message: str, *, type_name: str, field_name: str) -> None:
        super().__init__(message, type_name=type_name)
        self.field_name = field_name
        self.name = field_name


class ImmutabilityError(FlipError, AttributeError, TypeError):
    """A direct write or delete was attempted on an immutable value.

    An AttributeError like `dataclasses.FrozenInstanceError`, so attribute
    probes such as `typing`'s `__orig_class__` assignment tolerate it; also a
    TypeError like item assignment on a tuple.
    """


class InvalidTypeError(FlipError, TypeError):
    """An option collection was bound to something that is not an enumeration."""


class TypeMismatchError(FlipError, TypeError):
    """A value does not belong to the type an operation is bound to."""

    def __init__(self, message: str, *, type_name: str, member: object = None) -> None:
        super().__init__(message, type_name=type_name)
        self.member = member


class FlagValueError(FlipError, TypeError):
    """A non-boolean state was supplied while the strict bool policy is active."""

    def __init__(self, message: str, *, source: str, value: object) -> None:
        super().__init__(message)
        self.source = source
        self.value = value


class UnknownMemberError(FlipError, ValueError):
    """An options mapping referenced a value that is not an enumeration member."""

    def __init__(self, message: str, *, type_name: str, member: object) -> None:
        super().__init__(message, type_name=type_name)
        self.member = member
