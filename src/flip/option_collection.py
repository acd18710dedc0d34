"""Immutable map of enumeration member to boolean state."""

from __future__ import annotations

from enum import Enum
from typing import Generic, Iterator, TypeVar

from flip.exceptions import ImmutabilityError, InvalidTypeError, TypeMismatchError
from flip.policy import coerce_state

E = TypeVar("E", bound=Enum)


def _type_name(enum_type: type) -> str:
    return f"{enum_type.__module__}.{enum_type.__qualname__}"


class OptionCollection(Generic[E]):
    """Boolean state for every member of one enumeration type.

    Only the members mapped to True are stored; everything else reads as
    False. Collections are immutable: `set()` returns a new collection and
    the receiver is left untouched.
    """

    __slots__ = ("_enum_type", "_enabled")

    _enum_type: type[E]
    _enabled: frozenset[str]

    def __init__(self, enum_type: type[E]) -> None:
        if not (isinstance(enum_type, type) and issubclass(enum_type, Enum)):
            raise InvalidTypeError(
                "Type must be an enumeration.",
                type_name=repr(enum_type),
            )
        object.__setattr__(self, "_enum_type", enum_type)
        object.__setattr__(self, "_enabled", frozenset())

    def _replace(self, enabled: frozenset[str]) -> OptionCollection[E]:
        result = object.__new__(type(self))
        object.__setattr__(result, "_enum_type", self._enum_type)
        object.__setattr__(result, "_enabled", enabled)
        return result

    @classmethod
    def create(cls, enum_type: type[E]) -> OptionCollection[E]:
        return cls(enum_type)

    @property
    def enum_type(self) -> type[E]:
        return self._enum_type

    def _is_member(self, member: object) -> bool:
        # Composite Flag values are instances of the type but not listed members.
        if not isinstance(member, self._enum_type):
            return False
        return self._enum_type.__members__.get(member.name) is member

    def _key(self, member: object) -> str:
        if not self._is_member(member):
            raise TypeMismatchError(
                f'Expected a member of the "{_type_name(self._enum_type)}" enumeration.',
                type_name=_type_name(self._enum_type),
                member=member,
            )
        return member.name

    def get(self, member: E) -> bool:
        """Return the state of `member`.

        Raises TypeMismatchError when `member` does not belong to the bound
        enumeration.
        """
        return self._key(member) in self._enabled

    def set(self, member: E, state: object) -> OptionCollection[E]:
        """Return a new collection with the state of `member` changed."""
        key = self._key(member)
        if coerce_state(state, source=f"{_type_name(self._enum_type)}.{key}"):
            enabled = self._enabled | {key}
        else:
            enabled = self._enabled - {key}
        return self._replace(enabled)

    def enabled(self) -> tuple[E, ...]:
        return tuple(member for member in self._enum_type if member.name in self._enabled)

    def __contains__(self, member: object) -> bool:
        return self._is_member(member)

    def __getitem__(self, member: E) -> bool:
        return self.get(member)

    def __setitem__(self, member: E, state: object) -> None:
        raise ImmutabilityError(
            "Option collections are immutable.",
            type_name=_type_name(self._enum_type),
        )

    def __delitem__(self, member: E) -> None:
        raise ImmutabilityError(
            "Option collections are immutable.",
            type_name=_type_name(self._enum_type),
        )

    def __setattr__(self, name: str, value: object) -> None:
        raise ImmutabilityError(
            "Option collections are immutable.",
            type_name=_type_name(self._enum_type),
        )

    def __iter__(self) -> Iterator[tuple[E, bool]]:
        for member in self._enum_type:
            yield member, member.name in self._enabled

    def __len__(self) -> int:
        return len(self._enum_type)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, OptionCollection):
            return NotImplemented
        return self._enum_type is other._enum_type and self._enabled == other._enabled

    def __hash__(self) -> int:
        return hash((self._enum_type, self._enabled))

    def __reduce__(self) -> tuple[object, ...]:
        return (_restore, (type(self), self._enum_type, tuple(sorted(self._enabled))))

    def __repr__(self) -> str:
        enabled = ", ".join(member.name for member in self.enabled())
        return f"OptionCollection[{self._enum_type.__qualname__}]({{{enabled}}})"


def _restore(
    cls: type[OptionCollection[E]], enum_type: type[E], enabled: tuple[str, ...]
) -> OptionCollection[E]:
    return cls(enum_type)._replace(frozenset(enabled))
