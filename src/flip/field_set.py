"""Option-sets and flag-sets: immutable records over a closed set of named booleans.

A concrete set is declared by subclassing `OptionSet` or `FlagSet` and listing
private boolean class attributes::

    class SearchFlags(FlagSet):
        _case_sensitive = False
        _whole_word = False
        _regex = True

The leading underscore keeps the declaration private; the public field name
drops it (`case_sensitive`). The shape of each concrete class is discovered and
validated once, on first use, and cached for the life of the process.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import update_wrapper
from types import MappingProxyType, MethodType
from typing import Callable, Mapping, TypeVar

from flip.exceptions import (
    DefinitionError,
    ImmutabilityError,
    TypeMismatchError,
    UnknownFieldError,
)
from flip.policy import coerce_state

logger = logging.getLogger(__name__)

SetT = TypeVar("SetT", bound="OptionSet")

RESERVED_NAMES: frozenset[str] = frozenset(
    {
        "defaults",
        "all",
        "none",
        "diff",
        "symmetric_diff",
        "intersect",
        "union",
        "inverse",
        "with_flag",
    }
)


@dataclass(frozen=True)
class FieldShape:
    names: tuple[str, ...]
    defaults: tuple[bool, ...]
    index: Mapping[str, int]

    @classmethod
    def from_fields(cls, fields: Mapping[str, bool]) -> FieldShape:
        names = tuple(fields)
        return cls(
            names=names,
            defaults=tuple(fields[name] for name in names),
            index=MappingProxyType({name: position for position, name in enumerate(names)}),
        )


# Per concrete class. Values are immutable, so a duplicate computation under a
# race is discarded by setdefault and never observed half-built.
_SHAPES: dict[type, FieldShape] = {}
_SINGLETONS: dict[tuple[type, str], "OptionSet"] = {}


def _type_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def _is_field_candidate(name: str, value: object) -> bool:
    if name.startswith("__") and name.endswith("__"):
        return False
    # Functions, classmethods, staticmethods, properties and slot descriptors.
    if callable(value) or hasattr(type(value), "__get__"):
        return False
    return True


def _declared_fields(cls: type) -> dict[str, object]:
    declared: dict[str, object] = {}
    for klass in reversed(cls.__mro__):
        if klass is object or klass in _LIBRARY_BASES:
            continue
        for name, value in vars(klass).items():
            if _is_field_candidate(name, value):
                declared[name] = value
    return declared


def _defined_on(cls: type, name: str) -> bool:
    lineage = (*cls.__mro__, *type(cls).__mro__)
    return any(name in vars(klass) for klass in lineage)


def _library_noun(cls: type) -> str:
    # Read from the library base; a malformed subclass may shadow `_noun`.
    return FlagSet._noun if issubclass(cls, FlagSet) else OptionSet._noun


def _shadows_library(attribute: str) -> bool:
    return any(attribute in vars(base) for base in _LIBRARY_BASES)


def _discover_shape(cls: type[OptionSet]) -> FieldShape:
    noun = _library_noun(cls)
    fields: dict[str, bool] = {}
    for attribute, value in _declared_fields(cls).items():
        if not attribute.startswith("_"):
            raise DefinitionError(
                f'The {noun} {_type_name(cls)} declares non-private field "{attribute}". '
                "All fields must be private with boolean values.",
                type_name=_type_name(cls),
                field_name=attribute,
            )
        name = attribute[1:]
        if _shadows_library(attribute):
            raise DefinitionError(
                f'The {noun} {_type_name(cls)} declares field with reserved name "{name}".',
                type_name=_type_name(cls),
                field_name=name,
            )
        if not isinstance(value, bool):
            raise DefinitionError(
                f'The {noun} {_type_name(cls)} declares non-boolean field "{name}". '
                "All fields must be private with boolean values.",
                type_name=_type_name(cls),
                field_name=name,
            )
        if not name or name in RESERVED_NAMES or _defined_on(cls, name):
            raise DefinitionError(
                f'The {noun} {_type_name(cls)} declares field with reserved name "{name}".',
                type_name=_type_name(cls),
                field_name=name,
            )
        fields[name] = value
    return FieldShape.from_fields(fields)


def shape_of(cls: type[OptionSet]) -> FieldShape:
    """Return the validated shape of `cls`, discovering it on first use."""
    shape = _SHAPES.get(cls)
    if shape is None:
        shape = _SHAPES.setdefault(cls, _discover_shape(cls))
        logger.debug("cached %s shape %s: %s", cls._noun, _type_name(cls), shape.names)
    return shape


class _hybridmethod:
    """Bind to the instance when called on one, otherwise to the class."""

    def __init__(self, func: Callable[..., object]) -> None:
        self.__func__ = func
        update_wrapper(self, func)

    def __get__(self, instance: object, owner: type) -> MethodType:
        return MethodType(self.__func__, owner if instance is None else instance)


class FieldSetMeta(type):
    """Expose `Cls.<field>(value=True)` as a constructor starting from defaults.

    Looking up a public name on the class validates its shape first, so on a
    malformed class the lookup raises `DefinitionError` rather than
    `AttributeError`. `hasattr(Cls, name)` propagates that error.
    """

    def __getattr__(cls, name: str) -> Callable[..., OptionSet]:
        if name.startswith("_"):
            raise AttributeError(name)
        cls._field_index(name)

        def constructor(value: object = True) -> OptionSet:
            return cls.with_flag(name, value)

        constructor.__name__ = name
        constructor.__qualname__ = f"{cls.__qualname__}.{name}"
        return constructor


class OptionSet(metaclass=FieldSetMeta):
    """Immutable value object holding one boolean per declared option.

    Instances are created only through `defaults()`, `all()`, `none()`,
    `with_flag()` and the per-field class constructors; every change yields a
    new instance.
    """

    __slots__ = ("_values",)

    _noun = "option-set"
    _field_noun = "an option"

    _values: tuple[bool, ...]

    def __init__(self, *args: object, **kwargs: object) -> None:
        raise TypeError(
            f"{_type_name(type(self))} instances are created through "
            "defaults(), all(), none() or with_flag()."
        )

    @classmethod
    def _from_values(cls: type[SetT], values: tuple[bool, ...]) -> SetT:
        instance = object.__new__(cls)
        object.__setattr__(instance, "_values", values)
        return instance

    @classmethod
    def _unknown_field(cls, name: str) -> UnknownFieldError:
        return UnknownFieldError(
            f'The {cls._noun} {_type_name(cls)} does not have {cls._field_noun} named "{name}".',
            type_name=_type_name(cls),
            field_name=name,
        )

    @classmethod
    def _field_index(cls, name: str) -> int:
        index = shape_of(cls).index.get(name)
        if index is None:
            raise cls._unknown_field(name)
        return index

    @classmethod
    def _singleton(
        cls: type[SetT],
        kind: str,
        build: Callable[[FieldShape], tuple[bool, ...]],
    ) -> SetT:
        key = (cls, kind)
        cached = _SINGLETONS.get(key)
        if cached is None:
            instance = cls._from_values(build(shape_of(cls)))
            cached = _SINGLETONS.setdefault(key, instance)
            logger.debug("cached %s.%s() = %s", _type_name(cls), kind, cached)
        return cached  # type: ignore[return-value]

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return shape_of(cls).names

    @classmethod
    def defaults(cls: type[SetT]) -> SetT:
        """Every field at its declared default."""
        return cls._singleton("defaults", lambda shape: shape.defaults)

    @classmethod
    def all(cls: type[SetT]) -> SetT:
        """Every field set to True."""
        return cls._singleton("all", lambda shape: (True,) * len(shape.names))

    @classmethod
    def none(cls: type[SetT]) -> SetT:
        """Every field set to False."""
        return cls._singleton("none", lambda shape: (False,) * len(shape.names))

    @_hybridmethod
    def with_flag(target: OptionSet | type[OptionSet], name: str, value: object = True) -> OptionSet:
        """Return a copy with a single field changed.

        Called on the class the copy starts from `defaults()`; called on an
        instance it starts from that instance. Calling without a value sets the
        field to True.
        """
        cls = target if isinstance(target, type) else type(target)
        index = cls._field_index(name)
        state = coerce_state(value, source=f"{_type_name(cls)}.{name}")
        base = cls.defaults() if isinstance(target, type) else target
        values = list(base._values)
        values[index] = state
        return cls._from_values(tuple(values))

    def as_dict(self) -> dict[str, bool]:
        return dict(zip(shape_of(type(self)).names, self._values))

    def __getattr__(self, name: str) -> bool:
        if name.startswith("_"):
            raise AttributeError(name)
        return self._values[type(self)._field_index(name)]

    def __setattr__(self, name: str, value: object) -> None:
        raise ImmutabilityError(
            f"{self._noun.capitalize()}s are immutable.",
            type_name=_type_name(type(self)),
        )

    def __delattr__(self, name: str) -> None:
        raise ImmutabilityError(
            f"{self._noun.capitalize()}s are immutable.",
            type_name=_type_name(type(self)),
        )

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(shape_of(type(self)).names))

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self._values == other._values

    def __hash__(self) -> int:
        return hash((type(self), self._values))

    def __copy__(self) -> OptionSet:
        return self

    def __deepcopy__(self, memo: dict[int, object]) -> OptionSet:
        return self

    def __reduce__(self) -> tuple[object, ...]:
        return (type(self)._from_values, (self._values,))

    def __str__(self) -> str:
        names = shape_of(type(self)).names
        enabled = [name for name, value in zip(names, self._values) if value]
        return "[" + ", ".join(enabled) + "]"

    def __repr__(self) -> str:
        fields = ", ".join(f"{name}={value}" for name, value in self.as_dict().items())
        return f"{type(self).__qualname__}({fields})"


class FlagSet(OptionSet):
    """An option-set with boolean algebra between instances of the same class.

    ========================  ==========  =======================
    method                    operator    per-field result
    ========================  ==========  =======================
    ``a.diff(b)``             ``a - b``   ``a.f and not b.f``
    ``a.symmetric_diff(b)``   ``a ^ b``   ``a.f != b.f``
    ``a.intersect(b)``        ``a & b``   ``a.f and b.f``
    ``a.union(b)``            ``a | b``   ``a.f or b.f``
    ``a.inverse()``           ``~a``      ``not a.f``
    ========================  ==========  =======================
    """

    __slots__ = ()

    _noun = "flag-set"
    _field_noun = "a flag"

    def _combine(self: SetT, other: SetT, operation: Callable[[bool, bool], bool]) -> SetT:
        if type(other) is not type(self):
            raise TypeMismatchError(
                f'Expected a flag-set of type "{_type_name(type(self))}", '
                f'got "{_type_name(type(other))}".',
                type_name=_type_name(type(self)),
                member=other,
            )
        return type(self)._from_values(
            tuple(operation(mine, theirs) for mine, theirs in zip(self._values, other._values))
        )

    def diff(self: SetT, other: SetT) -> SetT:
        """Flags set in this flag-set and not in `other`."""
        return self._combine(other, lambda mine, theirs: mine and not theirs)

    def symmetric_diff(self: SetT, other: SetT) -> SetT:
        """Flags set in exactly one of the two flag-sets."""
        return self._combine(other, lambda mine, theirs: mine is not theirs)

    def intersect(self: SetT, other: SetT) -> SetT:
        return self._combine(other, lambda mine, theirs: mine and theirs)

    def union(self: SetT, other: SetT) -> SetT:
        return self._combine(other, lambda mine, theirs: mine or theirs)

    def inverse(self: SetT) -> SetT:
        return type(self)._from_values(tuple(not value for value in self._values))

    def __sub__(self, other: object) -> FlagSet:
        if type(other) is not type(self):
            return NotImplemented
        return self.diff(other)

    def __xor__(self, other: object) -> FlagSet:
        if type(other) is not type(self):
            return NotImplemented
        return self.symmetric_diff(other)

    def __and__(self, other: object) -> FlagSet:
        if type(other) is not type(self):
            return NotImplemented
        return self.intersect(other)

    def __or__(self, other: object) -> FlagSet:
        if type(other) is not type(self):
            return NotImplemented
        return self.union(other)

    def __invert__(self) -> FlagSet:
        return self.inverse()


_LIBRARY_BASES: frozenset[type] = frozenset({OptionSet, FlagSet})
