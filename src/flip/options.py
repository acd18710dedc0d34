"""Enumeration base class for typed option constants."""

from __future__ import annotations

from enum import Enum
from typing import Mapping, TypeVar

from flip.exceptions import UnknownMemberError
from flip.option_collection import OptionCollection

OptionsT = TypeVar("OptionsT", bound="Options")


class Options(Enum):
    """A set of boolean options declared as enumeration members.

    Subclasses declare one member per option and may override `defaults()`::

        class ParseOptions(Options):
            STRICT = "strict"
            UNICODE = "unicode"

            @classmethod
            def defaults(cls) -> dict[str, bool]:
                return {"unicode": True}
    """

    @classmethod
    def defaults(cls) -> Mapping[object, bool]:
        """Map of option value to default state; empty unless overridden."""
        return {}

    @classmethod
    def _member(cls: type[OptionsT], value: object) -> OptionsT:
        try:
            return cls(value)
        except ValueError:
            raise UnknownMemberError(
                f'The enumeration {cls.__module__}.{cls.__qualname__} has no member with value {value!r}.',
                type_name=f"{cls.__module__}.{cls.__qualname__}",
                member=value,
            ) from None

    @classmethod
    def build(
        cls: type[OptionsT],
        options: Mapping[object, bool],
        defaults: Mapping[object, bool] | None = None,
    ) -> OptionCollection[OptionsT]:
        """Build an OptionCollection from a map of option value to state.

        `defaults` (or `cls.defaults()` when omitted) is applied first, then
        `options` on top of it, each in mapping order.
        """
        result: OptionCollection[OptionsT] = OptionCollection.create(cls)
        if defaults is None:
            defaults = cls.defaults()
        for value, state in defaults.items():
            result = result.set(cls._member(value), state)
        for value, state in options.items():
            result = result.set(cls._member(value), state)
        return result
