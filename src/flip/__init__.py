"""flip package root."""

from flip.exceptions import (
    DefinitionError,
    FlagValueError,
    FlipError,
    ImmutabilityError,
    InvalidTypeError,
    TypeMismatchError,
    UnknownFieldError,
    UnknownMemberError,
)
from flip.field_set import FlagSet, OptionSet
from flip.option_collection import OptionCollection
from flip.options import Options
from flip.policy import BoolPolicy, bool_policy_scope

__all__ = [
    "__version__",
    "BoolPolicy",
    "DefinitionError",
    "FlagSet",
    "FlagValueError",
    "FlipError",
    "ImmutabilityError",
    "InvalidTypeError",
    "OptionCollection",
    "OptionSet",
    "Options",
    "TypeMismatchError",
    "UnknownFieldError",
    "UnknownMemberError",
    "bool_policy_scope",
]

__version__ = "0.1.0"
