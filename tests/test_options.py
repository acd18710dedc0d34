from __future__ import annotations

import pytest

from flip.exceptions import TypeMismatchError, UnknownMemberError
from flip.option_collection import OptionCollection
from flip.options import Options


class SampleOptions(Options):
    FOO = "foo"
    BAR = "bar"
    BAZ = "baz"
    QUX = "qux"

    @classmethod
    def defaults(cls) -> dict[str, bool]:
        return {
            cls.FOO.value: True,
            cls.BAZ.value: False,
        }


class PlainOptions(Options):
    ONE = 1
    TWO = 2


def test_build_with_class_defaults() -> None:
    expected = OptionCollection.create(SampleOptions).set(SampleOptions.FOO, True)
    assert SampleOptions.build({}) == expected


def test_build_can_override_class_defaults() -> None:
    expected = (
        OptionCollection.create(SampleOptions)
        .set(SampleOptions.BAZ, True)
        .set(SampleOptions.QUX, True)
    )
    assert SampleOptions.build({"foo": False, "baz": True, "qux": True}) == expected


def test_build_with_custom_defaults() -> None:
    expected = OptionCollection.create(SampleOptions).set(SampleOptions.BAR, True)
    assert SampleOptions.build({}, {"bar": True}) == expected


def test_build_can_override_custom_defaults() -> None:
    expected = OptionCollection.create(SampleOptions).set(SampleOptions.FOO, True)
    assert SampleOptions.build({"foo": True, "bar": False}, {"bar": True}) == expected


def test_build_accepts_members_as_keys() -> None:
    result = SampleOptions.build({SampleOptions.QUX: True})
    assert result.enabled() == (SampleOptions.FOO, SampleOptions.QUX)


def test_build_applies_options_in_mapping_order() -> None:
    result = SampleOptions.build({}, {"bar": True, SampleOptions.BAR: False})
    assert result.get(SampleOptions.BAR) is False


def test_build_with_unknown_value() -> None:
    with pytest.raises(UnknownMemberError) as exc_info:
        SampleOptions.build({"nope": True})
    assert exc_info.value.member == "nope"
    assert "has no member with value 'nope'" in str(exc_info.value)
    assert isinstance(exc_info.value, ValueError)


def test_build_rejects_members_of_other_enumerations() -> None:
    with pytest.raises(UnknownMemberError):
        SampleOptions.build({PlainOptions.ONE: True})


def test_build_result_is_bound_to_the_enumeration() -> None:
    result = PlainOptions.build({2: True})
    assert result.enum_type is PlainOptions
    assert list(result) == [(PlainOptions.ONE, False), (PlainOptions.TWO, True)]
    with pytest.raises(TypeMismatchError):
        result.get(SampleOptions.FOO)


def test_defaults() -> None:
    assert Options.defaults() == {}
    assert PlainOptions.defaults() == {}
