"""Field validators and the descriptor that runs them on every assignment."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, Generic, TypeVar, overload

import numpy as np

from biomtable.exceptions import FieldTypeError, ShapeArityError, ShapeDomainError

if TYPE_CHECKING:
    from biomtable.enums import _Vocabulary

T = TypeVar("T")

Validator = Callable[[str, Any], T]
"""A validator takes the field name and a candidate value and returns the value to
store, or raises if the candidate is not acceptable."""


def is_sequence(value: Any) -> bool:  # noqa: ANN401
    """Return True for ordered containers other than text.

    numpy arrays count when they have at least one dimension.
    """
    if isinstance(value, np.ndarray):
        return value.ndim >= 1
    return isinstance(value, Sequence) and not isinstance(
        value,
        (str, bytes, bytearray),
    )


def as_index(value: Any) -> int | None:  # noqa: ANN401
    """Return `value` as an int if it is a whole number, else None.

    Python and numpy integers qualify, and so do floats with no fractional part
    (``2.0``), as JSON decoders and float-typed numpy arrays produce them. Booleans
    never qualify.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, np.integer)):
        return int(value)
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return int(value)
    return None


def is_index(value: Any) -> bool:  # noqa: ANN401
    """Return True for whole numbers usable as a row, column or dimension."""
    return as_index(value) is not None


def check_text(name: str, value: Any) -> str:  # noqa: ANN401
    """Accept strings only."""
    if not isinstance(value, str):
        msg = f"{name} must be a string, got {type(value).__name__}"
        raise FieldTypeError(msg)
    return value


def check_optional_text(name: str, value: Any) -> str | None:  # noqa: ANN401
    """Accept strings or None."""
    if value is not None and not isinstance(value, str):
        msg = f"{name} must be a string or None, got {type(value).__name__}"
        raise FieldTypeError(msg)
    return value


def check_sequence(name: str, value: Any) -> Sequence[Any]:  # noqa: ANN401
    """Accept any ordered container. Elements are not inspected."""
    if not is_sequence(value):
        msg = f"{name} must be a sequence, got {type(value).__name__}"
        raise FieldTypeError(msg)
    return value


def check_shape(name: str, value: Any) -> Sequence[int]:  # noqa: ANN401
    """Accept a sequence of exactly two non-negative integers."""
    if not is_sequence(value):
        msg = (
            f"{name} must be a sequence containing exactly two non-negative "
            f"integers, got {type(value).__name__}"
        )
        raise FieldTypeError(msg)
    if len(value) != 2:  # noqa: PLR2004
        msg = f"{name} does not contain exactly two elements, got {len(value)}"
        raise ShapeArityError(msg)
    if not all(is_index(n) and n >= 0 for n in value):
        msg = f"{name} does not contain non-negative integers, got {list(value)!r}"
        raise ShapeDomainError(msg)
    return value


def check_vocabulary(vocabulary: type[_Vocabulary]) -> Validator[Any]:
    """Build a validator that maps text onto members of `vocabulary`."""

    def _check(name: str, value: Any) -> _Vocabulary:  # noqa: ANN401
        return vocabulary.parse(value, field=name)

    return _check


class ValidatedField(Generic[T]):
    """A data descriptor whose every assignment goes through a validator.

    The value is stored on the instance under ``_<name>``. A failed validation
    raises before anything is stored, so the previous value stays in place.

    Parameters
    ----------
    validator: Validator[T]
        Called with the field name and the candidate value.
    doc: str | None, optional
        Docstring of the field.
    """

    def __init__(self, validator: Validator[T], doc: str | None = None) -> None:
        self._validator = validator
        self.__doc__ = doc
        self.name = ""
        self._attr = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        self._attr = f"_{name}"

    @overload
    def __get__(self, instance: None, owner: type | None = None) -> ValidatedField[T]: ...

    @overload
    def __get__(self, instance: object, owner: type | None = None) -> T: ...

    def __get__(
        self,
        instance: object | None,
        owner: type | None = None,
    ) -> T | ValidatedField[T]:
        if instance is None:
            return self
        return getattr(instance, self._attr)

    def __set__(self, instance: object, value: Any) -> None:  # noqa: ANN401
        setattr(instance, self._attr, self.validate(value))

    def validate(self, value: Any) -> T:  # noqa: ANN401
        """Run the validator without storing anything."""
        return self._validator(self.name, value)
