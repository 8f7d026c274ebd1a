import enum
from typing import Any

import numpy as np
from typing_extensions import Self

from biomtable.exceptions import FieldTypeError, VocabularyError


class _Vocabulary(str, enum.Enum):
    """A closed set of permitted textual values for a table field."""

    @classmethod
    def parse(cls, value: Any, field: str | None = None) -> Self:  # noqa: ANN401
        """Map a textual value onto a member of the vocabulary.

        Parameters
        ----------
        value: Any
            The candidate value, either a member or its textual representation.
        field: str | None, optional
            Field name used in error messages.

        Raises
        ------
        FieldTypeError
            If `value` is not a string.
        VocabularyError
            If `value` is not part of the vocabulary.
        """
        name = field or cls.__name__
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            msg = (
                f"{name} must be a string (part of the controlled vocabulary: "
                f"{cls.choices()}), got {type(value).__name__}"
            )
            raise FieldTypeError(msg)
        try:
            return cls(value)
        except ValueError:
            msg = (
                f"{name} must be part of the controlled vocabulary: "
                f"{cls.choices()}, got {value!r}"
            )
            raise VocabularyError(msg) from None

    @classmethod
    def choices(cls) -> tuple[str, ...]:
        """Return the textual values of the vocabulary in declaration order."""
        return tuple(member.value for member in cls)

    def __str__(self) -> str:
        return self.value


@enum.unique
class TableType(_Vocabulary):
    """Kinds of BIOM tables."""

    OTU = "OTU table"
    PATHWAY = "Pathway table"
    FUNCTION = "Function table"
    ORTHOLOG = "Ortholog table"
    GENE = "Gene table"
    METABOLITE = "Metabolite table"
    TAXON = "Taxon table"


@enum.unique
class MatrixType(_Vocabulary):
    """Encodings of the matrix payload."""

    SPARSE = "sparse"
    """Only non-zero values are listed as (row, column, value) triples."""

    DENSE = "dense"
    """Every value is listed, row by row."""


@enum.unique
class MatrixElementType(_Vocabulary):
    """Value types of matrix entries."""

    INT = "int"
    FLOAT = "float"
    UNICODE = "unicode"

    @property
    def dtype(self) -> np.dtype:
        """The numpy dtype used when the matrix is materialized as an array."""
        match self:
            case MatrixElementType.INT:
                return np.dtype(np.int64)
            case MatrixElementType.FLOAT:
                return np.dtype(np.float64)
            case _:
                return np.dtype(object)

    @property
    def fill_value(self) -> int | float | str:
        """The value of an entry a sparse payload does not list."""
        match self:
            case MatrixElementType.INT:
                return 0
            case MatrixElementType.FLOAT:
                return 0.0
            case _:
                return ""
