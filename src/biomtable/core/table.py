from __future__ import annotations

import enum
import logging
from copy import deepcopy
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Final, Literal

import numpy as np
from typing_extensions import Self

from biomtable.defaults import FORMAT, FORMAT_URL, GENERATED_BY
from biomtable.enums import MatrixElementType, MatrixType, TableType
from biomtable.exceptions import ConsistencyError, FieldTypeError, MatrixStructureError

from .fields import (
    ValidatedField,
    check_optional_text,
    check_sequence,
    check_shape,
    check_text,
    check_vocabulary,
    is_sequence,
)
from .matrix import Matrix
from .utils import load_bytes, to_bytes

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from .types import BiomTableConfig, BiomTableDict

logger = logging.getLogger(__name__)


class _Unset(enum.Enum):
    UNSET = enum.auto()


_UNSET: Final = _Unset.UNSET

FIELD_NAMES: Final[tuple[str, ...]] = (
    "id",
    "format",
    "format_url",
    "type",
    "generated_by",
    "date",
    "rows",
    "columns",
    "matrix_type",
    "matrix_element_type",
    "shape",
    "data",
    "comment",
)
"""Recognized options of a table configuration, in assignment order."""


def now_iso() -> str:
    """Return the current UTC time as an ISO-8601 string, e.g. 2016-05-12T09:12:34.567Z."""
    stamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def _as_list(value: Any) -> Any:  # noqa: ANN401
    """Convert nested sequences into nested lists of python scalars."""
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    if is_sequence(value):
        return [_as_list(v) for v in value]
    return value


class BiomTable:
    """A Biological Observation Matrix table.

    Every field is validated when the table is built and again on every later
    assignment. A rejected assignment raises and leaves the previous value in place.
    Fields are validated independently of each other; use :meth:`check_consistency`
    to compare ``rows``, ``columns`` and ``data`` against ``shape``.

    Parameters
    ----------
    id: str | None, optional
        A field that can be used to identify the table.
    format: str, optional
        The name and version of the BIOM format.
    format_url: str, optional
        A static URL providing format details. Not checked to be a URL.
    type: TableType | str, optional
        Table type, part of :class:`~biomtable.enums.TableType`.
    generated_by: str, optional
        Package and revision that built the table.
    date: str | None, optional
        Date the table was built, in ISO-8601 format. Not checked to be a date. If
        None, the current time is used.
    rows: Sequence[Any], optional
        An ordered list of objects describing the rows (observations).
    columns: Sequence[Any], optional
        An ordered list of objects describing the columns (samples).
    matrix_type: MatrixType | str, optional
        Encoding of `data`, part of :class:`~biomtable.enums.MatrixType`.
    matrix_element_type: MatrixElementType | str, optional
        Value type of the matrix, part of :class:`~biomtable.enums.MatrixElementType`.
    shape: Sequence[int], optional
        Number of rows and number of columns of the matrix.
    data: Sequence[Any], optional
        ``[row, column, value]`` triples when sparse, rows of values when dense.
    comment: str | None, optional
        Free text.

    Raises
    ------
    FieldTypeError
        If a value has the wrong type for its field.
    VocabularyError
        If an enumerated field gets a value outside its vocabulary.
    ShapeArityError
        If `shape` does not have exactly two elements.
    ShapeDomainError
        If `shape` holds something other than non-negative integers.

    Examples
    --------
    .. code-block:: python

        >>> table = BiomTable(
        ...     shape=(2, 3),
        ...     rows=[{"id": "OTU_1"}, {"id": "OTU_2"}],
        ...     columns=[{"id": "S1"}, {"id": "S2"}, {"id": "S3"}],
        ...     data=[[0, 1, 5.0], [1, 2, 3.0]],
        ... )
        >>> table.type == "OTU table"
        True
        >>> table.type = "Gene table"
        >>> table.matrix.get(1, 2)
        3.0
    """

    id = ValidatedField(
        check_optional_text,
        "A field that can be used to identify the table, or None.",
    )
    format = ValidatedField(check_text, "The name and version of the BIOM format.")
    format_url = ValidatedField(
        check_text,
        "A static URL providing format details (not checked to be a URL).",
    )
    type = ValidatedField(
        check_vocabulary(TableType),
        "Table type, part of the controlled vocabulary of TableType.",
    )
    generated_by = ValidatedField(
        check_text,
        "Package and revision that built the table.",
    )
    date = ValidatedField(
        check_text,
        "Date the table was built, ISO-8601 (not checked to be a date).",
    )
    rows = ValidatedField(
        check_sequence,
        "An ordered list of objects describing the rows.",
    )
    columns = ValidatedField(
        check_sequence,
        "An ordered list of objects describing the columns.",
    )
    matrix_type = ValidatedField(
        check_vocabulary(MatrixType),
        "Encoding of data, 'sparse' or 'dense'.",
    )
    matrix_element_type = ValidatedField(
        check_vocabulary(MatrixElementType),
        "Value type of the matrix, 'int', 'float' or 'unicode'.",
    )
    shape = ValidatedField(
        check_shape,
        "Number of rows and number of columns of the matrix.",
    )
    data = ValidatedField(
        check_sequence,
        "Sparse [row, column, value] triples or dense rows, following matrix_type.",
    )
    comment = ValidatedField(check_optional_text, "Free text, or None.")

    def __init__(  # noqa: PLR0913
        self,
        *,
        id: str | None = None,  # noqa: A002
        format: str = FORMAT,  # noqa: A002
        format_url: str = FORMAT_URL,
        type: TableType | str = TableType.OTU,  # noqa: A002
        generated_by: str = GENERATED_BY,
        date: str | None = None,
        rows: Sequence[Any] | Literal[_Unset.UNSET] = _UNSET,
        columns: Sequence[Any] | Literal[_Unset.UNSET] = _UNSET,
        matrix_type: MatrixType | str = MatrixType.SPARSE,
        matrix_element_type: MatrixElementType | str = MatrixElementType.FLOAT,
        shape: Sequence[int] = (0, 0),
        data: Sequence[Any] | Literal[_Unset.UNSET] = _UNSET,
        comment: str | None = None,
    ) -> None:
        self.id = id
        self.format = format
        self.format_url = format_url
        self.type = type
        self.generated_by = generated_by
        if date is None:
            date = now_iso()
            logger.debug("No date given, stamping table with %s", date)
        self.date = date
        self.rows = [] if rows is _UNSET else rows
        self.columns = [] if columns is _UNSET else columns
        self.matrix_type = matrix_type
        self.matrix_element_type = matrix_element_type
        self.shape = shape
        self.data = [] if data is _UNSET else data
        self.comment = comment

    @classmethod
    def from_dict(cls, config: BiomTableConfig | Mapping[str, Any]) -> Self:
        """Create a table from a configuration mapping.

        Parameters
        ----------
        config: BiomTableConfig | Mapping[str, Any]
            Any subset of the recognized options (see :data:`FIELD_NAMES`). Omitted
            options take their default value; unrecognized keys are ignored.

        Returns
        -------
        BiomTable
            The created table.
        """
        ignored = sorted(str(key) for key in config if key not in FIELD_NAMES)
        if ignored:
            logger.warning("Ignoring unrecognized table options: %s", ignored)
        return cls(**{key: config[key] for key in FIELD_NAMES if key in config})

    @classmethod
    def from_matrix(cls, matrix: Matrix, **options: Any) -> Self:  # noqa: ANN401
        """Create a table whose ``matrix_type``, ``shape`` and ``data`` come from `matrix`.

        Parameters
        ----------
        matrix: Matrix
            The matrix payload.
        **options: Any
            Any other recognized option.
        """
        table = cls(**options)
        table.set_matrix(matrix)
        return table

    @classmethod
    def from_bytes(cls, byte_data: bytes) -> Self:
        """Deserialize a table from bytes produced by :meth:`to_bytes`."""
        return cls.from_dict(load_bytes(byte_data))

    def to_dict(self) -> BiomTableDict:
        """Convert the table to its wire representation.

        Enumerated fields become their textual value and sequences become lists, so
        the result can be handed to a JSON encoder as is.
        """
        return {
            "id": self.id,
            "format": self.format,
            "format_url": self.format_url,
            "type": self.type.value,
            "generated_by": self.generated_by,
            "date": self.date,
            "rows": _as_list(self.rows),
            "columns": _as_list(self.columns),
            "matrix_type": self.matrix_type.value,
            "matrix_element_type": self.matrix_element_type.value,
            "shape": _as_list(self.shape),
            "data": _as_list(self.data),
            "comment": self.comment,
        }

    def to_bytes(self, level: int = 6) -> bytes:
        """Serialize the table to zstd-compressed bytes.

        Parameters
        ----------
        level: int, optional
            The compression level for zstd (default is 6).
        """
        return to_bytes(self.to_dict(), level=level)

    @property
    def matrix(self) -> Matrix:
        """The payload as a :class:`~biomtable.core.matrix.Matrix`.

        Built from the current ``matrix_type``, ``data`` and ``shape`` on every access.

        Raises
        ------
        MatrixStructureError
            If ``data`` does not fit ``matrix_type`` and ``shape``.
        """
        return Matrix.from_data(self.matrix_type, self.data, self.shape)

    def set_matrix(self, matrix: Matrix) -> None:
        """Replace ``matrix_type``, ``shape`` and ``data`` with those of `matrix`."""
        if not isinstance(matrix, Matrix):
            msg = f"matrix must be a Matrix, got {type(matrix).__name__}"
            raise FieldTypeError(msg)
        self.matrix_type = matrix.matrix_type
        self.shape = matrix.shape
        self.data = matrix.to_data()

    def convert(self, matrix_type: MatrixType | str) -> None:
        """Re-encode ``data`` as sparse or dense in place.

        Values a sparse payload does not list become the fill value of
        ``matrix_element_type`` (0, 0.0 or the empty string).
        """
        target = MatrixType.parse(matrix_type, field="matrix_type")
        if target is self.matrix_type:
            return
        matrix = self.matrix
        if target is MatrixType.DENSE:
            matrix = matrix.to_dense(fill_value=self.matrix_element_type.fill_value)
        else:
            matrix = matrix.to_sparse()
        self.set_matrix(matrix)

    def to_array(self) -> np.ndarray:
        """Materialize the payload as a 2D numpy array typed by ``matrix_element_type``."""
        element_type = self.matrix_element_type
        return self.matrix.to_array(
            dtype=element_type.dtype,
            fill_value=element_type.fill_value,
        )

    def consistency_errors(self) -> list[str]:
        """Return the disagreements between ``shape`` and the other fields."""
        errors = []
        n_rows, n_cols = self.shape
        if len(self.rows) != n_rows:
            errors.append(
                f"rows has {len(self.rows)} entries, but shape requires {n_rows}",
            )
        if len(self.columns) != n_cols:
            errors.append(
                f"columns has {len(self.columns)} entries, but shape requires {n_cols}",
            )
        try:
            Matrix.from_data(self.matrix_type, self.data, self.shape)
        except MatrixStructureError as err:
            errors.append(str(err))
        return errors

    def is_consistent(self) -> bool:
        """Return True if ``rows``, ``columns`` and ``data`` agree with ``shape``."""
        return not self.consistency_errors()

    def check_consistency(self) -> None:
        """Raise if ``rows``, ``columns`` or ``data`` disagree with ``shape``.

        Raises
        ------
        ConsistencyError
            Listing every disagreement found.
        """
        errors = self.consistency_errors()
        if errors:
            logger.debug("Table %r failed consistency check: %s", self.id, errors)
            msg = "Inconsistent BIOM table: " + "; ".join(errors)
            raise ConsistencyError(msg)

    def copy(self) -> Self:
        """Create a deep copy of the table."""
        return deepcopy(self)

    def __eq__(self, other: object) -> bool:
        """Compare tables field by field in their wire representation."""
        if not isinstance(other, BiomTable):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        """Return a string representation of the table."""
        return (
            f"<{self.__class__.__name__} {self.type.value!r} id={self.id!r} "
            f"with shape {tuple(self.shape)}, {self.matrix_type.value} "
            f"{self.matrix_element_type.value}>"
        )
