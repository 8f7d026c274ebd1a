import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar

import numpy as np
from jaxtyping import Shaped
from numpy.typing import DTypeLike
from typing_extensions import Self, override

from biomtable.enums import MatrixType
from biomtable.exceptions import MatrixIndexError, MatrixStructureError
from biomtable.utils.typecheck import typecheck

from .fields import as_index, check_shape, is_sequence

logger = logging.getLogger(__name__)


def _plain(value: Any) -> Any:  # noqa: ANN401
    """Unwrap numpy scalars into their python equivalent."""
    if isinstance(value, np.generic):
        return value.item()
    return value


def _is_zero(value: Any) -> bool:  # noqa: ANN401
    return isinstance(value, (int, float, str)) and value in (0, "")


@dataclass(frozen=True, slots=True)
class Matrix(ABC):
    """The numeric payload of a BIOM table.

    A matrix is either a :class:`SparseMatrix` or a :class:`DenseMatrix`. The subclass
    determines :attr:`matrix_type`, so the encoding tag can never disagree with the
    payload.
    """

    shape: tuple[int, int]
    """Number of rows and number of columns."""

    matrix_type: ClassVar[MatrixType]

    @property
    def n_rows(self) -> int:
        """Return the number of rows."""
        return self.shape[0]

    @property
    def n_cols(self) -> int:
        """Return the number of columns."""
        return self.shape[1]

    @property
    @abstractmethod
    def nnz(self) -> int:
        """Return the number of non-zero values."""

    @abstractmethod
    def get(self, row: int, col: int, fill_value: Any = 0) -> Any:  # noqa: ANN401
        """Return the value at (row, col).

        Parameters
        ----------
        row: int
            Zero-based row index.
        col: int
            Zero-based column index.
        fill_value: Any, optional
            Value returned for entries a sparse matrix does not list (default 0).
        """

    @abstractmethod
    def to_data(self) -> list[list[Any]]:
        """Return the payload in its wire representation.

        Triples ``[row, column, value]`` for sparse matrices, rows of values for dense
        matrices.
        """

    @abstractmethod
    def to_array(
        self,
        dtype: DTypeLike = np.float64,
        fill_value: Any = 0,  # noqa: ANN401
    ) -> Shaped[np.ndarray, "n_rows n_cols"]:
        """Materialize the matrix as a 2D numpy array."""

    @abstractmethod
    def to_sparse(self) -> "SparseMatrix":
        """Return the sparse encoding of the matrix."""

    @abstractmethod
    def to_dense(self, fill_value: Any = 0) -> "DenseMatrix":  # noqa: ANN401
        """Return the dense encoding of the matrix."""

    def convert(self, matrix_type: MatrixType | str) -> "Matrix":
        """Return the matrix in the requested encoding."""
        match MatrixType.parse(matrix_type, field="matrix_type"):
            case MatrixType.SPARSE:
                return self.to_sparse()
            case MatrixType.DENSE:
                return self.to_dense()

    @classmethod
    def from_data(
        cls,
        matrix_type: MatrixType | str,
        data: Sequence[Any],
        shape: Sequence[int],
    ) -> "Matrix":
        """Build the matrix a ``matrix_type``/``data``/``shape`` triple describes.

        Parameters
        ----------
        matrix_type: MatrixType | str
            Encoding of `data`.
        data: Sequence[Any]
            Sparse triples or dense rows.
        shape: Sequence[int]
            Number of rows and number of columns.

        Raises
        ------
        MatrixStructureError
            If `data` does not fit the encoding or the shape.
        """
        match MatrixType.parse(matrix_type, field="matrix_type"):
            case MatrixType.SPARSE:
                return SparseMatrix(shape, data)  # pyright: ignore[reportArgumentType]
            case MatrixType.DENSE:
                return DenseMatrix(shape, data)  # pyright: ignore[reportArgumentType]

    def _check_shape(self) -> None:
        shape = check_shape("shape", self.shape)
        object.__setattr__(self, "shape", (int(shape[0]), int(shape[1])))

    def _check_bounds(self, row: int, col: int) -> tuple[int, int]:
        i, j = as_index(row), as_index(col)
        if i is None or j is None:
            msg = f"Matrix indices must be integers, got ({row!r}, {col!r})"
            raise MatrixIndexError(msg)
        if not (0 <= i < self.n_rows and 0 <= j < self.n_cols):
            msg = f"Index ({i}, {j}) is out of bounds for shape {self.shape}"
            raise MatrixIndexError(msg)
        return i, j


@dataclass(frozen=True, slots=True)
class SparseMatrix(Matrix):
    """A matrix listing only its non-zero values.

    Parameters
    ----------
    shape: tuple[int, int]
        Number of rows and number of columns.
    entries: Sequence[Sequence[Any]]
        ``(row, column, value)`` triples with zero-based, in-bounds indices. Each
        coordinate may be listed at most once.
    """

    entries: tuple[tuple[int, int, Any], ...] = ()
    """The listed ``(row, column, value)`` triples, in input order."""

    _lookup: dict[tuple[int, int], Any] = field(
        init=False,
        repr=False,
        compare=False,
        hash=False,
    )

    matrix_type: ClassVar[MatrixType] = MatrixType.SPARSE

    def __post_init__(self) -> None:  # noqa: D105
        self._check_shape()
        if not is_sequence(self.entries):
            msg = f"Sparse data must be a sequence, got {type(self.entries).__name__}"
            raise MatrixStructureError(msg)

        entries = []
        lookup: dict[tuple[int, int], Any] = {}
        for position, entry in enumerate(self.entries):
            if not is_sequence(entry) or len(entry) != 3:  # noqa: PLR2004
                msg = (
                    f"Sparse entry {position} must be a (row, column, value) triple, "
                    f"got {entry!r}"
                )
                raise MatrixStructureError(msg)
            row, col, value = (_plain(x) for x in entry)
            row, col = as_index(row), as_index(col)
            if row is None or col is None:
                msg = f"Sparse entry {position} has non-integer indices: {entry!r}"
                raise MatrixStructureError(msg)
            if not (0 <= row < self.n_rows and 0 <= col < self.n_cols):
                msg = (
                    f"Sparse entry {position} at ({row}, {col}) is out of bounds "
                    f"for shape {self.shape}"
                )
                raise MatrixStructureError(msg)
            if (row, col) in lookup:
                msg = f"Sparse entry {position} repeats coordinate ({row}, {col})"
                raise MatrixStructureError(msg)
            lookup[row, col] = value
            entries.append((row, col, value))

        object.__setattr__(self, "entries", tuple(entries))
        object.__setattr__(self, "_lookup", lookup)

    def __iter__(self) -> Iterator[tuple[int, int, Any]]:
        """Iterate over the listed triples."""
        return iter(self.entries)

    @property
    @override
    def nnz(self) -> int:
        return sum(1 for _, _, value in self.entries if not _is_zero(value))

    @override
    def get(self, row: int, col: int, fill_value: Any = 0) -> Any:
        row, col = self._check_bounds(row, col)
        return self._lookup.get((row, col), fill_value)

    @override
    def to_data(self) -> list[list[Any]]:
        return [[row, col, value] for row, col, value in self.entries]

    @override
    @typecheck
    def to_array(
        self,
        dtype: DTypeLike = np.float64,
        fill_value: Any = 0,
    ) -> Shaped[np.ndarray, "n_rows n_cols"]:
        array = np.full(self.shape, fill_value, dtype=dtype)
        for row, col, value in self.entries:
            array[row, col] = value
        return array

    @override
    def to_sparse(self) -> "SparseMatrix":
        return self

    @override
    def to_dense(self, fill_value: Any = 0) -> "DenseMatrix":
        logger.debug("Converting sparse matrix of shape %s to dense", self.shape)
        rows = [
            [self._lookup.get((i, j), fill_value) for j in range(self.n_cols)]
            for i in range(self.n_rows)
        ]
        return DenseMatrix(self.shape, rows)  # pyright: ignore[reportArgumentType]


@dataclass(frozen=True, slots=True)
class DenseMatrix(Matrix):
    """A matrix listing every value, row by row.

    Parameters
    ----------
    shape: tuple[int, int]
        Number of rows and number of columns.
    rows: Sequence[Sequence[Any]]
        ``shape[0]`` rows of ``shape[1]`` values each.
    """

    rows: tuple[tuple[Any, ...], ...] = ()
    """The rows of the matrix."""

    matrix_type: ClassVar[MatrixType] = MatrixType.DENSE

    def __post_init__(self) -> None:  # noqa: D105
        self._check_shape()
        if not is_sequence(self.rows):
            msg = f"Dense data must be a sequence, got {type(self.rows).__name__}"
            raise MatrixStructureError(msg)
        if len(self.rows) != self.n_rows:
            msg = (
                f"Dense data has {len(self.rows)} rows, "
                f"but shape {self.shape} requires {self.n_rows}"
            )
            raise MatrixStructureError(msg)

        rows = []
        for i, row in enumerate(self.rows):
            if not is_sequence(row):
                msg = f"Dense row {i} must be a sequence, got {type(row).__name__}"
                raise MatrixStructureError(msg)
            if len(row) != self.n_cols:
                msg = (
                    f"Dense row {i} has {len(row)} values, "
                    f"but shape {self.shape} requires {self.n_cols}"
                )
                raise MatrixStructureError(msg)
            rows.append(tuple(_plain(value) for value in row))
        object.__setattr__(self, "rows", tuple(rows))

    def __iter__(self) -> Iterator[tuple[Any, ...]]:
        """Iterate over the rows."""
        return iter(self.rows)

    @classmethod
    @typecheck
    def from_array(cls, array: Shaped[np.ndarray, "n_rows n_cols"]) -> "DenseMatrix":
        """Create a dense matrix from a 2D numpy array.

        Examples
        --------
        .. code-block:: python

            >>> DenseMatrix.from_array(np.array([[0, 1], [2, 0]])).to_data()
            [[0, 1], [2, 0]]
        """
        if array.ndim != 2:  # noqa: PLR2004
            msg = f"Expected a 2D array, got {array.ndim}D"
            raise MatrixStructureError(msg)
        return cls(array.shape, array.tolist())  # pyright: ignore[reportArgumentType]

    @property
    @override
    def nnz(self) -> int:
        return sum(1 for row in self.rows for value in row if not _is_zero(value))

    @override
    def get(self, row: int, col: int, fill_value: Any = 0) -> Any:
        row, col = self._check_bounds(row, col)
        return self.rows[row][col]

    @override
    def to_data(self) -> list[list[Any]]:
        return [list(row) for row in self.rows]

    @override
    @typecheck
    def to_array(
        self,
        dtype: DTypeLike = np.float64,
        fill_value: Any = 0,
    ) -> Shaped[np.ndarray, "n_rows n_cols"]:
        array = np.empty(self.shape, dtype=dtype)
        for i, row in enumerate(self.rows):
            array[i, :] = row
        return array

    @override
    def to_sparse(self) -> SparseMatrix:
        logger.debug("Converting dense matrix of shape %s to sparse", self.shape)
        entries = [
            (i, j, value)
            for i, row in enumerate(self.rows)
            for j, value in enumerate(row)
            if not _is_zero(value)
        ]
        return SparseMatrix(self.shape, entries)  # pyright: ignore[reportArgumentType]

    @override
    def to_dense(self, fill_value: Any = 0) -> Self:
        return self
