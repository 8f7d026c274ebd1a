"""In-memory Biological Observation Matrix (BIOM) tables.

This package provides a validated representation of BIOM 1.0.0 tables: table
metadata, row and column descriptors, and the numeric matrix in either sparse or
dense encoding. Every field is checked against its type and controlled vocabulary on
construction and on every later assignment, so an instance never holds an invalid
value.
"""

from __future__ import annotations

from . import enums, exceptions
from .core import BiomTable, DenseMatrix, Matrix, SparseMatrix
from .core.utils import load_bytes, to_bytes
from .defaults import (
    DEFAULT_BIOM,
    MATRIX_ELEMENT_TYPE_CV,
    MATRIX_TYPE_CV,
    TYPE_CV,
    __version__,
)
from .enums import MatrixElementType, MatrixType, TableType

__all__ = [
    "DEFAULT_BIOM",
    "MATRIX_ELEMENT_TYPE_CV",
    "MATRIX_TYPE_CV",
    "TYPE_CV",
    "BiomTable",
    "DenseMatrix",
    "Matrix",
    "MatrixElementType",
    "MatrixType",
    "SparseMatrix",
    "TableType",
    "__version__",
    "enums",
    "exceptions",
    "load_bytes",
    "to_bytes",
]
