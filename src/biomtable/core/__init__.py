"""The core data model for the biomtable package."""

from __future__ import annotations

from .matrix import DenseMatrix, Matrix, SparseMatrix
from .table import FIELD_NAMES, BiomTable
from .types import BiomTableConfig, BiomTableDict

__all__ = [
    "FIELD_NAMES",
    "BiomTable",
    "BiomTableConfig",
    "BiomTableDict",
    "DenseMatrix",
    "Matrix",
    "SparseMatrix",
]
