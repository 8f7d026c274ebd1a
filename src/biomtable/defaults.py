"""Fixed identifiers and default values of a BIOM 1.0.0 table."""

from importlib.metadata import PackageNotFoundError, version
from types import MappingProxyType
from typing import Any, Final

from biomtable.enums import MatrixElementType, MatrixType, TableType

try:
    __version__ = version("biomtable")
except PackageNotFoundError:
    __version__ = "unknown"

FORMAT: Final[str] = "Biological Observation Matrix 1.0.0"
FORMAT_URL: Final[str] = "http://biom-format.org"
GENERATED_BY: Final[str] = f"biomtable v{__version__}"

TYPE_CV: Final[tuple[str, ...]] = TableType.choices()
MATRIX_TYPE_CV: Final[tuple[str, ...]] = MatrixType.choices()
MATRIX_ELEMENT_TYPE_CV: Final[tuple[str, ...]] = MatrixElementType.choices()

DEFAULT_BIOM: Final[MappingProxyType[str, Any]] = MappingProxyType(
    {
        "id": None,
        "format": FORMAT,
        "format_url": FORMAT_URL,
        "type": TableType.OTU.value,
        "generated_by": GENERATED_BY,
        "date": None,  # stamped with the current time on construction
        "rows": (),
        "columns": (),
        "matrix_type": MatrixType.SPARSE.value,
        "matrix_element_type": MatrixElementType.FLOAT.value,
        "shape": (0, 0),
        "data": (),
        "comment": None,
    },
)
"""The table an argument-less constructor produces, in wire representation."""
