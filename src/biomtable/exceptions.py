class BiomError(Exception):
    """Base exception class for the biomtable package."""


class FieldTypeError(BiomError, TypeError):
    """Custom exception for values of the wrong type for a table field."""


class VocabularyError(BiomError, ValueError):
    """Custom exception for values outside a controlled vocabulary."""


class ShapeArityError(BiomError, ValueError):
    """Custom exception for shapes without exactly two components."""


class ShapeDomainError(BiomError, ValueError):
    """Custom exception for shapes with negative or non-integer components."""


class MatrixStructureError(BiomError, ValueError):
    """Custom exception for matrix payloads that do not fit their encoding."""


class ConsistencyError(BiomError, ValueError):
    """Custom exception for tables whose fields disagree with each other."""


class MatrixIndexError(BiomError, IndexError):
    """Custom exception for matrix coordinates outside the matrix shape."""
