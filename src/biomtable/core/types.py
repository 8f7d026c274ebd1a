from collections.abc import Sequence
from typing import Any, TypedDict


class BiomTableConfig(TypedDict, total=False):
    """TypedDict for the options accepted when building a BiomTable.

    Every option is optional; omitted options take their default value.
    """

    id: str | None
    format: str
    format_url: str
    type: str
    generated_by: str
    date: str | None
    rows: Sequence[Any]
    columns: Sequence[Any]
    matrix_type: str
    matrix_element_type: str
    shape: Sequence[int]
    data: Sequence[Any]
    comment: str | None


class BiomTableDict(TypedDict):
    """TypedDict for the wire representation of a BiomTable."""

    id: str | None
    format: str
    format_url: str
    type: str
    generated_by: str
    date: str
    rows: list[Any]
    columns: list[Any]
    matrix_type: str
    matrix_element_type: str
    shape: list[int]
    data: list[Any]
    comment: str | None
