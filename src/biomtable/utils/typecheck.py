"""Opt-in runtime checking of array annotations."""

import os
from collections.abc import Callable
from typing import Final, TypeVar

from beartype import beartype
from jaxtyping import jaxtyped

F = TypeVar("F", bound=Callable)

TYPECHECK_ENV: Final[str] = "BIOMTABLE_TYPECHECK"
"""Environment variable enabling the checks. Read once, when this module is imported."""

_ENABLED = os.environ.get(TYPECHECK_ENV, "").strip().lower() in {"1", "true", "yes"}


def typecheck_enabled() -> bool:
    """Return whether runtime array checking is active."""
    return _ENABLED


def typecheck(func: F) -> F:
    """Check the jaxtyping annotations of `func` on every call, when enabled.

    With ``BIOMTABLE_TYPECHECK=true`` the array shapes and dtypes of arguments and
    return values are checked with `beartype` and `jaxtyping`, and dimension names
    such as ``"n_rows n_cols"`` must agree across one call. Otherwise `func` is
    returned unchanged, so the checks cost nothing in production.
    """
    if not _ENABLED:
        return func
    return jaxtyped(typechecker=beartype)(func)  # pyright: ignore[reportReturnType]
