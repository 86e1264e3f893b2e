"""
ResultCache - memoized result set of a repository.
"""

from collections.abc import Callable, Iterable
from typing import Generic, TypeVar

RowT = TypeVar("RowT")


class ResultCache(Generic[RowT]):
    """
    Holds at most one materialized result set.

    The cache is either empty or fully populated. Rows are stored as a tuple
    so callers can hold on to ``rows`` without copying; a later
    ``invalidate()`` swaps in a new tuple instead of mutating the old one.
    """

    def __init__(self) -> None:
        self._rows: tuple[RowT, ...] | None = None

    @property
    def is_populated(self) -> bool:
        return self._rows is not None

    @property
    def rows(self) -> tuple[RowT, ...]:
        """Cached rows; empty tuple when nothing is cached."""
        return self._rows if self._rows is not None else ()

    def ensure_populated(self, loader: Callable[[], Iterable[RowT]]) -> tuple[RowT, ...]:
        """Call ``loader`` once per invalidation cycle and cache its rows."""
        if self._rows is None:
            self._rows = tuple(loader())
        return self._rows

    def invalidate(self) -> None:
        self._rows = None

    def __len__(self) -> int:
        return len(self.rows)

    def __repr__(self) -> str:
        state = f"{len(self._rows)} rows" if self._rows is not None else "empty"
        return f"ResultCache({state})"
