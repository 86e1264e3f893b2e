"""
IterationCursor - forward-only, restartable position over a ResultCache.

States:
    not started  ->  active (0 <= index < length)  ->  exhausted (index >= length)

One cursor is shared by everything holding the repository, so only one
positional pass can run at a time. Use ``FilterableRepository.iterate()``
for independent passes.
"""

from collections.abc import Callable
from typing import Any, Generic, TypeVar

from shared.utils.exceptions import OutOfRangeError
from .cache import ResultCache

RowT = TypeVar("RowT")


class IterationCursor(Generic[RowT]):
    """
    Positional access to the rows of a ResultCache.

    Args:
        cache: Cache the cursor reads from
        populate: Fills the cache if needed and returns its rows
        fetch_single: Runs a one-row query without touching the cache
        log_context: Extra fields attached to errors raised by the cursor
    """

    def __init__(
        self,
        cache: ResultCache[RowT],
        populate: Callable[[], tuple[RowT, ...]],
        fetch_single: Callable[[], RowT],
        **log_context: Any,
    ):
        self._cache = cache
        self._populate = populate
        self._fetch_single = fetch_single
        self._log_context = log_context
        self._index = 0

    def restart(self) -> None:
        """Populate the cache and move to the first row."""
        self._populate()
        self._index = 0

    def advance(self) -> None:
        """Move one row forward; check ``is_valid()`` afterwards."""
        self._index += 1

    def is_valid(self) -> bool:
        rows = self._populate()
        return self._index < len(rows)

    def current(self) -> RowT:
        """
        Row at the cursor.

        With a cold cache this runs a one-row query and returns its row
        without populating the cache or moving the cursor.

        Raises:
            OutOfRangeError: The cache is populated and the cursor is past
                its last row (or the cache holds no rows)
            sqlalchemy.exc.NoResultFound: Cold cache and no row matched
        """
        if not self._cache.is_populated:
            return self._fetch_single()

        rows = self._cache.rows
        if self._index >= len(rows):
            raise OutOfRangeError(self._index, len(rows), **self._log_context)
        return rows[self._index]

    def key(self) -> int:
        return self._index

    def reset(self) -> None:
        """Back to the not-started position without touching the cache."""
        self._index = 0

    def __repr__(self) -> str:
        return f"IterationCursor(index={self._index}, cache={self._cache!r})"
