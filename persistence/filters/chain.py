"""Ordered filter chain applied to a QueryBuilder.

Filters compose by sequential mutation: each one sees the builder state left
by the filters attached before it. The chain neither deduplicates nor checks
filters against each other.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import TYPE_CHECKING

from shared.utils.exceptions import InvalidFilterError
from .base import EntityFilter, is_filter

if TYPE_CHECKING:
    from persistence.repositories.query import QueryBuilder


class FilterChain:
    """Apply filters to a query builder in insertion order.

    Usage::

        chain = FilterChain()
        chain.add_filter(PublishedFilter())
        chain.add_filter(OrderByFilter("created_at", "DESC"))

        query = chain.apply(query)

    Copying a chain (``copy.copy`` or ``chain.copy()``) gives an independent
    list of the same filter objects, so the copies can diverge afterwards.
    Other instance attributes of a subclass are carried over as-is.
    """

    def __init__(self, filters: Iterable[EntityFilter] = ()) -> None:
        self._filters: list[EntityFilter] = []
        for entity_filter in filters:
            self.add_filter(entity_filter)

    def add_filter(self, entity_filter: EntityFilter) -> "FilterChain":
        """Append a filter and return self for chaining."""
        if not is_filter(entity_filter):
            raise InvalidFilterError(entity_filter)
        self._filters.append(entity_filter)
        return self

    def apply(self, query: QueryBuilder) -> QueryBuilder:
        """Run every filter over ``query`` and return the cumulative builder."""
        for entity_filter in self._filters:
            result = entity_filter.apply(query)
            if result is not None:
                query = result
        return query

    def clear(self) -> None:
        self._filters.clear()

    @property
    def filters(self) -> tuple[EntityFilter, ...]:
        return tuple(self._filters)

    def copy(self) -> "FilterChain":
        return self.__copy__()

    def __copy__(self) -> "FilterChain":
        twin = type(self).__new__(type(self))
        twin.__dict__.update(self.__dict__)
        twin._filters = list(self._filters)
        return twin

    # Allow combining two chains with &
    def __and__(self, other: "FilterChain") -> "FilterChain":
        combined = self.copy()
        combined._filters.extend(other.filters)
        return combined

    def __iter__(self) -> Iterator[EntityFilter]:
        return iter(tuple(self._filters))

    def __len__(self) -> int:
        return len(self._filters)

    def __bool__(self) -> bool:
        # An empty chain is still a usable chain
        return True

    def __repr__(self) -> str:
        return f"FilterChain({len(self._filters)} filters)"
