"""
Filter protocols.

A filter is any object exposing ``apply(query)``. It receives the
repository's QueryBuilder and narrows it (predicates, joins, ordering).
The repository never inspects a filter beyond calling ``apply``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from persistence.repositories.query import QueryBuilder


@runtime_checkable
class EntityFilter(Protocol):
    """Unit of query logic applied to a QueryBuilder.

    ``apply`` may mutate ``query`` in place and return ``None``, or return
    the builder that the next filter should receive.
    """

    def apply(self, query: QueryBuilder) -> QueryBuilder | None:
        ...


@runtime_checkable
class FilterAggregate(Protocol):
    """Ordered collection of filters that can filter a QueryBuilder.

    ``copy()`` must return an aggregate with its own filter list: filters
    added to the copy never reach the original and vice versa. Repository
    clones rely on it.
    """

    def add_filter(self, entity_filter: EntityFilter) -> FilterAggregate:
        ...

    def apply(self, query: QueryBuilder) -> QueryBuilder:
        ...

    def copy(self) -> FilterAggregate:
        ...

    def __len__(self) -> int:
        ...


def is_filter(candidate: object) -> bool:
    """Return True if ``candidate`` has a callable ``apply``."""
    return callable(getattr(candidate, "apply", None))


__all__ = ["EntityFilter", "FilterAggregate", "is_filter"]
