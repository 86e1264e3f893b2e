"""
Generic filter adapters.

These carry no domain logic of their own; they let callers plug plain
functions and SQLAlchemy criteria into a FilterChain without writing a
filter class.

Usage:
    repo.filter(CriteriaFilter(lambda post: post.published.is_(True)))
    repo.filter(OrderByFilter("created_at", SortDirection.DESC))
    repo.filter(CallableFilter(lambda query: query.set_max_results(10)))
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from shared.config.constants import SortDirection

if TYPE_CHECKING:
    from persistence.repositories.query import QueryBuilder


class CallableFilter:
    """Wrap ``func(query)`` as a filter."""

    def __init__(self, func: Callable[[QueryBuilder], QueryBuilder | None], name: str | None = None):
        self._func = func
        self.name = name or getattr(func, "__name__", "callable")

    def apply(self, query: QueryBuilder) -> QueryBuilder | None:
        return self._func(query)

    def __repr__(self) -> str:
        return f"CallableFilter({self.name})"


class CriteriaFilter:
    """
    Add WHERE criteria built from the aliased entity.

    ``build`` receives the aliased entity of the query being filtered and
    returns one SQL expression or a list or tuple of them (combined with AND).
    """

    def __init__(self, build: Callable[[Any], Any]):
        self._build = build

    def apply(self, query: QueryBuilder) -> QueryBuilder:
        criteria = self._build(query.entity)
        if isinstance(criteria, (list, tuple)):
            return query.where(*criteria)
        return query.where(criteria)


class OrderByFilter:
    """Append an ORDER BY on an attribute of the aliased entity."""

    def __init__(self, attribute: str, direction: str = SortDirection.ASC):
        direction = direction.upper()
        if direction not in SortDirection.ALL:
            raise ValueError(f"Invalid sort direction: {direction}")
        self.attribute = attribute
        self.direction = direction

    def apply(self, query: QueryBuilder) -> QueryBuilder:
        column = getattr(query.entity, self.attribute)
        if self.direction == SortDirection.DESC:
            return query.order_by(column.desc())
        return query.order_by(column.asc())

    def __repr__(self) -> str:
        return f"OrderByFilter({self.attribute} {self.direction})"
