"""
Filterable repository interface.
Declares the filter-driven data access contract shared by repositories.
"""

from abc import ABC, abstractmethod
from typing import TypeVar, Generic

from persistence.filters import EntityFilter, FilterAggregate
from .query import QueryBuilder


ModelT = TypeVar("ModelT")


class FilterableRepositoryInterface(ABC, Generic[ModelT]):
    """
    Abstract repository whose state is altered through entity filters.

    Subclasses must implement:
    - filter(): Attach a filter
    - filter_query(): Run attached filters over a QueryBuilder
    - filter_and_build_query(): Build a new filtered QueryBuilder
    - count(): Number of rows matched by the attached filters
    - get_filter_chain() / set_filter_chain(): Access the filter chain
    """

    @abstractmethod
    def filter(self, entity_filter: EntityFilter) -> "FilterableRepositoryInterface[ModelT]":
        """Attach a filter; results are re-queried on next access."""
        ...

    @abstractmethod
    def filter_query(self, query: QueryBuilder[ModelT]) -> QueryBuilder[ModelT]:
        """Apply attached filters to ``query``."""
        ...

    @abstractmethod
    def filter_and_build_query(self, alias: str | None = None) -> QueryBuilder[ModelT]:
        """Create a new QueryBuilder and filter it."""
        ...

    @abstractmethod
    def count(self) -> int:
        ...

    @abstractmethod
    def get_filter_chain(self) -> FilterAggregate:
        ...

    @abstractmethod
    def set_filter_chain(self, filter_chain: FilterAggregate) -> None:
        ...
