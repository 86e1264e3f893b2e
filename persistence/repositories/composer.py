"""
QueryComposer - builds filtered queries for one entity.
"""

from collections.abc import Callable
from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from persistence.filters import FilterAggregate
from .query import QueryBuilder

ModelT = TypeVar("ModelT")


class QueryComposer(Generic[ModelT]):
    """
    Create a fresh QueryBuilder for the entity and run the filter chain on it.

    The chain is read through ``chain_provider`` on every build so a chain
    replaced on the repository is picked up by the next query.
    """

    def __init__(
        self,
        db: Session,
        model: type[ModelT],
        chain_provider: Callable[[], FilterAggregate],
    ):
        self._db = db
        self._model = model
        self._chain_provider = chain_provider

    def create(self, alias: str) -> QueryBuilder[ModelT]:
        """Unfiltered builder scoped to the entity."""
        return QueryBuilder(self._db, self._model, alias)

    def build(self, alias: str, max_results: int | None = None) -> QueryBuilder[ModelT]:
        """New builder labeled ``alias`` with every attached filter applied."""
        query = self._chain_provider().apply(self.create(alias))
        if max_results is not None:
            query.set_max_results(max_results)
        return query
