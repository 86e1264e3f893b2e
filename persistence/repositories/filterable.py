"""
Filterable Repository - stateful, filter-driven access to one entity.

Instead of passing query parameters around, the repository carries state:
attach filters, then count or iterate. The filtered query runs lazily on
first access and its rows are cached until the filters change.

Not thread-safe: use one repository per unit of work (request, job) and
clone() to branch off a shared baseline.
"""

import copy
from collections.abc import Callable, Iterator
from typing import Any, Generic, TypeVar

from sqlalchemy.orm import Session

from persistence.filters import EntityFilter, FilterAggregate, FilterChain
from shared.config.constants import Limits
from shared.config.logging import get_logger
from shared.config.settings import settings
from .alias import entity_alias, entity_name
from .base import FilterableRepositoryInterface
from .cache import ResultCache
from .composer import QueryComposer
from .cursor import IterationCursor
from .pagination import Page, normalize_page
from .query import QueryBuilder

logger = get_logger(__name__)

ModelT = TypeVar("ModelT")

RepositoryT = TypeVar("RepositoryT", bound="FilterableRepository")


def _checked_chain(filter_chain: FilterAggregate | None) -> FilterAggregate | None:
    """Reject aggregates that cannot be copied for clone()."""
    if filter_chain is not None and not isinstance(filter_chain, FilterAggregate):
        raise TypeError(
            f"{type(filter_chain).__name__} is not a filter aggregate: "
            "needs add_filter, apply, copy and __len__"
        )
    return filter_chain


class FilterableRepository(FilterableRepositoryInterface[ModelT], Generic[ModelT]):
    """
    Repository whose result set is defined by attached filters.

    Usage:
        repo = FilterableRepository(db, BlogPost)
        repo.filter(CriteriaFilter(lambda post: post.published.is_(True)))

        total = repo.count()          # runs the query once
        for post in repo:             # reuses the cached rows
            ...

    Subclasses may set ``model`` as a class attribute instead of passing it.

    Args:
        db: Session used for every query
        model: Mapped class to query
        filter_chain: Initial chain (an empty FilterChain is created lazily)
        configure: Called once with the new repository, e.g. to attach
            default filters
        hydrate: Initial hydration mode; defaults to
            ``settings.repository_hydrate_default``
    """

    model: type[ModelT] | None = None

    def __init__(
        self,
        db: Session,
        model: type[ModelT] | None = None,
        *,
        filter_chain: FilterAggregate | None = None,
        configure: Callable[["FilterableRepository[ModelT]"], None] | None = None,
        hydrate: bool | None = None,
    ):
        if model is not None:
            self.model = model
        if self.model is None:
            raise TypeError(f"{type(self).__name__} requires a mapped model class")

        self._db = db
        self._hydrate = settings.repository_hydrate_default if hydrate is None else hydrate
        self._filter_chain = _checked_chain(filter_chain)
        self._wire()

        if configure is not None:
            configure(self)

    def _wire(self) -> None:
        """Create the per-instance cache, composer and cursor."""
        self._cache: ResultCache[Any] = ResultCache()
        self._composer = QueryComposer(self._db, self.model, self.get_filter_chain)
        self._cursor = IterationCursor(
            self._cache,
            self._populate,
            self._fetch_single,
            entity=self.model.__name__,
        )

    # =========================================================================
    # Entity metadata
    # =========================================================================

    @property
    def entity_name(self) -> str:
        return entity_name(self.model)

    @property
    def entity_alias(self) -> str:
        return entity_alias(self.entity_name)

    # =========================================================================
    # Hydration
    # =========================================================================

    def enable_hydration(self) -> None:
        """Return mapped entities (default)."""
        self._hydrate = True

    def disable_hydration(self) -> None:
        """Return dicts of column values instead of entities."""
        self._hydrate = False

    def is_hydration_disabled(self) -> bool:
        return not self._hydrate

    # =========================================================================
    # Filters
    # =========================================================================

    def get_filter_chain(self) -> FilterAggregate:
        if self._filter_chain is None:
            self._filter_chain = FilterChain()
        return self._filter_chain

    def set_filter_chain(self, filter_chain: FilterAggregate) -> None:
        filter_chain = _checked_chain(filter_chain)
        self._cache.invalidate()
        self._filter_chain = filter_chain

    @property
    def filter_chain(self) -> FilterAggregate:
        return self.get_filter_chain()

    @filter_chain.setter
    def filter_chain(self, filter_chain: FilterAggregate) -> None:
        self.set_filter_chain(filter_chain)

    def filter(self: RepositoryT, entity_filter: EntityFilter) -> RepositoryT:
        """Attach a filter. Cached rows are dropped and re-queried on next access."""
        self._cache.invalidate()
        self.get_filter_chain().add_filter(entity_filter)
        logger.debug(
            "Filter attached",
            entity=self.model.__name__,
            filter=type(entity_filter).__name__,
        )
        return self

    attach_filter = filter

    def filter_query(self, query: QueryBuilder[ModelT]) -> QueryBuilder[ModelT]:
        return self.get_filter_chain().apply(query)

    def filter_and_build_query(self, alias: str | None = None) -> QueryBuilder[ModelT]:
        """
        New QueryBuilder with every attached filter applied.

        For callers that execute the query themselves (pagination, exports,
        aggregates); the repository cache is not involved.
        """
        return self._composer.build(alias or self.entity_alias)

    create_and_filter_query = filter_and_build_query

    # =========================================================================
    # Result cache
    # =========================================================================

    def _load(self) -> Any:
        query = self._composer.build(self.entity_alias)
        logger.debug(
            "Populating result cache",
            entity=self.model.__name__,
            alias=query.alias,
            filters=len(self.get_filter_chain()),
            hydrate=self._hydrate,
        )
        return query.execute(hydrate=self._hydrate)

    def _populate(self) -> tuple[Any, ...]:
        return self._cache.ensure_populated(self._load)

    def _fetch_single(self) -> Any:
        query = self._composer.build(self.entity_alias, max_results=Limits.SINGLE_ROW)
        logger.debug(
            "Fetching single row",
            entity=self.model.__name__,
            alias=query.alias,
            hydrate=self._hydrate,
        )
        return query.get_single_result(hydrate=self._hydrate)

    @property
    def results(self) -> tuple[Any, ...]:
        """Cached rows, populating first. Valid until the next invalidation."""
        return self._populate()

    def refresh(self) -> None:
        """Drop cached rows; the next access re-runs the query."""
        self._cache.invalidate()

    def count(self) -> int:
        return len(self._populate())

    def __len__(self) -> int:
        return self.count()

    # =========================================================================
    # Iteration
    # =========================================================================

    def iterate(self) -> Iterator[Any]:
        """
        Lazily yield the cached rows.

        Each call is an independent pass over the rows cached when the
        pass starts; the shared cursor is left alone.
        """
        rows = self._populate()
        yield from rows

    def __iter__(self) -> Iterator[Any]:
        return self.iterate()

    @property
    def cursor(self) -> IterationCursor[Any]:
        """Shared positional cursor (one pass at a time)."""
        return self._cursor

    def rewind(self) -> None:
        self._cursor.restart()

    def next(self) -> None:
        self._cursor.advance()

    def valid(self) -> bool:
        return self._cursor.is_valid()

    def current(self) -> Any:
        return self._cursor.current()

    def key(self) -> int:
        return self._cursor.key()

    # =========================================================================
    # Pagination
    # =========================================================================

    def paginate(self, page: int = 1, per_page: int = Limits.DEFAULT_PAGE_SIZE) -> Page[Any]:
        """
        Run one page of the filtered query directly.

        Uses the current hydration mode; the result cache is not touched.
        Hydrated pages count distinct entities, like count(), so a join
        that repeats an entity does not inflate the total. Scalar pages
        count rows.
        """
        page, per_page = normalize_page(page, per_page)
        offset = (page - 1) * per_page

        query = self.filter_and_build_query()
        if self._hydrate:
            ids = query.get_root_ids()
            total = len(ids)
            items = query.get_entities(ids[offset:offset + per_page])
        else:
            total = query.get_count()
            query.set_first_result(offset).set_max_results(per_page)
            items = query.execute(hydrate=False)

        return Page(items=items, page=page, per_page=per_page, total=total)

    # =========================================================================
    # Cloning
    # =========================================================================

    def clone(self: RepositoryT) -> RepositoryT:
        return copy.copy(self)

    def __copy__(self):
        twin = type(self).__new__(type(self))
        twin.__dict__.update(self.__dict__)
        if self._filter_chain is not None:
            twin._filter_chain = self._filter_chain.copy()
        twin._wire()
        return twin

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}({self.model.__name__} AS {self.entity_alias}, "
            f"filters={len(self.get_filter_chain())}, cache={self._cache!r})"
        )


def get_filterable_repository(
    db: Session,
    model: type[ModelT],
    **kwargs: Any,
) -> FilterableRepository[ModelT]:
    """Factory function for dependency injection."""
    return FilterableRepository(db, model, **kwargs)
