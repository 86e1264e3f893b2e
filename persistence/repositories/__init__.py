"""
Filterable repositories: lazily executed, filter-driven queries with a
cached result set.

Usage:
    from persistence.repositories import get_filterable_repository

    repo = get_filterable_repository(db, BlogPost)
    repo.filter(CriteriaFilter(lambda post: post.published.is_(True)))
    total = repo.count()
    posts = list(repo)
"""

from .alias import entity_alias, entity_name
from .base import FilterableRepositoryInterface
from .cache import ResultCache
from .composer import QueryComposer
from .cursor import IterationCursor
from .filterable import FilterableRepository, get_filterable_repository
from .pagination import Page
from .query import QueryBuilder

__all__ = [
    # Base
    "FilterableRepositoryInterface",
    "FilterableRepository",
    "get_filterable_repository",
    # Query composition
    "QueryBuilder",
    "QueryComposer",
    "entity_alias",
    "entity_name",
    # Results
    "ResultCache",
    "IterationCursor",
    "Page",
]
