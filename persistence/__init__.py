"""
Persistence package: filterable entity repositories on SQLAlchemy.

STRUCTURE:
- persistence.filters: Filter protocols, FilterChain, generic adapters
- persistence.repositories: QueryBuilder, QueryComposer, ResultCache,
  IterationCursor, FilterableRepository
- persistence.models: Declarative base

IMPORT EXAMPLES:
    from persistence.filters import FilterChain, CriteriaFilter, OrderByFilter
    from persistence.repositories import FilterableRepository, get_filterable_repository
    from persistence.models import Base
"""
