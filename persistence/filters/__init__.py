"""
Entity filters: protocols, the ordered FilterChain and generic adapters.

Usage:
    from persistence.filters import FilterChain, CriteriaFilter

    chain = FilterChain([CriteriaFilter(lambda user: user.is_active.is_(True))])
"""

from .base import EntityFilter, FilterAggregate, is_filter
from .chain import FilterChain
from .common import CallableFilter, CriteriaFilter, OrderByFilter

__all__ = [
    # Protocols
    "EntityFilter",
    "FilterAggregate",
    "is_filter",
    # Chain
    "FilterChain",
    # Adapters
    "CallableFilter",
    "CriteriaFilter",
    "OrderByFilter",
]
