"""
Centralized constants for the persistence layer.
Avoids magic numbers in repositories and filters.

Usage:
    from shared.config.constants import Limits, SortDirection

    per_page = min(per_page, Limits.MAX_PAGE_SIZE)
"""

from typing import Final


# =============================================================================
# Query Limits
# =============================================================================


class Limits:
    """Pagination and query limits."""

    # Pagination defaults
    DEFAULT_PAGE_SIZE: Final[int] = 50
    MAX_PAGE_SIZE: Final[int] = 200

    # Row cap used by single-row lookups
    SINGLE_ROW: Final[int] = 1


# =============================================================================
# Query Ordering
# =============================================================================


class SortDirection:
    """Order-by direction constants."""

    ASC: Final[str] = "ASC"
    DESC: Final[str] = "DESC"

    ALL: Final[list[str]] = [ASC, DESC]


# =============================================================================
# Alias Derivation
# =============================================================================


# Separators stripped from qualified entity names before alias derivation.
# "." for Python module paths, "\\" for names imported from PHP-style namespaces.
ENTITY_NAMESPACE_SEPARATORS: Final[tuple[str, ...]] = (".", "\\")
