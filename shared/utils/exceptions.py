"""
Centralized exceptions for the persistence layer.
Every library error logs itself once, with structured context, when raised.

Errors from the database driver or SQLAlchemy (connectivity, SQL errors,
constraint violations, NoResultFound) are never wrapped here: they propagate
to the caller unmodified.

Usage:
    from shared.utils.exceptions import OutOfRangeError, InvalidFilterError

    raise OutOfRangeError(index=3, length=2, entity="BlogPost")
    raise InvalidFilterError(candidate)
"""

from typing import Any

from shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(Exception):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and message format.
    """

    def __init__(
        self,
        detail: str,
        log_level: str = "warning",
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_fn(detail, error=type(self).__name__, **log_context)

        self.detail = detail
        self.context = log_context
        super().__init__(detail)


# =============================================================================
# Repository Errors
# =============================================================================


class RepositoryError(AppException):
    """Base class for errors raised by filterable repositories."""


class OutOfRangeError(RepositoryError, IndexError):
    """
    Cursor index beyond the materialized result set.

    This is a programming error: the caller read ``current()`` without
    checking ``is_valid()`` first. It should abort the iteration.

    Usage:
        raise OutOfRangeError(index=5, length=5, entity="BlogPost")
    """

    def __init__(self, index: int, length: int, **log_context: Any):
        if length == 0:
            detail = f"Cursor index {index} out of range: result set is empty"
        else:
            detail = f"Cursor index {index} out of range for {length} rows"

        super().__init__(
            detail,
            log_level="error",
            index=index,
            length=length,
            **log_context,
        )
        self.index = index
        self.length = length


class InvalidFilterError(RepositoryError, TypeError):
    """
    Object attached to a filter chain does not provide ``apply(query)``.

    Usage:
        raise InvalidFilterError(candidate)
    """

    def __init__(self, candidate: Any, **log_context: Any):
        kind = type(candidate).__name__
        super().__init__(
            f"{kind} is not a filter: missing callable apply(query)",
            log_level="warning",
            filter_type=kind,
            **log_context,
        )
