"""
Utilities module: Exceptions.
"""

from shared.utils.exceptions import (
    AppException,
    RepositoryError,
    OutOfRangeError,
    InvalidFilterError,
)

__all__ = [
    "AppException",
    "RepositoryError",
    "OutOfRangeError",
    "InvalidFilterError",
]
