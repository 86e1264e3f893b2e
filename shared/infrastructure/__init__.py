"""
Infrastructure module: Database sessions and log correlation.

Provides:
- Database engine and sessions (db.py)
- Correlation IDs for log records (correlation.py)
"""

from shared.infrastructure.db import (
    engine,
    build_engine,
    SessionLocal,
    get_db,
    get_db_context,
    safe_commit,
)
from shared.infrastructure.correlation import (
    correlation_scope,
    get_correlation_id,
    CorrelationIdFilter,
)

__all__ = [
    # db
    "engine",
    "build_engine",
    "SessionLocal",
    "get_db",
    "get_db_context",
    "safe_commit",
    # correlation
    "correlation_scope",
    "get_correlation_id",
    "CorrelationIdFilter",
]
