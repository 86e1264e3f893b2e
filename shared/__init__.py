"""
Shared module for the ambient stack used by the persistence package.

STRUCTURE:
- shared.config: Configuration
  - settings.py: Environment config (pydantic-settings)
  - logging.py: Structured logging
  - constants.py: Limits, sort directions

- shared.infrastructure: Database and tracing
  - db.py: SQLAlchemy engine, sessions, safe_commit()
  - correlation.py: Correlation IDs for log records

- shared.utils: Utilities
  - exceptions.py: Self-logging library exceptions

IMPORT EXAMPLES:
    from shared.infrastructure.db import get_db_context, safe_commit
    from shared.config.settings import settings
    from shared.config.constants import Limits
    from shared.utils.exceptions import OutOfRangeError
"""

# This module provides no re-exports.
# All imports should use the canonical paths as documented above.
