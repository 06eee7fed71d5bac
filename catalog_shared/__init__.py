"""
Shared module for common utilities used by the catalog REST API.

STRUCTURE:
- catalog_shared.infrastructure: Database and request correlation
  - db.py: SQLAlchemy sessions, safe_commit()
  - correlation.py: X-Request-ID middleware and logging filter

- catalog_shared.config: Configuration
  - settings.py: Environment config (Pydantic)
  - logging.py: Structured logging
  - constants.py: Limits, identifier format

- catalog_shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - validators.py: Identifier, LIKE pattern and filename helpers

IMPORT EXAMPLES:
    from catalog_shared.infrastructure.db import get_db, safe_commit
    from catalog_shared.config.settings import settings
    from catalog_shared.utils.exceptions import NotFoundError
    from catalog_shared.utils.validators import is_valid_object_id
"""
