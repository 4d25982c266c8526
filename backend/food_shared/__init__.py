"""
Shared module for common utilities used by the REST API.

STRUCTURE:
- food_shared.config: Configuration
  - settings.py: Environment config (pydantic-settings), resolved once at startup
  - logging.py: Structured logging
  - constants.py: Role, OrderStatus, transition table, limits, messages

- food_shared.infrastructure: Database
  - db.py: engine/session factories, get_db(), unit_of_work()

- food_shared.security: Authentication
  - auth.py: JWT sign/verify, Principal, current_principal

- food_shared.utils: Utilities
  - exceptions.py: HTTP exceptions with auto-logging
  - validators.py: Input validation
  - schemas.py: Shared Pydantic schemas

IMPORT EXAMPLES:
    from food_shared.security.auth import Principal, current_principal
    from food_shared.infrastructure.db import get_db, unit_of_work
    from food_shared.config.constants import Role, OrderStatus
    from food_shared.utils.exceptions import NotFoundError, AccessDeniedError
"""
