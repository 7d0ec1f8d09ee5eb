"""Application-wide constants.

This module defines constants used throughout the application
to avoid magic numbers and ensure consistency.
"""

# Reserved actor id that bypasses every authorization check.
# Structural, not configurable.
SYSTEM_ACTOR_ID = 1

# String field lengths
MAX_EMAIL_LENGTH = 255
MAX_NAME_LENGTH = 255
MAX_ROLE_NAME_LENGTH = 100
MAX_PERMISSION_NAME_LENGTH = 100
MAX_BOOK_TITLE_LENGTH = 255

# Password hashing
BCRYPT_ROUNDS = 12

# Pagination defaults
DEFAULT_PAGE_SIZE = 10

# Token settings
ACCESS_TOKEN_JTI_LENGTH = 32
TOKEN_TYPE_ACCESS = "access"

# Authorization
UNAUTHORIZED_ACTION_MESSAGE = "This action is unauthorized."

# Secret key requirements
MIN_SECRET_KEY_LENGTH = 32
DEFAULT_INSECURE_SECRET = "change-me-in-production"
