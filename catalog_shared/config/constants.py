"""
Application constants: limits and identifier formats.
"""

import re
from typing import Final


class Limits:
    """Validation limits."""

    # String lengths
    MAX_NAME_LENGTH: Final[int] = 200
    MAX_DESCRIPTION_LENGTH: Final[int] = 2000
    MAX_LABEL_LENGTH: Final[int] = 100
    MAX_SEARCH_TERM_LENGTH: Final[int] = 100

    # Pagination defaults for product listing
    DEFAULT_SKIP: Final[int] = 0
    DEFAULT_PAGE_SIZE: Final[int] = 10
    MAX_PAGE_SIZE: Final[int] = 200


class Identifiers:
    """Document identifier format (12 random bytes, hex encoded)."""

    BYTES: Final[int] = 12
    LENGTH: Final[int] = 24
    PATTERN: Final[re.Pattern[str]] = re.compile(r"^[0-9a-fA-F]{24}$")


class ProductFields:
    """Payload keys that need special handling on the write path."""

    CATEGORY: Final[str] = "category"
    BRANDS: Final[str] = "brands"
    COLORS: Final[str] = "colors"
