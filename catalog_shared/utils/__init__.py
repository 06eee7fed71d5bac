"""
Utilities module: Exceptions, validators.
"""

from catalog_shared.utils.exceptions import (
    AppException,
    NotFoundError,
    ValidationError,
    DocumentValidationError,
    InvalidIdentifierError,
    InvalidFormatError,
    ConflictError,
    InternalError,
    ImageStorageError,
)
from catalog_shared.utils.validators import (
    is_valid_object_id,
    escape_like_pattern,
    file_extension,
    is_plain_filename,
)

__all__ = [
    # exceptions
    "AppException",
    "NotFoundError",
    "ValidationError",
    "DocumentValidationError",
    "InvalidIdentifierError",
    "InvalidFormatError",
    "ConflictError",
    "InternalError",
    "ImageStorageError",
    # validators
    "is_valid_object_id",
    "escape_like_pattern",
    "file_extension",
    "is_plain_filename",
]
