"""
Centralized HTTP exceptions for consistent error handling.

Usage:
    from catalog_shared.utils.exceptions import NotFoundError, DocumentValidationError

    raise NotFoundError("Product", product_id)
    raise DocumentValidationError.from_pydantic(exc)
    raise InvalidFormatError("colors")
"""

from fastapi import HTTPException, status
from typing import Any

from catalog_shared.config.logging import get_logger

logger = get_logger(__name__)


class AppException(HTTPException):
    """
    Base exception with automatic logging.

    All custom exceptions should inherit from this class
    to ensure consistent logging and response format.
    """

    def __init__(
        self,
        status_code: int,
        detail: Any,
        log_level: str = "warning",
        headers: dict[str, str] | None = None,
        **log_context: Any,
    ):
        log_fn = getattr(logger, log_level, logger.warning)
        log_message = detail.get("message", str(detail)) if isinstance(detail, dict) else detail
        log_fn(log_message, status_code=status_code, **log_context)

        super().__init__(status_code=status_code, detail=detail, headers=headers)


# =============================================================================
# 404 Not Found Errors
# =============================================================================


class NotFoundError(AppException):
    """
    Entity not found error (404).

    Usage:
        raise NotFoundError("Product", product_id)
        raise NotFoundError("Color", color_id, product_id=product_id)
    """

    def __init__(self, entity: str, entity_id: str | None = None, **log_context: Any):
        self.entity = entity
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{entity} not found",
            log_level="warning",
            entity=entity,
            entity_id=entity_id,
            **log_context,
        )


# =============================================================================
# 400 Bad Request Errors
# =============================================================================


class ValidationError(AppException):
    """
    Input validation error (400).

    Usage:
        raise ValidationError("Price must be positive")
        raise ValidationError("Invalid stock", field="stock", value=-1)
    """

    def __init__(self, detail: Any, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            log_level="warning",
            **log_context,
        )


class DocumentValidationError(ValidationError):
    """
    The product document was rejected by its schema.

    The response body carries one message per offending field:
        {"error": 1, "message": "...", "fields": {"colors.0.color": "Field required"}}
    """

    def __init__(self, fields: dict[str, str], message: str | None = None, **log_context: Any):
        self.fields = fields
        if message is None:
            message = "Product validation failed: " + ", ".join(
                f"{path}: {msg}" for path, msg in fields.items()
            )
        super().__init__(
            {"error": 1, "message": message, "fields": fields},
            fields=list(fields),
            **log_context,
        )

    @classmethod
    def from_pydantic(cls, exc: Any, prefix: str | None = None) -> "DocumentValidationError":
        """Build from a ``pydantic.ValidationError``."""
        fields: dict[str, str] = {}
        for error in exc.errors():
            loc = [str(part) for part in error.get("loc", ())]
            if prefix:
                loc.insert(0, prefix)
            fields[".".join(loc) or "__root__"] = error.get("msg", "Invalid value")
        return cls(fields)


class InvalidIdentifierError(ValidationError):
    """Identifier is not a 24 character hex string."""

    def __init__(self, entity: str, value: str | None = None, **log_context: Any):
        super().__init__(f"Invalid {entity.lower()} ID", entity=entity, value=value, **log_context)


class InvalidFormatError(ValidationError):
    """A JSON-encoded field could not be decoded into the expected shape."""

    def __init__(self, field: str, **log_context: Any):
        self.field = field
        super().__init__(f"Invalid {field} format", field=field, **log_context)


# =============================================================================
# 409 Conflict Errors
# =============================================================================


class ConflictError(AppException):
    """
    Resource conflict error (409).

    Usage:
        raise ConflictError("Product was modified concurrently, retry the request")
    """

    def __init__(self, detail: str, **log_context: Any):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail=detail,
            log_level="warning",
            **log_context,
        )


# =============================================================================
# 500 Internal Server Errors
# =============================================================================


class InternalError(AppException):
    """
    Internal server error (500).

    Usage:
        raise InternalError("Failed to process upload", filename=name)
    """

    def __init__(self, detail: str = "Internal server error", **log_context: Any):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            log_level="error",
            **log_context,
        )


class ImageStorageError(InternalError):
    """Copying an uploaded image into permanent storage failed."""

    def __init__(self, filename: str, **log_context: Any):
        super().__init__("Failed to store product image", filename=filename, **log_context)
