"""
Domain Exceptions

Custom exceptions for the staffing gap engine with error type discrimination.
Only a handful of conditions are raised; most missing data degrades the
report instead of failing it.
"""

from enum import Enum


class ErrorType(str, Enum):
    """Error type enumeration for discriminated unions."""

    VALIDATION = "validation"
    ORG_SCOPE = "org_scope"
    REPOSITORY = "repository"


class DomainError(Exception):
    """Base class for all domain errors with type discrimination."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> dict[str, str | dict[str, str | int | bool | None]]:
        """Convert error to dictionary for API responses."""
        return {
            "type": self.error_type.value,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(DomainError):
    """Raised when an input value is rejected."""

    def __init__(
        self,
        field_name: str,
        value: str | int | float | bool | None,
        message: str,
        error_code: str | None = None,
        error_type: ErrorType = ErrorType.VALIDATION,
    ) -> None:
        self.field_name = field_name
        self.value = value
        self.error_code = error_code or "VALIDATION_ERROR"

        full_message = f"Validation failed for field '{field_name}': {message}"
        details: dict[str, str | int | bool | None] = {
            "field": field_name,
            "value": str(value) if value is not None else None,
            "error_code": self.error_code,
        }

        super().__init__(full_message, error_type, details)


class OrgScopeError(ValidationError):
    """Raised when a tenant-scoped computation is called without an org."""

    def __init__(self, org_id: object) -> None:
        super().__init__(
            field_name="org_id",
            value=org_id if isinstance(org_id, str) else repr(org_id),
            message="orgId is required when strictOrgScope is true",
            error_code="ORG_SCOPE_REQUIRED",
            error_type=ErrorType.ORG_SCOPE,
        )


class RepositoryError(DomainError):
    """Raised when a data-access operation fails."""

    def __init__(
        self,
        operation: str,
        message: str,
        table: str | None = None,
    ) -> None:
        self.operation = operation
        self.table = table
        super().__init__(
            f"Repository operation '{operation}' failed: {message}",
            ErrorType.REPOSITORY,
            {"operation": operation, "table": table},
        )
