"""Domain exceptions for the resource portal.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. Presentation
layer maps them to HTTP responses in exception handlers.
"""

from typing import Any

from portal.domain.enums import AuthFailureReason, DenyReason


class PortalException(Exception):
    """Base exception for all portal application errors.

    Presentation layer maps these to HTTP responses using message,
    error_code, and details.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API responses: {error, message, details}."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(PortalException):
    """Raised when input validation fails (e.g. blank name, too many courses)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(PortalException):
    """Raised when a request carries no credential or one the provider rejects."""

    def __init__(
        self,
        reason: AuthFailureReason = AuthFailureReason.INVALID_CREDENTIAL,
        message: str | None = None,
    ) -> None:
        self.reason = reason
        if message is None:
            message = (
                "Authorization token is required"
                if reason == AuthFailureReason.NO_CREDENTIAL
                else "Invalid or expired token"
            )
        super().__init__(message, "AUTHENTICATION_ERROR", {"reason": reason.value})


class DomainNotAllowedException(PortalException):
    """Raised when a sign-in email is outside the institution's domains."""

    def __init__(self) -> None:
        super().__init__(
            "Only institutional email addresses can sign in.",
            "DOMAIN_NOT_ALLOWED",
        )


class NotPreRegisteredException(PortalException):
    """Raised when a verified identity has no directory record and may not self-register."""

    def __init__(self) -> None:
        super().__init__(
            "Your email is not registered. Please contact the admin.",
            "NOT_PRE_REGISTERED",
        )


class IdentityConflictException(PortalException):
    """Raised when a directory record is already linked to a different subject id."""

    def __init__(self) -> None:
        super().__init__(
            "This email is already linked to a different account.",
            "IDENTITY_CONFLICT",
        )


class IdentityProviderException(PortalException):
    """Raised when the identity provider is unreachable or answers unusably.

    The client sees an opaque message; the cause is logged server-side.
    """

    def __init__(self, message: str = "Identity provider unavailable") -> None:
        super().__init__(message, "IDENTITY_PROVIDER_ERROR")


class AuthorizationException(PortalException):
    """Raised when the gate denies an action for the acting record."""

    def __init__(
        self,
        action: str | None = None,
        reason: DenyReason = DenyReason.ROLE_NOT_PERMITTED,
        message: str = "Permission denied",
    ) -> None:
        self.reason = reason
        if action:
            message = f"Permission denied: {action}"
        details: dict[str, Any] = {"reason": reason.value}
        if action:
            details["action"] = action
        super().__init__(message, "PERMISSION_DENIED", details)


class ResourceNotFoundException(PortalException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class AlreadyExistsException(PortalException):
    """Raised when creating or renaming something onto an existing unique key."""

    def __init__(self, resource_type: str, field: str, value: str) -> None:
        super().__init__(
            f"{resource_type} with this {field} already exists",
            "ALREADY_EXISTS",
            {"resource_type": resource_type, "field": field, "value": value},
        )


class CourseInUseException(PortalException):
    """Raised when deleting a course that is some faculty member's only course."""

    def __init__(self, course_id: str, faculty_ids: list[str]) -> None:
        super().__init__(
            "Course is the only course of at least one faculty member",
            "COURSE_IN_USE",
            {"course_id": course_id, "faculty_ids": faculty_ids},
        )


class PersistenceConflictException(PortalException):
    """Raised when a uniqueness guard was taken by a concurrent writer."""

    def __init__(self, key_type: str, key: str) -> None:
        super().__init__(
            "A concurrent update conflicted with this request; retry.",
            "PERSISTENCE_CONFLICT",
            {"key_type": key_type},
        )
        self.key = key
