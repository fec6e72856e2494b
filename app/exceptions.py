from typing import Any, Mapping, Optional


class ServiceError(Exception):
    """Base class for typed failures raised by the service and security layers.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (field errors, validation info)
        code: machine-readable error code
        http_status: suggested HTTP status code for handlers
    """

    http_status = 500
    default_message = "Service error"
    default_code = "SERVICE_ERROR"

    def __init__(self, message: Optional[str] = None, details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        message = message or self.default_message
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload

    def __str__(self) -> str:
        return self.message


class ServiceValidationError(ServiceError):
    """Raised when input data is invalid or a precondition for a service call is not met."""

    http_status = 400
    default_message = "Invalid input"
    default_code = "SERVICE_VALIDATION_ERROR"


class NotFoundError(ServiceError):
    """Raised when a requested resource was not found."""

    http_status = 404
    default_message = "Not found"
    default_code = "NOT_FOUND"


class ConflictError(ServiceError):
    """Raised when a resource conflict occurs (e.g., duplicate entry)."""

    http_status = 409
    default_message = "Conflict"
    default_code = "CONFLICT"


class PathTraversalError(ServiceError):
    """Raised when a file name would escape its confinement directory."""

    http_status = 400
    default_message = "Invalid file name"
    default_code = "PATH_TRAVERSAL"


class UnsafeDeserializationError(ServiceError):
    """Raised when a payload cannot be decoded into its expected shape safely.

    Covers payloads that name their own runtime type, binary object streams,
    XML with DTDs or entities, and plain shape mismatches.
    """

    http_status = 400
    default_message = "Payload rejected"
    default_code = "UNSAFE_DESERIALIZATION"


class MissingConfigError(ServiceError):
    """Raised when a required secret or configuration value is absent.

    The name of the missing key is kept in ``key`` and never sent to clients.
    """

    http_status = 500
    default_message = "Required configuration is missing"
    default_code = "MISSING_CONFIG"

    def __init__(self, key: str, message: Optional[str] = None):
        super().__init__(message or f"Required configuration '{key}' is not set")
        self.key = key

    def to_dict(self) -> dict:
        return {"message": self.default_message, "code": self.code}


class WeakPrimitiveError(ServiceError):
    """Raised when configuration selects a forbidden crypto or RNG primitive."""

    http_status = 500
    default_message = "Forbidden cryptographic primitive"
    default_code = "WEAK_PRIMITIVE"
