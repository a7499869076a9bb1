"""
Custom error types for the FHIR REST client.

This module provides specific error classes for the different ways a FHIR
exchange can fail, so callers can tell transport problems, server-reported
OperationOutcome errors and malformed data apart.
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from fhir_rest_client.models.fhir import OperationOutcome


class FHIRClientError(Exception):
    """Base exception for all FHIR client errors."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ):
        self.message = message
        self.details = details or {}
        self.cause = cause
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for serialization."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


# Configuration Errors


class ConfigurationError(FHIRClientError):
    """Raised when the client is configured with invalid values."""

    pass


# Resource Errors


class ResourceDescriptionError(FHIRClientError):
    """Base exception for resources that cannot be described."""

    pass


class InvalidResourceError(ResourceDescriptionError):
    """Raised when a resource cannot be serialized or parsed as JSON."""

    def __init__(self, resource_class: str, original_error: BaseException):
        self.resource_class = resource_class
        message = f"invalid resource of type {resource_class}: {original_error}"
        super().__init__(
            message,
            details={"resource_class": resource_class, "original_error": str(original_error)},
            cause=original_error,
        )


class MissingResourceTypeError(ResourceDescriptionError):
    """Raised when a resource has no (or an empty) resourceType field."""

    def __init__(self, resource_class: str):
        self.resource_class = resource_class
        message = f"resourceType not present in resource of type {resource_class}"
        super().__init__(message, details={"resource_class": resource_class})


class ReferenceResolutionError(FHIRClientError):
    """Raised when a reference field of a resource cannot be resolved."""

    def __init__(self, field_name: str, reason: str):
        self.field_name = field_name
        message = f"cannot resolve reference '{field_name}': {reason}"
        super().__init__(message, details={"field_name": field_name, "reason": reason})


# Request Errors


class FHIRRequestError(FHIRClientError):
    """Base exception for failures of a single HTTP exchange."""

    def __init__(
        self,
        message: str,
        method: str,
        url: str,
        status_code: int | None = None,
        cause: BaseException | None = None,
    ):
        self.method = method
        self.url = url
        self.status_code = status_code
        details: dict[str, Any] = {"method": method, "url": url}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message, details=details, cause=cause)


class InvalidRequestURLError(FHIRRequestError):
    """Raised when the request URL is not absolute, or not a valid URL, after applying options."""

    def __init__(self, method: str, url: str, original_error: BaseException | None = None):
        message = f"FHIR request URL is not absolute ({method} {url!r})"
        if original_error is not None:
            message = f"FHIR request URL is invalid ({method} {url!r}): {original_error}"
        super().__init__(message, method, url, cause=original_error)


class FHIRTransportError(FHIRRequestError):
    """Raised when the HTTP transport fails to deliver the request."""

    def __init__(self, method: str, url: str, original_error: BaseException):
        super().__init__(
            f"FHIR request failed ({method} {url}): {original_error}",
            method,
            url,
            cause=original_error,
        )


class ResponseReadError(FHIRRequestError):
    """Raised when the response body cannot be read."""

    def __init__(self, method: str, url: str, original_error: BaseException):
        super().__init__(
            f"FHIR response read failed ({method} {url}): {original_error}",
            method,
            url,
            cause=original_error,
        )


class ResponseTooLargeError(FHIRRequestError):
    """Raised when a response body exceeds the configured maximum size."""

    def __init__(self, method: str, url: str, status_code: int, max_response_size: int):
        self.max_response_size = max_response_size
        super().__init__(
            f"FHIR response exceeds max. safety limit of {max_response_size} bytes "
            f"({method} {url}, status={status_code})",
            method,
            url,
            status_code=status_code,
        )
        self.details["max_response_size"] = max_response_size


class UnexpectedStatusError(FHIRRequestError):
    """Raised for non-2xx responses that carry no OperationOutcome."""

    def __init__(self, method: str, url: str, status_code: int):
        super().__init__(
            f"FHIR request failed ({method} {url}, status={status_code})",
            method,
            url,
            status_code=status_code,
        )


class ResponseDecodeError(FHIRRequestError):
    """Raised when the response body cannot be decoded into the target."""

    def __init__(self, method: str, url: str, status_code: int, original_error: BaseException):
        super().__init__(
            f"FHIR response unmarshal failed ({method} {url}, status={status_code}): {original_error}",
            method,
            url,
            status_code=status_code,
            cause=original_error,
        )


class OperationOutcomeError(FHIRClientError):
    """Raised when the server responds with an OperationOutcome describing an error."""

    def __init__(self, outcome: "OperationOutcome", http_status_code: int):
        self.outcome = outcome
        self.http_status_code = http_status_code
        super().__init__(
            outcome.describe(),
            details={
                "http_status_code": http_status_code,
                "issues": [issue.model_dump(exclude_none=True) for issue in outcome.issue],
            },
        )

    @property
    def issues(self) -> list:
        """Issues of the underlying OperationOutcome, in server order."""
        return list(self.outcome.issue)


# Pagination Errors


class PaginationError(FHIRClientError):
    """Base exception for search-set pagination failures."""

    pass


class InvalidNextLinkError(PaginationError):
    """Raised when a page's 'next' link is not a usable URL."""

    def __init__(self, url: str, original_error: BaseException):
        self.url = url
        super().__init__(
            f"paginate: invalid 'next' link for search set: {original_error}",
            details={"url": url},
            cause=original_error,
        )


class NextPageError(PaginationError):
    """Raised when fetching the next page of a search set fails."""

    def __init__(self, url: str, original_error: BaseException):
        self.url = url
        super().__init__(
            f"paginate: query next page failed (url={url}): {original_error}",
            details={"url": url},
            cause=original_error,
        )


class MaxIterationsReachedError(PaginationError):
    """Raised when pagination does not terminate within the iteration ceiling."""

    def __init__(self, max_iterations: int):
        self.max_iterations = max_iterations
        super().__init__(
            f"paginate: max. search iterations reached ({max_iterations}), possible bug",
            details={"max_iterations": max_iterations},
        )
