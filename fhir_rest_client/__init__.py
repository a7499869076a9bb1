"""
FHIR REST client.

An async client for FHIR servers: option-driven requests, size-capped
responses, OperationOutcome error detection and search-set pagination.
"""

from fhir_rest_client.config import ClientConfig, configure_logging, log_non_2xx_response
from fhir_rest_client.constants import FHIR_JSON_MEDIA_TYPE
from fhir_rest_client.errors import (
    ConfigurationError,
    FHIRClientError,
    FHIRRequestError,
    FHIRTransportError,
    InvalidNextLinkError,
    InvalidRequestURLError,
    InvalidResourceError,
    MaxIterationsReachedError,
    MissingResourceTypeError,
    NextPageError,
    OperationOutcomeError,
    PaginationError,
    ReferenceResolutionError,
    ResourceDescriptionError,
    ResponseDecodeError,
    ResponseReadError,
    ResponseTooLargeError,
    UnexpectedStatusError,
)
from fhir_rest_client.models import (
    Bundle,
    BundleEntry,
    BundleLink,
    IssueSeverity,
    OperationOutcome,
    OperationOutcomeIssue,
    RequestSpec,
    ResourceDescription,
    ResponseHeaders,
    StatusCode,
)
from fhir_rest_client.services import (
    DecodeInto,
    DecodeManyInto,
    FHIRClient,
    Option,
    PostParseOption,
    PostRequestOption,
    PreRequestOption,
    RawBytes,
    Target,
    at_path,
    at_url,
    check_operation_outcome,
    describe_resource,
    find_next_link,
    paginate,
    query_param,
    request_headers,
    resolve_ref,
    response_headers,
    response_status_code,
    set_request_headers,
)

__all__ = [
    # Client
    "FHIRClient",
    "ClientConfig",
    "configure_logging",
    "log_non_2xx_response",
    "FHIR_JSON_MEDIA_TYPE",
    # Options
    "Option",
    "PreRequestOption",
    "PostRequestOption",
    "PostParseOption",
    "at_path",
    "at_url",
    "query_param",
    "request_headers",
    "set_request_headers",
    "response_headers",
    "response_status_code",
    "resolve_ref",
    # Targets
    "Target",
    "DecodeInto",
    "DecodeManyInto",
    "RawBytes",
    # Helpers
    "check_operation_outcome",
    "describe_resource",
    "find_next_link",
    "paginate",
    # Models
    "Bundle",
    "BundleEntry",
    "BundleLink",
    "IssueSeverity",
    "OperationOutcome",
    "OperationOutcomeIssue",
    "RequestSpec",
    "ResourceDescription",
    "ResponseHeaders",
    "StatusCode",
    # Errors
    "FHIRClientError",
    "ConfigurationError",
    "ResourceDescriptionError",
    "InvalidResourceError",
    "MissingResourceTypeError",
    "ReferenceResolutionError",
    "FHIRRequestError",
    "InvalidRequestURLError",
    "FHIRTransportError",
    "ResponseReadError",
    "ResponseTooLargeError",
    "UnexpectedStatusError",
    "ResponseDecodeError",
    "OperationOutcomeError",
    "PaginationError",
    "InvalidNextLinkError",
    "NextPageError",
    "MaxIterationsReachedError",
]
