"""
Service layer for the FHIR REST client.

Contains the request pipeline, its options and decode targets, and
search-set pagination.
"""

from fhir_rest_client.services.fhir_client import FHIRClient
from fhir_rest_client.services.operation_outcome import (
    check_operation_outcome,
    parse_operation_outcome,
)
from fhir_rest_client.services.options import (
    Option,
    PostParseOption,
    PostRequestOption,
    PreRequestOption,
    at_path,
    at_url,
    query_param,
    request_headers,
    resolve_ref,
    response_headers,
    response_status_code,
    set_request_headers,
)
from fhir_rest_client.services.pagination import find_next_link, paginate
from fhir_rest_client.services.resources import describe_resource, serialize_resource
from fhir_rest_client.services.targets import DecodeInto, DecodeManyInto, RawBytes, Target

__all__ = [
    "FHIRClient",
    "check_operation_outcome",
    "parse_operation_outcome",
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
    "paginate",
    "find_next_link",
    "describe_resource",
    "serialize_resource",
    "Target",
    "DecodeInto",
    "DecodeManyInto",
    "RawBytes",
]
