"""
Request options for the FHIR client.

An option hooks into exactly one phase of an exchange:

- PreRequestOption: edits the outgoing RequestSpec before it is sent
- PostRequestOption: inspects the httpx.Response before its body is read
- PostParseOption: inspects (or follows up on) the decoded result

Options are applied in the order given within their phase; the phases
themselves always run in the order above.
"""

import inspect
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Union

import httpx

from fhir_rest_client.errors import ReferenceResolutionError
from fhir_rest_client.models.request import RequestSpec, ResponseHeaders, StatusCode
from fhir_rest_client.services.targets import DecodeInto, DecodeManyInto, Target
from fhir_rest_client.utils import append_query_param, parse_http_date

if TYPE_CHECKING:
    from fhir_rest_client.services.fhir_client import FHIRClient

HeaderValues = Mapping[str, str | Sequence[str]] | httpx.Headers


@dataclass(frozen=True)
class PreRequestOption:
    """Processes the request before it is sent."""

    apply: Callable[["FHIRClient", RequestSpec], None]


@dataclass(frozen=True)
class PostRequestOption:
    """Processes the response after it has been received; may be async."""

    apply: Callable[["FHIRClient", httpx.Response], Union[None, Awaitable[None]]]


@dataclass(frozen=True)
class PostParseOption:
    """Processes the result after it has been decoded; may be async."""

    apply: Callable[["FHIRClient", Any], Union[None, Awaitable[None]]]


Option = Union[PreRequestOption, PostRequestOption, PostParseOption]


async def run_hook(hook: Callable[..., Any], *args: Any) -> None:
    """Call a sync or async option hook."""
    result = hook(*args)
    if inspect.isawaitable(result):
        await result


def _header_items(headers: HeaderValues) -> list[tuple[str, str]]:
    if isinstance(headers, httpx.Headers):
        return headers.multi_items()
    items: list[tuple[str, str]] = []
    for key, value in headers.items():
        if isinstance(value, str):
            items.append((key, value))
        else:
            items.extend((key, v) for v in value)
    return items


# Pre-request options


def query_param(key: str, value: str) -> PreRequestOption:
    """Add a query parameter; existing parameters (even with the same key) are kept."""

    def apply(_: "FHIRClient", request: RequestSpec) -> None:
        request.url = append_query_param(request.url, key, value)

    return PreRequestOption(apply)


def at_url(url: str) -> PreRequestOption:
    """Send the request to the given absolute URL."""

    def apply(_: "FHIRClient", request: RequestSpec) -> None:
        request.url = str(url)

    return PreRequestOption(apply)


def at_path(*segments: str) -> PreRequestOption:
    """Send the request to a path relative to the client's base URL."""

    def apply(client: "FHIRClient", request: RequestSpec) -> None:
        request.url = client.path(*segments)

    return PreRequestOption(apply)


def request_headers(headers: HeaderValues) -> PreRequestOption:
    """Add request headers. A value already present under the same key is not duplicated."""
    items = _header_items(headers)

    def apply(_: "FHIRClient", request: RequestSpec) -> None:
        for key, value in items:
            request.add_header(key, value)

    return PreRequestOption(apply)


def set_request_headers(headers: HeaderValues) -> PreRequestOption:
    """Set request headers that have no value yet. Existing values are never overwritten."""
    items = _header_items(headers)

    def apply(_: "FHIRClient", request: RequestSpec) -> None:
        for key, value in items:
            request.set_header(key, value)

    return PreRequestOption(apply)


# Post-request options


def response_headers(target: ResponseHeaders) -> PostRequestOption:
    """Populate the given ResponseHeaders with the headers received from the server."""

    def apply(_: "FHIRClient", response: httpx.Response) -> None:
        headers = response.headers
        target.headers = httpx.Headers(headers.raw)
        target.etag = headers.get("ETag", "")
        target.content_type = headers.get("Content-Type", "")
        target.last_modified = parse_http_date(headers.get("Last-Modified"))
        target.date = parse_http_date(headers.get("Date"))

    return PostRequestOption(apply)


def response_status_code(target: StatusCode) -> PostRequestOption:
    """Capture the HTTP status code, also for responses that fail the call."""

    def apply(_: "FHIRClient", response: httpx.Response) -> None:
        target.value = response.status_code

    return PostRequestOption(apply)


# Post-parse options


def _get_field(value: Any, name: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(name)
    return getattr(value, name, None)


def _reference_of(field_name: str, value: Any) -> str:
    reference = _get_field(value, "reference")
    if not isinstance(reference, str) or not reference:
        raise ReferenceResolutionError(field_name, "reference is missing or not a string")
    return reference


def resolve_ref(field_name: str, target: Target) -> PostParseOption:
    """
    Resolve the reference(s) in a field of the result by reading them from the server.

    To resolve a list of references pass a DecodeManyInto target; the
    referenced resources are read one after another, in list order.

    Args:
        field_name: Name of the Reference field in the decoded result
        target: DecodeInto (single reference) or DecodeManyInto (list of references)
    """

    async def apply(client: "FHIRClient", result: Any) -> None:
        value = _get_field(result, field_name)
        if value is None:
            raise ReferenceResolutionError(field_name, "field not present in result")

        if isinstance(value, (list, tuple)):
            if not isinstance(target, DecodeManyInto):
                raise ReferenceResolutionError(
                    field_name, "field holds multiple references, use DecodeManyInto"
                )
            resolved = []
            for item in value:
                resolved.append(
                    await client.read(_reference_of(field_name, item), target=DecodeInto(target.type_))
                )
            target.value = resolved
            return

        if isinstance(target, DecodeManyInto):
            raise ReferenceResolutionError(field_name, "field holds a single reference, use DecodeInto")
        await client.read(_reference_of(field_name, value), target=target)

    return PostParseOption(apply)
