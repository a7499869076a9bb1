"""
FHIR REST client.

This module provides FHIRClient, which reads, creates, updates, deletes and
searches resources on a FHIR server. Every call runs through one request
pipeline: pre-request options, send, post-request options, size-capped body
read, status/OperationOutcome classification, decoding and post-parse
options.
"""

from collections.abc import Sequence
from contextlib import aclosing
from typing import Any

import httpx

from fhir_rest_client.config.client import ClientConfig
from fhir_rest_client.config.logging import exchange_context, get_logger
from fhir_rest_client.config.settings import get_settings
from fhir_rest_client.constants import FHIR_JSON_MEDIA_TYPE, FORM_URLENCODED_MEDIA_TYPE
from fhir_rest_client.errors import (
    ConfigurationError,
    FHIRTransportError,
    InvalidRequestURLError,
    ResponseDecodeError,
    ResponseReadError,
    ResponseTooLargeError,
    UnexpectedStatusError,
)
from fhir_rest_client.models.request import RequestSpec
from fhir_rest_client.services.operation_outcome import check_operation_outcome
from fhir_rest_client.services.options import (
    Option,
    PostParseOption,
    PostRequestOption,
    PreRequestOption,
    at_path,
    at_url,
    run_hook,
)
from fhir_rest_client.services.resources import describe_resource, serialize_resource
from fhir_rest_client.services.targets import DecodeInto, RawBytes, Target
from fhir_rest_client.utils import (
    QueryValues,
    encode_query,
    fhir_request_headers,
    is_absolute_url,
    join_url_path,
    query_items,
    with_query,
)

logger = get_logger(__name__)


class FHIRClient:
    """Client for a FHIR server's RESTful API."""

    def __init__(
        self,
        base_url: str,
        http_client: httpx.AsyncClient | None = None,
        config: ClientConfig | None = None,
    ):
        """
        Create a FHIR client.

        Args:
            base_url: The FHIR server's base URL, e.g. https://example.com/fhir
            http_client: Transport to send requests with. If omitted, the client
                creates (and owns) an httpx.AsyncClient.
            config: Client configuration. If omitted, it is derived from the
                FHIR_CLIENT_* environment settings.

        Raises:
            ConfigurationError: If the base URL is not absolute
        """
        if not is_absolute_url(base_url):
            raise ConfigurationError(
                f"FHIR base URL must be absolute: {base_url!r}",
                details={"base_url": base_url},
            )
        self.base_url = base_url
        self.config = (config or ClientConfig.from_settings()).normalized()
        self._owns_http_client = http_client is None
        self._http_client = http_client or httpx.AsyncClient(
            timeout=get_settings().request_timeout
        )

    async def __aenter__(self) -> "FHIRClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying http client if this FHIRClient created it."""
        if self._owns_http_client:
            await self._http_client.aclose()

    def path(self, *segments: str) -> str:
        """Return the full URL for the given path segments."""
        return join_url_path(self.base_url, *segments)

    async def read(self, path: str, *options: Option, target: Target | None = None) -> Any:
        """
        Read a resource and decode it into the target.

        Args:
            path: Path relative to the base URL (e.g. "Patient/123") or an absolute URL
            *options: Request options, e.g. query_param("_elements", "id")
            target: Decode target; defaults to plain JSON values

        Returns:
            The decoded response body
        """
        seed = at_url(path) if is_absolute_url(path) else at_path(path)
        headers = httpx.Headers(fhir_request_headers())
        headers["Cache-Control"] = "no-cache"
        request = RequestSpec(method="GET", url=self.base_url, headers=headers)
        return await self._do_request(request, target, (seed, *options))

    async def create(self, resource: Any, *options: Option, target: Target | None = None) -> Any:
        """
        Create a new resource. The path is derived from the resource's resourceType.

        Args:
            resource: Raw JSON bytes, a pydantic model or a JSON-serializable value
            *options: Request options
            target: Decode target for the server's response

        Returns:
            The decoded response body
        """
        description = describe_resource(resource)
        request = RequestSpec(
            method="POST",
            url=self.base_url,
            headers=httpx.Headers(fhir_request_headers(content_type=FHIR_JSON_MEDIA_TYPE)),
            content=description.data,
        )
        return await self._do_request(request, target, (at_path(description.type), *options))

    async def update(
        self, path: str, resource: Any, *options: Option, target: Target | None = None
    ) -> Any:
        """
        Update the resource at the given path.

        Args:
            path: Path relative to the base URL, e.g. "Patient/123"
            resource: Raw JSON bytes, a pydantic model or a JSON-serializable value
            *options: Request options
            target: Decode target for the server's response

        Returns:
            The decoded response body
        """
        request = RequestSpec(
            method="PUT",
            url=self.base_url,
            headers=httpx.Headers(fhir_request_headers(content_type=FHIR_JSON_MEDIA_TYPE)),
            content=serialize_resource(resource),
        )
        return await self._do_request(request, target, (at_path(path), *options))

    async def delete(self, path: str, *options: Option) -> None:
        """Delete the resource at the given path."""
        request = RequestSpec(
            method="DELETE",
            url=self.base_url,
            headers=httpx.Headers(fhir_request_headers()),
        )
        await self._do_request(request, RawBytes(), (at_path(path), *options))

    async def search(
        self,
        resource_type: str,
        query: QueryValues | None = None,
        *options: Option,
        target: Target | None = None,
    ) -> Any:
        """
        Search for resources.

        By default the search is a POST to {type}/_search with the query
        form-encoded in the body; with use_post_search disabled it is a GET
        to {type} with the query in the URL. An empty resource type searches
        across all types.

        Args:
            resource_type: FHIR resource type, e.g. "Patient", or ""
            query: Search parameters; values may be strings or lists of strings
            *options: Request options
            target: Decode target, e.g. DecodeInto(Bundle)

        Returns:
            The decoded search set
        """
        headers = httpx.Headers(fhir_request_headers())
        if self.config.use_post_search:
            headers["Content-Type"] = FORM_URLENCODED_MEDIA_TYPE
            request = RequestSpec(
                method="POST",
                url=self.base_url,
                headers=headers,
                content=encode_query(query_items(query)).encode("ascii"),
            )
            seed = at_path(resource_type, "_search")
        else:
            request = RequestSpec(method="GET", url=self.base_url, headers=headers)
            seed = at_url(with_query(self.path(resource_type), query))
        return await self._do_request(request, target, (seed, *options))

    async def _do_request(
        self,
        request: RequestSpec,
        target: Target | None,
        options: Sequence[Option],
    ) -> Any:
        # Nested exchanges (e.g. resolve_ref reads) get their own ID
        with exchange_context():
            return await self._exchange(request, target, options)

    async def _exchange(
        self,
        request: RequestSpec,
        target: Target | None,
        options: Sequence[Option],
    ) -> Any:
        for option in options:
            if isinstance(option, PreRequestOption):
                option.apply(self, request)

        method = request.method.upper()
        if not request.url or not is_absolute_url(request.url):
            raise InvalidRequestURLError(method, request.url)
        # Build a fresh request: URL, body or method may have been replaced by an option
        try:
            http_request = self._http_client.build_request(
                method, request.url, headers=request.headers, content=request.content
            )
        except httpx.InvalidURL as e:
            raise InvalidRequestURLError(method, request.url, e) from e
        url = str(http_request.url)

        logger.debug("Sending FHIR request %s %s", method, url)
        try:
            response = await self._http_client.send(http_request, stream=True)
        except httpx.HTTPError as e:
            logger.warning("FHIR request %s %s failed: %s", method, url, e)
            raise FHIRTransportError(method, url, e) from e

        try:
            for option in options:
                if isinstance(option, PostRequestOption):
                    await run_hook(option.apply, self, response)
            data = await self._read_body(response, method, url)
        finally:
            await response.aclose()

        status = response.status_code
        logger.debug("FHIR response %s %s: status=%d, %d bytes", method, url, status, len(data))

        if not 200 <= status < 300:
            logger.warning("FHIR request %s %s returned status %d", method, url, status)
            if self.config.non_2xx_status_handler is not None:
                self.config.non_2xx_status_handler(response, data)
            outcome_error = check_operation_outcome(data, True, status)
            if outcome_error is not None:
                raise outcome_error
            raise UnexpectedStatusError(method, url, status)

        if len(data) > self.config.max_response_size:
            raise ResponseTooLargeError(method, url, status, self.config.max_response_size)

        outcome_error = check_operation_outcome(data, False, status)
        if outcome_error is not None:
            raise outcome_error

        target = target if target is not None else DecodeInto()
        try:
            result = target.decode(data)
        except ValueError as e:
            raise ResponseDecodeError(method, url, status, e) from e

        for option in options:
            if isinstance(option, PostParseOption):
                await run_hook(option.apply, self, result)
        return result

    async def _read_body(self, response: httpx.Response, method: str, url: str) -> bytes:
        """Read at most max_response_size + 1 bytes, so oversized bodies can be detected."""
        limit = self.config.max_response_size + 1
        body = bytearray()
        try:
            async with aclosing(response.aiter_bytes()) as chunks:
                async for chunk in chunks:
                    body.extend(chunk)
                    if len(body) >= limit:
                        break
        except httpx.HTTPError as e:
            raise ResponseReadError(method, url, e) from e
        return bytes(body[:limit])
