"""
URL, query-string and header helpers shared by the client and its options.
"""

from collections.abc import Iterable, Mapping, Sequence
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import httpx

from fhir_rest_client.config.logging import get_logger
from fhir_rest_client.constants import FHIR_JSON_MEDIA_TYPE

logger = get_logger(__name__)

QueryValues = Mapping[str, str | Sequence[str]] | Iterable[tuple[str, str]]


def fhir_request_headers(
    accept: str = FHIR_JSON_MEDIA_TYPE,
    content_type: str | None = None,
) -> dict[str, str]:
    """
    Build the default HTTP headers for a FHIR request.

    Args:
        accept: Accept header value for response format
        content_type: Content-Type header for request body (None to omit)

    Returns:
        Dictionary of HTTP headers
    """
    headers = {"Accept": accept}
    if content_type:
        headers["Content-Type"] = content_type
    return headers


def is_absolute_url(url: str) -> bool:
    """Whether the URL has both a scheme and a host."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return False
    return bool(parts.scheme and parts.netloc)


def parse_absolute_url(url: str) -> str:
    """
    Validate that a URL parses and is absolute.

    The URL must also be accepted by httpx, which is stricter than urlsplit
    (e.g. about control characters).

    Raises:
        ValueError: If the URL cannot be parsed or is not absolute
    """
    parts = urlsplit(url)
    if not parts.scheme:
        raise ValueError(f"parse {url!r}: missing protocol scheme")
    if not parts.netloc:
        raise ValueError(f"parse {url!r}: missing host")
    # Accessing the port validates it
    parts.port
    try:
        httpx.URL(url)
    except httpx.InvalidURL as e:
        raise ValueError(f"parse {url!r}: {e}") from e
    return url


def join_url_path(base_url: str, *segments: str) -> str:
    """
    Append path segments to a base URL.

    Unlike urllib.parse.urljoin, the last path segment of the base URL is kept:
    join_url_path("http://x/fhir", "Patient/1") == "http://x/fhir/Patient/1".
    """
    parts = urlsplit(base_url)
    path = parts.path.rstrip("/")
    for segment in segments:
        segment = segment.strip("/")
        if segment:
            path = f"{path}/{segment}"
    if not path:
        path = "/"
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, parts.fragment))


def query_items(query: QueryValues | None) -> list[tuple[str, str]]:
    """Flatten a query mapping (values may be lists) or pair sequence into pairs."""
    if not query:
        return []
    if isinstance(query, Mapping):
        items: list[tuple[str, str]] = []
        for key, value in query.items():
            if isinstance(value, str):
                items.append((key, value))
            else:
                items.extend((key, v) for v in value)
        return items
    return [(key, value) for key, value in query]


def encode_query(items: Iterable[tuple[str, str]]) -> str:
    """
    Form-encode query pairs deterministically.

    Pairs are stably sorted by key, so values of one key keep their order.
    Spaces become '+' and reserved characters are percent-encoded.
    """
    return urlencode(sorted(items, key=lambda item: item[0]))


def append_query_param(url: str, key: str, value: str) -> str:
    """Append a query parameter to a URL, keeping existing ones, and re-encode."""
    parts = urlsplit(url)
    items = parse_qsl(parts.query, keep_blank_values=True)
    items.append((key, value))
    return urlunsplit((parts.scheme, parts.netloc, parts.path, encode_query(items), parts.fragment))


def with_query(url: str, query: QueryValues | None) -> str:
    """Replace the query string of a URL with the encoded query."""
    parts = urlsplit(url)
    return urlunsplit(
        (parts.scheme, parts.netloc, parts.path, encode_query(query_items(query)), parts.fragment)
    )


def parse_http_date(value: str | None) -> datetime | None:
    """
    Parse an HTTP-date header value.

    Returns:
        A timezone-aware UTC datetime, or None when missing or unparsable
    """
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value.strip())
    except (TypeError, ValueError):
        logger.debug("Ignoring unparsable HTTP date header: %s", value)
        return None
    if parsed.tzinfo is None:
        # "-0000" zone: UTC without a known origin
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
