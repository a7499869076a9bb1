"""
Data structures describing one HTTP exchange with a FHIR server.
"""

from dataclasses import dataclass, field
from datetime import datetime

import httpx


@dataclass
class RequestSpec:
    """The outgoing request as it flows through the pre-request options.

    Options change it in place; the executor freezes it into an
    httpx.Request only after every pre-request option has run.
    """

    method: str
    url: str
    headers: httpx.Headers = field(default_factory=httpx.Headers)
    content: bytes | None = None

    def add_header(self, key: str, value: str) -> None:
        """Append a header value unless that exact value is already present."""
        if value in self.headers.get_list(key):
            return
        self.headers = httpx.Headers([*self.headers.raw, (key, value)])

    def set_header(self, key: str, value: str) -> None:
        """Set a header only if it has no value yet; never overwrites."""
        if self.headers.get_list(key):
            return
        self.headers[key] = value


@dataclass(frozen=True)
class ResourceDescription:
    """Often-used information extracted from a resource."""

    # Resource type, e.g. "Patient"
    type: str
    # JSON representation of the resource, so callers don't need to serialize it again
    data: bytes


@dataclass
class ResponseHeaders:
    """Response headers as received from the server."""

    headers: httpx.Headers = field(default_factory=httpx.Headers)
    etag: str = ""
    content_type: str = ""
    last_modified: datetime | None = None
    date: datetime | None = None

    def get(self, key: str, default: str | None = None) -> str | None:
        return self.headers.get(key, default)


@dataclass
class StatusCode:
    """Holder for a captured HTTP status code."""

    value: int | None = None
