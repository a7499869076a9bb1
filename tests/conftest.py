"""
Shared pytest fixtures for FHIR client tests.
"""

import json
import os
from typing import Any

import httpx
import pytest

from fhir_rest_client.config import ClientConfig
from fhir_rest_client.constants import FHIR_JSON_MEDIA_TYPE
from fhir_rest_client.services.fhir_client import FHIRClient

# Keep a developer's .env or shell settings out of the tests
for _key in list(os.environ):
    if _key.startswith("FHIR_CLIENT_"):
        del os.environ[_key]

BASE_URL = "http://example.com/fhir"


def json_response(
    body: Any,
    status_code: int = 200,
    headers: dict[str, str] | None = None,
) -> httpx.Response:
    """Build a FHIR JSON response; str/bytes bodies are sent verbatim."""
    if isinstance(body, str):
        content = body.encode("utf-8")
    elif isinstance(body, bytes):
        content = body
    else:
        content = json.dumps(body, separators=(",", ":")).encode("utf-8")
    return httpx.Response(
        status_code,
        headers={"Content-Type": FHIR_JSON_MEDIA_TYPE, **(headers or {})},
        content=content,
    )


def operation_outcome(severity: str = "error", diagnostics: str = "some error message") -> dict:
    """Build an OperationOutcome body with a single processing issue."""
    return {
        "resourceType": "OperationOutcome",
        "issue": [{"severity": severity, "code": "processing", "diagnostics": diagnostics}],
    }


class RequestRecorder:
    """httpx.MockTransport handler that records requests and replays responses in order."""

    def __init__(self, *responses: httpx.Response):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        template = self.responses[len(self.requests) - 1]
        # A response object can only be sent once, so hand out a copy
        return httpx.Response(
            template.status_code,
            headers=template.headers,
            content=template.content,
        )

    @property
    def request(self) -> httpx.Request:
        """The most recent request."""
        return self.requests[-1]


@pytest.fixture(autouse=True)
def reset_settings_cache():
    """Reset cached settings between tests to avoid state leakage."""
    from fhir_rest_client.config.settings import reset_settings

    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def base_url() -> str:
    """Base URL of the stub FHIR server."""
    return BASE_URL


@pytest.fixture
def fhir_response():
    """Factory for FHIR JSON responses."""
    return json_response


@pytest.fixture
def error_outcome():
    """Factory for OperationOutcome bodies."""
    return operation_outcome


@pytest.fixture
def stub_client():
    """
    Factory for a FHIRClient backed by a recording stub transport.

    Usage: client, recorder = stub_client(response1, response2, config=...)
    """

    def factory(
        *responses: httpx.Response,
        config: ClientConfig | None = None,
        base_url: str = BASE_URL,
    ) -> tuple[FHIRClient, RequestRecorder]:
        recorder = RequestRecorder(*responses)
        http_client = httpx.AsyncClient(transport=httpx.MockTransport(recorder))
        client = FHIRClient(base_url, http_client=http_client, config=config or ClientConfig())
        return client, recorder

    return factory


@pytest.fixture
def sample_patient() -> dict[str, Any]:
    """Sample FHIR Patient resource."""
    return {
        "resourceType": "Patient",
        "id": "test-patient-123",
        "meta": {
            "versionId": "1",
            "lastUpdated": "2024-01-15T10:30:00Z",
        },
        "active": True,
        "name": [
            {
                "use": "official",
                "family": "Smith",
                "given": ["John", "William"],
            }
        ],
        "gender": "male",
        "birthDate": "1970-05-15",
    }


@pytest.fixture
def sample_bundle() -> dict[str, Any]:
    """Sample FHIR search-set Bundle without further pages."""
    return {
        "resourceType": "Bundle",
        "type": "searchset",
        "total": 2,
        "link": [{"relation": "self", "url": f"{BASE_URL}/Patient?name=Smith"}],
        "entry": [
            {
                "fullUrl": f"{BASE_URL}/Patient/test-patient-123",
                "resource": {"resourceType": "Patient", "id": "test-patient-123"},
                "search": {"mode": "match"},
            },
            {
                "fullUrl": f"{BASE_URL}/Patient/test-patient-456",
                "resource": {"resourceType": "Patient", "id": "test-patient-456"},
                "search": {"mode": "match"},
            },
        ],
    }
