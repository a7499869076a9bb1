"""
Tests for FHIR wire models and exchange data structures.
"""

from fhir_rest_client.models import (
    Bundle,
    RequestSpec,
    ResourceDescription,
    ResponseHeaders,
    StatusCode,
)


class TestBundle:
    """Tests for the Bundle model."""

    def test_parse_search_set(self, sample_bundle):
        """Should parse a search-set Bundle."""
        bundle = Bundle.model_validate(sample_bundle)

        assert bundle.type == "searchset"
        assert bundle.total == 2
        assert bundle.link[0].relation == "self"
        assert len(bundle.entry) == 2

    def test_resources(self, sample_bundle):
        """Should return entry resources, skipping entries without one."""
        sample_bundle["entry"].append({"fullUrl": "urn:uuid:1"})
        bundle = Bundle.model_validate(sample_bundle)

        assert [r["id"] for r in bundle.resources()] == ["test-patient-123", "test-patient-456"]

    def test_defaults(self):
        """Should default to an empty Bundle."""
        bundle = Bundle()

        assert bundle.resourceType == "Bundle"
        assert bundle.link == []
        assert bundle.resources() == []


class TestExchangeStructures:
    """Tests for request and response holders."""

    def test_request_spec_defaults(self):
        """Should start without headers or body."""
        request = RequestSpec(method="GET", url="http://example.com/fhir")

        assert len(request.headers) == 0
        assert request.content is None

    def test_resource_description(self):
        """Should hold type and payload."""
        description = ResourceDescription(type="Task", data=b"{}")
        assert (description.type, description.data) == ("Task", b"{}")

    def test_response_headers_defaults(self):
        """Should start empty."""
        headers = ResponseHeaders()

        assert headers.etag == ""
        assert headers.date is None
        assert headers.get("ETag") is None

    def test_status_code_default(self):
        """Should start unset."""
        assert StatusCode().value is None
