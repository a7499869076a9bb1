"""
Models for the FHIR REST client.

This module contains models for:
- FHIR wire structures (OperationOutcome, Bundle)
- Request/response bookkeeping (RequestSpec, ResponseHeaders)
"""

from fhir_rest_client.models.fhir import (
    Bundle,
    BundleEntry,
    BundleLink,
    IssueSeverity,
    OperationOutcome,
    OperationOutcomeIssue,
)
from fhir_rest_client.models.request import (
    RequestSpec,
    ResourceDescription,
    ResponseHeaders,
    StatusCode,
)

__all__ = [
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
]
