"""
Pydantic models for FHIR wire structures used by the client.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from fhir_rest_client.constants import OPERATION_OUTCOME_RESOURCE_TYPE


class IssueSeverity(str, Enum):
    """Severity of an OperationOutcome issue, from least to most severe."""

    INFORMATION = "information"
    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"


# Severities that make an OperationOutcome an error
ERROR_SEVERITIES = frozenset({IssueSeverity.ERROR.value, IssueSeverity.FATAL.value})


class OperationOutcomeIssue(BaseModel):
    """A single issue in an OperationOutcome."""

    severity: str | None = Field(default=None, description="fatal | error | warning | information")
    code: str | None = Field(default=None, description="Issue type code")
    diagnostics: str | None = Field(default=None, description="Additional diagnostic info")
    details: dict[str, Any] | None = Field(default=None)

    model_config = {"extra": "allow"}

    def describe(self) -> str:
        text = f"[{self.code or ''} {self.severity or ''}]"
        if self.diagnostics is not None:
            text += f" {self.diagnostics}"
        return text


class OperationOutcome(BaseModel):
    """FHIR OperationOutcome as returned by a server."""

    resourceType: str | None = Field(default=None)
    issue: list[OperationOutcomeIssue] = Field(default_factory=list, description="List of issues")

    model_config = {"extra": "allow"}

    @field_validator("issue", mode="before")
    @classmethod
    def null_issue_as_empty(cls, value: Any) -> Any:
        """Servers may send "issue": null."""
        return [] if value is None else value

    def is_operation_outcome(self) -> bool:
        """Whether resourceType names an OperationOutcome (case-insensitive)."""
        if self.resourceType is None:
            return False
        return self.resourceType.lower() == OPERATION_OUTCOME_RESOURCE_TYPE.lower()

    def contains_error(self) -> bool:
        """Whether at least one issue has severity error or fatal."""
        return any(issue.severity in ERROR_SEVERITIES for issue in self.issue)

    def describe(self) -> str:
        """Render the issues as a single human readable line."""
        messages = "; ".join(issue.describe() for issue in self.issue)
        return f"{OPERATION_OUTCOME_RESOURCE_TYPE}, issues: {messages}"


class BundleLink(BaseModel):
    """A navigation link of a Bundle."""

    relation: str = Field(description="Link relation, e.g. self, next, previous")
    url: str = Field(description="Link target")

    model_config = {"extra": "allow"}


class BundleEntry(BaseModel):
    """A single entry in a FHIR Bundle."""

    fullUrl: str | None = Field(default=None)
    resource: dict[str, Any] | None = Field(default=None)
    search: dict[str, Any] | None = Field(default=None)

    model_config = {"extra": "allow"}


class Bundle(BaseModel):
    """FHIR Bundle, typically one page of a search set."""

    resourceType: str = Field(default="Bundle")
    id: str | None = Field(default=None)
    type: str | None = Field(default=None, description="Bundle type (searchset, batch, etc.)")
    total: int | None = Field(default=None, description="Total matching resources")
    link: list[BundleLink] = Field(default_factory=list, description="Pagination links")
    entry: list[BundleEntry] = Field(default_factory=list, description="Bundle entries")

    model_config = {"extra": "allow"}

    def resources(self) -> list[dict[str, Any]]:
        """Return the resources of all entries, skipping entries without one."""
        return [entry.resource for entry in self.entry if entry.resource is not None]
