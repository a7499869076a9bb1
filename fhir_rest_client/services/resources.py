"""
Resource description: extract the resource type and JSON payload of a resource.
"""

import json
from typing import Any

from pydantic import BaseModel, ValidationError

from fhir_rest_client.errors import InvalidResourceError, MissingResourceTypeError
from fhir_rest_client.models.request import ResourceDescription


class _ResourceTypeProbe(BaseModel):
    """Reads only the resourceType of a JSON resource."""

    resourceType: str | None = None

    model_config = {"extra": "ignore"}


def serialize_resource(resource: Any) -> bytes:
    """
    Serialize a resource to JSON bytes.

    Raw bytes are returned verbatim, pydantic models are dumped by alias
    without unset (None) fields and anything else goes through json.dumps.

    Raises:
        InvalidResourceError: If the resource cannot be serialized
    """
    if isinstance(resource, (bytes, bytearray)):
        return bytes(resource)
    try:
        if isinstance(resource, BaseModel):
            return resource.model_dump_json(by_alias=True, exclude_none=True).encode("utf-8")
        return json.dumps(resource, separators=(",", ":")).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise InvalidResourceError(type(resource).__name__, e) from e


def describe_resource(resource: Any) -> ResourceDescription:
    """
    Extract often-used information from a resource.

    Args:
        resource: Raw JSON bytes, a pydantic model or any JSON-serializable value

    Returns:
        ResourceDescription with the resource type and the JSON payload

    Raises:
        InvalidResourceError: If the resource cannot be serialized or parsed
        MissingResourceTypeError: If the resource has no resourceType
    """
    resource_class = type(resource).__name__
    data = serialize_resource(resource)
    try:
        probe = _ResourceTypeProbe.model_validate_json(data)
    except ValidationError as e:
        raise InvalidResourceError(resource_class, e) from e
    if not probe.resourceType:
        raise MissingResourceTypeError(resource_class)
    return ResourceDescription(type=probe.resourceType, data=data)
