"""
Detection of OperationOutcome errors in FHIR response bodies.
"""

from pydantic import ValidationError

from fhir_rest_client.config.logging import get_logger
from fhir_rest_client.errors import OperationOutcomeError
from fhir_rest_client.models.fhir import OperationOutcome

logger = get_logger(__name__)


def parse_operation_outcome(data: bytes) -> OperationOutcome | None:
    """
    Parse a response body as an OperationOutcome.

    Returns:
        The OperationOutcome, or None if the body is empty, malformed or
        another resource type
    """
    if not data:
        return None
    try:
        outcome = OperationOutcome.model_validate_json(data)
    except ValidationError:
        # Only checking for an OperationOutcome here, not for malformed JSON
        return None
    if not outcome.is_operation_outcome():
        return None
    return outcome


def check_operation_outcome(
    data: bytes,
    force_error: bool,
    http_status_code: int,
) -> OperationOutcomeError | None:
    """
    Check whether a response body is an OperationOutcome that signals an error.

    Args:
        data: Raw response body
        force_error: Treat any OperationOutcome as an error, regardless of the
            severity of its issues (used for non-2xx responses)
        http_status_code: Status of the response, attached to the error

    Returns:
        OperationOutcomeError to raise, or None
    """
    outcome = parse_operation_outcome(data)
    if outcome is None:
        return None
    if not (force_error or outcome.contains_error()):
        if outcome.issue:
            logger.debug("Ignoring non-error OperationOutcome: %s", outcome.describe())
        return None
    return OperationOutcomeError(outcome, http_status_code)
