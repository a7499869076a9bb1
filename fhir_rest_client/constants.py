"""
Client constants.

These values are part of the FHIR wire contract and are intentionally not
configurable via environment variables.
"""

# Media types
FHIR_JSON_MEDIA_TYPE = "application/fhir+json"
FORM_URLENCODED_MEDIA_TYPE = "application/x-www-form-urlencoded"

# Resource type of the FHIR error/diagnostic payload
OPERATION_OUTCOME_RESOURCE_TYPE = "OperationOutcome"

# Request limits
REQUEST_TIMEOUT_SECONDS = 30
DEFAULT_MAX_RESPONSE_SIZE = 10 * 1024 * 1024  # 10 MB

# Pagination
DEFAULT_MAX_PAGINATION_ITERATIONS = 100
NEXT_LINK_RELATION = "next"
