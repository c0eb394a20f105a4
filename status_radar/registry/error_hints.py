"""Error hints for registry validation errors.

Provides user-friendly hints with actionable remediation steps
for common validation errors.
"""

from typing import Final


ERROR_HINTS: Final[dict[str, str]] = {
    "missing": "This field is required. Please add it to the registry.",
    "float_type": "This field must be a number.",
    "string_type": "This field must be a text string.",
    "list_type": "This field must be a list.",
    "dict_type": "This field must be a mapping.",
    "greater_than_equal": "The value is too small. Check the minimum allowed.",
    "less_than_equal": "The value is too large. Check the maximum allowed.",
    "string_pattern_mismatch": "Use lowercase letters, numbers, hyphens, or underscores only.",
    "extra_forbidden": "Unknown field. Check the spelling against the registry format.",
    "value_error": "Check the value format. URLs must start with http:// or https://.",
    "yaml_parse_error": "Invalid YAML syntax. Check for proper indentation and formatting.",
    "encoding_error": "The registry must be UTF-8 encoded text.",
}

FIELD_HINTS: Final[dict[str, str]] = {
    "id": "Use lowercase letters, numbers, hyphens, or underscores (e.g., 'github').",
    "status_url": "Must be a Statuspage v2 endpoint (e.g., 'https://www.githubstatus.com/api/v2/status.json').",
    "homepage_url": "Must be a valid HTTP/HTTPS URL.",
    "up_probability": "Must be between 0.0 and 1.0.",
    "template": "Must be an HTTP/HTTPS URL containing the '{url}' placeholder.",
}


def get_error_hint(error_type: str, field_name: str | None = None) -> str:
    """Get a user-friendly hint for a validation error.

    Args:
        error_type: The Pydantic error type (e.g., 'missing').
        field_name: Optional dotted field path for field-specific hints.

    Returns:
        A user-friendly hint string.
    """
    if field_name:
        simple_field = field_name.split(".")[-1]
        if simple_field in FIELD_HINTS:
            return FIELD_HINTS[simple_field]

    return ERROR_HINTS.get(
        error_type, "Check the registry documentation for valid values."
    )


def format_validation_error(
    location: str,
    message: str,
    error_type: str,
    *,
    include_hint: bool = True,
) -> str:
    """Format a validation error with optional hint.

    Args:
        location: The error location (e.g., 'services.0.status_url').
        message: The original error message.
        error_type: The error type.
        include_hint: Whether to include a hint.

    Returns:
        Formatted error string.
    """
    base = f"{location}: {message}"
    if include_hint:
        hint = get_error_hint(error_type, location)
        return f"{base}\n    Hint: {hint}"
    return base
