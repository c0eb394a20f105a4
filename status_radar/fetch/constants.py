"""HTTP constants for the fetch layer.

Centralizes all HTTP-related constants to avoid duplication across modules.
"""

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_BAD_REQUEST = 400
HTTP_STATUS_SERVER_ERROR_MIN = 500
HTTP_STATUS_SERVER_ERROR_MAX = 600

# Per relay attempt timeout
DEFAULT_RELAY_TIMEOUT_MS = 8000
MAX_RELAY_TIMEOUT_MS = 120_000

DEFAULT_USER_AGENT = "status-radar/0.1"

# Characters left unescaped by JavaScript's encodeURIComponent besides
# the ones urllib.parse.quote always keeps
URI_COMPONENT_SAFE = "!*'()"
