"""Normalization of Statuspage v2 documents into canonical status pairs.

Relays return the upstream document either directly or wrapped in an
envelope whose payload is a JSON string (``{"contents": "..."}``). Both shapes
are reduced to a :class:`NormalizedStatus`, or ``None`` when the document
cannot be interpreted.
"""

import json
from typing import Any

from status_radar.status.models import (
    INDICATOR_STATUS_MAP,
    NormalizedStatus,
    ServiceStatus,
)


ENVELOPE_KEY = "contents"
DEFAULT_DESCRIPTION = "Unknown"


def _decode(raw: Any) -> Any:
    if isinstance(raw, str | bytes | bytearray):
        return json.loads(raw)
    return raw


def unwrap_envelope(raw: Any) -> Any:
    """Decode a raw body and unwrap one level of relay envelope.

    Args:
        raw: Decoded JSON value, JSON text, or an envelope.

    Returns:
        The upstream document.

    Raises:
        ValueError: If JSON text cannot be decoded.
    """
    data = _decode(raw)
    if isinstance(data, dict) and data.get(ENVELOPE_KEY):
        data = _decode(data[ENVELOPE_KEY])
    return data


def map_indicator(indicator: str) -> ServiceStatus:
    """Map a non-empty upstream indicator to a canonical status.

    Any indicator outside the known non-failure set maps to DOWN.
    """
    return INDICATOR_STATUS_MAP.get(indicator, ServiceStatus.DOWN)


def normalize(raw: Any) -> NormalizedStatus | None:
    """Normalize a relay response body.

    Args:
        raw: Response body as decoded JSON, JSON text, or relay envelope.

    Returns:
        NormalizedStatus, or None if the document is malformed or carries no
        indicator.
    """
    try:
        data = unwrap_envelope(raw)
    except (ValueError, RecursionError):
        return None

    if not isinstance(data, dict):
        return None
    status_block = data.get("status")
    if not isinstance(status_block, dict):
        return None

    indicator = status_block.get("indicator")
    if not isinstance(indicator, str) or not indicator:
        return None

    description = status_block.get("description")
    if not isinstance(description, str) or not description:
        description = DEFAULT_DESCRIPTION

    return NormalizedStatus(status=map_indicator(indicator), message=description)
