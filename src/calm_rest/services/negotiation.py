"""Content negotiation against the ``Accept`` header."""

import logging
import re
from collections.abc import Sequence

logger = logging.getLogger(__name__)

# media-range = ( "*/*" | ( type "/" "*" ) | ( type "/" subtype ) ) *( ";" parameter )
_MEDIA_RANGE = re.compile(r"^\s*([A-Za-z0-9!#$&^_.+*-]+)/([A-Za-z0-9!#$&^_.+*-]+)\s*(;.*)?$")

# LWS = [CRLF] 1*( SP | HT )
_LWS = re.compile(r"\r?\n[ \t]+")


def accepts_json(header_values: Sequence[str]) -> bool:
    """Check whether any Accept header admits application/json.

    A request without an Accept header accepts anything. Malformed media
    ranges are skipped.

    Args:
        header_values: Every ``Accept`` header value of the request

    Returns:
        True if the response may be JSON, False otherwise
    """
    if not header_values:
        return True

    for header in header_values:
        for element in _LWS.sub(" ", header).split(","):
            if not element.strip():
                continue
            match = _MEDIA_RANGE.match(element)
            if match is None:
                logger.debug("Ignoring invalid media range: %r", element)
                continue
            media_type, subtype = match.group(1).lower(), match.group(2).lower()
            if media_type in ("*", "application") and subtype in ("*", "json"):
                return True
    return False
