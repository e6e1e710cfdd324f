"""Message text sanitization."""

import re

_CONTROL_CHARS = re.compile(r"[\x00-\x1f]")
# Whitespace plus the byte order mark, which browsers' String.trim() also drops
_EDGE_SPACE = re.compile(r"^[\s\ufeff]+|[\s\ufeff]+$")


def sanitize_text(text) -> str:
    """Strip C0 control characters, then surrounding whitespace.

    Anything that is not a string sanitizes to an empty string.
    """
    if not isinstance(text, str):
        return ""
    return _EDGE_SPACE.sub("", _CONTROL_CHARS.sub("", text))
