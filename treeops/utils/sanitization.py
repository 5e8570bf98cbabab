"""Input sanitization utilities."""

import re

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f-\x9f]")


def sanitize_identifier(value: str | None, max_length: int = 64) -> str:
    """Sanitize a caller-supplied identifier for safe logging and storage.

    Prevents:
    - Log injection (newlines, control characters)
    - Path-like identifiers (slashes are replaced)
    - Excessively long identifiers

    Args:
        value: The raw identifier, e.g. a tree id from the URL
        max_length: Maximum allowed identifier length

    Returns:
        The cleaned identifier, or an empty string when nothing usable remains
    """
    if not value:
        return ""

    safe_value = _CONTROL_CHARS.sub("", value)
    safe_value = safe_value.replace("\\", "-").replace("/", "-")
    safe_value = safe_value.strip()

    return safe_value[:max_length]
