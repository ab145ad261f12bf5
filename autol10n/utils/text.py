"""Text helpers for logging model output.

Model responses and source files can be large; these helpers keep log lines
and error messages readable without cutting through escape sequences.
"""

import json
import re
from typing import Any

BREAK_CHARS = {" ", "\n", "\t", ",", ".", ";", ":", "}", "]"}


def safe_truncate(text: str, max_chars: int, suffix: str = "...") -> str:
    """Truncate text to ``max_chars``, preferring a nearby break character.

    Args:
        text: Text to truncate
        max_chars: Maximum characters kept (excluding suffix)
        suffix: Appended when the text was shortened

    Returns:
        The original text if short enough, otherwise a truncated copy
    """
    if not text or len(text) <= max_chars:
        return text

    truncated = text[:max_chars]

    # Look back up to 20 characters for a cleaner cut
    for i in range(1, min(20, max_chars)):
        if truncated[-i] in BREAK_CHARS:
            truncated = truncated[: max_chars - i + 1].rstrip()
            break

    return truncated + suffix


def preview_json(value: Any, max_chars: int = 200) -> str:
    """Serialize a value to compact JSON and truncate it for display."""
    try:
        json_str = json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        json_str = str(value)
    return safe_truncate(json_str, max_chars)


def one_line(text: str, max_chars: int = 200) -> str:
    """Collapse whitespace and control characters so text fits on one log line."""
    if not text:
        return ""
    text = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", text)
    text = re.sub(r"\s+", " ", text).strip()
    return safe_truncate(text, max_chars)
