"""Tagged encoding of setting values into the text column.

Strings are stored verbatim and tagged "str"; every other value is JSON
and tagged "json". The tag lives in the row next to the value, so the
text ``"true"`` saved as a string reads back as a string rather than a
boolean. Untagged rows (seeded by hand or written before the tag
existed) fall back to: parse as JSON, else return the raw string.
"""

import json
from typing import Any, Optional, Tuple

from models.setting import Setting


def encode_value(value: Any) -> Tuple[Optional[str], Optional[str]]:
    """
    Encode a value for storage.

    Returns:
        (text, value_type); (None, None) for None

    Raises:
        TypeError: If the value is not JSON serializable
    """
    if value is None:
        return None, None
    if isinstance(value, str):
        return value, Setting.TYPE_STRING
    return json.dumps(value), Setting.TYPE_JSON


def decode_value(text: Optional[str], value_type: Optional[str]) -> Any:
    """
    Decode stored text back into a value.

    Raises:
        ValueError: If a "json" tagged value is not valid JSON
    """
    if text is None:
        return None
    if value_type == Setting.TYPE_STRING:
        return text
    if value_type == Setting.TYPE_JSON:
        return json.loads(text)
    return parse_legacy(text)


def parse_legacy(text: str) -> Any:
    """Parse JSON, returning the raw string when it is not JSON."""
    try:
        return json.loads(text)
    except ValueError:
        return text
