import json
import re
from typing import Any

from mindforge.core.errors import ResponseParseError

_OPEN_FENCE = re.compile(r"^```[a-zA-Z0-9_-]*")
_CLOSE_FENCE = "```"


def strip_code_fences(s: str) -> str:
    s = (s or "").strip()
    # remove ```json ... ``` or ``` ... ```
    if s.startswith("```"):
        s = _OPEN_FENCE.sub("", s, count=1)
    if s.endswith(_CLOSE_FENCE):
        s = s[: -len(_CLOSE_FENCE)]
    return s.strip()


def parse_response(text: str) -> Any:
    """
    Deserialize model text, tolerating a surrounding code fence.
    No other cleanup: prose around the JSON is a parse failure.
    """
    candidate = strip_code_fences(text)
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"Failed to parse AI response as JSON: {e.msg} at pos {e.pos}") from e
