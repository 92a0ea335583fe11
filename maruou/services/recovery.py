from __future__ import annotations

import json
import re
from typing import Any

from maruou.errors import ContentParseError

_FENCE_OPEN_RE = re.compile(r"^```[A-Za-z0-9_+-]*[ \t]*\r?\n?")
_FENCE_CLOSE_RE = re.compile(r"\r?\n?```\s*$")


def strip_fences(text: str) -> str:
    """
    Drop one leading ``` (optionally with a language tag like ```json)
    and one trailing ```.
    """
    s = (text or "").strip()
    s = _FENCE_OPEN_RE.sub("", s, count=1)
    s = _FENCE_CLOSE_RE.sub("", s, count=1)
    return s.strip()


def _loads_array(text: str) -> Any:
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("JSON root is not an array")
    return data


def parse_quiz_text(text: str) -> Any:
    try:
        return _loads_array(text)
    except ValueError:
        pass

    try:
        return json.loads(strip_fences(text))
    except ValueError:
        raise ContentParseError("Could not parse the generated quiz as JSON", text)
