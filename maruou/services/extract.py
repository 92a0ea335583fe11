from __future__ import annotations

import json
import logging
from typing import Any, Callable, List, Optional, Tuple

from maruou.errors import EmptyContentError, EnvelopeParseError

log = logging.getLogger("maruou")


def parse_envelope(body: str) -> Any:
    try:
        return json.loads(body or "")
    except ValueError:
        raise EnvelopeParseError("LLM service returned a non-JSON body", body)


# -----------------------------
# Shape probes
# -----------------------------
def _flat_text(data: Any) -> str:
    if isinstance(data, dict) and "output_text" in data:
        return str(data.get("output_text") or "").strip()
    return ""


def _structured_output(data: Any) -> str:
    if not (isinstance(data, dict) and isinstance(data.get("output"), list)):
        return ""

    texts: List[str] = []
    for item in data["output"]:
        content = item.get("content") if isinstance(item, dict) else None
        if not isinstance(content, list):
            continue
        for part in content:
            if not isinstance(part, dict):
                continue
            if isinstance(part.get("text"), str):
                texts.append(part["text"])
            elif part.get("type") == "output_text" and isinstance(part.get("content"), str):
                texts.append(part["content"])
    return "\n".join([t for t in texts if t]).strip()


def _chat_choices(data: Any) -> str:
    if not (isinstance(data, dict) and isinstance(data.get("choices"), list) and data["choices"]):
        return ""

    choice0 = data["choices"][0]
    if not isinstance(choice0, dict):
        return ""

    msg = choice0.get("message")
    if isinstance(msg, dict):
        content = msg.get("content")
        if isinstance(content, str) and content.strip():
            return content.strip()

    text = choice0.get("text")
    if isinstance(text, str):
        return text.strip()
    return ""


SHAPES: Tuple[Tuple[str, Callable[[Any], str]], ...] = (
    ("output_text", _flat_text),
    ("output", _structured_output),
    ("choices", _chat_choices),
)


def extract_text(envelope: Any) -> str:
    """
    Return the generated text from an LLM envelope.

    Shapes are probed in SHAPES order and the first non-empty text wins, so
    a flat `output_text` beats the structured `output` array, which beats
    the chat-completions `choices` array.
    """
    for name, probe in SHAPES:
        text = probe(envelope)
        if text:
            log.debug("Extracted %d chars from envelope shape=%s", len(text), name)
            return text

    raise EmptyContentError("LLM response contained no generated text", envelope)


def shape_of(envelope: Any) -> Optional[str]:
    for name, probe in SHAPES:
        if probe(envelope):
            return name
    return None
