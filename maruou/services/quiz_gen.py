from __future__ import annotations

import logging
import re
from typing import Any, Optional

import httpx

from maruou.constants import QUIZ_SIZE
from maruou.errors import ContentParseError, UpstreamError, ValidationError
from maruou.models.quiz import QuizSet
from maruou.prompts.quiz_prompt import QUIZ_SYSTEM, build_quiz_prompt
from maruou.services.extract import extract_text, parse_envelope, shape_of
from maruou.services.llm import LLMSettings, call_upstream
from maruou.services.recovery import parse_quiz_text
from maruou.services.validate import validate_quiz

log = logging.getLogger("maruou")

MAX_TOPIC_LEN = 200


def normalize_topic(topic: Any) -> str:
    if not isinstance(topic, str):
        raise ValidationError("Topic is missing or not a string")

    t = re.sub(r"\s+", " ", topic).strip()
    if not t:
        raise ValidationError("Topic is empty")
    if len(t) > MAX_TOPIC_LEN:
        raise ValidationError(f"Topic is longer than {MAX_TOPIC_LEN} characters")
    return t


async def generate_quiz(
    topic: Any,
    settings: LLMSettings,
    *,
    n: int = QUIZ_SIZE,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> QuizSet:
    """
    topic -> prompt -> upstream call -> envelope -> text -> JSON -> QuizSet.
    The first failing stage raises its QuizError subclass.
    """
    topic = normalize_topic(topic)
    prompt = build_quiz_prompt(topic, n)

    res = await call_upstream(prompt, settings, system=QUIZ_SYSTEM, transport=transport)
    if not res.ok:
        detail = res.body if res.status_code is not None else res.error
        raise UpstreamError("LLM service error", detail, upstream_status=res.status_code)

    envelope = parse_envelope(res.body)
    text = extract_text(envelope)

    try:
        candidate = parse_quiz_text(text)
    except ContentParseError:
        log.warning("Quiz parse failed topic=%r RAW (first 1200): %r", topic, text[:1200])
        raise

    quiz = validate_quiz(candidate, topic)
    log.info(
        "Quiz generated | topic=%r | shape=%s | items=%d | model=%s",
        topic,
        shape_of(envelope),
        len(quiz),
        settings.model,
    )
    return quiz
