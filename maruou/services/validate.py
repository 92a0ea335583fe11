from __future__ import annotations

from typing import Any, List

from maruou.constants import CHOICE_COUNT, FIELD_ANSWER_INDEX, FIELD_CHOICES, FIELD_QUESTION
from maruou.errors import SchemaError
from maruou.models.quiz import QuizItem, QuizSet


def _validate_item(index: int, item: Any) -> QuizItem:
    if not isinstance(item, dict):
        raise SchemaError(index, "item", "must be an object")

    question = item.get(FIELD_QUESTION)
    if not isinstance(question, str) or not question.strip():
        raise SchemaError(index, FIELD_QUESTION, "must be a non-empty string")

    choices = item.get(FIELD_CHOICES)
    if not isinstance(choices, list):
        raise SchemaError(index, FIELD_CHOICES, "must be an array")
    if len(choices) != CHOICE_COUNT:
        raise SchemaError(index, FIELD_CHOICES, f"must have exactly {CHOICE_COUNT} entries, got {len(choices)}")
    if not all(isinstance(c, str) for c in choices):
        raise SchemaError(index, FIELD_CHOICES, "entries must be strings")

    # bool is an int subclass; reject true/false explicitly
    ai = item.get(FIELD_ANSWER_INDEX)
    if not isinstance(ai, int) or isinstance(ai, bool):
        raise SchemaError(index, FIELD_ANSWER_INDEX, "must be an integer")
    if not (0 <= ai < len(choices)):
        raise SchemaError(index, FIELD_ANSWER_INDEX, f"must be in [0, {len(choices) - 1}], got {ai}")

    return QuizItem(question=question.strip(), choices=tuple(choices), answer_index=ai)


def validate_quiz(candidate: Any, topic: str) -> QuizSet:
    """
    Gate between parsed model output and a QuizSet. Stops at the first
    violation; nothing partially valid is returned.
    """
    if not isinstance(candidate, list):
        raise SchemaError(None, "quiz", "must be a JSON array")
    if not candidate:
        raise SchemaError(None, "quiz", "must contain at least one item")

    items: List[QuizItem] = [_validate_item(i, it) for i, it in enumerate(candidate)]
    return QuizSet(topic=topic, items=tuple(items))
