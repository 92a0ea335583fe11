from __future__ import annotations

from maruou.constants import CHOICE_COUNT, QUIZ_SIZE

QUIZ_SYSTEM = "You are a quiz author that outputs strict JSON only."

_SHAPE_EXAMPLE = """
[
  {
    "question": "Question text",
    "choices": ["Choice 1", "Choice 2", "Choice 3", "Choice 4"],
    "answerIndex": 0
  }
]
""".strip()


def build_quiz_prompt(topic: str, n: int = QUIZ_SIZE) -> str:
    return (
        "You write multiple-choice quizzes.\n"
        f"Write EXACTLY {n} questions about the topic \"{topic}\".\n"
        f"Each question has exactly {CHOICE_COUNT} choices and exactly ONE correct answer.\n"
        f"answerIndex is the 0-based position of the correct choice (0-{CHOICE_COUNT - 1}).\n"
        "Output ONLY a JSON array in the shape below. "
        "No explanations, no prose, no markdown, no code fences:\n"
        f"{_SHAPE_EXAMPLE}"
    )
