from dataclasses import dataclass
from typing import Any, Dict, Tuple

from maruou.constants import FIELD_ANSWER_INDEX, FIELD_CHOICES, FIELD_QUESTION


@dataclass(frozen=True)
class QuizItem:
    question: str
    choices: Tuple[str, ...]
    answer_index: int

    def __post_init__(self):
        if not (0 <= self.answer_index < len(self.choices)):
            raise ValueError("answer_index out of range")

    @property
    def correct_choice(self) -> str:
        return self.choices[self.answer_index]

    def to_dict(self) -> Dict[str, Any]:
        return {
            FIELD_QUESTION: self.question,
            FIELD_CHOICES: list(self.choices),
            FIELD_ANSWER_INDEX: self.answer_index,
        }


@dataclass(frozen=True)
class QuizSet:
    topic: str
    items: Tuple[QuizItem, ...]

    def __len__(self) -> int:
        return len(self.items)

    def to_dict(self) -> Dict[str, Any]:
        return {"topic": self.topic, "quiz": [it.to_dict() for it in self.items]}
