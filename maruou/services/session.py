from __future__ import annotations

import asyncio
import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable, Dict, List, Optional

from maruou.errors import ValidationError
from maruou.models.quiz import QuizSet

log = logging.getLogger("maruou")

ACTIVE = "active"
SUBMITTED = "submitted"


class QuizSession:
    """
    Answer/score state for one generated quiz.

    Flow:
    - active: select() records answers
    - submit() scores once and freezes selections
    - reset() clears everything and goes back to active on the same quiz
    """

    def __init__(self, quiz: QuizSet):
        self.quiz = quiz
        self.selections: List[Optional[int]] = [None] * len(quiz.items)
        self.submitted = False
        self.score: Optional[int] = None

    @property
    def state(self) -> str:
        return SUBMITTED if self.submitted else ACTIVE

    def select(self, question_index: int, choice_index: int) -> None:
        if self.submitted:
            return

        if not (0 <= question_index < len(self.quiz.items)):
            raise ValidationError(
                f"question index {question_index} out of range",
                {"question": question_index, "questions": len(self.quiz.items)},
            )
        n_choices = len(self.quiz.items[question_index].choices)
        if not (0 <= choice_index < n_choices):
            raise ValidationError(
                f"choice index {choice_index} out of range for question {question_index}",
                {"question": question_index, "choice": choice_index, "choices": n_choices},
            )

        self.selections[question_index] = choice_index

    def correct_count(self) -> int:
        return sum(
            1
            for picked, item in zip(self.selections, self.quiz.items)
            if picked is not None and picked == item.answer_index
        )

    def submit(self) -> int:
        if self.submitted and self.score is not None:
            return self.score

        self.score = self.correct_count()
        self.submitted = True
        log.debug("Quiz submitted topic=%r score=%d/%d", self.quiz.topic, self.score, len(self.quiz))
        return self.score

    def reset(self) -> None:
        self.selections = [None] * len(self.quiz.items)
        self.submitted = False
        self.score = None

    def results(self) -> List[Dict[str, Any]]:
        if not self.submitted:
            return []

        out: List[Dict[str, Any]] = []
        for picked, item in zip(self.selections, self.quiz.items):
            out.append(
                {
                    "selected": picked,
                    "answerIndex": item.answer_index,
                    "correctChoice": item.correct_choice,
                    "correct": picked == item.answer_index,
                }
            )
        return out

    def to_dict(self) -> Dict[str, Any]:
        return {
            **self.quiz.to_dict(),
            "state": self.state,
            "selections": list(self.selections),
            "submitted": self.submitted,
            "score": self.score,
            "total": len(self.quiz),
            "results": self.results(),
        }


@dataclass
class _Entry:
    session: QuizSession
    lock: asyncio.Lock
    touched: float


class SessionStore:
    """
    In-memory sessions keyed by browser session id.
    Mutations go through locked() so only one runs per session at a time.
    Entries idle for longer than `ttl` seconds are dropped, and start()
    evicts the least recently touched ones once `max_sessions` is reached.
    """

    def __init__(
        self,
        *,
        ttl: float = 60 * 60 * 24,
        max_sessions: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = ttl
        self.max_sessions = max(1, int(max_sessions))
        self._clock = clock
        self._sessions: Dict[str, _Entry] = {}

    def _expired(self, entry: _Entry, now: float) -> bool:
        return now - entry.touched > self.ttl

    def _live(self, key: str) -> Optional[_Entry]:
        entry = self._sessions.get(key)
        if entry is None:
            return None
        now = self._clock()
        if self._expired(entry, now):
            self.drop(key)
            return None
        entry.touched = now
        return entry

    def sweep(self) -> int:
        now = self._clock()
        stale = [k for k, e in self._sessions.items() if self._expired(e, now)]
        for k in stale:
            self.drop(k)

        evicted = len(stale)
        if len(self._sessions) >= self.max_sessions:
            by_age = sorted(self._sessions, key=lambda k: self._sessions[k].touched)
            for k in by_age[: len(self._sessions) - self.max_sessions + 1]:
                self.drop(k)
                evicted += 1

        if evicted:
            log.debug("Session sweep evicted=%d live=%d", evicted, len(self._sessions))
        return evicted

    def start(self, key: str, quiz: QuizSet) -> QuizSession:
        self.drop(key)
        self.sweep()
        session = QuizSession(quiz)
        self._sessions[key] = _Entry(session, asyncio.Lock(), self._clock())
        return session

    def get(self, key: str) -> Optional[QuizSession]:
        entry = self._live(key)
        return entry.session if entry else None

    def drop(self, key: str) -> None:
        self._sessions.pop(key, None)

    @asynccontextmanager
    async def locked(self, key: str) -> AsyncIterator[Optional[QuizSession]]:
        entry = self._live(key)
        if entry is None:
            yield None
            return

        async with entry.lock:
            yield entry.session

    def __len__(self) -> int:
        return len(self._sessions)
