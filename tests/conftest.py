import json
import os
from typing import Any, Callable, Dict, List

os.environ.setdefault("RATE_LIMIT_ENABLED", "0")
os.environ.setdefault("WEB_SESSION_SECRET", "test-session-secret")

import httpx
import pytest

from maruou.services.llm import LLMSettings


SUSHI_QUIZ: List[Dict[str, Any]] = [
    {"question": "What is the main ingredient of sushi rice seasoning?", "choices": ["Vinegar", "Soy sauce", "Mirin", "Sake"], "answerIndex": 0},
    {"question": "Which fish is used for 'maguro'?", "choices": ["Salmon", "Tuna", "Mackerel", "Eel"], "answerIndex": 1},
    {"question": "What is 'nori'?", "choices": ["Rice", "Fish roe", "Seaweed", "Tofu"], "answerIndex": 2},
    {"question": "What is the green paste served with sushi?", "choices": ["Ginger", "Miso", "Natto", "Wasabi"], "answerIndex": 3},
    {"question": "What is 'gari'?", "choices": ["Sea urchin", "Pickled ginger", "Egg omelette", "Cucumber"], "answerIndex": 1},
]


def flat_envelope(text: str) -> Dict[str, Any]:
    return {"id": "resp_1", "object": "response", "output_text": text}


def structured_envelope(text: str) -> Dict[str, Any]:
    return {
        "id": "resp_2",
        "object": "response",
        "output": [
            {
                "type": "message",
                "role": "assistant",
                "content": [{"type": "output_text", "text": text, "annotations": []}],
            }
        ],
    }


def chat_envelope(text: str) -> Dict[str, Any]:
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "choices": [
            {"index": 0, "message": {"role": "assistant", "content": text}, "finish_reason": "stop"}
        ],
    }


ENVELOPES: Dict[str, Callable[[str], Dict[str, Any]]] = {
    "flat": flat_envelope,
    "structured": structured_envelope,
    "chat": chat_envelope,
}


class FakeLLM:
    """Records requests and answers them from a queue of httpx.Response or exceptions."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: List[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        nxt = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(nxt, Exception):
            raise nxt
        return nxt

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def last_json(self) -> Dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def sushi_text() -> str:
    return json.dumps(SUSHI_QUIZ, ensure_ascii=False)


@pytest.fixture
def settings() -> LLMSettings:
    return LLMSettings(
        api_key="sk-test",
        base_url="https://llm.test/v1",
        model="gpt-4o-mini",
        timeout=5.0,
    )
