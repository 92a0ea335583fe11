import asyncio
import dataclasses

import httpx
import pytest

from conftest import FakeLLM, chat_envelope
from maruou.errors import ConfigError
from maruou.services import llm as llm_mod
from maruou.services.llm import LLMSettings, call_upstream


def _call(settings, fake, prompt="PROMPT"):
    return asyncio.run(call_upstream(prompt, settings, system="SYSTEM", transport=fake.transport))


@pytest.fixture(autouse=True)
def _no_backoff(monkeypatch):
    monkeypatch.setattr(llm_mod, "RETRY_BACKOFF_SECONDS", 0)


def test_chat_style_request(settings):
    fake = FakeLLM(httpx.Response(200, json=chat_envelope("[]")))
    res = _call(settings, fake)

    assert res.ok and res.status_code == 200
    req = fake.requests[0]
    assert str(req.url) == "https://llm.test/v1/chat/completions"
    assert req.headers["authorization"] == "Bearer sk-test"
    body = fake.last_json()
    assert body["model"] == "gpt-4o-mini"
    assert body["messages"] == [
        {"role": "system", "content": "SYSTEM"},
        {"role": "user", "content": "PROMPT"},
    ]
    assert body["temperature"] == 0.7
    assert body["max_tokens"] == 800


def test_responses_style_request(settings):
    fake = FakeLLM(httpx.Response(200, json={"output_text": "[]"}))
    res = _call(dataclasses.replace(settings, api_style="responses"), fake)

    assert res.ok
    assert str(fake.requests[0].url) == "https://llm.test/v1/responses"
    body = fake.last_json()
    assert body["input"][1] == {"role": "user", "content": "PROMPT"}
    assert body["max_output_tokens"] == 800
    assert "messages" not in body


def test_missing_key_fails_before_network(settings):
    fake = FakeLLM(httpx.Response(200, json={}))
    with pytest.raises(ConfigError):
        _call(dataclasses.replace(settings, api_key=""), fake)
    assert fake.requests == []


def test_non_2xx_is_returned_not_raised(settings):
    fake = FakeLLM(httpx.Response(401, text='{"error": {"message": "Incorrect API key"}}'))
    res = _call(settings, fake)

    assert not res.ok
    assert res.status_code == 401
    assert "Incorrect API key" in res.body


def test_transport_error_is_returned_not_raised(settings):
    fake = FakeLLM(httpx.ConnectError("connection refused"))
    res = _call(settings, fake)

    assert not res.ok
    assert res.status_code is None
    assert "ConnectError" in res.error


def test_timeout_is_a_transport_error(settings):
    fake = FakeLLM(httpx.ReadTimeout("timed out"))
    res = _call(settings, fake)

    assert not res.ok
    assert "ReadTimeout" in res.error


def test_no_retry_by_default(settings):
    fake = FakeLLM(httpx.Response(503, text="busy"), httpx.Response(200, json={}))
    res = _call(settings, fake)

    assert res.status_code == 503
    assert len(fake.requests) == 1


def test_retry_on_transient_failure(settings):
    fake = FakeLLM(httpx.Response(503, text="busy"), httpx.Response(200, json=chat_envelope("[]")))
    res = _call(dataclasses.replace(settings, max_retries=1), fake)

    assert res.ok
    assert len(fake.requests) == 2


def test_client_errors_are_not_retried(settings):
    fake = FakeLLM(httpx.Response(400, text="bad request"))
    res = _call(dataclasses.replace(settings, max_retries=3), fake)

    assert res.status_code == 400
    assert len(fake.requests) == 1


def test_retries_exhausted_returns_last_failure(settings):
    fake = FakeLLM(httpx.ConnectError("down"))
    res = _call(dataclasses.replace(settings, max_retries=2), fake)

    assert not res.ok
    assert len(fake.requests) == 3


def test_settings_read_key_per_call(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", " sk-one ")
    assert LLMSettings.from_env().api_key == "sk-one"

    monkeypatch.delenv("OPENAI_API_KEY")
    assert LLMSettings.from_env().api_key == ""


@pytest.mark.parametrize("status", [301, 302, 307])
def test_redirect_is_not_success(settings, status):
    fake = FakeLLM(httpx.Response(status, text="<html>moved</html>", headers={"location": "https://elsewhere.test/"}))
    res = _call(dataclasses.replace(settings, max_retries=2), fake)

    assert not res.ok
    assert res.status_code == status
    assert res.body == "<html>moved</html>"
    assert len(fake.requests) == 1
