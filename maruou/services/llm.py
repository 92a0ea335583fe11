from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Optional

import httpx

import config
from maruou.errors import ConfigError

log = logging.getLogger("maruou")

API_STYLES = ("chat", "responses")
RETRYABLE_STATUS = (429, 500, 502, 503, 504)
RETRY_BACKOFF_SECONDS = 1.0


@dataclass(frozen=True)
class LLMSettings:
    """
    Everything one upstream call needs. Built per request, never shared.
    """

    api_key: str
    base_url: str
    model: str
    api_style: str = "chat"
    temperature: float = 0.7
    max_output_tokens: int = 800
    timeout: float = 30.0
    max_retries: int = 0

    @classmethod
    def from_env(cls) -> "LLMSettings":
        style = config.LLM_API_STYLE if config.LLM_API_STYLE in API_STYLES else "chat"
        return cls(
            api_key=(os.getenv("OPENAI_API_KEY", "") or "").strip(),
            base_url=(config.OPENAI_BASE_URL or "").rstrip("/"),
            model=config.OPENAI_MODEL,
            api_style=style,
            temperature=config.LLM_TEMPERATURE,
            max_output_tokens=config.LLM_MAX_OUTPUT_TOKENS,
            timeout=config.LLM_TIMEOUT_SECONDS,
            max_retries=max(0, config.LLM_MAX_RETRIES),
        )


@dataclass(frozen=True)
class UpstreamResult:
    ok: bool
    status_code: Optional[int]
    body: str
    error: Optional[str] = None


def _request(settings: LLMSettings, prompt: str, system: str) -> tuple[str, dict]:
    messages = [
        {"role": "system", "content": system},
        {"role": "user", "content": prompt},
    ]
    if settings.api_style == "responses":
        return f"{settings.base_url}/responses", {
            "model": settings.model,
            "input": messages,
            "temperature": settings.temperature,
            "max_output_tokens": settings.max_output_tokens,
        }

    return f"{settings.base_url}/chat/completions", {
        "model": settings.model,
        "messages": messages,
        "temperature": settings.temperature,
        "max_tokens": settings.max_output_tokens,
    }


async def call_upstream(
    prompt: str,
    settings: LLMSettings,
    *,
    system: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> UpstreamResult:
    """
    One text-completion call against an OpenAI-compatible endpoint.

    Raises ConfigError when the key is missing, before touching the network.
    Any other outcome (2xx, non-2xx, transport failure) is returned as an
    UpstreamResult.
    """
    if not settings.api_key:
        raise ConfigError("OPENAI_API_KEY is not set on the server")

    url, payload = _request(settings, prompt, system)
    headers = {
        "Authorization": f"Bearer {settings.api_key}",
        "Content-Type": "application/json",
    }

    attempts = 1 + max(0, settings.max_retries)
    result = UpstreamResult(ok=False, status_code=None, body="", error="no attempt made")

    async with httpx.AsyncClient(timeout=settings.timeout, transport=transport) as client:
        for attempt in range(1, attempts + 1):
            try:
                r = await client.post(url, headers=headers, json=payload)
            except httpx.HTTPError as e:
                log.warning("Upstream transport error (attempt %d/%d): %r", attempt, attempts, e)
                result = UpstreamResult(ok=False, status_code=None, body="", error=f"{type(e).__name__}: {e}")
            else:
                body = r.text or ""
                if r.is_success:
                    log.debug("Upstream ok status=%d bytes=%d", r.status_code, len(body))
                    return UpstreamResult(ok=True, status_code=r.status_code, body=body)

                log.warning("Upstream error status=%d (attempt %d/%d): %s", r.status_code, attempt, attempts, body[:500])
                result = UpstreamResult(ok=False, status_code=r.status_code, body=body, error=f"HTTP {r.status_code}")
                if r.status_code not in RETRYABLE_STATUS:
                    return result

            if attempt < attempts:
                await asyncio.sleep(RETRY_BACKOFF_SECONDS * attempt)

    return result
