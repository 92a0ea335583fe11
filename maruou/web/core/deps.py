from __future__ import annotations

import logging
import secrets
from typing import Any, Optional

import httpx
from fastapi import Request

from config import ENV, SESSION_MAX, SESSION_TTL_SECONDS, WEB_SESSION_SECRET
from maruou.errors import ValidationError
from maruou.services.llm import LLMSettings
from maruou.services.session import SessionStore

log = logging.getLogger(__name__)

# -----------------------------
# Settings / env
# -----------------------------
IS_PROD = ENV == "prod"

if WEB_SESSION_SECRET:
    SESSION_SECRET = WEB_SESSION_SECRET
elif IS_PROD:
    raise RuntimeError("WEB_SESSION_SECRET must be set when ENV=prod")
else:
    SESSION_SECRET = secrets.token_urlsafe(32)
    log.warning("WEB_SESSION_SECRET not set; using a random secret, sessions reset on restart")

# -----------------------------
# Shared state
# -----------------------------
store = SessionStore(ttl=SESSION_TTL_SECONDS, max_sessions=SESSION_MAX)


# -----------------------------
# Dependencies
# -----------------------------
def get_llm_settings() -> LLMSettings:
    return LLMSettings.from_env()


def get_llm_transport() -> Optional[httpx.AsyncBaseTransport]:
    # real network; tests override this with httpx.MockTransport
    return None


# -----------------------------
# Session helpers
# -----------------------------
def sid(request: Request) -> str:
    s = request.session.get("sid")
    if not s:
        s = secrets.token_urlsafe(16)
        request.session["sid"] = s
    return s


async def read_json_object(request: Request) -> dict[str, Any]:
    try:
        payload = await request.json()
    except ValueError:
        raise ValidationError("Request body must be JSON")
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def as_index(payload: dict[str, Any], key: str) -> int:
    v = payload.get(key)
    if not isinstance(v, int) or isinstance(v, bool):
        raise ValidationError(f"'{key}' must be an integer")
    return v
