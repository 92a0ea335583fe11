import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from config import QUIZ_RATE_LIMIT
from maruou.constants import APP_VERSION
from maruou.errors import QuizError
from maruou.services.llm import LLMSettings
from maruou.services.quiz_gen import generate_quiz
from maruou.web.core.deps import get_llm_settings, get_llm_transport, read_json_object, sid, store
from maruou.web.core.ratelimit import limiter

log = logging.getLogger(__name__)

router = APIRouter()


@router.get("/healthz")
def healthz():
    return JSONResponse({"ok": True, "version": APP_VERSION})


@router.post("/api/quiz")
@limiter.limit(QUIZ_RATE_LIMIT)
async def api_quiz(
    request: Request,
    settings: LLMSettings = Depends(get_llm_settings),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_llm_transport),
):
    payload = await read_json_object(request)
    # "genre" is the field name older clients send
    topic = payload.get("topic")
    if topic is None:
        topic = payload.get("genre")

    try:
        quiz = await generate_quiz(topic, settings, transport=transport)
    except QuizError as e:
        log.warning("/api/quiz failed kind=%s: %s", e.kind, e.message)
        raise
    except Exception:
        log.exception("[/api/quiz] Error")
        return JSONResponse({"error": "Server error while generating the quiz"}, status_code=500)

    store.start(sid(request), quiz)
    return JSONResponse(quiz.to_dict())
