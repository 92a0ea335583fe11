from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from maruou.web.core.deps import as_index, read_json_object, sid, store

router = APIRouter(prefix="/api/session", tags=["session"])


def _no_session() -> JSONResponse:
    return JSONResponse({"error": "No quiz in progress. Generate one first."}, status_code=404)


@router.get("")
async def session_state(request: Request):
    async with store.locked(sid(request)) as session:
        if session is None:
            return _no_session()
        return JSONResponse(session.to_dict())


@router.post("/select")
async def session_select(request: Request):
    payload = await read_json_object(request)
    q = as_index(payload, "question")
    c = as_index(payload, "choice")

    async with store.locked(sid(request)) as session:
        if session is None:
            return _no_session()
        session.select(q, c)
        return JSONResponse(session.to_dict())


@router.post("/submit")
async def session_submit(request: Request):
    async with store.locked(sid(request)) as session:
        if session is None:
            return _no_session()
        session.submit()
        return JSONResponse(session.to_dict())


@router.post("/reset")
async def session_reset(request: Request):
    async with store.locked(sid(request)) as session:
        if session is None:
            return _no_session()
        session.reset()
        return JSONResponse(session.to_dict())
