from __future__ import annotations

from urllib.parse import urlparse

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from starlette.middleware.sessions import SessionMiddleware
from starlette.responses import Response
from starlette.status import HTTP_403_FORBIDDEN

from maruou.constants import APP_NAME, APP_VERSION
from maruou.errors import QuizError
from config import SESSION_TTL_SECONDS
from maruou.web.core.deps import IS_PROD, SESSION_SECRET, store
from maruou.web.core.ratelimit import limiter
from maruou.web.routes.api import router as api_router
from maruou.web.routes.session import router as session_router


# -----------------------------
# App
# -----------------------------
app = FastAPI(title=f"{APP_NAME} Quiz", version=APP_VERSION)

# -----------------------------
# Rate limiting
# -----------------------------
app.state.limiter = limiter
app.add_middleware(SlowAPIMiddleware)


@app.exception_handler(RateLimitExceeded)
async def ratelimit_handler(request: Request, exc: RateLimitExceeded):
    return PlainTextResponse("Too Many Requests", status_code=429)


# -----------------------------
# Pipeline errors -> {"error", "kind", "detail"|"raw"}
# -----------------------------
@app.exception_handler(QuizError)
async def quiz_error_handler(request: Request, exc: QuizError):
    return JSONResponse(exc.to_body(), status_code=exc.status_code)


# -----------------------------
# Sessions
# -----------------------------
app.add_middleware(
    SessionMiddleware,
    secret_key=SESSION_SECRET,
    same_site="lax",
    https_only=bool(IS_PROD),
    max_age=SESSION_TTL_SECONDS,
)

# shared state
app.state.store = store


# -----------------------------
# CSRF origin guard (same-origin)
# -----------------------------
@app.middleware("http")
async def csrf_same_host_guard(request: Request, call_next):
    if request.method in ("POST", "PUT", "DELETE", "PATCH"):
        origin = request.headers.get("origin")
        referer = request.headers.get("referer")
        base_host = urlparse(str(request.base_url)).netloc

        # non-browser clients send neither header
        if origin or referer:
            ok = urlparse(origin or referer).netloc == base_host
            if not ok:
                return Response("CSRF blocked", status_code=HTTP_403_FORBIDDEN)

    return await call_next(request)


# -----------------------------
# Security headers
# -----------------------------
@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)

    response.headers["X-Frame-Options"] = "DENY"
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    response.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none'"
    return response


# -----------------------------
# Routes
# -----------------------------
app.include_router(api_router)
app.include_router(session_router)
