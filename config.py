import os
import logging
from pathlib import Path
from dotenv import load_dotenv

log = logging.getLogger("config")

BASE_DIR = Path(__file__).resolve().parent
ENV_PATH = BASE_DIR / ".env"

load_dotenv(dotenv_path=ENV_PATH, override=True)

# OPENAI_API_KEY is read per call by maruou.services.llm.LLMSettings.from_env.
OPENAI_BASE_URL = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-4o-mini")
LLM_API_STYLE = os.getenv("LLM_API_STYLE", "chat").strip().lower()
LLM_TEMPERATURE = float(os.getenv("LLM_TEMPERATURE", "0.7"))
LLM_MAX_OUTPUT_TOKENS = int(os.getenv("LLM_MAX_OUTPUT_TOKENS", "800"))
LLM_TIMEOUT_SECONDS = float(os.getenv("LLM_TIMEOUT_SECONDS", "30"))
LLM_MAX_RETRIES = int(os.getenv("LLM_MAX_RETRIES", "0"))

WEB_SESSION_SECRET = os.getenv("WEB_SESSION_SECRET", "")
ENV = os.getenv("ENV", "").lower()
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "1").strip().lower() not in ("0", "false", "no")
QUIZ_RATE_LIMIT = os.getenv("QUIZ_RATE_LIMIT", "10/minute")
SESSION_TTL_SECONDS = int(os.getenv("SESSION_TTL_SECONDS", str(60 * 60 * 24)))
SESSION_MAX = int(os.getenv("SESSION_MAX", "10000"))

HOST = os.getenv("HOST", "127.0.0.1")
PORT = int(os.getenv("PORT", "8000"))

log.debug("BASE_DIR=%s", BASE_DIR)
log.debug("ENV_PATH=%s exists=%s", ENV_PATH, ENV_PATH.exists())
log.debug("OPENAI_BASE_URL=%s", OPENAI_BASE_URL)
log.debug("OPENAI_MODEL=%s", OPENAI_MODEL)
log.debug("LLM_API_STYLE=%s", LLM_API_STYLE)
log.debug("LLM_TIMEOUT_SECONDS=%s LLM_MAX_RETRIES=%s", LLM_TIMEOUT_SECONDS, LLM_MAX_RETRIES)
log.debug("RATE_LIMIT_ENABLED=%s QUIZ_RATE_LIMIT=%s", RATE_LIMIT_ENABLED, QUIZ_RATE_LIMIT)
log.debug("SESSION_TTL_SECONDS=%s SESSION_MAX=%s", SESSION_TTL_SECONDS, SESSION_MAX)
