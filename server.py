import logging

import uvicorn

from config import ENV, HOST, LLM_API_STYLE, OPENAI_BASE_URL, OPENAI_MODEL, PORT, SESSION_MAX, SESSION_TTL_SECONDS
from maruou.constants import APP_VERSION
from maruou.utils.logger_setup import setup_logging
from maruou.utils.startup_banner import startup_banner


def main() -> None:
    setup_logging(console_level="INFO", file_level="DEBUG")
    log = logging.getLogger(__name__)

    startup_banner(
        model=OPENAI_MODEL,
        api=OPENAI_BASE_URL.replace("http://", "").replace("https://", ""),
        api_style=LLM_API_STYLE,
        bind=f"{HOST}:{PORT}",
        version=APP_VERSION,
        mode=ENV or "development",
        session_ttl=SESSION_TTL_SECONDS,
        session_max=SESSION_MAX,
    )

    from maruou.web.main import app

    log.debug("Starting uvicorn on %s:%s", HOST, PORT)
    uvicorn.run(app, host=HOST, port=PORT, log_config=None)


if __name__ == "__main__":
    main()
