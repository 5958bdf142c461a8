"""Marquee AI service entrypoint: `uvicorn main:app` or `python main.py`."""

from marquee.logging_config import logger, setup_logging
from marquee.routes import create_app
from marquee.settings import settings


setup_logging()
app = create_app()


def run() -> None:
    import uvicorn

    if not settings.gemini_api_key:
        logger.warning("GEMINI_API_KEY is not set; AI endpoints will answer 503")

    # log_config=None leaves the handlers from setup_logging in place.
    uvicorn.run(
        "main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_reload,
        log_config=None,
    )


if __name__ == "__main__":
    run()
