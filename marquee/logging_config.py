import datetime
import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Dict, Iterable, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .settings import settings


LOGGER_NAME = "marquee"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"
_REDACTED_HEADERS = ("authorization", "x-goog-api-key", "cookie")
_LOGGING_CONFIGURED = False


def resolve_timezone(name: Optional[str]) -> datetime.tzinfo:
    """
    Map LOG_TIMEZONE to a tzinfo; unset or unknown names mean local time.
    """
    if name:
        try:
            return ZoneInfo(name)
        except (ZoneInfoNotFoundError, ValueError):
            pass
    return datetime.datetime.now().astimezone().tzinfo or datetime.timezone.utc


class ZonedFormatter(logging.Formatter):
    """ISO-8601 timestamps with millisecond precision in a fixed zone."""

    def __init__(self, fmt: str = LOG_FORMAT, tz: Optional[datetime.tzinfo] = None) -> None:
        super().__init__(fmt)
        self.tz = tz or datetime.timezone.utc

    def formatTime(self, record: logging.LogRecord, datefmt: Optional[str] = None) -> str:
        stamp = datetime.datetime.fromtimestamp(record.created, tz=self.tz)
        return stamp.strftime(datefmt) if datefmt else stamp.isoformat(timespec="milliseconds")


def build_file_handler(log_dir: Path, backup_days: int) -> logging.Handler:
    """
    <log_dir>/marquee.log, rolled at midnight into marquee.log.YYYY-MM-DD.
    Only records from the marquee logger tree are written.
    """
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = TimedRotatingFileHandler(
        log_dir / f"{LOGGER_NAME}.log",
        when="midnight",
        backupCount=backup_days,
        encoding="utf-8",
    )
    handler.addFilter(logging.Filter(LOGGER_NAME))
    return handler


def redact_headers(
    headers: Mapping[str, str], sensitive: Iterable[str] = _REDACTED_HEADERS
) -> Dict[str, str]:
    """
    Copy headers into a plain dict, masking credentials.
    """
    hidden = {h.lower() for h in sensitive}
    return {
        k: ("***REDACTED***" if k.lower() in hidden else v) for k, v in headers.items()
    }


def setup_logging(log_dir: Optional[Path] = None) -> None:
    """
    Configure application logging once per process.

    Router and feature logs go to a daily file under LOG_DIR; everything,
    uvicorn included, is echoed to the console via root.
    """
    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    level_value = getattr(logging, settings.log_level.upper(), logging.INFO)
    formatter = ZonedFormatter(tz=resolve_timezone(settings.log_timezone))

    file_handler = build_file_handler(
        log_dir or Path(settings.log_dir), settings.log_backup_days
    )
    file_handler.setFormatter(formatter)

    app_logger = logging.getLogger(LOGGER_NAME)
    app_logger.setLevel(level_value)
    app_logger.addHandler(file_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(level_value)
    if not any(type(h) is logging.StreamHandler for h in root_logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    _LOGGING_CONFIGURED = True


logger = logging.getLogger(LOGGER_NAME)
