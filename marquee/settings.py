from pathlib import Path
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Read from OS env and optional .env file in project root.
    _project_root = Path(__file__).resolve().parent.parent

    model_config = SettingsConfigDict(
        env_file=str(_project_root / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Gemini generation backend
    gemini_api_key: Optional[str] = Field(
        default=None,
        alias="GEMINI_API_KEY",
        description="API key forwarded to every Gemini model attempt",
    )
    gemini_base_url: str = Field(
        "https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_BASE_URL",
        description="Base URL of the Gemini REST API, without trailing /models",
    )

    # HTTP timeouts (seconds) for a single upstream attempt
    upstream_timeout: float = Field(60.0, alias="UPSTREAM_TIMEOUT")

    # Per-user quota for the AI naming feature
    ai_naming_max_requests: int = Field(
        20,
        alias="AI_NAMING_MAX_REQUESTS",
        description="Maximum AI row-name generations per user within the window",
    )
    ai_naming_window_seconds: int = Field(
        3600,
        alias="AI_NAMING_WINDOW_SECONDS",
        description="Length of the AI naming quota window in seconds",
    )

    # Only honour X-Forwarded-For when a reverse proxy we control sets it.
    trust_forwarded_for: bool = Field(
        False,
        alias="TRUST_FORWARDED_FOR",
        description="Use the first X-Forwarded-For hop as the caller address for quotas",
    )

    # uvicorn entrypoint
    app_host: str = Field("0.0.0.0", alias="APP_HOST")
    app_port: int = Field(8000, alias="APP_PORT")
    app_reload: bool = Field(False, alias="APP_RELOAD")

    cors_allow_origins: str = Field(
        "http://localhost:3000",
        alias="CORS_ALLOW_ORIGINS",
        description="Allowed CORS origins, comma separated",
    )

    # Application log level for our marquee logger.
    # Can be overridden via LOG_LEVEL env var, e.g. "DEBUG" while debugging.
    log_level: str = Field(
        "INFO",
        alias="LOG_LEVEL",
        description="Application log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_timezone: Optional[str] = Field(
        default=None,
        alias="LOG_TIMEZONE",
        description="Timezone name for log timestamps, e.g. 'America/New_York'. Defaults to system local time.",
    )
    log_dir: str = Field("logs", alias="LOG_DIR")
    log_backup_days: int = Field(
        7,
        alias="LOG_BACKUP_DAYS",
        description="Number of rotated daily log files to keep",
    )

    def get_cors_origins(self) -> List[str]:
        """
        Return configured CORS origins.
        Whitespace is stripped and empty entries are ignored.
        """
        return [
            item.strip()
            for item in self.cors_allow_origins.split(",")
            if item.strip()
        ]


settings = Settings()  # Reads from environment if available
