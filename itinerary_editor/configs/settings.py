"""Application settings and configuration constants.

This module contains application settings, constants, and configuration
values for the itinerary editor engine.
"""

from logging import INFO, Formatter, Logger
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = Path(__file__).parent.parent.parent / ".env"

# --- Document limits ---
MAX_DAYS = 30
MAX_ACTIVITIES_PER_DAY = 20

# --- Timing (seconds) ---
AUTOSAVE_DELAY = 1.0
SAVED_DISPLAY = 2.0
AUTOSAVE_ERROR_DISPLAY = 5.0
SAVE_ERROR_DISPLAY = 3.0
NOT_FOUND_REDIRECT_DELAY = 3.0
LOGIN_REDIRECT_DELAY = 2.0
EXIT_REDIRECT_DELAY = 1.5

# Response constants
DEFAULT_ERROR_MESSAGE = "An unexpected error occurred."
LOAD_ERROR_MESSAGE = "Failed to load itinerary"
SAVE_ERROR_MESSAGE = "Failed to save itinerary"


class Settings(BaseSettings):
    """Application settings with validation and default values."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Itinerary Editor"
    DEBUG: bool = False

    # Environment
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"
    LOG_TO_FILE: bool = False
    LOG_FILE: str = "logs/itinerary_editor.log"

    # Remote store
    API_BASE_URL: str = "http://localhost:8080/api"
    API_TOKEN: SecretStr | None = None
    API_TIMEOUT: float = 30.0  # seconds
    API_MAX_RETRIES: int = 3
    API_RETRY_DELAY: float = 0.5  # seconds
    API_MAX_RETRY_DELAY: float = 4.0  # seconds


settings = Settings()


class EditorConfig(BaseSettings):
    """Editing session timing and navigation routes."""

    model_config = SettingsConfigDict(env_prefix="EDITOR_", case_sensitive=False)

    autosave_delay: float = AUTOSAVE_DELAY
    saved_display: float = SAVED_DISPLAY
    autosave_error_display: float = AUTOSAVE_ERROR_DISPLAY
    save_error_display: float = SAVE_ERROR_DISPLAY
    not_found_redirect_delay: float = NOT_FOUND_REDIRECT_DELAY
    login_redirect_delay: float = LOGIN_REDIRECT_DELAY
    exit_redirect_delay: float = EXIT_REDIRECT_DELAY

    detail_route: str = "/ai-itinerary/{id}"
    customize_route: str = "/ai-itinerary/{id}/customize"
    list_route: str = "/my-itineraries"
    login_route: str = "/auth"

    def detail_path(self, itinerary_id: str) -> str:
        return self.detail_route.format(id=itinerary_id)

    def customize_path(self, itinerary_id: str) -> str:
        return self.customize_route.format(id=itinerary_id)


def file_logger(logger: Logger) -> Logger:
    """
    Attach the rotating file handler to a module logger when file logging is on.

    Args:
        logger: The module logger.

    Returns:
        The same logger, for ``logger = file_logger(getLogger(__name__))``.
    """
    if not settings.LOG_TO_FILE:
        return logger
    if any(isinstance(h, RotatingFileHandler) for h in logger.handlers):
        return logger

    log_file = Path(settings.LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=5)
    handler.setLevel(INFO)
    handler.setFormatter(Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    return logger
