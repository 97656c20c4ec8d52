import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()

DEFAULT_EXECUTION_URL = "https://python-code-execution-json-apis.onrender.com/run"
DEFAULT_EXPLANATION_URL = "http://127.0.0.1:8000/explain"
DEFAULT_API_URL = "http://127.0.0.1:8080/api"

# Playback tuning
AUTOPLAY_INTERVAL_MS = 800
NOTIFICATION_SECONDS = 4.0


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r (not a number), using %s", name, raw, default)
        return default


@dataclass(frozen=True)
class Settings:
    execution_url: str = DEFAULT_EXECUTION_URL
    explanation_url: str = DEFAULT_EXPLANATION_URL
    api_url: str = DEFAULT_API_URL
    timeout: float = 30.0
    autoplay_interval: float = AUTOPLAY_INTERVAL_MS / 1000
    notification_seconds: float = NOTIFICATION_SECONDS
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """Read settings from the environment (and a .env file, if present)."""
        return cls(
            execution_url=os.getenv("TRACE_PLAYBACK_EXECUTION_URL", DEFAULT_EXECUTION_URL),
            explanation_url=os.getenv("TRACE_PLAYBACK_EXPLANATION_URL", DEFAULT_EXPLANATION_URL),
            api_url=os.getenv("TRACE_PLAYBACK_API_URL", DEFAULT_API_URL).rstrip("/"),
            timeout=_env_float("TRACE_PLAYBACK_TIMEOUT", 30.0),
            autoplay_interval=_env_float("TRACE_PLAYBACK_AUTOPLAY_MS", AUTOPLAY_INTERVAL_MS) / 1000,
            notification_seconds=_env_float("TRACE_PLAYBACK_NOTIFY_SECONDS", NOTIFICATION_SECONDS),
            log_level=os.getenv("TRACE_PLAYBACK_LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
    )
