"""Application settings read from the environment (and an optional .env file)."""
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

DEFAULT_ADVICE_MODEL = "gemini-2.5-flash"


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        return default


class Settings:
    APP_NAME = "Wealth Tracker"

    def __init__(self) -> None:
        self.DATA_DIR = Path(os.getenv("TRACKER_DATA_DIR", "data")).expanduser()
        self.GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "").strip()
        self.ADVICE_MODEL = os.getenv("TRACKER_ADVICE_MODEL", DEFAULT_ADVICE_MODEL)
        self.ADVICE_TIMEOUT = _env_float("TRACKER_ADVICE_TIMEOUT", 30.0)
        self.LOG_LEVEL = os.getenv("TRACKER_LOG_LEVEL", "INFO").upper()

    @property
    def advice_enabled(self) -> bool:
        return bool(self.GEMINI_API_KEY)


settings = Settings()
