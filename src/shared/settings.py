import os
from typing import Optional

from pydantic import BaseModel, Field

from src.specs.common.errors import ConfigurationError


DEFAULT_MODEL = "gemini-2.5-flash-image-preview"
DEFAULT_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_REFERENCE_IMAGE_URL = "https://i.postimg.cc/N06mnCXX/IMG-2_AIzaSy.jpg"
MIN_API_KEY_LENGTH = 10


def _env_timeout(name: str) -> Optional[float]:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return None
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number of seconds", details={"variable": name})
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive", details={"variable": name})
    return value


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Per-invocation configuration for the generate-image function.

    Built once per request with `from_env()` and handed to the handler, so
    tests can construct it directly with fake credentials.
    """

    api_key: Optional[str] = Field(default=None, repr=False)
    model: str = DEFAULT_MODEL
    api_base: str = DEFAULT_API_BASE
    reference_image_url: str = DEFAULT_REFERENCE_IMAGE_URL
    fetch_timeout: Optional[float] = None
    api_timeout: Optional[float] = None
    diagnostic_errors: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            api_key=os.getenv("GEMINI_API_KEY"),
            model=os.getenv("GEMINI_MODEL") or DEFAULT_MODEL,
            api_base=(os.getenv("GEMINI_API_BASE") or DEFAULT_API_BASE).rstrip("/"),
            reference_image_url=os.getenv("REFERENCE_IMAGE_URL") or DEFAULT_REFERENCE_IMAGE_URL,
            fetch_timeout=_env_timeout("IMAGE_FETCH_TIMEOUT"),
            api_timeout=_env_timeout("GEMINI_API_TIMEOUT"),
            diagnostic_errors=_env_flag("DIAGNOSTIC_ERRORS", True),
        )

    @classmethod
    def credentials_from_env(cls) -> "Settings":
        """Only the settings the credential check needs; never raises."""
        return cls(
            api_key=os.getenv("GEMINI_API_KEY"),
            diagnostic_errors=_env_flag("DIAGNOSTIC_ERRORS", True),
        )

    @property
    def api_key_length(self) -> int:
        return len(self.api_key) if self.api_key else 0

    @property
    def has_usable_api_key(self) -> bool:
        return self.api_key_length >= MIN_API_KEY_LENGTH

    @property
    def generate_content_url(self) -> str:
        return f"{self.api_base}/models/{self.model}:generateContent"
