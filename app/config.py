"""Application configuration pulled from environment variables via pydantic."""
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="config")

DEFAULT_STATIC_DIR = Path(__file__).resolve().parent.parent / "static"


class Settings(BaseSettings):
    """Environment-driven configuration for the Storm Tracker WX service.

    Built once at process start and handed to ``create_app``; nothing else
    reads the environment.
    """
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    contact_email: str = "you@example.com"
    app_name: str = "Storm Tracker WX"
    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"

    forecast_source: str = "nws"  # options: nws
    nws_base_url: str = "https://api.weather.gov"
    upstream_timeout_seconds: float = 10.0

    static_dir: Path = DEFAULT_STATIC_DIR
    index_document: str = "index.html"
    static_max_age_seconds: int = 3600

    @field_validator("nws_base_url", mode="after")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize base URLs to avoid double slashes."""
        return str(v).rstrip("/")

    @field_validator("upstream_timeout_seconds", mode="after")
    @classmethod
    def positive_timeout(cls, v: float) -> float:
        """Reject zero/negative timeouts; requests treats them as errors anyway."""
        if v <= 0:
            raise ValueError("upstream_timeout_seconds must be positive")
        return v

    @property
    def user_agent(self) -> str:
        """Identifying client string sent to the upstream on every call."""
        return f"{self.app_name} (contact: {self.contact_email})"

    @property
    def cache_control(self) -> str:
        """Cache-Control value applied to every static response."""
        return f"public, max-age={self.static_max_age_seconds}"


if __name__ == "__main__":
    logger.setLevel("DEBUG")
    logger.debug(f"Loaded settings: {Settings().model_dump_json(indent=4)}")
