"""Factory helpers for choosing a forecast data source at startup."""

from __future__ import annotations

from app import config
from app.data_sources.base import ForecastDataSource
from app.data_sources.nws_client import NwsClient
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="data_sources/factory")


DEFAULT_SOURCE_NAME = "nws"


def build_data_source(settings: config.Settings) -> ForecastDataSource:
    """Instantiate the configured forecast data source."""
    source = (settings.forecast_source or DEFAULT_SOURCE_NAME).lower()

    if source == "nws":
        logger.info(
            "Using NWS data source",
            extra={"base_url": settings.nws_base_url, "timeout": settings.upstream_timeout_seconds},
        )
        return NwsClient(
            settings.user_agent,
            base_url=settings.nws_base_url,
            timeout=settings.upstream_timeout_seconds,
        )

    raise ValueError(f"Unknown forecast source '{source}'")
