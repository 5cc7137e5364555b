"""Two-hop forecast lookup: coordinate -> gridpoint metadata -> forecast document."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from app.data_sources.base import ForecastDataSource
from app.data_sources.nws_client import (
    UpstreamFailure,
    UpstreamHttpError,
    UpstreamResult,
    UpstreamSuccess,
)
from app.domain import Coordinate, ErrorBody, GridpointMetadata

from utils.logging_utils import get_tagged_logger
logger = get_tagged_logger(__name__, tag="forecast_service")

GRIDPOINT_ERROR = "Failed to fetch gridpoint metadata"
FORECAST_ERROR = "Failed to fetch forecast"
MISSING_FORECAST_URL_ERROR = "No forecast URL returned for that location."
SERVER_ERROR = "Server error"


@dataclass
class ForecastLookup:
    """Outcome of a lookup: the HTTP status to answer with and its JSON body."""
    status_code: int
    body: Any

    @property
    def ok(self) -> bool:
        return self.status_code == 200


def _error(status_code: int, error: str, details: str | None = None) -> ForecastLookup:
    return ForecastLookup(status_code, ErrorBody(error=error, details=details).to_content())


def _upstream_error(result: UpstreamResult, error: str) -> ForecastLookup | None:
    """Map a non-success result to the caller-facing error, or None on success."""
    if isinstance(result, UpstreamSuccess):
        return None
    if isinstance(result, UpstreamHttpError):
        return _error(result.status_code, error, result.body)
    if isinstance(result, UpstreamFailure):
        return _error(500, SERVER_ERROR, result.message)
    raise TypeError(f"Unexpected upstream result {result!r}")


def lookup_forecast(coordinate: Coordinate, data_source: ForecastDataSource) -> ForecastLookup:
    """
    Resolve gridpoint metadata for ``coordinate`` then fetch its forecast.

    Upstream HTTP errors keep their status and surface the raw body as
    ``details``; a metadata document without a forecast URL is a 502; any
    transport or decode failure is a 500. The second call is only made when
    the first one succeeded and yielded a URL.
    """
    logger.info(
        "Looking up forecast",
        extra={"latitude": coordinate.latitude, "longitude": coordinate.longitude},
    )

    gridpoint = data_source.fetch_gridpoint(coordinate)
    failed = _upstream_error(gridpoint, GRIDPOINT_ERROR)
    if failed is not None:
        return failed

    metadata = GridpointMetadata.from_document(gridpoint.body)
    if not metadata.forecast_url:
        logger.warning(
            "Gridpoint metadata has no forecast URL",
            extra={"latitude": coordinate.latitude, "longitude": coordinate.longitude},
        )
        return _error(502, MISSING_FORECAST_URL_ERROR)

    forecast = data_source.fetch_forecast(metadata.forecast_url)
    failed = _upstream_error(forecast, FORECAST_ERROR)
    if failed is not None:
        return failed

    # The forecast document goes back exactly as the upstream sent it.
    location = metadata.location.to_content() if metadata.location is not None else None
    logger.debug("Forecast lookup complete", extra={"forecast_url": metadata.forecast_url})
    return ForecastLookup(200, {"location": location, "forecast": forecast.body})
