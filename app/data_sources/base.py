"""Interface for anything that can answer the two-step forecast lookup."""

from __future__ import annotations

from typing import Protocol

from app.data_sources.nws_client import UpstreamResult
from app.domain import Coordinate


class ForecastDataSource(Protocol):
    """Gridpoint resolution followed by forecast retrieval."""

    def fetch_gridpoint(self, coordinate: Coordinate) -> UpstreamResult:
        """Return the gridpoint metadata result for a coordinate."""
        ...

    def fetch_forecast(self, forecast_url: str) -> UpstreamResult:
        """Return the forecast document result for a URL from gridpoint metadata."""
        ...
