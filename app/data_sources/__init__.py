"""Data sources for the upstream forecast lookup."""

from .base import ForecastDataSource
from .factory import build_data_source
from .nws_client import (
    NwsClient,
    UpstreamFailure,
    UpstreamHttpError,
    UpstreamResult,
    UpstreamSuccess,
)

__all__ = [
    "build_data_source",
    "ForecastDataSource",
    "NwsClient",
    "UpstreamFailure",
    "UpstreamHttpError",
    "UpstreamResult",
    "UpstreamSuccess",
]
