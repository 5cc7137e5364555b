"""Client for the National Weather Service API (api.weather.gov).

Each call returns an explicit result instead of raising, so the caller can
match on success, upstream HTTP error, or transport failure in sequence.
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Optional, Union

import requests

from app.domain import Coordinate
from utils.logging_utils import get_tagged_logger, preview_text
logger = get_tagged_logger(__name__, tag="nws_client")

NWS_BASE_URL = "https://api.weather.gov"
GEO_JSON_ACCEPT = "application/geo+json"
DEFAULT_TIMEOUT_SECONDS = 10.0


def _reject_constant(token: str) -> Any:
    """NaN and Infinity are not JSON; refuse them instead of decoding to floats."""
    raise ValueError(f"Invalid JSON token {token!r}")


def decode_json(text: str) -> Any:
    """Strict JSON decode of an upstream body."""
    return json.loads(text, parse_constant=_reject_constant)


@dataclass(frozen=True)
class UpstreamSuccess:
    """2xx response with its parsed JSON body."""
    status_code: int
    body: Any


@dataclass(frozen=True)
class UpstreamHttpError:
    """Non-2xx response; ``body`` is the raw text the upstream sent."""
    status_code: int
    body: str


@dataclass(frozen=True)
class UpstreamFailure:
    """No usable response: connection error, timeout, or an unparseable body."""
    message: str


UpstreamResult = Union[UpstreamSuccess, UpstreamHttpError, UpstreamFailure]


class NwsClient:
    """Two-endpoint NWS client: ``/points/{lat},{lon}`` and the forecast URL it returns."""

    def __init__(self,
                 user_agent: str,
                 *,
                 base_url: str = NWS_BASE_URL,
                 timeout: float = DEFAULT_TIMEOUT_SECONDS,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self.session = session if session is not None else requests.Session()

    def points_url(self, coordinate: Coordinate) -> str:
        """Gridpoint metadata URL for a coordinate."""
        return f"{self.base_url}/points/{coordinate.path_segment()}"

    def fetch_gridpoint(self, coordinate: Coordinate) -> UpstreamResult:
        """Resolve a coordinate to its gridpoint metadata document."""
        return self._get_json(self.points_url(coordinate), context="gridpoint")

    def fetch_forecast(self, forecast_url: str) -> UpstreamResult:
        """Fetch the forecast document at a URL taken from gridpoint metadata."""
        return self._get_json(forecast_url, context="forecast")

    def _get_json(self, url: str, *, context: str) -> UpstreamResult:
        """GET ``url`` once and classify the outcome. No retries."""
        headers = {"Accept": GEO_JSON_ACCEPT, "User-Agent": self.user_agent}
        logger.debug("NWS GET", extra={"context": context, "url": url})
        try:
            resp = self.session.get(url, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as exc:
            logger.exception("NWS %s request failed: %s", context, exc)
            return UpstreamFailure(message=str(exc))

        if not 200 <= resp.status_code < 300:
            text = resp.text or ""
            logger.warning(
                "NWS %s returned %d: %s", context, resp.status_code, preview_text(text),
            )
            return UpstreamHttpError(status_code=resp.status_code, body=text)

        try:
            data = decode_json(resp.text)
        except ValueError as exc:
            logger.exception("NWS %s returned non-JSON body: %s", context, preview_text(resp.text))
            return UpstreamFailure(message=str(exc))

        logger.info(
            "NWS %s fetched", context,
            extra={"status_code": resp.status_code, "url": url},
        )
        return UpstreamSuccess(status_code=resp.status_code, body=data)
