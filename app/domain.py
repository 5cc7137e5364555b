"""Domain vocabulary for the forecast proxy.

Coordinates as the caller supplies them, the two fields we read out of the
upstream gridpoint document, and the Pydantic shapes of what we send back.
No network code lives here.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


INVALID_COORDINATE_MESSAGE = "Invalid lat/lon."

# ASCII numeric literals a browser would accept: decimals with an optional
# exponent, plus unsigned hex/octal/binary integers.
_DECIMAL_LITERAL = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")
_PREFIXED_LITERAL = re.compile(r"0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)")

# Plain decimal notation is used for magnitudes in [1e-6, 1e21).
_FIXED_NOTATION_MIN = 1e-6
_FIXED_NOTATION_MAX = 1e21


class InvalidCoordinateError(ValueError):
    """Raised when a latitude/longitude query value is not a finite number."""


class _StrictBaseModel(BaseModel):
    """Base model with strict extra handling."""

    model_config = ConfigDict(extra="forbid")


@dataclass(frozen=True)
class Coordinate:
    """A caller-supplied point. Only finiteness is checked, not range."""
    latitude: float
    longitude: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.latitude) and math.isfinite(self.longitude)):
            raise InvalidCoordinateError(INVALID_COORDINATE_MESSAGE)

    def path_segment(self) -> str:
        """Render as ``lat,lon`` for the upstream points endpoint."""
        return f"{format_coordinate_value(self.latitude)},{format_coordinate_value(self.longitude)}"


def parse_coordinate_value(raw: Optional[str]) -> float:
    """Parse one query value into a finite float.

    Missing, blank, non-numeric and non-finite ("NaN", "Infinity", "inf")
    values all raise InvalidCoordinateError.
    """
    if raw is None:
        raise InvalidCoordinateError(INVALID_COORDINATE_MESSAGE)
    text = raw.strip()
    if not text:
        raise InvalidCoordinateError(INVALID_COORDINATE_MESSAGE)
    if _PREFIXED_LITERAL.fullmatch(text):
        try:
            value = float(int(text, 0))
        except OverflowError as exc:
            raise InvalidCoordinateError(INVALID_COORDINATE_MESSAGE) from exc
    elif _DECIMAL_LITERAL.fullmatch(text):
        value = float(text)
    else:
        # float() alone would also take "1_0", "nan" and non-ASCII digits
        raise InvalidCoordinateError(INVALID_COORDINATE_MESSAGE)
    if not math.isfinite(value):
        raise InvalidCoordinateError(INVALID_COORDINATE_MESSAGE)
    return value


def parse_coordinate(lat: Optional[str], lon: Optional[str]) -> Coordinate:
    """Build a Coordinate from the raw ``lat``/``lon`` query strings."""
    return Coordinate(parse_coordinate_value(lat), parse_coordinate_value(lon))


def format_coordinate_value(value: float) -> str:
    """Print a float the way a browser prints a number.

    Shortest round-trip digits; plain notation for magnitudes in [1e-6, 1e21),
    exponent form (``1e-7``, ``1e+21``) outside it; no trailing ``.0``.

    >>> format_coordinate_value(34.54)
    '34.54'
    >>> format_coordinate_value(-84.0)
    '-84'
    >>> format_coordinate_value(0.00005)
    '0.00005'
    >>> format_coordinate_value(1e-7)
    '1e-7'
    """
    if value == 0:
        return "0"
    shortest = repr(value)
    if _FIXED_NOTATION_MIN <= abs(value) < _FIXED_NOTATION_MAX:
        text = format(Decimal(shortest), "f")
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        return text
    mantissa, _, exponent = shortest.partition("e")
    if mantissa.endswith(".0"):
        mantissa = mantissa[:-2]
    return f"{mantissa}e{int(exponent):+d}"


class LocationSummary(BaseModel):
    """Human-readable place near the requested point.

    Only fields the upstream actually sent are set, so ``to_content`` leaves
    out the missing ones.
    """
    city: Any = None
    state: Any = None

    def to_content(self) -> dict:
        return self.model_dump(exclude_unset=True)


class ErrorBody(_StrictBaseModel):
    """Structured error body; ``details`` is omitted when there is nothing to add."""
    error: str
    details: Optional[str] = None

    def to_content(self) -> dict:
        return self.model_dump(exclude_none=True)


@dataclass
class GridpointMetadata:
    """The two fields we need from an upstream ``/points`` document."""
    forecast_url: Optional[str]
    location: Optional[LocationSummary]

    @classmethod
    def from_document(cls, document: Any) -> "GridpointMetadata":
        """Extract the forecast URL and relative location, tolerating missing keys."""
        properties = _as_dict(_as_dict(document).get("properties"))

        forecast_url = properties.get("forecast") or None
        if forecast_url is not None and not isinstance(forecast_url, str):
            forecast_url = None

        # An empty descriptor still counts as present; only a missing one is null.
        relative = _as_dict(properties.get("relativeLocation")).get("properties")
        location = None
        if isinstance(relative, dict):
            location = LocationSummary(**{key: relative[key] for key in ("city", "state") if key in relative})

        return cls(forecast_url=forecast_url, location=location)


def _as_dict(value: Any) -> dict:
    """Return value if it is a dict, otherwise an empty dict."""
    return value if isinstance(value, dict) else {}
