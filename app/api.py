"""HTTP API for the forecast proxy."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import JSONResponse

from .data_sources import ForecastDataSource
from .domain import INVALID_COORDINATE_MESSAGE, ErrorBody, InvalidCoordinateError, parse_coordinate
from .forecast_service import lookup_forecast
from utils.logging_utils import get_tagged_logger

logger = get_tagged_logger(__name__, tag="app/api")

router = APIRouter()


def _single_value(values: list[str]) -> Optional[str]:
    """Return the only value of a query parameter; a repeated one counts as invalid."""
    return values[0] if len(values) == 1 else None


def get_data_source(request: Request) -> ForecastDataSource:
    """Return the data source the application factory attached at startup."""
    return request.app.state.data_source


@router.get("/forecast")
def get_forecast(
    lat: list[str] = Query(default=[]),
    lon: list[str] = Query(default=[]),
    data_source: ForecastDataSource = Depends(get_data_source),
):
    """Proxy a coordinate to the NWS and return ``{location, forecast}``.

    ``lat``/``lon`` are taken as raw strings so that malformed or repeated
    values get the service's own 400 body rather than FastAPI's validation
    error.
    """
    try:
        coordinate = parse_coordinate(_single_value(lat), _single_value(lon))
    except InvalidCoordinateError:
        logger.debug("Rejecting invalid coordinate", extra={"lat": lat, "lon": lon})
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorBody(error=INVALID_COORDINATE_MESSAGE).to_content(),
        )

    result = lookup_forecast(coordinate, data_source)
    if not result.ok:
        logger.info(
            "Forecast lookup failed",
            extra={"status_code": result.status_code, "lat": lat, "lon": lon},
        )
    return JSONResponse(status_code=result.status_code, content=result.body)
