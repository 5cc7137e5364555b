import unittest

from app.data_sources.nws_client import UpstreamFailure, UpstreamHttpError, UpstreamSuccess
from app.domain import Coordinate
from app.forecast_service import (
    FORECAST_ERROR,
    GRIDPOINT_ERROR,
    MISSING_FORECAST_URL_ERROR,
    SERVER_ERROR,
    lookup_forecast,
)

FORECAST_URL = "https://api.weather.gov/gridpoints/FFC/1,2/forecast"


def _gridpoint_doc(forecast=FORECAST_URL, relative=True):
    properties = {}
    if forecast is not None:
        properties["forecast"] = forecast
    if relative:
        properties["relativeLocation"] = {"properties": {"city": "Canton", "state": "GA"}}
    return {"properties": properties}


class FakeDataSource:
    def __init__(self, gridpoint, forecast=None):
        self.gridpoint = gridpoint
        self.forecast = forecast
        self.gridpoint_calls = []
        self.forecast_calls = []

    def fetch_gridpoint(self, coordinate):
        self.gridpoint_calls.append(coordinate)
        return self.gridpoint

    def fetch_forecast(self, forecast_url):
        self.forecast_calls.append(forecast_url)
        return self.forecast


class TestLookupForecast(unittest.TestCase):
    def setUp(self):
        self.coord = Coordinate(34.54, -84.06)

    def test_success_reshapes_payload(self):
        forecast_doc = {"properties": {"periods": [{"name": "Tonight"}]}}
        ds = FakeDataSource(UpstreamSuccess(200, _gridpoint_doc()), UpstreamSuccess(200, forecast_doc))

        result = lookup_forecast(self.coord, ds)

        self.assertTrue(result.ok)
        self.assertEqual(result.body, {"location": {"city": "Canton", "state": "GA"}, "forecast": forecast_doc})
        self.assertEqual(ds.gridpoint_calls, [self.coord])
        self.assertEqual(ds.forecast_calls, [FORECAST_URL])

    def test_success_without_relative_location(self):
        ds = FakeDataSource(UpstreamSuccess(200, _gridpoint_doc(relative=False)), UpstreamSuccess(200, {"a": 1}))
        result = lookup_forecast(self.coord, ds)
        self.assertEqual(result.status_code, 200)
        self.assertIsNone(result.body["location"])
        self.assertEqual(result.body["forecast"], {"a": 1})

    def test_empty_relative_location_gives_empty_location(self):
        gridpoint = {"properties": {"forecast": FORECAST_URL, "relativeLocation": {"properties": {}}}}
        ds = FakeDataSource(UpstreamSuccess(200, gridpoint), UpstreamSuccess(200, {"a": 1}))
        result = lookup_forecast(self.coord, ds)
        self.assertEqual(result.body["location"], {})

    def test_forecast_document_is_not_reserialised(self):
        forecast_doc = {"v": float("nan"), "periods": [{"when": "2024-01-01T06:00:00-05:00"}]}
        ds = FakeDataSource(UpstreamSuccess(200, _gridpoint_doc()), UpstreamSuccess(200, forecast_doc))
        result = lookup_forecast(self.coord, ds)
        self.assertIs(result.body["forecast"], forecast_doc)

    def test_gridpoint_http_error_is_forwarded(self):
        ds = FakeDataSource(UpstreamHttpError(404, "Not Found"))
        result = lookup_forecast(self.coord, ds)
        self.assertEqual(result.status_code, 404)
        self.assertEqual(result.body, {"error": GRIDPOINT_ERROR, "details": "Not Found"})
        self.assertEqual(ds.forecast_calls, [])

    def test_missing_forecast_url_is_502(self):
        ds = FakeDataSource(UpstreamSuccess(200, _gridpoint_doc(forecast=None)))
        result = lookup_forecast(self.coord, ds)
        self.assertEqual(result.status_code, 502)
        self.assertEqual(result.body, {"error": MISSING_FORECAST_URL_ERROR})
        self.assertEqual(ds.forecast_calls, [])

    def test_forecast_http_error_is_forwarded(self):
        ds = FakeDataSource(UpstreamSuccess(200, _gridpoint_doc()), UpstreamHttpError(503, "upstream busy"))
        result = lookup_forecast(self.coord, ds)
        self.assertEqual(result.status_code, 503)
        self.assertEqual(result.body, {"error": FORECAST_ERROR, "details": "upstream busy"})

    def test_gridpoint_failure_is_500(self):
        ds = FakeDataSource(UpstreamFailure("connection refused"))
        result = lookup_forecast(self.coord, ds)
        self.assertEqual(result.status_code, 500)
        self.assertEqual(result.body, {"error": SERVER_ERROR, "details": "connection refused"})
        self.assertEqual(ds.forecast_calls, [])

    def test_forecast_failure_is_500(self):
        ds = FakeDataSource(UpstreamSuccess(200, _gridpoint_doc()), UpstreamFailure("read timed out"))
        result = lookup_forecast(self.coord, ds)
        self.assertEqual(result.status_code, 500)
        self.assertEqual(result.body["details"], "read timed out")

    def test_unknown_result_type_raises(self):
        ds = FakeDataSource(object())
        with self.assertRaises(TypeError):
            lookup_forecast(self.coord, ds)


if __name__ == "__main__":
    unittest.main()
