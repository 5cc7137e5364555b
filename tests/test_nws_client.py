import json
import unittest

import requests

from app.data_sources import nws_client
from app.data_sources.nws_client import (
    NwsClient,
    UpstreamFailure,
    UpstreamHttpError,
    UpstreamSuccess,
)
from app.domain import Coordinate


class DummyResp:
    def __init__(self, status_code=200, payload=None, text=None):
        self.status_code = status_code
        if text is None:
            text = json.dumps(payload) if payload is not None else ""
        self.text = text


class RecordingSession:
    """Stands in for requests.Session; replays queued responses or exceptions."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def get(self, url, headers=None, timeout=None):
        self.calls.append({"url": url, "headers": headers, "timeout": timeout})
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class TestNwsClient(unittest.TestCase):
    def _client(self, session, **kwargs):
        return NwsClient("Test WX (contact: ops@example.org)", session=session, **kwargs)

    def test_points_url(self):
        client = self._client(RecordingSession(), base_url="http://nws.test/")
        self.assertEqual(client.points_url(Coordinate(34.54, -84.06)), "http://nws.test/points/34.54,-84.06")

    def test_default_base_url(self):
        client = self._client(RecordingSession())
        self.assertEqual(client.base_url, nws_client.NWS_BASE_URL)

    def test_fetch_gridpoint_success_sends_headers_and_timeout(self):
        payload = {"properties": {"forecast": "http://nws.test/f"}}
        session = RecordingSession(DummyResp(200, payload))
        client = self._client(session, timeout=3.5)

        result = client.fetch_gridpoint(Coordinate(1.5, 2.0))

        self.assertEqual(result, UpstreamSuccess(status_code=200, body=payload))
        call = session.calls[0]
        self.assertEqual(call["url"], "https://api.weather.gov/points/1.5,2")
        self.assertEqual(call["headers"]["Accept"], "application/geo+json")
        self.assertEqual(call["headers"]["User-Agent"], "Test WX (contact: ops@example.org)")
        self.assertEqual(call["timeout"], 3.5)

    def test_http_error_keeps_status_and_raw_body(self):
        session = RecordingSession(DummyResp(404, text='{"title": "Not Found"}'))
        result = self._client(session).fetch_gridpoint(Coordinate(0.1, 0.1))
        self.assertEqual(result, UpstreamHttpError(status_code=404, body='{"title": "Not Found"}'))

    def test_redirect_status_is_not_success(self):
        session = RecordingSession(DummyResp(304, text=""))
        result = self._client(session).fetch_forecast("http://nws.test/f")
        self.assertIsInstance(result, UpstreamHttpError)
        self.assertEqual(result.status_code, 304)

    def test_transport_error_becomes_failure(self):
        session = RecordingSession(requests.exceptions.ConnectionError("connection refused"))
        result = self._client(session).fetch_forecast("http://nws.test/f")
        self.assertEqual(result, UpstreamFailure(message="connection refused"))

    def test_timeout_becomes_failure(self):
        session = RecordingSession(requests.exceptions.ReadTimeout("read timed out"))
        result = self._client(session).fetch_forecast("http://nws.test/f")
        self.assertIsInstance(result, UpstreamFailure)
        self.assertIn("timed out", result.message)

    def test_malformed_json_becomes_failure(self):
        session = RecordingSession(DummyResp(200, payload=None, text="<html>"))
        result = self._client(session).fetch_forecast("http://nws.test/f")
        self.assertIsInstance(result, UpstreamFailure)
        self.assertIn("Expecting value", result.message)

    def test_non_standard_json_constants_become_failure(self):
        for text in ('{"v": NaN}', '{"v": Infinity}', '[-Infinity]'):
            with self.subTest(text=text):
                session = RecordingSession(DummyResp(200, text=text))
                result = self._client(session).fetch_forecast("http://nws.test/f")
                self.assertIsInstance(result, UpstreamFailure)

    def test_decode_json_is_strict(self):
        self.assertEqual(nws_client.decode_json('{"a": [1, 2.5, null]}'), {"a": [1, 2.5, None]})
        with self.assertRaises(ValueError):
            nws_client.decode_json("NaN")

    def test_no_retry_on_failure(self):
        session = RecordingSession(DummyResp(503, text="busy"), DummyResp(200, {}))
        self._client(session).fetch_forecast("http://nws.test/f")
        self.assertEqual(len(session.calls), 1)


if __name__ == "__main__":
    unittest.main()
