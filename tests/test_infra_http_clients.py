from __future__ import annotations

import io
import json
import socket
import unittest
import urllib.error
from unittest import mock

from garage.domain.entities import (
    ExternalServiceError,
    InvalidResponseError,
    ServiceUnavailableError,
)
from garage.infrastructure.http_json import extract_error_message
from garage.infrastructure.imaging.generation_client import ImageGenerationClient
from garage.infrastructure.imaging.image_fetcher import UrlImageFetcher, decode_data_uri
from garage.infrastructure.vpic.vpic_client import VpicClient, parse_decode_results

ENDPOINT = "http://localhost:3005/api/generate-image"


class FakeResponse:
    def __init__(self, body: bytes) -> None:
        self._body = body

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return None

    def read(self):
        return self._body


def json_response(payload) -> FakeResponse:
    return FakeResponse(json.dumps(payload).encode("utf-8"))


def http_error(code: int, payload=None) -> urllib.error.HTTPError:
    body = json.dumps(payload).encode("utf-8") if payload is not None else b""
    return urllib.error.HTTPError(ENDPOINT, code, "error", {}, io.BytesIO(body))


class ImageGenerationClientTests(unittest.TestCase):
    def test_posts_prompt_and_vehicle_id(self) -> None:
        with mock.patch("urllib.request.urlopen", return_value=json_response({"imageUrl": "https://x/y.png"})) as urlopen:
            url = ImageGenerationClient(ENDPOINT, timeout=30).generate("a prompt", "veh-1")
        self.assertEqual(url, "https://x/y.png")
        request = urlopen.call_args[0][0]
        self.assertEqual(request.get_method(), "POST")
        self.assertEqual(request.full_url, ENDPOINT)
        self.assertEqual(json.loads(request.data), {"prompt": "a prompt", "vehicleId": "veh-1"})
        self.assertEqual(urlopen.call_args[1]["timeout"], 30)

    def test_missing_image_url(self) -> None:
        with mock.patch("urllib.request.urlopen", return_value=json_response({"vehicleId": "veh-1"})):
            with self.assertRaises(InvalidResponseError):
                ImageGenerationClient(ENDPOINT).generate("p", "veh-1")

    def test_error_field_in_success_payload(self) -> None:
        with mock.patch("urllib.request.urlopen", return_value=json_response({"error": "quota exceeded"})):
            with self.assertRaises(ExternalServiceError) as ctx:
                ImageGenerationClient(ENDPOINT).generate("p", "veh-1")
        self.assertEqual(str(ctx.exception), "quota exceeded")

    def test_http_error_uses_server_reason(self) -> None:
        with mock.patch("urllib.request.urlopen", side_effect=http_error(400, {"error": "Prompt is required"})):
            with self.assertRaises(ExternalServiceError) as ctx:
                ImageGenerationClient(ENDPOINT).generate("", "veh-1")
        self.assertEqual(str(ctx.exception), "Prompt is required")
        self.assertEqual(ctx.exception.status_code, 400)

    def test_http_error_without_body(self) -> None:
        with mock.patch("urllib.request.urlopen", side_effect=http_error(503)):
            with self.assertRaises(ExternalServiceError) as ctx:
                ImageGenerationClient(ENDPOINT).generate("p", "veh-1")
        self.assertEqual(str(ctx.exception), "Server error: 503")

    def test_connection_refused_is_unavailable(self) -> None:
        error = urllib.error.URLError(ConnectionRefusedError(111, "Connection refused"))
        with mock.patch("urllib.request.urlopen", side_effect=error):
            with self.assertRaises(ServiceUnavailableError):
                ImageGenerationClient(ENDPOINT).generate("p", "veh-1")

    def test_timeout_is_not_reported_as_unavailable(self) -> None:
        with mock.patch("urllib.request.urlopen", side_effect=socket.timeout("timed out")):
            with self.assertRaises(ExternalServiceError) as ctx:
                ImageGenerationClient(ENDPOINT, timeout=30).generate("p", "veh-1")
        self.assertNotIsInstance(ctx.exception, ServiceUnavailableError)
        self.assertIn("30", str(ctx.exception))

    def test_invalid_json(self) -> None:
        with mock.patch("urllib.request.urlopen", return_value=FakeResponse(b"<html>")):
            with self.assertRaises(InvalidResponseError):
                ImageGenerationClient(ENDPOINT).generate("p", "veh-1")

    def test_extract_error_message(self) -> None:
        self.assertEqual(extract_error_message('{"error": {"message": "bad"}}'), "bad")
        self.assertIsNone(extract_error_message("not json"))
        self.assertIsNone(extract_error_message(""))


class VpicClientTests(unittest.TestCase):
    RESULTS = [
        {"Variable": "Make", "Value": "JEEP"},
        {"Variable": "Model", "Value": "Wrangler"},
        {"Variable": "Model Year", "Value": "2020"},
        {"Variable": "Body Class", "Value": "Sport Utility Vehicle (SUV)/Multi-Purpose Vehicle (MPV)"},
        {"Variable": "Trim", "Value": "Sport"},
        {"Variable": "Series", "Value": None},
    ]

    def test_decode_parses_results(self) -> None:
        with mock.patch("urllib.request.urlopen", return_value=json_response({"Results": self.RESULTS})) as urlopen:
            decoded = VpicClient("https://vpic.example/api/").decode("1C4HJXDG0LW123456")
        request = urlopen.call_args[0][0]
        self.assertEqual(
            request.full_url,
            "https://vpic.example/api/vehicles/DecodeVin/1C4HJXDG0LW123456?format=json",
        )
        self.assertEqual(decoded.make, "JEEP")
        self.assertEqual(decoded.model, "Wrangler")
        self.assertEqual(decoded.year, "2020")
        self.assertTrue(decoded.body_class.startswith("Sport Utility"))
        self.assertTrue(decoded.is_complete())

    def test_missing_results_returns_none(self) -> None:
        with mock.patch("urllib.request.urlopen", return_value=json_response({"Message": "x"})):
            self.assertIsNone(VpicClient().decode("VIN"))

    def test_incomplete_decode(self) -> None:
        decoded = parse_decode_results([{"Variable": "Make", "Value": "JEEP"}])
        self.assertFalse(decoded.is_complete())
        self.assertIsNone(decoded.body_class)
        self.assertIsNone(parse_decode_results([]))

    def test_transport_failure_raises(self) -> None:
        with mock.patch("urllib.request.urlopen", side_effect=urllib.error.URLError("no route")):
            with self.assertRaises(ServiceUnavailableError):
                VpicClient().decode("VIN")


class UrlImageFetcherTests(unittest.TestCase):
    def test_data_uri_is_decoded_locally(self) -> None:
        with mock.patch("urllib.request.urlopen") as urlopen:
            data = UrlImageFetcher().fetch("data:image/png;base64,UE5H")
        self.assertEqual(data, b"PNG")
        urlopen.assert_not_called()

    def test_http_download(self) -> None:
        with mock.patch("urllib.request.urlopen", return_value=FakeResponse(b"bytes")):
            self.assertEqual(UrlImageFetcher().fetch("https://x/y.png"), b"bytes")

    def test_http_error(self) -> None:
        with mock.patch("urllib.request.urlopen", side_effect=http_error(403)):
            with self.assertRaises(ExternalServiceError):
                UrlImageFetcher().fetch("https://x/y.png")

    def test_bad_data_uri(self) -> None:
        with self.assertRaises(ValueError):
            decode_data_uri("image/png;base64,AAAA")
        with self.assertRaises(ExternalServiceError):
            UrlImageFetcher().fetch("data:image/png;base64,***")
