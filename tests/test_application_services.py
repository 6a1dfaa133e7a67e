from __future__ import annotations

import base64
import tempfile
import unittest
from pathlib import Path

from garage.application.use_cases.image_generation import (
    GENERIC_FAILURE_MESSAGE,
    UNREACHABLE_MESSAGE,
    ImageGenerationService,
    describe_generation_error,
)
from garage.application.use_cases.image_upload import ImageUploadService
from garage.application.use_cases.vin_decode import VinDecodeService
from garage.domain.entities import (
    DecodedVin,
    ExternalServiceError,
    ImageReadError,
    InvalidResponseError,
    ServiceUnavailableError,
)
from tests.fakes import FakeImageFetcher, FakeImageGenerator, FakeVinDecoder


class DescribeGenerationErrorTests(unittest.TestCase):
    def test_transport_failure_has_specific_message(self) -> None:
        self.assertEqual(describe_generation_error(ServiceUnavailableError("refused")), UNREACHABLE_MESSAGE)

    def test_service_reason_is_shown(self) -> None:
        exc = ExternalServiceError("Failed to store generated image", status_code=500)
        self.assertEqual(describe_generation_error(exc), "Failed to store generated image")

    def test_status_without_reason(self) -> None:
        self.assertEqual(describe_generation_error(ExternalServiceError("", status_code=502)), "Server error: 502")

    def test_shape_and_unknown_failures_are_generic(self) -> None:
        self.assertEqual(describe_generation_error(InvalidResponseError("Missing image URL")), GENERIC_FAILURE_MESSAGE)
        self.assertEqual(describe_generation_error(RuntimeError("boom")), GENERIC_FAILURE_MESSAGE)


class ImageGenerationServiceTests(unittest.TestCase):
    def test_generate_passes_prompt_and_vehicle_id(self) -> None:
        generator = FakeImageGenerator("https://x/y.png")
        service = ImageGenerationService(generator, FakeImageFetcher())
        self.assertEqual(service.generate("a prompt", "veh-1"), "https://x/y.png")
        self.assertEqual(generator.calls, [("a prompt", "veh-1")])

    def test_generate_propagates_service_errors(self) -> None:
        generator = FakeImageGenerator(error=ServiceUnavailableError("down"))
        service = ImageGenerationService(generator, FakeImageFetcher())
        with self.assertRaises(ServiceUnavailableError):
            service.generate("a prompt", "veh-1")

    def test_fetch_preview(self) -> None:
        fetcher = FakeImageFetcher(b"bytes")
        service = ImageGenerationService(FakeImageGenerator(), fetcher)
        self.assertEqual(service.fetch_preview("https://x/y.png"), b"bytes")
        self.assertEqual(fetcher.calls, ["https://x/y.png"])


class VinDecodeServiceTests(unittest.TestCase):
    def test_normalizes_before_decoding(self) -> None:
        decoded = DecodedVin(make="Ram", model="1500", year="2019")
        decoder = FakeVinDecoder(decoded)
        self.assertEqual(VinDecodeService(decoder).decode(" 1c6rr7lt5ks123456 "), decoded)
        self.assertEqual(decoder.calls, ["1C6RR7LT5KS123456"])

    def test_blank_vin_skips_decoder(self) -> None:
        decoder = FakeVinDecoder()
        self.assertIsNone(VinDecodeService(decoder).decode("  "))
        self.assertEqual(decoder.calls, [])


class ImageUploadServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_reads_png_as_data_uri(self) -> None:
        path = self.root / "car.png"
        path.write_bytes(b"\x89PNG\r\n")
        uri = ImageUploadService(1024).read_as_data_uri(path)
        self.assertTrue(uri.startswith("data:image/png;base64,"))
        self.assertEqual(base64.b64decode(uri.split(",", 1)[1]), b"\x89PNG\r\n")

    def test_rejects_oversized_file(self) -> None:
        path = self.root / "big.jpg"
        path.write_bytes(b"x" * 20)
        with self.assertRaises(ImageReadError):
            ImageUploadService(10).read_as_data_uri(path)

    def test_rejects_non_image(self) -> None:
        path = self.root / "notes.txt"
        path.write_text("hello", encoding="utf-8")
        with self.assertRaises(ImageReadError):
            ImageUploadService(1024).read_as_data_uri(path)

    def test_missing_file(self) -> None:
        with self.assertRaises(ImageReadError):
            ImageUploadService(1024).read_as_data_uri(self.root / "gone.png")

    def test_empty_file(self) -> None:
        path = self.root / "empty.gif"
        path.write_bytes(b"")
        with self.assertRaises(ImageReadError):
            ImageUploadService(1024).read_as_data_uri(path)
