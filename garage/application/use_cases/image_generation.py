from __future__ import annotations

import logging

from garage.domain.entities import (
    ExternalServiceError,
    InvalidResponseError,
    ServiceUnavailableError,
)
from garage.domain.ports import ImageFetcherPort, ImageGeneratorPort

logger = logging.getLogger(__name__)

UNREACHABLE_MESSAGE = (
    "Image service is not reachable. Make sure the image API server is running."
)
GENERIC_FAILURE_MESSAGE = "Failed to generate image. Please try again."


def describe_generation_error(exc: BaseException) -> str:
    if isinstance(exc, ServiceUnavailableError):
        return UNREACHABLE_MESSAGE
    if isinstance(exc, InvalidResponseError):
        return GENERIC_FAILURE_MESSAGE
    if isinstance(exc, ExternalServiceError):
        message = str(exc).strip()
        if message:
            return message
        if exc.status_code is not None:
            return f"Server error: {exc.status_code}"
    return GENERIC_FAILURE_MESSAGE


class ImageGenerationService:
    def __init__(self, generator: ImageGeneratorPort, fetcher: ImageFetcherPort) -> None:
        self.generator = generator
        self.fetcher = fetcher

    def generate(self, prompt: str, vehicle_id: str) -> str:
        try:
            return self.generator.generate(prompt, vehicle_id)
        except ExternalServiceError as exc:
            logger.warning("Error generating image for %s: %s", vehicle_id, exc)
            raise

    def fetch_preview(self, image_url: str) -> bytes:
        return self.fetcher.fetch(image_url)
