from __future__ import annotations

from typing import Optional

from garage.domain.entities import ExternalServiceError, InvalidResponseError
from garage.domain.ports import ImageGeneratorPort
from garage.infrastructure.http_json import request_json

DEFAULT_TIMEOUT = 30.0


class ImageGenerationClient(ImageGeneratorPort):
    def __init__(self, endpoint: str, timeout: Optional[float] = None) -> None:
        self.endpoint = endpoint
        self.timeout = timeout or DEFAULT_TIMEOUT

    def generate(self, prompt: str, vehicle_id: str) -> str:
        data = request_json(
            "POST",
            self.endpoint,
            {"prompt": prompt, "vehicleId": vehicle_id},
            timeout=self.timeout,
        )
        error = data.get("error")
        if error:
            raise ExternalServiceError(str(error))
        image_url = data.get("imageUrl")
        if not isinstance(image_url, str) or not image_url.strip():
            raise InvalidResponseError("Missing image URL in response")
        return image_url
