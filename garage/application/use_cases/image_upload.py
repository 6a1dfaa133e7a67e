from __future__ import annotations

import base64
import mimetypes
from pathlib import Path
from typing import Union

from garage.domain.entities import ImageReadError

UPLOAD_FAILED_MESSAGE = "Could not read the selected image. Please choose another file."

IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".gif", ".webp", ".bmp")
IMAGE_FILE_FILTER = "Images (" + " ".join(f"*{suffix}" for suffix in IMAGE_SUFFIXES) + ")"


class ImageUploadService:
    def __init__(self, max_bytes: int) -> None:
        self.max_bytes = max_bytes

    def read_as_data_uri(self, path: Union[str, Path]) -> str:
        target = Path(path)
        mime, _ = mimetypes.guess_type(target.name)
        if not mime or not mime.startswith("image/"):
            raise ImageReadError(f"Not an image file: {target.name}")
        try:
            size = target.stat().st_size
            if size > self.max_bytes:
                raise ImageReadError(
                    f"{target.name} is {size} bytes, limit is {self.max_bytes}"
                )
            raw = target.read_bytes()
        except OSError as exc:
            raise ImageReadError(str(exc)) from exc
        if not raw:
            raise ImageReadError(f"{target.name} is empty")
        encoded = base64.b64encode(raw).decode("ascii")
        return f"data:{mime};base64,{encoded}"
