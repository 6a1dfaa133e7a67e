from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from garage.application.operation import OperationStatus, RequestTokens
from garage.application.prompt import build_generation_prompt
from garage.domain.entities import VehicleDescriptor

logger = logging.getLogger(__name__)

TAB_GENERATE = "generate"
TAB_UPLOAD = "upload"
TABS = (TAB_GENERATE, TAB_UPLOAD)

KIND_NONE = "none"
KIND_UPLOADED = "uploaded"
KIND_GENERATED = "generated"

_TAB_KIND = {TAB_UPLOAD: KIND_UPLOADED, TAB_GENERATE: KIND_GENERATED}

RENDER_FAILED_MESSAGE = (
    "The generated image couldn't be displayed. This might be due to storage "
    "permissions. Please try generating again."
)


@dataclass(frozen=True)
class ImageSelection:
    kind: str = KIND_NONE
    data: Optional[str] = None

    @classmethod
    def none(cls) -> "ImageSelection":
        return cls()

    @classmethod
    def uploaded(cls, data: str) -> "ImageSelection":
        return cls(KIND_UPLOADED, data)

    @classmethod
    def generated(cls, data: str) -> "ImageSelection":
        return cls(KIND_GENERATED, data)

    @property
    def uploaded_image(self) -> Optional[str]:
        return self.data if self.kind == KIND_UPLOADED else None

    @property
    def generated_image(self) -> Optional[str]:
        return self.data if self.kind == KIND_GENERATED else None

    def for_tab(self, tab: str) -> Optional[str]:
        return self.data if _TAB_KIND.get(tab) == self.kind else None


class ImageDialogState:
    """State of the image acquisition dialog for a single vehicle.

    Owned by the dialog; the host only sees on_save / on_close. Async work is
    started through start_* methods which hand back a request token, and its
    outcome is applied through the matching finish/apply/fail method. Outcomes
    carrying a stale token, or arriving after close, are dropped.
    """

    def __init__(
        self,
        vehicle: VehicleDescriptor,
        on_save: Callable[[str], None],
        on_close: Callable[[], None],
    ) -> None:
        self.vehicle = vehicle
        self.on_save = on_save
        self.on_close = on_close
        self.is_open = False
        self.tab = TAB_GENERATE
        self.selection = ImageSelection.none()
        self.generation = OperationStatus.idle()
        self.upload_error: Optional[str] = None
        self._generation_tokens = RequestTokens()
        self._upload_tokens = RequestTokens()

    # Lifecycle

    def open(self) -> None:
        self._reset()
        self._generation_tokens.activate()
        self._upload_tokens.activate()
        self.is_open = True

    def request_close(self) -> bool:
        if self.generation.is_in_flight:
            logger.debug("Close ignored while image generation is in flight")
            return False
        self._discard()
        self.on_close()
        return True

    def _discard(self) -> None:
        self._generation_tokens.invalidate()
        self._upload_tokens.invalidate()
        self._reset()
        self.is_open = False

    def _reset(self) -> None:
        self.tab = TAB_GENERATE
        self.selection = ImageSelection.none()
        self.generation = OperationStatus.idle()
        self.upload_error = None

    # Tabs

    def select_tab(self, tab: str) -> bool:
        if tab not in TABS:
            raise ValueError(f"Unknown tab: {tab}")
        if self.generation.is_in_flight:
            return False
        self.tab = tab
        return True

    # Upload

    def begin_upload(self) -> Optional[int]:
        if not self.is_open or self.generation.is_in_flight:
            return None
        return self._upload_tokens.next()

    def apply_upload(self, token: int, data_uri: str) -> bool:
        if not self._upload_tokens.is_current(token):
            return False
        self.selection = ImageSelection.uploaded(data_uri)
        self.upload_error = None
        if self.generation.is_failed:
            self.generation = OperationStatus.idle()
        return True

    def fail_upload(self, token: int, reason: str, cause: Optional[BaseException] = None) -> bool:
        if not self._upload_tokens.is_current(token):
            return False
        logger.error("Error reading file: %s", cause or reason)
        self.upload_error = reason
        return True

    def remove_upload(self) -> None:
        if self.selection.kind == KIND_UPLOADED:
            self.selection = ImageSelection.none()

    # Generation

    def start_generation(self) -> Optional[Tuple[int, str]]:
        if not self.is_open or self.generation.is_in_flight:
            return None
        prompt = build_generation_prompt(self.vehicle)
        self.generation = OperationStatus.in_flight()
        self.selection = ImageSelection.none()
        self.upload_error = None
        logger.debug("Sending request to generate image with prompt: %s", prompt)
        return self._generation_tokens.next(), prompt

    def finish_generation(
        self,
        token: int,
        image_url: Optional[str] = None,
        error: Optional[str] = None,
    ) -> bool:
        if not self._generation_tokens.is_current(token):
            return False
        if error or not image_url:
            self.generation = OperationStatus.failed(
                error or "Failed to generate image. Please try again."
            )
            return True
        self.selection = ImageSelection.generated(image_url)
        self.generation = OperationStatus.idle()
        return True

    def render_failed(self, image_url: str) -> bool:
        if self.selection.generated_image != image_url:
            return False
        logger.warning("Error loading generated image: %s", image_url)
        self.selection = ImageSelection.none()
        self.generation = OperationStatus.failed(RENDER_FAILED_MESSAGE)
        return True

    # Save

    @property
    def current_image(self) -> Optional[str]:
        return self.selection.for_tab(self.tab)

    @property
    def can_save(self) -> bool:
        return self.is_open and not self.generation.is_in_flight and bool(self.current_image)

    def save(self) -> bool:
        image_url = self.current_image
        if not self.can_save or image_url is None:
            return False
        logger.info("Saving %s image for vehicle %s", self.selection.kind, self.vehicle.id)
        self.on_save(image_url)
        return self.request_close()
