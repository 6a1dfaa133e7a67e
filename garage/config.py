from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_IMAGE_API_URL = "http://localhost:3005/api/generate-image"
DEFAULT_VPIC_API_BASE = "https://vpic.nhtsa.dot.gov/api"


@dataclass(frozen=True)
class Settings:
    image_api_url: str = DEFAULT_IMAGE_API_URL
    image_timeout: float = 30.0
    vpic_api_base: str = DEFAULT_VPIC_API_BASE
    vin_timeout: float = 20.0
    camera_index: int = 0
    max_upload_mb: float = 10.0
    log_level: str = "INFO"

    @property
    def max_upload_bytes(self) -> int:
        return int(self.max_upload_mb * 1024 * 1024)


def load_dotenv(path: Optional[Path] = None) -> None:
    target = path or _default_dotenv_path()
    if not target.exists():
        return

    for line in target.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        if "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        key = key.strip()
        value = value.strip()
        if not key:
            continue
        if (value.startswith('"') and value.endswith('"')) or (
            value.startswith("'") and value.endswith("'")
        ):
            value = value[1:-1]
        if key not in os.environ:
            os.environ[key] = value


def load_settings(env: Optional[Mapping[str, str]] = None) -> Settings:
    source = os.environ if env is None else env
    defaults = Settings()
    return Settings(
        image_api_url=_text(source, "GARAGE_IMAGE_API_URL", defaults.image_api_url),
        image_timeout=_positive_float(source, "GARAGE_IMAGE_TIMEOUT", defaults.image_timeout),
        vpic_api_base=_text(source, "VPIC_API_BASE", defaults.vpic_api_base),
        vin_timeout=_positive_float(source, "GARAGE_VIN_TIMEOUT", defaults.vin_timeout),
        camera_index=_non_negative_int(source, "GARAGE_CAMERA_INDEX", defaults.camera_index),
        max_upload_mb=_positive_float(source, "GARAGE_MAX_UPLOAD_MB", defaults.max_upload_mb),
        log_level=_text(source, "GARAGE_LOG_LEVEL", defaults.log_level).upper(),
    )


def _default_dotenv_path() -> Path:
    return Path(__file__).resolve().parents[1] / ".env"


def _text(env: Mapping[str, str], key: str, default: str) -> str:
    value = (env.get(key) or "").strip()
    return value or default


def _positive_float(env: Mapping[str, str], key: str, default: float) -> float:
    try:
        value = float(env.get(key, ""))
    except ValueError:
        return default
    return value if value > 0 else default


def _non_negative_int(env: Mapping[str, str], key: str, default: int) -> int:
    try:
        value = int(env.get(key, ""))
    except ValueError:
        return default
    return value if value >= 0 else default
