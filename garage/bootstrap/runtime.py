from __future__ import annotations

from garage.config import load_dotenv, load_settings
from garage.logging_setup import configure_logging


def init_environment() -> None:
    load_dotenv()
    configure_logging(load_settings().log_level)
