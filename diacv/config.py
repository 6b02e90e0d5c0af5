"""
DIAC-V Configuration
====================
Settings read from the environment (and a local .env file).

Calculations never read these values directly: the API layer pulls what it
needs from a Settings instance and passes it down as arguments.
"""

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> List[str]:
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


@dataclass
class Settings:
    """Runtime configuration for the calculation service."""
    app_name: str = "DIAC-V Pump Engineering"
    app_version: str = "1.0.0"

    # Logging
    log_level: str = field(default_factory=lambda: os.getenv("DIACV_LOG_LEVEL", "INFO"))
    log_to_file: bool = field(default_factory=lambda: _env_bool("DIACV_LOG_TO_FILE"))
    log_dir: Optional[str] = field(default_factory=lambda: os.getenv("DIACV_LOG_DIR") or None)

    # HTTP
    host: str = field(default_factory=lambda: os.getenv("DIACV_HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("DIACV_PORT", "8000")))
    cors_origins: List[str] = field(
        default_factory=lambda: _env_list(
            "DIACV_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
        )
    )

    # Calculation defaults
    default_fluid: str = field(default_factory=lambda: os.getenv("DIACV_DEFAULT_FLUID", "Water"))
    reference_temp_c: float = field(
        default_factory=lambda: float(os.getenv("DIACV_REFERENCE_TEMP_C", "20"))
    )
    intersection_samples: int = field(
        default_factory=lambda: int(os.getenv("DIACV_INTERSECTION_SAMPLES", "500"))
    )
    materials_file: Optional[str] = field(
        default_factory=lambda: os.getenv("DIACV_MATERIALS_FILE") or None
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process settings (built once)."""
    return Settings()
