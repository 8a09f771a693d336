"""Build-time defaults and environment overrides for the API client.

Values are read once, when settings are created. The endpoint configuration
built from them is owned by an ``EndpointRegistry``; nothing here is mutated
at runtime.
"""

import logging
import os
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from .registry import DISEASE, FERTILIZER, EndpointConfig

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "http://172.20.10.4"
DEFAULT_FALLBACK_URLS = [
    "http://localhost",
    "http://10.0.2.2",  # Android emulator alias for the host machine
    "http://127.0.0.1",
]

DEFAULT_SERVICE_PORTS = {
    FERTILIZER: 5001,
    DISEASE: 5002,
}

DEFAULT_SERVICE_PATHS = {
    FERTILIZER: "/api/predict_fertilizer",
    DISEASE: "/api/predict_disease_base64",
}

DISEASE_UPLOAD_PATH = "/api/predict_disease"

PROBE_TIMEOUT = 10.0
STRUCTURED_TIMEOUT = 30.0
IMAGE_TIMEOUT = 60.0


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={value!r}, using {default}")
        return default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={value!r}, using {default}")
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    value = os.getenv(name)
    if value is None:
        return list(default)
    return [item.strip() for item in value.split(",") if item.strip()]


class ClientSettings(BaseModel):
    """Endpoint defaults and per-operation timeouts."""

    api_url: str = DEFAULT_API_URL
    service_ports: Dict[str, int] = Field(default_factory=lambda: dict(DEFAULT_SERVICE_PORTS))
    service_paths: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_SERVICE_PATHS))
    fallback_urls: List[str] = Field(default_factory=lambda: list(DEFAULT_FALLBACK_URLS))
    disease_upload_path: str = DISEASE_UPLOAD_PATH

    probe_timeout: float = PROBE_TIMEOUT
    structured_timeout: float = STRUCTURED_TIMEOUT
    image_timeout: float = IMAGE_TIMEOUT

    @classmethod
    def from_env(cls, api_url: Optional[str] = None) -> "ClientSettings":
        """
        Build settings from environment variables.

        Supported variables:
        - FERTIFY_API_URL: primary base address (default: http://172.20.10.4)
        - FERTIFY_FERTILIZER_PORT / FERTIFY_DISEASE_PORT: service ports
        - FERTIFY_FALLBACK_URLS: comma-separated fallback base addresses
        - FERTIFY_PROBE_TIMEOUT / FERTIFY_STRUCTURED_TIMEOUT / FERTIFY_IMAGE_TIMEOUT
        """
        return cls(
            api_url=api_url or os.getenv("FERTIFY_API_URL") or DEFAULT_API_URL,
            service_ports={
                FERTILIZER: _env_int("FERTIFY_FERTILIZER_PORT", DEFAULT_SERVICE_PORTS[FERTILIZER]),
                DISEASE: _env_int("FERTIFY_DISEASE_PORT", DEFAULT_SERVICE_PORTS[DISEASE]),
            },
            fallback_urls=_env_list("FERTIFY_FALLBACK_URLS", DEFAULT_FALLBACK_URLS),
            probe_timeout=_env_float("FERTIFY_PROBE_TIMEOUT", PROBE_TIMEOUT),
            structured_timeout=_env_float("FERTIFY_STRUCTURED_TIMEOUT", STRUCTURED_TIMEOUT),
            image_timeout=_env_float("FERTIFY_IMAGE_TIMEOUT", IMAGE_TIMEOUT),
        )

    def to_endpoint_config(self) -> EndpointConfig:
        """Create a fresh, independently mutable endpoint configuration."""
        return EndpointConfig(
            primary_base=self.api_url,
            service_ports=dict(self.service_ports),
            service_paths=dict(self.service_paths),
            fallback_bases=list(self.fallback_urls),
        )
