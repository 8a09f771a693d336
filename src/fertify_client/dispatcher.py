"""Typed entry points used by the UI layer.

Each operation picks its timeout, hands an HTTP call to the failover client
and maps the outcome into a ``DispatchResult`` the caller can render
directly.
"""

import logging
import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import httpx

from .config import ClientSettings
from .failover import FailoverClient
from .models import DiseaseImageRequest, FertilizerRequest
from .outcomes import ErrorKind, InvalidResponse, ServerFailure, ServiceOutcome, Success
from .prober import ConnectivityProber, ProbeResult
from .registry import DISEASE, FERTILIZER, SERVICES, EndpointRegistry

logger = logging.getLogger(__name__)

FERTILIZER_RESULT_FIELD = "fertilizer"
DISEASE_RESULT_FIELD = "prediction"

SERVICE_LABELS = {
    FERTILIZER: "fertilizer",
    DISEASE: "disease detection",
}


@dataclass
class RequestError:
    """Everything the UI needs to show a specific error message."""

    kind: ErrorKind
    message: str
    url: str
    status_code: Optional[int] = None
    detail: Optional[str] = None


@dataclass
class DispatchResult:
    ok: bool
    data: Optional[Dict[str, Any]] = None
    error: Optional[RequestError] = None


def to_dispatch_result(service: str, outcome: ServiceOutcome) -> DispatchResult:
    """Unwrap a success payload or build a user-facing error descriptor."""
    if isinstance(outcome, Success):
        return DispatchResult(ok=True, data=outcome.payload)

    label = SERVICE_LABELS.get(service, service)
    if isinstance(outcome, ServerFailure):
        error = RequestError(
            kind=outcome.kind,
            message=f"Server error: {outcome.status_code} - {outcome.message or 'Unknown error'}",
            url=outcome.url,
            status_code=outcome.status_code,
            detail=outcome.message,
        )
    elif isinstance(outcome, InvalidResponse):
        error = RequestError(
            kind=outcome.kind,
            message="Received invalid response from server. Please try again.",
            url=outcome.url,
            status_code=outcome.status_code,
            detail=outcome.reason,
        )
    else:
        error = RequestError(
            kind=outcome.kind,
            message=(
                f"Cannot connect to {label} service. Please check your network "
                f"connection and ensure the server is running."
            ),
            url=outcome.url,
            detail=outcome.reason,
        )
    return DispatchResult(ok=False, error=error)


class RequestDispatcher:
    """Client facade for the fertilizer and disease services.

    Failover and promotion apply the same way to every request kind.
    Configuration and environment defaults come from ``ClientSettings``
    (see ``ClientSettings.from_env``).
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        registry: Optional[EndpointRegistry] = None,
        http_client: Optional[httpx.Client] = None,
    ):
        """
        Initialize dispatcher.

        Args:
            settings: Timeouts and endpoint defaults (or read from the environment)
            registry: Endpoint registry to use (or built from settings)
            http_client: HTTP client to reuse; one is created and owned if omitted
        """
        self.settings = settings or ClientSettings.from_env()
        self.registry = registry or EndpointRegistry(self.settings.to_endpoint_config())

        self._owns_client = http_client is None
        self.client = http_client or httpx.Client(headers={"Accept": "application/json"})

        self.failover = FailoverClient(self.registry)
        self.prober = ConnectivityProber(self.registry, self.client, timeout=self.settings.probe_timeout)

        logger.info(
            f"RequestDispatcher initialized: primary={self.registry.primary_base}, "
            f"fallbacks={self.registry.fallback_bases}"
        )

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    def set_override_base(self, address: str) -> None:
        """Use a user-entered address as the primary for every service."""
        self.registry.set_primary_base(address)

    def check_all_services(self) -> Dict[str, ProbeResult]:
        """Probe every service at the current primary address, one at a time."""
        return {service: self.prober.probe(None, service) for service in SERVICES}

    def submit_structured_request(
        self,
        fields: Union[FertilizerRequest, Mapping[str, Any]],
    ) -> DispatchResult:
        """
        Ask the fertilizer service for a recommendation.

        Args:
            fields: Validated measurements, as a model or a mapping of wire keys.
                Mappings are sent unchanged; checking them is the caller's job.

        Returns:
            DispatchResult with the recommendation payload or an error
        """
        if isinstance(fields, FertilizerRequest):
            payload = fields.to_payload()
        else:
            payload = dict(fields)
        timeout = self.settings.structured_timeout

        def post(url: str) -> httpx.Response:
            logger.debug(f"Fertilizer request data: {payload}")
            return self.client.post(url, json=payload, timeout=timeout)

        outcome = self.failover.send(FERTILIZER, post, required_fields=(FERTILIZER_RESULT_FIELD,))
        return to_dispatch_result(FERTILIZER, outcome)

    def submit_image_request(self, base64_payload: str) -> DispatchResult:
        """
        Ask the disease service to diagnose a base64-encoded leaf photo.

        Args:
            base64_payload: Image bytes as base64 text (no data: URI prefix)

        Returns:
            DispatchResult with the prediction payload or an error
        """
        payload = DiseaseImageRequest(image_base64=base64_payload).model_dump()
        timeout = self.settings.image_timeout

        def post(url: str) -> httpx.Response:
            return self.client.post(url, json=payload, timeout=timeout)

        outcome = self.failover.send(DISEASE, post, required_fields=(DISEASE_RESULT_FIELD,))
        return to_dispatch_result(DISEASE, outcome)

    def submit_image_file(self, image_path: Path) -> DispatchResult:
        """
        Upload an image file as multipart form data.

        This avoids base64 overhead for large photos. The file is read once
        and the same bytes are reused for every candidate address.
        """
        image_path = Path(image_path)
        content = image_path.read_bytes()
        content_type = mimetypes.guess_type(image_path.name)[0] or "image/jpeg"
        timeout = self.settings.image_timeout

        def post(url: str) -> httpx.Response:
            files = {"image": (image_path.name, content, content_type)}
            return self.client.post(url, files=files, timeout=timeout)

        outcome = self.failover.send(
            DISEASE,
            post,
            required_fields=(DISEASE_RESULT_FIELD,),
            path=self.settings.disease_upload_path,
        )
        return to_dispatch_result(DISEASE, outcome)
