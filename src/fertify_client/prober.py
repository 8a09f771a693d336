"""Reachability checks against a service root."""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import httpx

from .config import PROBE_TIMEOUT
from .registry import EndpointRegistry

logger = logging.getLogger(__name__)

SLOW_RESPONSE_MS = 1000.0


class ProbeStatus(str, Enum):
    REACHABLE = "reachable"
    UNREACHABLE = "unreachable"
    TIMEOUT = "timeout"


@dataclass
class ProbeResult:
    """Outcome of a single reachability check."""

    service: str
    url: str
    reachable: bool
    status: ProbeStatus
    http_status: Optional[int] = None
    latency_ms: Optional[float] = None
    latency_classification: Optional[str] = None  # "fast" or "slow"
    error_kind: Optional[str] = None  # "network" when nothing answered
    error: Optional[str] = None


def classify_latency(latency_ms: float) -> str:
    return "fast" if latency_ms < SLOW_RESPONSE_MS else "slow"


class ConnectivityProber:
    """Answers "is something listening" for a service at a given address.

    Any HTTP response counts as reachable, whatever its status. The prober
    never retries; failover policy lives in ``FailoverClient``.
    """

    def __init__(
        self,
        registry: EndpointRegistry,
        client: httpx.Client,
        timeout: float = PROBE_TIMEOUT,
    ):
        self.registry = registry
        self.client = client
        self.timeout = timeout

    def probe(self, address: Optional[str], service: str) -> ProbeResult:
        """
        Issue one GET against the service root.

        Args:
            address: Base address to check (None means the current primary)
            service: Service name, used for the port

        Returns:
            ProbeResult describing whether anything answered
        """
        url = self.registry.service_root(service, base=address)
        logger.info(f"Checking {service} connection at: {url}")

        start = time.perf_counter()
        try:
            response = self.client.get(
                url,
                timeout=self.timeout,
                headers={"Accept": "application/json"},
            )
        except httpx.TimeoutException as e:
            logger.error(f"Timed out connecting to {service} API at {url}: {e}")
            return ProbeResult(
                service=service,
                url=url,
                reachable=False,
                status=ProbeStatus.TIMEOUT,
                error_kind="network",
                error=str(e) or "timed out",
            )
        except (httpx.TransportError, httpx.InvalidURL) as e:
            logger.error(f"Error connecting to {service} API at {url}: {e}")
            return ProbeResult(
                service=service,
                url=url,
                reachable=False,
                status=ProbeStatus.UNREACHABLE,
                error_kind="network",
                error=str(e) or type(e).__name__,
            )

        latency_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{service} service response: {response.status_code} ({latency_ms:.1f}ms)")
        return ProbeResult(
            service=service,
            url=url,
            reachable=True,
            status=ProbeStatus.REACHABLE,
            http_status=response.status_code,
            latency_ms=latency_ms,
            latency_classification=classify_latency(latency_ms),
        )
