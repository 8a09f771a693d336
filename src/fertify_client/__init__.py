"""Endpoint-resolving client for the fertilizer and plant disease services."""

from .config import ClientSettings
from .dispatcher import DispatchResult, RequestDispatcher, RequestError
from .failover import FailoverClient
from .models import FertilizerRequest
from .outcomes import ErrorKind, InvalidResponse, ServerFailure, ServiceOutcome, Success, TransportFailure
from .prober import ConnectivityProber, ProbeResult, ProbeStatus
from .registry import DISEASE, FERTILIZER, EndpointConfig, EndpointRegistry

__all__ = [
    "ClientSettings",
    "ConnectivityProber",
    "DISEASE",
    "DispatchResult",
    "EndpointConfig",
    "EndpointRegistry",
    "ErrorKind",
    "FERTILIZER",
    "FailoverClient",
    "FertilizerRequest",
    "InvalidResponse",
    "ProbeResult",
    "ProbeStatus",
    "RequestDispatcher",
    "RequestError",
    "ServerFailure",
    "ServiceOutcome",
    "Success",
    "TransportFailure",
]
