"""Result values returned by the failover client.

Every request ends in exactly one of these. Callers branch on the type (or on
``kind`` for failures) instead of inspecting httpx exceptions.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Union


class ErrorKind(str, Enum):
    NETWORK = "network"
    SERVER = "server"
    INVALID_RESPONSE = "invalid_response"


@dataclass(frozen=True)
class Success:
    payload: dict
    url: str
    status_code: int = 200


@dataclass(frozen=True)
class TransportFailure:
    """No candidate address returned an HTTP response."""

    reason: str
    url: str
    error: Optional[BaseException] = None

    kind = ErrorKind.NETWORK


@dataclass(frozen=True)
class ServerFailure:
    """An address answered with a non-success HTTP status."""

    status_code: int
    message: str
    url: str
    body: Any = None

    kind = ErrorKind.SERVER


@dataclass(frozen=True)
class InvalidResponse:
    """A success status whose body lacks the expected result shape."""

    status_code: int
    reason: str
    url: str
    body: Any = None

    kind = ErrorKind.INVALID_RESPONSE


ServiceOutcome = Union[Success, TransportFailure, ServerFailure, InvalidResponse]
Failure = Union[TransportFailure, ServerFailure, InvalidResponse]
