"""Endpoint registry: which base address each service call goes to.

The registry owns the mutable endpoint configuration for one client session.
It performs no network I/O; malformed addresses are only discovered when a
request is made against them.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from urllib.parse import urlsplit

logger = logging.getLogger(__name__)

FERTILIZER = "fertilizer"
DISEASE = "disease"
SERVICES = (FERTILIZER, DISEASE)


class UnknownServiceError(KeyError):
    """Raised when a service name has no configured path."""


def normalize_address(address: str) -> str:
    """Strip whitespace and trailing slashes, and default the scheme to http."""
    address = address.strip().rstrip("/")
    if address and "://" not in address:
        address = f"http://{address}"
    return address


def _has_explicit_port(address: str) -> bool:
    try:
        return urlsplit(address).port is not None
    except ValueError:
        # Unparseable port; leave the address alone and let the request fail.
        return True


@dataclass
class EndpointConfig:
    """Base addresses plus per-service port and path suffixes."""

    primary_base: str
    service_ports: Dict[str, int] = field(default_factory=dict)
    service_paths: Dict[str, str] = field(default_factory=dict)
    fallback_bases: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.primary_base = normalize_address(self.primary_base or "")
        if not self.primary_base:
            raise ValueError("primary_base must not be empty")

        fallbacks = []
        for address in self.fallback_bases:
            address = normalize_address(address)
            if address and address != self.primary_base and address not in fallbacks:
                fallbacks.append(address)
        self.fallback_bases = fallbacks


class EndpointRegistry:
    """Resolves service URLs and applies address changes.

    Mutation is a plain last-writer-wins overwrite. Both mutating operations
    are idempotent, so concurrent callers promoting the same address is
    harmless.
    """

    def __init__(self, config: EndpointConfig):
        self.config = config

    @property
    def primary_base(self) -> str:
        return self.config.primary_base

    @property
    def fallback_bases(self) -> List[str]:
        return list(self.config.fallback_bases)

    def candidates(self) -> List[str]:
        """Primary address followed by the fallbacks, in try order."""
        return [self.config.primary_base] + list(self.config.fallback_bases)

    def resolve_url(
        self,
        service: str,
        override_base: Optional[str] = None,
        path: Optional[str] = None,
    ) -> str:
        """
        Build ``base[:port]path`` for a service.

        Args:
            service: Service name ("fertilizer" or "disease")
            override_base: Address to use instead of the primary, for this call only
            path: Path to use instead of the configured service path

        Returns:
            Absolute URL string
        """
        if path is None:
            try:
                path = self.config.service_paths[service]
            except KeyError:
                raise UnknownServiceError(service) from None

        base = normalize_address(override_base) if override_base else self.config.primary_base
        port = self.config.service_ports.get(service)
        if port and not _has_explicit_port(base):
            base = f"{base}:{port}"
        return f"{base}{path}"

    def service_root(self, service: str, base: Optional[str] = None) -> str:
        """URL of the service root, used for reachability checks."""
        if service not in self.config.service_paths:
            raise UnknownServiceError(service)
        return self.resolve_url(service, override_base=base, path="/")

    def set_primary_base(self, address: str) -> None:
        """Replace the primary address (explicit user configuration)."""
        address = normalize_address(address or "")
        if not address:
            logger.warning("Ignoring empty API base address")
            return

        self.config.primary_base = address
        if address in self.config.fallback_bases:
            self.config.fallback_bases.remove(address)
        logger.info(f"API base address set to: {address}")

    def promote(self, address: str) -> None:
        """
        Make a fallback that just succeeded the new primary.

        The replaced primary moves to the end of the fallback list so it is
        still tried later in the session. Promoting the current primary is a
        no-op.

        The primary is shared by every service. An address with an explicit
        port (``http://localhost:5002``) pins that port for all of them, so
        explicit-port fallbacks only suit single-service setups.
        """
        address = normalize_address(address)
        previous = self.config.primary_base
        if not address or address == previous:
            return

        fallbacks = [a for a in self.config.fallback_bases if a != address]
        fallbacks.append(previous)
        self.config.primary_base = address
        self.config.fallback_bases = fallbacks
        logger.info(f"Promoted fallback address {address} to primary (was {previous})")
