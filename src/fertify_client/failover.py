"""Ordered failover across candidate base addresses.

Only transport-level failures (nothing answered) move on to the next
candidate. Once any address returns an HTTP response, that response decides
the outcome: a server error or a malformed body from a reachable service is
reported as-is rather than retried elsewhere.
"""

import logging
from typing import Any, Callable, Optional, Sequence

import httpx

from .outcomes import InvalidResponse, ServerFailure, ServiceOutcome, Success, TransportFailure
from .registry import EndpointRegistry

logger = logging.getLogger(__name__)

RequestBuilder = Callable[[str], httpx.Response]

# Exceptions raised before any HTTP status exists
TRANSPORT_ERRORS = (httpx.TransportError, httpx.InvalidURL)


def describe_transport_error(error: BaseException) -> str:
    if isinstance(error, httpx.TimeoutException):
        return f"Request timed out: {error}" if str(error) else "Request timed out"
    if isinstance(error, httpx.ConnectError):
        return f"Network unreachable: {error}" if str(error) else "Network unreachable"
    return str(error) or type(error).__name__


def _decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


def server_error_message(response: httpx.Response, body: Any) -> str:
    """Pick the most specific error text the server gave us."""
    if isinstance(body, dict):
        for key in ("error", "detail", "message"):
            if body.get(key):
                return str(body[key])
    if isinstance(body, str) and body.strip():
        return body.strip()
    return response.reason_phrase or f"HTTP {response.status_code}"


def classify_response(
    response: httpx.Response,
    url: str,
    required_fields: Sequence[str] = (),
) -> ServiceOutcome:
    """Turn an HTTP response into Success, ServerFailure or InvalidResponse."""
    body = _decode_body(response)

    if not response.is_success:
        message = server_error_message(response, body)
        logger.error(f"Server error from {url}: {response.status_code} - {message}")
        return ServerFailure(status_code=response.status_code, message=message, url=url, body=body)

    if body is None:
        reason = "Empty response body"
    elif not isinstance(body, dict):
        reason = "Response body is not a JSON object"
    else:
        missing = [name for name in required_fields if body.get(name) in (None, "")]
        if not missing:
            return Success(payload=body, url=url, status_code=response.status_code)
        reason = f"Response is missing expected field(s): {', '.join(missing)}"

    logger.error(f"Invalid response from {url}: {reason}")
    return InvalidResponse(status_code=response.status_code, reason=reason, url=url, body=body)


class FailoverClient:
    """Sends a request to the primary address, then to fallbacks in order."""

    def __init__(self, registry: EndpointRegistry):
        self.registry = registry

    def _attempt(self, request_builder: RequestBuilder, url: str) -> httpx.Response:
        try:
            return request_builder(url)
        except httpx.HTTPStatusError as e:
            # Builders that call raise_for_status() still produced a response
            return e.response

    def send(
        self,
        service: str,
        request_builder: RequestBuilder,
        required_fields: Sequence[str] = (),
        path: Optional[str] = None,
    ) -> ServiceOutcome:
        """
        Run a request with transport-level failover.

        Args:
            service: Service name used to resolve port and path
            request_builder: Performs the HTTP call for a resolved URL
            required_fields: Keys a successful JSON body must contain
            path: Optional path overriding the configured service path

        Returns:
            The outcome of the first attempt that got an HTTP response, or a
            TransportFailure carrying the primary attempt's error
        """
        fallbacks = self.registry.fallback_bases

        primary_url = self.registry.resolve_url(service, path=path)
        logger.info(f"Sending {service} request to: {primary_url}")
        try:
            response = self._attempt(request_builder, primary_url)
        except TRANSPORT_ERRORS as e:
            primary_error = e
            logger.warning(f"{service} request to {primary_url} failed: {describe_transport_error(e)}")
        else:
            return classify_response(response, primary_url, required_fields)

        for candidate in fallbacks:
            url = self.registry.resolve_url(service, override_base=candidate, path=path)
            logger.info(f"Trying fallback address for {service}: {url}")
            try:
                response = self._attempt(request_builder, url)
            except TRANSPORT_ERRORS as e:
                logger.warning(f"Fallback {url} failed: {describe_transport_error(e)}")
                continue

            # First answering fallback decides the outcome; only a success is promoted
            outcome = classify_response(response, url, required_fields)
            if isinstance(outcome, Success):
                self.registry.promote(candidate)
            return outcome

        logger.error(f"All {len(fallbacks) + 1} address(es) for {service} are unreachable")
        return TransportFailure(
            reason=describe_transport_error(primary_error),
            url=primary_url,
            error=primary_error,
        )
