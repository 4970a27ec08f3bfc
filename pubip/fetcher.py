from __future__ import annotations

import ipaddress
import logging
import threading

import requests

from pubip.backoff import Backoff
from pubip.errors import (
    EndpointUnreachableError,
    FetchCancelledError,
    FetchError,
    InvalidAddressError,
    UnexpectedStatusError,
)

TRANSPORT_ERRORS = (requests.ConnectionError, requests.Timeout)


def parse_ip(text: str) -> str:
    """Return the canonical form of an IPv4 or IPv6 literal.

    IPv4-mapped IPv6 addresses collapse to dotted IPv4. Raises ``ValueError``
    for anything that is not a bare address literal.
    """
    value = text.strip()
    if "%" in value:
        raise ValueError(f"Scoped address not accepted: {value}")
    address = ipaddress.ip_address(value)
    if isinstance(address, ipaddress.IPv6Address) and address.ipv4_mapped is not None:
        return str(address.ipv4_mapped)
    return str(address)


def fetch_ip(
    endpoint: str,
    max_tries: int,
    request_timeout_seconds: float,
    backoff: Backoff | None = None,
    session: requests.Session | None = None,
    logger: logging.Logger | None = None,
    cancel: threading.Event | None = None,
) -> str:
    logger = logger or logging.getLogger(__name__)
    session = session or requests.Session()
    backoff = backoff or Backoff()
    cancel = cancel or threading.Event()
    last_error: Exception | None = None

    for attempt in range(1, max_tries + 1):
        if cancel.is_set():
            raise FetchCancelledError(endpoint) from last_error
        try:
            response = session.get(endpoint, timeout=request_timeout_seconds)
        except TRANSPORT_ERRORS as exc:
            last_error = exc
            if attempt >= max_tries:
                break
            delay = backoff.duration()
            logger.warning(
                "Request to %s failed attempt %d/%d: %s. Retrying in %.2fs.",
                endpoint,
                attempt,
                max_tries,
                exc,
                delay,
            )
            if cancel.wait(delay):
                raise FetchCancelledError(endpoint) from exc
            continue
        except requests.RequestException as exc:
            raise FetchError(endpoint, str(exc)) from exc

        if response.status_code != 200:
            raise UnexpectedStatusError(endpoint, response.status_code, response.text)

        text = response.text.strip()
        try:
            return parse_ip(text)
        except ValueError as exc:
            raise InvalidAddressError(endpoint, text) from exc

    raise EndpointUnreachableError(endpoint, max_tries) from last_error
