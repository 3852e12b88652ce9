"""Topic lookup: find the broker that serves a topic, following redirects."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import urlsplit

log = logging.getLogger(__name__)

LOOKUP_RESULT_MAX_REDIRECT = 20


class LookupType(enum.IntEnum):
    REDIRECT = 0
    CONNECT = 1
    FAILED = 2


@dataclass(frozen=True)
class LookupRequest:
    request_id: int
    topic: str
    authoritative: bool | None = False


@dataclass(frozen=True)
class LookupResponse:
    request_id: int
    response: LookupType
    authoritative: bool | None = None
    broker_service_url: str | None = None
    broker_service_url_tls: str | None = None
    proxy_through_service_url: bool = False
    error: str | None = None


@dataclass(frozen=True)
class LookupResult:
    """Broker address for a topic, and the address to connect to for it."""

    logical_addr: str
    physical_addr: str


class LookupFailedError(Exception):
    """The broker refused the lookup or redirected too many times."""


class LookupRPCClient(Protocol):
    def new_request_id(self) -> int: ...

    def request_to_any_broker(
        self, request_id: int, request: LookupRequest
    ) -> LookupResponse: ...

    def request(
        self,
        logical_addr: str,
        physical_addr: str,
        request_id: int,
        request: LookupRequest,
    ) -> LookupResponse: ...


def _parse_request_uri(raw: str) -> str:
    """Validate an absolute URI or absolute path; raise ValueError otherwise."""
    if not raw:
        raise ValueError("empty url")
    parts = urlsplit(raw)
    if not parts.scheme and not raw.startswith("/"):
        raise ValueError(f"invalid URI for request: {raw!r}")
    parts.port  # raises ValueError for a malformed port
    return raw


class LookupService:
    """Resolves topics to brokers through an RPC client."""

    def __init__(self, rpc_client: LookupRPCClient, service_url: str) -> None:
        self._rpc = rpc_client
        self._service_url = service_url

    def _broker_address(self, response: LookupResponse) -> tuple[str, str]:
        logical = _parse_request_uri(response.broker_service_url or "")
        physical = self._service_url if response.proxy_through_service_url else logical
        return logical, physical

    def lookup(self, topic: str) -> LookupResult:
        """Return where ``topic`` is served.

        Raises LookupFailedError if the broker reports a failure or the
        redirects exceed the limit, ValueError for an invalid broker URL.
        """
        request_id = self._rpc.new_request_id()
        response = self._rpc.request_to_any_broker(
            request_id, LookupRequest(request_id, topic, False)
        )

        for _ in range(LOOKUP_RESULT_MAX_REDIRECT):
            log.debug("Got topic lookup response for %s: %s", topic, response)
            if response.response == LookupType.REDIRECT:
                logical, physical = self._broker_address(response)
                log.debug(
                    "Follow redirect to broker for %s. %s / %s - Use proxy: %s",
                    topic,
                    response.broker_service_url,
                    response.broker_service_url_tls,
                    response.proxy_through_service_url,
                )
                request_id = self._rpc.new_request_id()
                response = self._rpc.request(
                    logical,
                    physical,
                    request_id,
                    LookupRequest(request_id, topic, response.authoritative),
                )
            elif response.response == LookupType.CONNECT:
                logical, physical = self._broker_address(response)
                log.debug("Successfully looked up topic %s on %s", topic, logical)
                return LookupResult(logical, physical)
            elif response.response == LookupType.FAILED:
                error = response.error or ""
                log.warning("Failed to lookup topic %s: %s", topic, error)
                raise LookupFailedError(f"failed to lookup topic: {error}")

        raise LookupFailedError(
            "exceeded max number of redirection during topic lookup"
        )