"""Authentication providers that supply credentials to the broker."""

from __future__ import annotations

import ssl
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping

TLS_PROVIDER_NAMES = ("tls", "org.apache.pulsar.client.impl.auth.AuthenticationTls")
TOKEN_PROVIDER_NAMES = ("token", "org.apache.pulsar.client.impl.auth.AuthenticationToken")


@dataclass(frozen=True)
class TLSCertificate:
    """A client certificate chain and its private key, both checked to load."""

    certificate_path: str
    private_key_path: str


class AuthProvider(ABC):
    """Supplies the authentication data identifying this client."""

    _closed: bool = False

    def init(self) -> None:
        """Prepare the provider, raising early if its credentials are unusable."""

    @abstractmethod
    def name(self) -> str:
        """Identifier of this authentication method."""

    def get_tls_certificate(self) -> TLSCertificate | None:
        """Client certificate to present, or None if there is none."""
        return None

    def get_data(self) -> bytes | None:
        """Authentication data sent to the broker, or None if there is none."""
        return None

    @property
    def closed(self) -> bool:
        """Whether close() has been called."""
        return self._closed

    def close(self) -> None:
        """Release anything the provider holds and mark it closed."""
        self._closed = True

    def __enter__(self) -> AuthProvider:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class DisabledAuth(AuthProvider):
    """Provider used when authentication is switched off."""

    def name(self) -> str:
        return ""


class TLSAuth(AuthProvider):
    """Authenticates with a client TLS certificate."""

    def __init__(self, certificate_path: str, private_key_path: str) -> None:
        self.certificate_path = certificate_path
        self.private_key_path = private_key_path

    def init(self) -> None:
        # Load the certificates now to report bad paths at startup.
        self.get_tls_certificate()

    def name(self) -> str:
        return "tls"

    def get_tls_certificate(self) -> TLSCertificate:
        """Load the key pair; raises OSError or ssl.SSLError if it cannot be used."""
        context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        context.load_cert_chain(self.certificate_path, self.private_key_path)
        return TLSCertificate(self.certificate_path, self.private_key_path)


class TokenAuth(AuthProvider):
    """Authenticates with a token obtained from a supplier on every use."""

    def __init__(self, token_supplier: Callable[[], str]) -> None:
        self._token_supplier = token_supplier

    def init(self) -> None:
        # Fetch the token now to report missing credentials at startup.
        self.get_data()

    def name(self) -> str:
        return "token"

    def get_data(self) -> bytes:
        return self._token_supplier().encode("utf-8")


def new_provider(name: str, params: str) -> AuthProvider:
    """Create the provider registered under ``name``.

    The parameter string is not interpreted: providers are built from an
    empty parameter map. Raises ValueError for an unknown name.
    """
    settings: dict[str, str] = {}
    if name == "":
        return DisabledAuth()
    if name in TLS_PROVIDER_NAMES:
        return new_authentication_tls_with_params(settings)
    if name in TOKEN_PROVIDER_NAMES:
        return new_authentication_token_with_params(settings)
    raise ValueError(f"invalid auth provider '{name}'")


def new_authentication_tls(certificate_path: str, private_key_path: str) -> TLSAuth:
    return TLSAuth(certificate_path, private_key_path)


def new_authentication_tls_with_params(params: Mapping[str, str]) -> TLSAuth:
    """Build a TLS provider from the ``tlsCertFile`` and ``tlsKeyFile`` entries."""
    return TLSAuth(params.get("tlsCertFile", ""), params.get("tlsKeyFile", ""))


def new_authentication_token(token: str) -> TokenAuth:
    """Provider that always uses ``token``; an empty token fails on use."""

    def supplier() -> str:
        if token == "":
            raise ValueError("empty token credentials")
        return token

    return TokenAuth(supplier)


def new_authentication_token_from_file(token_file_path: str) -> TokenAuth:
    """Provider that reads the token from a file each time it is needed."""

    def supplier() -> str:
        token = Path(token_file_path).read_text().strip(" \n")
        if token == "":
            raise ValueError("empty token credentials")
        return token

    return TokenAuth(supplier)


def new_authentication_token_from_supplier(
    token_supplier: Callable[[], str],
) -> TokenAuth:
    return TokenAuth(token_supplier)


def new_authentication_token_with_params(params: Mapping[str, str]) -> TokenAuth:
    """Build a token provider from a ``token`` or ``file`` entry."""
    if params.get("token", ""):
        return new_authentication_token(params["token"])
    if params.get("file", ""):
        return new_authentication_token_from_file(params["file"])
    raise ValueError("missing configuration for token auth")