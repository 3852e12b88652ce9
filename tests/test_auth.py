import pytest

from pulsarkit.auth import (
    DisabledAuth,
    TLSAuth,
    TokenAuth,
    new_authentication_tls,
    new_authentication_tls_with_params,
    new_authentication_token,
    new_authentication_token_from_file,
    new_authentication_token_from_supplier,
    new_authentication_token_with_params,
    new_provider,
)


def test_disabled_provider_has_no_data():
    provider = new_provider("", "")
    assert isinstance(provider, DisabledAuth)
    assert provider.name() == ""
    assert provider.get_data() is None
    assert provider.get_tls_certificate() is None


@pytest.mark.parametrize(
    "name", ["tls", "org.apache.pulsar.client.impl.auth.AuthenticationTls"]
)
def test_new_provider_tls(name):
    provider = new_provider(name, "")
    assert isinstance(provider, TLSAuth)
    assert provider.name() == "tls"


@pytest.mark.parametrize(
    "name", ["token", "org.apache.pulsar.client.impl.auth.AuthenticationToken"]
)
def test_new_provider_token_without_config_fails(name):
    with pytest.raises(ValueError, match="missing configuration for token auth"):
        new_provider(name, "")


def test_new_provider_unknown_name():
    with pytest.raises(ValueError, match="invalid auth provider 'bogus'"):
        new_provider("bogus", "")


def test_token_provider_returns_token_bytes():
    provider = new_authentication_token("token")
    provider.init()
    assert provider.name() == "token"
    assert provider.get_data() == b"token"
    assert provider.get_tls_certificate() is None


def test_empty_token_fails():
    provider = new_authentication_token("")
    with pytest.raises(ValueError, match="empty token credentials"):
        provider.init()


def test_token_from_file_is_trimmed(tmp_path):
    path = tmp_path / "token.txt"
    path.write_text("  token \n\n")
    provider = new_authentication_token_from_file(str(path))
    assert provider.get_data() == b"token"


def test_token_from_empty_file_fails(tmp_path):
    path = tmp_path / "token.txt"
    path.write_text(" \n")
    provider = new_authentication_token_from_file(str(path))
    with pytest.raises(ValueError, match="empty token credentials"):
        provider.get_data()


def test_token_from_missing_file_fails(tmp_path):
    provider = new_authentication_token_from_file(str(tmp_path / "missing"))
    with pytest.raises(OSError):
        provider.init()


def test_token_from_supplier_is_called_each_time():
    calls = []

    def supplier():
        calls.append(1)
        return "token"

    provider = new_authentication_token_from_supplier(supplier)
    assert isinstance(provider, TokenAuth)
    assert provider.get_data() == b"token"
    assert provider.get_data() == b"token"
    assert len(calls) == 2


def test_token_with_params_prefers_token(tmp_path):
    path = tmp_path / "t"
    path.write_text("secret")
    provider = new_authentication_token_with_params({"token": "token", "file": str(path)})
    assert provider.get_data() == b"token"


def test_token_with_params_uses_file(tmp_path):
    path = tmp_path / "t"
    path.write_text("secret\n")
    provider = new_authentication_token_with_params({"file": str(path)})
    assert provider.get_data() == b"secret"


def test_tls_with_params_reads_paths():
    provider = new_authentication_tls_with_params(
        {"tlsCertFile": "cert.pem", "tlsKeyFile": "key.pem"}
    )
    assert provider.certificate_path == "cert.pem"
    assert provider.private_key_path == "key.pem"
    assert provider.get_data() is None


def test_tls_missing_files_fail(tmp_path):
    provider = new_authentication_tls(str(tmp_path / "c.pem"), str(tmp_path / "k.pem"))
    with pytest.raises(OSError):
        provider.init()


def test_tls_invalid_files_fail(tmp_path):
    cert = tmp_path / "c.pem"
    key = tmp_path / "k.pem"
    cert.write_text("not a certificate")
    key.write_text("not a key")
    provider = new_authentication_tls(str(cert), str(key))
    with pytest.raises(OSError):
        provider.get_tls_certificate()