# tests/test_settings.py
import pytest

from pkg_claims.settings import ClaimsSettings, settings_from_env


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in (
        "JWKS_URI",
        "SECRET",
        "ISSUER",
        "AUDIENCE",
        "ALGORITHMS",
        "VERIFY_SIGNATURE",
        "LEEWAY_SECONDS",
        "CACHE_TTL_SECONDS",
    ):
        monkeypatch.delenv(f"PKG_CLAIMS_{key}", raising=False)


def test_defaults():
    settings = ClaimsSettings()
    assert settings.algorithms == ["RS256"]
    assert settings.verify_signature is True
    assert settings.cache_ttl_seconds == 300


def test_from_env_with_jwks(monkeypatch):
    monkeypatch.setenv("PKG_CLAIMS_JWKS_URI", "https://issuer.example/jwks")
    monkeypatch.setenv("PKG_CLAIMS_ISSUER", "https://issuer.example")
    monkeypatch.setenv("PKG_CLAIMS_AUDIENCE", "users")
    monkeypatch.setenv("PKG_CLAIMS_ALGORITHMS", "RS256, ES256")
    monkeypatch.setenv("PKG_CLAIMS_LEEWAY_SECONDS", "30")

    settings = settings_from_env()
    assert settings.jwks_uri == "https://issuer.example/jwks"
    assert settings.issuer == "https://issuer.example"
    assert settings.audience == "users"
    assert settings.algorithms == ["RS256", "ES256"]
    assert settings.leeway_seconds == 30


def test_from_env_with_secret_defaults_to_hs256(monkeypatch):
    monkeypatch.setenv("PKG_CLAIMS_SECRET", "shared")

    settings = settings_from_env()
    assert settings.secret == "shared"
    assert settings.algorithms == ["HS256"]


def test_from_env_without_verification(monkeypatch):
    monkeypatch.setenv("PKG_CLAIMS_VERIFY_SIGNATURE", "false")

    settings = settings_from_env()
    assert settings.verify_signature is False
    assert settings.jwks_uri is None


def test_from_env_missing_key(monkeypatch):
    with pytest.raises(RuntimeError, match="Missing token settings"):
        settings_from_env()


def test_from_env_bad_integer(monkeypatch):
    monkeypatch.setenv("PKG_CLAIMS_SECRET", "shared")
    monkeypatch.setenv("PKG_CLAIMS_CACHE_TTL_SECONDS", "soon")

    with pytest.raises(RuntimeError, match="must be an integer"):
        settings_from_env()
