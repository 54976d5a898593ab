# tests/test_claims_source.py
import json
import time

import jwt
import pytest
import requests
from cryptography.hazmat.primitives.asymmetric import rsa

from pkg_claims.adapters.pyjwt.claims_source import PyJWTClaimsSource
from pkg_claims.domain.exceptions import InvalidTokenError, TokenExpiredError

SECRET = "a-long-enough-shared-secret-for-hs256-tests"
OTHER_SECRET = "another-long-shared-secret-nobody-should-trust"


def _claims(**overrides):
    now = int(time.time())
    claims = {"iss": "auth0", "sub": "emails", "aud": "users", "iat": now, "exp": now + 3600}
    claims.update(overrides)
    return claims


class FakeResponse:
    def __init__(self, body, status_code=200):
        self._body = body
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self._body


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = 0

    def get(self, url, timeout=None):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture(scope="module")
def rsa_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


@pytest.fixture
def jwks(rsa_key):
    jwk = json.loads(jwt.algorithms.RSAAlgorithm.to_jwk(rsa_key.public_key()))
    jwk["kid"] = "k1"
    return {"keys": [jwk]}


# --- static key ------------------------------------------------------------


def test_load_with_secret():
    claims = _claims(roles=["admin"])
    token = jwt.encode(claims, SECRET, algorithm="HS256")

    source = PyJWTClaimsSource(key=SECRET, algorithms=["HS256"])
    assert source.load(token) == claims


def test_load_rejects_bad_signature():
    token = jwt.encode(_claims(), OTHER_SECRET, algorithm="HS256")
    source = PyJWTClaimsSource(key=SECRET, algorithms=["HS256"])

    with pytest.raises(InvalidTokenError, match="Invalid token"):
        source.load(token)


def test_load_rejects_expired_token():
    token = jwt.encode(_claims(exp=int(time.time()) - 600), SECRET, algorithm="HS256")
    source = PyJWTClaimsSource(key=SECRET, algorithms=["HS256"])

    with pytest.raises(TokenExpiredError):
        source.load(token)


def test_load_checks_issuer_and_audience():
    token = jwt.encode(_claims(), SECRET, algorithm="HS256")

    ok = PyJWTClaimsSource(key=SECRET, algorithms=["HS256"], issuer="auth0", audience="users")
    assert ok.load(token)["aud"] == "users"

    wrong_aud = PyJWTClaimsSource(key=SECRET, algorithms=["HS256"], audience="admins")
    with pytest.raises(InvalidTokenError):
        wrong_aud.load(token)

    wrong_iss = PyJWTClaimsSource(key=SECRET, algorithms=["HS256"], issuer="someone-else")
    with pytest.raises(InvalidTokenError):
        wrong_iss.load(token)


def test_load_malformed_token():
    source = PyJWTClaimsSource(key=SECRET, algorithms=["HS256"])

    with pytest.raises(InvalidTokenError):
        source.load("not-a-token")


def test_load_unverified():
    claims = _claims(exp=int(time.time()) - 600, aud=["a", "b"])
    token = jwt.encode(claims, OTHER_SECRET, algorithm="HS256")

    source = PyJWTClaimsSource(verify_signature=False, algorithms=["HS256"])
    assert source.load(token) == claims


def test_key_is_required_when_verifying():
    with pytest.raises(ValueError):
        PyJWTClaimsSource()


# --- JWKS ------------------------------------------------------------------


def test_load_with_jwks(rsa_key, jwks):
    claims = _claims()
    token = jwt.encode(claims, rsa_key, algorithm="RS256", headers={"kid": "k1"})
    session = FakeSession(FakeResponse(jwks))

    source = PyJWTClaimsSource(jwks_uri="https://issuer.example/jwks", session=session)
    assert source.load(token) == claims
    assert source.load(token) == claims

    # keys are cached between calls
    assert session.calls == 1


def test_jwks_cache_expires(rsa_key, jwks):
    token = jwt.encode(_claims(), rsa_key, algorithm="RS256", headers={"kid": "k1"})
    session = FakeSession(FakeResponse(jwks))

    source = PyJWTClaimsSource(jwks_uri="https://issuer.example/jwks", session=session, cache_ttl_seconds=0)
    source.load(token)
    source.load(token)

    assert session.calls == 2


def test_load_with_unknown_kid(rsa_key, jwks):
    token = jwt.encode(_claims(), rsa_key, algorithm="RS256", headers={"kid": "other"})
    source = PyJWTClaimsSource(jwks_uri="https://issuer.example/jwks", session=FakeSession(FakeResponse(jwks)))

    with pytest.raises(InvalidTokenError, match="No matching key found in JWKS"):
        source.load(token)


@pytest.mark.parametrize(
    "session",
    [
        FakeSession(error=requests.ConnectionError("connection refused")),
        FakeSession(FakeResponse({}, status_code=503)),
    ],
)
def test_jwks_fetch_failure(rsa_key, session):
    token = jwt.encode(_claims(), rsa_key, algorithm="RS256", headers={"kid": "k1"})
    source = PyJWTClaimsSource(jwks_uri="https://issuer.example/jwks", session=session)

    with pytest.raises(InvalidTokenError, match="Unable to fetch JWKS"):
        source.load(token)
