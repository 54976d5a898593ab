import json
import logging
import time
from typing import Any, Dict, List, Mapping, Optional, Sequence

import jwt
from jwt.exceptions import (
    DecodeError,
    ExpiredSignatureError,
    InvalidKeyError,
    InvalidSignatureError,
    InvalidTokenError as JWTInvalidTokenError,
    PyJWKError,
)
from requests import RequestException, Session

from ...domain.exceptions import InvalidTokenError, TokenExpiredError
from ...domain.ports import ClaimsSource

logger = logging.getLogger(__name__)


class PyJWTClaimsSource(ClaimsSource):
    """
    Adapter implementing ClaimsSource port using PyJWT.

    Infrastructure layer:
    - Knows about the compact JWT structure and signature verification.
    - Resolves keys either from a static secret/key or a JWKS endpoint.
    - With verify_signature=False, returns the claims unverified.

    Policy checks on the claims (exp, nbf, iss, aud) are done by PyJWT only
    when signature verification is on; the claims themselves are returned
    undecoded for PayloadDecoder.
    """

    def __init__(
        self,
        *,
        jwks_uri: Optional[str] = None,
        key: Any = None,
        issuer: Optional[str] = None,
        audience: Optional[str] = None,
        algorithms: Sequence[str] = ("RS256",),
        verify_signature: bool = True,
        leeway_seconds: int = 0,
        cache_ttl_seconds: int = 300,
        session: Optional[Session] = None,
    ) -> None:
        if verify_signature and jwks_uri is None and key is None:
            raise ValueError("Either jwks_uri or key is required when verify_signature is on")

        self._jwks_uri = jwks_uri
        self._key = key
        self._issuer = issuer
        self._audience = audience
        self._algorithms = list(algorithms)
        self._verify_signature = verify_signature
        self._leeway = leeway_seconds
        self._cache_ttl = cache_ttl_seconds

        self._session = session or Session()
        self._jwks_keys: Optional[List[Dict[str, Any]]] = None
        self._jwks_last_fetched: float = 0.0

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def load(self, token: str) -> Mapping[str, Any]:
        """
        Split, verify and parse a compact JWT.

        Returns:
            The claims tree (dict).

        Raises:
            TokenExpiredError
            InvalidTokenError
        """
        try:
            if not self._verify_signature:
                return jwt.decode(
                    token,
                    options={"verify_signature": False},
                    algorithms=self._algorithms,
                )

            return jwt.decode(
                token,
                self._resolve_key(token),
                algorithms=self._algorithms,
                issuer=self._issuer,
                audience=self._audience,
                leeway=self._leeway,
                options={"verify_aud": self._audience is not None},
            )

        except ExpiredSignatureError as exc:
            raise TokenExpiredError("Token has expired") from exc
        except (
            InvalidSignatureError,
            InvalidKeyError,
            DecodeError,
            PyJWKError,
            JWTInvalidTokenError,
        ) as exc:
            logger.debug("Rejected token: %s", exc)
            raise InvalidTokenError(f"Invalid token: {exc}") from exc

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _resolve_key(self, token: str) -> Any:
        if self._key is not None:
            return self._key

        headers = jwt.get_unverified_header(token)
        kid = headers.get("kid")

        jwks_keys = self._fetch_jwks_keys()
        key = next((k for k in jwks_keys if k.get("kid") == kid), None)

        if not key:
            raise InvalidTokenError("No matching key found in JWKS")

        return jwt.PyJWK.from_json(json.dumps(key)).key

    def _fetch_jwks_keys(self) -> List[Dict[str, Any]]:
        """
        Fetch JWKS keys with simple in-memory caching.
        """
        now = time.time()
        if self._jwks_keys is not None and (now - self._jwks_last_fetched) < self._cache_ttl:
            return self._jwks_keys

        try:
            response = self._session.get(self._jwks_uri, timeout=10)
            response.raise_for_status()
            body = response.json()
        except (RequestException, ValueError) as exc:
            raise InvalidTokenError(f"Unable to fetch JWKS from {self._jwks_uri}: {exc}") from exc

        self._jwks_keys = body.get("keys", [])
        self._jwks_last_fetched = now
        logger.debug("Fetched %d JWKS keys from %s", len(self._jwks_keys), self._jwks_uri)
        return self._jwks_keys
