from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPAuthorizationCredentials

from .security import DEFAULT_COOKIE_NAME, bearer_scheme, extract_token_from_request, find_token
from ...application.use_cases.decode_token import DecodeTokenUseCase
from ...domain.entities import ClaimValue, Payload
from ...domain.exceptions import InvalidTokenError, JWTDecodeError, TokenExpiredError


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@dataclass(slots=True)
class FastAPIClaims:
    """
    FastAPI integration for pkg_claims.

    Exposes route dependencies that turn the request's token into a
    decoded Payload. Claim policy (roles, tenants, ...) stays with the app.
    """

    token_decoder: DecodeTokenUseCase
    cookie_name: Optional[str] = DEFAULT_COOKIE_NAME

    # ------------------------------------------------------------------ #
    # Base dependencies
    # ------------------------------------------------------------------ #

    async def get_payload(
            self,
            request: Request,
            credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    ) -> Payload:
        """Dependency: require a decodable token."""
        token = extract_token_from_request(request, credentials, self.cookie_name)
        try:
            # decoding may fetch JWKS over blocking HTTP
            return await run_in_threadpool(self.token_decoder.execute, token)
        except TokenExpiredError as exc:
            raise _unauthorized("Token expired") from exc
        except (InvalidTokenError, JWTDecodeError) as exc:
            raise _unauthorized(str(exc)) from exc

    async def get_optional_payload(
            self,
            request: Request,
            credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    ) -> Payload | None:
        """Dependency: Payload when a valid token is sent, None otherwise."""
        token = find_token(request, credentials, self.cookie_name)
        if token is None:
            return None

        try:
            return await run_in_threadpool(self.token_decoder.execute, token)
        except (InvalidTokenError, JWTDecodeError):
            # bad token -> treat as anonymous
            return None

    # ------------------------------------------------------------------ #
    # Dependency factories
    # ------------------------------------------------------------------ #

    def claim(self, name: str) -> Callable:
        """
        Dependency factory: a single claim of the current payload.

        Resolves to a ClaimValue (is_null() when the token lacks it).
        """

        async def dependency(
                payload: Payload = Depends(self.get_payload),
        ) -> ClaimValue:
            return payload.get_claim(name)

        return dependency
