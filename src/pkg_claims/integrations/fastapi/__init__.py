from __future__ import annotations

from typing import Optional

from .deps import FastAPIClaims
from .security import DEFAULT_COOKIE_NAME, bearer_scheme, extract_token_from_request, find_token
from ..common.factory import create_token_decoder
from ...settings import ClaimsSettings


def create_fastapi_claims(
    settings: Optional[ClaimsSettings] = None,
    *,
    cookie_name: Optional[str] = DEFAULT_COOKIE_NAME,
) -> FastAPIClaims:
    """
    High-level helper for FastAPI apps:

    - Creates a DecodeTokenUseCase from settings (env when omitted)
    - Wraps it in FastAPIClaims, exposing dependencies like:

        fastapi_claims.get_payload
        fastapi_claims.get_optional_payload
        fastapi_claims.claim("roles")
    """
    return FastAPIClaims(
        token_decoder=create_token_decoder(settings),
        cookie_name=cookie_name,
    )


__all__ = [
    "FastAPIClaims",
    "bearer_scheme",
    "create_fastapi_claims",
    "extract_token_from_request",
    "find_token",
]
