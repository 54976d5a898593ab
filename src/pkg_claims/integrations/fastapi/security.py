from __future__ import annotations

from typing import Optional

from fastapi import HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

# Plug into route dependencies to get the bearer scheme in OpenAPI
bearer_scheme = HTTPBearer(auto_error=False)

DEFAULT_COOKIE_NAME = "access_token"
_BEARER_PREFIX = "bearer "


def _bearer_from_header(header: Optional[str]) -> Optional[str]:
    if not header or not header.lower().startswith(_BEARER_PREFIX):
        return None
    return header[len(_BEARER_PREFIX):].strip() or None


def find_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = None,
    cookie_name: Optional[str] = DEFAULT_COOKIE_NAME,
) -> Optional[str]:
    """
    Look for a compact JWT, in order of preference:

      1. HTTPBearer credentials resolved by FastAPI
      2. the raw Authorization header
      3. a cookie (skipped when cookie_name is None)
    """
    if credentials is not None:
        token = (credentials.credentials or "").strip()
        if token:
            return token

    token = _bearer_from_header(request.headers.get("Authorization"))
    if token:
        return token

    if cookie_name:
        return request.cookies.get(cookie_name) or None
    return None


def extract_token_from_request(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = None,
    cookie_name: Optional[str] = DEFAULT_COOKIE_NAME,
) -> str:
    """Same as find_token, but raises HTTPException(401) when nothing is found."""
    token = find_token(request, credentials, cookie_name)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return token
