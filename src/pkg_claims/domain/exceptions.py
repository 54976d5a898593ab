from __future__ import annotations


class ClaimsError(Exception):
    """Base class for every error raised by pkg_claims."""
    pass


class JWTDecodeError(ClaimsError):
    """Raised when a claims tree cannot be decoded into a Payload."""
    pass


class ClaimCoercionError(ClaimsError):
    """Raised when a claim accessor is called on an incompatible value."""

    def __init__(self, message: str, *, claim: str | None = None, index: int | None = None) -> None:
        super().__init__(message)
        self.claim = claim
        self.index = index


class InvalidTokenError(ClaimsError):
    """Raised when token is malformed or its signature does not verify."""
    pass


class TokenExpiredError(InvalidTokenError):
    """Raised when token has expired."""
    pass
