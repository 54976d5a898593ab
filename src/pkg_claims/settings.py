from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(slots=True)
class ClaimsSettings:
    """
    Token source settings.

    Host code decides how to construct this (env, config file, etc.).
    Either `jwks_uri` or `secret` must be set unless signature
    verification is turned off.
    """
    jwks_uri: Optional[str] = None
    secret: Optional[str] = None
    issuer: Optional[str] = None
    audience: Optional[str] = None
    algorithms: List[str] = field(default_factory=lambda: ["RS256"])
    verify_signature: bool = True
    leeway_seconds: int = 0
    cache_ttl_seconds: int = 300


def settings_from_env(prefix: str = "PKG_CLAIMS_") -> ClaimsSettings:
    def _get(key: str) -> Optional[str]:
        raw = os.getenv(prefix + key)
        return raw.strip() if raw and raw.strip() else None

    def _bool(key: str, default: bool = True) -> bool:
        raw = _get(key)
        if raw is None:
            return default
        return raw.lower() in {"1", "true", "yes", "on"}

    def _int(key: str, default: int) -> int:
        raw = _get(key)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError as exc:
            raise RuntimeError(f"{prefix}{key} must be an integer, got {raw!r}") from exc

    def _split_csv(key: str) -> list[str]:
        raw = _get(key)
        if not raw:
            return []
        return [x.strip() for x in raw.split(",") if x and x.strip()]

    verify_signature = _bool("VERIFY_SIGNATURE", True)
    jwks_uri = _get("JWKS_URI")
    secret = _get("SECRET")
    if verify_signature and not (jwks_uri or secret):
        raise RuntimeError(
            f"Missing token settings: {prefix}JWKS_URI or {prefix}SECRET "
            f"(or set {prefix}VERIFY_SIGNATURE=false)"
        )

    return ClaimsSettings(
        jwks_uri=jwks_uri,
        secret=secret,
        issuer=_get("ISSUER"),
        audience=_get("AUDIENCE"),
        algorithms=_split_csv("ALGORITHMS") or (["HS256"] if secret and not jwks_uri else ["RS256"]),
        verify_signature=verify_signature,
        leeway_seconds=_int("LEEWAY_SECONDS", 0),
        cache_ttl_seconds=_int("CACHE_TTL_SECONDS", 300),
    )
