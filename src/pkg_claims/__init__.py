"""
pkg_claims

Clean-architecture JWT claims decoding: turns a token's claims tree into a
typed Payload with safe, total claim accessors. Framework integrations
(FastAPI) and token sources (PyJWT) sit on top of the core.
"""

__version__ = "0.1.0"

from .domain.constants import JsonKind, RegisteredClaim
from .domain.entities import ClaimValue, Payload
from .domain.exceptions import (
    ClaimsError,
    JWTDecodeError,
    ClaimCoercionError,
    InvalidTokenError,
    TokenExpiredError,
)
from .domain.value_objects import MISSING, Timestamp, json_kind
from .domain.ports import ClaimCodec, ClaimsSource

from .application.rules import get_instant_from_seconds, get_string, get_string_or_array
from .application.use_cases.decode_payload import PayloadDecoder
from .application.use_cases.decode_token import DecodeTokenUseCase

# Adapters (optional to re-export)
from .adapters.pydantic.codec import PydanticClaimCodec
from .adapters.pyjwt.claims_source import PyJWTClaimsSource

from .integrations.common.factory import (
    create_claims_source,
    create_payload_decoder,
    create_token_decoder,
)
from .settings import ClaimsSettings, settings_from_env

__all__ = [
    "__version__",
    # domain core
    "ClaimValue",
    "Payload",
    "Timestamp",
    "JsonKind",
    "RegisteredClaim",
    "MISSING",
    "json_kind",
    "ClaimCodec",
    "ClaimsSource",
    # exceptions
    "ClaimsError",
    "JWTDecodeError",
    "ClaimCoercionError",
    "InvalidTokenError",
    "TokenExpiredError",
    # rules and use cases
    "get_string",
    "get_string_or_array",
    "get_instant_from_seconds",
    "PayloadDecoder",
    "DecodeTokenUseCase",
    # adapters
    "PydanticClaimCodec",
    "PyJWTClaimsSource",
    # wiring
    "ClaimsSettings",
    "settings_from_env",
    "create_claims_source",
    "create_payload_decoder",
    "create_token_decoder",
]
