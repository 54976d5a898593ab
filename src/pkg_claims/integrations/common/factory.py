from __future__ import annotations

from typing import Optional

from ...adapters.pydantic.codec import PydanticClaimCodec
from ...adapters.pyjwt.claims_source import PyJWTClaimsSource
from ...application.use_cases.decode_payload import PayloadDecoder
from ...application.use_cases.decode_token import DecodeTokenUseCase
from ...domain.ports import ClaimCodec, ClaimsSource
from ...settings import ClaimsSettings, settings_from_env


def create_payload_decoder(codec: Optional[ClaimCodec] = None) -> PayloadDecoder:
    """PayloadDecoder wired with the pydantic codec unless one is given."""
    return PayloadDecoder(codec=codec or PydanticClaimCodec())


def create_claims_source(settings: ClaimsSettings) -> ClaimsSource:
    return PyJWTClaimsSource(
        jwks_uri=settings.jwks_uri,
        key=settings.secret,
        issuer=settings.issuer,
        audience=settings.audience,
        algorithms=settings.algorithms,
        verify_signature=settings.verify_signature,
        leeway_seconds=settings.leeway_seconds,
        cache_ttl_seconds=settings.cache_ttl_seconds,
    )


def create_token_decoder(
        settings: Optional[ClaimsSettings] = None,
        *,
        codec: Optional[ClaimCodec] = None,
) -> DecodeTokenUseCase:
    """
    High-level factory: settings -> DecodeTokenUseCase.

    - builds a PyJWTClaimsSource (settings from env when not given)
    - wires it to a PayloadDecoder with the pydantic codec
    """
    settings = settings or settings_from_env()
    return DecodeTokenUseCase(
        claims_source=create_claims_source(settings),
        payload_decoder=create_payload_decoder(codec),
    )
