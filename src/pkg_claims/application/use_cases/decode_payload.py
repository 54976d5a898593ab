from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, List, Optional

from ...domain.constants import RegisteredClaim
from ...domain.entities import ClaimValue, Payload
from ...domain.exceptions import JWTDecodeError
from ...domain.ports import ClaimCodec
from ..rules import get_instant_from_seconds, get_string, get_string_or_array

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class PayloadDecoder:
    """
    Application use case:
    - Take the claims tree produced by the JSON layer
    - Map registered claims -> typed Payload fields
    - Keep every claim (registered or not) in Payload.claims

    Stateless apart from the read-only codec, which is handed to every
    ClaimValue so that `as_list` / `as_type` can decode custom types.
    Without a codec those two accessors raise ClaimCoercionError; use
    `create_payload_decoder()` for a decoder wired with the pydantic codec.
    """

    codec: Optional[ClaimCodec] = None

    def decode(self, tree: Optional[Mapping[str, Any]]) -> Payload:
        """
        Decode a claims tree into a Payload.

        Raises:
            JWTDecodeError
        """
        if tree is None:
            raise JWTDecodeError("Parsing the Payload's JSON resulted on a Null map")
        if not isinstance(tree, Mapping):
            raise JWTDecodeError(
                f"The Payload's JSON must be an object, got {type(tree).__name__}"
            )

        audience = get_string_or_array(tree, RegisteredClaim.AUDIENCE.value)

        payload = Payload(
            issuer=get_string(tree, RegisteredClaim.ISSUER.value),
            subject=get_string(tree, RegisteredClaim.SUBJECT.value),
            audience=tuple(audience) if audience is not None else None,
            expires_at=get_instant_from_seconds(tree, RegisteredClaim.EXPIRES_AT.value),
            not_before=get_instant_from_seconds(tree, RegisteredClaim.NOT_BEFORE.value),
            issued_at=get_instant_from_seconds(tree, RegisteredClaim.ISSUED_AT.value),
            id=get_string(tree, RegisteredClaim.JWT_ID.value),
            claims=self._wrap_claims(tree),
        )

        logger.debug("Decoded payload with claims: %s", sorted(tree))
        return payload

    def decode_many(self, trees: Iterable[Optional[Mapping[str, Any]]]) -> List[Payload]:
        """Decode several trees in order; the first failure aborts the batch."""
        return [self.decode(tree) for tree in trees]

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _wrap_claims(self, tree: Mapping[str, Any]) -> Mapping[str, ClaimValue]:
        claims = {
            name: ClaimValue(value, name, self.codec)
            for name, value in tree.items()
        }
        return MappingProxyType(claims)
