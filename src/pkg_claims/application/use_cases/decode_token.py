from __future__ import annotations

from dataclasses import dataclass

from ...domain.entities import Payload
from ...domain.exceptions import InvalidTokenError, TokenExpiredError
from ...domain.ports import ClaimsSource
from .decode_payload import PayloadDecoder


@dataclass(slots=True)
class DecodeTokenUseCase:
    """
    Application use case:
    - Load a token's claims tree via ClaimsSource port
    - Decode the tree into a Payload

    Framework-agnostic; verification policy lives in the source.
    """

    claims_source: ClaimsSource
    payload_decoder: PayloadDecoder

    def execute(self, token: str) -> Payload:
        """
        Decode a compact token into a Payload.

        Raises:
            TokenExpiredError
            InvalidTokenError
            JWTDecodeError
        """
        try:
            tree = self.claims_source.load(token)
        except (TokenExpiredError, InvalidTokenError):
            # let callers distinguish these explicitly
            raise
        except Exception as exc:
            # Wrap unexpected errors in a generic InvalidTokenError
            raise InvalidTokenError(f"Token could not be read: {exc}") from exc

        return self.payload_decoder.decode(tree)
