from __future__ import annotations

from typing import Any, Mapping, Protocol, TypeVar

T = TypeVar("T")


class ClaimCodec(Protocol):
    """
    Port for converting a raw JSON value into a caller-chosen Python type.

    Used by ClaimValue.as_list / as_type for element and custom-type
    decoding. Implementations live in the adapters layer (e.g. pydantic).
    """

    def convert(self, value: Any, target: type[T]) -> T:
        """
        Convert `value` to `target`.

        Raises:
          - ClaimCoercionError if the value cannot be represented as `target`
        """
        ...


class ClaimsSource(Protocol):
    """
    Port for turning a compact token into its claims tree.

    Implementations take care of splitting, base64url decoding, JSON
    parsing and (optionally) signature verification.
    """

    def load(self, token: str) -> Mapping[str, Any]:
        """
        Raises:
          - TokenExpiredError
          - InvalidTokenError
        """
        ...
