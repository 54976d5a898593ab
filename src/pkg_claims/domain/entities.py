from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, TypeVar

from .constants import JsonKind
from .exceptions import ClaimCoercionError
from .ports import ClaimCodec
from .value_objects import MISSING, Timestamp, json_kind, whole_number

T = TypeVar("T")


def _type_name(target: Any) -> str:
    return getattr(target, "__name__", None) or repr(target)


@dataclass(frozen=True, slots=True)
class ClaimValue:
    """
    One claim of a decoded payload.

    Wraps the raw JSON value (or MISSING when the claim is not in the
    payload at all). Accessors return None for both MISSING and JSON null,
    so callers never have to tell the two apart unless they ask via
    `is_missing()`.
    """
    value: Any = MISSING
    name: Optional[str] = None
    codec: Optional[ClaimCodec] = field(default=None, compare=False, repr=False)

    # ---- internal helpers ------------------------------------------------

    @property
    def kind(self) -> JsonKind:
        return json_kind(self.value)

    def _mismatch(self, expected: str) -> ClaimCoercionError:
        return ClaimCoercionError(
            f"Claim '{self.name}' holds a {self.kind.value} value, not {expected}",
            claim=self.name,
        )

    def _codec_for(self, codec: Optional[ClaimCodec]) -> ClaimCodec:
        resolved = codec or self.codec
        if resolved is None:
            raise ClaimCoercionError(
                f"No codec available to decode claim '{self.name}'",
                claim=self.name,
            )
        return resolved

    # ---- predicates ------------------------------------------------------

    def is_null(self) -> bool:
        """True when the claim is missing or explicitly null."""
        return self.kind in (JsonKind.ABSENT, JsonKind.NULL)

    def is_missing(self) -> bool:
        """True only when the claim was not present in the payload."""
        return self.kind is JsonKind.ABSENT

    # ---- scalar accessors ------------------------------------------------

    def as_string(self) -> Optional[str]:
        if self.kind is JsonKind.TEXT:
            return self.value
        return None

    def as_boolean(self) -> Optional[bool]:
        kind = self.kind
        if kind in (JsonKind.ABSENT, JsonKind.NULL):
            return None
        if kind is JsonKind.BOOLEAN:
            return self.value
        raise self._mismatch("a boolean")

    def as_int(self) -> Optional[int]:
        kind = self.kind
        if kind in (JsonKind.ABSENT, JsonKind.NULL):
            return None
        if kind is JsonKind.NUMBER:
            number = whole_number(self.value)
            if number is not None:
                return number
            raise ClaimCoercionError(
                f"Claim '{self.name}' holds a non-finite number", claim=self.name
            )
        raise self._mismatch("an integer")

    # alias: JSON has a single integer type
    as_long = as_int

    def as_double(self) -> Optional[float]:
        kind = self.kind
        if kind in (JsonKind.ABSENT, JsonKind.NULL):
            return None
        if kind is JsonKind.NUMBER:
            try:
                return float(self.value)
            except OverflowError as exc:
                raise ClaimCoercionError(
                    f"Claim '{self.name}' is too large for a float", claim=self.name
                ) from exc
        raise self._mismatch("a number")

    def as_timestamp(self) -> Optional[Timestamp]:
        """Interpret the claim as whole seconds since the Unix epoch."""
        seconds = self.as_int()
        if seconds is None:
            return None
        return Timestamp.from_epoch_seconds(seconds)

    def as_datetime(self) -> Optional[datetime]:
        timestamp = self.as_timestamp()
        return timestamp.to_datetime() if timestamp is not None else None

    # ---- container accessors ---------------------------------------------

    def as_list(self, element_type: type[T], codec: Optional[ClaimCodec] = None) -> Optional[List[T]]:
        """
        Decode a JSON array, converting every element to `element_type`.

        Raises ClaimCoercionError if the claim is not an array or any
        element fails to convert (the error carries the element index).
        """
        kind = self.kind
        if kind in (JsonKind.ABSENT, JsonKind.NULL):
            return None
        if kind is not JsonKind.ARRAY:
            raise self._mismatch("an array")

        converter = self._codec_for(codec)
        items: List[T] = []
        for index, element in enumerate(self.value):
            try:
                items.append(converter.convert(element, element_type))
            except ClaimCoercionError as exc:
                raise ClaimCoercionError(
                    f"Couldn't map the Claim '{self.name}' array contents to "
                    f"{_type_name(element_type)}: element {index} is invalid",
                    claim=self.name,
                    index=index,
                ) from exc
        return items

    def as_map(self) -> Optional[Dict[str, Any]]:
        kind = self.kind
        if kind in (JsonKind.ABSENT, JsonKind.NULL):
            return None
        if kind is JsonKind.OBJECT:
            return dict(self.value)
        raise self._mismatch("an object")

    def as_type(self, target: type[T], codec: Optional[ClaimCodec] = None) -> Optional[T]:
        """Decode the whole claim into `target` through the codec."""
        if self.is_null():
            return None
        return self._codec_for(codec).convert(self.value, target)


@dataclass(frozen=True, slots=True)
class Payload:
    """
    Decoded claims set of a JWT.

    Registered claims are exposed as typed fields; every claim in the
    payload, registered or not, stays reachable through `get_claim`.
    """
    issuer: Optional[str] = None
    subject: Optional[str] = None
    audience: Optional[Tuple[str, ...]] = None
    expires_at: Optional[Timestamp] = None
    not_before: Optional[Timestamp] = None
    issued_at: Optional[Timestamp] = None
    id: Optional[str] = None
    claims: Mapping[str, ClaimValue] = field(
        default_factory=lambda: MappingProxyType({}),
        hash=False,
    )

    # --- instant-typed views of the time claims ---------------------------

    @property
    def expires_at_as_datetime(self) -> Optional[datetime]:
        return self.expires_at.to_datetime() if self.expires_at is not None else None

    @property
    def not_before_as_datetime(self) -> Optional[datetime]:
        return self.not_before.to_datetime() if self.not_before is not None else None

    @property
    def issued_at_as_datetime(self) -> Optional[datetime]:
        return self.issued_at.to_datetime() if self.issued_at is not None else None

    # --- generic access ---------------------------------------------------

    def get_claim(self, name: str) -> ClaimValue:
        """Never None: a claim that is not in the payload reports is_null()."""
        claim = self.claims.get(name)
        if claim is None:
            return ClaimValue(MISSING, name)
        return claim

    def get_claims(self) -> Mapping[str, ClaimValue]:
        return self.claims
