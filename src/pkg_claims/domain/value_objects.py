# src/pkg_claims/domain/value_objects.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any

from .constants import JsonKind
from .exceptions import ClaimCoercionError


# --- JSON value tagging ---------------------------------------------------


class _Missing:
    """
    Marker for a claim name that is not present in the claims tree.

    Distinct from ``None``, which is an explicit JSON ``null``.
    """
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> str:
        # copies and unpickled values resolve to the module-level singleton
        return "MISSING"


MISSING: Any = _Missing()


def json_kind(value: Any) -> JsonKind:
    """
    Tag a value coming out of the JSON layer.

    ``bool`` is checked before numbers because it subclasses ``int``.
    """
    if value is MISSING:
        return JsonKind.ABSENT
    if value is None:
        return JsonKind.NULL
    if isinstance(value, bool):
        return JsonKind.BOOLEAN
    if isinstance(value, (int, float, Decimal)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.TEXT
    if isinstance(value, (list, tuple)):
        return JsonKind.ARRAY
    if isinstance(value, Mapping):
        return JsonKind.OBJECT
    raise TypeError(f"Not a JSON value: {type(value).__name__}")


def whole_number(value: int | float | Decimal) -> int | None:
    """
    Truncate a JSON number toward zero.
    Returns None for NaN and infinities.
    """
    try:
        return int(value)
    except (OverflowError, ValueError):
        return None


# --- Time value objects ---------------------------------------------------

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True, slots=True, order=True)
class Timestamp:
    """
    A point in time with millisecond precision, counted from the Unix epoch.

    Kept as a plain integer so that dates far outside the range of
    ``datetime`` still decode exactly; conversion to ``datetime`` happens
    only on request.
    """
    epoch_millis: int

    @classmethod
    def from_epoch_seconds(cls, seconds: int) -> Timestamp:
        return cls(epoch_millis=seconds * 1000)

    @property
    def epoch_second(self) -> int:
        return self.epoch_millis // 1000

    def to_datetime(self) -> datetime:
        """Aware UTC datetime; raises ClaimCoercionError when out of range."""
        try:
            return _EPOCH + timedelta(milliseconds=self.epoch_millis)
        except OverflowError as exc:
            raise ClaimCoercionError(
                f"Timestamp {self.epoch_millis}ms is outside the supported datetime range"
            ) from exc

    def __str__(self) -> str:
        return str(self.epoch_millis)
