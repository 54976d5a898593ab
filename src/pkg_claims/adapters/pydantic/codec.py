from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from ...domain.exceptions import ClaimCoercionError
from ...domain.ports import ClaimCodec

T = TypeVar("T")


@lru_cache(maxsize=256)
def _adapter_for(target: Any) -> TypeAdapter[Any]:
    return TypeAdapter(target)


@dataclass(frozen=True, slots=True)
class PydanticClaimCodec(ClaimCodec):
    """
    Adapter implementing ClaimCodec port using pydantic's TypeAdapter.

    Works for builtins (str, int, ...), generics (list[int],
    dict[str, str]), TypedDicts and BaseModel subclasses.

    `strict=True` keeps JSON kinds apart: "1" is not an int, 1 is not a
    bool.
    """

    strict: bool = True

    def convert(self, value: Any, target: type[T]) -> T:
        try:
            adapter = _adapter_for(target)
        except TypeError:
            # unhashable target (e.g. Annotated with a list inside): skip the cache
            adapter = TypeAdapter(target)

        try:
            return adapter.validate_python(value, strict=self.strict)
        except ValidationError as exc:
            raise ClaimCoercionError(
                f"Couldn't convert value to {getattr(target, '__name__', target)!s}: "
                f"{exc.error_count()} validation error(s)"
            ) from exc
