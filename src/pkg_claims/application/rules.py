"""
Extraction rules for the registered claims.

Each rule reads one claim from the claims tree and either returns the
decoded value, returns None when the claim is not applicable, or raises
JWTDecodeError for shapes that can only come from a broken or forged
token.
"""

from __future__ import annotations

from typing import Any, List, Mapping, Optional

from ..domain.constants import JsonKind
from ..domain.exceptions import JWTDecodeError
from ..domain.value_objects import MISSING, Timestamp, json_kind, whole_number


def get_string(tree: Mapping[str, Any], name: str) -> Optional[str]:
    """Text claims (iss, sub, jti). Anything that isn't text decodes to None."""
    value = tree.get(name, MISSING)
    if json_kind(value) is JsonKind.TEXT:
        return value
    return None


def get_string_or_array(tree: Mapping[str, Any], name: str) -> Optional[List[str]]:
    """
    Claims that are either one string or an array of strings (aud).

    - missing / null     -> None
    - array of strings   -> list in array order
    - ""                 -> []
    - "x"                -> ["x"]
    - any other shape    -> None
    """
    value = tree.get(name, MISSING)
    kind = json_kind(value)

    if kind is JsonKind.ARRAY:
        items: List[str] = []
        for element in value:
            if json_kind(element) is not JsonKind.TEXT:
                raise JWTDecodeError("Couldn't map the Claim's array contents to String")
            items.append(element)
        return items

    if kind is JsonKind.TEXT:
        return [value] if value else []

    return None


def get_instant_from_seconds(tree: Mapping[str, Any], name: str) -> Optional[Timestamp]:
    """Time claims (iat, exp, nbf), encoded as seconds since the epoch."""
    value = tree.get(name, MISSING)
    kind = json_kind(value)

    if kind in (JsonKind.ABSENT, JsonKind.NULL):
        return None

    seconds = whole_number(value) if kind is JsonKind.NUMBER else None
    if seconds is None:
        raise JWTDecodeError(f"The claim '{name}' contained a non-numeric date value.")

    return Timestamp.from_epoch_seconds(seconds)
