# didcert/codec/claims.py
"""
Claim payload shapes.

Object form:      {"name":"Alice","age":30}   keys travel with the record
Positional form:  ["Alice",30]                keys come from a prior record, or "key<i>"
"""

import json
from typing import Any, List, Sequence, Tuple

from didcert.core.errors import InvalidClaimEncoding

SYNTHETIC_KEY_PREFIX = "key"


def _dumps(obj: Any) -> str:
    # same bytes JSON.stringify would produce; NaN and Infinity are not JSON
    try:
        return json.dumps(obj, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as e:
        raise InvalidClaimEncoding(f"Claim values are not JSON-serializable: {e}") from e


def _reject_constant(name: str) -> Any:
    raise InvalidClaimEncoding(f"Claim payload contains non-JSON constant {name}")


def to_object_form(keys: Sequence[str], values: Sequence[Any]) -> str:
    if len(keys) != len(values):
        raise ValueError(f"{len(keys)} claim keys but {len(values)} values")
    return _dumps(dict(zip(keys, values)))


def to_positional_form(values: Sequence[Any]) -> str:
    return _dumps(list(values))


def from_payload(text: str, known_keys: Sequence[str] = ()) -> Tuple[List[str], List[Any]]:
    """
    Parse a claim payload into parallel (keys, values) lists.

    Arrays are matched by index against `known_keys`; elements past the end of
    `known_keys` get synthetic "key<i>" names instead of failing.
    """
    try:
        parsed = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as e:
        raise InvalidClaimEncoding(f"Claim payload is not valid JSON: {e}") from e

    if isinstance(parsed, dict):
        return list(parsed.keys()), list(parsed.values())

    if isinstance(parsed, list):
        keys = [
            known_keys[i] if i < len(known_keys) else f"{SYNTHETIC_KEY_PREFIX}{i}"
            for i in range(len(parsed))
        ]
        return keys, parsed

    raise InvalidClaimEncoding(
        f"Claim payload must be a JSON object or array, got {type(parsed).__name__}"
    )
