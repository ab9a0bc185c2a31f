# didcert/codec/encoder.py
"""
Credential -> ordered byte chunks, one chunk per pushed field.

The chunks are raw payloads; length prefixes and the OP_RETURN opcode are
added by didcert.codec.script.assemble_script.
"""

import struct
from typing import Any, List, Optional, Tuple

from didcert.core.types import Action, Credential, is_empty_claim
from didcert.core.errors import (
    FieldTooLarge,
    InvalidExpiration,
    InvalidTypeCode,
    MalformedRecord,
    MissingField,
    UnknownClaimKey,
)
from didcert.codec.claims import to_object_form, to_positional_form
from didcert.codec.validator import METHOD_MARKER, PROTOCOL_MARKER
from didcert.codec.varfield import MAX_FIELD_LENGTH

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


def _type_code_bytes(credential: Credential) -> bytes:
    code = credential.credential_type_code
    if code is None or len(code) != 4:
        raise InvalidTypeCode(code)
    try:
        return code.encode("ascii")
    except UnicodeEncodeError:
        raise InvalidTypeCode(code) from None


def _reference_bytes(credential: Credential, action: Action) -> bytes:
    if not credential.reference_id:
        raise MissingField("reference_id", action.name)
    try:
        return credential.reference_id.encode("ascii")
    except UnicodeEncodeError:
        raise MalformedRecord(f"Reference id must be ASCII: {credential.reference_id!r}") from None


def _expiration_bytes(credential: Credential, action: Action) -> bytes:
    expiration = credential.expiration_block
    if expiration is None:
        raise MissingField("expiration_block", action.name)
    if isinstance(expiration, bool) or not isinstance(expiration, int):
        raise InvalidExpiration(f"Expiration block must be an int, got {expiration!r}")
    if not INT32_MIN <= expiration <= INT32_MAX:
        raise InvalidExpiration(f"Expiration block {expiration} does not fit a signed 32-bit int")
    return struct.pack("<i", expiration)


def resolve_claims(credential: Credential) -> Tuple[List[str], List[Any]]:
    """
    Resolve the ordered (keys, values) to serialize.

    Untyped ("0000") credentials without explicit keys follow the insertion
    order of `claims`; explicit `claim_keys` always win. Every key needs a
    non-empty value.
    """
    claims = dict(credential.claims)
    if not claims and credential.claim_keys:
        claims = dict(zip(credential.claim_keys, credential.claim_values))

    if credential.claim_keys:
        keys = list(credential.claim_keys)
    else:
        # untyped records always; typed ones too until type templates exist
        keys = list(claims)

    values = []
    for key in keys:
        value = claims.get(key)
        if is_empty_claim(value):
            raise UnknownClaimKey(key)
        values.append(value)
    return keys, values


def claim_payload(credential: Credential) -> bytes:
    keys, values = resolve_claims(credential)
    if credential.value_notation:
        text = to_positional_form(values)
    else:
        text = to_object_form(keys, values)
    return text.encode("utf-8")


def _checked(chunks: List[bytes]) -> List[bytes]:
    for chunk in chunks:
        if len(chunk) > MAX_FIELD_LENGTH:
            raise FieldTooLarge(len(chunk), MAX_FIELD_LENGTH)
    return chunks


def encode_create(credential: Credential) -> List[bytes]:
    type_code = _type_code_bytes(credential)
    return _checked([
        PROTOCOL_MARKER,
        METHOD_MARKER,
        Action.CREATE.value.encode("ascii"),
        type_code,
        _expiration_bytes(credential, Action.CREATE),
        claim_payload(credential),
    ])


def encode_update(credential: Credential) -> List[bytes]:
    type_code = _type_code_bytes(credential)
    return _checked([
        PROTOCOL_MARKER,
        METHOD_MARKER,
        Action.UPDATE.value.encode("ascii"),
        type_code,
        _reference_bytes(credential, Action.UPDATE),
        _expiration_bytes(credential, Action.UPDATE),
        claim_payload(credential),
    ])


def encode_delete(credential: Credential) -> List[bytes]:
    type_code = _type_code_bytes(credential)
    return _checked([
        PROTOCOL_MARKER,
        METHOD_MARKER,
        Action.DELETE.value.encode("ascii"),
        type_code,
        _reference_bytes(credential, Action.DELETE),
    ])


_ENCODERS = {
    Action.CREATE: encode_create,
    Action.UPDATE: encode_update,
    Action.DELETE: encode_delete,
}


def encode(credential: Credential, action: Optional[Action] = None) -> List[bytes]:
    """Encode for `action`, defaulting to the credential's own action."""
    target = Action(action) if action is not None else credential.action
    return _ENCODERS[target](credential)
