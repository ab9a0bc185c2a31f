# didcert/codec/decoder.py
import logging
import struct
from typing import Sequence

from didcert.core.types import Action, Credential
from didcert.core.errors import InvalidClaimEncoding, MalformedRecord, UnsupportedAction
from didcert.codec.claims import from_payload
from didcert.codec.validator import HEADER_LENGTH
from didcert.codec.varfield import read_field

logger = logging.getLogger(__name__)

EXPIRATION_SIZE = 4


def _ascii(raw: bytes, what: str) -> str:
    try:
        return raw.decode("ascii")
    except UnicodeDecodeError as e:
        raise MalformedRecord(f"{what} is not ASCII: {raw!r}") from e


def decode(buffer: bytes, known_keys: Sequence[str] = ()) -> Credential:
    """
    Decode a did/cert script into a Credential.

    Call only after is_protocol_record(buffer) is True; every read is still
    bounds-checked and raises MalformedRecord on truncation.
    `known_keys` names the elements of a positional claim payload (usually the
    keys of the record being updated).
    """
    buffer = bytes(buffer)
    offset = HEADER_LENGTH

    raw_action, offset = read_field(buffer, offset)
    try:
        action = Action.from_code(raw_action.decode("ascii"))
    except UnicodeDecodeError:
        raise UnsupportedAction(raw_action.decode("latin-1")) from None
    logger.debug("action=%s", action.value, extra={"action": action.value, "offset": offset})

    raw_type, offset = read_field(buffer, offset)
    type_code = _ascii(raw_type, "Credential type code")
    logger.debug("type_code=%s", type_code)

    reference_id = None
    if action.has_reference:
        raw_ref, offset = read_field(buffer, offset)
        reference_id = _ascii(raw_ref, "Reference id")
        logger.debug("reference_id=%s", reference_id)

    if not action.has_expiration:
        return Credential(
            action=action,
            credential_type_code=type_code,
            reference_id=reference_id,
        )

    raw_expiration, offset = read_field(buffer, offset)
    if len(raw_expiration) != EXPIRATION_SIZE:
        raise MalformedRecord(
            f"Expiration field must be {EXPIRATION_SIZE} bytes, got {len(raw_expiration)}"
        )
    (expiration,) = struct.unpack("<i", raw_expiration)
    logger.debug("expiration_block=%d", expiration)

    raw_claims, offset = read_field(buffer, offset)
    try:
        claim_text = raw_claims.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidClaimEncoding(f"Claim payload is not UTF-8: {e}") from e
    keys, values = from_payload(claim_text, known_keys)
    positional = claim_text.lstrip().startswith("[")
    logger.debug("claims=%s", claim_text)

    if offset != len(buffer):
        logger.debug("%d trailing bytes after claim payload ignored", len(buffer) - offset)

    return Credential(
        action=action,
        credential_type_code=type_code,
        reference_id=reference_id,
        expiration_block=expiration,
        claims=dict(zip(keys, values)),
        claim_keys=keys,
        claim_values=values,
        value_notation=positional,
    )
