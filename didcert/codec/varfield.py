# didcert/codec/varfield.py
"""
Length-prefixed byte field, the same framing a script push-data uses.

Short form:    [len 0..75][payload]
Extended form: [76][len 0..255][payload]      (76 == OP_PUSHDATA1)
"""

from typing import Tuple

from didcert.core.errors import FieldTooLarge, MalformedRecord

MAX_SHORT_LENGTH = 75
EXTENDED_MARKER = 76
MAX_FIELD_LENGTH = 255


def read_field(buffer: bytes, offset: int) -> Tuple[bytes, int]:
    """
    Read one field starting at `offset`.
    Returns (payload, offset of the next field).
    """
    end = len(buffer)
    if offset < 0 or offset >= end:
        raise MalformedRecord(f"Field read at offset {offset} is past buffer end ({end} bytes)")

    length = buffer[offset]
    start = offset + 1
    if length == EXTENDED_MARKER:
        if start >= end:
            raise MalformedRecord(f"Extended length byte missing at offset {start}")
        length = buffer[start]
        start += 1

    if end - start < length:
        raise MalformedRecord(
            f"Field at offset {offset} declares {length} bytes, only {end - start} remain"
        )
    return bytes(buffer[start:start + length]), start + length


def write_field(payload: bytes) -> bytes:
    size = len(payload)
    if size > MAX_FIELD_LENGTH:
        raise FieldTooLarge(size, MAX_FIELD_LENGTH)
    if size <= MAX_SHORT_LENGTH:
        return bytes([size]) + payload
    return bytes([EXTENDED_MARKER, size]) + payload
