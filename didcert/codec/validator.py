# didcert/codec/validator.py
"""
Recognizes did/cert records by their fixed head:

    [OP_RETURN][04]["did\\0"][04]["cert"] ...
     byte 0    1    2..5     6    7..10

The two framing bytes and the method push length are skipped, not interpreted.
"""

PROTOCOL_MARKER = b"did\x00"
METHOD_MARKER = b"cert"

PROTOCOL_OFFSET = 2
METHOD_OFFSET = PROTOCOL_OFFSET + len(PROTOCOL_MARKER) + 1
HEADER_LENGTH = METHOD_OFFSET + len(METHOD_MARKER)


def is_protocol_record(buffer: bytes) -> bool:
    """True iff both markers match exactly. Never raises."""
    if not isinstance(buffer, (bytes, bytearray, memoryview)):
        return False
    if len(buffer) < HEADER_LENGTH:
        return False

    protocol = bytes(buffer[PROTOCOL_OFFSET:PROTOCOL_OFFSET + len(PROTOCOL_MARKER)])
    method = bytes(buffer[METHOD_OFFSET:METHOD_OFFSET + len(METHOD_MARKER)])
    return protocol == PROTOCOL_MARKER and method == METHOD_MARKER
