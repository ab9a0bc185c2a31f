# didcert/core/encoding.py
from didcert.core.errors import MalformedRecord


def script_from_hex(s: str) -> bytes:
    """Decode a hex-encoded script (as returned by the indexer) to bytes."""
    s = s.strip()
    if s.startswith(("0x", "0X")):
        s = s[2:]
    try:
        return bytes.fromhex(s)
    except ValueError as e:
        raise MalformedRecord(f"Script is not valid hex: {e}") from e


def script_to_hex(script: bytes) -> str:
    """Lowercase hex, no prefix."""
    return bytes(script).hex()
