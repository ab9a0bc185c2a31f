# didcert/core/canon.py
from typing import Any

try:
    import jcs
except ImportError:
    raise ImportError("Please install jcs: pip install jcs")

def canonical_json(obj: Any) -> bytes:
    """
    Deterministic UTF-8 bytes per RFC 8785 (JSON Canonicalization Scheme).
    Used for presentation output, never for claim payloads (those keep key order).
    """
    return jcs.canonicalize(obj)


def canonical_json_str(obj: Any) -> str:
    """Same as above, but returns str (presentation / CLI output)."""
    return canonical_json(obj).decode("utf-8")
