# didcert/core/did.py
"""
Address <-> DID mapping for the "cert" method.

A ledger address carries a network prefix ("ecash:qz..."); the DID keeps only
the part after the first colon: "did:cert:qz...".
"""

from typing import Optional

DID_PREFIX = "did:cert:"
DEFAULT_ADDRESS_PREFIX = "ecash"


def address_to_did(address: Optional[str]) -> Optional[str]:
    if not address:
        return None
    _, sep, bare = address.partition(":")
    return DID_PREFIX + (bare if sep else address)


def did_to_address(did: str, prefix: str = DEFAULT_ADDRESS_PREFIX) -> str:
    if not did.startswith(DID_PREFIX) or len(did) == len(DID_PREFIX):
        raise ValueError(f"Not a did:cert identifier: {did!r}")
    return f"{prefix}:{did[len(DID_PREFIX):]}"
