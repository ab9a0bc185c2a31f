# didcert/__init__.py
"""
didcert: verifiable credential records carried in OP_RETURN outputs.
Compact length-prefixed record codec for the "did" protocol, "cert" method.

Create / update / delete records on-chain, read them back as W3C-shaped credentials.
"""

from didcert.core.types import Action, Credential
from didcert.core.errors import DidCertError
from didcert.codec import (
    decode,
    encode,
    encode_create,
    encode_update,
    encode_delete,
    is_protocol_record,
)

__version__ = "0.1.0-dev"

__all__ = [
    "Action",
    "Credential",
    "DidCertError",
    "decode",
    "encode",
    "encode_create",
    "encode_update",
    "encode_delete",
    "is_protocol_record",
]
