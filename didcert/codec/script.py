# didcert/codec/script.py
"""
Minimal OP_RETURN script assembly: the opcode, then every chunk pushed with
the same length prefix the record fields use.
"""

from typing import Iterable, Optional

from didcert.core.types import Action, Credential
from didcert.codec.encoder import encode
from didcert.codec.varfield import write_field

OP_RETURN = 0x6A


def assemble_script(chunks: Iterable[bytes]) -> bytes:
    return bytes([OP_RETURN]) + b"".join(write_field(chunk) for chunk in chunks)


def encode_script(credential: Credential, action: Optional[Action] = None) -> bytes:
    """Encode a credential straight to OP_RETURN script bytes."""
    return assemble_script(encode(credential, action))
