"""
did/cert record codec: validator, decoder, encoder and script assembly.
"""

from .validator import is_protocol_record, PROTOCOL_MARKER, METHOD_MARKER
from .varfield import read_field, write_field
from .claims import from_payload, to_object_form, to_positional_form
from .decoder import decode
from .encoder import encode, encode_create, encode_update, encode_delete
from .script import assemble_script, encode_script, OP_RETURN

__all__ = [
    "is_protocol_record",
    "PROTOCOL_MARKER",
    "METHOD_MARKER",
    "read_field",
    "write_field",
    "from_payload",
    "to_object_form",
    "to_positional_form",
    "decode",
    "encode",
    "encode_create",
    "encode_update",
    "encode_delete",
    "assemble_script",
    "encode_script",
    "OP_RETURN",
]
