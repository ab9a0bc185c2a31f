# didcert/core/errors.py
"""
Error taxonomy for the record codec and its collaborators.
Decode-side errors mean "corrupt or foreign record", encode-side errors are caller input errors.
"""


class DidCertError(Exception):
    """Base exception for all didcert errors."""


class MalformedRecord(DidCertError):
    """Buffer truncated before a declared field length, or read past the end."""


class UnsupportedAction(DidCertError):
    def __init__(self, code: str):
        super().__init__(f"Unsupported action code: {code!r}")
        self.code = code


class InvalidClaimEncoding(DidCertError):
    """Claim payload is not a JSON object or array."""


class InvalidTypeCode(DidCertError):
    def __init__(self, type_code: str):
        super().__init__(f"credential type code must have 4 digits: {type_code}")
        self.type_code = type_code


class UnknownClaimKey(DidCertError):
    def __init__(self, key: str):
        super().__init__(f"Unknown claim key: {key}")
        self.key = key


class FieldTooLarge(DidCertError):
    def __init__(self, size: int, limit: int = 255):
        super().__init__(f"Field payload is {size} bytes, limit is {limit}")
        self.size = size
        self.limit = limit


class MissingField(DidCertError):
    def __init__(self, field_name: str, action: str):
        super().__init__(f"'{field_name}' is required for {action} records")
        self.field_name = field_name
        self.action = action


class InvalidExpiration(DidCertError):
    """Expiration block does not fit a signed 32-bit integer."""


class NotAProtocolRecord(DidCertError):
    """Transaction output does not carry a did/cert record."""


class TransactionSourceError(DidCertError):
    """Remote transaction lookup failed (network, HTTP status or response shape)."""
