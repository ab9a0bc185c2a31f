# didcert/core/types.py
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from didcert.core.canon import canonical_json_str
from didcert.core.did import address_to_did
from didcert.core.errors import UnsupportedAction

W3C_CONTEXT = "https://www.w3.org/2018/credentials/v1"
BASE_TYPE = "VerifiableCredential"
UNTYPED_CODE = "0000"

# fields kept by the minimal W3C presentation
REPRESENTATION_FIELDS = ("context", "type", "id", "issuer", "issuanceDate", "credentialSubject")


class Action(str, Enum):
    """Record action, stored on-chain as a single ASCII letter."""
    CREATE = "C"
    UPDATE = "U"
    DELETE = "D"

    @classmethod
    def from_code(cls, code: str) -> "Action":
        try:
            return cls(code)
        except ValueError:
            raise UnsupportedAction(code) from None

    @property
    def has_reference(self) -> bool:
        return self in (Action.UPDATE, Action.DELETE)

    @property
    def has_expiration(self) -> bool:
        return self in (Action.CREATE, Action.UPDATE)


@dataclass(frozen=True)
class Credential:
    """
    A did/cert verifiable credential record.

    The byte format carries action, type code, reference id, expiration and claims.
    Everything below the metadata marker is merged in from the transaction that
    carried the record.
    """
    action: Action = Action.CREATE
    credential_type_code: str = UNTYPED_CODE
    reference_id: Optional[str] = None
    expiration_block: Optional[int] = None
    claims: Mapping[str, Any] = field(default_factory=dict, hash=False)
    claim_keys: Tuple[str, ...] = ()
    claim_values: Tuple[Any, ...] = field(default=(), hash=False)
    value_notation: bool = False            # True -> positional JSON array on encode

    # metadata (not in the record bytes)
    issuer_address: Optional[str] = None
    subject_address: Optional[str] = None
    issuance_date: Optional[datetime] = None
    height: Optional[int] = None
    hash: Optional[str] = None
    credential_type_name: Optional[str] = None

    def __post_init__(self):
        # accept lists and dicts from callers, store read-only copies
        object.__setattr__(self, "action", Action.from_code(self.action))
        object.__setattr__(self, "claims", MappingProxyType(dict(self.claims)))
        object.__setattr__(self, "claim_keys", tuple(self.claim_keys))
        object.__setattr__(self, "claim_values", tuple(self.claim_values))

    @property
    def context(self) -> List[str]:
        return [W3C_CONTEXT]

    @property
    def type(self) -> List[str]:
        types = [BASE_TYPE]
        if self.credential_type_name:
            types.append(self.credential_type_name)
        return types

    @property
    def id(self) -> Optional[str]:
        return self.hash

    @property
    def issuer(self) -> Optional[str]:
        return address_to_did(self.issuer_address)

    @property
    def subject_id(self) -> Optional[str]:
        return address_to_did(self.subject_address)

    @property
    def credential_subject(self) -> Dict[str, Any]:
        subject: Dict[str, Any] = {"id": self.subject_id, "claims": dict(self.claims)}
        if self.expiration_block is not None:
            subject["expirationBlock"] = self.expiration_block
        return subject

    def is_valid_at(self, height: int) -> bool:
        """Valid while the given block height has not passed the expiration block."""
        if self.expiration_block is None:
            return False
        return height <= self.expiration_block

    def with_metadata(self, **changes: Any) -> "Credential":
        """Return a copy with transaction metadata merged in."""
        return replace(self, **changes)

    def to_representation(self) -> Dict[str, Any]:
        """Minimal W3C-style view; None-valued fields are dropped."""
        values = {
            "context": self.context,
            "type": self.type,
            "id": self.id,
            "issuer": self.issuer,
            "issuanceDate": self.issuance_date.isoformat() if self.issuance_date else None,
            "credentialSubject": self.credential_subject,
        }
        return {k: values[k] for k in REPRESENTATION_FIELDS if values[k] is not None}

    def to_representation_json(self) -> str:
        return canonical_json_str(self.to_representation())


def is_empty_claim(value: Any) -> bool:
    """None, "" and empty containers do not count as a claim value; 0 and False do."""
    return value is None or (isinstance(value, (str, list, dict)) and len(value) == 0)
