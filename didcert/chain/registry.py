# didcert/chain/registry.py
from typing import Dict, List, Optional, Sequence
from dataclasses import dataclass, field

from didcert.core.types import Action, Credential
from didcert.core.errors import DidCertError, NotAProtocolRecord
from didcert.codec.decoder import decode
from didcert.codec.validator import is_protocol_record


class UnknownReference(DidCertError, KeyError):
    def __init__(self, reference_id: str):
        super().__init__(f"No active credential for reference id '{reference_id}'")
        self.reference_id = reference_id

    def __str__(self):
        return self.args[0]


class DuplicateReference(DidCertError):
    def __init__(self, reference_id: str):
        super().__init__(f"A credential is already registered under reference id '{reference_id}'")
        self.reference_id = reference_id


@dataclass
class CredentialRegistry:
    """
    Folds create / update / delete records into the current state of each credential.
    Keyed by reference id; keeps the full ordered record history per credential.
    """
    records: Dict[str, List[Credential]] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.records)

    def __contains__(self, reference_id: str) -> bool:
        return reference_id in self.records

    def apply(self, credential: Credential, reference_id: Optional[str] = None) -> Credential:
        """
        Apply one record and return it.
        Create records are registered under `reference_id` (or their own reference id,
        e.g. the tx hash prefix set by the transaction source); a reference id is
        used once, so a second create, even after a delete, raises DuplicateReference.
        """
        ref = reference_id or credential.reference_id
        if not ref:
            raise ValueError("A reference id is required to register a credential")

        if credential.action is Action.CREATE:
            if ref in self.records:
                raise DuplicateReference(ref)
            self.records[ref] = [credential]
            return credential

        history = self._history(ref)
        if history[-1].action is Action.DELETE:
            raise UnknownReference(ref)
        history.append(credential)
        return credential

    def decode_and_apply(self, buffer: bytes, reference_id: Optional[str] = None) -> Credential:
        """
        Decode a record with the claim keys of the credential it references, then apply it.
        """
        if not is_protocol_record(buffer):
            raise NotAProtocolRecord("Buffer does not carry a did/cert record")
        head = decode(buffer)
        ref = reference_id or head.reference_id
        known = self.known_keys(ref) if ref and head.action is Action.UPDATE else ()
        credential = decode(buffer, known) if known else head
        return self.apply(credential, ref)

    def known_keys(self, reference_id: str) -> Sequence[str]:
        if reference_id not in self.records:
            return ()
        return self.current(reference_id).claim_keys

    def _history(self, reference_id: str) -> List[Credential]:
        try:
            return self.records[reference_id]
        except KeyError:
            raise UnknownReference(reference_id) from None

    def history(self, reference_id: str) -> List[Credential]:
        """Copy of every record applied for this credential, oldest first."""
        return list(self._history(reference_id))

    def current(self, reference_id: str) -> Credential:
        """Latest non-delete state."""
        for record in reversed(self._history(reference_id)):
            if record.action is not Action.DELETE:
                return record
        raise UnknownReference(reference_id)

    def get(self, reference_id: str) -> Optional[Credential]:
        """Current state, or None when unknown or revoked."""
        if reference_id not in self.records or self.is_revoked(reference_id):
            return None
        return self.current(reference_id)

    def is_revoked(self, reference_id: str) -> bool:
        return self._history(reference_id)[-1].action is Action.DELETE
