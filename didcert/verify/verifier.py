# didcert/verify/verifier.py
from typing import List, Optional
from dataclasses import dataclass, field

from didcert.core.types import Action, Credential, is_empty_claim


@dataclass
class VerificationFailure:
    field: str
    message: str
    category: str = "general"  # e.g. "type_code", "reference", "expiration", "claims"


@dataclass
class VerificationResult:
    is_valid: bool
    message: str = ""
    failures: List[VerificationFailure] = field(default_factory=list)

    @property
    def first_failure(self) -> Optional[VerificationFailure]:
        return self.failures[0] if self.failures else None

    def __bool__(self):
        return self.is_valid

    def __str__(self):
        if self.is_valid:
            return "Credential is valid ✓"
        lines = [f"Verification FAILED ({len(self.failures)} issues):"]
        for f in self.failures:
            lines.append(f"  • [{f.field}] {f.category}: {f.message}")
        return "\n".join(lines)


class CredentialVerifier:
    """
    Offline structural checks for a credential, plus expiry when a block height is known.
    No signatures are involved: the ledger transaction is the only proof.
    """

    def verify(self, credential: Credential, height: Optional[int] = None) -> VerificationResult:
        result = VerificationResult(True)

        def fail(field_name: str, message: str, category: str):
            result.failures.append(VerificationFailure(field_name, message, category))
            result.is_valid = False

        # 1. Type code
        if len(credential.credential_type_code or "") != 4:
            fail("credential_type_code",
                 f"must be 4 characters, got {credential.credential_type_code!r}", "type_code")

        # 2. Action-dependent fields
        action = credential.action
        if action.has_reference and not credential.reference_id:
            fail("reference_id", f"required for {action.name}", "reference")
        if action is Action.CREATE and credential.reference_id and credential.hash is None:
            fail("reference_id", "unexpected on an unpublished CREATE record", "reference")
        if action.has_expiration and credential.expiration_block is None:
            fail("expiration_block", f"required for {action.name}", "expiration")
        if not action.has_expiration and credential.expiration_block is not None:
            fail("expiration_block", f"not carried by {action.name} records", "expiration")

        # 3. Claims
        if len(credential.claim_keys) != len(credential.claim_values):
            fail("claim_keys",
                 f"{len(credential.claim_keys)} keys but {len(credential.claim_values)} values", "claims")
        if len(set(credential.claim_keys)) != len(credential.claim_keys):
            fail("claim_keys", "duplicate claim keys", "claims")
        for key, value in credential.claims.items():
            if is_empty_claim(value):
                fail(key, "claim value is empty", "claims")

        # 4. Expiry
        if height is not None and action is Action.DELETE:
            fail("action", "a DELETE record revokes, it is never valid itself", "revoked")
        if height is not None and credential.expiration_block is not None:
            if not credential.is_valid_at(height):
                fail("expiration_block",
                     f"expired at block {credential.expiration_block}, chain is at {height}", "expired")

        result.message = "Valid credential" if result.is_valid else f"Failed with {len(result.failures)} issues"
        return result
