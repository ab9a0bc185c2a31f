# examples/registry_demo.py
# Run with: poetry run python examples/registry_demo.py
#
# Offline walk through a credential's life: create, positional update, delete.
# No indexer needed; scripts are built and read back locally.

from didcert import Action, Credential, is_protocol_record
from didcert.chain.registry import CredentialRegistry
from didcert.codec import encode_script
from didcert.verify.verifier import CredentialVerifier


def show(label: str, script: bytes):
    print(f"{label:<8} {len(script):3d} bytes  {script.hex()}")


def main():
    registry = CredentialRegistry()
    verifier = CredentialVerifier()

    create = Credential(
        credential_type_code="0000",
        expiration_block=900000,
        claims={"name": "Alice", "course": "Ledger Basics", "grade": "A"},
    )
    script = encode_script(create)
    show("create", script)
    assert is_protocol_record(script)
    registry.decode_and_apply(script, reference_id="4f1c2a9b")

    # positional update: keys are recovered from the create record
    update = Credential(
        action=Action.UPDATE,
        reference_id="4f1c2a9b",
        expiration_block=950000,
        claims={"name": "Alice", "course": "Ledger Basics", "grade": "A+"},
        value_notation=True,
    )
    script = encode_script(update)
    show("update", script)
    current = registry.decode_and_apply(script)
    print("claims  ", current.claims)
    print(verifier.verify(current, height=920000))

    delete = Credential(action=Action.DELETE, reference_id="4f1c2a9b")
    script = encode_script(delete)
    show("delete", script)
    registry.decode_and_apply(script)
    print("revoked ", registry.is_revoked("4f1c2a9b"))


if __name__ == "__main__":
    main()
