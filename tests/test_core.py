# tests/test_core.py
import json
import pytest
from datetime import datetime, timezone

from didcert.core.types import Action, Credential, W3C_CONTEXT, is_empty_claim
from didcert.core.did import address_to_did, did_to_address
from didcert.core.encoding import script_from_hex, script_to_hex
from didcert.core.canon import canonical_json, canonical_json_str
from didcert.core.errors import MalformedRecord, UnsupportedAction
from didcert.codec import decode, encode_script


@pytest.fixture
def published():
    return Credential(
        action=Action.CREATE,
        credential_type_code="0001",
        reference_id="9f8e7d6c",
        expiration_block=700000,
        claims={"name": "Alice"},
        claim_keys=["name"],
        claim_values=["Alice"],
        issuer_address="ecash:qissuer000",
        subject_address="ecash:qsubject00",
        issuance_date=datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        height=650000,
        hash="9f8e7d6c" + "00" * 28,
    )


def test_credential_immutable(published):
    with pytest.raises(AttributeError):
        published.expiration_block = 1


def test_claim_sequences_stored_as_tuples(published):
    assert published.claim_keys == ("name",)
    assert isinstance(published.claim_values, tuple)


def test_action_from_code():
    assert Action.from_code("U") is Action.UPDATE
    assert Credential(action="D").action is Action.DELETE
    with pytest.raises(UnsupportedAction):
        Action.from_code("X")


def test_action_field_presence():
    assert Action.CREATE.has_expiration and not Action.CREATE.has_reference
    assert Action.UPDATE.has_expiration and Action.UPDATE.has_reference
    assert Action.DELETE.has_reference and not Action.DELETE.has_expiration


def test_w3c_properties(published):
    assert published.context == [W3C_CONTEXT]
    assert published.type == ["VerifiableCredential"]
    assert published.issuer == "did:cert:qissuer000"
    assert published.credential_subject == {
        "id": "did:cert:qsubject00",
        "claims": {"name": "Alice"},
        "expirationBlock": 700000,
    }
    assert published.with_metadata(credential_type_name="EmailCredential").type == [
        "VerifiableCredential", "EmailCredential"
    ]


def test_representation_fields(published):
    rep = published.to_representation()
    assert set(rep) == {"context", "type", "id", "issuer", "issuanceDate", "credentialSubject"}
    assert rep["id"] == published.hash
    assert rep["issuanceDate"] == "2024-01-02T03:04:05+00:00"


def test_representation_drops_unknown_metadata():
    rep = Credential(expiration_block=1, claims={"a": "b"}).to_representation()
    assert "issuer" not in rep
    assert "issuanceDate" not in rep
    assert rep["credentialSubject"]["id"] is None


def test_representation_json_is_canonical(published):
    text = published.to_representation_json()
    assert json.loads(text) == published.to_representation()
    assert text == canonical_json_str(published.to_representation())
    assert text.index('"context"') < text.index('"type"')


def test_is_valid_at(published):
    assert published.is_valid_at(699999)
    assert published.is_valid_at(700000)
    assert not published.is_valid_at(700001)
    assert not Credential(action=Action.DELETE, reference_id="x").is_valid_at(0)


def test_address_to_did():
    assert address_to_did("ecash:qz2708636snqhsxu8wnlka78h6fdp77ar59jrf5035") == \
        "did:cert:qz2708636snqhsxu8wnlka78h6fdp77ar59jrf5035"
    assert address_to_did("qzbare") == "did:cert:qzbare"
    assert address_to_did(None) is None
    assert address_to_did("") is None


def test_did_to_address():
    assert did_to_address("did:cert:qzabc") == "ecash:qzabc"
    assert did_to_address("did:cert:qzabc", prefix="bitcoincash") == "bitcoincash:qzabc"
    with pytest.raises(ValueError):
        did_to_address("did:web:example.com")
    with pytest.raises(ValueError):
        did_to_address("did:cert:")


def test_script_hex_roundtrip():
    raw = b"\x6a\x04did\x00"
    assert script_to_hex(raw) == "6a0464696400"
    assert script_from_hex("6a0464696400") == raw
    assert script_from_hex("0x6A0464696400\n") == raw


def test_script_from_bad_hex():
    with pytest.raises(MalformedRecord):
        script_from_hex("6a0")
    with pytest.raises(MalformedRecord):
        script_from_hex("zz")


def test_canonical_json_sorting():
    canon = canonical_json({"z": 1, "a": "hello", "nested": {"b": 2, "a": 1}}).decode("utf-8")
    assert canon == '{"a":"hello","nested":{"a":1,"b":2},"z":1}'


def test_decoded_claims_are_read_only():
    decoded = decode(encode_script(Credential(expiration_block=1, claims={"name": "Alice"})))
    with pytest.raises(TypeError):
        decoded.claims["name"] = "Mallory"
    assert decoded.claims == {"name": "Alice"}
    assert decoded.claim_values == ("Alice",)


def test_caller_dict_is_copied():
    source = {"name": "Alice"}
    cred = Credential(expiration_block=1, claims=source)
    source["name"] = "Mallory"
    assert cred.claims["name"] == "Alice"


def test_credential_is_hashable(published):
    assert hash(Credential()) == hash(Credential())
    assert published in {published}


def test_unknown_action_code_on_construction():
    with pytest.raises(UnsupportedAction):
        Credential(action="X")


@pytest.mark.parametrize("value,empty", [
    (None, True), ("", True), ([], True), ({}, True),
    (0, False), (False, False), ("x", False), ([0], False),
])
def test_is_empty_claim(value, empty):
    assert is_empty_claim(value) is empty
