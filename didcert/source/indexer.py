# didcert/source/indexer.py
"""
Transaction lookup against a bcash-style indexer REST API.

    GET /tx/<hash>  -> {"outputs": [{"script": hex, ...}, {"address": ...}],
                        "inputs":  [{"coin": {"address": ...}}],
                        "time": unix, "height": int}
    GET /           -> {"chain": {"height": int}}
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, Sequence

import httpx

from didcert.core.types import Credential
from didcert.core.encoding import script_from_hex
from didcert.core.errors import NotAProtocolRecord, TransactionSourceError
from didcert.codec.decoder import decode
from didcert.codec.validator import is_protocol_record

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://ecash.badger.cash:8332"
DEFAULT_TIMEOUT = 10.0  # seconds
REFERENCE_ID_LENGTH = 8


def resolve_api_url(api_url: Optional[str] = None) -> str:
    """--api-url flag, then DIDCERT_API_URL, then the public indexer."""
    return (api_url or os.environ.get("DIDCERT_API_URL") or DEFAULT_API_URL).rstrip("/")


def resolve_timeout(timeout: Optional[float] = None) -> float:
    if timeout is not None:
        return timeout
    env_timeout = os.environ.get("DIDCERT_TIMEOUT")
    if env_timeout:
        try:
            return float(env_timeout)
        except ValueError:
            logger.warning("Ignoring non-numeric DIDCERT_TIMEOUT=%r", env_timeout)
    return DEFAULT_TIMEOUT


@dataclass(frozen=True)
class TransactionInfo:
    """The parts of a transaction a did/cert record needs."""

    hash: str
    script: bytes                   # output 0, decoded from hex
    issuer_address: Optional[str]   # input 0's coin
    subject_address: Optional[str]  # output 1
    time: Optional[int]             # unix seconds
    height: Optional[int]

    @property
    def issuance_date(self) -> Optional[datetime]:
        if self.time is None:
            return None
        return datetime.fromtimestamp(self.time, tz=timezone.utc)


def _parse_transaction(tx_hash: str, data: Any) -> TransactionInfo:
    try:
        outputs = data["outputs"]
        script_hex = outputs[0]["script"]
    except (KeyError, IndexError, TypeError) as e:
        raise TransactionSourceError(f"Transaction {tx_hash} has no output script: {e}") from e

    if not isinstance(script_hex, str):
        raise TransactionSourceError(f"Transaction {tx_hash} output script is not a hex string")

    try:
        inputs = data.get("inputs") or []
        coin = (inputs[0].get("coin") or {}) if inputs else {}
        subject = outputs[1].get("address") if len(outputs) > 1 else None
        issuer = coin.get("address")
    except (AttributeError, TypeError) as e:
        raise TransactionSourceError(f"Transaction {tx_hash} has malformed inputs or outputs: {e}") from e

    return TransactionInfo(
        hash=tx_hash,
        script=script_from_hex(script_hex),
        issuer_address=issuer,
        subject_address=subject,
        time=data.get("time"),
        height=data.get("height"),
    )


class TransactionSource:
    """
    Synchronous indexer client. No retries: a failed lookup raises
    TransactionSourceError and the caller decides what to do.
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_url = resolve_api_url(api_url)
        self.timeout = resolve_timeout(timeout)
        self._client = httpx.Client(
            base_url=self.api_url,
            timeout=httpx.Timeout(self.timeout),
            transport=transport,
        )

    def __enter__(self) -> "TransactionSource":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def _get_json(self, path: str) -> Any:
        try:
            response = self._client.get(path)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Indexer returned %s for %s", e.response.status_code, path)
            raise TransactionSourceError(
                f"Indexer returned HTTP {e.response.status_code} for {path}"
            ) from e
        except httpx.HTTPError as e:
            logger.warning("Indexer request failed for %s: %s", path, e)
            raise TransactionSourceError(f"Indexer request failed for {path}: {e}") from e
        except ValueError as e:
            raise TransactionSourceError(f"Indexer response for {path} is not JSON") from e

    def fetch_transaction(self, tx_hash: str) -> TransactionInfo:
        logger.info("Fetching transaction %s", tx_hash, extra={"tx_hash": tx_hash})
        data = self._get_json(f"/tx/{tx_hash}")
        return _parse_transaction(tx_hash, data)

    def fetch_chain_height(self) -> int:
        data = self._get_json("/")
        try:
            return int(data["chain"]["height"])
        except (KeyError, TypeError, ValueError) as e:
            raise TransactionSourceError(f"Indexer status has no chain height: {e}") from e

    def fetch_credential(self, tx_hash: str, known_keys: Sequence[str] = ()) -> Credential:
        """
        Fetch a transaction and decode the credential carried in output 0,
        with issuer, subject, issuance date, height and hash merged in.
        """
        tx = self.fetch_transaction(tx_hash)
        if not is_protocol_record(tx.script):
            logger.warning("Output 0 of %s is not a did/cert record", tx_hash, extra={"tx_hash": tx_hash})
            raise NotAProtocolRecord(f"Transaction {tx_hash} does not carry a did/cert record")

        credential = decode(tx.script, known_keys)
        return credential.with_metadata(
            issuer_address=tx.issuer_address,
            subject_address=tx.subject_address,
            issuance_date=tx.issuance_date,
            height=tx.height,
            hash=tx_hash,
            # create records are referenced by their tx hash prefix
            reference_id=credential.reference_id or tx_hash[:REFERENCE_ID_LENGTH],
        )

    def is_credential_valid(self, credential: Credential) -> bool:
        return credential.is_valid_at(self.fetch_chain_height())
