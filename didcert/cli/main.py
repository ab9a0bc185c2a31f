# didcert/cli/main.py
"""
CLI for inspecting, encoding and fetching did/cert credential records.
"""

import os
import json
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from didcert.core.types import Action, Credential
from didcert.core.encoding import script_from_hex, script_to_hex
from didcert.core.errors import DidCertError
from didcert.core.logging import setup_logging
from didcert.codec import decode, encode_script, is_protocol_record
from didcert.source import TransactionSource
from didcert.verify.verifier import CredentialVerifier

app = typer.Typer(
    name="didcert",
    help="Inspect, encode and fetch did/cert verifiable credential records",
    add_completion=False,
    no_args_is_help=True,
)

console = Console()


def get_log_level(flag: Optional[str] = None) -> str:
    """Resolve log level: --log-level, then DIDCERT_LOG_LEVEL, then warning."""
    return flag or os.environ.get("DIDCERT_LOG_LEVEL") or "warning"


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in ("1", "true", "yes")


def parse_claims(pairs: List[str]) -> dict:
    """key=value pairs; values that parse as JSON keep their type, the rest stay strings."""
    claims = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Claim must be key=value, got '{pair}'")
        try:
            claims[key] = json.loads(raw)
        except json.JSONDecodeError:
            claims[key] = raw
    return claims


def split_keys(keys: Optional[str]) -> List[str]:
    return [k.strip() for k in keys.split(",") if k.strip()] if keys else []


def render_credential(credential: Credential, title: str = "Credential") -> None:
    table = Table(title=title)
    table.add_column("Field")
    table.add_column("Value")

    table.add_row("action", credential.action.name)
    table.add_row("type code", escape(credential.credential_type_code))
    if credential.reference_id is not None:
        table.add_row("reference id", escape(credential.reference_id))
    if credential.expiration_block is not None:
        table.add_row("expiration block", str(credential.expiration_block))
    if credential.issuer:
        table.add_row("issuer", credential.issuer)
    if credential.subject_id:
        table.add_row("subject", credential.subject_id)
    if credential.issuance_date:
        table.add_row("issued", credential.issuance_date.isoformat())
    if credential.height is not None:
        table.add_row("height", str(credential.height))
    for key, value in credential.claims.items():
        table.add_row(escape(f"claim: {key}"), escape(json.dumps(value, ensure_ascii=False)))

    console.print(table)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Log level (overrides DIDCERT_LOG_LEVEL env var)",
    ),
    log_json: bool = typer.Option(False, "--log-json", help="Emit JSON log lines"),
):
    """Work with did/cert credential records."""
    setup_logging(get_log_level(log_level), json_format=log_json or _env_flag("DIDCERT_LOG_JSON"))


@app.command()
def inspect(
    script_hex: str = typer.Argument(..., help="Hex-encoded OP_RETURN script"),
    keys: Optional[str] = typer.Option(None, "--keys", "-k", help="Comma-separated claim keys for positional payloads"),
):
    """Validate and decode a record script."""
    try:
        script = script_from_hex(script_hex)
    except DidCertError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        raise typer.Exit(1)

    if not is_protocol_record(script):
        console.print("[red]Not a did/cert record[/]")
        console.print("  Expected OP_RETURN followed by 'did\\0' and 'cert' pushes.")
        raise typer.Exit(1)

    try:
        credential = decode(script, split_keys(keys))
    except DidCertError as e:
        console.print(f"[red]Corrupt record: {escape(str(e))}[/]")
        raise typer.Exit(1)

    render_credential(credential, title="Decoded Record")


@app.command()
def encode(
    action: str = typer.Argument(..., help="create, update or delete"),
    type_code: str = typer.Option("0000", "--type", "-t", help="4-character credential type code"),
    expiration: Optional[int] = typer.Option(None, "--expiration", "-e", help="Expiration block height"),
    reference: Optional[str] = typer.Option(None, "--reference", "-r", help="Reference id of the record to update/delete"),
    claim: List[str] = typer.Option([], "--claim", "-c", help="Claim as key=value (repeatable)"),
    positional: bool = typer.Option(False, "--positional", help="Serialize claims as a JSON array"),
):
    """Encode a record and print the OP_RETURN script as hex."""
    actions = {a.name.lower(): a for a in Action}
    if action.lower() not in actions:
        console.print(f"[red]Unknown action '{action}'. Valid: {', '.join(actions)}[/]")
        raise typer.Exit(1)

    credential = Credential(
        action=actions[action.lower()],
        credential_type_code=type_code,
        reference_id=reference,
        expiration_block=expiration,
        claims=parse_claims(claim),
        value_notation=positional,
    )

    try:
        script = encode_script(credential)
    except DidCertError as e:
        console.print(f"[red]Cannot encode record: {escape(str(e))}[/]")
        raise typer.Exit(1)

    typer.echo(script_to_hex(script))


@app.command()
def fetch(
    tx_hash: str = typer.Argument(..., help="Transaction hash"),
    api_url: Optional[str] = typer.Option(None, "--api-url", help="Indexer URL (overrides DIDCERT_API_URL env var)"),
    keys: Optional[str] = typer.Option(None, "--keys", "-k", help="Comma-separated claim keys for positional payloads"),
    table: bool = typer.Option(False, "--table", help="Show a table instead of JSON"),
):
    """Fetch a transaction and print its credential."""
    try:
        with TransactionSource(api_url=api_url) as source:
            credential = source.fetch_credential(tx_hash, split_keys(keys))
    except DidCertError as e:
        console.print(f"[red]Failed to load credential from '{tx_hash}': {escape(str(e))}[/]")
        raise typer.Exit(1)

    if table:
        render_credential(credential)
    else:
        typer.echo(credential.to_representation_json())


@app.command()
def valid(
    tx_hash: str = typer.Argument(..., help="Transaction hash"),
    api_url: Optional[str] = typer.Option(None, "--api-url", help="Indexer URL (overrides DIDCERT_API_URL env var)"),
):
    """Check a credential against the current chain height."""
    try:
        with TransactionSource(api_url=api_url) as source:
            credential = source.fetch_credential(tx_hash)
            height = source.fetch_chain_height()
    except DidCertError as e:
        console.print(f"[red]Failed to check credential '{tx_hash}': {escape(str(e))}[/]")
        raise typer.Exit(1)

    result = CredentialVerifier().verify(credential, height=height)
    if result.is_valid:
        console.print(f"[green]✓ Credential '{tx_hash}' is valid[/]")
        console.print(f"  Expires at block {credential.expiration_block}, chain is at {height}")
    else:
        console.print(f"[red]✗ Credential '{tx_hash}' is not valid[/]")
        for failure in result.failures:
            label = escape(f"[{failure.field}]")
            console.print(f"  • {label} {failure.category}: {escape(failure.message)}")
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
