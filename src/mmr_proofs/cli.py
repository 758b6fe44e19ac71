#!/usr/bin/env python3
"""
MMR Proofs CLI

Command-line interface for verifying Merkle Mountain Range inclusion proofs.
Provides script-friendly commands whose exit status is the verdict:
0 when the proof is valid, 1 when it is invalid, 2 on malformed input.
"""

import json
import logging
import sys
from dataclasses import replace
from typing import Any, Dict, Optional, Tuple

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .api.client import VerifierAPIClient, VerifierAPIError
from .api.rest_api import run_server
from .api.verification_service import VerificationService, VerificationServiceError
from .config import get_settings
from .mmr import ParityConvention, PeakMatchMode
from .models.api_models import VerifyRequest
from .utils.hex_helpers import parse_field_value
from .wire import DecodeError, encode_request, write_program_inputs

# Configure rich console
console = Console()
logger = logging.getLogger(__name__)

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_MALFORMED = 2


class MalformedInputError(click.ClickException):
    """Input that cannot be decoded or validated; exits with status 2."""
    exit_code = EXIT_MALFORMED


def setup_logging(verbose: bool = False):
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def load_proof_file(json_file: str) -> Dict[str, Any]:
    """Load a structured proof (VerifyRequest layout) from a JSON file."""
    try:
        with open(json_file, "r", encoding="utf-8") as f:
            payload = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedInputError(f"{json_file} is not valid JSON: {e}")

    if not isinstance(payload, dict):
        raise MalformedInputError(
            f"{json_file} must hold a JSON object, got {type(payload).__name__}"
        )
    return payload


def print_verdict(result: Dict[str, Any], format_output: str = "table"):
    """Print a verification verdict in various formats."""
    if format_output == "json":
        console.print_json(json.dumps(result))
        return

    table = Table(title="Proof Verification")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green" if result["valid"] else "red")

    table.add_row("Verdict", "✅ Valid" if result["valid"] else "❌ Invalid")
    table.add_row("Result Code", str(result["result_code"]))
    table.add_row("Scheme", "wide (keccak)" if result["mode"] == 1 else "compact (poseidon)")
    table.add_row("Reason", result["reason"])

    console.print(table)


def build_service(legacy_anywhere: bool, parity: Optional[str]) -> VerificationService:
    """Create a VerificationService, applying command-line overrides to the settings."""
    settings = get_settings()
    overrides = {}
    if legacy_anywhere:
        overrides["peak_match"] = PeakMatchMode.ANYWHERE
    if parity:
        overrides["convention"] = ParityConvention(parity)
    if overrides:
        settings = replace(settings, **overrides)
    return VerificationService(settings)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx, verbose: bool):
    """
    MMR Proofs CLI - Verify Merkle Mountain Range inclusion proofs.

    Proofs are verified under the wide Keccak scheme (mode 1) or the
    compact Poseidon scheme (mode 2).
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@cli.command()
@click.argument("json_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--expected-leaf", type=str, help="Leaf the proof must be for (hex string)")
@click.option(
    "--legacy-anywhere",
    is_flag=True,
    help="Accept the computed peak at any position in the peak set (legacy compatibility)",
)
@click.option(
    "--parity",
    type=click.Choice([c.value for c in ParityConvention]),
    help="Parity convention the sibling path was generated with",
)
@click.option(
    "--remote", type=str,
    help="Verify through a remote verifier API at this URL (the server's settings apply)",
)
@click.option(
    "--format", "format_output",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
@click.pass_context
def verify(
    ctx,
    json_file: str,
    expected_leaf: Optional[str],
    legacy_anywhere: bool,
    parity: Optional[str],
    remote: Optional[str],
    format_output: str,
):
    """
    Verify a structured proof from a JSON file.

    JSON_FILE holds mode, root, leaf, leaf_index, mmr_size, siblings and
    peaks, with digests as 0x hex strings.
    """
    if remote and (legacy_anywhere or parity):
        raise click.UsageError(
            "--legacy-anywhere and --parity cannot be combined with --remote; "
            "the remote server's settings apply"
        )

    payload = load_proof_file(json_file)
    if expected_leaf:
        payload["expected_leaf"] = expected_leaf

    try:
        if remote:
            result = VerifierAPIClient(remote).verify(payload)
        else:
            result = build_service(legacy_anywhere, parity).verify(payload)
    except VerifierAPIError as e:
        if e.status_code in (400, 422):
            raise MalformedInputError(str(e))
        raise click.ClickException(str(e))
    except VerificationServiceError as e:
        raise click.ClickException(str(e))
    except ValueError as e:
        raise MalformedInputError(f"Invalid proof file: {e}")

    print_verdict(result, format_output)
    ctx.exit(EXIT_VALID if result["valid"] else EXIT_INVALID)


@cli.command()
@click.argument("fields", nargs=-1, required=True)
@click.option(
    "--legacy-anywhere",
    is_flag=True,
    help="Accept the computed peak at any position in the peak set (legacy compatibility)",
)
@click.option(
    "--format", "format_output",
    type=click.Choice(["table", "json"]),
    default="table",
    help="Output format",
)
@click.pass_context
def decode(ctx, fields: Tuple[str, ...], legacy_anywhere: bool, format_output: str):
    """
    Decode and verify an encoded request.

    FIELDS are the slots of the encoded request as decimal or 0x hex values.
    """
    try:
        result = build_service(legacy_anywhere, None).verify_raw(list(fields))
    except DecodeError as e:
        raise MalformedInputError(f"Decode error: {e}")
    except VerificationServiceError as e:
        raise click.ClickException(str(e))

    print_verdict(result, format_output)
    ctx.exit(EXIT_VALID if result["valid"] else EXIT_INVALID)


@cli.command()
@click.argument("json_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False),
    help="Write prover input files (input.cairo1.json / input.cairo1.txt) here",
)
def encode(json_file: str, output_dir: Optional[str]):
    """Encode a structured proof from a JSON file into its flat field sequence."""
    payload = load_proof_file(json_file)
    try:
        request = VerificationService(get_settings()).build_request(VerifyRequest(**payload))
    except ValueError as e:
        raise MalformedInputError(f"Invalid proof file: {e}")

    fields = encode_request(request)
    if output_dir:
        json_path, txt_path = write_program_inputs(fields, output_dir)
        console.print(f"[green]Wrote {json_path} and {txt_path}[/green]")
    else:
        click.echo(" ".join(str(value) for value in fields))


@cli.command()
@click.argument("recipient", type=str)
@click.argument("amount", type=int)
@click.argument("nonce", type=int)
@click.argument("timestamp", type=int)
def commitment(recipient: str, amount: int, nonce: int, timestamp: int):
    """
    Compute the Poseidon commitment hash of a deposit.

    RECIPIENT is the L2 address as decimal or 0x hex.
    """
    try:
        result = VerificationService(get_settings()).compute_commitment(
            parse_field_value(recipient), amount, nonce, timestamp
        )
    except ValueError as e:
        raise MalformedInputError(str(e))

    click.echo(json.dumps(result, indent=2))


@cli.command()
@click.option("--host", default=None, help="Host to bind to")
@click.option("--port", default=None, type=int, help="Port to bind to")
@click.option("--dev", is_flag=True, help="Enable development mode with auto-reload")
@click.pass_context
def serve(ctx, host: Optional[str], port: Optional[int], dev: bool):
    """Start the REST API server."""
    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port
    try:
        console.print(
            Panel(
                f"Starting MMR Proofs API Server\n\n"
                f"🚀 Server: http://{host}:{port}\n"
                f"📖 Docs: http://{host}:{port}/docs\n"
                f"❤️ Health: http://{host}:{port}/health\n\n"
                f"Press Ctrl+C to stop",
                title="API Server",
                border_style="green",
            )
        )

        run_server(host=host, port=port, dev=dev)

    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped by user[/yellow]")
    except Exception as e:
        console.print(f"[red]Server error: {e}[/red]", style="bold")
        if ctx.obj.get("verbose"):
            console.print_exception()
        sys.exit(1)


@cli.command()
@click.option("--api-url", envvar="MMR_PROOFS_API_URL", help="Verifier API URL")
def health(api_url: Optional[str]):
    """Check the health of a verifier API."""
    client = VerifierAPIClient(api_url)
    api_status = client.health_check()

    table = Table(title="System Health Check")
    table.add_column("Component", style="cyan")
    table.add_column("Status", style="green")
    table.add_column("Details")

    table.add_row(
        "Verifier API", "✅ Healthy" if api_status else "❌ Unhealthy", client.base_url
    )
    console.print(table)

    if not api_status:
        sys.exit(1)


if __name__ == "__main__":
    cli()
