"""pkisig CLI application with Typer."""

import logging
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer

from pkisig import __version__
from pkisig.app.ports import VerificationStatus
from pkisig.app.verification_service import ManifestError
from pkisig.bootstrap import bootstrap_application
from pkisig.config import get_settings, set_settings
from pkisig.utils.cli_output import json_response
from pkisig.utils.crypto import decode_signature
from pkisig.x509.keys import KeyLoadError, load_public_key_file
from pkisig.x509.signature import Signature, UnsupportedAlgorithmError

app = typer.Typer(
    name="pkisig",
    help="Verify PKI signatures against public keys and certificates",
    add_completion=True,
    no_args_is_help=True,
)

EXIT_INVALID = 1
EXIT_ERROR = 2


class SignatureEncodingChoice(str, Enum):
    RAW = "raw"
    BASE64 = "base64"


_STATUS_COLORS = {
    VerificationStatus.VALID: typer.colors.GREEN,
    VerificationStatus.INVALID: typer.colors.RED,
    VerificationStatus.ERROR: typer.colors.YELLOW,
}


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"pkisig version {__version__}")
        raise typer.Exit()


def _fail(message: str, exc: BaseException | None = None) -> NoReturn:
    """Report ``message`` on stderr and exit with the error code."""
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=EXIT_ERROR) from exc


def _load_key(path: Path) -> Any:
    try:
        return load_public_key_file(path)
    except FileNotFoundError as exc:
        _fail(f"Error: Key file not found: {path}", exc)
    except KeyLoadError as exc:
        _fail(f"Error: {exc}", exc)


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=version_callback, is_eager=True),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
    data_dir: Annotated[
        Path | None,
        typer.Option("--data-dir", help="Override data directory"),
    ] = None,
) -> None:
    """pkisig - PKI signature verification."""
    settings = get_settings()
    if data_dir:
        settings.data_dir = data_dir
    set_settings(settings)

    logging.basicConfig(format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger().setLevel(logging.DEBUG if verbose else settings.log_level)


@app.command("algorithms")
def algorithms(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output results as JSON"),
    ] = False,
) -> None:
    """List digest algorithms usable for verification in this environment."""
    container = bootstrap_application()
    names = sorted(container.algorithm_registry.supported())

    if json_output:
        typer.echo(json_response("algorithms", 1, algorithms=names))
        return

    for name in names:
        typer.echo(name)


@app.command("verify")
def verify(
    data: Annotated[Path, typer.Argument(help="File holding the signed bytes")],
    signature: Annotated[Path, typer.Argument(help="File holding the signature value")],
    key: Annotated[
        Path,
        typer.Option("--key", "-k", help="Public key or certificate (PEM or DER)"),
    ],
    algorithm: Annotated[
        str | None,
        typer.Option("--algorithm", "-a", help="Digest name or OpenSSL numeric code"),
    ] = None,
    encoding: Annotated[
        SignatureEncodingChoice | None,
        typer.Option("--encoding", help="Signature file encoding"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output results as JSON"),
    ] = False,
) -> None:
    """Check whether KEY produced SIGNATURE over DATA.

    Exit codes: 0 valid, 1 invalid, 2 error.
    """
    container = bootstrap_application()
    settings = container.settings

    requested: str | int = algorithm or settings.default_algorithm
    if isinstance(requested, str) and requested.isascii() and requested.isdigit():
        requested = int(requested)

    try:
        signed_bytes = data.read_bytes()
        signature_bytes = decode_signature(
            signature.read_bytes(),
            encoding.value if encoding is not None else settings.signature_encoding,
        )
    except OSError as exc:
        _fail(f"Error: {exc}", exc)
    except ValueError as exc:
        _fail(f"Error: Cannot decode signature {signature}: {exc}", exc)

    public_key = _load_key(key)

    try:
        sig = Signature(
            signed_bytes,
            signature_bytes,
            requested,
            registry=container.algorithm_registry,
        )
    except UnsupportedAlgorithmError as exc:
        _fail(f"Error: {exc}", exc)

    outcome = sig.verify(public_key)

    if json_output:
        typer.echo(
            json_response(
                "verification",
                1,
                data=str(data),
                signature=str(signature),
                algorithm=sig.algorithm,
                status=outcome.status.value,
                valid=outcome.is_valid,
                message=outcome.message,
            )
        )
    elif outcome.status is VerificationStatus.VALID:
        typer.secho("Signature is valid", fg=typer.colors.GREEN)
    elif outcome.status is VerificationStatus.INVALID:
        typer.secho("Signature is NOT valid for this key", fg=typer.colors.RED)
    else:
        typer.secho(f"Verification error: {outcome.message}", fg=typer.colors.YELLOW, err=True)

    if outcome.status is VerificationStatus.INVALID:
        raise typer.Exit(code=EXIT_INVALID)
    if outcome.status is VerificationStatus.ERROR:
        raise typer.Exit(code=EXIT_ERROR)


@app.command("batch")
def batch(
    manifest: Annotated[Path, typer.Argument(help="JSONL manifest of signatures")],
    key: Annotated[
        Path,
        typer.Option("--key", "-k", help="Public key or certificate (PEM or DER)"),
    ],
    report: Annotated[
        Path | None,
        typer.Option("--report", help="Write JSONL report here (defaults to data dir)"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output results as JSON"),
    ] = False,
) -> None:
    """Verify every signature listed in MANIFEST against KEY.

    Exits 0 only when every signature is valid.
    """
    container = bootstrap_application()
    service = container.verification_service

    if not manifest.exists():
        _fail(f"Error: Manifest not found: {manifest}")

    public_key = _load_key(key)

    try:
        signatures = service.load_manifest(manifest)
    except (ManifestError, UnsupportedAlgorithmError) as exc:
        _fail(f"Error: {exc}", exc)

    records = service.verify_all(signatures, public_key)
    report_path = report if report is not None else container.settings.get_report_path()
    service.write_report(records, report_path)

    valid_count = sum(1 for record in records if record.status is VerificationStatus.VALID)

    if json_output:
        typer.echo(
            json_response(
                "batch_verification",
                1,
                manifest=str(manifest),
                report=str(report_path),
                total=len(records),
                valid=valid_count,
                results=[record.model_dump(mode="json") for record in records],
            )
        )
    else:
        for record in records:
            line = f"[{record.status.value}] {record.id}"
            if record.message:
                line += f": {record.message}"
            typer.secho(line, fg=_STATUS_COLORS[record.status])
        typer.secho(f"{valid_count}/{len(records)} signatures valid", fg=typer.colors.BLUE)
        typer.echo(f"Report written to {report_path}")

    if valid_count != len(records):
        raise typer.Exit(code=EXIT_INVALID)


if __name__ == "__main__":
    app()
