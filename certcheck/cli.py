import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from certcheck.core.exceptions import CertCheckError

console = Console()
error_console = Console(stderr=True)
cli_app = typer.Typer(name="certcheck", help="Validate certificate directories against the trust authority")


def _fatal(error: CertCheckError) -> None:
    error_console.print(f"Fatal error: {error.message}", markup=False, highlight=False, soft_wrap=True)
    raise typer.Exit(code=1)


@cli_app.command("run")
def run_checks(
    client_id: str = typer.Option(None, "--client-id", "-c", help="Client ID"),
    client_secret: str = typer.Option(None, "--client-secret", "-s", help="Client secret"),
    fi_reference_id: str = typer.Option(None, "--fi-ref", "-f", help="FI reference ID"),
    check_url: str = typer.Option(None, "--check-url", "-u", help="Check URL"),
    email_to: str = typer.Option(None, "--email-to", "-m", help="Addressee e-mail"),
    email_user: str = typer.Option(None, "--email-user", help="User name for e-mail server"),
    email_password: str = typer.Option(None, "--email-pass", help="User password for e-mail server"),
    email_server: str = typer.Option(None, "--email-server", help="E-mail server address"),
    email_port: int = typer.Option(None, "--email-port", help="E-mail server port"),
    no_ssl: bool = typer.Option(None, "--no-ssl/--ssl", help="Do not use TLS to e-mail server"),
    initial_dir: str = typer.Option(None, "--initial-dir", "-i", help="Certificates initial directory"),
    regular_dir: str = typer.Option(None, "--regular-dir", "-r", help="Certificates regular directory"),
    invalid_dir: str = typer.Option(None, "--error-dir", "-e", help="Invalid certificates directory"),
    keep_failed: bool = typer.Option(None, "--keep-failed/--no-keep-failed", "-x", help="Keep failed certificates"),
    log_level: str = typer.Option(None, "--log-level", help="debug, info, warning or error"),
):
    """Check the regular directory, then the initial directory.

    Options not given on the command line are read from CERTCHECK_* environment
    variables or a .env file.
    """
    from certcheck.config import load_settings
    from certcheck.main import configure_logging, run

    try:
        settings = load_settings(
            certcheck_client_id=client_id,
            certcheck_client_secret=client_secret,
            certcheck_fi_reference_id=fi_reference_id,
            certcheck_check_url=check_url,
            certcheck_email_to=email_to,
            certcheck_email_user=email_user,
            certcheck_email_password=email_password,
            certcheck_email_server=email_server,
            certcheck_email_port=email_port,
            certcheck_email_no_ssl=no_ssl,
            certcheck_initial_dir=initial_dir,
            certcheck_regular_dir=regular_dir,
            certcheck_invalid_dir=invalid_dir,
            certcheck_keep_failed=keep_failed,
            certcheck_log_level=log_level,
        )
    except CertCheckError as e:
        _fatal(e)

    configure_logging(settings.certcheck_log_level)

    try:
        report = asyncio.run(run(settings))
    except CertCheckError as e:
        _fatal(e)

    if report.notification_failures:
        error_console.print(
            f"{len(report.notification_failures)} notification(s) could not be delivered.",
            markup=False,
            highlight=False,
        )
        raise typer.Exit(code=1)


@cli_app.command("inspect")
def inspect_certificate(
    path: Path = typer.Argument(help="Certificate file (PEM or DER)"),
):
    """Show what would be sent to the trust authority for one file."""
    from certcheck.services.encoder import CertificateEncoder

    try:
        info = CertificateEncoder().describe(path)
    except CertCheckError as e:
        _fatal(e)

    table = Table(title=path.name)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Subject", info["subject"])
    table.add_row("Issuer", info["issuer"])
    table.add_row("Serial", info["serial_number"])
    table.add_row("Not valid after", info["not_valid_after"])
    table.add_row("SHA-256", info["fingerprint_sha256"])
    table.add_row("Encoded length", str(info["encoded_length"]))
    console.print(table)


def main():
    cli_app()


if __name__ == "__main__":
    main()
