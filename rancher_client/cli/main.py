"""Command line entry point for issuing requests to the Rancher API."""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import typer
from rich.console import Console
from rich.json import JSON

from rancher_client._version import __version__
from rancher_client.config.settings import ClientSettings, create_client
from rancher_client.core.exceptions import ConfigurationError, RancherClientError
from rancher_client.core.logging import setup_logging
from rancher_client.http.request import RancherHttpRequest


app = typer.Typer(
    rich_markup_mode="rich",
    add_completion=False,
    no_args_is_help=True,
    pretty_exceptions_enable=False,
)

err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"rancher-client {__version__}")
        raise typer.Exit()


@app.callback()
def app_main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to a TOML configuration file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        help="Override the configured log level (DEBUG, INFO, WARNING, ERROR)",
    ),
    insecure: bool | None = typer.Option(
        None,
        "--insecure/--verify",
        help="Skip TLS certificate verification.",
    ),
) -> None:
    """Talk to the Rancher management API with the configured credentials."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["log_level"] = log_level
    ctx.obj["insecure"] = insecure


def _load_settings(ctx: typer.Context) -> ClientSettings:
    overrides: dict[str, Any] = {}
    if ctx.obj.get("log_level") is not None:
        overrides["logging"] = {"level": ctx.obj["log_level"]}
    if ctx.obj.get("insecure") is not None:
        overrides["insecure"] = ctx.obj["insecure"]

    try:
        settings = ClientSettings.from_config(
            config_path=ctx.obj.get("config_path"), **overrides
        )
    except ConfigurationError as e:
        err_console.print(f"[bold red]Configuration error:[/bold red] {e}")
        raise typer.Exit(2) from e

    log_format = settings.logging.format
    if log_format == "auto":
        log_format = "rich" if sys.stderr.isatty() else "json"
    setup_logging(
        json_logs=log_format == "json",
        log_level_name=settings.logging.level,
        log_file=settings.logging.file,
        console_width=settings.logging.console_width,
    )
    return settings


def _parse_headers(values: list[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise typer.BadParameter(
                f"Expected 'Name: value', got {raw!r}", param_hint="--header"
            )
        headers[name.strip()] = value.strip()
    return headers


def _parse_body(data: str | None) -> Any:
    if data is None:
        return None
    if data.startswith("@"):
        try:
            data = Path(data[1:]).read_text(encoding="utf-8")
        except OSError as e:
            raise typer.BadParameter(str(e), param_hint="--data") from e
    try:
        return json.loads(data)
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"Invalid JSON: {e}", param_hint="--data") from e


@app.command()
def request(
    ctx: typer.Context,
    method: str = typer.Argument(..., help="HTTP method, e.g. GET or POST"),
    endpoint: str = typer.Argument(
        ..., help="Absolute URL, or a path joined onto the configured api_url"
    ),
    data: str | None = typer.Option(
        None,
        "--data",
        "-d",
        help="JSON request body, or @file to read it from a file",
    ),
    header: list[str] = typer.Option(
        [],
        "--header",
        "-H",
        help="Extra header as 'Name: value' (repeatable)",
    ),
    show_status: bool = typer.Option(
        False,
        "--status",
        "-s",
        help="Print the status line and elapsed time to stderr.",
    ),
    fail: bool = typer.Option(
        False,
        "--fail",
        "-f",
        help="Exit with status 22 when the server answers with 4xx or 5xx.",
    ),
) -> None:
    """
    Send one request and print the raw response body.

    Examples:
        rancher-client request GET /v3/clusters
        rancher-client request POST /v3/tokens -d '{"ttl": 3600}'
    """
    body = _parse_body(data)
    headers = _parse_headers(header)
    settings = _load_settings(ctx)

    try:
        client = create_client(settings)
    except ConfigurationError as e:
        err_console.print(f"[bold red]Configuration error:[/bold red] {e}")
        raise typer.Exit(2) from e

    rancher_request = RancherHttpRequest(
        method=method.upper(),
        endpoint=client.url_for(endpoint),
        body=body,
        headers=headers,
    )

    try:
        response = asyncio.run(client.execute(rancher_request))
    except RancherClientError as e:
        err_console.print(f"[bold red]Request failed:[/bold red] {e.message}")
        raise typer.Exit(1) from e

    if show_status:
        err_console.print(
            f"{response.status_code} {response.reason_phrase} "
            f"({response.elapsed_ms:.0f} ms, {response.redirects} redirects)"
        )

    typer.echo(response.content, nl=False)

    if fail and response.status_code >= 400:
        raise typer.Exit(22)


@app.command("config")
def show_config(ctx: typer.Context) -> None:
    """Show the resolved configuration with secrets masked."""
    settings = _load_settings(ctx)
    Console().print(JSON(json.dumps(settings.model_dump_safe())))


def main() -> None:
    """Entry point for the CLI application."""
    app()


if __name__ == "__main__":
    main()
