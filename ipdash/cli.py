"""CLI entry point and orchestration for ipdash."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import sys
from typing import Optional

import click
from rich.console import Console
from rich.logging import RichHandler

from ipdash import __version__
from ipdash.config import (
    DEFAULT_HOST,
    DEFAULT_LOG_LEVEL,
    DEFAULT_PORT,
    DEFAULT_TIMEOUT,
    ENV_PREFIX,
    IPREGISTRY_ENDPOINT,
    IPREGISTRY_KEY,
)
from ipdash.models import DashboardConfig, IpRecord, PingResult

LOG_LEVELS = ["critical", "error", "warning", "info", "debug"]


def _env(name: str) -> str:
    return f"{ENV_PREFIX}_{name}"


def configure_logging(level: str) -> None:
    """Send log records to stderr through rich so stdout stays clean for exports."""
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )


def _warn_on_proxy(quiet: bool) -> None:
    if quiet:
        return
    for var in ("HTTP_PROXY", "HTTPS_PROXY", "http_proxy", "https_proxy"):
        if os.environ.get(var):
            from ipdash.display import render_warning
            render_warning(f"Proxy detected ({var}={os.environ[var]}) — latency includes the proxy hop")
            break


timeout_option = click.option(
    "-t", "--timeout", default=DEFAULT_TIMEOUT, envvar=_env("TIMEOUT"),
    help="Upstream request timeout in seconds", show_default=True,
)
key_option = click.option(
    "--ipregistry-key", default=IPREGISTRY_KEY, envvar=_env("IPREGISTRY_KEY"),
    help="ipregistry API key", show_default=True,
)
endpoint_option = click.option(
    "--ipregistry-endpoint", default=IPREGISTRY_ENDPOINT, envvar=_env("IPREGISTRY_ENDPOINT"),
    help="ipregistry API base URL", show_default=True,
)


@click.group()
@click.version_option(version=__version__)
def main() -> None:
    """ipdash: IP intelligence and DNS-over-HTTPS latency dashboard."""


@main.command()
@click.option("--host", default=DEFAULT_HOST, envvar=_env("HOST"), help="Bind address", show_default=True)
@click.option("--port", default=DEFAULT_PORT, envvar=_env("PORT"), help="Bind port", show_default=True)
@timeout_option
@key_option
@endpoint_option
@click.option("--http2/--no-http2", default=True, help="Use HTTP/2 for upstream requests", show_default=True)
@click.option(
    "--log-level", default=DEFAULT_LOG_LEVEL, envvar=_env("LOG_LEVEL"),
    type=click.Choice(LOG_LEVELS, case_sensitive=False), show_default=True,
)
def serve(
    host: str,
    port: int,
    timeout: float,
    ipregistry_key: str,
    ipregistry_endpoint: str,
    http2: bool,
    log_level: str,
) -> None:
    """Run the dashboard web server."""
    import uvicorn

    from ipdash.server import create_app

    config = DashboardConfig(
        host=host,
        port=port,
        timeout=timeout,
        ipregistry_endpoint=ipregistry_endpoint,
        ipregistry_key=ipregistry_key,
        http2=http2,
        log_level=log_level.lower(),
    )
    configure_logging(config.log_level)
    _warn_on_proxy(quiet=False)

    uvicorn.run(
        create_app(config),
        host=config.host,
        port=config.port,
        log_level=config.log_level,
        log_config=None,
    )


@main.command()
@click.option("-p", "--target", "targets", multiple=True, help="Resolver id to ping (repeatable) [default: all]")
@click.option("--url", default=None, help="Ping a custom DoH URL instead of the built-in resolvers")
@timeout_option
@click.option("--json", "json_output", is_flag=True, help="Output JSON to stdout")
@click.option("--csv", "csv_output", is_flag=True, help="Output CSV to stdout")
@click.option("-o", "--output", default=None, help="Write results to file")
@click.option("-v", "--verbose", is_flag=True, help="Log each request")
def ping(
    targets: tuple[str, ...],
    url: Optional[str],
    timeout: float,
    json_output: bool,
    csv_output: bool,
    output: Optional[str],
    verbose: bool,
) -> None:
    """Measure latency to public DNS-over-HTTPS resolvers."""
    from ipdash.display import render_error
    from ipdash.targets import create_custom_target, get_target, list_targets

    configure_logging("debug" if verbose else "warning")
    quiet = json_output or csv_output
    _warn_on_proxy(quiet)

    if url:
        selected = [create_custom_target(url)]
    elif targets:
        try:
            selected = [get_target(t.strip()) for t in targets]
        except ValueError as exc:
            render_error(str(exc))
            sys.exit(1)
    else:
        selected = list_targets()

    try:
        results = asyncio.run(_run_pings(selected, timeout))
    except KeyboardInterrupt:
        if not quiet:
            from ipdash.display import console
            console.print("\n[yellow]Interrupted.[/yellow]")
        sys.exit(130)

    _handle_ping_output(results, json_output, csv_output, output)

    if not any(r.ok for r in results):
        sys.exit(1)


async def _run_pings(selected: list, timeout: float) -> list[PingResult]:
    from ipdash.engine import build_client, measure_all

    async with build_client(timeout) as client:
        return await measure_all(client, timeout, selected)


def _handle_ping_output(
    results: list[PingResult],
    json_output: bool,
    csv_output: bool,
    output_file: Optional[str],
) -> None:
    """Handle output rendering and export."""
    from ipdash.display import console, render_pings
    from ipdash.export import export_csv, export_json, write_to_file

    if json_output or csv_output:
        content = export_json(results) if json_output else export_csv(results)
        if output_file:
            write_to_file(content, output_file)
        else:
            click.echo(content)
        return

    render_pings(results)

    if output_file:
        write_to_file(export_json(results), output_file)
        console.print(f"[dim]Results written to {output_file}[/dim]")


@main.command()
@click.argument("address", required=False)
@timeout_option
@key_option
@endpoint_option
@click.option("--json", "json_output", is_flag=True, help="Print the raw upstream record")
@click.option("-v", "--verbose", is_flag=True, help="Log upstream requests")
def ip(
    address: Optional[str],
    timeout: float,
    ipregistry_key: str,
    ipregistry_endpoint: str,
    json_output: bool,
    verbose: bool,
) -> None:
    """Look up IP intelligence for ADDRESS (default: this machine)."""
    from ipdash.display import render_error, render_record
    from ipdash.ipintel import IpLookupError, parse_record

    configure_logging("debug" if verbose else "warning")

    try:
        data = asyncio.run(_run_lookup(address, timeout, ipregistry_endpoint, ipregistry_key))
    except IpLookupError as exc:
        render_error(f"{exc.message} (HTTP {exc.status})")
        sys.exit(1)

    if json_output:
        click.echo(json.dumps(data, indent=2, ensure_ascii=False))
        return

    record: IpRecord = parse_record(data)
    render_record(record)


async def _run_lookup(
    address: Optional[str],
    timeout: float,
    endpoint: str,
    key: str,
) -> dict:
    from ipdash.engine import build_client
    from ipdash.ipintel import lookup

    async with build_client(timeout) as client:
        return await lookup(client, address, endpoint=endpoint, key=key)


if __name__ == "__main__":
    main()
