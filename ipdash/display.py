"""Rich terminal output for ipdash."""

from __future__ import annotations

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from ipdash import details
from ipdash.config import FAST_THRESHOLD_MS, MEDIUM_THRESHOLD_MS
from ipdash.details import DetailRow
from ipdash.models import IpRecord, PingResult

console = Console()


def _color_for_ms(value: float) -> str:
    """Return a Rich color name based on latency thresholds."""
    if value <= FAST_THRESHOLD_MS:
        return "green"
    elif value <= MEDIUM_THRESHOLD_MS:
        return "yellow"
    return "red"


def _fmt_ms(value: Optional[float], colorize: bool = True) -> Text:
    """Format a millisecond value with optional color."""
    if value is None:
        return Text("—", style="dim")
    text = f"{value:.1f}ms"
    if colorize:
        return Text(text, style=_color_for_ms(value))
    return Text(text)


# ── Resolver latency ──────────────────────────────────────────────────


def build_ping_table(results: list[PingResult]) -> Table:
    """Build the per-resolver latency table, fastest first."""
    table = Table(
        show_header=True,
        border_style="bright_black",
        expand=False,
        header_style="bold",
        title="[bold]Resolver Latency[/bold] [dim](HTTPS fetch of a DoH A query)[/dim]",
        title_style="",
    )
    table.add_column("Resolver", style="bold", min_width=14)
    table.add_column("Host", style="dim")
    table.add_column("Latency", justify="right", min_width=9)
    table.add_column("HTTP", justify="right")
    table.add_column("Status")

    def sort_key(r: PingResult) -> float:
        return r.latency_ms if r.ok and r.latency_ms is not None else float("inf")

    for r in sorted(results, key=sort_key):
        status_style = "green" if r.ok else "red"
        table.add_row(
            r.name,
            r.host,
            _fmt_ms(r.latency_ms if r.ok else None),
            Text(str(r.http_status) if r.http_status is not None else "—", style="dim"),
            Text(details.ping_status_text(r), style=status_style),
        )

    return table


def render_pings(results: list[PingResult]) -> None:
    console.print()
    console.print(build_ping_table(results))
    console.print()


# ── IP intelligence ───────────────────────────────────────────────────


def _build_detail_table(title: str, rows: list[DetailRow]) -> Table:
    table = Table(
        show_header=False,
        border_style="bright_black",
        expand=False,
        title=f"[bold]{title}[/bold]",
        title_style="",
        title_justify="left",
    )
    table.add_column("Field", style="dim", min_width=18)
    table.add_column("Value")
    for row in rows:
        style = "dim italic" if row.display == details.UNKNOWN else ""
        table.add_row(row.label, Text(row.display, style=style))
    return table


def render_record(record: IpRecord) -> None:
    """Display every section of an IP intelligence record."""
    header = f"[bold]Public IP:[/bold] [bold cyan]{record.ip or details.UNKNOWN}[/bold cyan]"
    if record.type:
        header += f" [dim]({record.type})[/dim]"
    if record.location.flag_emoji:
        header += f" {record.location.flag_emoji}"
    console.print(header)

    sections = [
        ("Network", details.network_details(record)),
        ("Location Intelligence", details.location_details(record)),
        ("Connection & Routing", details.connection_details(record)),
        ("Timezone & Environment", details.timezone_details(record) + details.user_agent_details(record)),
    ]
    for title, rows in sections:
        if rows:
            console.print()
            console.print(_build_detail_table(title, rows))

    console.print()
    badges = details.security_badges(record, all_flags=True)
    if badges:
        parts = [
            f"[{'red' if b.active else 'green'}]● {b.label}[/]"
            for b in badges
        ]
        console.print("[bold]Security Assessment[/bold]")
        console.print("  " + "  ".join(parts))
    else:
        console.print("[dim]Security data unavailable.[/dim]")

    if details.is_hosting(record):
        render_warning(
            "Connection originates from a hosting provider. This often indicates "
            "VPN, proxy, or cloud infrastructure usage."
        )


def render_error(message: str) -> None:
    """Display an error message."""
    console.print(f"[bold red]Error:[/bold red] {message}")


def render_warning(message: str) -> None:
    """Display a warning message."""
    console.print(f"[yellow]Warning:[/yellow] {message}")
