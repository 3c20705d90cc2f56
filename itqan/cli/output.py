"""Rich output helpers — asset tables, facet listings and the asset detail view."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from rich.console import Console
from rich.table import Table
from rich.text import Text

from itqan.catalog.cards import format_download_count, format_file_size

console = Console()


def fmt_date(iso: str | None) -> str:
    if not iso:
        return "—"
    try:
        dt = datetime.fromisoformat(iso.replace("Z", "+00:00"))
        return dt.strftime("%Y-%m-%d")
    except ValueError:
        return iso


def access_text(a: dict[str, Any]) -> Text:
    if a.get("access_required") and not a.get("has_access"):
        return Text("request", style="yellow")
    return Text("open", style="green")


def assets_table(items: list[dict[str, Any]]) -> Table:
    table = Table(
        title=f"Assets ({len(items)})",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
        show_lines=False,
    )
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Title", style="bold")
    table.add_column("Publisher")
    table.add_column("Category")
    table.add_column("Format")
    table.add_column("Lang", justify="center")
    table.add_column("License")
    table.add_column("Downloads", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Access", justify="center")

    for a in items:
        publisher = a.get("publisher") or {}
        stats = a.get("stats") or {}
        name = publisher.get("name") or "—"
        if publisher.get("verified"):
            name += " ✓"
        table.add_row(
            a.get("id") or "—",
            a.get("title") or "—",
            name,
            a.get("category") or "—",
            (a.get("format") or "—").upper(),
            a.get("language") or "—",
            (a.get("license") or {}).get("type") or "—",
            format_download_count(int(stats.get("downloads", 0))),
            format_file_size(float(stats.get("size_mb", 0.0))),
            access_text(a),
        )

    return table


def pagination_line(p: dict[str, Any]) -> str:
    total = p.get("total", 0)
    if not total:
        return "[dim]No assets match.[/dim]"
    start = (p["page"] - 1) * p["per_page"] + 1
    end = min(p["page"] * p["per_page"], total)
    hints = []
    if p.get("has_prev"):
        hints.append(f"--page {p['page'] - 1} for previous")
    if p.get("has_next"):
        hints.append(f"--page {p['page'] + 1} for next")
    line = f"[dim]Showing {start}-{end} of {total} (page {p['page']}/{p['pages']})"
    if hints:
        line += "; " + ", ".join(hints)
    return line + ".[/dim]"


def filters_table(filters: dict[str, list[dict[str, Any]]]) -> Table:
    table = Table(
        title="Facets",
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Facet", style="bold")
    table.add_column("Value")
    table.add_column("Label")
    table.add_column("Count", justify="right")

    for facet, options in filters.items():
        for i, opt in enumerate(options):
            table.add_row(
                facet if i == 0 else "",
                opt.get("value", ""),
                opt.get("label", ""),
                str(opt.get("count", 0)),
            )
    return table


def asset_detail(a: dict[str, Any]) -> None:
    """Print detailed view of a single asset."""
    console.rule(f"[bold cyan]Asset — {a.get('title') or a.get('id')}")

    publisher = a.get("publisher") or {}
    license_ = a.get("license") or {}
    stats = a.get("stats") or {}
    fields = [
        ("ID", a.get("id")),
        ("Publisher", publisher.get("name")),
        ("Category", a.get("category")),
        ("Format", (a.get("format") or "").upper()),
        ("Language", a.get("language")),
        ("License", f"{license_.get('name', '')} <{license_.get('url', '')}>" if license_ else None),
        ("Version", stats.get("version")),
        ("Downloads", format_download_count(int(stats.get("downloads", 0)))),
        ("Size", format_file_size(float(stats.get("size_mb", 0.0)))),
        ("Tags", ", ".join(a.get("tags") or [])),
        ("Created", fmt_date(a.get("created_at"))),
        ("Updated", fmt_date(a.get("updated_at"))),
    ]

    for label, value in fields:
        if value:
            console.print(f"  [dim]{label:<14}[/dim] {value}")

    console.print(f"  [dim]{'Access':<14}[/dim] ", access_text(a))
    if a.get("description"):
        console.print()
        console.print(f"  {a['description']}")


_SECRET_SETTINGS = ("secret_key", "secret_key_fallbacks", "auth0_client_secret")


def settings_table(values: dict[str, Any], reveal: bool = False) -> Table:
    table = Table(title="Settings", header_style="bold cyan", border_style="dim")
    table.add_column("Name", style="bold", no_wrap=True)
    table.add_column("Value")

    for name in sorted(values):
        value = values[name]
        if name in _SECRET_SETTINGS and value and not reveal:
            shown = Text("set (hidden)", style="yellow")
        elif value in (None, "", []):
            shown = Text("—", style="dim")
        else:
            shown = Text(str(value))
        table.add_row(name, shown)
    return table
