"""CLI commands for browsing the asset catalog."""

from __future__ import annotations

import click

from itqan.cli.output import asset_detail, assets_table, console, filters_table, pagination_line


@click.group("assets")
def assets_cmd() -> None:
    """Browse, search and filter catalog assets."""


@assets_cmd.command("list")
@click.option("--search", "-s", default="", help="Free-text search (title, description, tags, publisher)")
@click.option("--category", "categories", multiple=True, help="Category facet (repeatable)")
@click.option("--format", "formats", multiple=True, help="Format facet (repeatable)")
@click.option("--language", "languages", multiple=True, help="Language facet (repeatable)")
@click.option("--license", "licenses", multiple=True, help="License facet (repeatable)")
@click.option("--page", default=1, show_default=True, type=click.IntRange(min=1))
@click.option("--per-page", default=20, show_default=True, type=click.IntRange(1, 100))
@click.pass_context
def assets_list(
    ctx: click.Context,
    search: str,
    categories: tuple[str, ...],
    formats: tuple[str, ...],
    languages: tuple[str, ...],
    licenses: tuple[str, ...],
    page: int,
    per_page: int,
) -> None:
    """List catalog assets matching the given search and facets."""
    import httpx

    api_url: str = ctx.obj["api_url"]
    params: list[tuple[str, str | int]] = [("page", page), ("per_page", per_page)]
    if search:
        params.append(("q", search))
    for name, values in (
        ("categories", categories),
        ("formats", formats),
        ("languages", languages),
        ("licenses", licenses),
    ):
        params.extend((name, v) for v in values)

    try:
        r = httpx.get(f"{api_url}/api/v1/assets", params=params, timeout=15)
        r.raise_for_status()
        data = r.json()
        console.print(assets_table(data["items"]))
        console.print(pagination_line(data["pagination"]))
    except httpx.ConnectError:
        console.print(f"[red]Cannot connect to API at {api_url}.[/red]")
        raise SystemExit(1)
    except httpx.HTTPStatusError as e:
        console.print(f"[red]Error {e.response.status_code}:[/red] {e.response.text}")
        raise SystemExit(1)


@assets_cmd.command("filters")
@click.option("--locale", type=click.Choice(["ar", "en"]), default="en", show_default=True)
@click.pass_context
def assets_filters(ctx: click.Context, locale: str) -> None:
    """Show facet values and how many assets carry each."""
    import httpx

    api_url: str = ctx.obj["api_url"]
    try:
        r = httpx.get(f"{api_url}/api/v1/assets/filters", params={"locale": locale}, timeout=10)
        r.raise_for_status()
        console.print(filters_table(r.json()))
    except httpx.ConnectError:
        console.print(f"[red]Cannot connect to API at {api_url}.[/red]")
        raise SystemExit(1)
    except httpx.HTTPStatusError as e:
        console.print(f"[red]Error {e.response.status_code}:[/red] {e.response.text}")
        raise SystemExit(1)


@assets_cmd.command("show")
@click.argument("asset_id")
@click.pass_context
def assets_show(ctx: click.Context, asset_id: str) -> None:
    """Show detailed information for one asset."""
    import httpx

    api_url: str = ctx.obj["api_url"]
    try:
        r = httpx.get(f"{api_url}/api/v1/assets/{asset_id}", timeout=10)
        r.raise_for_status()
        asset_detail(r.json())
    except httpx.ConnectError:
        console.print(f"[red]Cannot connect to API at {api_url}.[/red]")
        raise SystemExit(1)
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 404:
            console.print(f"[yellow]Asset {asset_id!r} not found.[/yellow]")
        else:
            console.print(f"[red]Error {e.response.status_code}:[/red] {e.response.text}")
        raise SystemExit(1)
