"""`itqan` command group: run the web server, browse the catalog, inspect config."""

from __future__ import annotations

import click

from itqan.cli.commands.assets import assets_cmd
from itqan.cli.output import console, settings_table


@click.group()
@click.version_option(package_name="itqan")
@click.option(
    "--api-url",
    default="http://localhost:3000",
    envvar="ITQAN_API_URL",
    show_default=True,
    help="Base URL of a running Itqan web server",
)
@click.pass_context
def cli(ctx: click.Context, api_url: str) -> None:
    """Itqan web front-end: Auth0 sign-in, profile completion and the asset catalog.

    \b
    Quick start:
      itqan serve --reload
      itqan config
      itqan assets list --category quran
      itqan assets list --search hadith --language ar --page 2
      itqan assets show asset-1
    """
    ctx.ensure_object(dict)
    ctx.obj["api_url"] = api_url.rstrip("/")


cli.add_command(assets_cmd)


@cli.command("serve")
@click.option("--host", default=None, help="Bind host  [default: APP_HOST]")
@click.option("--port", default=None, type=int, help="Bind port  [default: APP_PORT]")
@click.option("--reload", is_flag=True, default=False, help="Restart on code changes (development)")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the Itqan web server with uvicorn."""
    import uvicorn

    from itqan.core.config import get_settings

    settings = get_settings()
    uvicorn.run(
        "itqan.api.app:app",
        host=host or settings.app_host,
        port=port or settings.app_port,
        reload=reload,
        log_level=settings.log_level.lower(),
        proxy_headers=True,
    )


@cli.command("config")
@click.option("--show-secrets", is_flag=True, default=False, help="Print secret values in clear")
def show_config(show_secrets: bool) -> None:
    """Print the effective settings (environment + .env)."""
    from itqan.core.config import get_settings

    console.print(settings_table(get_settings().model_dump(), reveal=show_secrets))


if __name__ == "__main__":
    cli()
