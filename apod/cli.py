"""Typer CLI for the APOD resolver — all operator-facing commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

app = typer.Typer(
    name="apod",
    help="Resolve NASA Astronomy Picture of the Day media with fallbacks.",
    add_completion=False,
)
console = Console()

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_settings(log_level: Optional[str] = None) -> "Settings":  # type: ignore[name-defined]
    from apod.config import Settings

    overrides: dict = {}
    if log_level:
        overrides["log_level"] = log_level.upper()
    return Settings(**overrides)  # type: ignore[arg-type]


def _setup_logging(level: str = "INFO") -> None:
    numeric = getattr(logging, level.upper(), logging.INFO)
    fmt = "%(asctime)s %(levelname)s %(name)s %(message)s"
    logging.basicConfig(level=numeric, format=fmt)


def _client(cfg: "Settings") -> "SafeHTTPClient":  # type: ignore[name-defined]
    from apod.http import SafeHTTPClient

    return SafeHTTPClient.from_settings(cfg)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command()
def resolve(
    date: str = typer.Argument(..., help="Date in YYYY-MM-DD form."),
    as_json: bool = typer.Option(False, "--json", is_flag=True, help="Print raw JSON."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level."),
) -> None:
    """Resolve the picture of the day for DATE through the fallback chain."""
    _setup_logging(log_level)
    cfg = _get_settings(log_level=log_level)

    from apod.errors import RequestValidationError
    from apod.pipeline import ResolutionOrchestrator

    with _client(cfg) as client:
        orchestrator = ResolutionOrchestrator(config=cfg, client=client)
        try:
            result = orchestrator.resolve(date)
        except RequestValidationError as exc:
            console.print(f"[bold red]{exc}[/]")
            raise typer.Exit(2)

    if result is None:
        console.print(f"[yellow]No APOD found for {date}[/]")
        raise typer.Exit(1)

    if as_json:
        console.print_json(result.model_dump_json())
        return

    table = Table(title=f"APOD {result.date}")
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Title", result.title or "—")
    table.add_row("Media", result.media_type)
    table.add_row("URL", result.url)
    table.add_row("HD URL", result.hdurl or "—")
    table.add_row("Source", result.source.value)
    table.add_row("Confidence", result.confidence)
    console.print(table)
    if result.explanation:
        console.print(result.explanation)


@app.command()
def asset(
    asset_id: str = typer.Argument(..., help="NASA Images API identifier (nasa_id)."),
    as_json: bool = typer.Option(False, "--json", is_flag=True, help="Print raw JSON."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level."),
) -> None:
    """Resolve ASSET_ID to its best direct media link."""
    _setup_logging(log_level)
    cfg = _get_settings(log_level=log_level)

    from apod.assets import AssetResolver
    from apod.cache import TTLCache
    from apod.errors import RequestValidationError

    with _client(cfg) as client:
        resolver = AssetResolver(
            config=cfg,
            cache=TTLCache(cfg.asset_cache_ttl_seconds),
            client=client,
        )
        try:
            result = resolver.resolve_asset(asset_id)
        except RequestValidationError as exc:
            console.print(f"[bold red]{exc}[/]")
            raise typer.Exit(2)

    if result is None:
        console.print(f"[yellow]No asset found for {asset_id}[/]")
        raise typer.Exit(1)

    if as_json:
        console.print_json(result.model_dump_json())
        return

    console.print(f"[bold]Best:[/] {result.best or '—'}  ({result.type}, {result.rationale})")
    table = Table(title=f"Candidates for {asset_id}")
    table.add_column("#", style="bold", width=3)
    table.add_column("Href")
    for i, link in enumerate(result.items, start=1):
        table.add_row(str(i), link.href)
    console.print(table)


@app.command("fetch-image")
def fetch_image_cmd(
    url: str = typer.Argument(..., help="Image URL on an allowlisted host."),
    out: Path = typer.Option(..., "--out", help="Destination file."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level."),
) -> None:
    """Download URL to --out, refusing hosts outside the allowlist."""
    _setup_logging(log_level)
    cfg = _get_settings(log_level=log_level)

    from apod.errors import HostNotAllowedError
    from apod.imageproxy import fetch_image

    try:
        with _client(cfg) as client:
            content_type = fetch_image(client, url, out, timeout=cfg.image_proxy_timeout)
    except HostNotAllowedError as exc:
        console.print(f"[bold red]{exc}[/]")
        raise typer.Exit(2)
    except Exception as exc:
        console.print(f"[bold red]Failed to fetch image: {exc}[/]")
        raise typer.Exit(1)

    console.print(f"[green]Saved {out} ({content_type})[/]")


@app.command()
def validate(
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level."),
) -> None:
    """Probe every upstream endpoint and report reachability."""
    _setup_logging(log_level)
    cfg = _get_settings(log_level=log_level)

    probes = [
        ("APOD API", cfg.apod_api_url, {"api_key": cfg.nasa_api_key}, cfg.api_timeout),
        ("APOD page", cfg.apod_page_base, None, cfg.page_timeout),
        ("Wayback", cfg.wayback_available_url, {"url": cfg.apod_page_base}, cfg.wayback_timeout),
        (
            "Images search",
            cfg.images_search_url,
            {"q": cfg.search_keyword, "media_type": "image"},
            cfg.images_timeout,
        ),
    ]

    checks: list[tuple[str, str, str]] = []
    with _client(cfg) as client:
        for name, url, params, timeout in probes:
            try:
                r = client.get(url, params=params, timeout=timeout)
                checks.append((name, "✅", f"HTTP {r.status_code}"))
            except Exception as exc:
                checks.append((name, "❌", str(exc)))

    table = Table(title="Upstream Reachability")
    table.add_column("Check", style="bold")
    table.add_column("Status")
    table.add_column("Detail")
    for name, status, detail in checks:
        table.add_row(name, status, detail)
    console.print(table)

    # Unreachable upstreams are informational; the chain tolerates them
    raise typer.Exit(0)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """CLI entry point registered in pyproject.toml."""
    app()


if __name__ == "__main__":
    main()
