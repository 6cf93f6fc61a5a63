from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional

import typer
import uvicorn

from campaign_feed.config import settings
from campaign_feed.data.adapters import parse_csv_text
from campaign_feed.exceptions import CampaignFeedError
from campaign_feed.pipeline import map_rows
from campaign_feed.services import ResponseExporter
from campaign_feed.sync import GoogleSheetsCsvProvider, extract_sheet_id

cli = typer.Typer(help="Campaign Feed CLI")


def _configure_logging() -> None:
    logging.basicConfig(level=getattr(logging, settings.logging.level.upper(), logging.INFO))


def _emit(records, as_json: bool, output: Optional[Path]) -> None:
    if as_json:
        text = json.dumps([r.model_dump(by_alias=True, mode="json") for r in records], ensure_ascii=False, indent=2)
    else:
        text = ResponseExporter().to_csv(records)
    if output:
        output.write_text(text, encoding="utf-8")
        typer.echo(f"Wrote {len(records)} responses to {output}")
    else:
        typer.echo(text)


@cli.command()
def version() -> None:
    """Print runtime version."""
    typer.echo(f"{settings.app.name} {settings.app.version}")


@cli.command()
def serve(
    host: str = typer.Option("127.0.0.1", help="Host to bind"),
    port: int = typer.Option(8000, help="Port to bind"),
    reload: bool = typer.Option(False, help="Enable autoreload for local development"),
) -> None:
    """Run the API server."""
    uvicorn.run(
        "campaign_feed.api.main:app",
        host=host,
        port=port,
        reload=reload,
        app_dir="src",
    )


@cli.command()
def parse(
    csv_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="CSV export of the responses sheet"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a flattened CSV"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to a file instead of stdout"),
) -> None:
    """Map a local CSV export into normalized responses."""
    _configure_logging()
    try:
        records = map_rows(parse_csv_text(csv_file.read_text(encoding="utf-8-sig")))
    except CampaignFeedError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    _emit(records, as_json, output)


@cli.command()
def fetch(
    sheet: Optional[str] = typer.Option(None, help="Google Sheet URL or id (defaults to the configured sheet)"),
    as_json: bool = typer.Option(False, "--json", help="Print JSON instead of a flattened CSV"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write to a file instead of stdout"),
) -> None:
    """Fetch the live sheet and map it."""
    _configure_logging()
    sheet_id = extract_sheet_id(sheet) if sheet else settings.sheets.sheet_id
    if not sheet_id:
        typer.echo("Error: invalid Google Sheet URL or ID", err=True)
        raise typer.Exit(code=2)

    provider = GoogleSheetsCsvProvider(
        service_account_file=settings.sheets.service_account_file,
        api_key=settings.sheets.api_key,
        sheet_name=settings.sheets.sheet_name,
        max_retries=settings.sheets.max_retries,
        backoff_seconds=settings.sheets.backoff_seconds,
        timeout=settings.sheets.timeout_seconds,
    )
    try:
        records = map_rows(parse_csv_text(provider.fetch_csv(sheet_id)))
    except CampaignFeedError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1)
    _emit(records, as_json, output)


if __name__ == "__main__":
    cli()
