"""CLI for outline-translate (translate, collections, ledger maintenance)."""

import asyncio
import dataclasses
from pathlib import Path
from typing import Annotated

import typer
from loguru import logger

from outline_translate.api import OutlineApi, OutlineApiError
from outline_translate.collection_url import extract_collection_id
from outline_translate.config import (
    ConfigError,
    load_outline_settings,
    load_settings,
    resolve_ledger_path,
)
from outline_translate.core.ledger import LedgerError, TranslationLedger
from outline_translate.logging_config import configure_logging
from outline_translate.runner import RunStats, run_translation
from outline_translate.store import OutlineDocumentStore
from outline_translate.translator import OpenAITranslator

app = typer.Typer(help="Translate an Outline collection into another, keeping its document tree.")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    log_file: Annotated[
        Path | None,
        typer.Option("--log-file", help="Also write a debug log to this file"),
    ] = None,
) -> None:
    configure_logging(verbose=verbose, log_file=log_file)


def _echo_stats(stats: RunStats) -> None:
    if stats.budget_rejected:
        typer.echo("Cancelled: estimated cost exceeds the spending limit.")
    typer.echo(
        f"Translated {stats.translated}, skipped {stats.skipped}, "
        f"errors {stats.errors} (of {stats.total} in batch, {stats.pending} pending)"
    )
    typer.echo(
        f"Estimated cost ${stats.estimated_cost_usd:.4f}, "
        f"actual cost ${stats.actual_cost_usd:.6f}"
    )


@app.command()
def translate(
    batch_size: Annotated[
        int | None,
        typer.Option("--batch-size", "-n", min=1, help="Translate at most this many documents"),
    ] = None,
    max_spending: Annotated[
        float | None,
        typer.Option(
            "--max-spending", "-m", min=0, help="Abort if the estimate exceeds this (USD)"
        ),
    ] = None,
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Translate only the first document, simulate the rest"
    ),
    ledger_path: Annotated[
        Path | None,
        typer.Option("--ledger", "-l", help="Translation ledger file"),
    ] = None,
) -> None:
    """Translate pending documents from the source into the target collection."""
    try:
        settings = load_settings()
    except ConfigError as e:
        logger.error("Configuration error: {}", e)
        raise typer.Exit(1) from e

    overrides: dict[str, object] = {}
    if batch_size is not None:
        overrides["batch_size"] = batch_size
    if max_spending is not None:
        overrides["max_spending_usd"] = max_spending
    if dry_run:
        overrides["dry_run"] = True
    if ledger_path is not None:
        overrides["ledger_path"] = ledger_path
    settings = dataclasses.replace(settings, **overrides)  # type: ignore[arg-type]

    try:
        ledger = TranslationLedger(settings.ledger_path)
        api = OutlineApi(settings.outline.api_url, settings.outline.api_key)
        store = OutlineDocumentStore(api)
        translator = OpenAITranslator(
            settings.openai_api_key, model=settings.model, dry_run=settings.dry_run
        )
        logger.info(
            "Translating collection {} into {}",
            settings.source_collection_id,
            settings.target_collection_id,
        )
        stats = asyncio.run(run_translation(settings, store, translator, ledger))
    except (LedgerError, OutlineApiError) as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e

    _echo_stats(stats)


@app.command()
def collections() -> None:
    """List collections visible to the Outline API token."""
    try:
        outline = load_outline_settings()
    except ConfigError as e:
        logger.error("Configuration error: {}", e)
        raise typer.Exit(1) from e

    store = OutlineDocumentStore(OutlineApi(outline.api_url, outline.api_key))
    try:
        found = store.list_collections()
    except OutlineApiError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e

    if not found:
        typer.echo("No collections found.")
        return

    typer.echo(f"{len(found)} collections:\n")
    for collection in found:
        typer.echo(f"  {collection.name}  [id={collection.id}]")
        if collection.description:
            typer.echo(f"    {collection.description[:80]}")
        typer.echo(f"    documents: {collection.document_count}  {collection.url}")
        typer.echo()


@app.command(name="extract-id")
def extract_id(
    url: str = typer.Argument(
        ..., help="Collection URL, e.g. https://docs.example.com/collection/docs-abc123XYZ"
    ),
) -> None:
    """Print the collection id contained in a collection URL."""
    try:
        collection_id = extract_collection_id(url)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    typer.echo(collection_id)


@app.command()
def status(
    ledger_path: Annotated[
        Path | None,
        typer.Option("--ledger", "-l", help="Translation ledger file"),
    ] = None,
    show_all: bool = typer.Option(False, "--all", "-a", help="List every recorded document"),
) -> None:
    """Show translation ledger statistics."""
    try:
        ledger = TranslationLedger(ledger_path or resolve_ledger_path())
    except LedgerError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e

    summary = ledger.summary()
    typer.echo(f"Translated documents: {summary.total}")
    if summary.oldest and summary.newest:
        typer.echo(f"Oldest translation: {summary.oldest:%Y-%m-%d %H:%M}")
        typer.echo(f"Newest translation: {summary.newest:%Y-%m-%d %H:%M}")

    if show_all:
        entries = sorted(ledger.list_all().values(), key=lambda e: e.translated_at)
        for entry in entries:
            typer.echo(f"  {entry.source_title} -> {entry.destination_title}")
            typer.echo(
                f"    {entry.source_id} -> {entry.destination_id}  "
                f"{entry.translated_at:%Y-%m-%d %H:%M}"
            )


@app.command()
def forget(
    document_id: str = typer.Argument(..., help="Source document id"),
    ledger_path: Annotated[
        Path | None,
        typer.Option("--ledger", "-l", help="Translation ledger file"),
    ] = None,
) -> None:
    """Remove a ledger entry so the document is translated again on the next run."""
    try:
        ledger = TranslationLedger(ledger_path or resolve_ledger_path())
        removed = ledger.remove(document_id)
    except LedgerError as e:
        logger.error("{}", e)
        raise typer.Exit(1) from e

    if not removed:
        typer.echo(f"Document '{document_id}' is not in the ledger.")
        raise typer.Exit(1)
    typer.echo(f"Removed '{document_id}' from the ledger.")
