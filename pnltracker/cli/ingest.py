"""Ingestion commands for PnL Tracker CLI.

Turns recognized screenshot text into trades, and records trades typed
in by hand when extraction falls short.
"""

import sqlite3
from typing import Optional

import click
from rich.panel import Panel

from pnltracker.cli.common import (
    confidence_markup,
    console,
    currency_of,
    fail,
    fields_table,
    get_config,
    get_data_store,
    trade_summary,
    warn,
)
from pnltracker.models import ExtractedFieldSet, RecognizedDocument


def _read_document(source: str, ocr_confidence: float) -> RecognizedDocument:
    with click.open_file(source, "r", encoding="utf-8") as f:
        text = f.read()
    if not text.strip():
        fail("Recognized text is empty.")
    return RecognizedDocument(text=text, confidence=ocr_confidence)


def _show_extraction(document: RecognizedDocument, fields: ExtractedFieldSet, config: dict) -> None:
    from pnltracker.parsing import needs_review, overall_confidence

    console.print(fields_table(fields))

    review = needs_review(fields)
    review_str = "[yellow]yes[/yellow]" if review else "[green]no[/green]"
    console.print(
        f"\n[bold]Overall confidence:[/bold] {confidence_markup(overall_confidence(fields))}"
        f"   [bold]Needs review:[/bold] {review_str}"
    )

    threshold = config.get("review", {}).get("min_ocr_confidence", 0.0)
    if document.confidence and document.confidence < threshold:
        console.print(
            f"[yellow]Recognition confidence {document.confidence:.0f} is below "
            f"{threshold:.0f}; double-check the values above.[/yellow]"
        )


@click.command()
@click.argument("source", type=click.Path(exists=True, allow_dash=True, dir_okay=False), default="-")
@click.option(
    "--ocr-confidence",
    type=click.FloatRange(0, 100),
    default=0.0,
    help="Confidence (0-100) reported by the recognition engine.",
)
def parse(source: str, ocr_confidence: float) -> None:
    """Show the fields extracted from recognized text without saving.

    SOURCE is a text file with the recognition output ('-' for stdin).

    \b
    Examples:
      pnltracker parse summary.txt
      tesseract shot.png - | pnltracker parse -
    """
    from pnltracker.parsing import extract_fields

    config = get_config()
    document = _read_document(source, ocr_confidence)
    fields = extract_fields(document)
    _show_extraction(document, fields, config)


@click.command()
@click.argument("source", type=click.Path(exists=True, allow_dash=True, dir_okay=False), default="-")
@click.option(
    "--ocr-confidence",
    type=click.FloatRange(0, 100),
    default=0.0,
    help="Confidence (0-100) reported by the recognition engine.",
)
@click.option("--image-id", type=str, default=None, help="Reference to the source screenshot.")
@click.option(
    "--on-duplicate",
    type=click.Choice(["ask", "skip", "replace", "add"]),
    default="ask",
    help="What to do when a near-identical trade is already recorded.",
)
def add(source: str, ocr_confidence: float, image_id: Optional[str], on_duplicate: str) -> None:
    """Extract a trade from recognized text and record it.

    Trades missing a timestamp, symbol or realized P&L are not recorded;
    use 'pnltracker record' to enter them by hand.

    \b
    Examples:
      pnltracker add summary.txt
      pnltracker add summary.txt --image-id shot-001 --on-duplicate skip
    """
    from pnltracker.analytics import DuplicateAction
    from pnltracker.journal import JournalState
    from pnltracker.parsing import assemble_trade, extract_fields

    config = get_config()
    currency = currency_of(config)
    document = _read_document(source, ocr_confidence)
    fields = extract_fields(document)
    _show_extraction(document, fields, config)

    trade = assemble_trade(fields, source_image_id=image_id)
    if trade is None:
        fail(
            "Could not find a timestamp, symbol and realized P&L in the text.\n\n"
            "Enter the trade with [cyan]pnltracker record[/cyan].",
            title="Incomplete Extraction",
        )

    try:
        store = get_data_store(config)
        existing = store.check_duplicate(trade)
    except (sqlite3.Error, OSError) as e:
        warn(f"Could not read the trade journal: {e}\n\nThe trade was not saved.")
        console.print(Panel(trade_summary(trade, currency), title="[bold]Unsaved Trade[/bold]"))
        raise SystemExit(1)

    if existing is not None and on_duplicate == "ask":
        console.print(Panel(
            f"A similar trade is already recorded:\n\n{trade_summary(existing, currency)}",
            title="[bold yellow]Duplicate Trade Detected[/bold yellow]",
            border_style="yellow",
        ))
        if source == "-":
            # stdin carries the recognized text, so there is no answer to read.
            console.print(
                "[dim]Reading from stdin, so not asking. "
                "Pass --on-duplicate replace or --on-duplicate add to record it.[/dim]"
            )
            on_duplicate = "skip"
        else:
            on_duplicate = click.prompt(
                "Skip, replace the existing trade, or add anyway?",
                type=click.Choice(["skip", "replace", "add"]),
                default="skip",
            )

    state = JournalState(trades=(existing,) if existing is not None else ())
    action = DuplicateAction(on_duplicate) if existing is not None else DuplicateAction.ADD
    new_state, matched = state.insert_with_policy(trade, action)

    if matched is not None and action is DuplicateAction.SKIP:
        console.print("[dim]Skipped duplicate trade.[/dim]")
        return

    saved = new_state.get(matched.id) if action is DuplicateAction.REPLACE else trade
    try:
        store.save_trade(saved)
    except sqlite3.Error as e:
        warn(f"Could not save the trade: {e}\n\nExport it or re-run the command once the journal is available.")
        console.print(Panel(trade_summary(saved, currency), title="[bold]Unsaved Trade[/bold]"))
        raise SystemExit(1)

    title = "Trade Replaced" if action is DuplicateAction.REPLACE and matched else "Trade Recorded"
    border = "yellow" if saved.needs_review else "green"
    body = trade_summary(saved, currency)
    if saved.needs_review:
        body += "\n\n[yellow]Flagged for review.[/yellow] Fix it with [cyan]pnltracker edit[/cyan]."
    console.print(Panel(body, title=f"[bold]{title}[/bold]", border_style=border))


@click.command()
@click.option("--timestamp", "timestamp_text", required=True, help="Close time, e.g. '2024-01-08 14:32'.")
@click.option("--symbol", required=True, help="Ticker, e.g. BTCUSDT.")
@click.option("--pnl", type=float, required=True, help="Realized P&L (negative for a loss).")
@click.option("--side", type=click.Choice(["long", "short", "unknown"]), default="unknown")
@click.option("--fees", type=float, default=None, help="Trading fees.")
@click.option("--roi", type=float, default=None, help="Return on margin in percent.")
@click.option("--remarks", type=str, default=None, help="Free-text notes.")
def record(
    timestamp_text: str,
    symbol: str,
    pnl: float,
    side: str,
    fees: Optional[float],
    roi: Optional[float],
    remarks: Optional[str],
) -> None:
    """Record a trade entered by hand.

    \b
    Examples:
      pnltracker record --timestamp "2024-01-08 14:32" --symbol BTCUSDT --pnl 125.5
    """
    from pnltracker.parsing import manual_trade, parse_flexible_date

    config = get_config()
    timestamp = parse_flexible_date(timestamp_text)
    if timestamp is None:
        fail(f"Could not understand the timestamp '{timestamp_text}'.")

    trade = manual_trade(
        timestamp=timestamp,
        symbol=symbol,
        realized_pnl=pnl,
        side=side,
        fees=fees,
        roi=roi,
        remarks=remarks,
    )

    try:
        get_data_store(config).save_trade(trade)
    except (sqlite3.Error, OSError) as e:
        fail(f"Could not save the trade: {e}")

    console.print(Panel(
        trade_summary(trade, currency_of(config)),
        title="[bold]Trade Recorded[/bold]",
        border_style="green",
    ))
