"""JSON export and import of the trade journal.

Export format::

    {
      "version": "1.0.0",
      "exportedAt": "2024-01-14T20:00:00",
      "trades": [{"id": ..., "timestamp": ..., "realizedPnl": ..., ...}]
    }

Import accepts that wrapper or a bare array of trade objects.
"""

import json
import logging
from datetime import datetime
from typing import Any, Iterable, Optional

from pydantic import ValidationError

from pnltracker.models import Trade

logger = logging.getLogger(__name__)

EXPORT_VERSION = "1.0.0"


class TradeImportError(ValueError):
    """Raised when an import payload cannot be turned into trades."""


def trade_to_dict(trade: Trade) -> dict[str, Any]:
    """Serialize a trade with camelCase keys and ISO timestamps."""
    return trade.model_dump(mode="json", by_alias=True)


def export_trades(trades: Iterable[Trade], *, now: Optional[datetime] = None) -> str:
    """Serialize trades to the export JSON document.

    Args:
        trades: Trades to export.
        now: Export time, defaults to the current time.

    Returns:
        Pretty-printed JSON string.
    """
    now = now or datetime.now()
    document = {
        "version": EXPORT_VERSION,
        "exportedAt": now.isoformat(),
        "trades": [trade_to_dict(t) for t in trades],
    }
    return json.dumps(document, indent=2, ensure_ascii=False)


def _validate_all(items: list, imported_at: Optional[datetime]) -> list[Trade]:
    trades = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise TradeImportError(f"Trade #{index} is not an object")
        if imported_at is not None:
            item = {**item, "importedAt": imported_at.isoformat()}
        try:
            trades.append(Trade.model_validate(item))
        except ValidationError as e:
            raise TradeImportError(f"Trade #{index} is invalid: {e}") from e
    return trades


def import_trades(payload: str, *, now: Optional[datetime] = None) -> list[Trade]:
    """Parse an export document (or a bare trade array) into trades.

    Trades from an export wrapper are stamped with `imported_at`; a bare
    array is taken as-is. Either every trade is returned or an error is
    raised; a payload is never partially applied.

    Raises:
        TradeImportError: For invalid JSON, an unrecognized shape, or any
            trade that fails validation.
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise TradeImportError(f"Failed to parse JSON: {e}") from e

    if isinstance(data, dict) and isinstance(data.get("trades"), list):
        trades = _validate_all(data["trades"], now or datetime.now())
    elif isinstance(data, list):
        trades = _validate_all(data, None)
    else:
        raise TradeImportError(
            "Invalid JSON format: expected an export document with a 'trades' array "
            "or an array of trades"
        )

    logger.debug("Imported %d trade(s)", len(trades))
    return trades


def default_export_filename(now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"pnl-export-{now.date().isoformat()}.json"
