"""Trade assembly from extracted fields and manual entry."""

import uuid
from datetime import datetime
from typing import Optional

from pnltracker.models import ExtractedFieldSet, Trade, TradeConfidence, result_for_pnl
from pnltracker.parsing.confidence import has_critical_fields, needs_review, overall_confidence


def _new_id() -> str:
    return str(uuid.uuid4())


def assemble_trade(
    fields: ExtractedFieldSet,
    source_image_id: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
) -> Optional[Trade]:
    """Build a trade from an extracted field set.

    Args:
        fields: Extraction result for one screenshot.
        source_image_id: Reference to the screenshot the text came from.
        now: Assembly time, defaults to the current time.

    Returns:
        The trade, or None when timestamp, symbol or realized PnL is missing.
        In that case the caller keeps the raw extraction for manual entry.
    """
    if not has_critical_fields(fields):
        return None

    now = now or datetime.now()
    pnl = fields.realized_pnl.value

    return Trade(
        id=_new_id(),
        timestamp=datetime.fromisoformat(fields.timestamp.value),
        symbol=fields.symbol.value,
        side=fields.side.value or "unknown",
        realized_pnl=pnl,
        fees=fields.fees.value,
        roi=fields.roi.value,
        result=result_for_pnl(pnl),
        needs_review=needs_review(fields),
        confidence=TradeConfidence(
            timestamp=fields.timestamp.confidence,
            symbol=fields.symbol.confidence,
            pnl=fields.realized_pnl.confidence,
            overall=overall_confidence(fields),
        ),
        source_image_id=source_image_id,
        created_at=now,
        updated_at=now,
    )


def manual_trade(
    timestamp: datetime,
    symbol: str,
    realized_pnl: float,
    side: str = "unknown",
    fees: Optional[float] = None,
    roi: Optional[float] = None,
    remarks: Optional[str] = None,
    source_image_id: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
) -> Trade:
    """Build a trade typed in by the user.

    Manual entries bypass extraction: every confidence is HIGH and the
    trade never needs review.
    """
    now = now or datetime.now()
    return Trade(
        id=_new_id(),
        timestamp=timestamp,
        symbol=symbol,
        side=side,
        realized_pnl=realized_pnl,
        fees=fees,
        roi=roi,
        result=result_for_pnl(realized_pnl),
        needs_review=False,
        confidence=TradeConfidence.all_high(),
        source_image_id=source_image_id,
        remarks=remarks or None,
        created_at=now,
        updated_at=now,
    )


def replace_trade(existing: Trade, *, now: Optional[datetime] = None, **changes) -> Trade:
    """Produce the full replacement of an edited trade.

    The id and creation time are kept; everything else comes from
    `existing` overridden by `changes`. The result is re-derived and the
    record counts as user-verified.
    """
    unknown = set(changes) - set(Trade.model_fields)
    if unknown:
        raise TypeError(f"Unknown trade fields: {', '.join(sorted(unknown))}")

    now = now or datetime.now()
    data = existing.model_dump()
    data.update(changes)
    data.update(
        id=existing.id,
        created_at=existing.created_at,
        updated_at=now,
        result=result_for_pnl(data["realized_pnl"]),
        needs_review=False,
        confidence=TradeConfidence.all_high(),
    )
    return Trade(**data)
