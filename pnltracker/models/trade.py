"""Trade data model."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from pnltracker.models.confidence import Confidence

Side = Literal["long", "short", "unknown"]
TradeResult = Literal["win", "loss", "breakeven"]


def result_for_pnl(pnl: float) -> TradeResult:
    """Classify a realized PnL. Exactly zero is breakeven."""
    if pnl > 0:
        return "win"
    if pnl < 0:
        return "loss"
    return "breakeven"


def _naive(value: datetime) -> datetime:
    # Wall-clock pass-through: a zone suffix is dropped, never converted.
    if value.tzinfo is not None:
        return value.replace(tzinfo=None)
    return value


class TradeConfidence(BaseModel):
    """Per-field confidence snapshot attached to a trade."""

    timestamp: Confidence = Field(..., description="Timestamp confidence")
    symbol: Confidence = Field(..., description="Symbol confidence")
    pnl: Confidence = Field(..., description="Realized PnL confidence")
    overall: Confidence = Field(..., description="Aggregated confidence")

    model_config = {"frozen": True}

    @classmethod
    def all_high(cls) -> "TradeConfidence":
        return cls(
            timestamp=Confidence.HIGH,
            symbol=Confidence.HIGH,
            pnl=Confidence.HIGH,
            overall=Confidence.HIGH,
        )


class Trade(BaseModel):
    """Represents a closed position recorded in the journal."""

    id: str = Field(..., min_length=1, description="Unique identifier")
    timestamp: datetime = Field(..., description="Position close time")
    symbol: str = Field(..., min_length=1, description="Ticker, upper case")
    side: Side = Field(default="unknown", description="Position side")
    realized_pnl: float = Field(..., description="Signed realized P&L")
    fees: Optional[float] = Field(default=None, description="Trading fees")
    roi: Optional[float] = Field(default=None, description="Return on margin (%)")
    result: TradeResult = Field(..., description="win/loss/breakeven from realized P&L")
    needs_review: bool = Field(default=False, description="Requires manual verification")
    confidence: TradeConfidence = Field(
        default_factory=TradeConfidence.all_high, description="Extraction confidence snapshot"
    )
    source_image_id: Optional[str] = Field(default=None, description="Source screenshot reference")
    remarks: Optional[str] = Field(default=None, description="Free-text notes")
    created_at: datetime = Field(..., description="Creation time")
    updated_at: datetime = Field(..., description="Last replacement time")
    imported_at: Optional[datetime] = Field(default=None, description="Set when loaded from an export")

    model_config = {
        "frozen": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    @model_validator(mode="before")
    @classmethod
    def _derive_result(cls, data):
        if isinstance(data, dict) and data.get("result") is None:
            pnl = data.get("realized_pnl", data.get("realizedPnl"))
            if isinstance(pnl, (int, float)):
                data = {**data, "result": result_for_pnl(pnl)}
        return data

    @field_validator("timestamp", "created_at", "updated_at", "imported_at")
    @classmethod
    def _drop_zone(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _naive(value) if value is not None else None

    @field_validator("symbol")
    @classmethod
    def _upper_symbol(cls, value: str) -> str:
        return value.strip().upper()

    @model_validator(mode="after")
    def _check_result(self) -> "Trade":
        expected = result_for_pnl(self.realized_pnl)
        if self.result != expected:
            raise ValueError(
                f"result '{self.result}' inconsistent with realized P&L {self.realized_pnl} "
                f"(expected '{expected}')"
            )
        return self

    @property
    def is_win(self) -> bool:
        return self.result == "win"

    @property
    def is_loss(self) -> bool:
        return self.result == "loss"
