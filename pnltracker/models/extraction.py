"""Recognized document and field extraction models."""

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

from pnltracker.models.confidence import Confidence

T = TypeVar("T")


class RecognizedDocument(BaseModel):
    """Raw output of one text-recognition pass over a screenshot."""

    text: str = Field(..., description="Recognized multi-line text")
    confidence: float = Field(
        default=0.0, ge=0, le=100, description="Recognition engine confidence (0-100)"
    )

    model_config = {"frozen": True}

    @property
    def lines(self) -> list[str]:
        """Non-empty lines of the text, trimmed."""
        return [line.strip() for line in self.text.split("\n") if line.strip()]


class FieldExtraction(BaseModel, Generic[T]):
    """A single extracted value with its confidence tag.

    ``value`` is None only when no rule matched; the confidence then
    stays at its LOW default and carries no meaning.
    """

    value: Optional[T] = Field(default=None, description="Extracted value")
    confidence: Confidence = Field(default=Confidence.LOW, description="Extraction confidence")
    raw_text: Optional[str] = Field(default=None, description="Matched substring")

    model_config = {"frozen": True}

    @property
    def found(self) -> bool:
        return self.value is not None


class ExtractedFieldSet(BaseModel):
    """The six fields pulled from one recognized document."""

    timestamp: FieldExtraction[str] = Field(default_factory=FieldExtraction[str])
    symbol: FieldExtraction[str] = Field(default_factory=FieldExtraction[str])
    side: FieldExtraction[str] = Field(default_factory=FieldExtraction[str])
    realized_pnl: FieldExtraction[float] = Field(default_factory=FieldExtraction[float])
    fees: FieldExtraction[float] = Field(default_factory=FieldExtraction[float])
    roi: FieldExtraction[float] = Field(default_factory=FieldExtraction[float])

    model_config = {"frozen": True}

    def critical_fields(self) -> tuple[FieldExtraction, FieldExtraction, FieldExtraction]:
        """Timestamp, symbol and realized PnL, the fields a trade cannot lack."""
        return (self.timestamp, self.symbol, self.realized_pnl)
