"""Screenshot text parsing: dates, field extraction, confidence and assembly.

This package turns recognized text from a close-position screenshot into
a structured trade record with per-field confidence.
"""

from pnltracker.parsing.assembler import assemble_trade, manual_trade, replace_trade
from pnltracker.parsing.confidence import has_critical_fields, needs_review, overall_confidence
from pnltracker.parsing.dates import parse_flexible_date
from pnltracker.parsing.extractor import extract_fields, parse_recognized_text

__all__ = [
    "extract_fields",
    "parse_recognized_text",
    "parse_flexible_date",
    "overall_confidence",
    "has_critical_fields",
    "needs_review",
    "assemble_trade",
    "manual_trade",
    "replace_trade",
]
