"""Ordered extraction rules for close-position screenshots.

Each field category has a tuple of rules tried in order; the first rule
whose pattern matches and whose extracted value is valid wins. Specific,
labelled patterns are listed before generic fallbacks so a loose match can
never pre-empt a structured one.
"""

import math
import re
from typing import Any, Callable, NamedTuple, Optional

from pnltracker.models.confidence import Confidence


class ParsingRule(NamedTuple):
    """A named (pattern, extractor, base confidence) triple."""

    name: str
    pattern: re.Pattern
    extract: Callable[[re.Match], Any]
    confidence: Confidence


def parse_number(text: str) -> Optional[float]:
    """Convert an OCR number token ('+1,129.50', '- 8.45') to float.

    Thousands separators and whitespace are stripped. Returns None for
    anything that does not convert to a finite number.
    """
    cleaned = re.sub(r"[,\s]", "", text)
    try:
        value = float(cleaned)
    except ValueError:
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return value


def _negated(text: str) -> Optional[float]:
    value = parse_number(text)
    return -value if value is not None else None


# Signed amount, e.g. '+1,129.50' or '- 8.45'
_AMOUNT = r"([+-]?\s*[\d,]+\.?\d*)"

DATE_RULES = (
    ParsingRule(
        "ISO format",
        re.compile(r"(\d{4}-\d{2}-\d{2}[\sT]\d{2}:\d{2}(?::\d{2})?)"),
        lambda m: m.group(1),
        Confidence.HIGH,
    ),
    ParsingRule(
        "Slash format",
        re.compile(r"(\d{2}/\d{2}/\d{4}\s+\d{2}:\d{2})"),
        lambda m: m.group(1),
        Confidence.HIGH,
    ),
    ParsingRule(
        "Date time format",
        re.compile(r"(\d{4}/\d{2}/\d{2}\s+\d{2}:\d{2})"),
        lambda m: m.group(1),
        Confidence.HIGH,
    ),
    ParsingRule(
        "Month name",
        re.compile(r"([A-Za-z]{3,9}\.?\s+\d{1,2},?\s+\d{4}\s+\d{2}:\d{2})"),
        lambda m: m.group(1),
        Confidence.MEDIUM,
    ),
    ParsingRule(
        "Short date",
        re.compile(r"(\d{2}-\d{2}-\d{4}(?:\s+\d{2}:\d{2})?)"),
        lambda m: m.group(1),
        Confidence.MEDIUM,
    ),
)

SYMBOL_RULES = (
    ParsingRule(
        "USDT pair",
        re.compile(r"([A-Z]{2,10}USDT)", re.IGNORECASE),
        lambda m: m.group(1).upper(),
        Confidence.HIGH,
    ),
    ParsingRule(
        "USD pair",
        re.compile(r"([A-Z]{2,10}USD)\b", re.IGNORECASE),
        lambda m: m.group(1).upper(),
        Confidence.HIGH,
    ),
    ParsingRule(
        "Perp format",
        re.compile(r"([A-Z]{2,10})[\s/-]?(PERP|PERPETUAL)", re.IGNORECASE),
        lambda m: f"{m.group(1).upper()}USDT",
        Confidence.MEDIUM,
    ),
    ParsingRule(
        "Slash pair",
        re.compile(r"([A-Z]{2,10})/([A-Z]{2,5})", re.IGNORECASE),
        lambda m: f"{m.group(1).upper()}{m.group(2).upper()}",
        Confidence.MEDIUM,
    ),
)

SIDE_RULES = (
    ParsingRule(
        "Long explicit",
        re.compile(r"\b(LONG|Buy|Open\s+Long)\b", re.IGNORECASE),
        lambda m: "long",
        Confidence.HIGH,
    ),
    ParsingRule(
        "Short explicit",
        re.compile(r"\b(SHORT|Sell|Open\s+Short)\b", re.IGNORECASE),
        lambda m: "short",
        Confidence.HIGH,
    ),
)

PNL_RULES = (
    ParsingRule(
        "PnL with sign",
        re.compile(_AMOUNT + r"\s*(?:USDT|USD)", re.IGNORECASE),
        lambda m: parse_number(m.group(1)),
        Confidence.HIGH,
    ),
    ParsingRule(
        "Negative in parens",
        re.compile(r"\(([\d,]+\.?\d*)\)\s*(?:USDT|USD)?", re.IGNORECASE),
        lambda m: _negated(m.group(1)),
        Confidence.HIGH,
    ),
    ParsingRule(
        "PnL number only",
        re.compile(r"PNL[:\s]+" + _AMOUNT, re.IGNORECASE),
        lambda m: parse_number(m.group(1)),
        Confidence.MEDIUM,
    ),
    ParsingRule(
        "Realized PnL",
        re.compile(r"Realized\s+(?:PnL|P&L|Profit)[:\s]+" + _AMOUNT, re.IGNORECASE),
        lambda m: parse_number(m.group(1)),
        Confidence.HIGH,
    ),
)

# Fees carry no sign convention and look like any other amount, so only
# labelled values are accepted.
FEE_RULES = (
    ParsingRule(
        "Fee with label",
        re.compile(r"Fees?[:\s]+" + _AMOUNT + r"\s*(?:USDT|USD)?", re.IGNORECASE),
        lambda m: parse_number(m.group(1)),
        Confidence.HIGH,
    ),
    ParsingRule(
        "Trading fee",
        re.compile(r"Trading\s+Fee[:\s]+" + _AMOUNT, re.IGNORECASE),
        lambda m: parse_number(m.group(1)),
        Confidence.HIGH,
    ),
)

ROI_RULES = (
    ParsingRule(
        "ROI percentage",
        re.compile(r"ROI[:\s]+" + _AMOUNT + r"\s*%", re.IGNORECASE),
        lambda m: parse_number(m.group(1)),
        Confidence.HIGH,
    ),
    ParsingRule(
        "Return percentage",
        re.compile(r"Return[:\s]+" + _AMOUNT + r"\s*%", re.IGNORECASE),
        lambda m: parse_number(m.group(1)),
        Confidence.HIGH,
    ),
    # Catches leverage ratios and other unrelated percentages too.
    ParsingRule(
        "Percentage only",
        re.compile(r"([+-]?\d+\.?\d*)\s*%"),
        lambda m: parse_number(m.group(1)),
        Confidence.LOW,
    ),
)

KEYWORD_ANCHORS = {
    "pnl": ("PNL", "P&L", "Profit", "Loss", "Realized", "Net"),
    "roi": ("ROI", "Return", "%"),
    "fee": ("Fee", "Fees", "Commission"),
    "symbol": ("Pair", "Symbol", "Contract", "Asset"),
    "date": ("Date", "Time", "Closed", "Close"),
}
