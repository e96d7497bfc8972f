"""Field extraction from recognized screenshot text.

Each field category is scanned with its own ordered rule list (see
`pnltracker.parsing.rules`). Timestamp, realized PnL and ROI are scanned
line by line; symbol, side and fees over the full text. Extraction is
best-effort: a field that no rule matches is left empty and never aborts
the rest of the scan.
"""

import logging
from typing import Any, Iterable, Optional, Sequence, Union

from pnltracker.models import Confidence, ExtractedFieldSet, FieldExtraction, RecognizedDocument
from pnltracker.parsing.dates import parse_flexible_date, to_iso
from pnltracker.parsing.rules import (
    DATE_RULES,
    FEE_RULES,
    KEYWORD_ANCHORS,
    PNL_RULES,
    ROI_RULES,
    SIDE_RULES,
    SYMBOL_RULES,
    ParsingRule,
)

logger = logging.getLogger(__name__)

KEYWORD_WINDOW = 2


def lower_confidence(level: Confidence) -> Confidence:
    """Demote a confidence level by one step (LOW stays LOW)."""
    return level.lower()


def find_near_keyword(
    lines: Sequence[str], keywords: Iterable[str], line_index: int, window: int = KEYWORD_WINDOW
) -> bool:
    """Check whether any keyword appears within `window` lines of `line_index`.

    Matching is a case-insensitive substring test.
    """
    lowered = [kw.lower() for kw in keywords]
    start = max(0, line_index - window)
    end = min(len(lines), line_index + window + 1)

    for line in lines[start:end]:
        text = line.lower()
        if any(kw in text for kw in lowered):
            return True
    return False


def _is_valid(value: Any) -> bool:
    # NaN and unparsable numbers come back from the rules as None.
    return value is not None


def first_match(rules: Sequence[ParsingRule], text: str) -> Optional[tuple[ParsingRule, Any, str]]:
    """Try rules in order against one piece of text.

    Returns:
        (rule, value, matched text) of the first rule that both matches and
        extracts a valid value, or None.
    """
    for rule in rules:
        match = rule.pattern.search(text)
        if not match:
            continue
        value = rule.extract(match)
        if _is_valid(value):
            return rule, value, match.group(0)
    return None


def _extract_timestamp(lines: list[str]) -> FieldExtraction[str]:
    for i, line in enumerate(lines):
        for rule in DATE_RULES:
            match = rule.pattern.search(line)
            if not match:
                continue
            raw = rule.extract(match)
            parsed = parse_flexible_date(raw)
            if parsed is None:
                continue

            near = find_near_keyword(lines, KEYWORD_ANCHORS["date"], i)
            confidence = rule.confidence if near else lower_confidence(rule.confidence)
            logger.debug("timestamp: rule %r matched line %d (keyword nearby: %s)", rule.name, i, near)
            return FieldExtraction[str](value=to_iso(parsed), confidence=confidence, raw_text=raw)
    return FieldExtraction[str]()


def _extract_full_text(
    rules: Sequence[ParsingRule], text: str, field: str, kind: type[FieldExtraction]
) -> FieldExtraction:
    found = first_match(rules, text)
    if found is None:
        return kind()
    rule, value, raw = found
    logger.debug("%s: rule %r matched %r", field, rule.name, raw)
    return kind(value=value, confidence=rule.confidence, raw_text=raw)


def _extract_realized_pnl(lines: list[str]) -> FieldExtraction[float]:
    for i, line in enumerate(lines):
        found = first_match(PNL_RULES, line)
        if found is None:
            continue

        rule, value, raw = found
        near = find_near_keyword(lines, KEYWORD_ANCHORS["pnl"], i)
        confidence = rule.confidence if near else lower_confidence(rule.confidence)
        logger.debug("realized_pnl: rule %r matched line %d (keyword nearby: %s)", rule.name, i, near)
        return FieldExtraction[float](value=value, confidence=confidence, raw_text=raw)
    return FieldExtraction[float]()


def _extract_roi(lines: list[str]) -> FieldExtraction[float]:
    for i, line in enumerate(lines):
        found = first_match(ROI_RULES, line)
        if found is None:
            continue

        rule, value, raw = found
        logger.debug("roi: rule %r matched line %d", rule.name, i)
        return FieldExtraction[float](value=value, confidence=rule.confidence, raw_text=raw)
    return FieldExtraction[float]()


def extract_fields(document: Union[RecognizedDocument, str]) -> ExtractedFieldSet:
    """Extract the six trade fields from recognized text.

    Args:
        document: Recognized document, or its raw text.

    Returns:
        ExtractedFieldSet with one FieldExtraction per field. Fields that
        could not be found have value None.
    """
    if isinstance(document, str):
        document = RecognizedDocument(text=document)

    lines = document.lines
    text = document.text

    return ExtractedFieldSet(
        timestamp=_extract_timestamp(lines),
        symbol=_extract_full_text(SYMBOL_RULES, text, "symbol", FieldExtraction[str]),
        side=_extract_full_text(SIDE_RULES, text, "side", FieldExtraction[str]),
        realized_pnl=_extract_realized_pnl(lines),
        fees=_extract_full_text(FEE_RULES, text, "fees", FieldExtraction[float]),
        roi=_extract_roi(lines),
    )


def parse_recognized_text(text: str, confidence: float = 0.0) -> ExtractedFieldSet:
    """Convenience wrapper: build a RecognizedDocument and extract from it."""
    return extract_fields(RecognizedDocument(text=text, confidence=confidence))
