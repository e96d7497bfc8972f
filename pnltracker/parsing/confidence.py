"""Overall confidence and review decision for an extracted field set."""

from pnltracker.models import Confidence, ExtractedFieldSet


def overall_confidence(fields: ExtractedFieldSet) -> Confidence:
    """Combine the critical fields' confidence.

    HIGH only when timestamp, symbol and realized PnL are all HIGH; LOW as
    soon as any of them is LOW; MEDIUM otherwise.
    """
    levels = [f.confidence for f in fields.critical_fields()]

    if all(level is Confidence.HIGH for level in levels):
        return Confidence.HIGH
    if any(level is Confidence.LOW for level in levels):
        return Confidence.LOW
    return Confidence.MEDIUM


def has_critical_fields(fields: ExtractedFieldSet) -> bool:
    return all(f.value is not None for f in fields.critical_fields())


def needs_review(fields: ExtractedFieldSet) -> bool:
    """A record must be reviewed when it is incomplete or low confidence."""
    if not has_critical_fields(fields):
        return True
    return overall_confidence(fields) is Confidence.LOW
