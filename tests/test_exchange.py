"""Tests for JSON export and import.

**Feature: pnl-tracker**
"""

import json
from datetime import datetime, timedelta

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from pnltracker.exchange import (
    EXPORT_VERSION,
    TradeImportError,
    default_export_filename,
    export_trades,
    import_trades,
)
from pnltracker.models import Confidence
from pnltracker.parsing import assemble_trade, extract_fields, manual_trade

NOW = datetime(2024, 1, 14, 20, 0, 0)
LATER = datetime(2024, 2, 1, 9, 0, 0)


def sample_trades():
    scanned = assemble_trade(
        extract_fields("08-01-2024\nBTCUSDT\nRealized PNL: +10 USDT\nFees: 0.4"),
        "img-1",
        now=NOW,
    )
    typed = manual_trade(
        datetime(2024, 1, 9, 10, 0), "ETHUSDT", -42.1, side="short", roi=-3.5, remarks="stop hit", now=NOW
    )
    return [scanned, typed]


class TestExport:
    """Exports wrap camelCase trade objects with version and timestamp."""

    def test_document_shape(self):
        document = json.loads(export_trades(sample_trades(), now=NOW))

        assert document["version"] == EXPORT_VERSION
        assert document["exportedAt"] == "2024-01-14T20:00:00"
        assert len(document["trades"]) == 2

    def test_trade_keys(self):
        trade = json.loads(export_trades(sample_trades(), now=NOW))["trades"][0]

        assert trade["realizedPnl"] == 10.0
        assert trade["needsReview"] is True
        assert trade["sourceImageId"] == "img-1"
        assert trade["timestamp"] == "2024-01-08T00:00:00"
        assert trade["confidence"]["timestamp"] == "low"
        assert trade["importedAt"] is None

    def test_empty(self):
        assert json.loads(export_trades([], now=NOW))["trades"] == []

    def test_filename(self):
        assert default_export_filename(NOW) == "pnl-export-2024-01-14.json"


class TestImport:
    """Imports accept the export wrapper or a bare array."""

    def test_roundtrip(self):
        originals = sample_trades()
        restored = import_trades(export_trades(originals, now=NOW), now=LATER)

        assert [t.model_copy(update={"imported_at": None}) for t in restored] == originals
        assert all(t.imported_at == LATER for t in restored)
        assert restored[0].confidence.overall is Confidence.LOW

    def test_bare_array_not_stamped(self):
        array = json.dumps(json.loads(export_trades(sample_trades(), now=NOW))["trades"])
        restored = import_trades(array, now=LATER)
        assert [t.imported_at for t in restored] == [None, None]

    def test_minimal_trade(self):
        payload = json.dumps(
            [
                {
                    "id": "abc",
                    "timestamp": "2024-01-08T14:32:15.000Z",
                    "symbol": "SOLUSDT",
                    "realizedPnl": -2,
                    "createdAt": "2024-01-08T14:33:00.000Z",
                    "updatedAt": "2024-01-08T14:33:00.000Z",
                }
            ]
        )
        (trade,) = import_trades(payload)
        assert trade.result == "loss"
        assert trade.timestamp == datetime(2024, 1, 8, 14, 32, 15)
        assert trade.side == "unknown"

    @pytest.mark.parametrize(
        "payload",
        [
            "not json",
            '{"version": "1.0.0"}',
            '{"trades": "nope"}',
            "42",
            '"trades"',
            "[1, 2]",
            '[{"id": "x"}]',
        ],
    )
    def test_malformed(self, payload: str):
        with pytest.raises(TradeImportError):
            import_trades(payload)

    def test_inconsistent_result_rejects_whole_payload(self):
        good, bad = json.loads(export_trades(sample_trades(), now=NOW))["trades"]
        bad["result"] = "win"
        with pytest.raises(TradeImportError, match="#1"):
            import_trades(json.dumps({"trades": [good, bad]}))

    def test_import_error_is_value_error(self):
        with pytest.raises(ValueError):
            import_trades("{")

    @given(
        pnls=st.lists(
            st.floats(min_value=-1e6, max_value=1e6, allow_nan=False),
            min_size=1,
            max_size=10,
        )
    )
    @settings(max_examples=50)
    def test_roundtrip_preserves_amounts(self, pnls):
        """
        *For any* list of trades, export followed by import restores every
        realized P&L and result exactly.
        """
        originals = [
            manual_trade(NOW - timedelta(hours=i), "BTCUSDT", pnl, now=NOW)
            for i, pnl in enumerate(pnls)
        ]
        restored = import_trades(export_trades(originals, now=NOW), now=LATER)

        assert [t.realized_pnl for t in restored] == pnls
        assert [t.result for t in restored] == [t.result for t in originals]
        assert [t.id for t in restored] == [t.id for t in originals]
