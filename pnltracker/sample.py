"""Demo journal for trying out the reports.

`generate_sample_trades` turns a fixed table of closed positions, spread
over roughly nine weeks, into trades dated relative to now.
"""

from datetime import datetime, timedelta
from typing import NamedTuple, Optional

from pnltracker.models import Trade
from pnltracker.parsing.assembler import manual_trade


class SampleTrade(NamedTuple):
    symbol: str
    pnl: float
    side: str
    days_ago: int
    hours_ago: int


# Position size the sample ROI is computed against
SAMPLE_MARGIN = 10_000.0
SAMPLE_FEE_RATE = 0.001

SAMPLE_TRADES = (
    SampleTrade("BTCUSDT", 1250.50, "long", 1, 2),
    SampleTrade("ETHUSDT", -320.75, "short", 1, 8),
    SampleTrade("SOLUSDT", 445.20, "long", 2, 4),
    SampleTrade("BTCUSDT", 890.00, "long", 2, 12),
    SampleTrade("XRPUSDT", -150.30, "long", 3, 6),
    SampleTrade("DOGEUSDT", 78.50, "short", 3, 18),
    SampleTrade("AVAXUSDT", 562.80, "long", 4, 3),
    SampleTrade("LINKUSDT", -88.45, "short", 4, 15),
    SampleTrade("BTCUSDT", -425.00, "short", 5, 7),
    SampleTrade("ETHUSDT", 680.25, "long", 5, 20),
    SampleTrade("MATICUSDT", 125.60, "long", 6, 5),
    SampleTrade("SOLUSDT", -210.90, "short", 6, 14),
    SampleTrade("BTCUSDT", 1580.40, "long", 8, 9),
    SampleTrade("ETHUSDT", 445.75, "long", 8, 16),
    SampleTrade("ARBUSDT", -95.20, "short", 9, 3),
    SampleTrade("OPUSDT", 280.30, "long", 9, 21),
    SampleTrade("BTCUSDT", -780.50, "short", 10, 8),
    SampleTrade("ETHUSDT", 320.40, "long", 10, 17),
    SampleTrade("SOLUSDT", 195.80, "long", 11, 4),
    SampleTrade("XRPUSDT", 112.25, "long", 11, 13),
    SampleTrade("BTCUSDT", 2150.00, "long", 15, 6),
    SampleTrade("ETHUSDT", -540.80, "short", 15, 19),
    SampleTrade("BNBUSDT", 385.45, "long", 16, 2),
    SampleTrade("DOGEUSDT", -62.30, "long", 16, 11),
    SampleTrade("BTCUSDT", 920.75, "long", 18, 7),
    SampleTrade("AVAXUSDT", -185.40, "short", 18, 15),
    SampleTrade("ETHUSDT", 730.20, "long", 20, 4),
    SampleTrade("SOLUSDT", 425.90, "long", 20, 22),
    SampleTrade("BTCUSDT", -310.60, "short", 22, 9),
    SampleTrade("LINKUSDT", 168.35, "long", 22, 18),
    SampleTrade("BTCUSDT", 1890.25, "long", 25, 5),
    SampleTrade("ETHUSDT", 520.80, "long", 25, 14),
    SampleTrade("ARBUSDT", -145.70, "short", 27, 8),
    SampleTrade("OPUSDT", 235.40, "long", 27, 20),
    SampleTrade("BTCUSDT", -620.90, "short", 30, 3),
    SampleTrade("ETHUSDT", 890.55, "long", 30, 16),
    SampleTrade("SOLUSDT", 310.25, "long", 35, 7),
    SampleTrade("BTCUSDT", 1420.80, "long", 35, 19),
    SampleTrade("MATICUSDT", -98.45, "short", 40, 4),
    SampleTrade("XRPUSDT", 175.60, "long", 40, 12),
    SampleTrade("BTCUSDT", 2340.00, "long", 45, 6),
    SampleTrade("ETHUSDT", -420.35, "short", 45, 17),
    SampleTrade("DOGEUSDT", 95.80, "long", 50, 9),
    SampleTrade("AVAXUSDT", 485.25, "long", 50, 21),
    SampleTrade("BTCUSDT", -890.70, "short", 55, 3),
    SampleTrade("ETHUSDT", 620.40, "long", 55, 15),
    SampleTrade("LINKUSDT", 265.90, "long", 60, 8),
    SampleTrade("SOLUSDT", -175.25, "short", 60, 18),
    SampleTrade("BTCUSDT", 1680.55, "long", 65, 5),
    SampleTrade("BNBUSDT", 340.80, "long", 65, 14),
)


def generate_sample_trades(now: Optional[datetime] = None) -> list[Trade]:
    """Build the sample trades, newest first.

    Each trade is recorded at its own close time, carries a 0.1% fee and
    an ROI against a 10,000 margin, and is entered with HIGH confidence.
    """
    now = now or datetime.now()
    trades = []
    for sample in SAMPLE_TRADES:
        timestamp = now - timedelta(days=sample.days_ago, hours=sample.hours_ago)
        trades.append(
            manual_trade(
                timestamp,
                sample.symbol,
                sample.pnl,
                side=sample.side,
                fees=round(abs(sample.pnl * SAMPLE_FEE_RATE), 4),
                roi=round(sample.pnl / SAMPLE_MARGIN * 100, 4),
                now=timestamp,
            )
        )
    return sorted(trades, key=lambda t: t.timestamp, reverse=True)
