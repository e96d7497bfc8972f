"""SQLite trade store for PnL Tracker."""

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

from pnltracker.analytics.duplicates import DUPLICATE_PNL_TOLERANCE, find_duplicate
from pnltracker.journal import TradeNotFoundError
from pnltracker.models import Confidence, Trade, TradeConfidence
from pnltracker.parsing.dates import week_range

_COLUMNS = (
    "id, timestamp, symbol, side, realized_pnl, fees, roi, result, needs_review, "
    "confidence_timestamp, confidence_symbol, confidence_pnl, confidence_overall, "
    "source_image_id, remarks, created_at, updated_at, imported_at"
)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


class TradeStore:
    """SQLite-based trade journal."""

    REQUIRED_TABLES = ["trades"]

    def __init__(self, db_path: Path):
        """Initialize the trade store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS trades (
                    id TEXT PRIMARY KEY,
                    timestamp TEXT NOT NULL,
                    symbol TEXT NOT NULL,
                    side TEXT NOT NULL DEFAULT 'unknown',
                    realized_pnl REAL NOT NULL,
                    fees REAL,
                    roi REAL,
                    result TEXT NOT NULL,
                    needs_review INTEGER NOT NULL DEFAULT 0,
                    confidence_timestamp TEXT NOT NULL,
                    confidence_symbol TEXT NOT NULL,
                    confidence_pnl TEXT NOT NULL,
                    confidence_overall TEXT NOT NULL,
                    source_image_id TEXT,
                    remarks TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    imported_at TEXT
                )
            """)
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_trades_symbol_timestamp ON trades (symbol, timestamp)"
            )
            conn.commit()
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    @staticmethod
    def _to_row(trade: Trade) -> tuple:
        return (
            trade.id,
            trade.timestamp.isoformat(),
            trade.symbol,
            trade.side,
            trade.realized_pnl,
            trade.fees,
            trade.roi,
            trade.result,
            1 if trade.needs_review else 0,
            trade.confidence.timestamp.value,
            trade.confidence.symbol.value,
            trade.confidence.pnl.value,
            trade.confidence.overall.value,
            trade.source_image_id,
            trade.remarks,
            trade.created_at.isoformat(),
            trade.updated_at.isoformat(),
            _iso(trade.imported_at),
        )

    @staticmethod
    def _from_row(row: sqlite3.Row) -> Trade:
        return Trade(
            id=row["id"],
            timestamp=datetime.fromisoformat(row["timestamp"]),
            symbol=row["symbol"],
            side=row["side"],
            realized_pnl=row["realized_pnl"],
            fees=row["fees"],
            roi=row["roi"],
            result=row["result"],
            needs_review=bool(row["needs_review"]),
            confidence=TradeConfidence(
                timestamp=Confidence(row["confidence_timestamp"]),
                symbol=Confidence(row["confidence_symbol"]),
                pnl=Confidence(row["confidence_pnl"]),
                overall=Confidence(row["confidence_overall"]),
            ),
            source_image_id=row["source_image_id"],
            remarks=row["remarks"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
            imported_at=_parse(row["imported_at"]),
        )

    def save_trade(self, trade: Trade) -> None:
        """Insert a trade, or fully replace the stored trade with the same id.

        Args:
            trade: Trade to save.
        """
        self.save_trades([trade])

    def save_trades(self, trades: list[Trade]) -> None:
        """Save several trades in one transaction.

        Args:
            trades: Trades to save.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.executemany(
                f"INSERT OR REPLACE INTO trades ({_COLUMNS}) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                [self._to_row(t) for t in trades],
            )
            conn.commit()
        finally:
            conn.close()

    def get_trade(self, trade_id: str) -> Optional[Trade]:
        """Get a trade by id.

        Args:
            trade_id: Trade id.

        Returns:
            Trade if found, None otherwise.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(f"SELECT {_COLUMNS} FROM trades WHERE id = ?", (trade_id,))
            row = cursor.fetchone()
            return self._from_row(row) if row else None
        finally:
            conn.close()

    def get_trades(self, week_key: Optional[str] = None) -> list[Trade]:
        """Get trades, newest first.

        Args:
            week_key: Optional ISO week filter. If None, returns all trades.

        Returns:
            List of trades.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            if week_key:
                start, end = week_range(week_key)
                cursor.execute(
                    f"""
                    SELECT {_COLUMNS} FROM trades
                    WHERE timestamp >= ? AND timestamp <= ?
                    ORDER BY timestamp DESC
                    """,
                    (start.isoformat(), end.isoformat()),
                )
            else:
                cursor.execute(f"SELECT {_COLUMNS} FROM trades ORDER BY timestamp DESC")
            return [self._from_row(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def delete_trade(self, trade_id: str) -> None:
        """Delete a trade.

        Args:
            trade_id: Id of the trade to delete.

        Raises:
            TradeNotFoundError: If no trade has that id.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM trades WHERE id = ?", (trade_id,))
            conn.commit()
            if cursor.rowcount == 0:
                raise TradeNotFoundError(trade_id)
        finally:
            conn.close()

    def delete_all(self) -> int:
        """Delete every trade.

        Returns:
            Number of trades removed.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM trades")
            conn.commit()
            return cursor.rowcount
        finally:
            conn.close()

    def check_duplicate(self, trade: Trade) -> Optional[Trade]:
        """Find a stored trade that `trade` duplicates.

        Candidates are narrowed by symbol and P&L in SQL, then checked with
        the same rule as `find_duplicate`.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT {_COLUMNS} FROM trades
                WHERE symbol = ? AND realized_pnl > ? AND realized_pnl < ?
                ORDER BY timestamp
                """,
                (
                    trade.symbol,
                    trade.realized_pnl - DUPLICATE_PNL_TOLERANCE,
                    trade.realized_pnl + DUPLICATE_PNL_TOLERANCE,
                ),
            )
            candidates = [self._from_row(row) for row in cursor.fetchall()]
        finally:
            conn.close()
        return find_duplicate(trade, candidates)

    def get_stats(self) -> dict:
        """Get database statistics.

        Returns:
            Dictionary with table record counts.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            stats = {}
            for table in self.REQUIRED_TABLES:
                cursor.execute(f"SELECT COUNT(*) as count FROM {table}")
                stats[table] = cursor.fetchone()["count"]
            cursor.execute("SELECT COUNT(*) as count FROM trades WHERE needs_review = 1")
            stats["needs_review"] = cursor.fetchone()["count"]
            return stats
        finally:
            conn.close()
