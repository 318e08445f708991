"""
SQLite persistence for scoring results, analytics events, model performance
snapshots and alerts.

Writes are best-effort: a failed write is logged and reported through the
return value, never raised into the request path.
"""
import json
import logging
import os
import sqlite3
from datetime import datetime, timezone
from typing import Any, Dict, List

from risk_engine.config import Config

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS fraud_ensemble_results (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    transaction_id TEXT NOT NULL,
    user_id TEXT,
    model_1_score REAL,
    model_2_score REAL,
    model_3_score REAL,
    ensemble_score REAL,
    prediction TEXT,
    confidence REAL,
    risk_factors TEXT,
    behavioral_score REAL,
    created_at TEXT
);
CREATE TABLE IF NOT EXISTS ai_analytics (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT,
    session_id TEXT,
    model_type TEXT,
    input_data TEXT,
    output_data TEXT,
    confidence_score REAL,
    processing_time_ms INTEGER,
    created_at TEXT
);
CREATE TABLE IF NOT EXISTS ml_model_performance (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    model_name TEXT,
    model_version TEXT,
    accuracy REAL,
    precision_score REAL,
    recall REAL,
    f1_score REAL,
    training_date TEXT,
    is_active INTEGER
);
CREATE TABLE IF NOT EXISTS real_time_alerts (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT,
    alert_type TEXT,
    severity TEXT,
    title TEXT,
    message TEXT,
    metadata TEXT,
    created_at TEXT
);
"""


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ResultStore:
    """Relational sink for everything the service produces"""

    def __init__(self, db_path: str = None):
        self.db_path = str(db_path or Config.DB_PATH)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def init_db(self):
        directory = os.path.dirname(self.db_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with self._connect() as conn:
            conn.executescript(SCHEMA)
        logger.info(f"Result store ready at {self.db_path}")

    def _insert(self, table: str, row: Dict[str, Any]) -> bool:
        columns = ", ".join(row.keys())
        placeholders = ", ".join(["?"] * len(row))
        try:
            with self._connect() as conn:
                conn.execute(f"INSERT INTO {table} ({columns}) VALUES ({placeholders})", list(row.values()))
            return True
        except sqlite3.Error as e:
            logger.error(f"Database error writing to {table}: {e}")
            return False

    def save_ensemble_result(self, result) -> bool:
        return self._insert("fraud_ensemble_results", {
            "transaction_id": result.transaction_id,
            "user_id": result.user_id,
            "model_1_score": result.random_forest_score,
            "model_2_score": result.lstm_score,
            "model_3_score": result.xgboost_score,
            "ensemble_score": result.ensemble_score,
            "prediction": result.prediction.value,
            "confidence": result.confidence,
            "risk_factors": json.dumps(result.risk_factors),
            "behavioral_score": result.lstm_score,
            "created_at": _now(),
        })

    def log_analytics_event(self, features, result) -> bool:
        return self._insert("ai_analytics", {
            "user_id": features.user_id,
            "session_id": features.transaction_id,
            "model_type": "advanced_ml_ensemble",
            "input_data": features.model_dump_json(),
            "output_data": result.model_dump_json(),
            "confidence_score": result.confidence,
            "processing_time_ms": result.processing_time_ms,
            "created_at": _now(),
        })

    def save_model_performance(self, records: List[Dict[str, Any]]) -> bool:
        if not records:
            return True
        try:
            with self._connect() as conn:
                conn.executemany(
                    "INSERT INTO ml_model_performance (model_name, model_version, accuracy, "
                    "precision_score, recall, f1_score, training_date, is_active) "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                    [
                        (
                            r["model_name"], r["model_version"], r["accuracy"],
                            r["precision_score"], r["recall"], r["f1_score"],
                            r["training_date"], int(r["is_active"]),
                        )
                        for r in records
                    ],
                )
            return True
        except sqlite3.Error as e:
            logger.error(f"Database error writing model performance: {e}")
            return False

    def save_alert(self, alert) -> bool:
        return self._insert("real_time_alerts", {
            "user_id": alert.user_id,
            "alert_type": alert.alert_type,
            "severity": alert.severity,
            "title": alert.title,
            "message": alert.message,
            "metadata": json.dumps(alert.metadata),
            "created_at": alert.created_at,
        })

    def recent_alerts(self, limit: int = 20) -> List[Dict[str, Any]]:
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM real_time_alerts ORDER BY id DESC LIMIT ?", (limit,)
            ).fetchall()

        alerts = []
        for row in rows:
            alert = dict(row)
            alert["metadata"] = json.loads(alert["metadata"])
            alerts.append(alert)
        return alerts

    def latest_model_performance(self) -> List[Dict[str, Any]]:
        """Most recent snapshot per model name"""
        with self._connect() as conn:
            rows = conn.execute(
                "SELECT * FROM ml_model_performance WHERE id IN "
                "(SELECT MAX(id) FROM ml_model_performance GROUP BY model_name) "
                "ORDER BY model_name"
            ).fetchall()

        records = []
        for row in rows:
            record = dict(row)
            record["is_active"] = bool(record["is_active"])
            records.append(record)
        return records

    def count_results(self) -> int:
        with self._connect() as conn:
            return conn.execute("SELECT COUNT(*) FROM fraud_ensemble_results").fetchone()[0]
