import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from risk_engine.config import Config
from risk_engine.models.result import ScoringResult
from risk_engine.sinks.storage import ResultStore

logger = logging.getLogger(__name__)


class AlertRecord(BaseModel):
    """Severity-tagged alert pushed to the realtime feed"""
    user_id: Optional[str] = None
    alert_type: str = Config.ALERT_TYPE
    severity: str
    title: str
    message: str
    metadata: Dict[str, Any]
    created_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


def alert_severity(score: float) -> Optional[str]:
    """Severity for an ensemble score, or None when no alert is due"""
    if score <= Config.ALERT_THRESHOLD:
        return None
    if score > Config.CRITICAL_ALERT_THRESHOLD:
        return "critical"
    if score > Config.HIGH_ALERT_THRESHOLD:
        return "high"
    return "medium"


def build_alert(result: ScoringResult) -> Optional[AlertRecord]:
    severity = alert_severity(result.ensemble_score)
    if severity is None:
        return None

    return AlertRecord(
        user_id=result.user_id,
        severity=severity,
        title=f"{severity.upper()} Risk Transaction Detected",
        message=(
            f"Advanced ML models flagged transaction {result.transaction_id} "
            f"with {result.ensemble_score * 100:.1f}% risk score"
        ),
        metadata={
            "transaction_id": result.transaction_id,
            "ensemble_score": result.ensemble_score,
            "prediction": result.prediction.value,
            "model_scores": {
                "random_forest": result.random_forest_score,
                "lstm": result.lstm_score,
                "xgboost": result.xgboost_score,
            },
            "risk_factors": result.risk_factors,
            "recommended_actions": result.recommended_actions,
            "confidence": result.confidence,
        },
    )


class AlertDispatcher:
    """
    Stores alerts and fans them out to in-process subscribers.

    The store is the only consumer the service wires up; subscribers are an
    extension point for embedding applications (a websocket push, a queue
    producer) and are registered with subscribe(). Subscriber failures are
    logged and do not stop delivery to the others.
    """

    def __init__(self, store: ResultStore):
        self.store = store
        self.subscribers: List[Callable[[AlertRecord], None]] = []

    def subscribe(self, callback: Callable[[AlertRecord], None]):
        self.subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[AlertRecord], None]):
        if callback in self.subscribers:
            self.subscribers.remove(callback)

    def dispatch(self, result: ScoringResult) -> Optional[AlertRecord]:
        alert = build_alert(result)
        if alert is None:
            return None

        if not self.store.save_alert(alert):
            logger.error(f"Alert for {result.transaction_id} was not persisted")

        for callback in list(self.subscribers):
            try:
                callback(alert)
            except Exception as e:
                logger.error(f"Alert subscriber failed for {result.transaction_id}: {e}")

        logger.info(f"{alert.severity.upper()} alert raised for {result.transaction_id}")
        return alert
