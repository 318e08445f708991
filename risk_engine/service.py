"""
Risk scoring service used by the API layer.

Wraps the stateless RiskScoringEngine and adds:
- feature enrichment at the serving boundary
- best-effort persistence of results and analytics events
- alert dispatch for risky transactions
- periodic model performance snapshots
"""
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

import numpy as np

from risk_engine.config import Config
from risk_engine.features.engineering import FeatureEngine
from risk_engine.features.schema import TransactionFeatures
from risk_engine.models.ensemble import RiskScoringEngine
from risk_engine.models.result import ScoringResult
from risk_engine.sinks.alerts import AlertDispatcher
from risk_engine.sinks.storage import ResultStore

logger = logging.getLogger(__name__)


class RiskScoringService:
    """
    Serving-side wrapper around the scoring engine.

    Usage:
        service = RiskScoringService(store=ResultStore("data/risk_engine.db"))
        features = service.prepare(transaction)
        result = service.score(features)
        service.publish(features, result)
    """

    def __init__(
        self,
        store: ResultStore,
        rng: Optional[np.random.Generator] = None,
        simulate_missing: bool = Config.SIMULATE_MISSING_FEATURES,
    ):
        self.rng = rng if rng is not None else np.random.default_rng(Config.RANDOM_STATE)
        self.engine = RiskScoringEngine()
        self.feature_engine = FeatureEngine(rng=self.rng, simulate_missing=simulate_missing)
        self.store = store
        self.dispatcher = AlertDispatcher(store)

    def prepare(self, transaction: TransactionFeatures) -> TransactionFeatures:
        return self.feature_engine.enrich(transaction)

    def score(self, features: TransactionFeatures, evaluation_time: Optional[datetime] = None) -> ScoringResult:
        """Score enriched features; the wall clock is read here when no time is given"""
        if evaluation_time is None:
            evaluation_time = datetime.now()
        return self.engine.analyze(features, evaluation_time)

    def publish(self, features: TransactionFeatures, result: ScoringResult):
        """
        Push a result to the downstream sinks.

        Every sink is best-effort; failures are logged and never raised.
        """
        try:
            if not self.store.save_ensemble_result(result):
                logger.error(f"Ensemble result for {result.transaction_id} was not persisted")
            if not self.store.log_analytics_event(features, result):
                logger.error(f"Analytics event for {result.transaction_id} was not persisted")

            snapshots = self.performance_snapshots()
            if snapshots and not self.store.save_model_performance(snapshots):
                logger.error("Model performance snapshot was not persisted")

            self.dispatcher.dispatch(result)
        except Exception as e:
            logger.error(f"Downstream publishing failed for {result.transaction_id}: {e}", exc_info=True)

    def performance_snapshots(self) -> List[Dict]:
        """Static model figures, each kept with a fixed probability"""
        training_date = datetime.now(timezone.utc).isoformat()
        snapshots = []
        for record in Config.MODEL_PERFORMANCE:
            if self.rng.random() < Config.PERFORMANCE_SNAPSHOT_PROBABILITY:
                snapshots.append({**record, "training_date": training_date, "is_active": True})
        return snapshots

    def health_check(self) -> Dict:
        try:
            self.store.count_results()
            store_ok = True
        except Exception as e:
            logger.error(f"Result store check failed: {e}")
            store_ok = False

        return {
            "status": "healthy" if store_ok else "degraded",
            "components": {
                "scoring_engine": True,
                "feature_engine": self.feature_engine is not None,
                "result_store": store_ok,
                "alert_subscribers": len(self.dispatcher.subscribers),
            },
            "models": self.engine.model_names,
        }
