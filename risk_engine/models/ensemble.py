import logging
import time
from datetime import datetime
from typing import Callable, Dict, Tuple

import numpy as np

from risk_engine.config import Config
from risk_engine.exceptions import ScoringError
from risk_engine.features.schema import TransactionFeatures
from risk_engine.models.boosting import score_boosted
from risk_engine.models.explanations import (
    classify_verdict,
    generate_model_explanations,
    generate_recommended_actions,
    generate_risk_factors,
)
from risk_engine.models.result import EnsembleOutput, EnsembleWeights, ScoringResult
from risk_engine.models.rule_trees import score_rules
from risk_engine.models.sequential import score_sequence

logger = logging.getLogger(__name__)

Scorer = Callable[[TransactionFeatures, int], float]

SCORERS: Tuple[Tuple[str, Scorer], ...] = (
    ("random_forest", score_rules),
    ("lstm", score_sequence),
    ("xgboost", score_boosted),
)


def compute_weights(features: TransactionFeatures) -> EnsembleWeights:
    """
    Dynamic per-call weights.

    Long transaction histories favour the sequential scorer, very large
    amounts favour the corrective scorer. Weights are renormalized to sum to 1.
    """
    rf_weight = Config.RF_WEIGHT
    lstm_weight = Config.LSTM_WEIGHT
    xgb_weight = Config.XGB_WEIGHT
    shift = Config.WEIGHT_SHIFT

    if features.history_length > Config.HISTORY_LENGTH_THRESHOLD:
        lstm_weight += shift
        rf_weight -= shift / 2
        xgb_weight -= shift / 2

    if features.amount > Config.LARGE_AMOUNT_THRESHOLD:
        xgb_weight += shift
        rf_weight -= shift / 2
        lstm_weight -= shift / 2

    total_weight = rf_weight + lstm_weight + xgb_weight
    return EnsembleWeights(
        rf=rf_weight / total_weight,
        lstm=lstm_weight / total_weight,
        xgb=xgb_weight / total_weight,
    )


def combine(rf_score: float, lstm_score: float, xgb_score: float, features: TransactionFeatures) -> EnsembleOutput:
    """
    Combine scorer outputs using dynamic weighted voting.

    Args:
        rf_score: Rule-ensemble score
        lstm_score: Sequential scorer output
        xgb_score: Corrective scorer output
        features: Transaction features used to pick the weights

    Returns:
        Ensemble score, confidence and the weights used
    """
    weights = compute_weights(features)

    ensemble_score = rf_score * weights.rf + lstm_score * weights.lstm + xgb_score * weights.xgb
    ensemble_score = max(0.0, min(1.0, ensemble_score))

    # Confidence falls as the scorers disagree
    scores = np.array([rf_score, lstm_score, xgb_score])
    variance = float(np.mean((scores - ensemble_score) ** 2))
    confidence = max(0.1, 1 - variance * 3)

    return EnsembleOutput(score=ensemble_score, confidence=confidence, weights=weights)


class RiskScoringEngine:
    """
    Stateless multi-model risk scorer.

    Runs the rule ensemble, sequential and corrective scorers, combines them
    and produces a verdict with explanations. Nothing is retained between
    calls, so one instance can serve concurrent requests.
    """

    def __init__(self):
        self.scorers = SCORERS

    @property
    def model_names(self):
        return [name for name, _ in self.scorers]

    def run_scorers(self, features: TransactionFeatures, hour: int) -> Dict[str, float]:
        scores = {}
        for name, scorer in self.scorers:
            scores[name] = float(scorer(features, hour))
        return scores

    def analyze(self, features: TransactionFeatures, evaluation_time: datetime) -> ScoringResult:
        """
        Score a single transaction.

        Args:
            features: Validated transaction features
            evaluation_time: Time the transaction is evaluated at; only its
                hour of day is used

        Returns:
            Complete scoring result

        Raises:
            ScoringError: if any stage fails
        """
        start_time = time.perf_counter()
        hour = evaluation_time.hour

        try:
            scores = self.run_scorers(features, hour)
            rf_score = scores["random_forest"]
            lstm_score = scores["lstm"]
            xgb_score = scores["xgboost"]

            ensemble = combine(rf_score, lstm_score, xgb_score, features)
            prediction = classify_verdict(ensemble.score)

            risk_factors = generate_risk_factors(features, hour, rf_score, lstm_score, xgb_score)
            model_explanations = generate_model_explanations(rf_score, lstm_score, xgb_score, ensemble.weights)
            recommended_actions = generate_recommended_actions(ensemble.score, prediction)

            processing_time = int((time.perf_counter() - start_time) * 1000)
            result = ScoringResult(
                transaction_id=features.transaction_id,
                user_id=features.user_id,
                random_forest_score=round(rf_score, 4),
                lstm_score=round(lstm_score, 4),
                xgboost_score=round(xgb_score, 4),
                ensemble_score=round(ensemble.score, 4),
                prediction=prediction,
                confidence=round(ensemble.confidence, 4),
                risk_factors=risk_factors,
                model_explanations=model_explanations,
                recommended_actions=recommended_actions,
                processing_time_ms=processing_time,
            )
        except Exception as e:
            logger.error(f"Scoring error for {features.transaction_id}: {e}")
            raise ScoringError(features.transaction_id, str(e)) from e

        logger.debug(
            f"Scores for {features.transaction_id}: rf={rf_score:.3f} "
            f"lstm={lstm_score:.3f} xgb={xgb_score:.3f}"
        )
        return result
