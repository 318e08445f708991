import logging
from typing import Dict, Optional

import numpy as np

from risk_engine.features.schema import TransactionFeatures

logger = logging.getLogger(__name__)

NIGHT_START_HOUR = 22
NIGHT_END_HOUR = 6


def is_off_hours(hour: int) -> bool:
    """True outside 06:00-22:59"""
    return hour < NIGHT_END_HOUR or hour > NIGHT_START_HOUR


class FeatureEngine:
    """
    Prepares incoming transactions for scoring.

    Velocity counters and recency come from an external feature store in a
    complete deployment. When the caller omits them they are simulated here,
    at the serving boundary, so the scoring engine itself stays deterministic.
    Values supplied by the caller are never overwritten.
    """

    def __init__(self, rng: Optional[np.random.Generator] = None, simulate_missing: bool = True):
        self.rng = rng if rng is not None else np.random.default_rng()
        self.simulate_missing = simulate_missing

    def enrich(self, features: TransactionFeatures) -> TransactionFeatures:
        """
        Fill missing velocity and recency features.

        Args:
            features: Validated transaction features

        Returns:
            A new record with the missing fields filled, or the same record
            when simulation is disabled or nothing is missing
        """
        if not self.simulate_missing:
            return features

        updates = self._simulate_velocity_features(features)
        if not updates:
            return features

        logger.debug(f"Simulated features for {features.transaction_id}: {updates}")
        return features.model_copy(update=updates)

    def _simulate_velocity_features(self, features: TransactionFeatures) -> Dict:
        updates = {}

        if features.velocity_24h is None:
            updates["velocity_24h"] = int(self.rng.integers(0, 10))

        if features.velocity_1h is None:
            velocity_1h = int(self.rng.integers(0, 5))
            # A simulated hourly count cannot exceed the simulated daily count
            if "velocity_24h" in updates:
                velocity_1h = min(velocity_1h, updates["velocity_24h"])
            updates["velocity_1h"] = velocity_1h

        if features.time_since_last_transaction is None:
            updates["time_since_last_transaction"] = float(self.rng.integers(0, 3600))

        return updates
