"""
Iterative corrective scorer ("XGBoost").

Starts from a neutral score and applies three fixed corrective functions,
then five adaptive rounds that push scores near the decision boundary toward
a side. Each corrective function reads only the transaction features.
"""
from risk_engine.features.engineering import is_off_hours
from risk_engine.features.schema import TransactionFeatures

BASE_SCORE = 0.5
LEARNING_RATE = 0.1
ADAPTIVE_LEARNING_RATE = 0.05
ADAPTIVE_ROUNDS = 5
UNCERTAINTY_BAND = 0.1

HIGH_RISK_CATEGORIES = ("Gambling", "Adult")


def estimate_true_risk(features: TransactionFeatures) -> float:
    """Coarse risk estimate, independent of any running score"""
    risk = 0.0
    if features.amount > 5000:
        risk += 0.3
    if not features.card_present:
        risk += 0.2
    if features.velocity_24h is not None and features.velocity_24h > 3:
        risk += 0.4
    return min(risk, 1.0)


def boost_tree_1(features: TransactionFeatures) -> float:
    if features.amount > 8000:
        return 0.4
    if features.velocity_1h is not None and features.velocity_1h > 2:
        return 0.3
    return -0.1


def boost_tree_2(features: TransactionFeatures) -> float:
    if not features.card_present and features.amount > 1000:
        return 0.35
    if features.user_age is not None and features.user_age < 30 and features.amount > 3000:
        return 0.25
    return -0.05


def boost_tree_3(features: TransactionFeatures, hour: int) -> float:
    if is_off_hours(hour) and features.amount > 2000:
        return 0.3
    if features.merchant_category in HIGH_RISK_CATEGORIES:
        return 0.4
    return 0.0


def adaptive_boost(features: TransactionFeatures, current: float, coarse_risk: float) -> float:
    """Sharpen uncertain scores; no adjustment outside the uncertainty band"""
    if abs(current - 0.5) < UNCERTAINTY_BAND:
        if features.amount > 5000 or coarse_risk >= 0.6:
            return 0.2
        return -0.1
    return 0.0


def score_boosted(features: TransactionFeatures, hour: int) -> float:
    """
    Score a transaction with the iterative corrective scorer.

    Args:
        features: Transaction feature record
        hour: Hour of day (0-23) of the evaluation time

    Returns:
        Refined score clamped to [0, 1]
    """
    prediction = BASE_SCORE

    prediction += boost_tree_1(features) * LEARNING_RATE
    prediction += boost_tree_2(features) * LEARNING_RATE
    prediction += boost_tree_3(features, hour) * LEARNING_RATE

    coarse_risk = estimate_true_risk(features)
    for _ in range(ADAPTIVE_ROUNDS):
        prediction += adaptive_boost(features, prediction, coarse_risk) * ADAPTIVE_LEARNING_RATE

    return max(0.0, min(1.0, prediction))
