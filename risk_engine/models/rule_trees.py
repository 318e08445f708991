"""
Rule-ensemble scorer ("Random Forest").

Five hand-written decision functions over the transaction features, each
returning a fixed leaf value. The scorer output is their arithmetic mean.
"""
from typing import List

from risk_engine.features.engineering import is_off_hours
from risk_engine.features.schema import TransactionFeatures

HIGH_RISK_CATEGORIES = ("Gambling", "Cash Advance")


def _risky_location(features: TransactionFeatures) -> bool:
    return "foreign" in features.location or "ATM" in features.location


def decision_tree_1(features: TransactionFeatures) -> float:
    """Amount tiers, refined by card presence, velocity and location"""
    if features.amount > 10000:
        if not features.card_present:
            return 0.9
        if features.velocity_24h is not None and features.velocity_24h > 5:
            return 0.8
        # never below the mid-amount leaf for the same location
        return 0.6 if _risky_location(features) else 0.4
    if features.amount > 1000:
        return 0.6 if _risky_location(features) else 0.2
    return 0.1


def decision_tree_2(features: TransactionFeatures, hour: int) -> float:
    """Off-hours activity and risky merchant categories"""
    if is_off_hours(hour):
        if features.amount > 5000:
            return 0.85
        if not features.card_present:
            return 0.6
        return 0.3
    if features.merchant_category in HIGH_RISK_CATEGORIES:
        return 0.7
    return 0.15


def decision_tree_3(features: TransactionFeatures) -> float:
    """Short-term velocity and recency"""
    if features.velocity_1h is not None and features.velocity_1h > 3:
        if features.amount > 2000:
            return 0.9
        return 0.6
    if features.time_since_last_transaction is not None and features.time_since_last_transaction < 60:
        return 0.7
    return 0.2


def decision_tree_4(features: TransactionFeatures) -> float:
    """Account balance ratio and customer age"""
    if features.account_balance is not None and features.amount > features.account_balance * 0.8:
        return 0.8
    if features.user_age is not None and features.user_age < 25 and features.amount > 5000:
        return 0.6
    return 0.1


def decision_tree_5(features: TransactionFeatures) -> float:
    """Device and network origin"""
    if features.device_id is None:
        device_risk = 0.3
    else:
        device_risk = 0.5 if "unknown" in features.device_id else 0.1

    if features.customer_ip is None:
        ip_risk = 0.4
    else:
        ip_risk = 0.1 if features.customer_ip.startswith("10.") else 0.3

    return min((device_risk + ip_risk) * 1.5, 1.0)


def tree_scores(features: TransactionFeatures, hour: int) -> List[float]:
    return [
        decision_tree_1(features),
        decision_tree_2(features, hour),
        decision_tree_3(features),
        decision_tree_4(features),
        decision_tree_5(features),
    ]


def score_rules(features: TransactionFeatures, hour: int) -> float:
    """
    Score a transaction with the rule ensemble.

    Args:
        features: Transaction feature record
        hour: Hour of day (0-23) of the evaluation time

    Returns:
        Mean of the five tree outputs, in [0, 1]
    """
    trees = tree_scores(features, hour)
    return sum(trees) / len(trees)
