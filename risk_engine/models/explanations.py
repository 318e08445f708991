from typing import Dict, List

from risk_engine.config import Config
from risk_engine.features.engineering import is_off_hours
from risk_engine.features.schema import TransactionFeatures
from risk_engine.models.result import EnsembleWeights, Verdict

SCORER_FLAG_THRESHOLD = 0.6
HIGH_RISK_MERCHANT_CATEGORIES = ("Gambling", "Cash Advance", "Adult")

FRAUDULENT_ACTIONS = [
    "IMMEDIATE: Block transaction",
    "Alert fraud investigation team",
    "Freeze account temporarily",
    "Require identity verification",
    "Contact customer via verified phone number",
]
SUSPICIOUS_ACTIONS = [
    "Require additional authentication (SMS/Email OTP)",
    "Step-up authentication with security questions",
    "Monitor account for next 24 hours",
    "Flag for manual review",
]
LEGITIMATE_ACTIONS = [
    "Approve transaction",
    "Continue normal monitoring",
]


def classify_verdict(score: float) -> Verdict:
    """Classify the ensemble score (strict greater-than at each threshold)"""
    if score > Config.HIGH_RISK_THRESHOLD:
        return Verdict.FRAUDULENT
    elif score > Config.MEDIUM_RISK_THRESHOLD:
        return Verdict.SUSPICIOUS
    else:
        return Verdict.LEGITIMATE


def generate_risk_factors(
    features: TransactionFeatures,
    hour: int,
    rf_score: float,
    lstm_score: float,
    xgb_score: float,
) -> List[str]:
    """Run the fixed checklist and return the labels of satisfied checks"""
    factors: List[str] = []

    def add(label: str):
        if label not in factors:
            factors.append(label)

    if features.amount > 5000:
        add("High transaction amount")
    if not features.card_present:
        add("Card not present transaction")
    if features.velocity_24h is not None and features.velocity_24h > 3:
        add("High transaction velocity")
    if features.velocity_1h is not None and features.velocity_1h > 2:
        add("Rapid successive transactions")

    if is_off_hours(hour):
        add("Unusual transaction time")

    if "foreign" in features.location or "Unknown" in features.location:
        add("High-risk location")

    if rf_score > SCORER_FLAG_THRESHOLD:
        add("Random Forest flagged anomalous patterns")
    if lstm_score > SCORER_FLAG_THRESHOLD:
        add("LSTM detected sequential anomalies")
    if xgb_score > SCORER_FLAG_THRESHOLD:
        add("XGBoost identified complex risk patterns")

    if features.merchant_category in HIGH_RISK_MERCHANT_CATEGORIES:
        add("High-risk merchant category")

    return factors


def generate_model_explanations(
    rf_score: float, lstm_score: float, xgb_score: float, weights: EnsembleWeights
) -> Dict[str, str]:
    return {
        "random_forest": (
            f"Decision trees identified {rf_score * 100:.1f}% risk based on transaction "
            f"rules and patterns (weight: {weights.rf * 100:.1f}%)"
        ),
        "lstm": (
            f"Sequential analysis detected {lstm_score * 100:.1f}% risk in transaction "
            f"timing and behavioral patterns (weight: {weights.lstm * 100:.1f}%)"
        ),
        "xgboost": (
            f"Gradient boosting found {xgb_score * 100:.1f}% risk through complex "
            f"feature interactions (weight: {weights.xgb * 100:.1f}%)"
        ),
    }


def generate_recommended_actions(score: float, prediction: Verdict) -> List[str]:
    if prediction == Verdict.FRAUDULENT:
        return list(FRAUDULENT_ACTIONS)

    if prediction == Verdict.SUSPICIOUS:
        actions = list(SUSPICIOUS_ACTIONS)
        if score > 0.7:
            actions.append("Consider temporary transaction limits")
        return actions

    actions = list(LEGITIMATE_ACTIONS)
    if score > 0.3:
        actions.append("Log for pattern analysis")
    return actions
