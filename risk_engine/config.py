import os


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


class Config:
    """Configuration settings for the risk scoring service"""

    # API Settings
    API_TITLE = "Advanced ML Fraud Detection API"
    API_DESCRIPTION = "Real-time transaction risk scoring using a dynamic weighted ensemble"
    API_VERSION = "2.0.0"
    API_HOST = os.getenv("API_HOST", "0.0.0.0")
    API_PORT = int(os.getenv("API_PORT", "8001"))

    # Ensemble Configuration
    RF_WEIGHT = 0.4
    LSTM_WEIGHT = 0.3
    XGB_WEIGHT = 0.3
    WEIGHT_SHIFT = 0.1
    HISTORY_LENGTH_THRESHOLD = 5
    LARGE_AMOUNT_THRESHOLD = 10000
    ENSEMBLE_METHOD = "Dynamic Weighted Voting"
    MODELS_USED = ["Random Forest", "LSTM Neural Network", "XGBoost"]

    # Verdict thresholds
    HIGH_RISK_THRESHOLD = 0.8
    MEDIUM_RISK_THRESHOLD = 0.5

    # Alert severity thresholds
    ALERT_THRESHOLD = 0.5
    CRITICAL_ALERT_THRESHOLD = 0.8
    HIGH_ALERT_THRESHOLD = 0.6
    ALERT_TYPE = "advanced_fraud_detection"

    # Feature enrichment
    SIMULATE_MISSING_FEATURES = _env_bool("SIMULATE_MISSING_FEATURES", True)
    RANDOM_STATE = int(os.getenv("RANDOM_STATE")) if os.getenv("RANDOM_STATE") else None

    # Data Generation / Evaluation
    EVALUATION_SAMPLES = int(os.getenv("EVALUATION_SAMPLES", "2000"))
    EVALUATION_HOUR = 14
    EVALUATION_RANDOM_STATE = 42
    N_USERS = 200
    FRAUD_RATE_LOW_RISK = 0.02
    FRAUD_RATE_MEDIUM_RISK = 0.05
    FRAUD_RATE_HIGH_RISK = 0.15

    # Storage
    DB_PATH = os.getenv("DB_PATH", "data/risk_engine.db")
    PERFORMANCE_SNAPSHOT_PROBABILITY = 0.3
    MAX_RECENT_ALERTS = 100

    # Static model performance figures reported alongside predictions
    MODEL_PERFORMANCE = [
        {
            "model_name": "random_forest",
            "model_version": "v2.1",
            "accuracy": 0.947,
            "precision_score": 0.923,
            "recall": 0.891,
            "f1_score": 0.907,
        },
        {
            "model_name": "lstm_neural_network",
            "model_version": "v1.3",
            "accuracy": 0.934,
            "precision_score": 0.901,
            "recall": 0.945,
            "f1_score": 0.922,
        },
        {
            "model_name": "xgboost_ensemble",
            "model_version": "v3.2",
            "accuracy": 0.956,
            "precision_score": 0.941,
            "recall": 0.929,
            "f1_score": 0.935,
        },
    ]

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
