from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Verdict(str, Enum):
    LEGITIMATE = "legitimate"
    SUSPICIOUS = "suspicious"
    FRAUDULENT = "fraudulent"


class EnsembleWeights(BaseModel):
    """Normalized per-call weights for the three scorers"""
    model_config = ConfigDict(frozen=True)

    rf: float
    lstm: float
    xgb: float

    @property
    def total(self) -> float:
        return self.rf + self.lstm + self.xgb


class EnsembleOutput(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: float
    confidence: float
    weights: EnsembleWeights


class ScoringResult(BaseModel):
    """Outcome of scoring one transaction"""
    model_config = ConfigDict(frozen=True, protected_namespaces=())

    transaction_id: str
    user_id: Optional[str] = None
    random_forest_score: float = Field(..., ge=0, le=1)
    lstm_score: float = Field(..., ge=0, le=1)
    xgboost_score: float = Field(..., ge=0, le=1)
    ensemble_score: float = Field(..., ge=0, le=1)
    prediction: Verdict
    confidence: float = Field(..., ge=0.1)
    risk_factors: List[str]
    model_explanations: Dict[str, str]
    recommended_actions: List[str]
    processing_time_ms: int
