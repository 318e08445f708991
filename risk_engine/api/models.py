from typing import List

from pydantic import BaseModel

from risk_engine.config import Config
from risk_engine.features.schema import TransactionFeatures
from risk_engine.models.result import ScoringResult


class AnalyzeRequest(BaseModel):
    """Request body for /analyze"""
    transaction: TransactionFeatures


class ProcessingDetails(BaseModel):
    total_time_ms: int
    models_analyzed: int = 3
    ensemble_method: str = Config.ENSEMBLE_METHOD


class AnalysisResponse(BaseModel):
    """Fraud analysis response model"""
    success: bool = True
    result: ScoringResult
    models_used: List[str]
    processing_details: ProcessingDetails


class ErrorResponse(BaseModel):
    error: str
    details: str
