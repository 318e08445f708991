import logging
import sqlite3
from datetime import datetime

from fastapi import APIRouter, BackgroundTasks, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from risk_engine.api.models import AnalysisResponse, AnalyzeRequest, ErrorResponse, ProcessingDetails
from risk_engine.config import Config
from risk_engine.data.generator import TransactionGenerator
from risk_engine.evaluation.evaluator import ModelEvaluator
from risk_engine.exceptions import ScoringError
from risk_engine.service import RiskScoringService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_service(request: Request) -> RiskScoringService:
    return request.app.state.scoring_service


@router.get("/")
async def root(request: Request):
    """API health check endpoint"""
    service = get_service(request)
    return {
        "service": Config.API_TITLE,
        "status": "running",
        "version": Config.API_VERSION,
        "models": service.engine.model_names,
        "ensemble_method": Config.ENSEMBLE_METHOD,
    }


@router.post(
    "/analyze",
    response_model=AnalysisResponse,
    responses={500: {"model": ErrorResponse, "description": "Analysis failed"}},
)
def analyze_transaction(payload: AnalyzeRequest, background_tasks: BackgroundTasks, request: Request):
    """
    Score a transaction with the model ensemble.

    The result is returned immediately; persistence and alert dispatch run
    afterwards as background tasks and cannot change the response.
    """
    service = get_service(request)
    transaction = payload.transaction

    try:
        features = service.prepare(transaction)
        result = service.score(features)
    except ScoringError as e:
        logger.error(f"Analysis error: {e}")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(error="Advanced ML analysis failed", details=e.detail).model_dump(),
        )

    background_tasks.add_task(service.publish, features, result)

    logger.info(f"Prediction: {result.transaction_id} -> {result.prediction.value} "
                f"(score: {result.ensemble_score:.3f}, {result.processing_time_ms}ms)")

    return AnalysisResponse(
        result=result,
        models_used=Config.MODELS_USED,
        processing_details=ProcessingDetails(total_time_ms=result.processing_time_ms),
    )


@router.get("/alerts")
async def get_recent_alerts(request: Request, limit: int = Query(20, ge=1, le=Config.MAX_RECENT_ALERTS)):
    """Most recent alerts, newest first"""
    service = get_service(request)
    try:
        alerts = service.store.recent_alerts(limit)
    except sqlite3.Error as e:
        logger.error(f"Failed to read alerts: {e}")
        raise HTTPException(status_code=503, detail="Alert store unavailable")
    return {"alerts": alerts, "count": len(alerts)}


@router.get("/model-performance")
async def get_model_performance(request: Request):
    """Latest reported performance figures per model"""
    service = get_service(request)
    try:
        records = service.store.latest_model_performance()
    except sqlite3.Error as e:
        logger.error(f"Failed to read model performance: {e}")
        raise HTTPException(status_code=503, detail="Performance store unavailable")
    return {"models": records, "timestamp": datetime.now().isoformat()}


@router.get("/model-comparison")
def compare_model_performance(n_samples: int = Query(500, ge=50, le=Config.EVALUATION_SAMPLES)):
    """Compare individual scorers and the ensemble on synthetic labeled data"""
    evaluator = ModelEvaluator()
    metrics = evaluator.evaluate(n_samples=n_samples)

    return {
        "random_forest": metrics["random_forest"],
        "lstm": metrics["lstm"],
        "xgboost": metrics["xgboost"],
        "ensemble": metrics["ensemble"],
        "best_performer": {
            "f1_score": max(
                ("Random Forest", metrics["random_forest"]["f1_score"]),
                ("LSTM", metrics["lstm"]["f1_score"]),
                ("XGBoost", metrics["xgboost"]["f1_score"]),
                ("Ensemble", metrics["ensemble"]["f1_score"]),
                key=lambda x: x[1],
            ),
        },
        "samples": metrics["samples"],
        "fraud_rate": metrics["fraud_rate"],
    }


@router.get("/test-data")
async def generate_test_transactions():
    """Sample transactions for exercising /analyze"""
    generator = TransactionGenerator()
    return {
        "test_transactions": generator.demo_transactions(),
        "usage": "POST /analyze with {\"transaction\": <one of these>}",
        "descriptions": {
            "test_normal_001": "Small card-present purchase from a known device",
            "test_moderate_002": "Card-not-present online purchase with an elevated amount",
            "test_suspicious_003": "Card-not-present transfer at a foreign ATM from an unknown device",
            "test_fraud_004": "Very large card-not-present gambling payment with high velocity",
        },
    }


@router.get("/health")
async def health_check(request: Request):
    """Health check for the scoring service"""
    service = get_service(request)
    health = service.health_check()
    health["timestamp"] = datetime.now().isoformat()
    return health
