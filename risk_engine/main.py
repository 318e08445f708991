import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from risk_engine.api.endpoints import router
from risk_engine.config import Config
from risk_engine.service import RiskScoringService
from risk_engine.sinks.storage import ResultStore

# Configure logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL, logging.INFO),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(store: ResultStore = None, service: RiskScoringService = None) -> FastAPI:
    """Build the API; tests pass their own store or service"""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting risk scoring service...")
        scoring_service = service or RiskScoringService(store=store or ResultStore())
        scoring_service.store.init_db()
        app.state.scoring_service = scoring_service
        logger.info(f"Models loaded: {', '.join(scoring_service.engine.model_names)}")
        yield
        logger.info("Risk scoring service stopped")

    app = FastAPI(
        title=Config.API_TITLE,
        description=Config.API_DESCRIPTION,
        version=Config.API_VERSION,
        lifespan=lifespan,
    )
    app.include_router(router)
    return app


app = create_app()


def run():
    import uvicorn
    uvicorn.run(app, host=Config.API_HOST, port=Config.API_PORT)


if __name__ == "__main__":
    run()
