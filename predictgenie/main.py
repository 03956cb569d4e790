"""Main application entry point."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from predictgenie.ai.llm_service import LLMService
from predictgenie.ai.product_analyzer import ProductAnalyzer
from predictgenie.analysis.orchestrator import AnalysisOrchestrator
from predictgenie.api.routes import analysis, competitors, exports
from predictgenie.config import settings
from predictgenie.logging_config import setup_logging
from predictgenie.pricing.prediction_client import PredictionClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging()

    # Startup
    logger.info("Starting PredictGenie...")

    llm = LLMService()
    analyzer = ProductAnalyzer(llm)
    predictor = PredictionClient() if settings.prediction_enabled else None
    if predictor is None:
        logger.info("ML price prediction disabled; AI suggestions are final")

    app.state.analyzer = analyzer
    app.state.orchestrator = AnalysisOrchestrator(analyzer, predictor)

    yield

    # Shutdown
    logger.info("Shutting down...")
    await llm.close()
    if predictor is not None:
        await predictor.close()
    logger.info("Shutdown complete")


app = FastAPI(
    title="PredictGenie",
    description="AI and ML powered competitive price analysis",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(analysis.router)
app.include_router(competitors.router)
app.include_router(exports.router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/metrics", include_in_schema=False)
async def metrics_endpoint():
    """Prometheus scrape endpoint."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


if __name__ == "__main__":
    uvicorn.run(
        "predictgenie.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
