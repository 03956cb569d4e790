"""FastAPI dependencies."""

from fastapi import HTTPException, Request, status

from predictgenie.ai.product_analyzer import ProductAnalyzer
from predictgenie.analysis.orchestrator import AnalysisOrchestrator


def get_orchestrator(request: Request) -> AnalysisOrchestrator:
    """Dependency for the orchestrator wired at startup."""
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Analysis service not initialized",
        )
    return orchestrator


def get_analyzer(request: Request) -> ProductAnalyzer:
    """Dependency for the AI product analyzer wired at startup."""
    analyzer = getattr(request.app.state, "analyzer", None)
    if analyzer is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Analysis service not initialized",
        )
    return analyzer
