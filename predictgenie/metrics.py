"""Prometheus metrics for PredictGenie."""

from prometheus_client import Counter, Histogram, Info

# Application info
app_info = Info("predictgenie", "PredictGenie application info")
app_info.info({"version": "0.1.0", "name": "predictgenie"})

# AI analysis metrics
ai_analyses_total = Counter(
    "ai_analyses_total",
    "Total number of AI product analyses",
    ["mode", "status"],
)

ai_analysis_duration_seconds = Histogram(
    "ai_analysis_duration_seconds",
    "Time spent waiting for one AI product analysis",
    buckets=[1.0, 5.0, 10.0, 20.0, 30.0, 60.0, 120.0, 300.0],
)

# Prediction metrics
price_refinements_total = Counter(
    "price_refinements_total",
    "Total number of ML price refinement attempts",
    ["outcome"],
)

# Ingestion / export metrics
csv_ingestions_total = Counter(
    "csv_ingestions_total",
    "Total number of CSV uploads parsed",
    ["status"],
)

exports_total = Counter(
    "exports_total",
    "Total number of analysis exports produced",
    ["kind"],
)


def record_analysis(mode: str, success: bool, duration: float):
    """Record one AI analysis call."""
    status = "success" if success else "failure"
    ai_analyses_total.labels(mode=mode, status=status).inc()
    ai_analysis_duration_seconds.observe(duration)


def record_refinement(outcome: str):
    """Record a refinement outcome: refined, fallback or not_trained."""
    price_refinements_total.labels(outcome=outcome).inc()


def record_csv_ingestion(success: bool):
    """Record a CSV ingestion attempt."""
    csv_ingestions_total.labels(status="success" if success else "rejected").inc()


def record_export(kind: str):
    """Record an export file being produced."""
    exports_total.labels(kind=kind).inc()
