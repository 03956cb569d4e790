"""Second-stage price refinement from the ML prediction service.

A refinement either yields a new whole-number suggested price or falls back
to the AI's own suggestion. Fallbacks are logged and never raised, so a
prediction outage can not fail an analysis.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence

from predictgenie import metrics
from predictgenie.errors import PredictionError
from predictgenie.models.analysis import ProductAnalysis
from predictgenie.pricing.mapper import analyses_to_payloads, analysis_to_payload
from predictgenie.pricing.prediction_client import PricePredictor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RefinementOutcome:
    """Result of one refinement attempt: a refined price, or a fallback with its diagnostic."""

    refined_price: Optional[int] = None
    diagnostic: Optional[str] = None
    model_not_trained: bool = False

    @property
    def applied(self) -> bool:
        return self.refined_price is not None

    @classmethod
    def refined(cls, price: int) -> "RefinementOutcome":
        return cls(refined_price=price)

    @classmethod
    def fallback(cls, diagnostic: str, model_not_trained: bool = False) -> "RefinementOutcome":
        return cls(diagnostic=diagnostic, model_not_trained=model_not_trained)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity (450.5 -> 451)."""
    return math.floor(value + 0.5)


def outcome_from_prediction(value: float) -> RefinementOutcome:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value):
        return RefinementOutcome.refined(round_half_up(value))
    return RefinementOutcome.fallback(f"Prediction returned a non-finite value: {value!r}")


def outcome_from_error(error: Exception) -> RefinementOutcome:
    if isinstance(error, PredictionError):
        return RefinementOutcome.fallback(str(error), model_not_trained=error.model_not_trained)
    return RefinementOutcome.fallback(f"{error.__class__.__name__}: {error}")


async def refine_price(analysis: ProductAnalysis, predictor: PricePredictor) -> RefinementOutcome:
    """Ask the predictor for one analysis. Never raises."""
    try:
        payload = analysis_to_payload(analysis)
        predicted = await predictor.predict_price(payload)
    except Exception as e:
        return outcome_from_error(e)
    return outcome_from_prediction(predicted)


async def refine_batch(
    analyses: Sequence[ProductAnalysis],
    predictor: PricePredictor,
) -> list[RefinementOutcome]:
    """
    Ask the predictor for all analyses in one collective request.

    A failed request, or an answer whose length does not match the batch,
    falls back for every item. A non-finite price falls back for its own item.
    Never raises.
    """
    if not analyses:
        return []

    try:
        payloads = analyses_to_payloads(analyses)
        predictions = await predictor.predict_batch(payloads)
    except Exception as e:
        return [outcome_from_error(e)] * len(analyses)

    if len(predictions) != len(analyses):
        outcome = RefinementOutcome.fallback(
            f"Batch prediction returned {len(predictions)} prices for {len(analyses)} products"
        )
        return [outcome] * len(analyses)

    return [outcome_from_prediction(value) for value in predictions]


def apply_refinement(analysis: ProductAnalysis, outcome: RefinementOutcome) -> ProductAnalysis:
    """
    Overwrite suggested_price when the outcome carries a refined price.

    Only suggested_price changes; the AI's reasoning and summaries are kept as written.
    """
    product_name = analysis.user_product.product_name

    if outcome.applied:
        logger.info(
            f"ML prediction for '{product_name}': suggested price "
            f"{analysis.suggested_price} -> {outcome.refined_price}"
        )
        analysis.suggested_price = outcome.refined_price
        metrics.record_refinement("refined")
    elif outcome.model_not_trained:
        logger.warning(f"ML model not trained; using AI-only suggestion for '{product_name}'.")
        metrics.record_refinement("not_trained")
    else:
        logger.warning(
            f"Prediction failed for '{product_name}'; using AI-only suggestion: {outcome.diagnostic}"
        )
        metrics.record_refinement("fallback")

    return analysis
