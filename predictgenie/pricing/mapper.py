"""Map AI analyses to prediction service payloads."""

from typing import Sequence

from predictgenie.models.analysis import ProductAnalysis
from predictgenie.normalize.values import infer_category, parse_strict_number
from predictgenie.pricing.prediction_client import PredictPayload


def analysis_to_payload(analysis: ProductAnalysis) -> PredictPayload:
    """
    Build the prediction payload for one analysis.

    Unparseable competitor prices are dropped. When none survive, the subject's
    own price stands in so the list is never empty; an unparseable subject
    price counts as 0.
    """
    competitor_prices = [
        price
        for price in (parse_strict_number(c.price) for c in analysis.competitors or [])
        if price is not None
    ]

    user_price = parse_strict_number(analysis.user_product.current_price)
    current_price = user_price if user_price is not None else 0

    return PredictPayload(
        current_price=current_price,
        competitor_prices=competitor_prices or [current_price],
        category=infer_category(analysis.user_product.product_name),
    )


def analyses_to_payloads(analyses: Sequence[ProductAnalysis]) -> list[PredictPayload]:
    return [analysis_to_payload(analysis) for analysis in analyses]
