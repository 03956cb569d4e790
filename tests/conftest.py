"""Shared fixtures and fake collaborators."""

import asyncio
from typing import Optional, Sequence, Union

import pytest

from predictgenie.errors import AnalysisError, PredictionError
from predictgenie.models.analysis import Competitor, HistoricalPricePoint, ProductAnalysis, UserProduct
from predictgenie.models.products import ProductSubject
from predictgenie.pricing.prediction_client import PredictPayload


def make_history(start_price: float, days: int = 3) -> list[HistoricalPricePoint]:
    return [
        HistoricalPricePoint(date=f"2024-06-{day:02d}", price=start_price + day)
        for day in range(1, days + 1)
    ]


def make_competitor(name: str, price: Union[int, float, str] = 100, **overrides) -> Competitor:
    fields = dict(
        url=f"https://shop.example/{name.lower().replace(' ', '-')}",
        product_name=name,
        price=price,
        stock_status="In Stock",
        price_trend="stable",
    )
    fields.update(overrides)
    return Competitor(**fields)


def make_analysis(
    name: str,
    current_price: Union[int, float, str] = 1000,
    suggested_price: Union[int, float] = 500,
    competitors: Optional[list[Competitor]] = None,
    **overrides,
) -> ProductAnalysis:
    fields = dict(
        user_product=UserProduct(product_name=name, current_price=current_price),
        competitors=competitors or [],
        suggested_price=suggested_price,
        reasoning=f"- {name} is priced above the market",
        market_summary="Competitive market.",
        historical_price_analysis="Prices were stable.",
    )
    fields.update(overrides)
    return ProductAnalysis(**fields)


class FakeAnalyzer:
    """
    Analysis collaborator keyed by subject label (URL or product name).

    A value may be a ProductAnalysis or an exception to raise. ``delays``
    lets tests reorder completion.
    """

    def __init__(self, results: dict, delays: Optional[dict] = None):
        self.results = results
        self.delays = delays or {}
        self.calls: list[tuple[ProductSubject, list[str]]] = []

    async def analyze(self, subject: ProductSubject, competitor_urls: Sequence[str]) -> ProductAnalysis:
        self.calls.append((subject, list(competitor_urls)))
        await asyncio.sleep(self.delays.get(subject.label, 0))
        result = self.results[subject.label]
        if isinstance(result, BaseException):
            raise result
        return result


class FakePredictor:
    """Prediction collaborator returning canned values or raising."""

    def __init__(
        self,
        price: Union[float, Exception, None] = None,
        batch: Union[list, Exception, None] = None,
    ):
        self.price = price
        self.batch = batch
        self.single_payloads: list[PredictPayload] = []
        self.batch_payloads: list[list[PredictPayload]] = []

    async def predict_price(self, payload: PredictPayload) -> float:
        self.single_payloads.append(payload)
        if isinstance(self.price, Exception):
            raise self.price
        if self.price is None:
            raise PredictionError("Prediction failed (500)", status_code=500)
        return self.price

    async def predict_batch(self, payloads: Sequence[PredictPayload]) -> list[float]:
        self.batch_payloads.append(list(payloads))
        if isinstance(self.batch, Exception):
            raise self.batch
        if self.batch is None:
            raise PredictionError("Batch prediction failed (500)", status_code=500)
        return self.batch


@pytest.fixture
def ai_failure():
    return AnalysisError("Failed to get analysis from AI: upstream timeout.")
