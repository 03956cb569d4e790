"""Analysis orchestration: AI analysis fan-out and ML price refinement.

Single mode analyzes one product; an AI failure fails the call. Batch mode
analyzes every product concurrently and settles all of them: one product's
failure never cancels or affects another, failed products are logged and
dropped, and the survivors keep their input order. The batch only fails when
nothing succeeded.

Successful analyses then go through prediction refinement, which may replace
``suggested_price`` and otherwise falls back silently.
"""

import asyncio
import time
from dataclasses import dataclass
from typing import Literal, Optional, Sequence

from predictgenie import metrics
from predictgenie.ai.product_analyzer import AnalysisProvider
from predictgenie.config import settings
from predictgenie.errors import BatchAnalysisError
from predictgenie.logging_config import get_logger
from predictgenie.models.analysis import AnalysisResult, ProductAnalysis
from predictgenie.models.products import CsvProduct, ProductSubject
from predictgenie.pricing.prediction_client import PricePredictor
from predictgenie.pricing.refinement import (
    RefinementOutcome,
    apply_refinement,
    refine_batch,
    refine_price,
)

logger = get_logger(__name__, component="orchestrator")

BatchPredictionMode = Literal["collective", "per_item"]


@dataclass(frozen=True)
class ItemOutcome:
    """Settled result of one batch item: an analysis or the error that replaced it."""

    index: int
    product_name: str
    analysis: Optional[ProductAnalysis] = None
    error: Optional[BaseException] = None

    @property
    def succeeded(self) -> bool:
        return self.analysis is not None


class AnalysisOrchestrator:
    """
    Combines the AI analysis and ML prediction collaborators.

    Both collaborators are injected; ``predictor=None`` disables refinement
    and keeps the AI's suggested prices.
    """

    def __init__(
        self,
        analyzer: AnalysisProvider,
        predictor: Optional[PricePredictor] = None,
        batch_prediction_mode: Optional[BatchPredictionMode] = None,
    ):
        self._analyzer = analyzer
        self._predictor = predictor
        self._batch_prediction_mode = batch_prediction_mode or settings.batch_prediction_mode

    async def _run_analysis(
        self,
        subject: ProductSubject,
        competitor_urls: Sequence[str],
        mode: str,
    ) -> ProductAnalysis:
        started = time.monotonic()
        try:
            analysis = await self._analyzer.analyze(subject, competitor_urls)
        except Exception:
            metrics.record_analysis(mode, success=False, duration=time.monotonic() - started)
            raise
        metrics.record_analysis(mode, success=True, duration=time.monotonic() - started)
        return analysis

    async def analyze_single(
        self,
        subject: ProductSubject,
        competitor_urls: Sequence[str] = (),
    ) -> ProductAnalysis:
        """
        Analyze one product and refine its suggested price.

        Raises:
            AnalysisError: When the AI analysis fails
        """
        urls = [url.strip() for url in competitor_urls if url and url.strip()]
        logger.info(f"Analyzing {subject.label!r} against {len(urls)} competitor URLs")

        try:
            analysis = await self._run_analysis(subject, urls, mode="single")
        except Exception as e:
            logger.error(f"Analysis failed for {subject.label!r}: {e}")
            raise

        if self._predictor is not None:
            outcome = await refine_price(analysis, self._predictor)
            apply_refinement(analysis, outcome)

        return analysis

    async def analyze_url(self, user_product_url: str, competitor_urls: Sequence[str] = ()) -> ProductAnalysis:
        """Single-mode analysis of a product page."""
        if not user_product_url or not user_product_url.strip():
            raise ValueError("User product URL is required for single product analysis.")
        return await self.analyze_single(ProductSubject.from_url(user_product_url.strip()), competitor_urls)

    async def _settle_all(self, products: Sequence[CsvProduct]) -> list[ItemOutcome]:
        """Run every AI analysis concurrently and collect one outcome per product, in input order."""
        tasks = [
            self._run_analysis(
                ProductSubject.from_csv_product(product),
                product.competitor_urls or [],
                mode="batch",
            )
            for product in products
        ]
        results = await asyncio.gather(*tasks, return_exceptions=True)

        outcomes = []
        for index, (product, result) in enumerate(zip(products, results)):
            if isinstance(result, BaseException):
                outcomes.append(ItemOutcome(index=index, product_name=product.product_name, error=result))
            else:
                outcomes.append(ItemOutcome(index=index, product_name=product.product_name, analysis=result))
        return outcomes

    async def _refine_all(self, analyses: list[ProductAnalysis]) -> None:
        if self._predictor is None or not analyses:
            return

        if self._batch_prediction_mode == "per_item":
            outcomes: list[RefinementOutcome] = await asyncio.gather(
                *(refine_price(analysis, self._predictor) for analysis in analyses)
            )
        else:
            outcomes = await refine_batch(analyses, self._predictor)

        for analysis, outcome in zip(analyses, outcomes):
            apply_refinement(analysis, outcome)

    async def analyze_batch(self, products: Sequence[CsvProduct]) -> AnalysisResult:
        """
        Analyze a batch of CSV products.

        Returns:
            Successful analyses in input order, failed products omitted

        Raises:
            BatchAnalysisError: When at least one product was attempted and all failed
        """
        if not products:
            logger.warning("No products to analyze; skipping batch analysis.")
            return []

        logger.info(f"Starting batch analysis of {len(products)} products")
        outcomes = await self._settle_all(products)

        successful: list[ProductAnalysis] = []
        failed: list[str] = []
        for outcome in outcomes:
            if outcome.succeeded:
                successful.append(outcome.analysis)
            else:
                logger.error(f'Analysis failed for product "{outcome.product_name}": {outcome.error}')
                failed.append(outcome.product_name)

        if not successful:
            raise BatchAnalysisError(failed)

        if failed:
            logger.warning(
                f"Batch analysis finished with {len(successful)} successes and "
                f"{len(failed)} failures: {', '.join(failed)}"
            )

        await self._refine_all(successful)
        return successful
