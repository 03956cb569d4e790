"""Tests for single and batch analysis orchestration."""

import logging

import pytest

from conftest import FakeAnalyzer, FakePredictor, make_analysis
from predictgenie.analysis.orchestrator import AnalysisOrchestrator
from predictgenie.errors import AnalysisError, BatchAnalysisError, PredictionError
from predictgenie.models.products import CsvProduct, ProductSubject


def _products(*names: str) -> list[CsvProduct]:
    return [CsvProduct(product_name=name, current_price=1000) for name in names]


@pytest.mark.asyncio
async def test_batch_omits_failed_item_and_keeps_order(ai_failure, caplog):
    first, third = make_analysis("Item 1"), make_analysis("Item 3")
    analyzer = FakeAnalyzer({"Item 1": first, "Item 2": ai_failure, "Item 3": third})
    orchestrator = AnalysisOrchestrator(analyzer)

    with caplog.at_level(logging.ERROR):
        result = await orchestrator.analyze_batch(_products("Item 1", "Item 2", "Item 3"))

    assert result == [first, third]
    assert 'Analysis failed for product "Item 2"' in caplog.text
    assert len([r for r in caplog.records if r.levelno == logging.ERROR]) == 1


@pytest.mark.asyncio
async def test_batch_preserves_input_order_when_completion_is_reversed():
    analyses = {name: make_analysis(name) for name in ("A", "B", "C")}
    analyzer = FakeAnalyzer(analyses, delays={"A": 0.03, "B": 0.02, "C": 0.0})

    result = await AnalysisOrchestrator(analyzer).analyze_batch(_products("A", "B", "C"))

    assert [a.user_product.product_name for a in result] == ["A", "B", "C"]


@pytest.mark.asyncio
async def test_batch_all_failed_raises_with_product_names():
    analyzer = FakeAnalyzer({"A": AnalysisError("x"), "B": RuntimeError("y")})

    with pytest.raises(BatchAnalysisError) as exc:
        await AnalysisOrchestrator(analyzer).analyze_batch(_products("A", "B"))

    assert exc.value.failed_products == ["A", "B"]
    assert str(exc.value) == (
        "All product analyses failed. The following products could not be analyzed: A, B. "
        "Please check the logs for more details."
    )


@pytest.mark.asyncio
async def test_batch_empty_input_returns_empty(caplog):
    analyzer = FakeAnalyzer({})

    result = await AnalysisOrchestrator(analyzer).analyze_batch([])

    assert result == []
    assert analyzer.calls == []
    assert "No products to analyze" in caplog.text


@pytest.mark.asyncio
async def test_batch_uses_url_when_present_and_passes_competitors():
    product = CsvProduct(
        product_name="Lamp",
        current_price=40,
        user_product_url="https://mine.example/lamp",
        competitor_urls=["https://a.example/lamp"],
    )
    analyzer = FakeAnalyzer({"https://mine.example/lamp": make_analysis("Lamp")})

    await AnalysisOrchestrator(analyzer).analyze_batch([product])

    subject, urls = analyzer.calls[0]
    assert subject == ProductSubject(url="https://mine.example/lamp")
    assert urls == ["https://a.example/lamp"]


@pytest.mark.asyncio
async def test_batch_without_url_sends_name_and_price():
    analyzer = FakeAnalyzer({"Lamp": make_analysis("Lamp")})

    await AnalysisOrchestrator(analyzer).analyze_batch(_products("Lamp"))

    subject, _ = analyzer.calls[0]
    assert subject.url is None
    assert subject.name == "Lamp"
    assert subject.price == 1000


@pytest.mark.asyncio
async def test_batch_collective_refinement_only_for_survivors(ai_failure):
    analyzer = FakeAnalyzer({"A": make_analysis("A"), "B": ai_failure, "C": make_analysis("C")})
    predictor = FakePredictor(batch=[410.4, 620.5])
    orchestrator = AnalysisOrchestrator(analyzer, predictor, batch_prediction_mode="collective")

    result = await orchestrator.analyze_batch(_products("A", "B", "C"))

    assert [a.suggested_price for a in result] == [410, 621]
    assert len(predictor.batch_payloads) == 1
    assert len(predictor.batch_payloads[0]) == 2
    assert predictor.single_payloads == []


@pytest.mark.asyncio
async def test_batch_per_item_refinement():
    analyzer = FakeAnalyzer({"A": make_analysis("A"), "B": make_analysis("B")})
    predictor = FakePredictor(price=450.7)
    orchestrator = AnalysisOrchestrator(analyzer, predictor, batch_prediction_mode="per_item")

    result = await orchestrator.analyze_batch(_products("A", "B"))

    assert [a.suggested_price for a in result] == [451, 451]
    assert len(predictor.single_payloads) == 2
    assert predictor.batch_payloads == []


@pytest.mark.asyncio
async def test_batch_prediction_failure_keeps_ai_prices():
    analyzer = FakeAnalyzer({"A": make_analysis("A", suggested_price=500)})
    predictor = FakePredictor(batch=PredictionError("Batch prediction failed (500)", 500))

    result = await AnalysisOrchestrator(analyzer, predictor, "collective").analyze_batch(_products("A"))

    assert result[0].suggested_price == 500


@pytest.mark.asyncio
async def test_single_refines_with_rounded_prediction():
    analyzer = FakeAnalyzer({"https://mine.example/p": make_analysis("P", suggested_price=500)})
    orchestrator = AnalysisOrchestrator(analyzer, FakePredictor(price=450.7))

    analysis = await orchestrator.analyze_url("https://mine.example/p")

    assert analysis.suggested_price == 451


@pytest.mark.asyncio
async def test_single_prediction_failure_keeps_ai_price():
    analyzer = FakeAnalyzer({"https://mine.example/p": make_analysis("P", suggested_price=500)})
    orchestrator = AnalysisOrchestrator(analyzer, FakePredictor(price=PredictionError("down")))

    analysis = await orchestrator.analyze_url("https://mine.example/p")

    assert analysis.suggested_price == 500


@pytest.mark.asyncio
async def test_single_without_predictor_keeps_ai_price():
    analyzer = FakeAnalyzer({"https://mine.example/p": make_analysis("P", suggested_price=500)})

    analysis = await AnalysisOrchestrator(analyzer).analyze_url("https://mine.example/p")

    assert analysis.suggested_price == 500


@pytest.mark.asyncio
async def test_single_ai_failure_propagates(ai_failure):
    analyzer = FakeAnalyzer({"https://mine.example/p": ai_failure})
    predictor = FakePredictor(price=1.0)

    with pytest.raises(AnalysisError) as exc:
        await AnalysisOrchestrator(analyzer, predictor).analyze_url("https://mine.example/p")

    assert exc.value is ai_failure
    assert predictor.single_payloads == []


@pytest.mark.asyncio
async def test_single_drops_blank_competitor_urls():
    analyzer = FakeAnalyzer({"https://mine.example/p": make_analysis("P")})

    await AnalysisOrchestrator(analyzer).analyze_url(
        " https://mine.example/p ", ["https://a.example", "  ", "", " https://b.example "]
    )

    subject, urls = analyzer.calls[0]
    assert subject.url == "https://mine.example/p"
    assert urls == ["https://a.example", "https://b.example"]


@pytest.mark.asyncio
@pytest.mark.parametrize("url", ["", "   "])
async def test_analyze_url_requires_url(url):
    with pytest.raises(ValueError) as exc:
        await AnalysisOrchestrator(FakeAnalyzer({})).analyze_url(url)

    assert str(exc.value) == "User product URL is required for single product analysis."
