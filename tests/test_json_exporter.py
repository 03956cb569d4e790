"""Tests for the JSON exporter."""

import json

from conftest import make_analysis, make_competitor
from predictgenie.export.json_exporter import export_json
from predictgenie.models.analysis import ProductAnalysis


def test_export_json_uses_wire_names_and_indent():
    analysis = make_analysis("Café Lamp", suggested_price=500, competitors=[make_competitor("Rival", 450.5)])

    export = export_json([analysis])
    data = json.loads(export.text)

    assert export.file_name == "predictgenie_analysis.json"
    assert export.media_type.startswith("application/json")
    assert export.row_count == 1
    assert export.text.startswith('[\n  {\n    "userProduct"')
    assert "Café Lamp" in export.text
    assert data[0]["suggestedPrice"] == 500
    assert data[0]["competitors"][0]["price"] == 450.5
    assert data[0]["competitors"][0]["originalPrice"] is None
    assert data[0]["sources"] is None


def test_export_json_keeps_integral_prices_integral():
    export = export_json([make_analysis("Lamp", suggested_price=500)])

    assert '"suggestedPrice": 500,' in export.text


def test_export_json_empty(caplog):
    assert export_json([]) is None
    assert export_json(None) is None
    assert "No data available to export." in caplog.text


def test_export_json_keeps_undeclared_keys():
    analysis = ProductAnalysis.model_validate(
        {
            **make_analysis("Lamp").to_wire(),
            "confidence": "high",
            "userProduct": {"productName": "Lamp", "currentPrice": "N/A", "brand": "Lumo"},
        }
    )

    data = json.loads(export_json([analysis]).text)

    assert data[0]["confidence"] == "high"
    assert data[0]["userProduct"]["brand"] == "Lumo"
    assert data[0]["userProduct"]["currentPrice"] == "N/A"
