"""CSV exporters for analysis results.

Three layouts:
- full analysis: one row per analyzed product, competitors spread over
  repeating column groups
- competitors: one row per (analyzed product, competitor) pair
- price history: one row per historical price point, subject first

Fields are quoted only when they contain a comma, a double quote or a
newline; inner quotes are doubled. Lines are joined with "\\n".
"""

import logging
from typing import Any, Optional, Sequence

from predictgenie import metrics
from predictgenie.export.base import CSV_MEDIA_TYPE, ExportFile
from predictgenie.models.analysis import ProductAnalysis
from predictgenie.normalize.values import format_number

logger = logging.getLogger(__name__)

ANALYSIS_BASE_HEADERS = [
    "Product Name",
    "Current Price",
    "Suggested Price",
    "Market Summary",
    "Historical Price Analysis",
    "Reasoning",
]

COMPETITOR_GROUP_FIELDS = ["Name", "Price", "Stock Status", "Price Trend"]

COMPETITORS_HEADERS = [
    "Analyzed Product",
    "Competitor Name",
    "Competitor URL",
    "Current Price",
    "Original Price",
    "Stock Status",
    "Price Trend",
]

PRICE_HISTORY_HEADERS = ["Analyzed Product", "Source Product", "Date", "Price"]


def escape_csv_field(field: Any) -> str:
    """
    Render one CSV field.

    None becomes an empty field. Text containing a comma, a double quote or a
    newline is wrapped in double quotes with inner quotes doubled.
    """
    if field is None:
        return ""

    if isinstance(field, bool):
        text = "true" if field else "false"
    elif isinstance(field, (int, float)):
        text = format_number(field)
    else:
        text = str(field)

    if "," in text or '"' in text or "\n" in text:
        return '"' + text.replace('"', '""') + '"'
    return text


def unescape_csv_field(field: str) -> str:
    """Inverse of escape_csv_field for a single rendered field."""
    if len(field) >= 2 and field.startswith('"') and field.endswith('"'):
        return field[1:-1].replace('""', '"')
    return field


def _render(headers: Sequence[str], rows: Sequence[Sequence[str]]) -> str:
    lines = [",".join(headers)]
    lines.extend(",".join(row) for row in rows)
    return "\n".join(lines)


def _to_file(kind: str, file_name: str, headers: Sequence[str], rows: list[list[str]]) -> ExportFile:
    metrics.record_export(kind)
    return ExportFile(
        file_name=file_name,
        media_type=CSV_MEDIA_TYPE,
        content=_render(headers, rows).encode("utf-8"),
        row_count=len(rows),
    )


def competitor_headers(max_competitors: int) -> list[str]:
    return [
        f"Competitor {n} {field}"
        for n in range(1, max_competitors + 1)
        for field in COMPETITOR_GROUP_FIELDS
    ]


def export_analysis_csv(
    data: Optional[Sequence[ProductAnalysis]],
    file_name: str = "predictgenie_analysis.csv",
) -> Optional[ExportFile]:
    """
    Export the full analysis, one row per product.

    The widest competitor list across the whole result set decides how many
    competitor column groups exist; shorter rows are padded with empty fields
    so every row has the same number of columns.

    Returns:
        The CSV file, or None when there is nothing to export
    """
    if not data:
        logger.warning("No data available to export.")
        return None

    # First pass: column layout
    max_competitors = max(len(analysis.competitors or []) for analysis in data)
    headers = ANALYSIS_BASE_HEADERS + competitor_headers(max_competitors)

    # Second pass: rows padded to the layout
    rows = []
    for analysis in data:
        row = [
            escape_csv_field(analysis.user_product.product_name),
            escape_csv_field(analysis.user_product.current_price),
            escape_csv_field(analysis.suggested_price),
            escape_csv_field(analysis.market_summary),
            escape_csv_field(analysis.historical_price_analysis),
            escape_csv_field(analysis.reasoning),
        ]
        competitors = analysis.competitors or []
        for i in range(max_competitors):
            if i < len(competitors):
                competitor = competitors[i]
                row.extend([
                    escape_csv_field(competitor.product_name),
                    escape_csv_field(competitor.price),
                    escape_csv_field(competitor.stock_status),
                    escape_csv_field(competitor.price_trend),
                ])
            else:
                row.extend([""] * len(COMPETITOR_GROUP_FIELDS))
        rows.append(row)

    return _to_file("analysis_csv", file_name, headers, rows)


def export_competitors_csv(
    data: Optional[Sequence[ProductAnalysis]],
    file_name: str = "predictgenie_competitors.csv",
) -> Optional[ExportFile]:
    """
    Export one row per (analyzed product, competitor) pair.

    Returns:
        The CSV file (header only when no product has competitors), or None
        when there is nothing to export
    """
    if not data:
        logger.warning("No competitor data to export.")
        return None

    rows = []
    for analysis in data:
        for competitor in analysis.competitors or []:
            rows.append([
                escape_csv_field(analysis.user_product.product_name),
                escape_csv_field(competitor.product_name),
                escape_csv_field(competitor.url),
                escape_csv_field(competitor.price),
                escape_csv_field(competitor.original_price),
                escape_csv_field(competitor.stock_status),
                escape_csv_field(competitor.price_trend),
            ])

    if not rows:
        logger.info("No competitor data found in the analysis to export.")

    return _to_file("competitors_csv", file_name, COMPETITORS_HEADERS, rows)


def export_price_history_csv(
    data: Optional[Sequence[ProductAnalysis]],
    file_name: str = "predictgenie_price_history.csv",
) -> Optional[ExportFile]:
    """
    Export every historical price point of every product and competitor.

    For each analysis the subject's own history comes first (source product
    is the subject itself), then each competitor's.

    Returns:
        The CSV file (header only when there is no history), or None when
        there is nothing to export
    """
    if not data:
        logger.warning("No price history data to export.")
        return None

    rows = []
    for analysis in data:
        subject_name = analysis.user_product.product_name

        for point in analysis.user_product.historical_prices or []:
            rows.append([
                escape_csv_field(subject_name),
                escape_csv_field(subject_name),
                escape_csv_field(point.date),
                escape_csv_field(point.price),
            ])

        for competitor in analysis.competitors or []:
            for point in competitor.historical_prices or []:
                rows.append([
                    escape_csv_field(subject_name),
                    escape_csv_field(competitor.product_name),
                    escape_csv_field(point.date),
                    escape_csv_field(point.price),
                ])

    if not rows:
        logger.info("No historical price data found in the analysis to export.")

    return _to_file("price_history_csv", file_name, PRICE_HISTORY_HEADERS, rows)
