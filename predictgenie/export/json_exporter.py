"""Pretty-printed JSON export of analysis results."""

import json
import logging
from typing import Optional, Sequence

from predictgenie import metrics
from predictgenie.export.base import JSON_MEDIA_TYPE, ExportFile
from predictgenie.models.analysis import ProductAnalysis

logger = logging.getLogger(__name__)


def export_json(
    data: Optional[Sequence[ProductAnalysis]],
    file_name: str = "predictgenie_analysis.json",
) -> Optional[ExportFile]:
    """
    Serialize the full result set with two-space indentation.

    Every field is written under its wire name; optional fields the AI left
    out appear as null.

    Returns:
        The JSON file, or None when there is nothing to export
    """
    if not data:
        logger.warning("No data available to export.")
        return None

    content = json.dumps([analysis.to_wire() for analysis in data], indent=2, ensure_ascii=False)
    metrics.record_export("json")
    return ExportFile(
        file_name=file_name,
        media_type=JSON_MEDIA_TYPE,
        content=content.encode("utf-8"),
        row_count=len(data),
    )
