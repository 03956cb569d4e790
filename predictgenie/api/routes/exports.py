"""Export routes: render analysis results as downloadable files."""

from typing import Callable, Dict, List, Optional

from fastapi import APIRouter, HTTPException, Query, Response

from predictgenie.export.base import ExportFile
from predictgenie.export.csv_exporter import (
    export_analysis_csv,
    export_competitors_csv,
    export_price_history_csv,
)
from predictgenie.export.json_exporter import export_json
from predictgenie.models.analysis import ProductAnalysis

router = APIRouter(prefix="/api/exports", tags=["exports"])

EXPORTERS: Dict[str, Callable[..., Optional[ExportFile]]] = {
    "analysis": export_analysis_csv,
    "competitors": export_competitors_csv,
    "price-history": export_price_history_csv,
    "json": export_json,
}


@router.post("/{kind}")
async def export_results(
    kind: str,
    analyses: List[ProductAnalysis],
    file_name: Optional[str] = Query(None, description="Override the download file name"),
):
    """
    Export analysis results.

    ``kind`` is one of: analysis, competitors, price-history, json.
    An empty result list produces 204 No Content.
    """
    exporter = EXPORTERS.get(kind)
    if exporter is None:
        raise HTTPException(
            status_code=404,
            detail=f"Unknown export '{kind}'. Available exports: {', '.join(EXPORTERS)}",
        )

    if file_name:
        file_name = "".join(ch for ch in file_name if ch not in '"\r\n').strip()
    export = exporter(analyses, file_name) if file_name else exporter(analyses)
    if export is None:
        return Response(status_code=204)

    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{export.file_name}"',
            "X-Row-Count": str(export.row_count),
        },
    )
