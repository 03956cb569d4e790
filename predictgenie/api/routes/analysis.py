"""Product analysis routes."""

import logging
from typing import List

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from predictgenie.analysis.orchestrator import AnalysisOrchestrator
from predictgenie.api.deps import get_orchestrator
from predictgenie.config import settings
from predictgenie.errors import AnalysisError, BatchAnalysisError, CsvValidationError
from predictgenie.ingest.csv_loader import load_products_from_bytes
from predictgenie.models.products import CsvProduct

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analysis", tags=["analysis"])


class UrlAnalysisRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_product_url: str
    competitor_urls: List[str] = []


async def _read_products(file: UploadFile) -> list[CsvProduct]:
    """Read an uploaded CSV within the size limit and validate it."""
    data = await file.read(settings.max_csv_upload_bytes + 1)
    if len(data) > settings.max_csv_upload_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"CSV file is larger than {settings.max_csv_upload_bytes} bytes",
        )
    try:
        return load_products_from_bytes(data)
    except CsvValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e


@router.post("/url")
async def analyze_url(
    body: UrlAnalysisRequest,
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    """Analyze one product page, optionally against given competitor pages."""
    try:
        analysis = await orchestrator.analyze_url(body.user_product_url, body.competitor_urls)
    except AnalysisError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e

    return [analysis.to_wire()]


@router.post("/csv")
async def analyze_csv(
    file: UploadFile = File(...),
    orchestrator: AnalysisOrchestrator = Depends(get_orchestrator),
):
    """Analyze every product of an uploaded CSV file."""
    products = await _read_products(file)
    logger.info(f"Batch analysis requested for {len(products)} products from {file.filename}")

    try:
        analyses = await orchestrator.analyze_batch(products)
    except BatchAnalysisError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e

    return [analysis.to_wire() for analysis in analyses]


@router.post("/csv/validate")
async def validate_csv(file: UploadFile = File(...)):
    """Parse an uploaded CSV without analyzing it."""
    products = await _read_products(file)
    return {
        "count": len(products),
        "products": [product.to_wire() for product in products],
    }
