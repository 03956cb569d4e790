"""Competitor discovery routes."""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from predictgenie.ai.product_analyzer import ProductAnalyzer
from predictgenie.api.deps import get_analyzer

router = APIRouter(prefix="/api/competitors", tags=["competitors"])


class CompetitorSuggestionRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_product_url: str


@router.post("/suggest")
async def suggest_competitors(
    body: CompetitorSuggestionRequest,
    analyzer: ProductAnalyzer = Depends(get_analyzer),
):
    """Suggest competitor product pages for a product URL."""
    url = body.user_product_url.strip()
    if not url:
        raise HTTPException(status_code=400, detail="Please enter a valid URL for your product.")

    return {"competitorUrls": await analyzer.suggest_competitors(url)}
