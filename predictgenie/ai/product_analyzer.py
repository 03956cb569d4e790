"""AI product analysis: prompt the LLM and parse its answer into a ProductAnalysis."""

import json
import logging
from typing import List, Protocol, Sequence

from pydantic import ValidationError

from predictgenie.ai.llm_service import LLMService, extract_json_block
from predictgenie.ai.prompts import (
    ANALYST_SYSTEM_PROMPT,
    CompetitorSuggestionPrompt,
    ProductAnalysisPrompt,
)
from predictgenie.config import settings
from predictgenie.errors import AnalysisError
from predictgenie.models.analysis import ProductAnalysis, Source
from predictgenie.models.products import ProductSubject

logger = logging.getLogger(__name__)


class AnalysisProvider(Protocol):
    """Anything that can produce a ProductAnalysis for a subject."""

    async def analyze(self, subject: ProductSubject, competitor_urls: Sequence[str]) -> ProductAnalysis:
        ...


class ProductAnalyzer:
    """Runs product analyses and competitor discovery through an LLMService."""

    def __init__(self, llm: LLMService, web_search: bool | None = None):
        self._llm = llm
        self._web_search = settings.llm_web_search_enabled if web_search is None else web_search

    async def analyze(self, subject: ProductSubject, competitor_urls: Sequence[str]) -> ProductAnalysis:
        """
        Analyze one product against its competitors.

        Args:
            subject: The user's product, by URL or by name and price
            competitor_urls: Competitor pages; empty lets the model find competitors itself

        Returns:
            The parsed analysis, with ``sources`` set from the model's web citations

        Raises:
            AnalysisError: When the call fails or the answer is empty or unparseable
        """
        prompt = ProductAnalysisPrompt(
            user_product_url=subject.url,
            product_name=subject.name,
            current_price=subject.price,
            competitor_urls=list(competitor_urls),
            currency=settings.currency,
        )

        try:
            response = await self._llm.call_llm(
                prompt=prompt.to_prompt(),
                system_prompt=ANALYST_SYSTEM_PROMPT,
                web_search=self._web_search,
            )
        except Exception as e:
            raise AnalysisError(f"Failed to get analysis from AI: {e}.") from e

        json_text = extract_json_block(response.text)
        if not json_text:
            raise AnalysisError(
                "Received an empty response from the AI. The analysis could not be "
                "completed. Please try again."
            )

        try:
            analysis = ProductAnalysis.model_validate_json(json_text)
        except ValidationError as e:
            logger.error(
                f"Unusable AI analysis for {subject.label!r}: {e}\nResponse: {json_text[:200]}"
            )
            raise AnalysisError(
                "The AI returned a response that could not be processed. "
                "Please try your request again."
            ) from e

        if response.citations:
            seen = set()
            sources = []
            for citation in response.citations:
                if citation.url in seen:
                    continue
                seen.add(citation.url)
                sources.append(Source(uri=citation.url, title=citation.title or citation.url))
            analysis.sources = sources

        return analysis

    async def suggest_competitors(self, user_product_url: str) -> List[str]:
        """
        Ask the model for 2-3 competitor product URLs.

        Any failure yields an empty list.
        """
        prompt = CompetitorSuggestionPrompt(user_product_url=user_product_url)
        try:
            response = await self._llm.call_llm(
                prompt=prompt.to_prompt(),
                web_search=self._web_search,
            )
            urls = json.loads(extract_json_block(response.text) or "[]")
        except Exception as e:
            logger.error(f"Error suggesting competitors for {user_product_url}: {e}")
            return []

        if isinstance(urls, list) and all(isinstance(url, str) for url in urls):
            return urls

        logger.warning(f"Competitor suggestion was not a list of URLs: {str(urls)[:200]}")
        return []
