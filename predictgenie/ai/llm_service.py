"""LLM service for OpenAI integration."""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

from predictgenie.config import settings

logger = logging.getLogger(__name__)

# ```json ... ``` (language tag optional)
JSON_FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL)


@dataclass(frozen=True)
class Citation:
    """A web page cited by the model."""

    url: str
    title: Optional[str] = None


@dataclass
class LLMResponse:
    """Text answer of one LLM call plus any web citations."""

    text: str
    citations: List[Citation] = field(default_factory=list)


def extract_json_block(text: str) -> str:
    """
    Extract the JSON payload from a model answer.

    Returns the body of the first fenced block when there is one, otherwise
    the whole answer stripped.
    """
    if not text:
        return ""
    match = JSON_FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def _collect_citations(response: Any) -> List[Citation]:
    """Pull url_citation annotations out of a Responses API result."""
    citations: List[Citation] = []
    for item in getattr(response, "output", None) or []:
        if getattr(item, "type", None) != "message":
            continue
        for part in getattr(item, "content", None) or []:
            for annotation in getattr(part, "annotations", None) or []:
                if getattr(annotation, "type", None) != "url_citation":
                    continue
                url = getattr(annotation, "url", None)
                if url:
                    citations.append(Citation(url=url, title=getattr(annotation, "title", None)))
    return citations


class LLMService:
    """
    Service for LLM interactions with OpenAI.

    Features:
    - Chat completions for plain prompts
    - Responses API with the web search tool when pages must be browsed
    - Citation extraction for grounded answers
    - Call statistics
    """

    def __init__(self, api_key: Optional[str] = None, client: Optional[AsyncOpenAI] = None):
        self._api_key = api_key if api_key is not None else settings.openai_api_key
        self._client: Optional[AsyncOpenAI] = client
        self._call_count: int = 0
        self._error_count: int = 0

    async def _get_client(self) -> AsyncOpenAI:
        """Get or create OpenAI client."""
        if self._client is None:
            if not self._api_key:
                raise ValueError("OpenAI API key not configured")
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                timeout=settings.llm_timeout_seconds,
            )
        return self._client

    async def call_llm(
        self,
        prompt: str,
        system_prompt: str = "",
        temperature: Optional[float] = None,
        model: Optional[str] = None,
        web_search: bool = False,
    ) -> LLMResponse:
        """
        Call LLM with a prompt and return its text response.

        Args:
            prompt: User prompt
            system_prompt: System prompt/instructions
            temperature: Temperature (defaults to settings.llm_temperature)
            model: Model name (defaults to settings.llm_model)
            web_search: Let the model search and browse the web

        Returns:
            LLMResponse with the answer text and, for web searches, the cited pages
        """
        model = model or settings.llm_model
        temperature = temperature if temperature is not None else settings.llm_temperature

        try:
            client = await self._get_client()

            if web_search:
                response = await client.responses.create(
                    model=model,
                    instructions=system_prompt or None,
                    input=prompt,
                    tools=[{"type": "web_search"}],
                    temperature=temperature,
                    max_output_tokens=settings.llm_max_tokens,
                )
                result = LLMResponse(
                    text=response.output_text or "",
                    citations=_collect_citations(response),
                )
            else:
                messages = []
                if system_prompt:
                    messages.append({"role": "system", "content": system_prompt})
                messages.append({"role": "user", "content": prompt})

                response = await client.chat.completions.create(
                    model=model,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=settings.llm_max_tokens,
                )
                result = LLMResponse(text=response.choices[0].message.content or "")

            self._call_count += 1
            logger.debug(
                f"LLM call ok (model={model}, web_search={web_search}, "
                f"chars={len(result.text)}, citations={len(result.citations)})"
            )
            return result

        except Exception as e:
            self._error_count += 1
            logger.error(f"LLM API call failed: {e}")
            raise

    def get_stats(self) -> Dict[str, Any]:
        """
        Get LLM service statistics.

        Returns:
            Dictionary with call and error counts
        """
        return {
            "call_count": self._call_count,
            "error_count": self._error_count,
            "model": settings.llm_model,
            "web_search_enabled": settings.llm_web_search_enabled,
        }

    async def close(self):
        """Close connections."""
        if self._client:
            await self._client.close()
            self._client = None
