"""HTTP client for the ML price prediction service.

Endpoints:
- ``POST /predict`` with one payload, answers ``{"predicted_price": 451.2}``
  (or a one-element list)
- ``POST /predict/batch`` with a JSON array of payloads, answers
  ``{"predicted_prices": [451.2, 1200.0]}`` aligned with the request

Every failure (transport error, non-2xx status, unexpected body) is raised as
PredictionError. The service signals an untrained model with a ``detail``
message containing "not trained".
"""

from __future__ import annotations

import logging
import math
from typing import Any, Optional, Protocol, Sequence, Union

import httpx
from pydantic import BaseModel, Field

from predictgenie.config import settings
from predictgenie.errors import PredictionError

logger = logging.getLogger(__name__)


class PredictPayload(BaseModel):
    """Feature payload accepted by the prediction service."""

    current_price: Union[int, float]
    competitor_prices: list[Union[int, float]] = Field(min_length=1)
    category: str


class PricePredictor(Protocol):
    """Anything that can turn prediction payloads into prices."""

    async def predict_price(self, payload: PredictPayload) -> float:
        ...

    async def predict_batch(self, payloads: Sequence[PredictPayload]) -> list[float]:
        ...


def _to_float(value: Any) -> float:
    """Numeric coercion for predicted values; anything non-numeric becomes NaN."""
    if isinstance(value, bool):
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return math.nan
    return math.nan


class PredictionClient:
    """Async client for the prediction service."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Args:
            base_url: Service root (defaults to settings.prediction_api_url)
            timeout: Request timeout in seconds (defaults to settings.prediction_timeout_seconds)
            client: Optional pre-built httpx client; the caller keeps ownership of it
        """
        self._base_url = (base_url or settings.prediction_api_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.prediction_timeout_seconds
        self._client = client
        self._owns_client = client is None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
            self._owns_client = True
        return self._client

    async def _post(self, path: str, body: Any, label: str) -> Any:
        """POST JSON and return the decoded body, raising PredictionError on any failure."""
        client = await self._get_client()
        url = f"{self._base_url}{path}"

        try:
            response = await client.post(url, json=body)
        except httpx.HTTPError as e:
            raise PredictionError(f"{label} failed: {e.__class__.__name__}: {e}") from e

        if not response.is_success:
            detail = None
            try:
                detail = response.json().get("detail")
            except (ValueError, AttributeError):
                pass
            message = detail if isinstance(detail, str) else f"{label} failed ({response.status_code})"
            raise PredictionError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise PredictionError(f"{label} returned a response that is not JSON") from e

    async def predict_price(self, payload: PredictPayload) -> float:
        """
        Predict the price of one product.

        Returns:
            The predicted price; NaN when the service answered a non-numeric value

        Raises:
            PredictionError: On any request failure or a body without predicted_price
        """
        data = await self._post("/predict", payload.model_dump(), "Prediction")
        if not isinstance(data, dict) or "predicted_price" not in data:
            raise PredictionError("Prediction response is missing 'predicted_price'")

        value = data["predicted_price"]
        if isinstance(value, list):
            if not value:
                raise PredictionError("Prediction response contains no price")
            value = value[0]

        logger.debug(f"Predicted price {value!r} for category={payload.category}")
        return _to_float(value)

    async def predict_batch(self, payloads: Sequence[PredictPayload]) -> list[float]:
        """
        Predict prices for several products in one request.

        The request body is the bare JSON array of payloads.

        Returns:
            Prices aligned with ``payloads``; non-numeric entries become NaN

        Raises:
            PredictionError: On any request failure or a body without predicted_prices
        """
        body = [payload.model_dump() for payload in payloads]
        data = await self._post("/predict/batch", body, "Batch prediction")
        if not isinstance(data, dict) or not isinstance(data.get("predicted_prices"), list):
            raise PredictionError("Batch prediction response is missing 'predicted_prices'")

        return [_to_float(value) for value in data["predicted_prices"]]

    async def close(self):
        """Close the underlying HTTP client if this instance created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
        self._client = None

    async def __aenter__(self) -> "PredictionClient":
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()
