"""Analysis result models returned by the AI collaborator.

Wire names are camelCase (``suggestedPrice``); Python attributes are snake_case.
Prices keep the int/float identity they had on the wire. Observed prices
(subject, competitors, history) are taken as the AI wrote them, so a "N/A"
price is kept as text and left to the prediction payload mapper to drop.
Keys the models do not declare are kept and exported unchanged.
"""

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

Price = Union[int, float]

# A price as observed on a page; may be text the AI could not turn into a number
RawPrice = Union[int, float, str, None]


class WireModel(BaseModel):
    """Base model mapping snake_case attributes to camelCase wire names."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    def to_wire(self) -> dict[str, Any]:
        """Dump to a JSON-ready dict using wire names, keeping every field."""
        return self.model_dump(mode="json", by_alias=True)


class HistoricalPricePoint(WireModel):
    """One day of price history."""

    model_config = ConfigDict(frozen=True)

    date: str  # YYYY-MM-DD
    price: RawPrice


class Competitor(WireModel):
    """A competing product as observed by the AI."""

    url: str
    product_name: str
    price: RawPrice  # current selling price
    original_price: RawPrice = None  # price before discount
    discount_percentage: RawPrice = None
    stock_status: str  # usually "In Stock", "Low Stock" or "Out of Stock"
    price_trend: str  # usually "up", "down" or "stable"
    historical_prices: Optional[List[HistoricalPricePoint]] = None


class UserProduct(WireModel):
    """The analyzed subject itself."""

    url: Optional[str] = None  # absent for CSV rows identified by name
    product_name: str
    current_price: RawPrice
    original_price: RawPrice = None
    discount_percentage: RawPrice = None
    historical_prices: Optional[List[HistoricalPricePoint]] = None


class Source(WireModel):
    """Web page the AI consulted."""

    uri: str
    title: str


class ProductAnalysis(WireModel):
    """Full analysis of one product.

    ``suggested_price`` is the only field written after construction: the
    orchestrator replaces it with the ML prediction when one is available.
    """

    user_product: UserProduct
    competitors: List[Competitor] = []
    suggested_price: Price
    reasoning: str
    market_summary: str
    historical_price_analysis: str
    sources: Optional[List[Source]] = None

    @field_validator("reasoning", mode="before")
    @classmethod
    def join_reasoning_bullets(cls, v: Any) -> Any:
        # Models sometimes return the bulleted reasoning as a JSON array
        if isinstance(v, list) and all(isinstance(item, str) for item in v):
            return "\n".join(v)
        return v


AnalysisResult = List[ProductAnalysis]
