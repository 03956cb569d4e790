"""Centralized prompt templates for LLM interactions."""

import json
from typing import List, Optional, Union

from pydantic import BaseModel

from predictgenie.normalize.values import format_number

ANALYST_SYSTEM_PROMPT = (
    "You are PredictGenie, an expert e-commerce pricing analyst. You analyze a "
    "user's product against its competitors and suggest an optimal selling price. "
    "You always answer with a single JSON object and nothing else."
)

# Shape of the JSON object the analyst must return
PRODUCT_ANALYSIS_SCHEMA = {
    "type": "object",
    "properties": {
        "userProduct": {
            "type": "object",
            "properties": {
                "url": {"type": "string"},
                "productName": {"type": "string"},
                "currentPrice": {"type": "number"},
                "originalPrice": {"type": "number"},
                "discountPercentage": {"type": "number"},
                "historicalPrices": {"$ref": "#/definitions/historicalPrices"},
            },
            "required": ["productName", "currentPrice", "historicalPrices"],
        },
        "competitors": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "url": {"type": "string"},
                    "productName": {"type": "string"},
                    "price": {"type": "number"},
                    "originalPrice": {"type": "number"},
                    "discountPercentage": {"type": "number"},
                    "stockStatus": {"enum": ["In Stock", "Low Stock", "Out of Stock"]},
                    "priceTrend": {"enum": ["up", "down", "stable"]},
                    "historicalPrices": {"$ref": "#/definitions/historicalPrices"},
                },
                "required": [
                    "url", "productName", "price", "stockStatus", "priceTrend", "historicalPrices",
                ],
            },
        },
        "suggestedPrice": {"type": "integer"},
        "reasoning": {"type": "string"},
        "marketSummary": {"type": "string"},
        "historicalPriceAnalysis": {"type": "string"},
    },
    "required": [
        "userProduct", "competitors", "suggestedPrice", "reasoning",
        "marketSummary", "historicalPriceAnalysis",
    ],
    "definitions": {
        "historicalPrices": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "date": {"type": "string", "format": "date"},
                    "price": {"type": "number", "minimum": 0},
                },
                "required": ["date", "price"],
            },
        },
    },
}


class ProductAnalysisPrompt(BaseModel):
    """Prompt schema for a full product price analysis."""

    user_product_url: Optional[str] = None
    product_name: Optional[str] = None
    current_price: Optional[Union[int, float]] = None
    competitor_urls: List[str] = []
    currency: str = "INR"

    def _subject_line(self) -> str:
        if self.user_product_url:
            return f"User's Product URL: {self.user_product_url}"
        price = format_number(self.current_price) if self.current_price is not None else "unknown"
        return f'User\'s Product Name: "{self.product_name}", Current Price: {price} {self.currency}.'

    def _competitor_instructions(self) -> str:
        if self.competitor_urls:
            return f"Analyze the provided competitor URLs: {', '.join(self.competitor_urls)}"
        return (
            "The user has not provided competitor URLs. Search the web for the 2-3 most "
            "relevant e-commerce product pages of direct competitors to the user's product. "
            "Prefer well-known retailers and direct product matches."
        )

    def to_prompt(self) -> str:
        """Convert to prompt text."""
        return f"""Analyze the user's product against its competitors and suggest an optimal price.

MANDATORY: 30 DAYS OF PRICE HISTORY
Provide `historicalPrices` for the user's product AND for EVERY competitor, one entry
per day for the last 30 consecutive days ending today. Each entry is an object with
`date` ('YYYY-MM-DD') and `price` (a number). If real history cannot be found,
synthesize a realistic, plausible history. Never leave `historicalPrices` empty or null.

1. User's product
   - {self._subject_line()}
   - When a URL is given, find the product name, its current selling price and, when
     discounted, its original price. `currentPrice` is always the final price a customer pays.

2. Competitors
   - {self._competitor_instructions()}
   - For each competitor page extract the URL, product name, current selling price
     (`price`, the final price a customer pays), original price when discounted,
     stock status ('In Stock', 'Low Stock', 'Out of Stock') and recent price trend
     ('up', 'down', 'stable').

3. Findings
   - marketSummary: one paragraph on the market landscape.
   - historicalPriceAnalysis: one paragraph on the price history of the user's product
     versus competitors (price wars, seasonal swings, aggressive discounting).
   - suggestedPrice: the optimal selling price in {self.currency}, as a whole number.
   - reasoning: a concise bulleted list explaining the suggestion (market position,
     regular and discounted competitor prices, stock levels, price trends).

Return a single JSON object enclosed in ```json ... ``` matching this schema:
{json.dumps(PRODUCT_ANALYSIS_SCHEMA, indent=2)}"""


class CompetitorSuggestionPrompt(BaseModel):
    """Prompt schema for competitor discovery."""

    user_product_url: str

    def to_prompt(self) -> str:
        """Convert to prompt text."""
        return f"""Search the web for the product pages of 2-3 direct competitors of the
product below, each on a different e-commerce website.

Product URL: {self.user_product_url}

Respond with a JSON array of URL strings only, for example:
["https://competitor1.com/product-a", "https://competitor2.com/product-b"]"""
