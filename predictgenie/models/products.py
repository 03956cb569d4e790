"""Input-side product descriptors."""

from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass(frozen=True)
class CsvProduct:
    """One validated row of an uploaded product CSV."""

    product_name: str
    current_price: Union[int, float]
    user_product_url: str = ""
    competitor_urls: list[str] = field(default_factory=list)

    def to_wire(self) -> dict:
        return {
            "productName": self.product_name,
            "currentPrice": self.current_price,
            "userProductUrl": self.user_product_url,
            "competitorUrls": list(self.competitor_urls),
        }


@dataclass(frozen=True)
class ProductSubject:
    """Identifies the product being priced: by URL, or by name and price."""

    url: Optional[str] = None
    name: Optional[str] = None
    price: Optional[Union[int, float]] = None

    def __post_init__(self):
        if not self.url and not self.name:
            raise ValueError("A product subject needs either a URL or a product name")

    @classmethod
    def from_url(cls, url: str) -> "ProductSubject":
        return cls(url=url)

    @classmethod
    def from_csv_product(cls, product: CsvProduct) -> "ProductSubject":
        """URL when the row has one, otherwise the name and price pair."""
        if product.user_product_url:
            return cls(url=product.user_product_url)
        return cls(name=product.product_name, price=product.current_price)

    @property
    def label(self) -> str:
        return self.url or self.name or ""
