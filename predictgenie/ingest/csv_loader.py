"""Parse and validate uploaded product CSV files.

Expected layout (header names are case-sensitive)::

    productName,currentPrice,userProductUrl,competitorUrls
    Running Shoe,2499,,https://a.example/shoe;https://b.example/shoe

``productName`` and ``currentPrice`` are required; ``userProductUrl`` and
``competitorUrls`` (semicolon separated) are optional. Fields are split on
bare commas: quoting is not supported, so values must not contain commas.

Validation is fail-fast over the whole file: the first bad row rejects the
upload and no partial product list is returned.
"""

import logging
import re

from predictgenie import metrics
from predictgenie.errors import CsvValidationError
from predictgenie.models.products import CsvProduct
from predictgenie.normalize.values import coerce_number

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("productName", "currentPrice")

LINE_SPLIT_RE = re.compile(r"\r?\n")

ERROR_PREFIX = "CSV parsing failed"


def _row_error(row_num: int, reason: str) -> CsvValidationError:
    return CsvValidationError(f"{ERROR_PREFIX} on row {row_num}: {reason}", row=row_num)


def _parse_row(header: list[str], line: str, row_num: int) -> CsvProduct:
    values = line.split(",")
    if len(values) != len(header):
        raise _row_error(
            row_num,
            f"Incorrect number of columns. Expected {len(header)}, but found {len(values)}. "
            "Please check for extra commas.",
        )

    fields = {column: (values[i].strip() if values[i] else "") for i, column in enumerate(header)}

    product_name = fields.get("productName", "")
    price_text = fields.get("currentPrice", "")

    if not product_name:
        raise _row_error(row_num, "The 'productName' column cannot be empty.")

    if price_text == "":
        raise _row_error(row_num, "The 'currentPrice' column cannot be empty.")

    price = coerce_number(price_text)
    if price is None:
        raise _row_error(row_num, f'The value "{price_text}" in \'currentPrice\' is not a valid number.')

    if price < 0:
        raise _row_error(row_num, f'The price "{price_text}" cannot be negative.')

    competitor_field = fields.get("competitorUrls", "")
    competitor_urls = [url.strip() for url in competitor_field.split(";") if url.strip()] if competitor_field else []

    return CsvProduct(
        product_name=product_name,
        current_price=price,
        user_product_url=fields.get("userProductUrl", ""),
        competitor_urls=competitor_urls,
    )


def load_products(text: str) -> list[CsvProduct]:
    """
    Parse raw CSV text into validated products.

    Row numbers in errors are 1-based with the header as row 1; blank lines
    are dropped before numbering.

    Args:
        text: Raw file contents

    Returns:
        One CsvProduct per data row, in file order

    Raises:
        CsvValidationError: On the first malformed header or row
    """
    try:
        lines = [line for line in LINE_SPLIT_RE.split(text) if line.strip() != ""]
        if len(lines) < 2:
            raise CsvValidationError(
                f"{ERROR_PREFIX}: The file is empty or contains only a header row."
            )

        header = [column.strip() for column in lines[0].split(",")]
        for required in REQUIRED_COLUMNS:
            if required not in header:
                raise CsvValidationError(
                    f'{ERROR_PREFIX}: The header is missing the required column "{required}".',
                    row=1,
                )

        products = [
            _parse_row(header, line, row_num)
            for row_num, line in enumerate(lines[1:], start=2)
        ]
    except CsvValidationError as e:
        logger.warning(f"Rejected CSV upload: {e}")
        metrics.record_csv_ingestion(success=False)
        raise

    logger.info(f"Parsed {len(products)} products from CSV")
    metrics.record_csv_ingestion(success=True)
    return products


def load_products_from_bytes(data: bytes, encoding: str = "utf-8-sig") -> list[CsvProduct]:
    """Decode an uploaded file (a leading BOM is tolerated) and parse it."""
    try:
        text = data.decode(encoding)
    except UnicodeDecodeError as e:
        metrics.record_csv_ingestion(success=False)
        raise CsvValidationError(
            f"{ERROR_PREFIX}: The file could not be decoded as {encoding} text."
        ) from e
    return load_products(text)
