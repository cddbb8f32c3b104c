# storefront/domain/catalog/rows.py
"""Turns raw sheet rows into validated :class:`VariantRow` records.

The sheet is edited by hand, so every cell is treated as untrusted: numbers
fall back to zero, booleans to their default, and a row that cannot be used
is rejected without affecting the rest of the batch.
"""
import enum
import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, List, Optional, Sequence, Union

from storefront.core.errors import RowParseError
from storefront.domain.catalog.identity import IdentityMode, resolve_product_id
from .schemas import VariantRow

logger = logging.getLogger(__name__)

# Column positions, A..V
COL_PRODUCT_ID = 0
COL_NAME = 1
COL_DESCRIPTION = 2
COL_CATEGORY = 3
COL_TYPE = 4
COL_BASE_PRICE = 5
COL_COLOR_NAME = 6
COL_COLOR_HEX = 7
COL_SIZE = 8
COL_VARIANT_SKU = 9
COL_VARIANT_PRICE = 10
COL_STOCK = 11
COL_IMAGES = (12, 13, 14, 15)
COL_TAGS = 16
COL_IS_NEW = 17
COL_IS_BESTSELLER = 18
COL_IS_ACTIVE = 19
COL_CREATED = 20
COL_UPDATED = 21

ROW_WIDTH = 22
FIRST_DATA_LINE = 2  # row 1 holds the headers

# Larger magnitudes do not fit the Numeric(18, 2) price column and read as 0.
MAX_CELL_EXPONENT = 15

TRUE_VALUES = {"true", "yes", "1"}
FALSE_VALUES = {"false", "no", "0"}


class RowRejection(str, enum.Enum):
    BLANK = "BLANK"
    MISSING_VARIANT_FIELDS = "MISSING_VARIANT_FIELDS"
    MALFORMED = "MALFORMED"


@dataclass(frozen=True)
class ParsedRow:
    row: VariantRow


@dataclass(frozen=True)
class RejectedRow:
    reason: RowRejection
    line: int
    detail: str = ""


RowParseResult = Union[ParsedRow, RejectedRow]


@dataclass
class ParseReport:
    rows: List[VariantRow] = field(default_factory=list)
    skipped: int = 0
    errors: int = 0


def cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "TRUE" if value else "FALSE"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def parse_decimal(value: Any) -> Decimal:
    text = cell_text(value).replace(",", "")
    if not text:
        return Decimal("0")
    try:
        number = Decimal(text)
    except InvalidOperation:
        return Decimal("0")
    if not number.is_finite() or number.adjusted() > MAX_CELL_EXPONENT:
        return Decimal("0")
    return number


def parse_int(value: Any) -> int:
    number = parse_decimal(value)
    return int(number)


def parse_bool(value: Any, default: bool = False) -> bool:
    if isinstance(value, bool):
        return value
    text = cell_text(value).lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    return default


def _cell(cells: Sequence[Any], index: int) -> Any:
    return cells[index] if index < len(cells) else None


def _build_row(cells: Sequence[Any], line: int, mode: IdentityMode) -> RowParseResult:
    text = [cell_text(_cell(cells, i)) for i in range(ROW_WIDTH)]

    key, name = text[COL_PRODUCT_ID], text[COL_NAME]
    if not key or not name:
        return RejectedRow(RowRejection.BLANK, line)

    required = (COL_COLOR_NAME, COL_COLOR_HEX, COL_SIZE, COL_VARIANT_SKU)
    if not all(text[i] for i in required):
        return RejectedRow(
            RowRejection.MISSING_VARIANT_FIELDS,
            line,
            "missing color_name, color_hex, size or variant_sku",
        )

    base_price = max(parse_decimal(_cell(cells, COL_BASE_PRICE)), Decimal("0"))
    variant_price = parse_decimal(_cell(cells, COL_VARIANT_PRICE))
    if variant_price <= 0:
        variant_price = base_price

    created = text[COL_CREATED] or date.today().isoformat()

    row = VariantRow(
        line=line,
        product_id=resolve_product_id(key, name, mode),
        external_product_key=key,
        name=name,
        description=text[COL_DESCRIPTION],
        category=text[COL_CATEGORY] or "uncategorized",
        type=text[COL_TYPE] or "clothing",
        base_price=base_price,
        color_name=text[COL_COLOR_NAME],
        color_hex=text[COL_COLOR_HEX],
        size=text[COL_SIZE],
        variant_sku=text[COL_VARIANT_SKU],
        variant_price=variant_price,
        stock_quantity=max(parse_int(_cell(cells, COL_STOCK)), 0),
        image_urls=[text[i] for i in COL_IMAGES],
        tags=text[COL_TAGS],
        is_new=parse_bool(_cell(cells, COL_IS_NEW)),
        is_bestseller=parse_bool(_cell(cells, COL_IS_BESTSELLER)),
        is_active=parse_bool(_cell(cells, COL_IS_ACTIVE), default=True),
        created_date=created,
        last_updated=text[COL_UPDATED] or created,
    )
    return ParsedRow(row)


def parse_row(
    cells: Optional[Sequence[Any]],
    line: int = 0,
    mode: IdentityMode = IdentityMode.LEGACY,
) -> RowParseResult:
    """Parse one sheet row. Never raises."""
    try:
        if cells is None or isinstance(cells, (str, bytes)):
            raise RowParseError("row is not a list of cells", line)
        return _build_row(cells, line, mode)
    except Exception as exc:
        return RejectedRow(RowRejection.MALFORMED, line, str(exc))


def parse_rows(
    rows: Sequence[Sequence[Any]],
    mode: IdentityMode = IdentityMode.LEGACY,
    first_line: int = FIRST_DATA_LINE,
) -> ParseReport:
    report = ParseReport()
    for offset, cells in enumerate(rows):
        line = first_line + offset
        result = parse_row(cells, line, mode)
        if isinstance(result, ParsedRow):
            report.rows.append(result.row)
            continue

        if result.reason is RowRejection.MALFORMED:
            report.errors += 1
            logger.error("Error parsing row %d: %s", line, result.detail)
        else:
            report.skipped += 1
            if result.reason is RowRejection.MISSING_VARIANT_FIELDS:
                logger.warning("Skipping row %d: %s", line, result.detail)
    return report
