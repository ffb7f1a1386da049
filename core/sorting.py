"""
Deterministic ordering of company records.

Sort tokens have the form ``<key>-<direction>``, e.g. ``name-asc`` or
``net_profit-desc``. Undisclosed amounts rank lowest, unparsable
registration dates count as the epoch. Ties keep their input order.
"""
import functools
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, Iterable, List

from core.models import CompanyRecord, FinancialField, financial_amount

logger = logging.getLogger(__name__)


class SortKey(Enum):
    NAME = "name"
    REVENUE = "revenue"
    PROFIT_AFTER_FINANCIAL_ITEMS = "profit_after_financial_items"
    NET_PROFIT = "net_profit"
    TOTAL_ASSETS = "total_assets"
    DATE = "date"


class SortDirection(Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class SortSpec:
    key: SortKey = SortKey.NAME
    direction: SortDirection = SortDirection.ASC

    @classmethod
    def parse(cls, token: str) -> "SortSpec":
        """Parse ``name-asc`` style tokens. Raises ValueError on unknown input."""
        key, sep, direction = token.rpartition("-")
        if not sep:
            raise ValueError(f"Sort token must look like 'key-asc' or 'key-desc': {token!r}")
        return cls(SortKey(key), SortDirection(direction))

    def __str__(self) -> str:
        return f"{self.key.value}-{self.direction.value}"


SORT_OPTIONS: List[str] = [
    "name-asc",
    "name-desc",
    "revenue-desc",
    "revenue-asc",
    "profit_after_financial_items-desc",
    "profit_after_financial_items-asc",
    "net_profit-desc",
    "net_profit-asc",
    "total_assets-desc",
    "total_assets-asc",
    "date-desc",
    "date-asc",
]


def default_sort_spec(token: str) -> SortSpec:
    """Parse a configured default sort, falling back to the first option."""
    try:
        return SortSpec.parse(token)
    except ValueError:
        logger.warning(f"Unknown default sort {token!r}, using {SORT_OPTIONS[0]}")
        return SortSpec.parse(SORT_OPTIONS[0])


def registration_timestamp(record: CompanyRecord) -> float:
    """Registration date as a UTC timestamp, 0.0 when missing or unparsable."""
    raw = record.company.registration_date.strip()
    if not raw:
        return 0.0
    try:
        parsed = datetime.fromisoformat(raw)
    except ValueError:
        return 0.0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def _amount_key(which: FinancialField) -> Callable[[CompanyRecord], float]:
    def key(record: CompanyRecord) -> float:
        amount = financial_amount(record, which)
        return amount if amount is not None else float("-inf")
    return key


_SORT_VALUES: Dict[SortKey, Callable[[CompanyRecord], object]] = {
    SortKey.NAME: lambda r: r.company.name.lower(),
    SortKey.REVENUE: _amount_key(FinancialField.REVENUE),
    SortKey.PROFIT_AFTER_FINANCIAL_ITEMS: _amount_key(FinancialField.PROFIT_AFTER_FINANCIAL_ITEMS),
    SortKey.NET_PROFIT: _amount_key(FinancialField.NET_PROFIT),
    SortKey.TOTAL_ASSETS: _amount_key(FinancialField.TOTAL_ASSETS),
    SortKey.DATE: registration_timestamp,
}


def compare(a: CompanyRecord, b: CompanyRecord, key: SortKey, direction: SortDirection) -> int:
    """Three-way comparison returning -1, 0 or 1."""
    value_of = _SORT_VALUES[key]
    va, vb = value_of(a), value_of(b)
    result = (va > vb) - (va < vb)
    return -result if direction is SortDirection.DESC else result


def sort_records(records: Iterable[CompanyRecord], spec: SortSpec) -> List[CompanyRecord]:
    """Return a new, stably sorted list."""
    return sorted(
        records,
        key=functools.cmp_to_key(lambda a, b: compare(a, b, spec.key, spec.direction)),
    )
