"""
Filtering logic for company records.

All filter dimensions combine with AND. Inside a multi-select dimension the
selected values combine with OR, and an empty selection means no
constraint.
"""
import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Optional

from core.annotations import Annotation, InteractionStatus
from core.facets import category_labels, sni_lines
from core.models import CompanyRecord, FinancialField, financial_amount

logger = logging.getLogger(__name__)

_NEG_INF = float("-inf")


class TriState(Enum):
    """Any / yes / no selector. ANY imposes no constraint."""
    ANY = "any"
    YES = "yes"
    NO = "no"

    def accepts(self, value: bool) -> bool:
        if self is TriState.YES:
            return value
        if self is TriState.NO:
            return not value
        return True


@dataclass(frozen=True)
class RangeFilter:
    """Inclusive bounds on one amount. A missing bound is unconstrained."""
    min: Optional[float] = None
    max: Optional[float] = None

    def accepts(self, amount: Optional[float]) -> bool:
        # An undisclosed amount ranks below everything: it fails any min
        # bound and satisfies any max bound.
        value = amount if amount is not None else _NEG_INF
        if self.min is not None and value < self.min:
            return False
        if self.max is not None and value > self.max:
            return False
        return True

    @property
    def is_set(self) -> bool:
        return self.min is not None or self.max is not None


def _default_ranges() -> Dict[FinancialField, RangeFilter]:
    return {f: RangeFilter() for f in FinancialField}


@dataclass(frozen=True)
class Filters:
    """Complete filter settings. ``Filters()`` is the cleared state."""
    ranges: Dict[FinancialField, RangeFilter] = field(default_factory=_default_ranges)
    company_phone: TriState = TriState.ANY
    board_phone: TriState = TriState.ANY
    f_skatt: TriState = TriState.ANY
    vat_registered: TriState = TriState.ANY
    employer_registered: TriState = TriState.ANY
    sni: FrozenSet[str] = frozenset()
    categories: FrozenSet[str] = frozenset()
    statuses: FrozenSet[InteractionStatus] = frozenset()
    favorites_only: bool = False

    def range_for(self, which: FinancialField) -> RangeFilter:
        return self.ranges.get(which, RangeFilter())

    def with_range(self, which: FinancialField, min=None, max=None) -> "Filters":
        ranges = dict(self.ranges)
        ranges[which] = RangeFilter(min=min, max=max)
        return replace(self, ranges=ranges)

    def is_empty(self) -> bool:
        return self == Filters()


def matches_search(record: CompanyRecord, term: str) -> bool:
    """Case-insensitive substring match on name and city, raw match on org number."""
    if not term:
        return True
    term = term.lower()
    return (
        term in record.company.name.lower()
        or term in record.company.org_number
        or term in record.contact.city.lower()
    )


def matches(
    record: CompanyRecord,
    annotation: Annotation,
    filters: Filters,
    search_term: str = "",
) -> bool:
    """Decide whether a record is visible under the given filters."""
    if not matches_search(record, search_term):
        return False

    for which in FinancialField:
        if not filters.range_for(which).accepts(financial_amount(record, which)):
            return False

    if not filters.company_phone.accepts(record.has_company_phone):
        return False
    if not filters.board_phone.accepts(record.has_board_phone):
        return False

    tax = record.tax_info
    if not filters.f_skatt.accepts(tax.f_skatt):
        return False
    if not filters.vat_registered.accepts(tax.vat_registered):
        return False
    if not filters.employer_registered.accepts(tax.employer_registered):
        return False

    if filters.sni and not any(line in filters.sni for line in sni_lines(record)):
        return False
    if filters.categories and not any(c in filters.categories for c in category_labels(record)):
        return False

    if filters.statuses and annotation.status not in filters.statuses:
        return False
    if filters.favorites_only and not annotation.is_favorite:
        return False

    return True


class RecordFilter:
    """Apply one set of filters to a batch of records."""

    def __init__(self, filters: Filters, search_term: str = ""):
        self.filters = filters
        self.search_term = search_term

    def matches(self, record: CompanyRecord, annotation: Annotation) -> bool:
        return matches(record, annotation, self.filters, self.search_term)

    def filter_records(self, records: Iterable[CompanyRecord], annotations) -> List[CompanyRecord]:
        """
        Filter a list of records.

        Args:
            records: Records to filter, left untouched
            annotations: Anything with ``get(org_number) -> Annotation``

        Returns:
            New list of matching records, in input order
        """
        records = list(records)
        matched = [r for r in records if self.matches(r, annotations.get(r.org_number))]
        logger.debug(f"Filtered {len(records)} records -> {len(matched)} matches")
        return matched
