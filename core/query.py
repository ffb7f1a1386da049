"""
Query orchestrator: search -> filter -> sort over one snapshot.

``compute_visible`` is pure. It is re-run whenever the records, the
annotations, the search term, the filters or the sort order change, and
always returns the full ordered result. Truncation for display is left to
the caller.
"""
import logging
from dataclasses import dataclass, field, replace
from typing import List, Sequence

from core.filtering import Filters, RecordFilter, matches_search
from core.models import CompanyRecord
from core.sorting import SortSpec, sort_records

logger = logging.getLogger(__name__)


def compute_visible(
    records: Sequence[CompanyRecord],
    annotations,
    search_term: str,
    filters: Filters,
    sort_spec: SortSpec,
) -> List[CompanyRecord]:
    """Ordered list of visible records.

    ``annotations`` is anything with ``get(org_number) -> Annotation``,
    typically an ``AnnotationSnapshot`` taken for this render.
    """
    searched = [r for r in records if matches_search(r, search_term)]
    filtered = RecordFilter(filters).filter_records(searched, annotations)
    visible = sort_records(filtered, sort_spec)
    logger.debug(
        f"Query: {len(records)} records, {len(searched)} after search, "
        f"{len(visible)} visible (sort {sort_spec})"
    )
    return visible


@dataclass(frozen=True)
class QueryState:
    """Everything besides data and annotations that shapes the visible set."""
    search_term: str = ""
    filters: Filters = field(default_factory=Filters)
    sort_spec: SortSpec = field(default_factory=SortSpec)

    def reset_filters(self) -> "QueryState":
        return replace(self, filters=Filters())

    def reset(self) -> "QueryState":
        """State after a new dataset load: search and filters cleared, sort kept."""
        return replace(self, search_term="", filters=Filters())

    def run(self, records: Sequence[CompanyRecord], annotations) -> List[CompanyRecord]:
        return compute_visible(records, annotations, self.search_term, self.filters, self.sort_spec)
