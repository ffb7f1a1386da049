"""
Facet vocabularies for the multi-select filters.

Facets are derived from the whole loaded dataset, not the filtered view,
so values hidden by the current filters can still be picked.
"""

from dataclasses import dataclass, field
from typing import Iterable, List

from core.models import CompanyRecord


@dataclass
class Facets:
    """Distinct, sorted filter options."""
    sni_values: List[str] = field(default_factory=list)
    category_values: List[str] = field(default_factory=list)


def sni_lines(record: CompanyRecord) -> List[str]:
    """SNI description lines of a record, trimmed, empty lines dropped."""
    lines = (line.strip() for line in record.industry.sni_description.split("\n"))
    return [line for line in lines if line]


def category_labels(record: CompanyRecord) -> List[str]:
    """Category labels of a record, trimmed, empty labels dropped."""
    labels = (label.strip() for label in record.industry.categories)
    return [label for label in labels if label]


def extract_facets(records: Iterable[CompanyRecord]) -> Facets:
    sni = set()
    categories = set()
    for record in records:
        sni.update(sni_lines(record))
        categories.update(category_labels(record))
    return Facets(sni_values=sorted(sni), category_values=sorted(categories))
