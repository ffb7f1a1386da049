"""
Display helpers shared by the CLI, the dashboard and exports.
"""
from typing import Optional

from core.annotations import Annotation
from core.facets import category_labels, sni_lines
from core.models import CompanyRecord

_NBSP = "\u00a0"
_COMPACT_UNITS = [
    (1_000_000_000, "md"),
    (1_000_000, "mn"),
    (1_000, "tn"),
]


def _group_thousands(value: int) -> str:
    # Swedish grouping: non-breaking space between thousands
    return f"{value:,}".replace(",", _NBSP)


def format_sek(amount: Optional[float]) -> str:
    """Whole kronor, e.g. ``1 234 567 kr``. Undisclosed amounts render as ``-``."""
    if amount is None:
        return "-"
    return f"{_group_thousands(round(amount))}{_NBSP}kr"


def format_sek_compact(amount: Optional[float]) -> str:
    """Short form for list rows, e.g. ``1,2 mn kr``."""
    if amount is None:
        return "-"
    for threshold, unit in _COMPACT_UNITS:
        if abs(amount) >= threshold:
            scaled = f"{amount / threshold:.1f}".replace(".", ",")
            if scaled.endswith(",0"):
                scaled = scaled[:-2]
            return f"{scaled}{_NBSP}{unit}{_NBSP}kr"
    return format_sek(amount)


def format_bool(value: Optional[bool]) -> str:
    if value is None:
        return "-"
    return "Ja" if value else "Nej"


def status_label(record: CompanyRecord) -> str:
    if record.is_active:
        return "Aktiv"
    return record.company.status or "Okänd"


def record_to_row(record: CompanyRecord, annotation: Annotation) -> dict:
    """Flat row for tables and CSV export. Amounts stay numeric."""
    f = record.financials
    return {
        "org_number": record.company.org_number,
        "company_name": record.company.name,
        "legal_form": record.company.legal_form,
        "status": status_label(record),
        "registration_date": record.company.registration_date,
        "phone": record.contact.phone or "",
        "city": record.contact.city,
        "county": record.contact.county,
        "period": f.period,
        "revenue": f.revenue,
        "profit_after_financial_items": f.profit_after_financial_items,
        "net_profit": f.net_profit,
        "total_assets": f.total_assets,
        "sni_code": record.industry.sni_code,
        "sni_description": "; ".join(sni_lines(record)),
        "categories": ", ".join(category_labels(record)),
        "f_skatt": record.tax_info.f_skatt,
        "vat_registered": record.tax_info.vat_registered,
        "employer_registered": record.tax_info.employer_registered,
        "board_size": len(record.board),
        "board_phone": record.has_board_phone,
        "interaction_status": annotation.status.value,
        "favorite": annotation.is_favorite,
        "comment": annotation.comment,
    }
