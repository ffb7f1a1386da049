"""
Data models for business-registry company records.

Records arrive as loosely-shaped JSON objects. ``CompanyRecord.from_dict``
accepts whatever sub-objects are present and fills the rest with empty
defaults, so the rest of the code can read attributes without guarding.
"""
import math
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional

ACTIVE_STATUS = "Bolaget är aktivt"


def _text(value) -> str:
    return value if isinstance(value, str) else ""


def _amount(value) -> Optional[float]:
    """Return a finite number or None. Absent means "not disclosed"."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def _flag(value) -> bool:
    return value is True


def _mapping(value) -> dict:
    return value if isinstance(value, dict) else {}


@dataclass
class Address:
    """Postal address of a board member."""
    street: str = ""
    postal_code: str = ""
    city: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Address":
        data = _mapping(data)
        return cls(
            street=_text(data.get("street")),
            postal_code=_text(data.get("postal_code")),
            city=_text(data.get("city")),
        )


@dataclass
class BoardMember:
    """Board member (styrelseledamot)."""
    name: str = ""
    role: str = ""
    age: Optional[int] = None
    phone: Optional[str] = None
    address: Address = field(default_factory=Address)

    @classmethod
    def from_dict(cls, data: dict) -> "BoardMember":
        data = _mapping(data)
        age = data.get("age")
        return cls(
            name=_text(data.get("name")),
            role=_text(data.get("role")),
            age=age if isinstance(age, int) and not isinstance(age, bool) else None,
            phone=data.get("phone") if isinstance(data.get("phone"), str) else None,
            address=Address.from_dict(data.get("address")),
        )


@dataclass
class Company:
    """Registry identity of a company."""
    name: str = ""
    org_number: str = ""  # Swedish organization number (NNNNNN-NNNN)
    legal_form: str = ""  # AB, HB, etc.
    status: str = ""
    registration_date: str = ""  # As delivered, usually YYYY-MM-DD

    @classmethod
    def from_dict(cls, data: dict) -> "Company":
        data = _mapping(data)
        return cls(
            name=_text(data.get("name")),
            org_number=_text(data.get("org_number")),
            legal_form=_text(data.get("legal_form")),
            status=_text(data.get("status")),
            registration_date=_text(data.get("registration_date")),
        )


@dataclass
class Contact:
    """Company contact details."""
    phone: Optional[str] = None
    address: str = ""
    city: str = ""
    county: str = ""  # Län

    @classmethod
    def from_dict(cls, data: dict) -> "Contact":
        data = _mapping(data)
        return cls(
            phone=data.get("phone") if isinstance(data.get("phone"), str) else None,
            address=_text(data.get("address")),
            city=_text(data.get("city")),
            county=_text(data.get("county")),
        )


@dataclass
class Financials:
    """Latest reported figures. All amounts in SEK, None when not disclosed."""
    period: str = ""
    revenue: Optional[float] = None
    profit_after_financial_items: Optional[float] = None
    net_profit: Optional[float] = None
    total_assets: Optional[float] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Financials":
        data = _mapping(data)
        return cls(
            period=_text(data.get("period")),
            revenue=_amount(data.get("revenue")),
            profit_after_financial_items=_amount(data.get("profit_after_financial_items")),
            net_profit=_amount(data.get("net_profit")),
            total_assets=_amount(data.get("total_assets")),
        )


@dataclass
class Industry:
    """Industry classification (SNI) and free-form categories."""
    activity_description: str = ""
    sni_code: str = ""
    sni_description: str = ""  # May hold several newline-separated lines
    categories: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Industry":
        data = _mapping(data)
        categories = data.get("categories")
        if not isinstance(categories, list):
            categories = []
        return cls(
            activity_description=_text(data.get("activity_description")),
            sni_code=_text(data.get("sni_code")),
            sni_description=_text(data.get("sni_description")),
            categories=[c for c in categories if isinstance(c, str)],
        )


@dataclass
class TaxInfo:
    """Swedish tax registrations."""
    f_skatt: bool = False
    vat_registered: bool = False
    employer_registered: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> "TaxInfo":
        data = _mapping(data)
        return cls(
            f_skatt=_flag(data.get("f_skatt")),
            vat_registered=_flag(data.get("vat_registered")),
            employer_registered=_flag(data.get("employer_registered")),
        )


@dataclass
class CompanyRecord:
    """Complete company profile as loaded from a dataset."""
    company: Company = field(default_factory=Company)
    contact: Contact = field(default_factory=Contact)
    financials: Financials = field(default_factory=Financials)
    industry: Industry = field(default_factory=Industry)
    tax_info: TaxInfo = field(default_factory=TaxInfo)
    board: List[BoardMember] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "CompanyRecord":
        board = data.get("board")
        if not isinstance(board, list):
            board = []
        return cls(
            company=Company.from_dict(data.get("company")),
            contact=Contact.from_dict(data.get("contact")),
            financials=Financials.from_dict(data.get("financials")),
            industry=Industry.from_dict(data.get("industry")),
            tax_info=TaxInfo.from_dict(data.get("tax_info")),
            board=[BoardMember.from_dict(m) for m in board if isinstance(m, dict)],
        )

    @property
    def org_number(self) -> str:
        return self.company.org_number

    @property
    def is_active(self) -> bool:
        return self.company.status == ACTIVE_STATUS

    @property
    def has_company_phone(self) -> bool:
        return bool(self.contact.phone)

    @property
    def has_board_phone(self) -> bool:
        return any(member.phone for member in self.board)

    @property
    def display_name(self) -> str:
        return f"{self.company.name} ({self.company.org_number})"


def is_valid_payload(data) -> bool:
    """A decoded object is a record iff it carries a company with a name."""
    if not isinstance(data, dict):
        return False
    company = data.get("company")
    if not isinstance(company, dict):
        return False
    name = company.get("name")
    return isinstance(name, str) and name != ""


class FinancialField(Enum):
    """The four reported amounts that range filters and sorting act on."""
    REVENUE = "revenue"
    PROFIT_AFTER_FINANCIAL_ITEMS = "profit_after_financial_items"
    NET_PROFIT = "net_profit"
    TOTAL_ASSETS = "total_assets"


FINANCIAL_ACCESSORS: Dict[FinancialField, Callable[[Financials], Optional[float]]] = {
    FinancialField.REVENUE: lambda f: f.revenue,
    FinancialField.PROFIT_AFTER_FINANCIAL_ITEMS: lambda f: f.profit_after_financial_items,
    FinancialField.NET_PROFIT: lambda f: f.net_profit,
    FinancialField.TOTAL_ASSETS: lambda f: f.total_assets,
}


def financial_amount(record: CompanyRecord, which: FinancialField) -> Optional[float]:
    return FINANCIAL_ACCESSORS[which](record.financials)
