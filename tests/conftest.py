"""Shared fixtures: record payload factory and a temp key-value store."""

import copy

import pytest

from core.storage import KeyValueStore

BASE_PAYLOAD = {
    "company": {
        "name": "Test AB",
        "org_number": "556677-8899",
        "legal_form": "Aktiebolag",
        "status": "Bolaget är aktivt",
        "registration_date": "2015-03-01",
    },
    "contact": {
        "phone": "08-123 45 67",
        "address": "Storgatan 1",
        "city": "Stockholm",
        "county": "Stockholms län",
    },
    "financials": {
        "period": "2023-12",
        "revenue": 5000000,
        "profit_after_financial_items": 400000,
        "net_profit": 300000,
        "total_assets": 2500000,
    },
    "industry": {
        "activity_description": "Konsultverksamhet inom IT",
        "sni_code": "62010",
        "sni_description": "Dataprogrammering\nDatakonsultverksamhet",
        "categories": ["IT", "Konsult"],
    },
    "tax_info": {
        "f_skatt": True,
        "vat_registered": True,
        "employer_registered": False,
    },
    "board": [
        {
            "name": "Anna Svensson",
            "role": "Ordförande",
            "age": 52,
            "phone": "070-111 22 33",
            "address": {"street": "Lillgatan 2", "postal_code": "111 22", "city": "Stockholm"},
        }
    ],
}


def _merge(base: dict, overrides: dict) -> dict:
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


@pytest.fixture
def make_payload():
    """Build a record payload; nested dict overrides are merged in."""
    def factory(**overrides) -> dict:
        return _merge(copy.deepcopy(BASE_PAYLOAD), overrides)
    return factory


@pytest.fixture
def make_record(make_payload):
    from core.models import CompanyRecord

    def factory(**overrides):
        return CompanyRecord.from_dict(make_payload(**overrides))
    return factory


@pytest.fixture
def kv_store(tmp_path):
    return KeyValueStore(tmp_path / "data" / "merinfo.db")
