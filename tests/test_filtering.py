"""Tests for core/filtering.py: the record filter predicate."""

import pytest

from core.annotations import Annotation, AnnotationSnapshot, InteractionStatus
from core.filtering import Filters, RangeFilter, RecordFilter, TriState, matches, matches_search
from core.models import FinancialField

NO_ANNOTATION = Annotation()


# ============================================================================
# Search
# ============================================================================

class TestSearch:
    """Free-text search over name, org number and city."""

    def test_empty_term_matches_everything(self, make_record):
        assert matches_search(make_record(), "")

    def test_name_is_case_insensitive(self, make_record):
        record = make_record(company={"name": "Byggmästarna i Norr AB"})
        assert matches_search(record, "BYGGMÄSTARNA")
        assert matches_search(record, "i norr")

    def test_org_number_substring(self, make_record):
        assert matches_search(make_record(), "677-88")

    def test_city_is_case_insensitive(self, make_record):
        assert matches_search(make_record(contact={"city": "Göteborg"}), "göteborg")

    def test_no_match(self, make_record):
        assert not matches_search(make_record(), "malmö")

    def test_search_is_part_of_matches(self, make_record):
        assert not matches(make_record(), NO_ANNOTATION, Filters(), "malmö")
        assert matches(make_record(), NO_ANNOTATION, Filters(), "stockholm")


# ============================================================================
# Numeric ranges
# ============================================================================

class TestRanges:

    def test_bounds_are_inclusive(self):
        bounds = RangeFilter(min=100, max=200)
        assert bounds.accepts(100)
        assert bounds.accepts(200)
        assert not bounds.accepts(99.5)
        assert not bounds.accepts(200.1)

    def test_no_bounds_accepts_everything(self):
        assert RangeFilter().accepts(None)
        assert RangeFilter().accepts(-1e12)

    def test_min_excludes_undisclosed_amount(self, make_record):
        record = make_record(financials={"revenue": None})
        filters = Filters().with_range(FinancialField.REVENUE, min=1000)
        assert not matches(record, NO_ANNOTATION, filters)

    def test_max_only_includes_undisclosed_amount(self, make_record):
        record = make_record(financials={"revenue": None})
        filters = Filters().with_range(FinancialField.REVENUE, max=1000)
        assert matches(record, NO_ANNOTATION, filters)

    @pytest.mark.parametrize("which", list(FinancialField))
    def test_each_amount_is_filtered_independently(self, make_record, which):
        record = make_record()  # every amount >= 300 000
        assert matches(record, NO_ANNOTATION, Filters().with_range(which, min=300000))
        assert not matches(record, NO_ANNOTATION, Filters().with_range(which, max=299999))

    def test_negative_profit(self, make_record):
        record = make_record(financials={"net_profit": -50000})
        assert matches(record, NO_ANNOTATION, Filters().with_range(FinancialField.NET_PROFIT, max=0))
        assert not matches(record, NO_ANNOTATION, Filters().with_range(FinancialField.NET_PROFIT, min=0))


# ============================================================================
# Tri-state filters
# ============================================================================

class TestTriState:

    def test_accepts(self):
        assert TriState.ANY.accepts(True) and TriState.ANY.accepts(False)
        assert TriState.YES.accepts(True) and not TriState.YES.accepts(False)
        assert TriState.NO.accepts(False) and not TriState.NO.accepts(True)

    def test_company_phone(self, make_record):
        with_phone = make_record()
        without = make_record(contact={"phone": None})
        yes = Filters(company_phone=TriState.YES)
        no = Filters(company_phone=TriState.NO)
        assert matches(with_phone, NO_ANNOTATION, yes)
        assert not matches(without, NO_ANNOTATION, yes)
        assert matches(without, NO_ANNOTATION, no)
        assert not matches(with_phone, NO_ANNOTATION, no)

    def test_board_phone_needs_one_member_with_phone(self, make_record):
        mixed = make_record(board=[{"name": "A", "phone": ""}, {"name": "B", "phone": "070-1"}])
        none = make_record(board=[{"name": "A"}, {"name": "B", "phone": ""}])
        empty = make_record(board=[])
        yes = Filters(board_phone=TriState.YES)
        assert matches(mixed, NO_ANNOTATION, yes)
        assert not matches(none, NO_ANNOTATION, yes)
        assert matches(empty, NO_ANNOTATION, Filters(board_phone=TriState.NO))

    def test_tax_flags(self, make_record):
        record = make_record()  # f_skatt and VAT yes, employer no
        assert matches(record, NO_ANNOTATION, Filters(f_skatt=TriState.YES, vat_registered=TriState.YES))
        assert matches(record, NO_ANNOTATION, Filters(employer_registered=TriState.NO))
        assert not matches(record, NO_ANNOTATION, Filters(employer_registered=TriState.YES))
        assert not matches(record, NO_ANNOTATION, Filters(f_skatt=TriState.NO))


# ============================================================================
# Multi-select filters
# ============================================================================

class TestMultiSelect:

    def test_empty_selection_is_no_constraint(self, make_record):
        records = [make_record(), make_record(industry={"sni_description": "", "categories": []})]
        f = RecordFilter(Filters(sni=frozenset(), categories=frozenset(), statuses=frozenset()))
        assert len(f.filter_records(records, AnnotationSnapshot({}))) == len(records)

    def test_sni_matches_any_selected_line(self, make_record):
        record = make_record(industry={"sni_description": "Dataprogrammering\n  Datakonsultverksamhet "})
        assert matches(record, NO_ANNOTATION, Filters(sni=frozenset({"Datakonsultverksamhet", "Bygg"})))
        assert not matches(record, NO_ANNOTATION, Filters(sni=frozenset({"Bygg"})))

    def test_categories_match_any_selected(self, make_record):
        record = make_record(industry={"categories": ["IT", " Konsult "]})
        assert matches(record, NO_ANNOTATION, Filters(categories=frozenset({"Konsult"})))
        assert not matches(record, NO_ANNOTATION, Filters(categories=frozenset({"Bygg", "Handel"})))

    def test_status_defaults_to_none(self, make_record):
        record = make_record()
        filters = Filters(statuses=frozenset({InteractionStatus.NONE}))
        assert matches(record, NO_ANNOTATION, filters)
        assert not matches(record, Annotation(status=InteractionStatus.CALLBACK), filters)

    def test_status_matches_any_selected(self, make_record):
        filters = Filters(statuses=frozenset({InteractionStatus.INTERESTED, InteractionStatus.CALLBACK}))
        assert matches(make_record(), Annotation(status=InteractionStatus.CALLBACK), filters)
        assert not matches(make_record(), Annotation(status=InteractionStatus.NOT_INTERESTED), filters)


# ============================================================================
# Favorites and combination
# ============================================================================

def test_favorites_only(make_record):
    filters = Filters(favorites_only=True)
    assert not matches(make_record(), NO_ANNOTATION, filters)
    assert matches(make_record(), Annotation(is_favorite=True), filters)


def test_all_dimensions_must_pass(make_record):
    record = make_record()
    filters = Filters(
        company_phone=TriState.YES,
        sni=frozenset({"Dataprogrammering"}),
        favorites_only=True,
    ).with_range(FinancialField.REVENUE, min=1_000_000)
    assert matches(record, Annotation(is_favorite=True), filters)
    # Failing a single dimension is enough to exclude
    assert not matches(record, NO_ANNOTATION, filters)
    assert not matches(make_record(contact={"phone": None}), Annotation(is_favorite=True), filters)


def test_default_filters_are_empty():
    assert Filters().is_empty()
    assert not Filters(favorites_only=True).is_empty()
    assert not Filters().with_range(FinancialField.NET_PROFIT, min=0).is_empty()


def test_filter_records_keeps_input_untouched(make_record):
    records = [make_record(company={"name": n}) for n in ["A AB", "B AB"]]
    snapshot = AnnotationSnapshot({"556677-8899": Annotation(is_favorite=True)})
    result = RecordFilter(Filters(favorites_only=True)).filter_records(records, snapshot)
    assert len(result) == 2  # both share the fixture org number
    assert result is not records
