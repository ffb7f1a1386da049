"""Tests for core/ingestion.py: whole-document and JSON Lines parsing."""

import json

from core.ingestion import ParseOutcome, parse, parse_records


def _names(records):
    return [r.company.name for r in records]


# ============================================================================
# Whole-document decode
# ============================================================================

def test_single_object_yields_one_record(make_payload):
    payload = make_payload()
    records, ok = parse(json.dumps(payload))
    assert ok
    assert len(records) == 1
    assert records[0].to_dict() == payload


def test_array_keeps_valid_elements_in_order(make_payload):
    items = [
        make_payload(company={"name": "Första AB"}),
        {"company": {"name": ""}},
        "junk",
        make_payload(company={"name": "Andra AB"}),
        {"contact": {"city": "Luleå"}},
        make_payload(company={"name": "Tredje AB"}),
    ]
    result = parse_records(json.dumps(items, ensure_ascii=False))
    assert result.outcome is ParseOutcome.WHOLE_DOCUMENT
    assert _names(result.records) == ["Första AB", "Andra AB", "Tredje AB"]


def test_single_invalid_object_is_rejected():
    records, ok = parse(json.dumps({"company": {"name": ""}}))
    assert not ok
    assert records == []


def test_decodable_document_without_records_is_not_retried_as_lines(make_payload):
    # A one-element array of an invalid object decodes fine as a whole, so
    # line mode never runs even though nothing was found.
    text = json.dumps([{"company": {}}])
    result = parse_records(text)
    assert result.outcome is ParseOutcome.FAILED
    assert result.records == []
    assert result.skipped_lines == 0


def test_scalar_document_is_a_failure():
    assert parse_records("42").outcome is ParseOutcome.FAILED
    assert parse_records('"hello"').outcome is ParseOutcome.FAILED


def test_leading_byte_order_mark_is_ignored(make_payload):
    records, ok = parse("\ufeff" + json.dumps([make_payload()]))
    assert ok
    assert len(records) == 1


# ============================================================================
# Line-mode fallback
# ============================================================================

def test_json_lines_yields_every_record(make_payload):
    lines = [json.dumps(make_payload(company={"name": f"Bolag {i} AB"})) for i in range(3)]
    result = parse_records("\n".join(lines))
    assert result.outcome is ParseOutcome.LINES
    assert _names(result.records) == ["Bolag 0 AB", "Bolag 1 AB", "Bolag 2 AB"]


def test_malformed_and_invalid_lines_are_skipped(make_payload):
    lines = [
        json.dumps(make_payload(company={"name": "Ett AB"})),
        "{not json",
        "",
        "   ",
        json.dumps({"company": {"name": ""}}),
        json.dumps(make_payload(company={"name": "Två AB"})),
        "[1, 2",
    ]
    result = parse_records("\n".join(lines))
    assert result.ok
    assert _names(result.records) == ["Ett AB", "Två AB"]
    assert result.skipped_lines == 3


def test_windows_line_endings(make_payload):
    text = "\r\n".join(json.dumps(make_payload(company={"name": n})) for n in ["A AB", "B AB"])
    records, ok = parse(text)
    assert ok
    assert _names(records) == ["A AB", "B AB"]


def test_nothing_usable_fails():
    for text in ["", "   \n  ", "garbage\nmore garbage", '{"company": {"name": ""}}\n{"x": 1}']:
        records, ok = parse(text)
        assert not ok, text
        assert records == []
