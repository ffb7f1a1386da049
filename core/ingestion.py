"""
Ingestion of raw dataset text into company records.

Two encodings are accepted through the same entry point, without the
caller naming one:

1. Whole document: the text is one JSON value, either an array of record
   objects or a single record object.
2. JSON Lines: one record object per line. Only tried when the text is not
   decodable as a whole.

Objects without ``company.name`` are dropped silently in both cases.
"""

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

from core.models import CompanyRecord, is_valid_payload

logger = logging.getLogger(__name__)


class ParseOutcome(Enum):
    """Which decode strategy produced the records."""
    WHOLE_DOCUMENT = "whole_document"
    LINES = "lines"
    FAILED = "failed"


@dataclass
class ParseResult:
    """Records produced from one text blob."""
    outcome: ParseOutcome
    records: List[CompanyRecord] = field(default_factory=list)
    skipped_lines: int = 0  # Lines that failed to decode or were not records

    @property
    def ok(self) -> bool:
        return self.outcome is not ParseOutcome.FAILED


def _decode_whole(text: str) -> Optional[List[CompanyRecord]]:
    """Decode the text as one JSON value.

    Returns None when the text is not a JSON document at all, otherwise the
    valid records it holds (possibly none).
    """
    try:
        data = json.loads(text)
    except ValueError:
        return None

    if isinstance(data, list):
        return [CompanyRecord.from_dict(item) for item in data if is_valid_payload(item)]
    if is_valid_payload(data):
        return [CompanyRecord.from_dict(data)]
    return []


def _decode_lines(text: str) -> Tuple[List[CompanyRecord], int]:
    """Decode each non-blank line as one record object."""
    records = []
    skipped = 0
    for line_no, line in enumerate(text.split("\n"), 1):
        if not line.strip():
            continue
        try:
            data = json.loads(line)
        except ValueError:
            skipped += 1
            logger.debug(f"Line {line_no}: not valid JSON, skipped")
            continue
        if not is_valid_payload(data):
            skipped += 1
            logger.debug(f"Line {line_no}: no company name, skipped")
            continue
        records.append(CompanyRecord.from_dict(data))
    return records, skipped


def parse_records(text: str) -> ParseResult:
    """Parse dataset text, whole document first, then line by line.

    A text that decodes as a whole never falls through to line mode, even
    when it holds no valid records.
    """
    if text.startswith("\ufeff"):
        text = text[1:]

    records = _decode_whole(text)
    if records is not None:
        if not records:
            logger.info("Document decoded but holds no valid records")
            return ParseResult(ParseOutcome.FAILED)
        logger.info(f"Parsed {len(records)} records from whole document")
        return ParseResult(ParseOutcome.WHOLE_DOCUMENT, records)

    records, skipped = _decode_lines(text)
    if not records:
        logger.info(f"Line mode found no valid records ({skipped} lines skipped)")
        return ParseResult(ParseOutcome.FAILED, skipped_lines=skipped)
    logger.info(f"Parsed {len(records)} records line by line ({skipped} lines skipped)")
    return ParseResult(ParseOutcome.LINES, records, skipped)


def parse(text: str) -> Tuple[List[CompanyRecord], bool]:
    """Return ``(records, ok)``; ``ok`` is False when nothing usable was found."""
    result = parse_records(text)
    return result.records, result.ok
