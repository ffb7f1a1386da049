"""
Dataset loading: read or fetch raw text, then hand it to the parser.

File uploads and fetched URLs share the same parsing path. Failures never
escape ``DatasetLoader``; they come back as a status on the result so the
UI can show "could not read" vs "could not understand" and keep going.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

import requests

from core.facets import Facets, extract_facets
from core.ingestion import ParseOutcome, parse_records
from core.models import CompanyRecord

logger = logging.getLogger(__name__)

STATUS_LOADED = "loaded"
STATUS_ERROR_FORMAT = "error_format"
STATUS_ERROR_READ = "error_read"


class DatasetError(Exception):
    """Base class for dataset loading failures."""


class ReadError(DatasetError):
    """The file or network read itself failed."""


class FormatError(DatasetError):
    """The text was read but contained no valid records."""


@dataclass
class Dataset:
    """A fully loaded dataset with its facet vocabularies."""
    records: List[CompanyRecord]
    facets: Facets
    source: str = ""
    outcome: ParseOutcome = ParseOutcome.WHOLE_DOCUMENT
    skipped_lines: int = 0

    def __len__(self) -> int:
        return len(self.records)


def read_file(path: Union[str, Path]) -> str:
    """Read a local dataset file as UTF-8 text."""
    try:
        return Path(path).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise ReadError(f"Could not read {path}: {e}") from e


def decode_upload(data: bytes, name: str = "upload") -> str:
    """Decode uploaded file bytes as UTF-8 text."""
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise ReadError(f"Could not decode {name}: {e}") from e


def fetch_text(url: str, timeout: int = 30, session: Optional[requests.Session] = None) -> str:
    """GET a dataset payload. One attempt, no retry."""
    http = session or requests
    try:
        response = http.get(url, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        raise ReadError(f"Fetch failed for {url}: {e}") from e
    # Payloads are UTF-8 whatever the Content-Type says
    return decode_upload(response.content, url)


def load_dataset(text: str, source: str = "") -> Dataset:
    """Parse text into a Dataset. Raises FormatError when nothing usable is found."""
    result = parse_records(text)
    if not result.ok:
        raise FormatError(f"No valid records in {source or 'input'}")
    dataset = Dataset(
        records=result.records,
        facets=extract_facets(result.records),
        source=source,
        outcome=result.outcome,
        skipped_lines=result.skipped_lines,
    )
    logger.info(
        f"Loaded {len(dataset)} records from {source or 'input'} "
        f"({result.outcome.value}, {len(dataset.facets.sni_values)} SNI values, "
        f"{len(dataset.facets.category_values)} categories)"
    )
    return dataset


@dataclass
class LoadResult:
    """Outcome of one load request."""
    token: int
    status: str
    dataset: Optional[Dataset] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == STATUS_LOADED


@dataclass
class DatasetLoader:
    """Issue dataset loads, each tagged with an increasing request token.

    Callers that apply results asynchronously should drop any result for
    which ``is_current(result.token)`` is False.
    """
    timeout: int = 30
    session: Optional[requests.Session] = None
    _latest_token: int = field(default=0, init=False)

    def _next_token(self) -> int:
        self._latest_token += 1
        return self._latest_token

    def is_current(self, token: int) -> bool:
        return token == self._latest_token

    def _run(self, token: int, source: str, read) -> LoadResult:
        try:
            text = read()
        except ReadError as e:
            logger.warning(f"Read failed for {source}: {e}")
            return LoadResult(token, STATUS_ERROR_READ, error=str(e))
        try:
            dataset = load_dataset(text, source)
        except FormatError as e:
            logger.warning(str(e))
            return LoadResult(token, STATUS_ERROR_FORMAT, error=str(e))
        return LoadResult(token, STATUS_LOADED, dataset=dataset)

    def load_text(self, text: str, source: str = "input") -> LoadResult:
        return self._run(self._next_token(), source, lambda: text)

    def load_file(self, path: Union[str, Path]) -> LoadResult:
        return self._run(self._next_token(), str(path), lambda: read_file(path))

    def load_upload(self, data: bytes, name: str) -> LoadResult:
        return self._run(self._next_token(), name, lambda: decode_upload(data, name))

    def load_url(self, url: str) -> LoadResult:
        return self._run(
            self._next_token(), url, lambda: fetch_text(url, self.timeout, self.session)
        )

    def load(self, source: str) -> LoadResult:
        """Load from a URL when ``source`` looks like one, else from a file path."""
        if source.startswith(("http://", "https://")):
            return self.load_url(source)
        return self.load_file(source)
