"""
Tabular view of query results for the dashboard.

The dashboard shows records in an editable table whose annotation columns
(favorite, status, comment) can be changed in place. This module builds
that table and turns edits back into partial annotation updates.
"""
from typing import Dict, List

import pandas as pd

from core.formatting import record_to_row
from core.models import CompanyRecord

EDITABLE_COLUMNS = ["favorite", "interaction_status", "comment"]

_COLUMN_TO_FIELD = {
    "favorite": "is_favorite",
    "interaction_status": "status",
    "comment": "comment",
}


def records_to_frame(records: List[CompanyRecord], annotations) -> pd.DataFrame:
    """One row per record, in the given order, indexed by org number."""
    rows = [record_to_row(r, annotations.get(r.org_number)) for r in records]
    df = pd.DataFrame(rows)
    if df.empty:
        return df
    return df.set_index("org_number", drop=False)


def annotation_changes(before: pd.DataFrame, after: pd.DataFrame) -> Dict[str, dict]:
    """Partial annotation updates implied by edits between two frames.

    Only rows present in both frames and only the editable columns are
    compared. Returns ``{org_number: {field: value}}``.
    """
    changes: Dict[str, dict] = {}
    if before.empty or after.empty:
        return changes
    # Annotations are per org number; repeated rows of one company share them
    before = before[~before.index.duplicated()]
    after = after[~after.index.duplicated()]
    common = before.index.intersection(after.index)
    for org_number in common:
        for column in EDITABLE_COLUMNS:
            old = before.at[org_number, column]
            new = after.at[org_number, column]
            if pd.isna(new):
                new = "" if column == "comment" else old
            if new != old:
                field = _COLUMN_TO_FIELD[column]
                value = bool(new) if column == "favorite" else str(new)
                changes.setdefault(org_number, {})[field] = value
    return changes
