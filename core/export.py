"""
Export of the currently visible records to CSV and JSON files.
"""
import csv
import json
import logging
from pathlib import Path
from typing import List, Union

from core.formatting import record_to_row
from core.models import CompanyRecord

logger = logging.getLogger(__name__)


def export_to_csv(records: List[CompanyRecord], annotations, filepath: Union[str, Path]) -> int:
    """Write one flat row per record. Returns the number of rows written."""
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)

    rows = [record_to_row(r, annotations.get(r.org_number)) for r in records]
    if not rows:
        logger.info(f"Nothing to export to {path}")
        return 0

    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
        writer.writeheader()
        for row in rows:
            writer.writerow({k: "" if v is None else v for k, v in row.items()})

    logger.info(f"Exported {len(rows)} records to {path}")
    return len(rows)


def export_to_json(records: List[CompanyRecord], annotations, filepath: Union[str, Path]) -> int:
    """Write full records, each with its annotation under ``interaction``."""
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)

    payload = []
    for record in records:
        data = record.to_dict()
        data["interaction"] = annotations.get(record.org_number).to_dict()
        payload.append(data)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)

    logger.info(f"Exported {len(payload)} records to {path}")
    return len(payload)
