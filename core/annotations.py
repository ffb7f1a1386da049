"""
Per-company annotations: call status, free-text comment and favorite flag.

Annotations are keyed by org number and live independently of whatever
dataset is loaded, so they survive reloads and restarts. The store is an
explicit object handed to whoever needs it; there is no module-level
instance.
"""

import json
import logging
from dataclasses import dataclass, replace
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from core.storage import KeyValueStore

logger = logging.getLogger(__name__)

ANNOTATIONS_KEY = "merinfo_interactions"


class InteractionStatus(Enum):
    """Outcome of the last contact with a company."""
    NONE = "none"
    INTERESTED = "interested"
    NOT_INTERESTED = "not_interested"
    CALLBACK = "callback"


@dataclass(frozen=True)
class Annotation:
    """User-entered state for one company. The defaults are the "absent" value."""
    status: InteractionStatus = InteractionStatus.NONE
    comment: str = ""
    is_favorite: bool = False

    def to_dict(self) -> dict:
        # Persisted shape keeps the camelCase key used by existing stored data
        return {
            "status": self.status.value,
            "comment": self.comment,
            "isFavorite": self.is_favorite,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Annotation":
        try:
            status = InteractionStatus(data.get("status", "none"))
        except ValueError:
            status = InteractionStatus.NONE
        comment = data.get("comment")
        return cls(
            status=status,
            comment=comment if isinstance(comment, str) else "",
            is_favorite=data.get("isFavorite") is True,
        )


DEFAULT_ANNOTATION = Annotation()

_FIELD_ALIASES = {"isFavorite": "is_favorite"}


def _coerce_changes(changes: Mapping) -> dict:
    """Normalise a partial update to Annotation field names and types."""
    coerced = {}
    for name, value in changes.items():
        name = _FIELD_ALIASES.get(name, name)
        if name == "status":
            coerced["status"] = value if isinstance(value, InteractionStatus) else InteractionStatus(value)
        elif name == "comment":
            coerced["comment"] = "" if value is None else str(value)
        elif name == "is_favorite":
            coerced["is_favorite"] = bool(value)
        else:
            raise ValueError(f"Unknown annotation field: {name}")
    return coerced


class AnnotationSnapshot:
    """Read-only view of all annotations, taken once per query."""

    def __init__(self, entries: Mapping[str, Annotation]):
        self._entries = MappingProxyType(dict(entries))

    def get(self, org_number: str) -> Annotation:
        return self._entries.get(org_number, DEFAULT_ANNOTATION)

    def favorites(self) -> list:
        return [org for org, a in self._entries.items() if a.is_favorite]

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, org_number: str) -> bool:
        return org_number in self._entries


class AnnotationStore:
    """Annotation mapping persisted write-through to a key-value store."""

    def __init__(self, kv_store: KeyValueStore, key: str = ANNOTATIONS_KEY):
        self.kv_store = kv_store
        self.key = key
        self._entries: Dict[str, Annotation] = self._load()

    def _load(self) -> Dict[str, Annotation]:
        raw = self.kv_store.get(self.key)
        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning(f"Stored annotations under '{self.key}' are corrupt, starting empty: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Stored annotations under '{self.key}' are not an object, starting empty")
            return {}

        entries = {}
        for org_number, value in data.items():
            if not isinstance(value, dict):
                logger.warning(f"Skipping malformed annotation for {org_number}")
                continue
            entries[org_number] = Annotation.from_dict(value)
        logger.info(f"Loaded {len(entries)} annotations")
        return entries

    def _persist(self) -> None:
        payload = {org: a.to_dict() for org, a in self._entries.items()}
        self.kv_store.set(self.key, json.dumps(payload, ensure_ascii=False))

    def get(self, org_number: str) -> Annotation:
        """Return the annotation for a company, or the default if never edited."""
        return self._entries.get(org_number, DEFAULT_ANNOTATION)

    def merge(self, org_number: str, changes: Optional[Mapping] = None, **kwargs) -> Annotation:
        """Apply a partial update over the current (or default) annotation.

        Only the given fields change. Accepts ``status`` (enum or value),
        ``comment`` and ``is_favorite`` (``isFavorite`` also accepted).
        """
        updates = dict(changes or {})
        updates.update(kwargs)
        merged = replace(self.get(org_number), **_coerce_changes(updates))
        self._entries[org_number] = merged
        self._persist()
        logger.debug(f"Annotation for {org_number} updated: {sorted(updates)}")
        return merged

    def toggle_favorite(self, org_number: str) -> Annotation:
        return self.merge(org_number, is_favorite=not self.get(org_number).is_favorite)

    def snapshot(self) -> AnnotationSnapshot:
        return AnnotationSnapshot(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, org_number: str) -> bool:
        return org_number in self._entries
