"""
Configuration settings for the Merinfo company explorer.
Loads from environment variables with sensible defaults.
"""
import os
from dataclasses import dataclass, field
from typing import List


@dataclass
class DatasetSource:
    """One entry of the default-dataset registry shown in the picker."""
    label: str
    url: str


def _parse_datasets(raw: str) -> List[DatasetSource]:
    """Parse ``label=url`` pairs separated by commas.

    Entries without ``=`` use the URL as label.
    """
    sources = []
    for entry in raw.split(","):
        entry = entry.strip()
        if not entry:
            continue
        label, sep, url = entry.partition("=")
        if not sep:
            label, url = entry, entry
        sources.append(DatasetSource(label=label.strip(), url=url.strip()))
    return sources


@dataclass
class Settings:
    """Main application settings."""
    # Persistence (annotations and preferences)
    database_path: str = "data/merinfo.db"
    export_path: str = "data/exports"

    # Dataset fetching
    timeout: int = 30  # Seconds
    datasets: List[DatasetSource] = field(default_factory=list)

    # Presentation
    display_limit: int = 500
    default_sort: str = "name-asc"

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables."""
        return cls(
            database_path=os.getenv("DATABASE_PATH", "data/merinfo.db"),
            export_path=os.getenv("EXPORT_PATH", "data/exports"),
            timeout=int(os.getenv("TIMEOUT", 30)),
            datasets=_parse_datasets(os.getenv("DATASETS", "")),
            display_limit=int(os.getenv("DISPLAY_LIMIT", 500)),
            default_sort=os.getenv("DEFAULT_SORT", "name-asc"),
        )
