from .settings import DatasetSource, Settings

__all__ = ["DatasetSource", "Settings"]
