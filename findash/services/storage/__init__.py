"""
Storage Services Package

Provides the abstract record store interface and its implementations.
The backend is chosen by configuration; the engine never cares which.
"""

from typing import Optional

from findash.activity import ActivityLogger
from findash.config import StorageSettings, get_settings
from findash.services.storage.interface import (
    DEFAULT_CATEGORIES,
    RecordStoreInterface,
)
from findash.services.storage.json_file import JsonFileRecordStore
from findash.services.storage.memory import InMemoryRecordStore, OwnerDocument


def build_record_store(
    settings: Optional[StorageSettings] = None,
    activity_logger: Optional[ActivityLogger] = None,
) -> RecordStoreInterface:
    """Create the record store selected by ``settings.backend``."""
    settings = settings or get_settings().storage
    if settings.backend == "json":
        return JsonFileRecordStore(
            data_dir=settings.data_dir,
            retry_attempts=settings.retry_attempts,
            activity_logger=activity_logger,
        )
    return InMemoryRecordStore(activity_logger=activity_logger)


__all__ = [
    # Interface
    "DEFAULT_CATEGORIES",
    "RecordStoreInterface",
    # Implementations
    "InMemoryRecordStore",
    "JsonFileRecordStore",
    "OwnerDocument",
    "build_record_store",
]
