"""Services package."""

from findash.services.feed import (
    BANK_OPTIONS,
    BankOption,
    SimulatedBankFeed,
)
from findash.services.storage import (
    DEFAULT_CATEGORIES,
    InMemoryRecordStore,
    JsonFileRecordStore,
    RecordStoreInterface,
    build_record_store,
)

__all__ = [
    # Feed
    "BANK_OPTIONS",
    "BankOption",
    "SimulatedBankFeed",
    # Storage
    "DEFAULT_CATEGORIES",
    "InMemoryRecordStore",
    "JsonFileRecordStore",
    "RecordStoreInterface",
    "build_record_store",
]
