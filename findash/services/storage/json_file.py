"""
JSON File Record Store

DESIGN DECISION: One JSON document per owner, under a data directory.
1. Users can inspect or back up their own file
2. No database setup required
3. Owners are isolated at the file level

TRADEOFFS:
- Every operation reads the whole document (fine for a household ledger)
- No cross-process locking; one writer per owner is assumed
- Writes go to a temporary file first and are renamed into place, so a
  crash never leaves a half-written document behind

Transient file system errors are retried with tenacity. Anything still
failing, and any document that cannot be parsed, surfaces as
StoreUnavailableError.
"""

import hashlib
import os
from pathlib import Path
from typing import Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from findash.activity import ActivityLogger
from findash.errors import StoreUnavailableError
from findash.services.storage.memory import InMemoryRecordStore, OwnerDocument


logger = structlog.get_logger(__name__)


class JsonFileRecordStore(InMemoryRecordStore):
    """Record store persisting each owner as ``<data_dir>/<hash>.json``."""

    def __init__(
        self,
        data_dir: Path,
        retry_attempts: int = 3,
        activity_logger: Optional[ActivityLogger] = None,
    ):
        super().__init__(activity_logger=activity_logger)
        self._data_dir = Path(data_dir)
        self._retry_attempts = retry_attempts

    def _retrying(self) -> Retrying:
        return Retrying(
            stop=stop_after_attempt(self._retry_attempts),
            wait=wait_exponential(multiplier=0.1, min=0.1, max=2),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        )

    def path_for(self, owner_id: str) -> Path:
        """File holding ``owner_id``'s records. Owner ids never reach the path."""
        digest = hashlib.sha256(owner_id.encode("utf-8")).hexdigest()
        return self._data_dir / f"{digest}.json"

    # -- persistence hooks ----------------------------------------------------

    def _load(self, owner_id: str) -> OwnerDocument:
        path = self.path_for(owner_id)
        if not path.exists():
            return OwnerDocument(owner_id=owner_id)

        try:
            for attempt in self._retrying():
                with attempt:
                    raw = path.read_text(encoding="utf-8")
        except OSError as e:
            logger.error("record_store_read_failed", path=str(path), error=str(e))
            raise StoreUnavailableError(f"Failed to read records: {e}") from e

        try:
            document = OwnerDocument.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.error("record_store_corrupt", path=str(path), error=str(e))
            raise StoreUnavailableError(f"Stored records are unreadable: {path.name}") from e

        if document.owner_id != owner_id:
            raise StoreUnavailableError(f"Stored records belong to another owner: {path.name}")
        return document

    def _save(self, document: OwnerDocument) -> None:
        path = self.path_for(document.owner_id)
        payload = document.model_dump_json(indent=2)

        try:
            for attempt in self._retrying():
                with attempt:
                    self._data_dir.mkdir(parents=True, exist_ok=True)
                    tmp_path = path.with_suffix(".json.tmp")
                    tmp_path.write_text(payload, encoding="utf-8")
                    os.replace(tmp_path, path)
        except OSError as e:
            logger.error("record_store_write_failed", path=str(path), error=str(e))
            raise StoreUnavailableError(f"Failed to write records: {e}") from e
