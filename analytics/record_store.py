"""
Load the property CSV into an immutable in-memory snapshot.

Readers grab the current snapshot (a tuple) and work on it for the whole
request. Imports build a complete replacement off to the side, rename it
onto the CSV and swap it in under a lock, so nobody ever sees a
half-imported collection. Stores notice a replaced file and reload it.
"""
from __future__ import annotations

import contextlib
import logging
import os
import tempfile
import threading
import time
from pathlib import Path
from typing import IO, Iterable, List, Tuple, Union

import pandas as pd
from django.conf import settings

from .config import AnalyticsConfig, load_config
from .exceptions import DataUnavailableError, ImportFailedError
from .filters import FilterSpec, filter_records
from .models import PropertyRecord
from .normalizer import normalize_record

logger = logging.getLogger(__name__)

CsvSource = Union[str, Path, IO]
READ_ERRORS = (OSError, ValueError, pd.errors.ParserError, pd.errors.EmptyDataError)


def read_rows(source: CsvSource) -> List[dict]:
    """Read every CSV cell as a string; blanks stay empty strings, not NaN."""
    frame = pd.read_csv(source, dtype=str, keep_default_na=False)
    frame.columns = [str(column) for column in frame.columns]
    return frame.to_dict(orient="records")


def build_snapshot(rows: Iterable[dict], config: AnalyticsConfig) -> Tuple[PropertyRecord, ...]:
    return tuple(normalize_record(row, config) for row in rows)


def _file_signature(path: CsvSource) -> Tuple[int, int, int] | None:
    """Identity of a CSV on disk; ``None`` for file objects and missing files."""
    if not isinstance(path, (str, Path)):
        return None
    try:
        stat = os.stat(path)
    except OSError:
        return None
    return stat.st_ino, stat.st_mtime_ns, stat.st_size


def publish_rows(rows: List[dict], target: Path) -> None:
    """Write ``rows`` next to ``target`` and atomically rename them onto it."""
    handle, temp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    try:
        with os.fdopen(handle, "w", newline="", encoding="utf-8") as stream:
            pd.DataFrame(rows).to_csv(stream, index=False)
        os.replace(temp_name, target)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(temp_name)
        raise


class RecordStore:
    def __init__(self, path: CsvSource, config: AnalyticsConfig | None = None, retries: int = 2, retry_delay: float = 0.2):
        self.path = path
        self.config = config or load_config()
        self.retries = retries
        self.retry_delay = retry_delay
        self._snapshot: Tuple[PropertyRecord, ...] | None = None
        self._signature: Tuple[int, int, int] | None = None
        self._lock = threading.Lock()

    def _load_with_retry(self) -> Tuple[PropertyRecord, ...]:
        attempts = self.retries + 1
        for attempt in range(1, attempts + 1):
            signature = _file_signature(self.path)
            try:
                rows = read_rows(self.path)
            except READ_ERRORS as exc:
                logger.warning("Loading %s failed (attempt %s/%s): %s", self.path, attempt, attempts, exc)
                if attempt == attempts:
                    raise DataUnavailableError() from exc
                time.sleep(self.retry_delay)
                continue
            snapshot = build_snapshot(rows, self.config)
            invalid = sum(1 for record in snapshot if not record.has_valid_price)
            logger.info("Loaded %s properties from %s (%s without a valid price)", len(snapshot), self.path, invalid)
            self._signature = signature
            return snapshot
        raise DataUnavailableError()

    def _is_stale(self) -> bool:
        signature = _file_signature(self.path)
        return signature is not None and signature != self._signature

    def snapshot(self) -> Tuple[PropertyRecord, ...]:
        current = self._snapshot
        if current is not None and not self._is_stale():
            return current
        return self.reload()

    def reload(self) -> Tuple[PropertyRecord, ...]:
        """
        Re-read the CSV and publish it. When a snapshot is already published
        and the re-read fails, the previous snapshot keeps being served.
        """
        with self._lock:
            if self._snapshot is not None and not self._is_stale():
                return self._snapshot
            try:
                self._snapshot = self._load_with_retry()
            except DataUnavailableError:
                if self._snapshot is None:
                    raise
                logger.error("Reloading %s failed; serving the previous snapshot", self.path)
            return self._snapshot

    def load_all_records(self, filters: FilterSpec | None = None) -> List[PropertyRecord]:
        return filter_records(self.snapshot(), filters)

    def load_record_by_id(self, property_id: str) -> PropertyRecord | None:
        wanted = str(property_id).strip()
        for record in self.snapshot():
            if record.id == wanted:
                return record
        return None

    def replace_from_csv(self, source: CsvSource) -> int:
        """
        Replace the whole collection with the rows in ``source``.

        The rows are validated and normalized first, then written over the
        store's CSV with an atomic rename so other processes pick them up.
        On any failure both the file and the published snapshot are left as
        they were.
        """
        try:
            rows = read_rows(source)
        except READ_ERRORS as exc:
            logger.error("Import from %s failed: %s", source, exc)
            raise ImportFailedError(f"Could not read import file: {exc}") from exc
        if not rows:
            raise ImportFailedError("Import file contains no property rows.")
        snapshot = build_snapshot(rows, self.config)
        with self._lock:
            if isinstance(self.path, (str, Path)):
                try:
                    publish_rows(rows, Path(self.path))
                except OSError as exc:
                    logger.error("Publishing import to %s failed: %s", self.path, exc)
                    raise ImportFailedError(f"Could not write property data: {exc}") from exc
            self._snapshot = snapshot
            self._signature = _file_signature(self.path)
        logger.info("Imported %s properties into %s", len(snapshot), self.path)
        return len(snapshot)


_STORE: RecordStore | None = None
_STORE_LOCK = threading.Lock()


def get_store() -> RecordStore:
    """Return the process-wide store configured from Django settings."""
    global _STORE
    with _STORE_LOCK:
        if _STORE is None:
            _STORE = RecordStore(
                Path(settings.PROPERTY_CSV_PATH),
                config=get_config(),
                retries=getattr(settings, "ANALYTICS_LOAD_RETRIES", 2),
            )
        return _STORE


def set_store(store: RecordStore | None) -> None:
    global _STORE
    with _STORE_LOCK:
        _STORE = store


def get_config() -> AnalyticsConfig:
    return load_config(getattr(settings, "ANALYTICS_OVERRIDES", None))


def load_all_records(filters: FilterSpec | None = None) -> List[PropertyRecord]:
    return get_store().load_all_records(filters)


def load_record_by_id(property_id: str) -> PropertyRecord | None:
    return get_store().load_record_by_id(property_id)
