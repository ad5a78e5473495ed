from __future__ import annotations

import json
import logging
import threading
import uuid
from pathlib import Path
from typing import Any, Iterable

from sitedefects.core.errors import ImportFormatError, RecordNotFoundError
from sitedefects.core.schemas import (
    DefectCreate,
    DefectRecord,
    DefectStatus,
    DefectUpdate,
)

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY = "General"
DEFAULT_LOCATION = "New Location"
IMPORT_MODES = ("replace", "merge")


def new_record_id() -> str:
    return uuid.uuid4().hex[:9]


def derive_status(record: DefectRecord) -> DefectStatus:
    """Status after a count edit on the summary sheet."""
    if record.total_defects > 0 and record.total_defects == record.fixed_defects:
        return DefectStatus.COMPLETED
    if record.fixed_defects == 0 and record.total_defects > 0:
        return DefectStatus.PENDING
    return record.status


def _apply(record: DefectRecord, changes: dict[str, Any]) -> DefectRecord:
    # re-validate so edits go through the same checks as ingestion
    return DefectRecord.model_validate({**record.model_dump(), **changes})


class DefectStore:
    """Owns the canonical record list.

    Every mutation builds a new list and swaps it in under the lock, so a
    ``snapshot()`` taken by a reader is never modified afterwards.
    """

    def __init__(self, records: Iterable[DefectRecord] | None = None):
        self._lock = threading.RLock()
        self._records: list[DefectRecord] = list(records or [])

    def snapshot(self) -> list[DefectRecord]:
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def get(self, record_id: str) -> DefectRecord:
        for r in self.snapshot():
            if r.id == record_id:
                return r
        raise RecordNotFoundError(record_id)

    # hooks for persistent stores; the in-memory store keeps nothing else
    def _on_upsert(self, records: list[DefectRecord]) -> None:
        pass

    def _on_delete(self, record_id: str) -> None:
        pass

    def _on_replace(self, records: list[DefectRecord]) -> None:
        pass

    def _commit(self, records: list[DefectRecord]) -> None:
        self._records = records

    def add(self, data: DefectCreate | None = None) -> DefectRecord:
        data = data or DefectCreate()
        record = DefectRecord(
            id=new_record_id(),
            category=data.category or DEFAULT_CATEGORY,
            location=data.location or DEFAULT_LOCATION,
            total_defects=data.total_defects,
            fixed_defects=data.fixed_defects,
            status=data.status,
            target_date=data.target_date or "",
            note=data.note or "",
        )
        with self._lock:
            self._on_upsert([record])
            self._commit(self._records + [record])
        logger.info("Added defect record %s (%s / %s)", record.id, record.category, record.location)
        return record

    def _replace_one(self, record_id: str, build) -> DefectRecord:
        with self._lock:
            for pos, current in enumerate(self._records):
                if current.id == record_id:
                    updated = build(current)
                    self._on_upsert([updated])
                    records = list(self._records)
                    records[pos] = updated
                    self._commit(records)
                    return updated
        raise RecordNotFoundError(record_id)

    def update(self, record_id: str, changes: DefectUpdate) -> DefectRecord:
        fields = changes.model_dump(exclude_unset=True)
        updated = self._replace_one(record_id, lambda r: _apply(r, fields))
        logger.info("Updated defect record %s: %s", record_id, sorted(fields))
        return updated

    def set_counts(self, record_id: str, total: int | None = None, fixed: int | None = None) -> DefectRecord:
        changes: dict[str, Any] = {}
        if total is not None:
            changes["total_defects"] = total
        if fixed is not None:
            changes["fixed_defects"] = fixed

        def build(current: DefectRecord) -> DefectRecord:
            edited = _apply(current, changes)
            return _apply(edited, {"status": derive_status(edited)})

        return self._replace_one(record_id, build)

    def delete(self, record_id: str) -> None:
        with self._lock:
            remaining = [r for r in self._records if r.id != record_id]
            if len(remaining) == len(self._records):
                raise RecordNotFoundError(record_id)
            self._on_delete(record_id)
            self._commit(remaining)
        logger.info("Deleted defect record %s", record_id)

    def rename_category(self, old: str, new: str) -> int:
        new = (new or "").strip()
        if not new:
            raise ValueError("New category name must not be blank.")
        with self._lock:
            renamed = [_apply(r, {"category": new}) for r in self._records if r.category == old]
            if not renamed:
                return 0
            self._on_upsert(renamed)
            by_id = {r.id: r for r in renamed}
            self._commit([by_id.get(r.id, r) for r in self._records])
        logger.info("Renamed category %r -> %r on %d records", old, new, len(renamed))
        return len(renamed)

    def import_records(self, records: Iterable[DefectRecord], mode: str = "replace") -> int:
        if mode not in IMPORT_MODES:
            raise ValueError(f"Unknown import mode {mode!r}; expected one of {IMPORT_MODES}")
        incoming = list(records)
        with self._lock:
            if mode == "replace":
                self._on_replace(incoming)
                self._commit(incoming)
            else:
                self._on_upsert(incoming)
                merged = list(self._records)
                positions = {r.id: i for i, r in enumerate(merged)}
                for r in incoming:
                    if r.id in positions:
                        merged[positions[r.id]] = r
                    else:
                        positions[r.id] = len(merged)
                        merged.append(r)
                self._commit(merged)
        logger.info("Imported %d defect records (mode=%s)", len(incoming), mode)
        return len(incoming)

    def export_records(self) -> list[dict]:
        return [r.model_dump(mode="json", by_alias=True) for r in self.snapshot()]


def load_records(payload: Any) -> list[DefectRecord]:
    """Validate a decoded JSON array of records."""
    if not isinstance(payload, list):
        raise ImportFormatError("Invalid JSON format. Expected an array.")
    if payload and (not isinstance(payload[0], dict) or not payload[0].get("id") or not payload[0].get("location")):
        raise ImportFormatError("Invalid data format: Missing required fields in JSON.")
    try:
        return [DefectRecord.model_validate(item) for item in payload]
    except ValueError as e:
        raise ImportFormatError(str(e)) from e


class JsonFileDefectStore(DefectStore):
    """Record store persisted as a JSON array, rewritten after every change."""

    def __init__(self, path: str | Path, seed: Iterable[DefectRecord] | None = None):
        self.path = Path(path)
        if self.path.exists():
            records = load_records(json.loads(self.path.read_text(encoding="utf-8")))
            logger.info("Loaded %d defect records from %s", len(records), self.path)
        else:
            records = list(seed or [])
        super().__init__(records)
        if not self.path.exists():
            self._write(self._records)

    def _write(self, records: list[DefectRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = [r.model_dump(mode="json", by_alias=True) for r in records]
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def _commit(self, records: list[DefectRecord]) -> None:
        self._write(records)
        super()._commit(records)


def build_store(cfg) -> DefectStore:
    from sitedefects.core.sample_data import initial_defects

    seed = initial_defects() if cfg.seed_sample else []
    backend = (cfg.store_backend or "memory").lower()
    if backend == "memory":
        return DefectStore(seed)
    if backend == "json":
        return JsonFileDefectStore(cfg.data_file, seed=seed)
    if backend == "supabase":
        from sitedefects.services.supabase_service import SupabaseDefectStore

        return SupabaseDefectStore.from_settings(cfg)
    raise ValueError(f"Unknown STORE_BACKEND {cfg.store_backend!r}")
