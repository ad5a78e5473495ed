from __future__ import annotations

import logging
from typing import Any

import requests

from sitedefects.core.errors import RemoteSyncError
from sitedefects.core.schemas import DefectRecord
from sitedefects.services.store_service import DefectStore

logger = logging.getLogger(__name__)


def _row(record: DefectRecord) -> dict[str, Any]:
    # table columns are the snake_case field names
    return record.model_dump(mode="json")


class SupabaseDefectStore(DefectStore):
    """Record store mirrored to a Supabase (PostgREST) table.

    The remote call is made first; the local list only changes when it succeeds.
    """

    def __init__(
        self,
        url: str,
        api_key: str,
        table: str = "defects",
        timeout: float = 10,
        session: requests.Session | None = None,
    ):
        self.endpoint = f"{url.rstrip('/')}/rest/v1/{table}"
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        })
        super().__init__(self.fetch_all())

    @classmethod
    def from_settings(cls, cfg) -> "SupabaseDefectStore":
        if not cfg.supabase_url or not cfg.supabase_key:
            raise RuntimeError("SUPABASE_URL and SUPABASE_ANON_KEY must be set for the supabase store")
        return cls(cfg.supabase_url, cfg.supabase_key, table=cfg.supabase_table, timeout=cfg.supabase_timeout)

    def _request(self, method: str, params: dict | None = None, json: Any = None, headers: dict | None = None):
        try:
            resp = self.session.request(
                method, self.endpoint, params=params, json=json, headers=headers, timeout=self.timeout
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.error("Supabase %s %s failed: %s", method, self.endpoint, e)
            raise RemoteSyncError(f"Remote sync failed: {e}") from e
        return resp

    def fetch_all(self) -> list[DefectRecord]:
        resp = self._request("GET", params={"select": "*"})
        records = [DefectRecord.model_validate(row) for row in resp.json()]
        logger.info("Fetched %d defect records from Supabase", len(records))
        return records

    def _on_upsert(self, records: list[DefectRecord]) -> None:
        if not records:
            return
        self._request(
            "POST",
            json=[_row(r) for r in records],
            headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
        )

    def _on_delete(self, record_id: str) -> None:
        self._request("DELETE", params={"id": f"eq.{record_id}"})

    def _on_replace(self, records: list[DefectRecord]) -> None:
        # upsert first so a failed write never leaves the table emptied
        self._on_upsert(records)
        if records:
            keep = ",".join('"{}"'.format(r.id.replace('"', '\\"')) for r in records)
            self._request("DELETE", params={"id": f"not.in.({keep})"})
        else:
            self._request("DELETE", params={"id": "not.is.null"})
