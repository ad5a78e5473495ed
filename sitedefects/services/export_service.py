from __future__ import annotations

import json
from datetime import date
from typing import Sequence

import pandas as pd

from sitedefects.core.errors import ImportFormatError
from sitedefects.core.schemas import DefectRecord, DefectStatus, DisplayItem, HeaderItem, status_label
from sitedefects.services.aggregation_service import (
    category_stats,
    category_totals,
    group_by_category,
    is_numerically_complete,
    overall_totals,
)
from sitedefects.services.layout_service import balance_columns
from sitedefects.services.store_service import load_records

SUMMARY_COLUMNS = ["Category / Location", "Total", "Fixed", "Left", "Status"]
OVERVIEW_COLUMNS = ["Category", "Total", "Fixed", "Remaining", "Progress (%)"]
DETAIL_COLUMNS = ["#", "Location", "TOT", "FIX", "TARGET", "STATUS"]


def export_filename(prefix: str, ext: str, on: date | None = None) -> str:
    return f"{prefix}-{(on or date.today()).isoformat()}.{ext}"


def records_to_json(records: Sequence[DefectRecord]) -> str:
    data = [r.model_dump(mode="json", by_alias=True) for r in records]
    return json.dumps(data, ensure_ascii=False, indent=2)


def records_from_json(text: str) -> list[DefectRecord]:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as e:
        raise ImportFormatError(f"Failed to parse JSON file: {e}") from e
    return load_records(payload)


def summary_sheet(records: Sequence[DefectRecord]) -> pd.DataFrame:
    rows = []
    for category, items in group_by_category(records).items():
        sub = category_totals(items)
        rows.append([f"{category} (รวม)", sub.total, sub.fixed, sub.remaining, ""])
        for r in items:
            rows.append([
                r.location,
                r.total_defects,
                r.fixed_defects,
                r.total_defects - r.fixed_defects,
                status_label(r.status),
            ])
    grand = overall_totals(records)
    rows.append(["Grand Total", grand.total, grand.fixed, grand.remaining, f"{grand.percentage:.1f}% Complete"])
    return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def overview_sheet(records: Sequence[DefectRecord]) -> pd.DataFrame:
    rows = [
        [s.name, s.total, s.fixed, s.remaining, round(s.progress, 1)]
        for s in category_stats(records)
    ]
    grand = overall_totals(records)
    rows.append(["Total", grand.total, grand.fixed, grand.remaining, round(grand.percentage, 1)])
    return pd.DataFrame(rows, columns=OVERVIEW_COLUMNS)


def slide_status_text(record: DefectRecord) -> str:
    if record.status is DefectStatus.FIXED_WAIT_APPROVAL:
        return status_label(record.status)
    if is_numerically_complete(record) or record.status is DefectStatus.COMPLETED:
        return "Done"
    return status_label(record.status)


def _column_frame(items: Sequence[DisplayItem]) -> pd.DataFrame:
    rows = []
    for item in items:
        if isinstance(item, HeaderItem):
            rows.append(["", item.title, "", "", "", ""])
            continue
        r = item.record
        rows.append([item.index, r.location, r.total_defects, r.fixed_defects, r.target_date or "-", slide_status_text(r)])
    return pd.DataFrame(rows, columns=DETAIL_COLUMNS)


def detail_columns(records: Sequence[DefectRecord]) -> tuple[pd.DataFrame, pd.DataFrame]:
    left, right = balance_columns(records)
    return _column_frame(left), _column_frame(right)
