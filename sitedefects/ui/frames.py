"""Shape API payloads into DataFrames for the dashboard widgets."""
from __future__ import annotations

from typing import Any

import pandas as pd

RECORD_COLUMNS = ["ID", "Category", "Location", "Total", "Fixed", "Status", "Target", "Note"]
DETAIL_COLUMNS = ["#", "Location", "TOT", "FIX", "TARGET", "STATUS"]


def records_frame(items: list[dict[str, Any]]) -> pd.DataFrame:
    rows = [
        [
            d.get("id"), d.get("category"), d.get("location"),
            d.get("totalDefects", 0), d.get("fixedDefects", 0),
            d.get("status"), d.get("targetDate") or "-", d.get("note") or "",
        ]
        for d in items
    ]
    return pd.DataFrame(rows, columns=RECORD_COLUMNS)


def category_chart_frame(categories: list[dict[str, Any]]) -> pd.DataFrame:
    # long form so the bar plot can colour Total/Fixed side by side
    rows = []
    for c in categories:
        rows.append({"Category": c["name"], "Series": "Total", "Count": c["total"]})
        rows.append({"Category": c["name"], "Series": "Fixed", "Count": c["fixed"]})
    return pd.DataFrame(rows, columns=["Category", "Series", "Count"])


def status_frame(distribution: list[dict[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame(
        [[d["label"], d["count"]] for d in distribution],
        columns=["Status", "Count"],
    )


def stat_cards_markdown(summary: dict[str, Any]) -> str:
    return (
        f"| Total Defects | Defects Fixed | Remaining | Total Locations |\n"
        f"|---|---|---|---|\n"
        f"| **{summary['total']}** | **{summary['fixed']}** ({summary['percentage']:.1f}% Completion Rate) "
        f"| **{summary['remaining']}** | **{summary['locations']}** |"
    )


def summary_report_frame(report: dict[str, Any]) -> pd.DataFrame:
    rows = []
    for g in report["groups"]:
        t = g["totals"]
        rows.append([f"{g['category']} (รวม)", t["total"], t["fixed"], t["remaining"], ""])
        for d in g["items"]:
            rows.append([
                d["location"], d["totalDefects"], d["fixedDefects"],
                d["totalDefects"] - d["fixedDefects"], d["status"],
            ])
    grand = report["grand"]
    rows.append([
        "Grand Total", grand["total"], grand["fixed"], grand["remaining"],
        f"{grand['percentage']:.1f}% Complete",
    ])
    return pd.DataFrame(rows, columns=["Category / Location", "Total", "Fixed", "Left", "Status"])


def overview_frame(overview: dict[str, Any]) -> pd.DataFrame:
    rows = [
        [c["name"], c["total"], c["fixed"], c["remaining"], round(c["progress"], 1)]
        for c in overview["categories"]
    ]
    g = overview["grand"]
    rows.append(["Total", g["total"], g["fixed"], g["remaining"], round(g["percentage"], 1)])
    return pd.DataFrame(rows, columns=["Category", "Total", "Fixed", "Remaining", "Progress (%)"])


def detail_frame(rows: list[dict[str, Any]]) -> pd.DataFrame:
    out = []
    for row in rows:
        if row["type"] == "header":
            out.append(["", row["title"], "", "", "", ""])
            continue
        d = row["record"]
        out.append([
            row["index"], d["location"], d["totalDefects"], d["fixedDefects"],
            d.get("targetDate") or "-", row.get("status_text") or d["status"],
        ])
    return pd.DataFrame(out, columns=DETAIL_COLUMNS)


def edit_form_values(record: dict[str, Any] | None) -> tuple[str, str | None, str, str]:
    if not record:
        return "", None, "", ""
    return record["location"], record["status"], record.get("targetDate") or "", record.get("note") or ""


def edit_payload(
    current: dict[str, Any] | None,
    location: str | None,
    status: str | None,
    target: str | None,
    note: str | None,
) -> dict[str, Any]:
    """PATCH body holding only the fields that differ from the loaded record.

    A blank target or note clears it. Without a loaded record a blank box means
    "leave as is", since there is nothing to tell a clear from an untouched field.
    """
    loaded = edit_form_values(current)
    changes: dict[str, Any] = {}
    location = (location or "").strip()
    if location and location != loaded[0]:
        changes["location"] = location
    if status and status != loaded[1]:
        changes["status"] = status
    for key, value, before in (("targetDate", target, loaded[2]), ("note", note, loaded[3])):
        value = (value or "").strip()
        if current is None and not value:
            continue
        if value != before:
            changes[key] = value or None
    return changes
