from __future__ import annotations

from typing import Iterable, Sequence

from sitedefects.core.schemas import (
    CategoryStats,
    CategoryTotals,
    DefectRecord,
    DefectStatus,
    SummaryStats,
    status_label,
)


def _sums(records: Iterable[DefectRecord]) -> tuple[int, int, int, float]:
    total = 0
    fixed = 0
    for r in records:
        total += r.total_defects
        fixed += r.fixed_defects
    # remaining is not floored: fixed > total on a record shows up as a negative figure
    remaining = total - fixed
    pct = (fixed / total) * 100 if total > 0 else 0.0
    return total, fixed, remaining, pct


def overall_totals(records: Sequence[DefectRecord]) -> SummaryStats:
    total, fixed, remaining, pct = _sums(records)
    return SummaryStats(total=total, fixed=fixed, remaining=remaining, percentage=pct)


def group_by_category(records: Sequence[DefectRecord]) -> dict[str, list[DefectRecord]]:
    """Group records by category in first-seen order.

    Categories keep the order in which they first appear in ``records`` (never
    alphabetical) and each group keeps input order, even when categories are
    interleaved in the input.
    """
    groups: dict[str, list[DefectRecord]] = {}
    for r in records:
        groups.setdefault(r.category, []).append(r)
    return groups


def category_totals(group: Sequence[DefectRecord]) -> CategoryTotals:
    total, fixed, remaining, pct = _sums(group)
    return CategoryTotals(total=total, fixed=fixed, remaining=remaining, progress=pct)


def category_stats(records: Sequence[DefectRecord]) -> list[CategoryStats]:
    return [
        CategoryStats(name=name, **category_totals(items).model_dump())
        for name, items in group_by_category(records).items()
    ]


def is_numerically_complete(record: DefectRecord) -> bool:
    return record.total_defects > 0 and record.total_defects == record.fixed_defects


def effective_status(record: DefectRecord) -> DefectStatus:
    """
    Status a record is reported under:
    1) awaiting approval stays awaiting approval, even when fully fixed;
    2) otherwise a fully fixed location counts as Completed;
    3) otherwise the stored status.
    """
    if record.status is DefectStatus.FIXED_WAIT_APPROVAL:
        return DefectStatus.FIXED_WAIT_APPROVAL
    if is_numerically_complete(record):
        return DefectStatus.COMPLETED
    return record.status


def status_distribution(records: Sequence[DefectRecord]) -> list[tuple[DefectStatus, int]]:
    """Count records per effective status, buckets in first-seen order."""
    counts: dict[DefectStatus, int] = {}
    for r in records:
        status = effective_status(r)
        counts[status] = counts.get(status, 0) + 1
    return list(counts.items())


def awaiting_approval(records: Sequence[DefectRecord]) -> list[DefectRecord]:
    return [r for r in records if r.status is DefectStatus.FIXED_WAIT_APPROVAL]


def filter_records(records: Sequence[DefectRecord], term: str | None) -> list[DefectRecord]:
    needle = (term or "").strip().casefold()
    if not needle:
        return list(records)
    return [
        r for r in records
        if needle in r.location.casefold()
        or needle in r.category.casefold()
        or needle in status_label(r.status).casefold()
    ]
