from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel

from sitedefects.core.schemas import CategoryStats, CategoryTotals, DefectRecord, DefectStatus, SummaryStats


class HealthResponse(BaseModel):
    status: str
    records: int


class DefectListResponse(BaseModel):
    count: int
    items: List[DefectRecord]


class SummaryResponse(SummaryStats):
    locations: int


class StatusCount(BaseModel):
    status: DefectStatus
    label: str
    count: int


class RenameResponse(BaseModel):
    renamed: int


class ImportResponse(BaseModel):
    count: int
    mode: str


class CategoryGroup(BaseModel):
    category: str
    totals: CategoryTotals
    items: List[DefectRecord]


class SummaryReportResponse(BaseModel):
    groups: List[CategoryGroup]
    grand: SummaryStats


class OverviewResponse(BaseModel):
    categories: List[CategoryStats]
    grand: SummaryStats


class DisplayRow(BaseModel):
    type: Literal["header", "row"]
    title: str | None = None
    index: int | None = None
    record: DefectRecord | None = None
    status_text: str | None = None


class DetailSlideResponse(BaseModel):
    items: int
    left: List[DisplayRow]
    right: List[DisplayRow]
