from __future__ import annotations

import io
import logging
from typing import Any, Sequence

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, Response
from fastapi.responses import StreamingResponse

from sitedefects.api.schemas import (
    CategoryGroup,
    DefectListResponse,
    DetailSlideResponse,
    DisplayRow,
    HealthResponse,
    ImportResponse,
    OverviewResponse,
    RenameResponse,
    StatusCount,
    SummaryReportResponse,
    SummaryResponse,
)
from sitedefects.core.errors import ImportFormatError, RecordNotFoundError, RemoteSyncError
from sitedefects.core.schemas import (
    CategoryRename,
    CategoryStats,
    CountsUpdate,
    DefectCreate,
    DefectRecord,
    DefectUpdate,
    DisplayItem,
    HeaderItem,
    status_label,
)
from sitedefects.services import aggregation_service as agg
from sitedefects.services.export_service import (
    detail_columns,
    export_filename,
    overview_sheet,
    records_to_json,
    slide_status_text,
    summary_sheet,
)
from sitedefects.services.layout_service import balance_columns
from sitedefects.services.store_service import DefectStore, load_records
from sitedefects.utils.io import dataframe_to_excel_bytes, frames_to_excel_bytes

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

router = APIRouter()


def get_store(request: Request) -> DefectStore:
    return request.app.state.store


def _raise_for(exc: Exception):
    if isinstance(exc, RecordNotFoundError):
        raise HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, RemoteSyncError):
        raise HTTPException(status_code=502, detail=str(exc))
    raise HTTPException(status_code=400, detail=str(exc))


def _xlsx(content: bytes, filename: str) -> StreamingResponse:
    return StreamingResponse(
        io.BytesIO(content),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename=\"{filename}\""},
    )


def _display_rows(items: Sequence[DisplayItem]) -> list[DisplayRow]:
    rows = []
    for item in items:
        if isinstance(item, HeaderItem):
            rows.append(DisplayRow(type="header", title=item.title))
        else:
            rows.append(DisplayRow(
                type="row", index=item.index, record=item.record, status_text=slide_status_text(item.record)
            ))
    return rows


@router.get("/health", response_model=HealthResponse)
def health_check(store: DefectStore = Depends(get_store)) -> HealthResponse:
    return HealthResponse(status="ok", records=len(store))


@router.get("/defects", response_model=DefectListResponse)
def list_defects(
    q: str | None = Query(default=None, description="Search location, category or status"),
    store: DefectStore = Depends(get_store),
) -> DefectListResponse:
    items = agg.filter_records(store.snapshot(), q)
    return DefectListResponse(count=len(items), items=items)


@router.post("/defects", response_model=DefectRecord, status_code=201)
def add_defect(data: DefectCreate, store: DefectStore = Depends(get_store)) -> DefectRecord:
    try:
        return store.add(data)
    except RemoteSyncError as e:
        _raise_for(e)


@router.patch("/defects/{record_id}", response_model=DefectRecord)
def update_defect(record_id: str, changes: DefectUpdate, store: DefectStore = Depends(get_store)) -> DefectRecord:
    try:
        return store.update(record_id, changes)
    except (RecordNotFoundError, RemoteSyncError, ValueError) as e:
        _raise_for(e)


@router.put("/defects/{record_id}/counts", response_model=DefectRecord)
def update_counts(record_id: str, counts: CountsUpdate, store: DefectStore = Depends(get_store)) -> DefectRecord:
    try:
        return store.set_counts(record_id, total=counts.total_defects, fixed=counts.fixed_defects)
    except (RecordNotFoundError, RemoteSyncError, ValueError) as e:
        _raise_for(e)


@router.delete("/defects/{record_id}", status_code=204)
def delete_defect(record_id: str, store: DefectStore = Depends(get_store)) -> Response:
    try:
        store.delete(record_id)
    except (RecordNotFoundError, RemoteSyncError) as e:
        _raise_for(e)
    return Response(status_code=204)


@router.post("/defects/import", response_model=ImportResponse)
def import_defects(
    payload: Any = Body(...),
    mode: str = Query(default="replace", description="replace the whole list or merge by id"),
    store: DefectStore = Depends(get_store),
) -> ImportResponse:
    try:
        records = load_records(payload)
        count = store.import_records(records, mode=mode)
    except (ImportFormatError, RemoteSyncError, ValueError) as e:
        logger.warning("Rejected import: %s", e)
        _raise_for(e)
    return ImportResponse(count=count, mode=mode)


@router.get("/defects/export")
def export_defects(store: DefectStore = Depends(get_store)) -> Response:
    filename = export_filename("defects", "json")
    return Response(
        content=records_to_json(store.snapshot()),
        media_type="application/json",
        headers={"Content-Disposition": f"attachment; filename=\"{filename}\""},
    )


# declared after /defects/export so the literal path wins
@router.get("/defects/{record_id}", response_model=DefectRecord)
def get_defect(record_id: str, store: DefectStore = Depends(get_store)) -> DefectRecord:
    try:
        return store.get(record_id)
    except RecordNotFoundError as e:
        _raise_for(e)


@router.post("/categories/rename", response_model=RenameResponse)
def rename_category(body: CategoryRename, store: DefectStore = Depends(get_store)) -> RenameResponse:
    try:
        return RenameResponse(renamed=store.rename_category(body.old, body.new))
    except (RemoteSyncError, ValueError) as e:
        _raise_for(e)


@router.get("/categories", response_model=list[CategoryStats])
def list_categories(store: DefectStore = Depends(get_store)) -> list[CategoryStats]:
    return agg.category_stats(store.snapshot())


@router.get("/summary", response_model=SummaryResponse)
def summary(store: DefectStore = Depends(get_store)) -> SummaryResponse:
    records = store.snapshot()
    stats = agg.overall_totals(records)
    return SummaryResponse(**stats.model_dump(), locations=len(records))


@router.get("/status-distribution", response_model=list[StatusCount])
def status_distribution(
    locale: str = Query(default="en"),
    store: DefectStore = Depends(get_store),
) -> list[StatusCount]:
    return [
        StatusCount(status=status, label=status_label(status, locale), count=count)
        for status, count in agg.status_distribution(store.snapshot())
    ]


@router.get("/pending-approval", response_model=DefectListResponse)
def pending_approval(store: DefectStore = Depends(get_store)) -> DefectListResponse:
    items = agg.awaiting_approval(store.snapshot())
    return DefectListResponse(count=len(items), items=items)


@router.get("/reports/summary", response_model=SummaryReportResponse)
def summary_report(
    excel: bool = Query(default=False, description="Return the summary sheet as .xlsx"),
    store: DefectStore = Depends(get_store),
) -> SummaryReportResponse | StreamingResponse:
    records = store.snapshot()
    if excel:
        content = dataframe_to_excel_bytes(summary_sheet(records), sheet_name="Summary")
        return _xlsx(content, export_filename("defect-summary", "xlsx"))
    groups = [
        CategoryGroup(category=name, totals=agg.category_totals(items), items=items)
        for name, items in agg.group_by_category(records).items()
    ]
    return SummaryReportResponse(groups=groups, grand=agg.overall_totals(records))


@router.get("/slides/overview", response_model=OverviewResponse)
def overview_slide(
    excel: bool = Query(default=False, description="Return the overview table as .xlsx"),
    store: DefectStore = Depends(get_store),
) -> OverviewResponse | StreamingResponse:
    records = store.snapshot()
    if excel:
        content = dataframe_to_excel_bytes(overview_sheet(records), sheet_name="Overview")
        return _xlsx(content, export_filename("ppt-overview", "xlsx"))
    return OverviewResponse(categories=agg.category_stats(records), grand=agg.overall_totals(records))


@router.get("/slides/detail", response_model=DetailSlideResponse)
def detail_slide(
    excel: bool = Query(default=False, description="Return both columns as .xlsx sheets"),
    store: DefectStore = Depends(get_store),
) -> DetailSlideResponse | StreamingResponse:
    records = store.snapshot()
    if excel:
        left_df, right_df = detail_columns(records)
        content = frames_to_excel_bytes({"Left": left_df, "Right": right_df})
        return _xlsx(content, export_filename("ppt-detail", "xlsx"))
    left, right = balance_columns(records)
    return DetailSlideResponse(items=len(records), left=_display_rows(left), right=_display_rows(right))
