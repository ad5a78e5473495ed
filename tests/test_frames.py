from fastapi.testclient import TestClient

from sitedefects.app import create_app
from sitedefects.core.sample_data import initial_defects
from sitedefects.services.store_service import DefectStore
from sitedefects.ui.frames import (
    category_chart_frame,
    detail_frame,
    edit_form_values,
    edit_payload,
    overview_frame,
    records_frame,
    stat_cards_markdown,
    status_frame,
    summary_report_frame,
)

client = TestClient(create_app(store=DefectStore(initial_defects())))


def _get(path):
    return client.get(f"/v1{path}").json()


def test_records_frame():
    df = records_frame(_get("/defects")["items"])
    assert len(df) == 34
    assert df.iloc[0]["Location"] == "Building Facade (รูปด้านอาคาร)"
    assert df.iloc[0]["Target"] == "-"


def test_category_chart_frame_is_long_form():
    df = category_chart_frame(_get("/categories"))
    assert len(df) == 14
    assert set(df["Series"]) == {"Total", "Fixed"}


def test_status_frame_and_cards():
    assert status_frame(_get("/status-distribution"))["Count"].sum() == 34
    md = stat_cards_markdown(_get("/summary"))
    assert "Completion Rate" in md and "**34**" in md


def test_report_frames():
    summary = summary_report_frame(_get("/reports/summary"))
    assert summary.iloc[-1]["Category / Location"] == "Grand Total"
    overview = overview_frame(_get("/slides/overview"))
    assert len(overview) == 8


def test_detail_frame():
    slide = _get("/slides/detail")
    left, right = detail_frame(slide["left"]), detail_frame(slide["right"])
    assert len(left) + len(right) == 41
    assert left.iloc[0]["#"] == ""
    assert left.iloc[1]["STATUS"] == "Done"


def test_edit_payload_sends_only_changed_fields():
    current = _get("/defects/501")
    assert edit_form_values(current) == ("ลานจอดชั้น 1", "Pending", "6/2/69", "แล้วเสร็จ 6/2/69")
    assert edit_payload(current, "ลานจอดชั้น 1", "Pending", "6/2/69", "แล้วเสร็จ 6/2/69") == {}
    assert edit_payload(current, "ลานจอดชั้น 1", "Completed", "6/2/69", "แล้วเสร็จ 6/2/69") == {"status": "Completed"}


def test_edit_payload_blank_target_and_note_clear_them():
    current = _get("/defects/501")
    changes = edit_payload(current, "ลานจอดชั้น 1", "Pending", "", "  ")
    assert changes == {"targetDate": None, "note": None}

    local = TestClient(create_app(store=DefectStore(initial_defects())))
    updated = local.patch("/v1/defects/501", json=changes).json()
    assert updated["targetDate"] is None
    assert updated["note"] is None
    assert updated["location"] == "ลานจอดชั้น 1"


def test_edit_payload_never_blanks_location():
    current = _get("/defects/501")
    assert edit_payload(current, "", "Pending", "6/2/69", "แล้วเสร็จ 6/2/69") == {}


def test_edit_payload_without_loaded_record_skips_blanks():
    assert edit_payload(None, "", None, "", "") == {}
    assert edit_payload(None, "Lift lobby", None, "1/3/69", "") == {"location": "Lift lobby", "targetDate": "1/3/69"}
