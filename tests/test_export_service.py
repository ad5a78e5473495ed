from datetime import date

import pytest

from sitedefects.core.errors import ImportFormatError
from sitedefects.core.schemas import DefectStatus
from sitedefects.services.export_service import (
    detail_columns,
    export_filename,
    overview_sheet,
    records_from_json,
    records_to_json,
    slide_status_text,
    summary_sheet,
)


@pytest.fixture
def records(make_record):
    return [
        make_record(category="Corridor", location="Floor 2", total=16, fixed=16, status=DefectStatus.COMPLETED),
        make_record(category="Stairs", location="ST-1", total=43, fixed=0, target_date="10/2/69"),
        make_record(category="Corridor", location="Floor 3", total=23, fixed=23,
                    status=DefectStatus.FIXED_WAIT_APPROVAL),
    ]


def test_export_filename():
    assert export_filename("defects", "json", on=date(2026, 2, 5)) == "defects-2026-02-05.json"


def test_json_round_trip_keeps_thai_text(make_record):
    text = records_to_json([make_record(category="ดาดฟ้า", location="Rooftop")])
    assert "ดาดฟ้า" in text
    assert '"totalDefects"' in text
    assert records_from_json(text)[0].category == "ดาดฟ้า"


def test_records_from_json_rejects_bad_payloads():
    with pytest.raises(ImportFormatError):
        records_from_json("{not json")
    with pytest.raises(ImportFormatError):
        records_from_json('{"id": "1"}')


def test_summary_sheet_layout(records):
    df = summary_sheet(records)
    assert df["Category / Location"].tolist() == [
        "Corridor (รวม)", "Floor 2", "Floor 3", "Stairs (รวม)", "ST-1", "Grand Total",
    ]
    assert df.iloc[0]["Total"] == 39
    assert df.iloc[3]["Left"] == 43
    assert df.iloc[-1]["Status"] == "47.6% Complete"


def test_overview_sheet(records):
    df = overview_sheet(records)
    assert df["Category"].tolist() == ["Corridor", "Stairs", "Total"]
    assert df.iloc[0]["Progress (%)"] == 100.0
    assert df.iloc[-1]["Remaining"] == 43


def test_slide_status_text(make_record):
    assert slide_status_text(make_record(total=5, fixed=5, status=DefectStatus.FIXED_WAIT_APPROVAL)) == "Fixed (Wait CM)"
    assert slide_status_text(make_record(total=5, fixed=5)) == "Done"
    assert slide_status_text(make_record(total=0, status=DefectStatus.COMPLETED)) == "Done"
    assert slide_status_text(make_record(total=0, status=DefectStatus.NO_DEFECT)) == "No Defect"


def test_detail_columns(records):
    left, right = detail_columns(records)
    assert len(left) + len(right) == 5
    combined = left["Location"].tolist() + right["Location"].tolist()
    assert combined == ["Corridor", "Floor 2", "Floor 3", "Stairs", "ST-1"]
    assert "10/2/69" in (left["TARGET"].tolist() + right["TARGET"].tolist())
