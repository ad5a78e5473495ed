import pytest

from sitedefects.core.schemas import DefectRecord, DefectStatus


@pytest.fixture
def make_record():
    counter = {"n": 0}

    def _make(category="Rooftop", location=None, total=0, fixed=0, status=DefectStatus.PENDING, **extra):
        counter["n"] += 1
        n = counter["n"]
        return DefectRecord(
            id=extra.pop("id", f"r{n}"),
            category=category,
            location=location or f"Location {n}",
            total_defects=total,
            fixed_defects=fixed,
            status=status,
            **extra,
        )

    return _make


@pytest.fixture
def grouped_records(make_record):
    """Sizes 4, 3, 4, 5, 6, 2: headers land at 0, 5, 9, 14, 20, 27 of 30 items."""
    records = []
    for cat, size in zip("ABCDEF", (4, 3, 4, 5, 6, 2)):
        records.extend(make_record(category=cat, total=2, fixed=1) for _ in range(size))
    return records
