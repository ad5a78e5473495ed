import math

from sitedefects.core.schemas import HeaderItem, RowItem
from sitedefects.services.layout_service import balance_columns, build_display_list, split_columns


def _header_positions(items):
    return [i for i, item in enumerate(items) if isinstance(item, HeaderItem)]


def test_build_display_list_numbers_rows_continuously(make_record):
    records = [
        make_record(category="A"),
        make_record(category="B"),
        make_record(category="A"),
    ]
    items = build_display_list(records)
    assert [type(i) for i in items] == [HeaderItem, RowItem, RowItem, HeaderItem, RowItem]
    assert items[0].title == "A"
    assert [i.index for i in items if isinstance(i, RowItem)] == [1, 2, 3]
    assert items[2].record is records[2]


def test_split_at_header_closest_to_midpoint(grouped_records):
    items = build_display_list(grouped_records)
    assert len(items) == 30
    assert _header_positions(items) == [0, 5, 9, 14, 20, 27]

    left, right = split_columns(items)
    assert len(left) == 14
    assert isinstance(right[0], HeaderItem)
    assert right[0].title == "D"


def test_single_category_falls_back_to_even_split(make_record):
    records = [make_record(category="Corridor") for _ in range(10)]
    left, right = balance_columns(records)
    assert len(left) == math.ceil(11 / 2) == 6
    assert len(right) == 5


def test_tie_goes_to_earlier_header(make_record):
    records = (
        [make_record(category="A") for _ in range(3)]
        + [make_record(category="B")]
        + [make_record(category="C") for _ in range(3)]
    )
    items = build_display_list(records)
    assert _header_positions(items) == [0, 4, 6]
    left, _ = split_columns(items)
    assert len(left) == 4


def test_header_outside_band_is_ignored(make_record):
    records = [make_record(category="A") for _ in range(8)] + [make_record(category="B")]
    items = build_display_list(records)
    assert _header_positions(items) == [0, 9]
    left, right = split_columns(items)
    assert len(left) == 6
    assert len(right) == 5


def test_band_edges_are_inclusive(make_record):
    # 10 items, only header at index 3 -> ratio 0.3 exactly
    records = [make_record(category="A") for _ in range(2)] + [make_record(category="B") for _ in range(6)]
    items = build_display_list(records)
    assert _header_positions(items) == [0, 3]
    left, _ = split_columns(items)
    assert len(left) == 3


def test_upper_band_edge_is_accepted(make_record):
    # 10 items, closest header at index 7 -> ratio 0.7 exactly
    records = [make_record(category="A") for _ in range(6)] + [make_record(category="B") for _ in range(2)]
    items = build_display_list(records)
    assert _header_positions(items) == [0, 7]
    left, right = split_columns(items)
    assert len(left) == 7
    assert right[0].title == "B"


def test_header_just_above_band_falls_back(make_record):
    # 11 items, only header at index 8 -> ratio 8/11 > 0.7
    records = [make_record(category="A") for _ in range(7)] + [make_record(category="B") for _ in range(2)]
    items = build_display_list(records)
    assert _header_positions(items) == [0, 8]
    left, right = split_columns(items)
    assert len(left) == math.ceil(11 / 2) == 6
    assert len(right) == 5


def test_empty_input():
    assert split_columns([]) == ([], [])
    assert balance_columns([]) == ([], [])


def test_columns_reproduce_input(grouped_records):
    items = build_display_list(grouped_records)
    left, right = split_columns(items)
    assert left + right == items
    assert split_columns(items) == (left, right)


def test_split_does_not_mutate_input(grouped_records):
    items = build_display_list(grouped_records)
    before = list(items)
    split_columns(tuple(items))
    assert items == before
