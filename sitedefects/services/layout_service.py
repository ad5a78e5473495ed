from __future__ import annotations

import math
from typing import Sequence

from sitedefects.core.schemas import DefectRecord, DisplayItem, HeaderItem, RowItem
from sitedefects.services.aggregation_service import group_by_category

# A category boundary is only used as the split point when it lands inside this band.
BALANCE_MIN = 0.3
BALANCE_MAX = 0.7


def build_display_list(records: Sequence[DefectRecord]) -> list[DisplayItem]:
    items: list[DisplayItem] = []
    row_no = 1
    for category, group in group_by_category(records).items():
        items.append(HeaderItem(title=str(category)))
        for record in group:
            items.append(RowItem(record=record, index=row_no))
            row_no += 1
    return items


def split_columns(items: Sequence[DisplayItem]) -> tuple[list[DisplayItem], list[DisplayItem]]:
    """
    Split a flattened display list into left/right slide columns.

    Cuts before the category header closest to the midpoint (earliest wins on a
    tie) when that header sits within 30-70% of the list, otherwise at
    ceil(len / 2). A single category therefore gets split across both columns.
    """
    count = len(items)
    if count == 0:
        return [], []

    ideal_mid = count / 2
    split_index = math.ceil(ideal_mid)

    header_indices = [i for i, item in enumerate(items) if isinstance(item, HeaderItem) and i > 0]
    if header_indices:
        best = min(header_indices, key=lambda i: abs(i - ideal_mid))
        if BALANCE_MIN <= best / count <= BALANCE_MAX:
            split_index = best

    return list(items[:split_index]), list(items[split_index:])


def balance_columns(records: Sequence[DefectRecord]) -> tuple[list[DisplayItem], list[DisplayItem]]:
    return split_columns(build_display_list(records))
