from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class DefectStatus(str, Enum):
    COMPLETED = "Completed"
    PENDING = "Pending"
    FIXED_WAIT_APPROVAL = "Fixed (Wait CM)"
    NO_DEFECT = "No Defect"
    NOT_CHECKED = "Not Checked"


STATUS_LABELS: dict[str, dict[DefectStatus, str]] = {
    "en": {status: status.value for status in DefectStatus},
    "th": {
        DefectStatus.COMPLETED: "แก้ไขเรียบร้อย",
        DefectStatus.PENDING: "รอดำเนินการ",
        DefectStatus.FIXED_WAIT_APPROVAL: "แก้ไขเรียบร้อย รอนัดตรวจ",
        DefectStatus.NO_DEFECT: "ไม่มี Defect",
        DefectStatus.NOT_CHECKED: "ยังไม่ตรวจ",
    },
}

_LABEL_LOOKUP: dict[str, DefectStatus] = {
    label.casefold(): status
    for labels in STATUS_LABELS.values()
    for status, label in labels.items()
}
_LABEL_LOOKUP.update({status.name.casefold(): status for status in DefectStatus})


def parse_status(value: Any) -> DefectStatus:
    """Accept the enum, any locale's display label or the member name."""
    if isinstance(value, DefectStatus):
        return value
    key = str(value or "").strip().casefold()
    try:
        return _LABEL_LOOKUP[key]
    except KeyError:
        raise ValueError(f"Unknown defect status: {value!r}") from None


def status_label(status: DefectStatus, locale: str = "en") -> str:
    return STATUS_LABELS.get(locale, STATUS_LABELS["en"])[status]


class DefectRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    category: str
    location: str
    total_defects: int = Field(0, ge=0, alias="totalDefects")
    fixed_defects: int = Field(0, ge=0, alias="fixedDefects")
    status: DefectStatus = DefectStatus.PENDING
    target_date: str | None = Field(None, alias="targetDate")
    note: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str:
        # imported files sometimes carry numeric ids
        return str(v)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, v: Any) -> DefectStatus:
        return parse_status(v)


class DefectCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    category: str | None = None
    location: str | None = None
    total_defects: int = Field(0, ge=0, alias="totalDefects")
    fixed_defects: int = Field(0, ge=0, alias="fixedDefects")
    status: DefectStatus = DefectStatus.PENDING
    target_date: str | None = Field(None, alias="targetDate")
    note: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, v: Any) -> DefectStatus:
        return parse_status(v)


class DefectUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    category: str | None = Field(None, min_length=1)
    location: str | None = Field(None, min_length=1)
    total_defects: int | None = Field(None, ge=0, alias="totalDefects")
    fixed_defects: int | None = Field(None, ge=0, alias="fixedDefects")
    status: DefectStatus | None = None
    target_date: str | None = Field(None, alias="targetDate")
    note: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, v: Any) -> DefectStatus | None:
        return None if v is None else parse_status(v)


class CountsUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_defects: int | None = Field(None, ge=0, alias="totalDefects")
    fixed_defects: int | None = Field(None, ge=0, alias="fixedDefects")


class CategoryRename(BaseModel):
    old: str
    new: str


class SummaryStats(BaseModel):
    total: int = 0
    fixed: int = 0
    remaining: int = 0
    percentage: float = 0.0


class CategoryTotals(BaseModel):
    total: int = 0
    fixed: int = 0
    remaining: int = 0
    progress: float = 0.0


class CategoryStats(CategoryTotals):
    name: str


@dataclass(frozen=True)
class HeaderItem:
    title: str


@dataclass(frozen=True)
class RowItem:
    record: DefectRecord
    index: int


DisplayItem = Union[HeaderItem, RowItem]
