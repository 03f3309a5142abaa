from __future__ import annotations

import datetime as dt
from datetime import date
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from schedule_engine.schemas.schedule import ExceptionKind, TimeRange, TimeSlot, Weekday


class EmptySlot(BaseModel):
    model_config = {"frozen": True}

    status: Literal["empty"] = "empty"


class BaseSlot(BaseModel):
    model_config = {"frozen": True}

    status: Literal["base"] = "base"
    subject_id: int
    teacher_id: int
    entry_id: int


class CancelledSlot(BaseModel):
    model_config = {"frozen": True}

    status: Literal["cancelled"] = "cancelled"
    reason: str | None = None
    exception_id: int
    # Lets an editor find the base entry the cancellation overrides.
    original_entry_id: int | None = None


class HolidaySlot(BaseModel):
    model_config = {"frozen": True}

    status: Literal["holiday"] = "holiday"
    reason: str | None = None
    exception_id: int


class ModifiedSlot(BaseModel):
    model_config = {"frozen": True}

    status: Literal["modified"] = "modified"
    subject_id: int
    teacher_id: int
    kind: ExceptionKind
    exception_id: int
    original_entry_id: int | None = None


ResolvedSlot = Annotated[
    Union[EmptySlot, BaseSlot, CancelledSlot, HolidaySlot, ModifiedSlot],
    Field(discriminator="status"),
]

EMPTY = EmptySlot()


class GridCell(BaseModel):
    model_config = {"frozen": True}

    date: dt.date
    time_slot: TimeSlot
    slot: ResolvedSlot


class WeekGrid(BaseModel):
    """Resolved cells of one calendar week, ordered day first then slot."""

    model_config = {"frozen": True}

    week_start: date
    days: tuple[Weekday, ...]
    time_ranges: tuple[TimeRange, ...]
    cells: tuple[GridCell, ...] = ()

    @property
    def dates(self) -> dict[Weekday, date]:
        return {cell.time_slot.day: cell.date for cell in self.cells}

    def cell(self, day: Weekday, time_range: TimeRange) -> GridCell | None:
        for candidate in self.cells:
            if candidate.time_slot.day == day and candidate.time_slot.time_range == time_range:
                return candidate
        return None

    def slot(self, day: Weekday, time_range: TimeRange) -> ResolvedSlot:
        found = self.cell(day, time_range)
        return found.slot if found is not None else EMPTY

    def by_day(self) -> dict[Weekday, list[GridCell]]:
        grouped: dict[Weekday, list[GridCell]] = {day: [] for day in self.days}
        for cell in self.cells:
            grouped.setdefault(cell.time_slot.day, []).append(cell)
        return grouped

    def rows(self) -> list[tuple[TimeRange, list[ResolvedSlot]]]:
        """One row per time range, one column per day, as the weekly table shows it."""
        grouped = self.by_day()
        rows = []
        for position, time_range in enumerate(self.time_ranges):
            rows.append((time_range, [grouped[day][position].slot for day in self.days]))
        return rows
