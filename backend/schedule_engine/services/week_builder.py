from __future__ import annotations

from collections.abc import Sequence
from datetime import date, datetime, timedelta

from schedule_engine.core.config import Settings
from schedule_engine.schemas.resolution import BaseSlot, GridCell, ModifiedSlot, WeekGrid
from schedule_engine.schemas.schedule import (
    CANONICAL_TIME_RANGES,
    SCHOOL_WEEK,
    TimeRange,
    TimeSlot,
    View,
    Weekday,
)
from schedule_engine.services.calendar import week_start_for
from schedule_engine.services.slot_resolver import SlotResolver


class WeekScheduleBuilder:
    """Resolves every (day, time range) cell of a calendar week.

    The grid shape comes from the injected days and time ranges, never from
    the data: a class with no Saturday lessons still gets empty Saturday
    cells.
    """

    def __init__(
        self,
        resolver: SlotResolver,
        days: Sequence[Weekday] = SCHOOL_WEEK,
        time_ranges: Sequence[TimeRange] = CANONICAL_TIME_RANGES,
    ) -> None:
        self.resolver = resolver
        self.days = tuple(days)
        self.time_ranges = tuple(time_ranges)

    @classmethod
    def from_settings(cls, resolver: SlotResolver, settings: Settings) -> WeekScheduleBuilder:
        return cls(resolver, days=settings.workdays, time_ranges=settings.time_slots)

    def build(self, view: View, week_start: date) -> WeekGrid:
        monday = week_start_for(week_start)
        cells = []
        for day in self.days:
            on = monday + timedelta(days=day.offset)
            for time_range in self.time_ranges:
                time_slot = TimeSlot.at(day, time_range)
                cells.append(
                    GridCell(date=on, time_slot=time_slot, slot=self.resolver.resolve(view, on, time_slot))
                )
        return WeekGrid(
            week_start=monday,
            days=self.days,
            time_ranges=self.time_ranges,
            cells=tuple(cells),
        )


def upcoming_session(grid: WeekGrid, now: datetime) -> GridCell | None:
    """First lesson still to start today, skipping cancelled and holiday cells."""
    today = now.date()
    upcoming = [
        cell
        for cell in grid.cells
        if cell.date == today
        and isinstance(cell.slot, (BaseSlot, ModifiedSlot))
        and cell.time_slot.start > now.time()
    ]
    if not upcoming:
        return None
    return min(upcoming, key=lambda cell: cell.time_slot.start)
