from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

from schedule_engine.core.config import Settings, get_settings
from schedule_engine.schemas.records import parse_base_entries, parse_exceptions, parse_terms
from schedule_engine.schemas.resolution import GridCell, ResolvedSlot, WeekGrid
from schedule_engine.schemas.schedule import (
    AcademicYear,
    BaseScheduleEntry,
    ScheduleException,
    Term,
    TimeSlot,
    View,
)
from schedule_engine.services.base_index import BaseScheduleIndex
from schedule_engine.services.calendar import clamp_week_start
from schedule_engine.services.exception_index import ExceptionIndex
from schedule_engine.services.slot_resolver import SlotResolver
from schedule_engine.services.term_cutoff import AcademicWindow, TermCutoffPolicy
from schedule_engine.services.week_builder import WeekScheduleBuilder, upcoming_session

logger = logging.getLogger(__name__)


class TimetableEngine:
    """Indices, academic window, resolver and week builder for one fetched dataset.

    Build one per "view changed" or "week changed" fetch and throw it away
    afterwards; nothing is updated in place.
    """

    def __init__(
        self,
        entries: Iterable[BaseScheduleEntry],
        exceptions: Iterable[ScheduleException],
        terms: Iterable[Term] = (),
        *,
        academic_year: AcademicYear | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings if settings is not None else get_settings()
        self.academic_year = academic_year
        entries = list(entries)
        exceptions = list(exceptions)

        self.base_index = BaseScheduleIndex.build(
            entries,
            academic_year_id=academic_year.id if academic_year is not None else None,
        )
        self.exception_index = ExceptionIndex.build(exceptions, all_day_range=self.settings.all_day_range)
        self.window: AcademicWindow = TermCutoffPolicy(self.settings.final_term_marker).window_for(
            terms,
            academic_year,
        )
        self.resolver = SlotResolver(self.base_index, self.exception_index, self.window)
        self.builder = WeekScheduleBuilder.from_settings(self.resolver, self.settings)
        logger.debug(
            "Timetable engine ready: %d base entries, %d exceptions, window %s..%s",
            len(entries),
            len(exceptions),
            self.window.opens_on,
            self.window.cutoff,
        )

    @classmethod
    def from_records(
        cls,
        base_records: Iterable[Mapping[str, Any]],
        exception_records: Iterable[Mapping[str, Any]],
        term_records: Iterable[Mapping[str, Any]] = (),
        *,
        academic_year: AcademicYear | None = None,
        settings: Settings | None = None,
        strict: bool = True,
    ) -> TimetableEngine:
        return cls(
            parse_base_entries(base_records, strict=strict),
            parse_exceptions(exception_records, strict=strict),
            parse_terms(term_records, strict=strict),
            academic_year=academic_year,
            settings=settings,
        )

    def resolve(self, view: View, on: date, time_slot: TimeSlot) -> ResolvedSlot:
        return self.resolver.resolve(view, on, time_slot)

    def build_week(self, view: View, week_start: date, *, clamp: bool = False) -> WeekGrid:
        if clamp:
            week_start = clamp_week_start(week_start, self.window)
        return self.builder.build(view, week_start)

    def upcoming_session(self, view: View, now: datetime) -> GridCell | None:
        return upcoming_session(self.builder.build(view, now.date()), now)
