from __future__ import annotations

import logging
from datetime import date

from schedule_engine.schemas.resolution import (
    EMPTY,
    BaseSlot,
    CancelledSlot,
    HolidaySlot,
    ModifiedSlot,
    ResolvedSlot,
)
from schedule_engine.schemas.schedule import (
    Cancellation,
    Holiday,
    ScheduleException,
    SessionRelocation,
    SpecialEvent,
    TeacherSubstitution,
    TimeSlot,
    View,
    Weekday,
)
from schedule_engine.services.base_index import BaseScheduleIndex
from schedule_engine.services.exception_index import ExceptionIndex
from schedule_engine.services.term_cutoff import UNBOUNDED, AcademicWindow

logger = logging.getLogger(__name__)


class SlotResolver:
    """Decides what one (view, date, time slot) cell shows.

    Order of precedence:

    1. dates outside the academic window (after the final term's end, or
       before the year opens) and Sundays are always empty, even if an
       exception was recorded for them;
    2. a matching exception overrides the base schedule;
    3. otherwise the recurring base entry, if any.

    Foreign ids (subjects, teachers) are passed through untouched; the caller
    renders a placeholder for ids it cannot name. ``resolve`` never raises.
    """

    def __init__(
        self,
        base_index: BaseScheduleIndex,
        exception_index: ExceptionIndex,
        window: AcademicWindow = UNBOUNDED,
    ) -> None:
        self.base_index = base_index
        self.exception_index = exception_index
        self.window = window

    def resolve(self, view: View, on: date, time_slot: TimeSlot) -> ResolvedSlot:
        if self.window.excludes(on):
            return EMPTY
        day = Weekday.for_date(on)
        if day is None:
            return EMPTY

        exception = self.exception_index.lookup(on, day, time_slot, view)
        if exception is not None:
            resolved = self._apply_exception(exception, view, day, time_slot)
            if resolved is not None:
                return resolved

        entry = self.base_index.lookup(day, time_slot, view)
        if entry is None:
            return EMPTY
        return BaseSlot(subject_id=entry.subject_id, teacher_id=entry.teacher_id, entry_id=entry.id)

    def _original_entry_id(self, view: View, day: Weekday, time_slot: TimeSlot) -> int | None:
        entry = self.base_index.lookup(day, time_slot, view)
        return entry.id if entry is not None else None

    def _apply_exception(
        self,
        exception: ScheduleException,
        view: View,
        day: Weekday,
        time_slot: TimeSlot,
    ) -> ResolvedSlot | None:
        if isinstance(exception, Cancellation):
            return CancelledSlot(
                reason=exception.reason,
                exception_id=exception.id,
                original_entry_id=self._original_entry_id(view, day, time_slot),
            )
        if isinstance(exception, Holiday):
            return HolidaySlot(reason=exception.reason, exception_id=exception.id)
        if isinstance(exception, (TeacherSubstitution, SpecialEvent, SessionRelocation)):
            # A relocation only annotates its origin slot; nothing is placed
            # at the target day/time it names.
            return ModifiedSlot(
                subject_id=exception.replacement.subject_id,
                teacher_id=exception.replacement.teacher_id,
                kind=exception.kind,
                exception_id=exception.id,
                original_entry_id=self._original_entry_id(view, day, time_slot),
            )
        logger.debug("Exception %s of unhandled kind %r ignored", exception.id, exception)
        return None
