from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable
from datetime import date

from schedule_engine.schemas.schedule import (
    ExceptionKind,
    ScheduleException,
    TimeRange,
    TimeSlot,
    View,
    Weekday,
)

logger = logging.getLogger(__name__)


def exceptions_in_window(
    exceptions: Iterable[ScheduleException],
    start: date,
    end: date,
    view: View | None = None,
) -> list[ScheduleException]:
    """Exceptions dated within [start, end], optionally limited to a view's scope.

    Mirrors the backend's list filter: a class (or teacher) filter keeps the
    exceptions targeting that id plus the ones with no id at all.
    """
    return [
        exception
        for exception in exceptions
        if start <= exception.date <= end and (view is None or view.in_scope(exception))
    ]


class ExceptionIndex:
    """Dated exceptions keyed by (date, time slot).

    When several exceptions match a lookup, one scoped to the viewed class or
    teacher beats a wildcard one, and the lowest id breaks remaining ties.
    The choice is deterministic but arbitrary when the data itself is
    ambiguous.
    """

    def __init__(
        self,
        exact: dict[tuple[date, TimeSlot], list[ScheduleException]],
        all_day: dict[tuple[date, Weekday], list[ScheduleException]],
    ) -> None:
        self._exact = exact
        self._all_day = all_day

    @classmethod
    def build(
        cls,
        exceptions: Iterable[ScheduleException],
        *,
        all_day_range: TimeRange | None = None,
    ) -> ExceptionIndex:
        exact: dict[tuple[date, TimeSlot], list[ScheduleException]] = defaultdict(list)
        all_day: dict[tuple[date, Weekday], list[ScheduleException]] = defaultdict(list)
        for exception in exceptions:
            exact[(exception.date, exception.time_slot)].append(exception)
            if (
                all_day_range is not None
                and exception.kind is ExceptionKind.holiday
                and exception.time_slot.time_range.covers(all_day_range)
            ):
                all_day[(exception.date, exception.time_slot.day)].append(exception)
        logger.debug(
            "Indexed %d exception slot(s), %d all-day holiday date(s)",
            len(exact),
            len(all_day),
        )
        return cls(exact=dict(exact), all_day=dict(all_day))

    def lookup(
        self,
        on: date,
        day: Weekday,
        time_slot: TimeSlot,
        view: View,
    ) -> ScheduleException | None:
        if time_slot.day != day:
            time_slot = TimeSlot(day=day, start=time_slot.start, end=time_slot.end)
        found = _most_specific(self._exact.get((on, time_slot), ()), view)
        if found is not None:
            return found
        return _most_specific(self._all_day.get((on, day), ()), view)


def _most_specific(
    candidates: Iterable[ScheduleException],
    view: View,
) -> ScheduleException | None:
    matching = [candidate for candidate in candidates if view.in_scope(candidate)]
    if not matching:
        return None
    return min(matching, key=lambda candidate: (not view.is_exact_scope(candidate), candidate.id))
