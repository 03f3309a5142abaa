from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable

from schedule_engine.schemas.schedule import (
    BaseScheduleEntry,
    ClassView,
    ScheduleKey,
    TimeSlot,
    View,
    Weekday,
)

logger = logging.getLogger(__name__)


class BaseScheduleIndex:
    """Recurring weekly entries keyed by (time slot, class) and (time slot, teacher).

    Lookups are exact on the day and on the start/end pair. Several entries
    may share a key when the source data breaks the one-entry-per-slot rule;
    the lowest id is returned in that case.
    """

    def __init__(
        self,
        by_class: dict[ScheduleKey, BaseScheduleEntry],
        by_teacher: dict[ScheduleKey, BaseScheduleEntry],
    ) -> None:
        self._by_class = by_class
        self._by_teacher = by_teacher

    @classmethod
    def build(
        cls,
        entries: Iterable[BaseScheduleEntry],
        *,
        academic_year_id: int | None = None,
    ) -> BaseScheduleIndex:
        class_buckets: dict[ScheduleKey, list[BaseScheduleEntry]] = defaultdict(list)
        teacher_buckets: dict[ScheduleKey, list[BaseScheduleEntry]] = defaultdict(list)
        for entry in entries:
            if academic_year_id is not None and entry.academic_year_id not in (None, academic_year_id):
                continue
            class_buckets[ScheduleKey(entry.time_slot, entry.class_id)].append(entry)
            teacher_buckets[ScheduleKey(entry.time_slot, entry.teacher_id)].append(entry)
        return cls(
            by_class=_pick_lowest_ids(class_buckets, "class"),
            by_teacher=_pick_lowest_ids(teacher_buckets, "teacher"),
        )

    def __len__(self) -> int:
        return len(self._by_class)

    def lookup(self, day: Weekday, time_slot: TimeSlot, view: View) -> BaseScheduleEntry | None:
        if time_slot.day != day:
            time_slot = TimeSlot(day=day, start=time_slot.start, end=time_slot.end)
        if isinstance(view, ClassView):
            return self._by_class.get(ScheduleKey(time_slot, view.class_id))
        return self._by_teacher.get(ScheduleKey(time_slot, view.teacher_id))


def _pick_lowest_ids(
    buckets: dict[ScheduleKey, list[BaseScheduleEntry]],
    axis: str,
) -> dict[ScheduleKey, BaseScheduleEntry]:
    picked: dict[ScheduleKey, BaseScheduleEntry] = {}
    for key, candidates in buckets.items():
        winner = min(candidates, key=lambda entry: entry.id)
        if len(candidates) > 1:
            logger.debug(
                "Duplicate base entries %s for %s %s on %s %s-%s; keeping %s",
                sorted(entry.id for entry in candidates),
                axis,
                key.owner_id,
                key.time_slot.day.value,
                key.time_slot.start,
                key.time_slot.end,
                winner.id,
            )
        picked[key] = winner
    return picked
