from datetime import date, time

import pytest

from schedule_engine.core.config import load_settings
from schedule_engine.schemas.schedule import (
    BaseScheduleEntry,
    Cancellation,
    Holiday,
    RelocationTarget,
    Replacement,
    SessionRelocation,
    SpecialEvent,
    TeacherSubstitution,
    Term,
    TimeSlot,
    Weekday,
)

MONDAY = date(2024, 1, 8)  # a Monday inside the 2023-2024 school year


@pytest.fixture
def settings():
    # Explicit values so a developer's SCHEDULE_* env vars cannot leak in.
    return load_settings(
        workdays=["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"],
        time_slots=["08:00-10:00", "10:15-12:00", "12:15-14:00"],
        final_term_marker="3",
        _env_file=None,
    )


@pytest.fixture
def monday():
    return MONDAY


@pytest.fixture
def first_slot():
    return TimeSlot(day=Weekday.monday, start=time(8, 0), end=time(10, 0))


@pytest.fixture
def make_entry():
    def _make(entry_id=1, *, day=Weekday.monday, start="08:00", end="10:00",
              class_id=5, teacher_id=9, subject_id=3, academic_year_id=None):
        return BaseScheduleEntry(
            id=entry_id,
            time_slot=TimeSlot(day=day, start=start, end=end),
            class_id=class_id,
            teacher_id=teacher_id,
            subject_id=subject_id,
            academic_year_id=academic_year_id,
        )

    return _make


@pytest.fixture
def make_exception():
    def _make(kind, exception_id=100, *, on=MONDAY, start="08:00", end="10:00",
              class_id=None, teacher_id=None, reason=None, subject_id=None,
              new_teacher_id=None, **relocation):
        common = {
            "id": exception_id,
            "date": on,
            "time_slot": TimeSlot(day=Weekday.for_date(on), start=start, end=end),
            "scope_class_id": class_id,
            "scope_teacher_id": teacher_id,
            "reason": reason,
        }
        if kind == "cancellation":
            return Cancellation(**common)
        if kind == "holiday":
            return Holiday(**common)
        if kind == "teacher_substitution":
            return TeacherSubstitution(**common, replacement=Replacement(subject_id=subject_id, teacher_id=new_teacher_id))
        if kind == "special_event":
            return SpecialEvent(**common, replacement=Replacement(subject_id=subject_id, teacher_id=new_teacher_id))
        if kind == "session_relocation":
            return SessionRelocation(
                **common,
                replacement=RelocationTarget(subject_id=subject_id, teacher_id=new_teacher_id, **relocation),
            )
        raise ValueError(kind)

    return _make


@pytest.fixture
def trimesters():
    return [
        Term(id=1, label="Trimestre 1", start=date(2023, 9, 11), end=date(2023, 12, 15)),
        Term(id=2, label="Trimestre 2", start=date(2024, 1, 3), end=date(2024, 3, 29)),
        Term(id=3, label="Trimestre 3", start=date(2024, 4, 8), end=date(2024, 6, 30)),
    ]
