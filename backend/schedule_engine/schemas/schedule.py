from __future__ import annotations

import datetime as dt
from datetime import date, time
from enum import Enum
from typing import Annotated, Literal, NamedTuple, Union

from pydantic import BaseModel, Field, field_validator, model_validator

FRENCH_DAY_NAMES = {
    "lundi": "Monday",
    "mardi": "Tuesday",
    "mercredi": "Wednesday",
    "jeudi": "Thursday",
    "vendredi": "Friday",
    "samedi": "Saturday",
}


class Weekday(str, Enum):
    monday = "Monday"
    tuesday = "Tuesday"
    wednesday = "Wednesday"
    thursday = "Thursday"
    friday = "Friday"
    saturday = "Saturday"

    @property
    def offset(self) -> int:
        """Offset from Monday, matching ``date.weekday()``."""
        return _WEEKDAY_ORDER.index(self)

    @classmethod
    def for_date(cls, value: date) -> Weekday | None:
        # Sunday is never part of the school week.
        offset = value.weekday()
        if offset >= len(_WEEKDAY_ORDER):
            return None
        return _WEEKDAY_ORDER[offset]

    @classmethod
    def parse(cls, value: str | Weekday) -> Weekday:
        if isinstance(value, Weekday):
            return value
        cleaned = str(value).strip()
        english = FRENCH_DAY_NAMES.get(cleaned.lower(), cleaned.capitalize())
        for day in _WEEKDAY_ORDER:
            if day.value == english or day.value[:3] == english:
                return day
        raise ValueError(f"Invalid day value: {value!r}")


_WEEKDAY_ORDER = tuple(Weekday)


def _coerce_weekday(value: object) -> object:
    if isinstance(value, str):
        return Weekday.parse(value)
    return value


class TimeRange(BaseModel):
    """A start/end pair within one day, e.g. ``08:00-10:00``."""

    model_config = {"frozen": True}

    start: time
    end: time

    @model_validator(mode="after")
    def validate_time_order(self) -> TimeRange:
        if self.end <= self.start:
            raise ValueError("end must be later than start")
        return self

    @classmethod
    def parse(cls, value: str) -> TimeRange:
        start, separator, end = value.strip().partition("-")
        if not separator:
            raise ValueError(f"Time range must look like HH:MM-HH:MM, got {value!r}")
        return cls(start=start.strip(), end=end.strip())

    @property
    def label(self) -> str:
        return f"{self.start:%H:%M}-{self.end:%H:%M}"

    def covers(self, other: TimeRange) -> bool:
        return self.start <= other.start and other.end <= self.end


class TimeSlot(BaseModel):
    """A recurring weekly position: day of week plus an exact time range."""

    model_config = {"frozen": True}

    day: Weekday
    start: time
    end: time

    @field_validator("day", mode="before")
    @classmethod
    def parse_day(cls, value: object) -> object:
        return _coerce_weekday(value)

    @model_validator(mode="after")
    def validate_time_order(self) -> TimeSlot:
        if self.end <= self.start:
            raise ValueError("end must be later than start")
        return self

    @classmethod
    def at(cls, day: Weekday, time_range: TimeRange) -> TimeSlot:
        return cls(day=day, start=time_range.start, end=time_range.end)

    @property
    def time_range(self) -> TimeRange:
        return TimeRange(start=self.start, end=self.end)


class ScheduleKey(NamedTuple):
    time_slot: TimeSlot
    owner_id: int


class ClassView(BaseModel):
    model_config = {"frozen": True}

    class_id: int

    def owns(self, entry: BaseScheduleEntry) -> bool:
        return entry.class_id == self.class_id

    def in_scope(self, exception: ScheduleExceptionBase) -> bool:
        return exception.scope_class_id is None or exception.scope_class_id == self.class_id

    def is_exact_scope(self, exception: ScheduleExceptionBase) -> bool:
        return exception.scope_class_id == self.class_id


class TeacherView(BaseModel):
    model_config = {"frozen": True}

    teacher_id: int

    def owns(self, entry: BaseScheduleEntry) -> bool:
        return entry.teacher_id == self.teacher_id

    def in_scope(self, exception: ScheduleExceptionBase) -> bool:
        return exception.scope_teacher_id is None or exception.scope_teacher_id == self.teacher_id

    def is_exact_scope(self, exception: ScheduleExceptionBase) -> bool:
        return exception.scope_teacher_id == self.teacher_id


View = Union[ClassView, TeacherView]


class Term(BaseModel):
    model_config = {"frozen": True}

    id: int
    label: str
    start: date
    end: date
    academic_year_id: int | None = None

    @model_validator(mode="after")
    def validate_date_order(self) -> Term:
        if self.end < self.start:
            raise ValueError("Term end must not precede its start")
        return self


class AcademicYear(BaseModel):
    model_config = {"frozen": True}

    id: int
    label: str
    start: date
    end: date
    terms: tuple[Term, ...] = ()

    @model_validator(mode="after")
    def validate_terms(self) -> AcademicYear:
        foreign = [term.id for term in self.terms if term.academic_year_id not in (None, self.id)]
        if foreign:
            raise ValueError(f"Terms {foreign} belong to another academic year")
        return self


class BaseScheduleEntry(BaseModel):
    model_config = {"frozen": True}

    id: int
    time_slot: TimeSlot
    class_id: int
    teacher_id: int
    subject_id: int
    academic_year_id: int | None = None


class ExceptionKind(str, Enum):
    cancellation = "cancellation"
    holiday = "holiday"
    teacher_substitution = "teacher_substitution"
    session_relocation = "session_relocation"
    special_event = "special_event"


class Replacement(BaseModel):
    model_config = {"frozen": True}

    subject_id: int
    teacher_id: int


class RelocationTarget(Replacement):
    """Where a relocated session is said to move; informational only."""

    new_day: Weekday | None = None
    new_start: time | None = None
    new_end: time | None = None
    new_class_id: int | None = None

    @field_validator("new_day", mode="before")
    @classmethod
    def parse_new_day(cls, value: object) -> object:
        return _coerce_weekday(value)


class ScheduleExceptionBase(BaseModel):
    model_config = {"frozen": True}

    id: int
    date: dt.date
    time_slot: TimeSlot
    scope_class_id: int | None = None
    scope_teacher_id: int | None = None
    reason: str | None = None


class Cancellation(ScheduleExceptionBase):
    kind: Literal[ExceptionKind.cancellation] = ExceptionKind.cancellation


class Holiday(ScheduleExceptionBase):
    kind: Literal[ExceptionKind.holiday] = ExceptionKind.holiday


class TeacherSubstitution(ScheduleExceptionBase):
    kind: Literal[ExceptionKind.teacher_substitution] = ExceptionKind.teacher_substitution
    replacement: Replacement


class SessionRelocation(ScheduleExceptionBase):
    kind: Literal[ExceptionKind.session_relocation] = ExceptionKind.session_relocation
    replacement: RelocationTarget


class SpecialEvent(ScheduleExceptionBase):
    kind: Literal[ExceptionKind.special_event] = ExceptionKind.special_event
    replacement: Replacement


ScheduleException = Annotated[
    Union[Cancellation, Holiday, TeacherSubstitution, SessionRelocation, SpecialEvent],
    Field(discriminator="kind"),
]

SCHOOL_WEEK = tuple(Weekday)

CANONICAL_TIME_RANGES = (
    TimeRange(start=time(8, 0), end=time(10, 0)),
    TimeRange(start=time(10, 15), end=time(12, 0)),
    TimeRange(start=time(12, 15), end=time(14, 0)),
)
