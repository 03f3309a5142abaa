"""Wire shapes of the records served by the school REST backend.

The backend stores schedule rows with French column names (``jour``,
``heure_debut``, ``type_exception`` ...). These models accept either those
names or the English field names and turn each record into the typed domain
models the engine works on.
"""
from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Iterable, Mapping
from datetime import time
from typing import Any, Callable, TypeVar

from pydantic import BaseModel, Field, ValidationError, field_validator

from schedule_engine.core.exceptions import InvalidRecordError
from schedule_engine.schemas.schedule import (
    BaseScheduleEntry,
    Cancellation,
    ExceptionKind,
    Holiday,
    RelocationTarget,
    Replacement,
    ScheduleException,
    SessionRelocation,
    SpecialEvent,
    TeacherSubstitution,
    Term,
    TimeSlot,
    Weekday,
)

logger = logging.getLogger(__name__)

EXCEPTION_TYPE_ALIASES = {
    "annulation": ExceptionKind.cancellation,
    "jour_ferie": ExceptionKind.holiday,
    "remplacement_prof": ExceptionKind.teacher_substitution,
    "deplacement_cours": ExceptionKind.session_relocation,
    "evenement_special": ExceptionKind.special_event,
}

T = TypeVar("T")


def _parse_day(value: Any) -> Any:
    if isinstance(value, str):
        return Weekday.parse(value)
    return value


class BaseEntryRecord(BaseModel):
    id: int
    day: Weekday = Field(alias="jour")
    start_time: time = Field(alias="heure_debut")
    end_time: time = Field(alias="heure_fin")
    class_id: int = Field(alias="classe_id")
    subject_id: int = Field(alias="matiere_id")
    teacher_id: int = Field(alias="professeur_id")
    academic_year_id: int | None = Field(default=None, alias="annee_academique_id")

    model_config = {
        "from_attributes": True,
        "populate_by_name": True,
    }

    @field_validator("day", mode="before")
    @classmethod
    def validate_day(cls, value: Any) -> Any:
        return _parse_day(value)

    def to_entry(self) -> BaseScheduleEntry:
        return BaseScheduleEntry(
            id=self.id,
            time_slot=TimeSlot(day=self.day, start=self.start_time, end=self.end_time),
            class_id=self.class_id,
            teacher_id=self.teacher_id,
            subject_id=self.subject_id,
            academic_year_id=self.academic_year_id,
        )


class ExceptionRecord(BaseModel):
    id: int
    date: dt.date = Field(alias="date_exception")
    day: Weekday = Field(alias="jour")
    start_time: time = Field(alias="heure_debut")
    end_time: time = Field(alias="heure_fin")
    class_id: int | None = Field(default=None, alias="classe_id")
    teacher_id: int | None = Field(default=None, alias="professeur_id")
    kind: ExceptionKind = Field(alias="type_exception")
    new_subject_id: int | None = Field(default=None, alias="nouvelle_matiere_id")
    new_teacher_id: int | None = Field(default=None, alias="nouveau_professeur_id")
    new_start_time: time | None = Field(default=None, alias="nouvelle_heure_debut")
    new_end_time: time | None = Field(default=None, alias="nouvelle_heure_fin")
    new_class_id: int | None = Field(default=None, alias="nouvelle_classe_id")
    new_day: Weekday | None = Field(default=None, alias="nouveau_jour")
    reason: str | None = Field(default=None, alias="motif")

    model_config = {
        "from_attributes": True,
        "populate_by_name": True,
    }

    @field_validator("day", "new_day", mode="before")
    @classmethod
    def validate_day(cls, value: Any) -> Any:
        return _parse_day(value)

    @field_validator("kind", mode="before")
    @classmethod
    def validate_kind(cls, value: Any) -> Any:
        if isinstance(value, str):
            return EXCEPTION_TYPE_ALIASES.get(value.strip().lower(), value.strip().lower())
        return value

    def _replacement(self) -> Replacement | None:
        if self.new_subject_id is None or self.new_teacher_id is None:
            return None
        return Replacement(subject_id=self.new_subject_id, teacher_id=self.new_teacher_id)

    def to_exception(self) -> ScheduleException | None:
        """Typed variant for this record, or None when its kind lacks required fields."""
        common = {
            "id": self.id,
            "date": self.date,
            "time_slot": TimeSlot(day=self.day, start=self.start_time, end=self.end_time),
            "scope_class_id": self.class_id,
            "scope_teacher_id": self.teacher_id,
            "reason": self.reason,
        }
        if self.kind is ExceptionKind.cancellation:
            return Cancellation(**common)
        if self.kind is ExceptionKind.holiday:
            return Holiday(**common)

        replacement = self._replacement()
        if replacement is None:
            logger.debug(
                "Exception %s (%s) has no replacement subject/teacher; ignoring it",
                self.id,
                self.kind.value,
            )
            return None
        if self.kind is ExceptionKind.teacher_substitution:
            return TeacherSubstitution(**common, replacement=replacement)
        if self.kind is ExceptionKind.special_event:
            return SpecialEvent(**common, replacement=replacement)
        return SessionRelocation(
            **common,
            replacement=RelocationTarget(
                subject_id=replacement.subject_id,
                teacher_id=replacement.teacher_id,
                new_day=self.new_day,
                new_start=self.new_start_time,
                new_end=self.new_end_time,
                new_class_id=self.new_class_id,
            ),
        )


class TermRecord(BaseModel):
    id: int
    label: str = Field(alias="nom")
    start: dt.date = Field(alias="date_debut")
    end: dt.date = Field(alias="date_fin")
    academic_year_id: int | None = Field(default=None, alias="annee_scolaire_id")

    model_config = {
        "from_attributes": True,
        "populate_by_name": True,
    }

    def to_term(self) -> Term:
        return Term(
            id=self.id,
            label=self.label,
            start=self.start,
            end=self.end,
            academic_year_id=self.academic_year_id,
        )


def _record_id(record: Any) -> Any:
    if isinstance(record, Mapping):
        return record.get("id")
    return getattr(record, "id", None)


def _parse_records(
    records: Iterable[Any],
    record_type: str,
    convert: Callable[[Any], T | None],
    *,
    strict: bool,
) -> list[T]:
    parsed: list[T] = []
    for record in records:
        try:
            item = convert(record)
        except ValidationError as exc:
            details = {"errors": exc.errors(include_url=False, include_context=False)}
            if strict:
                raise InvalidRecordError(record_type, _record_id(record), details=details) from exc
            logger.warning(
                "Skipping invalid %s record %s: %s",
                record_type,
                _record_id(record),
                details["errors"],
            )
            continue
        if item is not None:
            parsed.append(item)
    return parsed


def parse_base_entries(records: Iterable[Any], *, strict: bool = True) -> list[BaseScheduleEntry]:
    return _parse_records(
        records,
        "base schedule entry",
        lambda record: BaseEntryRecord.model_validate(record).to_entry(),
        strict=strict,
    )


def parse_exceptions(records: Iterable[Any], *, strict: bool = True) -> list[ScheduleException]:
    return _parse_records(
        records,
        "schedule exception",
        lambda record: ExceptionRecord.model_validate(record).to_exception(),
        strict=strict,
    )


def parse_terms(records: Iterable[Any], *, strict: bool = True) -> list[Term]:
    return _parse_records(
        records,
        "term",
        lambda record: TermRecord.model_validate(record).to_term(),
        strict=strict,
    )
