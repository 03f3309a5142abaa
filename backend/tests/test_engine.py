from datetime import date, datetime, time

import pytest

from schedule_engine import (
    EMPTY,
    AcademicYear,
    BaseSlot,
    CancelledSlot,
    ClassView,
    HolidaySlot,
    ModifiedSlot,
    TeacherView,
    TimeRange,
    TimetableEngine,
    TimeSlot,
    Weekday,
)
from schedule_engine.core.exceptions import InvalidRecordError

BASE_RECORDS = [
    {"id": 1, "jour": "Lundi", "heure_debut": "08:00:00", "heure_fin": "10:00:00",
     "classe_id": 5, "matiere_id": 3, "professeur_id": 9, "annee_academique_id": 1},
    {"id": 2, "jour": "Lundi", "heure_debut": "10:15:00", "heure_fin": "12:00:00",
     "classe_id": 5, "matiere_id": 4, "professeur_id": 10, "annee_academique_id": 1},
    {"id": 3, "jour": "Mardi", "heure_debut": "08:00:00", "heure_fin": "10:00:00",
     "classe_id": 7, "matiere_id": 3, "professeur_id": 9, "annee_academique_id": 1},
]

EXCEPTION_RECORDS = [
    {"id": 20, "date_exception": "2024-01-08", "jour": "Lundi", "heure_debut": "08:00:00",
     "heure_fin": "10:00:00", "classe_id": 5, "professeur_id": 9, "type_exception": "annulation",
     "motif": "Prof absent"},
    {"id": 21, "date_exception": "2024-01-09", "jour": "Mardi", "heure_debut": "00:00:00",
     "heure_fin": "23:59:59", "classe_id": None, "professeur_id": None, "type_exception": "jour_ferie",
     "motif": "Fête"},
    {"id": 22, "date_exception": "2024-01-08", "jour": "Lundi", "heure_debut": "10:15:00",
     "heure_fin": "12:00:00", "classe_id": 5, "professeur_id": 10, "type_exception": "evenement_special",
     "nouvelle_matiere_id": None, "nouveau_professeur_id": None, "motif": "Sortie"},
]

TERM_RECORDS = [
    {"id": 1, "nom": "Trimestre 1", "date_debut": "2023-09-11", "date_fin": "2023-12-15"},
    {"id": 2, "nom": "Trimestre 2", "date_debut": "2024-01-03", "date_fin": "2024-03-29"},
    {"id": 3, "nom": "Trimestre 3", "date_debut": "2024-04-08", "date_fin": "2024-06-30"},
]

FIRST = TimeRange(start=time(8, 0), end=time(10, 0))
SECOND = TimeRange(start=time(10, 15), end=time(12, 0))


@pytest.fixture
def engine(settings):
    return TimetableEngine.from_records(BASE_RECORDS, EXCEPTION_RECORDS, TERM_RECORDS, settings=settings)


def test_class_week_from_backend_records(engine, monday):
    grid = engine.build_week(ClassView(class_id=5), monday)

    assert grid.slot(Weekday.monday, FIRST) == CancelledSlot(reason="Prof absent", exception_id=20, original_entry_id=1)
    # The special event has no replacement, so the base lesson stays.
    assert grid.slot(Weekday.monday, SECOND) == BaseSlot(subject_id=4, teacher_id=10, entry_id=2)
    assert grid.slot(Weekday.tuesday, FIRST) == HolidaySlot(reason="Fête", exception_id=21)


def test_teacher_view(engine, monday):
    grid = engine.build_week(TeacherView(teacher_id=9), monday)

    assert isinstance(grid.slot(Weekday.monday, FIRST), CancelledSlot)
    assert isinstance(grid.slot(Weekday.tuesday, FIRST), HolidaySlot)


def test_resolve_single_slot_after_cutoff(engine):
    slot = TimeSlot(day=Weekday.monday, start=time(8, 0), end=time(10, 0))

    assert engine.resolve(ClassView(class_id=5), date(2024, 7, 15), slot) == EMPTY
    assert engine.resolve(ClassView(class_id=5), date(2024, 6, 24), slot) == BaseSlot(
        subject_id=3, teacher_id=9, entry_id=1
    )


def test_clamped_week_lands_on_last_school_week(engine):
    grid = engine.build_week(ClassView(class_id=5), date(2024, 8, 14), clamp=True)

    assert grid.week_start == date(2024, 6, 24)
    assert isinstance(grid.slot(Weekday.monday, FIRST), BaseSlot)


def test_academic_year_limits_entries_and_window(settings):
    year = AcademicYear(id=2, label="2024-2025", start=date(2024, 9, 2), end=date(2025, 7, 4))
    engine = TimetableEngine.from_records(BASE_RECORDS, [], [], academic_year=year, settings=settings)
    slot = TimeSlot(day=Weekday.monday, start=time(8, 0), end=time(10, 0))

    assert engine.window.opens_on == date(2024, 9, 2)
    assert engine.window.cutoff is None
    assert engine.resolve(ClassView(class_id=5), date(2024, 9, 9), slot) == EMPTY


def test_upcoming_session(settings):
    engine = TimetableEngine.from_records(
        BASE_RECORDS,
        [{"id": 30, "date_exception": "2024-01-08", "jour": "Lundi", "heure_debut": "10:15:00",
          "heure_fin": "12:00:00", "classe_id": 5, "type_exception": "remplacement_prof",
          "nouvelle_matiere_id": 4, "nouveau_professeur_id": 14}],
        TERM_RECORDS,
        settings=settings,
    )

    upcoming = engine.upcoming_session(ClassView(class_id=5), datetime(2024, 1, 8, 9, 30))

    assert isinstance(upcoming.slot, ModifiedSlot)
    assert upcoming.slot.teacher_id == 14


def test_strict_parsing_reports_bad_records(settings):
    broken = [dict(BASE_RECORDS[0], heure_debut="25:00:00")]

    with pytest.raises(InvalidRecordError):
        TimetableEngine.from_records(broken, [], [], settings=settings)

    engine = TimetableEngine.from_records(broken, [], [], settings=settings, strict=False)
    assert len(engine.base_index) == 0
