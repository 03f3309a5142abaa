from __future__ import annotations

from datetime import date, timedelta

from schedule_engine.services.term_cutoff import AcademicWindow

ONE_WEEK = timedelta(days=7)


def week_start_for(day: date) -> date:
    """Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


def week_end_for(day: date) -> date:
    return week_start_for(day) + timedelta(days=6)


def clamp_week_start(week_start: date, window: AcademicWindow) -> date:
    """Pull a week that lies wholly outside the academic window back inside it.

    A week starting after the cutoff snaps to the cutoff's week; a week ending
    before the year opens snaps to the year's first week.
    """
    week_start = week_start_for(week_start)
    if window.cutoff is not None and week_start > window.cutoff:
        return week_start_for(window.cutoff)
    if window.opens_on is not None and week_start + timedelta(days=6) < window.opens_on:
        return week_start_for(window.opens_on)
    return week_start


def next_week(week_start: date, window: AcademicWindow) -> date | None:
    candidate = week_start_for(week_start) + ONE_WEEK
    if window.cutoff is not None and candidate > window.cutoff:
        return None
    return candidate


def previous_week(week_start: date, window: AcademicWindow) -> date | None:
    candidate = week_start_for(week_start) - ONE_WEEK
    if window.opens_on is not None and candidate + timedelta(days=6) < window.opens_on:
        return None
    return candidate
