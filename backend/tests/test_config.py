import logging
from datetime import time

import pytest

from schedule_engine.core.config import Settings, load_settings
from schedule_engine.core.exceptions import AppError, ConfigurationError
from schedule_engine.core.logging import configure_logging
from schedule_engine.schemas.schedule import TimeRange, Weekday


def test_defaults_describe_the_school_week(settings):
    assert settings.workdays == list(Weekday)
    assert [item.label for item in settings.time_slots] == ["08:00-10:00", "10:15-12:00", "12:15-14:00"]
    assert settings.final_term_marker == "3"
    assert settings.all_day_range == TimeRange(start=time(0, 0), end=time(23, 59, 59))


def test_env_values_accept_comma_and_json_lists(monkeypatch):
    monkeypatch.setenv("SCHEDULE_WORKDAYS", "Lundi, Mardi,Wednesday")
    monkeypatch.setenv("SCHEDULE_TIME_SLOTS", '["10:00-12:00", "08:00-10:00"]')
    monkeypatch.setenv("SCHEDULE_FINAL_TERM_MARKER", "2")

    settings = Settings(_env_file=None)

    assert settings.workdays == [Weekday.monday, Weekday.tuesday, Weekday.wednesday]
    # Slots are kept in chronological order.
    assert [item.label for item in settings.time_slots] == ["08:00-10:00", "10:00-12:00"]
    assert settings.final_term_marker == "2"


@pytest.mark.parametrize(
    "overrides",
    [
        {"workdays": ["Monday", "Sunday"]},
        {"workdays": ["Monday", "Monday"]},
        {"workdays": []},
        {"time_slots": []},
        {"time_slots": ["08:00-10:00", "09:00-11:00"]},
        {"time_slots": ["10:00-08:00"]},
        {"time_slots": ["0800/1000"]},
        {"all_day_start": "12:00", "all_day_end": "06:00"},
    ],
)
def test_invalid_configuration_raises(overrides):
    with pytest.raises(ConfigurationError) as exc_info:
        load_settings(_env_file=None, **overrides)

    assert isinstance(exc_info.value, AppError)
    assert exc_info.value.status_code == 500
    assert exc_info.value.details["errors"]


def test_configure_logging_attaches_one_handler():
    package_logger = logging.getLogger("schedule_engine")
    try:
        configure_logging("debug")
        configure_logging("DEBUG")

        ours = [handler for handler in package_logger.handlers if getattr(handler, "_schedule_engine", False)]
        assert len(ours) == 1
        assert package_logger.level == logging.DEBUG
    finally:
        for handler in list(package_logger.handlers):
            if getattr(handler, "_schedule_engine", False):
                package_logger.removeHandler(handler)
        package_logger.setLevel(logging.NOTSET)
