from datetime import time
from functools import lru_cache
import json
from pathlib import Path
from typing import Annotated

from pydantic import ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from schedule_engine.core.exceptions import ConfigurationError
from schedule_engine.schemas.schedule import CANONICAL_TIME_RANGES, SCHOOL_WEEK, TimeRange, Weekday


BACKEND_ENV_FILE = Path(__file__).resolve().parents[2] / ".env"


def _split_list(value: str) -> list[str]:
    stripped = value.strip()
    if stripped.startswith("["):
        try:
            parsed = json.loads(stripped)
            if isinstance(parsed, list):
                return [str(item).strip() for item in parsed if str(item).strip()]
        except json.JSONDecodeError:
            pass
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    # Resolve to backend/.env so the engine picks up the same file from any cwd.
    model_config = SettingsConfigDict(
        env_prefix="SCHEDULE_",
        env_file=str(BACKEND_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    workdays: Annotated[list[Weekday], NoDecode] = list(SCHOOL_WEEK)
    time_slots: Annotated[list[TimeRange], NoDecode] = list(CANONICAL_TIME_RANGES)

    # Term labelled with this marker ("Trimestre 3") closes the academic year.
    final_term_marker: str = "3"

    # Exceptions spanning this range cover every slot of their date.
    all_day_start: time = time(0, 0)
    all_day_end: time = time(23, 59, 59)

    log_level: str = "INFO"

    @field_validator("workdays", mode="before")
    @classmethod
    def split_workdays(cls, value: str | list) -> list:
        if isinstance(value, str):
            value = _split_list(value)
        return [Weekday.parse(item) for item in value]

    @field_validator("time_slots", mode="before")
    @classmethod
    def split_time_slots(cls, value: str | list) -> list:
        if isinstance(value, str):
            value = _split_list(value)
        return [TimeRange.parse(item) if isinstance(item, str) else item for item in value]

    @model_validator(mode="after")
    def validate_grid_shape(self) -> "Settings":
        if not self.workdays:
            raise ValueError("At least one workday is required")
        if len(set(self.workdays)) != len(self.workdays):
            raise ValueError("Workdays must not repeat")
        if not self.time_slots:
            raise ValueError("At least one time slot is required")
        ordered = sorted(self.time_slots, key=lambda item: item.start)
        for previous, current in zip(ordered, ordered[1:]):
            if current.start < previous.end:
                raise ValueError(f"Time slots {previous.label} and {current.label} overlap")
        self.time_slots = ordered
        if self.all_day_end <= self.all_day_start:
            raise ValueError("all_day_end must be later than all_day_start")
        return self

    @property
    def all_day_range(self) -> TimeRange:
        return TimeRange(start=self.all_day_start, end=self.all_day_end)


def load_settings(**overrides) -> Settings:
    try:
        return Settings(**overrides)
    except ValidationError as exc:
        raise ConfigurationError(
            "Invalid schedule engine configuration",
            details={"errors": exc.errors(include_url=False, include_context=False)},
        ) from exc


@lru_cache
def get_settings() -> Settings:
    return load_settings()
