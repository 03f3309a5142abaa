from schedule_engine.schemas.resolution import (  # noqa: F401
    EMPTY,
    BaseSlot,
    CancelledSlot,
    EmptySlot,
    GridCell,
    HolidaySlot,
    ModifiedSlot,
    ResolvedSlot,
    WeekGrid,
)
from schedule_engine.schemas.schedule import (  # noqa: F401
    AcademicYear,
    BaseScheduleEntry,
    ClassView,
    ExceptionKind,
    ScheduleException,
    TeacherView,
    Term,
    TimeRange,
    TimeSlot,
    Weekday,
)
from schedule_engine.services.engine import TimetableEngine  # noqa: F401
