"""Domain models for the meal planner."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum


class DayOfWeek(StrEnum):
    """Weekdays that can hold meal assignments."""

    MONDAY = "lunes"
    TUESDAY = "martes"
    WEDNESDAY = "miercoles"
    THURSDAY = "jueves"
    FRIDAY = "viernes"

    @property
    def label(self) -> str:
        return _DAY_LABELS[self][0]

    @property
    def full_label(self) -> str:
        return _DAY_LABELS[self][1]


class MealType(StrEnum):
    """Meal slots within a day."""

    LUNCH = "almuerzo"
    DINNER = "cena"

    @property
    def label(self) -> str:
        return "Almuerzo" if self is MealType.LUNCH else "Cena"


class SendDay(StrEnum):
    """Days of the week on which the digest may be sent."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @property
    def weekday(self) -> int:
        """Return the ``datetime.weekday()`` index for this day."""
        return list(SendDay).index(self)


_DAY_LABELS: dict[DayOfWeek, tuple[str, str]] = {
    DayOfWeek.MONDAY: ("Lun", "Lunes"),
    DayOfWeek.TUESDAY: ("Mar", "Martes"),
    DayOfWeek.WEDNESDAY: ("Mié", "Miércoles"),
    DayOfWeek.THURSDAY: ("Jue", "Jueves"),
    DayOfWeek.FRIDAY: ("Vie", "Viernes"),
}

WEEK_DAYS: tuple[DayOfWeek, ...] = tuple(DayOfWeek)
MEAL_TYPES: tuple[MealType, ...] = (MealType.LUNCH, MealType.DINNER)
DEFAULT_SEND_HOUR_UTC = 12
UNKNOWN_MENU_NAME = "Menú desconocido"


@dataclass(frozen=True)
class Menu:
    """A reusable meal definition."""

    id: str
    name: str
    ingredients: list[str]
    image: str | None
    created_at: datetime | None
    updated_at: datetime | None


@dataclass(frozen=True)
class Assignment:
    """A menu placed into a (day, meal type, week offset) slot."""

    id: str
    menu_id: str
    day: DayOfWeek
    meal_type: MealType
    week_offset: int
    created_at: datetime | None

    @property
    def slot(self) -> tuple[DayOfWeek, MealType, int]:
        return (self.day, self.meal_type, self.week_offset)


@dataclass(frozen=True)
class AppConfig:
    """Notification settings. ``send_hour`` is stored in UTC."""

    emails: list[str]
    send_day: SendDay
    send_hour: int
    utc_migrated: bool = False


@dataclass
class AppData:
    """The single application document holding every collection."""

    menus: list[Menu] = field(default_factory=list)
    assignments: list[Assignment] = field(default_factory=list)
    config: AppConfig = field(
        default_factory=lambda: AppConfig(
            emails=[""],
            send_day=SendDay.SUNDAY,
            send_hour=DEFAULT_SEND_HOUR_UTC,
            utc_migrated=True,
        )
    )

    def find_menu(self, menu_id: str) -> Menu | None:
        """Return the menu with the given id, if present."""
        return next((menu for menu in self.menus if menu.id == menu_id), None)

    def current_week_assignments(self) -> list[Assignment]:
        """Return assignments for the current week (offset 0)."""
        return [item for item in self.assignments if item.week_offset == 0]


def default_app_data() -> AppData:
    """Return the document used when nothing is stored anywhere."""
    return AppData()
