"""Pure derivations over menus and assignments."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta

from morfi_plan.domain.models import (
    MEAL_TYPES,
    WEEK_DAYS,
    Assignment,
    DayOfWeek,
    MealType,
    Menu,
)

LUNCH_CUTOFF_HOUR = 14
DINNER_CUTOFF_HOUR = 21
CURRENT_MEAL_SWITCH_HOUR = 12


@dataclass(frozen=True)
class NextMeal:
    """The next assigned slot, with its menu when it still exists."""

    assignment: Assignment
    menu: Menu | None
    day: DayOfWeek
    meal_type: MealType


@dataclass(frozen=True)
class CurrentDayMeal:
    """Today's relevant meal slot."""

    menu: Menu | None
    day: DayOfWeek
    meal_type: MealType
    label: str


@dataclass(frozen=True)
class WeekDay:
    """One column of the weekly board."""

    day: DayOfWeek
    label: str
    full_label: str
    date: datetime


def derive_shopping_list(
    menus: Iterable[Menu], assignments: Iterable[Assignment]
) -> list[str]:
    """Return the sorted, de-duplicated ingredients of the assigned menus."""
    by_id = {menu.id: menu for menu in menus}
    ingredients: set[str] = set()
    for assignment in assignments:
        menu = by_id.get(assignment.menu_id)
        if menu is None:
            continue
        ingredients.update(item.lower().strip() for item in menu.ingredients)
    return sorted(ingredients)


def next_meal(
    assignments: list[Assignment], menus: list[Menu], now: datetime
) -> NextMeal | None:
    """Find the next assigned slot from ``now`` (local time).

    Today's remaining slots are checked first, then each other weekday once in
    week order starting after today. Today is never revisited, so slots that
    already passed today are not reported as next week's meal.
    """
    weekday = now.weekday()
    if weekday >= len(WEEK_DAYS):
        return None
    today = WEEK_DAYS[weekday]
    is_lunch_time = now.hour < LUNCH_CUTOFF_HOUR
    is_dinner_time = LUNCH_CUTOFF_HOUR <= now.hour < DINNER_CUTOFF_HOUR

    if is_lunch_time:
        found = _lookup(assignments, menus, today, MealType.LUNCH)
        if found:
            return found
    if is_lunch_time or is_dinner_time:
        found = _lookup(assignments, menus, today, MealType.DINNER)
        if found:
            return found

    for step in range(1, len(WEEK_DAYS)):
        day = WEEK_DAYS[(weekday + step) % len(WEEK_DAYS)]
        for meal_type in MEAL_TYPES:
            found = _lookup(assignments, menus, day, meal_type)
            if found:
                return found
    return None


def current_day_meal(
    assignments: list[Assignment], menus: list[Menu], now: datetime
) -> CurrentDayMeal | None:
    """Return today's lunch before noon and dinner afterwards; None on weekends."""
    weekday = now.weekday()
    if weekday >= len(WEEK_DAYS):
        return None
    day = WEEK_DAYS[weekday]
    meal_type = (
        MealType.LUNCH if now.hour < CURRENT_MEAL_SWITCH_HOUR else MealType.DINNER
    )
    assignment = _find_assignment(assignments, day, meal_type)
    menu = None
    if assignment is not None:
        menu = next((m for m in menus if m.id == assignment.menu_id), None)
    return CurrentDayMeal(
        menu=menu,
        day=day,
        meal_type=meal_type,
        label=f"{meal_type.label} de hoy",
    )


def current_week_start(now: datetime) -> datetime:
    """Return local midnight of the Monday of the week containing ``now``."""
    monday = now - timedelta(days=now.weekday())
    return monday.replace(hour=0, minute=0, second=0, microsecond=0)


def week_days(week_start: datetime) -> list[WeekDay]:
    """Enumerate Monday through Friday starting at ``week_start``."""
    return [
        WeekDay(
            day=day,
            label=day.label,
            full_label=day.full_label,
            date=week_start + timedelta(days=index),
        )
        for index, day in enumerate(WEEK_DAYS)
    ]


def _find_assignment(
    assignments: list[Assignment], day: DayOfWeek, meal_type: MealType
) -> Assignment | None:
    return next(
        (a for a in assignments if a.day == day and a.meal_type == meal_type),
        None,
    )


def _lookup(
    assignments: list[Assignment],
    menus: list[Menu],
    day: DayOfWeek,
    meal_type: MealType,
) -> NextMeal | None:
    assignment = _find_assignment(assignments, day, meal_type)
    if assignment is None:
        return None
    menu = next((m for m in menus if m.id == assignment.menu_id), None)
    return NextMeal(assignment=assignment, menu=menu, day=day, meal_type=meal_type)
