"""Menu library and weekly board operations."""

from dataclasses import dataclass, replace
from datetime import UTC, datetime
from uuid import uuid4

from morfi_plan.domain.errors import NotFoundError, ValidationFailedError
from morfi_plan.domain.models import (
    MEAL_TYPES,
    AppData,
    Assignment,
    DayOfWeek,
    MealType,
    Menu,
)
from morfi_plan.domain.planning import (
    CurrentDayMeal,
    NextMeal,
    WeekDay,
    current_day_meal,
    current_week_start,
    derive_shopping_list,
    next_meal,
    week_days,
)
from morfi_plan.services.store import DocumentStore


@dataclass(frozen=True)
class BoardSlot:
    """A cell of the weekly board."""

    day: WeekDay
    meal_type: MealType
    assignment: Assignment | None
    menu: Menu | None


@dataclass(frozen=True)
class Dashboard:
    """Everything the home view shows for the current week."""

    week_start: datetime
    slots: list[BoardSlot]
    next_meal: NextMeal | None
    current_meal: CurrentDayMeal | None
    shopping_list: list[str]


@dataclass
class PlannerService:
    """Application service for menus and assignments."""

    store: DocumentStore

    async def get_document(self) -> AppData:
        return await self.store.get_document()

    async def list_menus(self) -> list[Menu]:
        return await self.store.get_menus()

    async def create_menu(
        self, name: str, ingredients: list[str], image: str | None = None
    ) -> Menu:
        """Create a menu with a fresh id."""
        now = datetime.now(tz=UTC)
        menu = Menu(
            id=str(uuid4()),
            name=_require_name(name),
            ingredients=_clean_ingredients(ingredients),
            image=image or None,
            created_at=now,
            updated_at=now,
        )
        await self.store.add_menu(menu)
        return menu

    async def edit_menu(
        self,
        menu_id: str,
        name: str,
        ingredients: list[str],
        image: str | None = None,
    ) -> Menu:
        """Update a menu in place, keeping its id and creation time."""
        document = await self.store.get_document()
        existing = document.find_menu(menu_id)
        if existing is None:
            raise NotFoundError(menu_id)
        updated = replace(
            existing,
            name=_require_name(name),
            ingredients=_clean_ingredients(ingredients),
            image=image or None,
            updated_at=datetime.now(tz=UTC),
        )
        await self.store.update_menu(updated)
        return updated

    async def delete_menu(self, menu_id: str) -> list[Menu]:
        """Delete a menu together with its assignments."""
        return await self.store.delete_menu(menu_id)

    async def list_assignments(self, week_offset: int = 0) -> list[Assignment]:
        assignments = await self.store.get_assignments()
        return [item for item in assignments if item.week_offset == week_offset]

    async def assign(
        self,
        menu_id: str,
        day: DayOfWeek,
        meal_type: MealType,
        week_offset: int = 0,
    ) -> Assignment:
        """Place a menu in a slot, replacing any previous occupant."""
        assignment = Assignment(
            id=str(uuid4()),
            menu_id=menu_id,
            day=day,
            meal_type=meal_type,
            week_offset=week_offset,
            created_at=datetime.now(tz=UTC),
        )
        await self.store.add_assignment(assignment)
        return assignment

    async def unassign(self, assignment_id: str) -> list[Assignment]:
        return await self.store.remove_assignment(assignment_id)

    async def shopping_list(self) -> list[str]:
        """Return the shopping list for the current week."""
        document = await self.store.get_document()
        return derive_shopping_list(
            document.menus, document.current_week_assignments()
        )

    async def dashboard(self, now: datetime) -> Dashboard:
        """Build the current-week view for a local ``now``."""
        document = await self.store.get_document()
        assignments = document.current_week_assignments()
        start = current_week_start(now)
        slots = []
        for week_day in week_days(start):
            for meal_type in MEAL_TYPES:
                assignment = next(
                    (
                        item
                        for item in assignments
                        if item.day == week_day.day and item.meal_type == meal_type
                    ),
                    None,
                )
                menu = document.find_menu(assignment.menu_id) if assignment else None
                slots.append(
                    BoardSlot(
                        day=week_day,
                        meal_type=meal_type,
                        assignment=assignment,
                        menu=menu,
                    )
                )
        return Dashboard(
            week_start=start,
            slots=slots,
            next_meal=next_meal(assignments, document.menus, now),
            current_meal=current_day_meal(assignments, document.menus, now),
            shopping_list=derive_shopping_list(document.menus, assignments),
        )


def _require_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise ValidationFailedError("El nombre del menú es obligatorio")
    return cleaned


def _clean_ingredients(ingredients: list[str]) -> list[str]:
    return [item.strip() for item in ingredients if item.strip()]
