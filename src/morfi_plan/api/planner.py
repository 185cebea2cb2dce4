"""Menu library, assignment board and dashboard endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request

from morfi_plan.api.models import AssignmentPayload, MenuPayload
from morfi_plan.domain.document import dump_app_data, dump_assignment, dump_menu
from morfi_plan.domain.models import UNKNOWN_MENU_NAME

if TYPE_CHECKING:
    from morfi_plan.containers import AppContainer
    from morfi_plan.services.planner import BoardSlot, Dashboard

router = APIRouter(prefix="/api", tags=["planner"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


@router.get("/data")
async def get_data(request: Request) -> dict[str, object]:
    """Return the whole application document."""
    document = await _container(request).planner_service.get_document()
    return dump_app_data(document)


@router.get("/dashboard")
async def dashboard(request: Request) -> dict[str, object]:
    """Return the current week's board, next meal and shopping list."""
    container = _container(request)
    now = datetime.now(tz=container.timezone)
    return _format_dashboard(await container.planner_service.dashboard(now))


@router.get("/shopping-list")
async def shopping_list(request: Request) -> dict[str, object]:
    items = await _container(request).planner_service.shopping_list()
    return {"items": items}


@router.get("/menus")
async def list_menus(request: Request) -> dict[str, object]:
    menus = await _container(request).planner_service.list_menus()
    return {"menus": [dump_menu(menu) for menu in menus]}


@router.post("/menus", status_code=201)
async def create_menu(payload: MenuPayload, request: Request) -> dict[str, object]:
    """Add a menu to the library."""
    menu = await _container(request).planner_service.create_menu(
        payload.name, payload.ingredients, payload.image
    )
    return dump_menu(menu)


@router.put("/menus/{menu_id}")
async def edit_menu(
    menu_id: str, payload: MenuPayload, request: Request
) -> dict[str, object]:
    """Edit a menu, keeping its id and creation time."""
    menu = await _container(request).planner_service.edit_menu(
        menu_id, payload.name, payload.ingredients, payload.image
    )
    return dump_menu(menu)


@router.delete("/menus/{menu_id}")
async def delete_menu(menu_id: str, request: Request) -> dict[str, object]:
    """Delete a menu and the assignments that use it."""
    menus = await _container(request).planner_service.delete_menu(menu_id)
    return {"menus": [dump_menu(menu) for menu in menus]}


@router.get("/assignments")
async def list_assignments(
    request: Request, week_offset: int = 0
) -> dict[str, object]:
    assignments = await _container(request).planner_service.list_assignments(
        week_offset
    )
    return {"assignments": [dump_assignment(item) for item in assignments]}


@router.post("/assignments", status_code=201)
async def assign(payload: AssignmentPayload, request: Request) -> dict[str, object]:
    """Assign a menu to a slot, replacing the previous occupant."""
    assignment = await _container(request).planner_service.assign(
        payload.menu_id, payload.day, payload.meal_type, payload.week_offset
    )
    return dump_assignment(assignment)


@router.delete("/assignments/{assignment_id}")
async def unassign(assignment_id: str, request: Request) -> dict[str, object]:
    assignments = await _container(request).planner_service.unassign(assignment_id)
    return {"assignments": [dump_assignment(item) for item in assignments]}


def _format_dashboard(dashboard: Dashboard) -> dict[str, object]:
    """Render the dashboard as JSON-friendly data."""
    next_meal = None
    if dashboard.next_meal:
        next_meal = {
            "day": dashboard.next_meal.day.value,
            "dayLabel": dashboard.next_meal.day.full_label,
            "mealType": dashboard.next_meal.meal_type.value,
            "mealLabel": dashboard.next_meal.meal_type.label,
            "assignment": dump_assignment(dashboard.next_meal.assignment),
            "menu": dump_menu(dashboard.next_meal.menu)
            if dashboard.next_meal.menu
            else None,
        }
    current_meal = None
    if dashboard.current_meal:
        current_meal = {
            "day": dashboard.current_meal.day.value,
            "mealType": dashboard.current_meal.meal_type.value,
            "label": dashboard.current_meal.label,
            "menu": dump_menu(dashboard.current_meal.menu)
            if dashboard.current_meal.menu
            else None,
        }
    return {
        "weekStart": dashboard.week_start.date().isoformat(),
        "slots": [
            {
                "day": slot.day.day.value,
                "label": slot.day.label,
                "fullLabel": slot.day.full_label,
                "date": slot.day.date.date().isoformat(),
                "mealType": slot.meal_type.value,
                "assignmentId": slot.assignment.id if slot.assignment else None,
                "menuId": slot.assignment.menu_id if slot.assignment else None,
                "menuName": _menu_name(slot),
            }
            for slot in dashboard.slots
        ],
        "nextMeal": next_meal,
        "currentMeal": current_meal,
        "shoppingList": dashboard.shopping_list,
    }


def _menu_name(slot: BoardSlot) -> str | None:
    if slot.menu:
        return slot.menu.name
    return UNKNOWN_MENU_NAME if slot.assignment else None
