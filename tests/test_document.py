"""Tests for reading and writing the stored JSON document."""

from datetime import UTC, datetime

from morfi_plan.domain.document import dump_menu, format_timestamp, parse_app_data


def test_offset_less_timestamps_are_read_as_utc() -> None:
    payload = {
        "menus": [
            {
                "id": "m1",
                "name": "Guiso",
                "ingredients": [],
                "createdAt": "2024-03-01T10:00:00",
                "updatedAt": "2024-03-01T10:00:00.000Z",
            }
        ]
    }

    menu = parse_app_data(payload).menus[0]

    assert menu.created_at == datetime(2024, 3, 1, 10, 0, tzinfo=UTC)
    assert dump_menu(menu)["createdAt"] == "2024-03-01T10:00:00.000Z"
    assert dump_menu(menu)["updatedAt"] == "2024-03-01T10:00:00.000Z"


def test_naive_datetime_is_formatted_as_utc() -> None:
    assert format_timestamp(datetime(2024, 3, 1, 10, 0)) == "2024-03-01T10:00:00.000Z"


def test_null_text_fields_become_empty_strings() -> None:
    payload = {
        "menus": [{"id": None, "name": None, "ingredients": ["pan"]}],
        "assignments": [
            {"id": None, "menuId": None, "day": "lunes", "mealType": "cena"}
        ],
    }

    document = parse_app_data(payload)

    assert document.menus[0].id == ""
    assert document.menus[0].name == ""
    assert document.assignments[0].id == ""
    assert document.assignments[0].menu_id == ""
