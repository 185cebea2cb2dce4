"""Pydantic models for API request bodies."""

from pydantic import BaseModel, ConfigDict, Field

from morfi_plan.domain.models import DayOfWeek, MealType, SendDay


class MenuPayload(BaseModel):
    """Menu create/edit payload."""

    name: str
    ingredients: list[str] = Field(default_factory=list)
    image: str | None = None


class AssignmentPayload(BaseModel):
    """Assignment payload."""

    model_config = ConfigDict(populate_by_name=True)

    menu_id: str = Field(alias="menuId")
    day: DayOfWeek
    meal_type: MealType = Field(alias="mealType")
    week_offset: int = Field(default=0, alias="weekOffset")


class ConfigPayload(BaseModel):
    """Full configuration payload; ``sendHour`` is UTC unless flagged local."""

    model_config = ConfigDict(populate_by_name=True)

    emails: list[str]
    send_day: SendDay = Field(alias="sendDay")
    send_hour: int = Field(alias="sendHour")
    hour_is_local: bool = Field(default=False, alias="hourIsLocal")


class EmailPayload(BaseModel):
    """Single recipient payload."""

    email: str
