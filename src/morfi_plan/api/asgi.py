"""ASGI entrypoint for the meal planner API."""

from morfi_plan.api.app import create_app
from morfi_plan.containers import build_container

app = create_app(build_container())
