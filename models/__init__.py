from models.student import Student, StudentInput, StudentStatus
from models.route import RouteConfig, slugify
from models.clarification import Clarification
from models.app_state import AppState, default_routes, default_state

__all__ = [
    "Student",
    "StudentInput",
    "StudentStatus",
    "RouteConfig",
    "slugify",
    "Clarification",
    "AppState",
    "default_routes",
    "default_state",
]
