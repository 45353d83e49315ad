"""Ergebnis-Typen: Ablehnungen sind Werte, keine Exceptions."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from models.route import RouteConfig
from models.student import Student


class Rejection(str, Enum):
    CODE_BLOCKED = "code_blocked"
    CODE_TAKEN = "code_taken"
    ROUTE_INACTIVE = "route_inactive"
    ROUTE_FULL = "route_full"
    ROUTE_HAS_STUDENTS = "route_has_students"
    ROUTE_EXISTS = "route_exists"
    ROUTE_NOT_FOUND = "route_not_found"
    NOT_FOUND = "not_found"
    INVALID_ORDER = "invalid_order"
    INVALID_NAME = "invalid_name"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES: dict[Rejection, str] = {
    Rejection.CODE_BLOCKED: "Dieser Code ist gesperrt – bitte bei der Verwaltung melden.",
    Rejection.CODE_TAKEN: "Dieser Code ist bereits angemeldet.",
    Rejection.ROUTE_INACTIVE: "Die Route ist derzeit nicht aktiv.",
    Rejection.ROUTE_FULL: "Die Route ist ausgebucht.",
    Rejection.ROUTE_HAS_STUDENTS: "Die Route hat noch Anmeldungen und kann nicht gelöscht werden.",
    Rejection.ROUTE_EXISTS: "Eine Route mit diesem Namen existiert bereits.",
    Rejection.ROUTE_NOT_FOUND: "Unbekannte Route.",
    Rejection.NOT_FOUND: "Eintrag nicht gefunden.",
    Rejection.INVALID_ORDER: "Ungültige Position.",
    Rejection.INVALID_NAME: "Der Routenname darf nicht leer sein.",
}


class RegistrationResult(BaseModel):
    """Angenommene Anmeldung oder Ablehnungsgrund."""

    student: Optional[Student] = None
    rejection: Optional[Rejection] = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None

    @classmethod
    def admit(cls, student: Student) -> "RegistrationResult":
        return cls(student=student)

    @classmethod
    def reject(cls, reason: Rejection) -> "RegistrationResult":
        return cls(rejection=reason)


class RouteResult(BaseModel):
    """Neu angelegte Route oder Ablehnungsgrund."""

    route: Optional[RouteConfig] = None
    rejection: Optional[Rejection] = None

    @property
    def accepted(self) -> bool:
        return self.rejection is None
