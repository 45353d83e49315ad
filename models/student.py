"""Datenmodell für eine Anmeldung (Pydantic v2)."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config.defaults import FACULTIES


class StudentStatus(str, Enum):
    PENDING = "pending"
    BOARDED = "boarded"
    NO_SHOW = "no-show"


class StudentInput(BaseModel):
    """Formulardaten einer Anmeldung, bevor Ticket und ID vergeben sind."""

    name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    code: str = Field(min_length=1)     # Matrikelnummer, exakter Vergleich
    faculty: str
    route: str                          # Anzeigename der Route
    phone: str = ""

    @field_validator("faculty")
    @classmethod
    def check_faculty(cls, v: str) -> str:
        if v not in FACULTIES:
            raise ValueError(f"Unbekannte Fakultät: {v}")
        return v


class Student(BaseModel):
    """Eine angenommene Anmeldung auf einer Route."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    last_name: str
    code: str
    faculty: str
    route_id: str                # RouteConfig.id, nicht der Anzeigename
    phone: str = ""
    ticket_number: int = Field(ge=1)
    status: StudentStatus = StudentStatus.PENDING
    timestamp: datetime

    @property
    def full_name(self) -> str:
        return f"{self.name} {self.last_name}"

    def matches(self, term: str) -> bool:
        """Teilstring-Suche (ohne Groß-/Kleinschreibung) über Name, Code, Telefon."""
        term = term.lower()
        return any(
            term in value.lower()
            for value in (self.name, self.last_name, self.code, self.phone)
        )
