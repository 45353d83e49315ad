"""Datenmodell für eine Buslinie (Pydantic v2)."""

import re

from pydantic import BaseModel, ConfigDict, Field


class RouteConfig(BaseModel):
    """Konfiguration einer Route."""

    model_config = ConfigDict(frozen=True)

    id: str                          # "puente-piedra", unveränderlich
    name: str = Field(min_length=1)  # Anzeigename, eindeutig
    subtitle: str = ""
    is_active: bool = True
    capacity: int = Field(ge=0)
    order: int = Field(ge=0)         # 0..N-1, lückenlos
    color: str
    last_ticket_number: int = Field(0, ge=0)  # höchste je vergebene Ticketnummer


def slugify(name: str) -> str:
    """'Puente Piedra' → 'puente-piedra'."""
    return re.sub(r"\s+", "-", name.strip().lower())
