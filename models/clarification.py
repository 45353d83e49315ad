"""Datenmodell für einen Klärungsfall (Pydantic v2)."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class Clarification(BaseModel):
    """Sperrt einen Code für die Selbstanmeldung, bis der Fall geklärt ist.

    Mit Student ist nur über den Code verbunden; mehrere Einträge pro Code
    sind erlaubt.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    last_name: str
    code: str
    phone: str = ""
    reason: str = ""
    timestamp: datetime
