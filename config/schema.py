from pathlib import Path

from pydantic import BaseModel, Field, field_validator


_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class AppConfig(BaseModel):
    """Anwendungskonfiguration (Speicherort, Export, Defaults)."""
    # Pfad der JSON-Datei mit dem persistierten Snapshot
    storage_path: Path = Field(Path("data/bus_registration_state.json"),
        description="Speicherort des Snapshots")
    # Zielverzeichnis für PDF- und Excel-Listen
    export_dir: Path = Field(Path("output"),
        description="Zielverzeichnis für Exporte")
    # Kapazität neuer Routen, wenn nichts angegeben wird
    default_capacity: int = Field(50, ge=0,
        description="Standard-Kapazität neuer Routen")
    # Log-Level für die CLI
    log_level: str = Field("INFO",
        description="Log-Level (DEBUG, INFO, WARNING, ERROR)")

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"Unbekanntes Log-Level: {v}")
        return level
