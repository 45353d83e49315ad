"""RegistrationEngine – bündelt Store und die drei Dienste über einem Snapshot."""

from pathlib import Path
from typing import Optional

from config.defaults import DEFAULT_CAPACITY
from config.schema import AppConfig
from engine.clarifications import ClarificationRegistry
from engine.registration import RegistrationService
from engine.routes import RouteRegistry
from engine.store import JsonFileStorage, MemoryStorage, SnapshotStore, StateStorage
from models.app_state import AppState


class RegistrationEngine:
    """Einstiegspunkt für CLI und Tests."""

    def __init__(self, storage: Optional[StateStorage] = None,
                 default_capacity: int = DEFAULT_CAPACITY) -> None:
        self.store = SnapshotStore(storage or MemoryStorage(), default_capacity)
        self.registration = RegistrationService(self.store)
        self.routes = RouteRegistry(self.store)
        self.clarifications = ClarificationRegistry(self.store)

    @classmethod
    def from_config(cls, config: AppConfig) -> "RegistrationEngine":
        return cls(JsonFileStorage(Path(config.storage_path)), config.default_capacity)

    @property
    def state(self) -> AppState:
        return self.store.read()

    def __repr__(self) -> str:
        state = self.state
        return (
            f"RegistrationEngine({len(state.routes)} Routen, "
            f"{len(state.students)} Anmeldungen)"
        )
