"""SnapshotStore – hält den aktuellen AppState und persistiert ihn.

Jede Operation liest einen Snapshot, berechnet den Nachfolger und übergibt ihn
komplett per commit(). Der Store wendet nie selbst Teil-Änderungen an.
"""

import logging
from pathlib import Path
from typing import Optional, Protocol

from pydantic import ValidationError

from config.defaults import DEFAULT_CAPACITY
from models.app_state import AppState, default_state

logger = logging.getLogger(__name__)


class StateStorage(Protocol):
    """Speicherplatz für genau einen serialisierten Snapshot."""

    def load(self) -> Optional[str]: ...

    def save(self, payload: str) -> None: ...


class JsonFileStorage:
    """Snapshot als JSON-Datei auf der Platte."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> Optional[str]:
        if not self.path.exists():
            return None
        with open(self.path, "r", encoding="utf-8") as f:
            return f.read()

    def save(self, payload: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            f.write(payload)

    def __repr__(self) -> str:
        return f"JsonFileStorage({self.path})"


class MemoryStorage:
    """Snapshot im Speicher (Tests, Einbettung)."""

    def __init__(self, payload: Optional[str] = None) -> None:
        self.payload = payload
        self.saves = 0

    def load(self) -> Optional[str]:
        return self.payload

    def save(self, payload: str) -> None:
        self.payload = payload
        self.saves += 1


class SnapshotStore:
    """Besitzt den einzigen AppState der Anwendung."""

    def __init__(self, storage: StateStorage,
                 default_capacity: int = DEFAULT_CAPACITY) -> None:
        self._storage = storage
        # Kapazität für add_route ohne Angabe; der Seed bleibt bei DEFAULT_CAPACITY
        self.default_capacity = default_capacity
        # True, wenn ein defekter Speicherstand verworfen wurde
        self.recovered = False
        self._state = self._rehydrate()

    def read(self) -> AppState:
        """Aktueller Snapshot. Modelle sind frozen, das Routen-Dict wird kopiert."""
        return self._state.model_copy(update={"routes": dict(self._state.routes)})

    def commit(self, new_state: AppState) -> None:
        """Ersetzt den Snapshot vollständig und persistiert ihn."""
        self._state = new_state
        self._persist()

    # ─── Persistenz ───

    def _rehydrate(self) -> AppState:
        try:
            payload = self._storage.load()
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Speicherstand nicht lesbar ({e}) – starte mit Standard-Routen")
            self.recovered = True
            return default_state()

        if payload is None:
            logger.info("Kein Speicherstand gefunden – lege Standard-Routen an")
            state = default_state()
            self._state = state
            self._persist()
            return state

        try:
            return AppState.from_json(payload)
        except (ValidationError, ValueError) as e:
            logger.warning(
                f"Speicherstand defekt – starte mit Standard-Routen: {e}"
            )
            self.recovered = True
            return default_state()

    def _persist(self) -> None:
        try:
            self._storage.save(self._state.to_json())
        except OSError as e:
            logger.error(f"Snapshot konnte nicht gespeichert werden: {e}")
