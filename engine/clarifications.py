"""Klärungsfälle: Sperrliste für die Selbstanmeldung."""

import logging
import uuid
from datetime import datetime, timezone
from typing import Optional

from engine.outcomes import Rejection
from engine.store import SnapshotStore
from models.clarification import Clarification

logger = logging.getLogger(__name__)


class ClarificationRegistry:
    """Verwaltet Klärungsfälle. Neue Einträge stehen vorne."""

    def __init__(self, store: SnapshotStore) -> None:
        self._store = store

    def add_clarification(self, name: str, last_name: str, code: str,
                          phone: str = "", reason: str = "") -> Clarification:
        entry = Clarification(
            id=str(uuid.uuid4()),
            name=name,
            last_name=last_name,
            code=code,
            phone=phone,
            reason=reason,
            timestamp=datetime.now(timezone.utc),
        )
        state = self._store.read()
        self._store.commit(state.model_copy(update={
            "clarifications": (entry,) + state.clarifications,
        }))
        logger.info(f"Klärungsfall für Code {code} angelegt")
        return entry

    def delete_clarification(self, clarification_id: str) -> Optional[Rejection]:
        state = self._store.read()
        remaining = tuple(c for c in state.clarifications if c.id != clarification_id)
        if len(remaining) == len(state.clarifications):
            return Rejection.NOT_FOUND
        self._store.commit(state.model_copy(update={"clarifications": remaining}))
        return None

    def is_code_blocked(self, code: str) -> bool:
        return any(c.code == code for c in self._store.read().clarifications)

    def list_clarifications(self) -> list[Clarification]:
        return list(self._store.read().clarifications)
