"""Anmelde-Engine: Snapshot-Store, Anmeldungen, Routen, Klärungsfälle."""

from .outcomes import Rejection, RegistrationResult, RouteResult
from .store import JsonFileStorage, MemoryStorage, SnapshotStore, StateStorage
from .registration import RegistrationService
from .routes import RouteRegistry
from .clarifications import ClarificationRegistry
from .core import RegistrationEngine

__all__ = [
    "Rejection",
    "RegistrationResult",
    "RouteResult",
    "JsonFileStorage",
    "MemoryStorage",
    "SnapshotStore",
    "StateStorage",
    "RegistrationService",
    "RouteRegistry",
    "ClarificationRegistry",
    "RegistrationEngine",
]
