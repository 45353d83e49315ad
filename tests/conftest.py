import pytest

from engine.core import RegistrationEngine
from engine.store import MemoryStorage


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def engine(storage: MemoryStorage) -> RegistrationEngine:
    """Frische Engine mit den fünf Standard-Routen."""
    return RegistrationEngine(storage)
