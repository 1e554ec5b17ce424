"""Pytest fixtures for testing."""
import os
from datetime import UTC, datetime, timedelta

# Simulated round trips are instant in tests. Must be set before any import
# that triggers Settings validation.
os.environ.setdefault("NOTE_STORE_LATENCY_SECONDS", "0")
os.environ.setdefault("CATALOG_LATENCY_SECONDS", "0")
os.environ.setdefault("NOTE_STORE_FAILURE_RATE", "0")

import pytest  # noqa: E402

from db.memory import InMemoryDatabase, create_database  # noqa: E402
from models.user import User  # noqa: E402
from schemas.highlight import HighlightColor  # noqa: E402
from services.catalog_service import CatalogService  # noqa: E402
from services.editor_service import EditorCoordinator  # noqa: E402
from services.note_service import NoteService  # noqa: E402
from services.notification_service import Notifier  # noqa: E402
from services.progress_service import ProgressService  # noqa: E402
from services.selection_events import SelectionChangeBus  # noqa: E402
from services.shortcuts import ShortcutMap  # noqa: E402


class FailureSwitch:
    """
    should_fail hook for the note store.

    Records every operation it sees; fails the operations listed in
    `failing` ("*" fails everything).
    """

    def __init__(self) -> None:
        self.failing: set[str] = set()
        self.calls: list[str] = []

    def __call__(self, operation: str) -> bool:
        self.calls.append(operation)
        return "*" in self.failing or operation in self.failing


class StepClock:
    """Clock that advances a fixed step every time it is read."""

    def __init__(
        self,
        start: datetime = datetime(2024, 2, 1, 12, 0, tzinfo=UTC),
        step: timedelta = timedelta(seconds=1),
    ) -> None:
        self.current = start
        self.step = step

    def __call__(self) -> datetime:
        now = self.current
        self.current += self.step
        return now


@pytest.fixture
def database() -> InMemoryDatabase:
    """Fresh seeded database per test."""
    return create_database()


@pytest.fixture
def empty_database() -> InMemoryDatabase:
    """Fresh database without seed data."""
    return create_database(seed=False)


@pytest.fixture
def catalog(database: InMemoryDatabase) -> CatalogService:
    """Catalog over the seeded database."""
    return CatalogService(database, latency_seconds=0)


@pytest.fixture
def progress(database: InMemoryDatabase) -> ProgressService:
    """Progress records over the seeded database."""
    return ProgressService(database, latency_seconds=0)


@pytest.fixture
def failures() -> FailureSwitch:
    """Switch for making note store operations fail."""
    return FailureSwitch()


@pytest.fixture
def clock() -> StepClock:
    """Deterministic clock for note timestamps."""
    return StepClock()


@pytest.fixture
def note_service(
    database: InMemoryDatabase,
    catalog: CatalogService,
    progress: ProgressService,
    failures: FailureSwitch,
    clock: StepClock,
) -> NoteService:
    """Note store with no latency and controllable failures."""
    return NoteService(
        database,
        catalog,
        progress,
        latency_seconds=0,
        should_fail=failures,
        clock=clock,
    )


@pytest.fixture
def user(database: InMemoryDatabase) -> User:
    """The seeded signed-in user."""
    return database.users["user1"]


@pytest.fixture
def notifier() -> Notifier:
    """Notification collector with room for every toast a test produces."""
    return Notifier(history_size=50)


@pytest.fixture
def selection_bus() -> SelectionChangeBus:
    """Document-wide selection stream."""
    return SelectionChangeBus()


@pytest.fixture
def coordinator(
    note_service: NoteService,
    selection_bus: SelectionChangeBus,
    notifier: Notifier,
    user: User,
) -> EditorCoordinator:
    """Editor coordinator for the signed-in user with the default chords."""
    return EditorCoordinator(
        note_service,
        selection_bus=selection_bus,
        notifier=notifier,
        user=user,
        shortcuts=ShortcutMap.from_strings("ctrl+shift+h", "ctrl+shift+x"),
        default_color=HighlightColor.YELLOW,
    )
