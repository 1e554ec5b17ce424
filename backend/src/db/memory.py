"""In-memory data layer shared by the services of one process."""
import logging
from dataclasses import dataclass, field
from uuid import UUID

from models.course import Course
from models.note import Note
from models.progress import ProgressRecord
from models.user import User

logger = logging.getLogger(__name__)


@dataclass
class InMemoryDatabase:
    """
    All mutable state of the mock data layer.

    Construct one per process and hand it to the services that need it.
    Nothing is persisted; a new instance starts from the seed data again.

    `notes` is the global note index in insertion order. Each note is also
    mirrored in the `notes` list of the owning user's progress record for
    the note's course.
    """

    courses: dict[str, Course] = field(default_factory=dict)
    users: dict[str, User] = field(default_factory=dict)
    progress: list[ProgressRecord] = field(default_factory=list)
    notes: dict[UUID, Note] = field(default_factory=dict)


def create_database(seed: bool = True) -> InMemoryDatabase:
    """
    Create a fresh database.

    Args:
        seed: Populate the mock catalog, users, progress records and notes.

    Returns:
        A new, independent database.
    """
    database = InMemoryDatabase()
    if seed:
        from db.seed import populate

        populate(database)
        logger.info(
            "database_seeded",
            extra={
                "courses": len(database.courses),
                "progress_records": len(database.progress),
                "notes": len(database.notes),
            },
        )
    return database
