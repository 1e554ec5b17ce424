"""Service layer for per-user, per-course progress records."""
import asyncio
import logging
from dataclasses import replace

from core.config import get_settings
from db.memory import InMemoryDatabase
from models.progress import ProgressRecord

logger = logging.getLogger(__name__)


class ProgressService:
    """
    Progress records backed by the in-memory database.

    The note service uses the synchronous record accessors so it can update
    its global index and a record's note list without yielding in between.
    """

    def __init__(
        self,
        database: InMemoryDatabase,
        latency_seconds: float | None = None,
    ) -> None:
        self._database = database
        if latency_seconds is None:
            latency_seconds = get_settings().note_store_latency_seconds
        self._latency = latency_seconds

    def find_record(self, user_id: str, course_id: str) -> ProgressRecord | None:
        """Return the user's record for a course, or None."""
        for record in self._database.progress:
            if record.user_id == user_id and record.course_id == course_id:
                return record
        return None

    def get_or_create_record(self, user_id: str, course_id: str) -> ProgressRecord:
        """Return the user's record for a course, creating an empty one if needed."""
        record = self.find_record(user_id, course_id)
        if record is None:
            record = ProgressRecord(user_id=user_id, course_id=course_id)
            self._database.progress.append(record)
            logger.info(
                "progress_record_created",
                extra={"user_id": user_id, "course_id": course_id},
            )
        return record

    def records_for_user(self, user_id: str) -> list[ProgressRecord]:
        """Return the live records of one user; never another user's."""
        return [record for record in self._database.progress if record.user_id == user_id]

    async def get_user_progress(self, user_id: str) -> list[ProgressRecord]:
        """
        Return copies of a user's progress records.

        The copies carry their own note lists, so callers cannot change what
        is stored by mutating them.
        """
        await asyncio.sleep(self._latency)
        return [
            replace(
                record,
                completed_lessons=set(record.completed_lessons),
                notes=[replace(note) for note in record.notes],
            )
            for record in self.records_for_user(user_id)
        ]
