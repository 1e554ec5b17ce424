"""Service layer for note CRUD operations."""
import asyncio
import logging
import random
from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta
from uuid import UUID

from core.config import get_settings
from db.memory import InMemoryDatabase
from models.base import utc_now
from models.note import Note
from schemas.filter import FilterOption
from schemas.note import NoteCreate, NoteFilter, NoteUpdate, NoteWithContext
from services.catalog_service import CatalogService
from services.content_sanitizer import extract_text, sanitize_with_report
from services.exceptions import EmptyNoteError, NoteNotFoundError, PersistenceError
from services.progress_service import ProgressService

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 500


class NoteService:
    """
    Note store with full CRUD operations.

    Notes live in two places that must never diverge:
    - the global index (`database.notes`), keyed by note id
    - the `notes` list of the owner's progress record for the note's course

    Both hold the same Note object, and every mutation of either structure
    happens after the simulated round trip completes, with no await in
    between, so a failed or in-flight operation never leaves them out of step.

    Every operation awaits a simulated round trip and may fail with
    PersistenceError before touching any state.
    """

    def __init__(
        self,
        database: InMemoryDatabase,
        catalog: CatalogService,
        progress: ProgressService,
        latency_seconds: float | None = None,
        failure_rate: float | None = None,
        should_fail: Callable[[str], bool] | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        settings = get_settings()
        self._database = database
        self._catalog = catalog
        self._progress = progress
        self._latency = (
            settings.note_store_latency_seconds if latency_seconds is None else latency_seconds
        )
        rate = settings.note_store_failure_rate if failure_rate is None else failure_rate
        self._should_fail = should_fail or (lambda _operation: random.random() < rate)
        self._clock = clock

    async def _round_trip(self, operation: str) -> None:
        """Simulate the remote call; raise PersistenceError if it is rejected."""
        await asyncio.sleep(self._latency)
        if self._should_fail(operation):
            logger.warning("note_store_rejected", extra={"operation": operation})
            raise PersistenceError(operation)

    def _get_owned(self, note_id: UUID, owner_id: str | None) -> Note:
        note = self._database.notes.get(note_id)
        if note is None or (owner_id is not None and note.owner_id != owner_id):
            raise NoteNotFoundError(note_id)
        return note

    def _next_timestamp(self, previous: datetime) -> datetime:
        """Current time, nudged forward so it is strictly after previous."""
        now = self._clock()
        if now <= previous:
            now = previous + timedelta(microseconds=1)
        return now

    @staticmethod
    def _clean(data: NoteCreate | NoteUpdate) -> str:
        """
        Sanitize submitted content.

        Raises:
            EmptyNoteError: If nothing readable is left once disallowed
                markup is removed.
        """
        result = sanitize_with_report(data.content, data.content_format)
        if not extract_text(result.content).strip():
            raise EmptyNoteError()
        return result.content

    async def list_notes(self, course_id: str, lesson_id: str, owner_id: str) -> list[Note]:
        """
        List a user's notes for one lesson in creation order.

        Args:
            course_id: Course the lesson belongs to.
            lesson_id: Lesson to list notes for.
            owner_id: User whose notes to list.

        Returns:
            Copies of the notes; mutating them does not change the store.
        """
        await self._round_trip("list notes")
        record = self._progress.find_record(owner_id, course_id)
        if record is None:
            return []
        return [
            replace(note)
            for note in record.notes
            if note.lesson_id == lesson_id and note.owner_id == owner_id
        ]

    async def get(self, note_id: UUID, owner_id: str | None = None) -> Note:
        """
        Get a single note.

        Raises:
            NoteNotFoundError: If the id is unknown or owned by another user.
        """
        await self._round_trip("load note")
        return replace(self._get_owned(note_id, owner_id))

    async def create(self, owner_id: str, data: NoteCreate) -> Note:
        """
        Create a new note for a user on a lesson.

        Args:
            owner_id: User creating the note.
            data: Note creation data; content is sanitized before storing.

        Returns:
            The created note.

        Raises:
            CourseNotFoundError: If the course is not in the catalog.
            LessonNotFoundError: If the lesson is not part of the course.
            EmptyNoteError: If the content is empty once sanitized.
            PersistenceError: If the store rejects the operation.
        """
        await self._catalog.get_lesson(data.course_id, data.lesson_id)
        content = self._clean(data)
        await self._round_trip("create note")

        now = self._clock()
        note = Note(
            owner_id=owner_id,
            course_id=data.course_id,
            lesson_id=data.lesson_id,
            content=content,
            created_at=now,
            updated_at=now,
        )
        record = self._progress.get_or_create_record(owner_id, data.course_id)
        self._database.notes[note.id] = note
        record.notes.append(note)
        record.last_accessed = now
        logger.info(
            "note_created",
            extra={
                "note_id": str(note.id),
                "course_id": note.course_id,
                "lesson_id": note.lesson_id,
            },
        )
        return replace(note)

    async def update(
        self,
        note_id: UUID,
        data: NoteUpdate,
        owner_id: str | None = None,
    ) -> Note:
        """
        Replace a note's content.

        Only content and updated_at change; id, owner, scope and created_at
        are left untouched.

        Args:
            note_id: ID of the note to update.
            data: Update data; content is sanitized before storing.
            owner_id: If given, the note must belong to this user.

        Returns:
            The updated note.

        Raises:
            NoteNotFoundError: If the id is unknown or owned by another user.
            EmptyNoteError: If the content is empty once sanitized.
            PersistenceError: If the store rejects the operation.
        """
        content = self._clean(data)
        await self._round_trip("update note")

        note = self._get_owned(note_id, owner_id)
        note.content = content
        note.updated_at = self._next_timestamp(note.updated_at)
        logger.info("note_updated", extra={"note_id": str(note.id)})
        return replace(note)

    async def delete(self, note_id: UUID, owner_id: str | None = None) -> None:
        """
        Delete a note from the index and from its progress record.

        Raises:
            NoteNotFoundError: If the id is unknown or owned by another user.
            PersistenceError: If the store rejects the operation.
        """
        await self._round_trip("delete note")

        note = self._get_owned(note_id, owner_id)
        record = self._progress.find_record(note.owner_id, note.course_id)
        del self._database.notes[note.id]
        if record is not None:
            record.notes[:] = [n for n in record.notes if n.id != note.id]
        logger.info("note_deleted", extra={"note_id": str(note.id)})

    async def search(
        self,
        owner_id: str,
        filters: NoteFilter | None = None,
    ) -> list[NoteWithContext]:
        """
        Browse a user's notes across all courses, most recently updated first.

        Notes are labelled with their course and lesson titles; notes whose
        lesson is not in the catalog are left out.

        Args:
            owner_id: User whose notes to return.
            filters: Optional text search (matched case-insensitively against
                the note text and the course and lesson titles) and course filter.

        Returns:
            Matching notes with catalog context.
        """
        filters = filters or NoteFilter()
        await self._round_trip("search notes")

        term = filters.search.lower() if filters.search else None
        courses = {course.id: course for course in await self._catalog.list_courses()}
        results: list[NoteWithContext] = []
        for record in self._progress.records_for_user(owner_id):
            if filters.course_id is not None and record.course_id != filters.course_id:
                continue
            course = courses.get(record.course_id)
            if course is None:
                continue
            for note in record.notes:
                lesson = course.find_lesson(note.lesson_id)
                if note.owner_id != owner_id or lesson is None:
                    continue
                course_name, lesson_name = course.title, lesson.title
                text = extract_text(note.content)
                if term is not None and not any(
                    term in field.lower() for field in (text, course_name, lesson_name)
                ):
                    continue
                results.append(
                    NoteWithContext(
                        id=note.id,
                        owner_id=note.owner_id,
                        course_id=note.course_id,
                        lesson_id=note.lesson_id,
                        content=note.content,
                        created_at=note.created_at,
                        updated_at=note.updated_at,
                        course_name=course_name,
                        lesson_name=lesson_name,
                        content_preview=text[:PREVIEW_LENGTH],
                    ),
                )
        results.sort(key=lambda item: item.updated_at, reverse=True)
        return results

    async def course_filter_options(self, owner_id: str) -> list[FilterOption]:
        """Return one option per course in which the user has at least one note."""
        await self._round_trip("list note courses")
        course_ids = {
            record.course_id
            for record in self._progress.records_for_user(owner_id)
            if any(note.owner_id == owner_id for note in record.notes)
        }
        return [
            FilterOption(value=course.id, label=course.title)
            for course in await self._catalog.list_courses()
            if course.id in course_ids
        ]

    def check_consistency(self) -> list[str]:
        """
        Compare the global index with the progress-record mirrors.

        Returns:
            A description of every divergence found; empty when consistent.
        """
        problems = []
        mirrored: dict[UUID, Note] = {}
        for record in self._database.progress:
            for note in record.notes:
                if note.id in mirrored:
                    problems.append(f"note {note.id} mirrored twice")
                if (note.owner_id, note.course_id) != (record.user_id, record.course_id):
                    problems.append(f"note {note.id} mirrored in the wrong progress record")
                mirrored[note.id] = note
        for note_id, note in self._database.notes.items():
            if note_id not in mirrored:
                problems.append(f"note {note_id} missing from its progress record")
            elif mirrored[note_id] is not note:
                problems.append(f"note {note_id} differs between index and progress record")
        for note_id in mirrored.keys() - self._database.notes.keys():
            problems.append(f"note {note_id} missing from the global index")
        return problems
