"""Service layer for read-only course catalog lookups."""
import asyncio
import logging

from core.config import get_settings
from db.memory import InMemoryDatabase
from models.course import Course, Lesson
from services.exceptions import CourseNotFoundError, LessonNotFoundError

logger = logging.getLogger(__name__)


class CatalogService:
    """
    Course catalog backed by the in-memory database.

    Used by the note subsystem only to validate lesson references and to
    resolve course/lesson titles for display. Never mutates course data.
    """

    def __init__(
        self,
        database: InMemoryDatabase,
        latency_seconds: float | None = None,
    ) -> None:
        self._database = database
        if latency_seconds is None:
            latency_seconds = get_settings().catalog_latency_seconds
        self._latency = latency_seconds

    async def list_courses(self) -> list[Course]:
        """Return all courses in catalog order."""
        await asyncio.sleep(self._latency)
        return list(self._database.courses.values())

    async def get_course(self, course_id: str) -> Course:
        """
        Return a course by id.

        Raises:
            CourseNotFoundError: If no course has this id.
        """
        await asyncio.sleep(self._latency)
        course = self._database.courses.get(course_id)
        if course is None:
            logger.debug("course_not_found", extra={"course_id": course_id})
            raise CourseNotFoundError(course_id)
        return course

    async def get_lesson(self, course_id: str, lesson_id: str) -> tuple[Course, Lesson]:
        """
        Return a lesson together with its course.

        Raises:
            CourseNotFoundError: If no course has this id.
            LessonNotFoundError: If the course has no such lesson.
        """
        course = await self.get_course(course_id)
        lesson = course.find_lesson(lesson_id)
        if lesson is None:
            raise LessonNotFoundError(course_id, lesson_id)
        return course, lesson

