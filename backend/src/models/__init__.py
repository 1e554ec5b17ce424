"""In-memory record models."""
from models.base import TimestampMixin, UUIDv7Mixin, new_id, utc_now
from models.course import Course, CourseModule, Lesson
from models.note import Note
from models.progress import ProgressRecord
from models.user import User

__all__ = [
    "Course",
    "CourseModule",
    "Lesson",
    "Note",
    "ProgressRecord",
    "TimestampMixin",
    "UUIDv7Mixin",
    "User",
    "new_id",
    "utc_now",
]
