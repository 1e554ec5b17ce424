"""Progress record model - per-user, per-course aggregate that carries notes."""
from dataclasses import dataclass, field
from datetime import datetime

from models.base import UUIDv7Mixin, utc_now
from models.note import Note


@dataclass(kw_only=True)
class ProgressRecord(UUIDv7Mixin):
    """
    A user's progress through one course.

    `notes` mirrors every note the user wrote for this course, in creation
    order. The note service keeps it in lockstep with its global index.
    """

    user_id: str
    course_id: str
    completed_lessons: set[str] = field(default_factory=set)
    notes: list[Note] = field(default_factory=list)
    last_accessed: datetime = field(default_factory=utc_now)
