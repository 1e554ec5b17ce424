"""Note model for storing per-lesson user notes with highlight markup."""
from dataclasses import dataclass

from models.base import TimestampMixin, UUIDv7Mixin


@dataclass(kw_only=True)
class Note(UUIDv7Mixin, TimestampMixin):
    """
    Note record - sanitized rich text attached to one lesson of one course.

    `content` only ever holds the restricted markup produced by the content
    sanitizer: text, <br>, and highlight spans.
    """

    owner_id: str
    course_id: str
    lesson_id: str
    content: str

    @property
    def scope(self) -> tuple[str, str, str]:
        """Key under which notes are grouped and listed."""
        return (self.course_id, self.lesson_id, self.owner_id)
