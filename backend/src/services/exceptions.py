"""Shared exceptions for service layer operations."""
from uuid import UUID


class NoteServiceError(Exception):
    """Base exception for note store operations."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class NoteNotFoundError(NoteServiceError):
    """
    Raised when a note id is absent from the store.

    Also raised when the note exists but belongs to another user, so callers
    cannot probe for other users' note ids.
    """

    def __init__(self, note_id: UUID | str) -> None:
        self.note_id = note_id
        super().__init__(f"Note not found: {note_id}")


class PersistenceError(NoteServiceError):
    """
    Raised when the (simulated) remote store rejects an operation.

    The store guarantees no state was changed when this is raised.
    """

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"Note store failed to {operation}")


class EmptyNoteError(NoteServiceError):
    """Raised when note content is empty once disallowed markup is removed."""

    def __init__(self) -> None:
        super().__init__("Note content is empty after sanitization")


class CourseNotFoundError(NoteServiceError):
    """Raised when a course id is not in the catalog."""

    def __init__(self, course_id: str) -> None:
        self.course_id = course_id
        super().__init__(f"Course not found: {course_id}")


class LessonNotFoundError(NoteServiceError):
    """Raised when a lesson id does not belong to the given course."""

    def __init__(self, course_id: str, lesson_id: str) -> None:
        self.course_id = course_id
        self.lesson_id = lesson_id
        super().__init__(f"Lesson {lesson_id} not found in course {course_id}")


class HighlightError(Exception):
    """Base exception for highlight engine operations."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class NoActiveSelectionError(HighlightError):
    """Raised when a highlight operation is attempted without a non-empty selection."""

    def __init__(self) -> None:
        super().__init__("Select some text first")


class InvalidSelectionError(HighlightError):
    """Raised when selection offsets fall outside the buffer's text."""

    def __init__(self, start: int, end: int, length: int) -> None:
        self.start = start
        self.end = end
        self.length = length
        super().__init__(f"Selection [{start}, {end}) is outside text of length {length}")


class HighlightNotFoundError(HighlightError):
    """Raised when removing a highlight but the selection is not inside one."""

    def __init__(self) -> None:
        super().__init__("Selection is not inside a highlight")


class InvalidHighlightColorError(HighlightError):
    """Raised when a highlight color token or custom value is not accepted."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class EditorError(Exception):
    """Base exception for note editor state transitions."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class EditorBusyError(EditorError):
    """Raised when editing a note while another note is already being edited."""

    def __init__(self, active_note_id: UUID) -> None:
        self.active_note_id = active_note_id
        super().__init__(f"Another note is already being edited: {active_note_id}")


class InvalidStateError(EditorError):
    """
    Raised when an operation is invalid for an editor's current state.

    Used when saving or cancelling an editor that is not editing, or editing
    through an editor that has already been closed.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
