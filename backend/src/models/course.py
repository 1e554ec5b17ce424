"""Read-only course catalog models."""
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Lesson:
    """A single lesson inside a course module."""

    id: str
    title: str
    duration_minutes: int | None = None


@dataclass(frozen=True)
class CourseModule:
    """An ordered group of lessons."""

    id: str
    title: str
    lessons: tuple[Lesson, ...] = ()


@dataclass(frozen=True)
class Course:
    """Course with its modules; the note subsystem never mutates these."""

    id: str
    title: str
    instructor: str | None = None
    category: str | None = None
    modules: tuple[CourseModule, ...] = field(default_factory=tuple)

    def find_lesson(self, lesson_id: str) -> Lesson | None:
        """Return the lesson with the given id from any module, or None."""
        for module in self.modules:
            for lesson in module.lessons:
                if lesson.id == lesson_id:
                    return lesson
        return None

    @property
    def lessons(self) -> list[Lesson]:
        """All lessons in module order."""
        return [lesson for module in self.modules for lesson in module.lessons]
