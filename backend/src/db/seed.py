"""Mock catalog, users, progress records and notes for a fresh database."""
from datetime import UTC, datetime

from db.memory import InMemoryDatabase
from models.course import Course, CourseModule, Lesson
from models.note import Note
from models.progress import ProgressRecord
from models.user import User

USERS = [
    User(id="user1", name="John Doe", email="john.doe@example.com"),
    User(id="user2", name="Jane Smith", email="jane.smith@example.com"),
]

COURSES = [
    Course(
        id="1",
        title="React Fundamentals",
        instructor="Sarah Johnson",
        category="Web Development",
        modules=(
            CourseModule(
                id="m1",
                title="Getting Started",
                lessons=(
                    Lesson(id="1", title="Introduction to React", duration_minutes=15),
                    Lesson(id="2", title="JSX Basics", duration_minutes=20),
                ),
            ),
            CourseModule(
                id="m2",
                title="Components and State",
                lessons=(
                    Lesson(id="3", title="Components and Props", duration_minutes=25),
                    Lesson(id="4", title="State and Lifecycle", duration_minutes=30),
                ),
            ),
        ),
    ),
    Course(
        id="2",
        title="Advanced JavaScript Patterns",
        instructor="Michael Chen",
        category="Web Development",
        modules=(
            CourseModule(
                id="m3",
                title="Asynchronous JavaScript",
                lessons=(
                    Lesson(id="5", title="Promises in Depth", duration_minutes=25),
                    Lesson(id="6", title="Async Iterators", duration_minutes=20),
                ),
            ),
        ),
    ),
    Course(
        id="3",
        title="Python for Data Science",
        instructor="Emily Rodriguez",
        category="Data Science",
        modules=(
            CourseModule(
                id="m4",
                title="Python Essentials",
                lessons=(
                    Lesson(id="7", title="Data Structures", duration_minutes=30),
                    Lesson(id="8", title="Working with NumPy", duration_minutes=35),
                    Lesson(id="9", title="Pandas DataFrames", duration_minutes=40),
                ),
            ),
        ),
    ),
]

# (user_id, course_id, completed lessons, last accessed, notes as (lesson_id, content, created_at))
PROGRESS = [
    (
        "user1",
        "1",
        {"1", "2"},
        datetime(2024, 1, 15, 10, 30, tzinfo=UTC),
        [
            (
                "1",
                "React fundamentals are crucial for building modern web applications. "
                "Key concepts include components, state, and props.",
                datetime(2024, 1, 15, 10, 35, tzinfo=UTC),
            ),
            (
                "2",
                "JSX syntax makes it easier to write React components. Remember that JSX "
                "is transpiled to JavaScript function calls.",
                datetime(2024, 1, 15, 11, 15, tzinfo=UTC),
            ),
        ],
    ),
    (
        "user2",
        "3",
        {"7", "8", "9"},
        datetime(2024, 1, 14, 15, 45, tzinfo=UTC),
        [
            (
                "7",
                "Python data structures: Lists are mutable, tuples are immutable. "
                "Choose the right one based on your needs.",
                datetime(2024, 1, 14, 15, 50, tzinfo=UTC),
            ),
        ],
    ),
    ("user1", "2", set(), datetime(2024, 1, 13, 9, 20, tzinfo=UTC), []),
]


def populate(database: InMemoryDatabase) -> None:
    """Load the mock data into an empty database."""
    database.users.update({user.id: user for user in USERS})
    database.courses.update({course.id: course for course in COURSES})
    for user_id, course_id, completed, last_accessed, notes in PROGRESS:
        record = ProgressRecord(
            user_id=user_id,
            course_id=course_id,
            completed_lessons=set(completed),
            last_accessed=last_accessed,
        )
        for lesson_id, content, created_at in notes:
            note = Note(
                owner_id=user_id,
                course_id=course_id,
                lesson_id=lesson_id,
                content=content,
                created_at=created_at,
                updated_at=created_at,
            )
            record.notes.append(note)
            database.notes[note.id] = note
        database.progress.append(record)
