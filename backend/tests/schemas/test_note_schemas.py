"""Tests for note schema validation."""
from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from core.config import get_settings
from models.note import Note
from schemas.note import (
    ContentFormat,
    NoteCreate,
    NoteFilter,
    NoteResponse,
    NoteUpdate,
    NoteWithContext,
)


class TestNoteCreate:
    """Tests for NoteCreate schema."""

    def test__note_create__strips_content(self) -> None:
        data = NoteCreate(course_id="1", lesson_id="1", content="  hello  ")
        assert data.content == "hello"
        assert data.content_format is ContentFormat.HTML

    @pytest.mark.parametrize("content", ["", "   ", "\n\t"])
    def test__note_create__rejects_blank_content(self, content: str) -> None:
        with pytest.raises(ValidationError, match="Note content cannot be empty"):
            NoteCreate(course_id="1", lesson_id="1", content=content)

    def test__note_create__rejects_missing_lesson(self) -> None:
        with pytest.raises(ValidationError):
            NoteCreate(course_id="1", lesson_id="", content="x")

    def test__note_create__rejects_content_over_limit(self) -> None:
        limit = get_settings().max_content_length
        with pytest.raises(ValidationError, match="exceeds maximum length"):
            NoteCreate(course_id="1", lesson_id="1", content="x" * (limit + 1))

    def test__note_create__accepts_editable_format(self) -> None:
        data = NoteCreate(course_id="1", lesson_id="1", content="a", content_format="editable")
        assert data.content_format is ContentFormat.EDITABLE


class TestNoteUpdate:
    """Tests for NoteUpdate schema."""

    def test__note_update__rejects_blank_content(self) -> None:
        with pytest.raises(ValidationError):
            NoteUpdate(content="  ")

    def test__note_update__keeps_markup(self) -> None:
        content = 'a <span class="highlight-yellow">b</span>'
        assert NoteUpdate(content=content).content == content

    def test__note_update__strips_content_like_create(self) -> None:
        created = NoteCreate(course_id="1", lesson_id="1", content="  hello  ")
        updated = NoteUpdate(content="  hello  ")
        assert updated.content == created.content == "hello"


class TestNoteFilter:
    """Tests for NoteFilter schema."""

    def test__note_filter__blank_values_mean_no_filter(self) -> None:
        filters = NoteFilter(search="  ", course_id="")
        assert filters.search is None
        assert filters.course_id is None

    def test__note_filter__values_are_trimmed(self) -> None:
        assert NoteFilter(search=" react ").search == "react"


class TestNoteResponses:
    """Tests for response schemas."""

    def test__note_response__from_model(self) -> None:
        note = Note(owner_id="user1", course_id="1", lesson_id="2", content="x")
        response = NoteResponse.model_validate(note)
        assert response.id == note.id
        assert response.lesson_id == "2"

    def test__note_with_context__collapses_preview_whitespace(self) -> None:
        now = datetime(2024, 1, 1, tzinfo=UTC)
        note = NoteWithContext(
            id=Note(owner_id="u", course_id="1", lesson_id="1", content="x").id,
            owner_id="u",
            course_id="1",
            lesson_id="1",
            content="a<br>b",
            created_at=now,
            updated_at=now,
            course_name="React Fundamentals",
            lesson_name="Introduction to React",
            content_preview="a\n\n  b",
        )
        assert note.content_preview == "a b"
