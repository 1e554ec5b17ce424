"""Pydantic schemas for note operations."""
from datetime import datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from schemas.validators import (
    normalize_preview,
    validate_content_length,
    validate_content_not_blank,
)


class ContentFormat(StrEnum):
    """Which editing surface produced submitted note content."""

    HTML = "html"  # rich markup, <br> line breaks
    EDITABLE = "editable"  # contentEditable markup, <div> per line, &nbsp;


class NoteCreate(BaseModel):
    """Schema for creating a new note on a lesson."""

    course_id: str = Field(min_length=1)
    lesson_id: str = Field(min_length=1)
    content: str
    content_format: ContentFormat = ContentFormat.HTML

    @field_validator("content")
    @classmethod
    def check_content(cls, v: str) -> str:
        """Trim surrounding whitespace, then validate content is present and not too long."""
        v = validate_content_not_blank(v).strip()
        return validate_content_length(v)


class NoteUpdate(BaseModel):
    """Schema for replacing the content of an existing note."""

    content: str
    content_format: ContentFormat = ContentFormat.HTML

    @field_validator("content")
    @classmethod
    def check_content(cls, v: str) -> str:
        """Trim surrounding whitespace, then validate content is present and not too long."""
        v = validate_content_not_blank(v).strip()
        return validate_content_length(v)


class NoteFilter(BaseModel):
    """Filters for browsing a user's notes across courses."""

    search: str | None = None
    course_id: str | None = None

    @field_validator("search", "course_id")
    @classmethod
    def empty_to_none(cls, v: str | None) -> str | None:
        """Treat blank filter values as no filter."""
        if v is None or not v.strip():
            return None
        return v.strip()


class NoteResponse(BaseModel):
    """Schema for a note as stored."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    owner_id: str
    course_id: str
    lesson_id: str
    content: str
    created_at: datetime
    updated_at: datetime


class NoteWithContext(NoteResponse):
    """
    Note enriched with catalog labels for the notes overview.

    `content_preview` is the tag-free text of the note, whitespace collapsed.
    """

    course_name: str
    lesson_name: str
    content_preview: str | None = Field(
        default=None,
        description="First 500 characters of the note's plain text.",
    )

    @field_validator("content_preview", mode="before")
    @classmethod
    def strip_preview_whitespace(cls, v: str | None) -> str | None:
        """Collapse whitespace in content preview for clean display."""
        return normalize_preview(v)
