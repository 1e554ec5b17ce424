"""User model for the simulated signed-in user."""
from dataclasses import dataclass


@dataclass(frozen=True)
class User:
    """User identity - notes are always scoped to one of these."""

    id: str
    name: str
    email: str | None = None
