"""
Note editor state machine and editing coordination.

Each note shown on screen has a NoteEditor:

    VIEWING --edit--> EDITING --save--> VIEWING (content persisted)
                      EDITING --cancel--> VIEWING (buffer discarded)

While EDITING, the editor owns a HighlightEngine loaded from the stored
content, listens to the selection-change stream for its own surface, and
exposes the highlight toolbar, context menu and keyboard chords.

The EditorCoordinator lets at most one editor be EDITING at a time. The
lesson view's new-note box is a NoteComposer, which shares the selection,
toolbar and keyboard handling but creates notes instead of updating them.

These classes are the user-facing layer: domain errors raised by the
services are recorded on the editor (`last_error`) and reported through the
Notifier instead of propagating.
"""
import logging
from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID

from pydantic import ValidationError

from core.config import get_settings
from models.note import Note
from models.user import User
from schemas.highlight import HighlightColor
from schemas.note import ContentFormat, NoteCreate, NoteUpdate
from services.content_sanitizer import extract_text, render_note_html
from services.exceptions import (
    EditorBusyError,
    EmptyNoteError,
    HighlightError,
    HighlightNotFoundError,
    InvalidSelectionError,
    InvalidStateError,
    NoteNotFoundError,
    NoteServiceError,
)
from services.highlight_service import HighlightEngine
from services.note_service import NoteService
from services.notification_service import Notifier
from services.selection_events import SelectionChangeBus, SelectionEvent, Subscription
from services.shortcuts import SHORTCUT_DESCRIPTIONS, KeyEvent, ShortcutAction, ShortcutMap
from services.user_service import get_current_user

logger = logging.getLogger(__name__)


class EditorState(StrEnum):
    """Whether a note is being read or edited."""

    VIEWING = "viewing"
    EDITING = "editing"


@dataclass(frozen=True)
class ContextMenu:
    """Secondary-click menu anchored at the pointer position."""

    visible: bool = False
    x: int = 0
    y: int = 0


HIDDEN_MENU = ContextMenu()


class HighlightSurface:
    """
    An editing surface with highlight support.

    Tracks the selection for one surface id, shows the floating toolbar while
    text is selected, and routes toolbar, context-menu and keyboard requests
    to the highlight engine.
    """

    def __init__(self, coordinator: "EditorCoordinator", surface_id: str) -> None:
        self._coordinator = coordinator
        self.surface_id = surface_id
        self.engine: HighlightEngine | None = None
        self.toolbar_visible = False
        self.context_menu = HIDDEN_MENU
        self.last_error: Exception | None = None
        self._subscription: Subscription | None = None

    @property
    def active(self) -> bool:
        """Whether the surface currently accepts input."""
        return self.engine is not None

    @property
    def buffer(self) -> str:
        """Markup currently in the surface ("" when inactive)."""
        return self.engine.buffer if self.engine is not None else ""

    def _activate(self, buffer: str) -> None:
        self.engine = HighlightEngine(buffer, color=self._coordinator.default_color)
        self._subscription = self._coordinator.selection_bus.subscribe(self._on_selection_change)

    def _deactivate(self) -> None:
        self._hide_selection_ui()
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None
        self.engine = None

    def _require_active(self) -> HighlightEngine:
        if self.engine is None:
            raise InvalidStateError(f"Surface {self.surface_id} is not open for editing")
        return self.engine

    def _hide_selection_ui(self) -> None:
        if self.engine is not None:
            self.engine.clear_selection()
        self.toolbar_visible = False
        self.context_menu = HIDDEN_MENU

    def _on_selection_change(self, event: SelectionEvent) -> None:
        # The stream carries selections from the whole document
        if event.surface_id != self.surface_id or self.engine is None:
            logger.debug("selection_ignored", extra={"surface_id": event.surface_id})
            return
        if event.is_collapsed:
            self._hide_selection_ui()
            return
        try:
            self.engine.capture_selection(event.start, event.end)
        except InvalidSelectionError:
            logger.debug("selection_out_of_range", extra={"surface_id": self.surface_id})
            self._hide_selection_ui()
            return
        self.toolbar_visible = True

    def set_buffer(self, buffer: str) -> None:
        """Replace the surface content (the user typed)."""
        self._require_active().set_buffer(buffer)
        self._hide_selection_ui()

    def select_color(self, color: HighlightColor | str, value: str | None = None) -> bool:
        """Pick the toolbar color; reports an invalid custom color."""
        engine = self._require_active()
        try:
            engine.select_color(color, value)
        except HighlightError as e:
            self._report_warning(e)
            return False
        return True

    def apply_highlight(
        self,
        color: HighlightColor | str | None = None,
        value: str | None = None,
    ) -> bool:
        """Highlight the selection from the toolbar or context menu."""
        engine = self._require_active()
        try:
            engine.apply_highlight(color, value)
        except HighlightError as e:
            self._report_warning(e)
            return False
        self._hide_selection_ui()
        return True

    def remove_highlight(self) -> bool:
        """Remove the highlight at the selection from the toolbar or context menu."""
        engine = self._require_active()
        try:
            engine.remove_highlight()
        except HighlightNotFoundError as e:
            self.last_error = e
            self._coordinator.notifier.info(str(e))
            return False
        except HighlightError as e:
            self._report_warning(e)
            return False
        self._hide_selection_ui()
        return True

    def handle_key(self, event: KeyEvent) -> bool:
        """
        Run the action bound to a key press.

        Returns:
            True if the key press was consumed. Chords are inert (not
            consumed) while nothing is selected.
        """
        if self.engine is None or not self.engine.has_selection:
            return False
        action = self._coordinator.shortcuts.resolve(event)
        if action is ShortcutAction.HIGHLIGHT:
            return self.apply_highlight()
        if action is ShortcutAction.REMOVE_HIGHLIGHT:
            return self.remove_highlight()
        return False

    def open_context_menu(self, x: int, y: int) -> bool:
        """Show the context menu at the pointer if there is an active selection."""
        if self.engine is None or not self.engine.has_selection:
            return False
        self.context_menu = ContextMenu(visible=True, x=x, y=y)
        return True

    def context_menu_items(self) -> list[tuple[ShortcutAction, str]]:
        """Menu entries with their labels and chords, empty while the menu is hidden."""
        if not self.context_menu.visible:
            return []
        shortcuts = self._coordinator.shortcuts
        return [
            (action, f"{SHORTCUT_DESCRIPTIONS[action]} ({shortcuts.chord_for(action)})")
            for action in ShortcutAction
        ]

    def choose_menu_item(self, action: ShortcutAction) -> bool:
        """Run a context-menu entry; the menu closes either way."""
        if not self.context_menu.visible:
            return False
        self.context_menu = HIDDEN_MENU
        if action is ShortcutAction.HIGHLIGHT:
            return self.apply_highlight()
        return self.remove_highlight()

    def handle_pointer_down(self, inside_menu: bool) -> None:
        """Any pointer press outside the context menu dismisses it."""
        if not inside_menu:
            self.context_menu = HIDDEN_MENU

    def _report_warning(self, error: Exception) -> None:
        self.last_error = error
        logger.warning(
            "editor_operation_rejected: %s", error, extra={"surface_id": self.surface_id},
        )
        self._coordinator.notifier.warning(str(error))


class NoteEditor(HighlightSurface):
    """
    Viewing/editing state of one stored note.

    A failed save keeps the editor EDITING with the attempted buffer intact.
    """

    def __init__(self, coordinator: "EditorCoordinator", note: Note) -> None:
        super().__init__(coordinator, surface_id=f"note-{note.id}")
        self.note = note
        self.state = EditorState.VIEWING

    @property
    def note_id(self) -> UUID:
        """ID of the note this editor shows."""
        return self.note.id

    @property
    def is_editing(self) -> bool:
        """Whether the editor is in the EDITING state."""
        return self.state is EditorState.EDITING

    @property
    def display_html(self) -> str:
        """Stored content rendered for the VIEWING state."""
        return render_note_html(self.note.content)

    def edit(self) -> bool:
        """
        Enter EDITING with a buffer loaded from the stored content.

        Returns:
            True if the editor is now editing; False if another note is
            already being edited (reported to the user).
        """
        if self.is_editing:
            return True
        try:
            self._coordinator.claim(self)
        except EditorBusyError as e:
            self.last_error = e
            logger.warning("editor_busy", extra={"active_note_id": str(e.active_note_id)})
            self._coordinator.notifier.warning("Finish editing the other note first")
            return False
        self._activate(self.note.content)
        self.state = EditorState.EDITING
        self.last_error = None
        logger.info("editor_opened", extra={"note_id": str(self.note_id)})
        return True

    async def save(self) -> bool:
        """
        Persist the buffer and return to VIEWING.

        Returns:
            True on success. On failure the editor stays EDITING with the
            buffer untouched and the failure is reported.

        Raises:
            InvalidStateError: If the editor is not editing.
        """
        engine = self._require_editing()
        buffer = engine.buffer
        try:
            data = NoteUpdate(content=buffer, content_format=ContentFormat.HTML)
            updated = await self._coordinator.note_service.update(
                self.note_id, data, owner_id=self._coordinator.user.id,
            )
        except (ValidationError, EmptyNoteError) as e:
            self.last_error = e
            self._coordinator.notifier.warning("Note content cannot be empty")
            return False
        except NoteNotFoundError as e:
            self.last_error = e
            self._coordinator.notifier.error("This note no longer exists")
            return False
        except NoteServiceError as e:
            self.last_error = e
            self._coordinator.notifier.error("Failed to update note")
            return False

        self.note = updated
        self._close()
        self._coordinator.notifier.success("Note updated successfully")
        logger.info("editor_saved", extra={"note_id": str(self.note_id)})
        return True

    def cancel(self) -> None:
        """
        Discard the buffer and return to VIEWING with the stored content.

        Raises:
            InvalidStateError: If the editor is not editing.
        """
        self._require_editing()
        self._close()
        logger.info("editor_cancelled", extra={"note_id": str(self.note_id)})

    def _require_editing(self) -> HighlightEngine:
        if not self.is_editing:
            raise InvalidStateError(f"Note {self.note_id} is not being edited")
        return self._require_active()

    def _close(self) -> None:
        self._deactivate()
        self.state = EditorState.VIEWING
        self.last_error = None
        self._coordinator.release(self)


class NoteComposer(HighlightSurface):
    """
    The "Add Note" box of a lesson view.

    Always accepts input while open. Saving creates a note for the lesson and
    clears the box; a failed save keeps what was typed.
    """

    def __init__(self, coordinator: "EditorCoordinator", course_id: str, lesson_id: str) -> None:
        super().__init__(coordinator, surface_id=f"composer-{course_id}-{lesson_id}")
        self.course_id = course_id
        self.lesson_id = lesson_id
        self._activate("")

    @property
    def can_save(self) -> bool:
        """Save is disabled while the box holds no text."""
        return self.engine is not None and bool(extract_text(self.engine.buffer).strip())

    async def save(self) -> Note | None:
        """
        Create a note from the box.

        Returns:
            The created note, or None if nothing was saved.
        """
        if not self.can_save:
            return None
        engine = self._require_active()
        try:
            data = NoteCreate(
                course_id=self.course_id,
                lesson_id=self.lesson_id,
                content=engine.buffer,
                content_format=ContentFormat.HTML,
            )
            note = await self._coordinator.note_service.create(self._coordinator.user.id, data)
        except (ValidationError, NoteServiceError) as e:
            self.last_error = e
            self._coordinator.notifier.error("Failed to save note")
            return None

        self.last_error = None
        if self.engine is not None:
            self.engine.set_buffer("")
        self._hide_selection_ui()
        self._coordinator.notifier.success("Note saved")
        return note

    def close(self) -> None:
        """Close the box and detach its selection listener."""
        self._deactivate()


class EditorCoordinator:
    """
    Shared state of all note editors on screen.

    Owns the single-editor rule: at most one NoteEditor is EDITING at any
    time, whatever the UI composition looks like.
    """

    def __init__(
        self,
        note_service: NoteService,
        selection_bus: SelectionChangeBus | None = None,
        notifier: Notifier | None = None,
        user: User | None = None,
        shortcuts: ShortcutMap | None = None,
        default_color: HighlightColor | str | None = None,
    ) -> None:
        settings = get_settings()
        self.note_service = note_service
        self.selection_bus = selection_bus or SelectionChangeBus()
        self.notifier = notifier or Notifier()
        self.user = user or get_current_user(settings)
        self.shortcuts = shortcuts or ShortcutMap.from_strings(
            settings.highlight_shortcut, settings.remove_highlight_shortcut,
        )
        self.default_color = HighlightColor(default_color or settings.default_highlight_color)
        self._editors: dict[UUID, NoteEditor] = {}
        self._active: NoteEditor | None = None

    @property
    def active_editor(self) -> NoteEditor | None:
        """The editor currently EDITING, if any."""
        return self._active

    def claim(self, editor: NoteEditor) -> None:
        """
        Make editor the one EDITING editor.

        Raises:
            EditorBusyError: If a different editor is already editing.
        """
        if self._active is not None and self._active is not editor:
            raise EditorBusyError(self._active.note_id)
        self._active = editor

    def release(self, editor: NoteEditor) -> None:
        """Give up the editing slot if editor holds it."""
        if self._active is editor:
            self._active = None

    def open(self, note: Note) -> NoteEditor:
        """
        Return the editor for a note, creating it in VIEWING if needed.

        A viewing editor picks up the given snapshot; an editing one keeps
        its buffer.
        """
        editor = self._editors.get(note.id)
        if editor is None:
            editor = NoteEditor(self, note)
            self._editors[note.id] = editor
        elif not editor.is_editing:
            editor.note = note
        return editor

    async def load_lesson_notes(self, course_id: str, lesson_id: str) -> list[NoteEditor]:
        """
        Load the current user's notes for a lesson as editors.

        Returns:
            Editors in creation order; empty (and reported) if loading fails.
        """
        try:
            notes = await self.note_service.list_notes(course_id, lesson_id, self.user.id)
        except NoteServiceError:
            self.notifier.error("Failed to load notes")
            return []
        return [self.open(note) for note in notes]

    def composer(self, course_id: str, lesson_id: str) -> NoteComposer:
        """Open a new-note box for a lesson."""
        return NoteComposer(self, course_id, lesson_id)

    async def delete_note(self, note_id: UUID) -> bool:
        """
        Delete one of the current user's notes.

        An editor open on the note is closed once the delete succeeds.
        """
        try:
            await self.note_service.delete(note_id, owner_id=self.user.id)
        except NoteServiceError:
            self.notifier.error("Failed to delete note")
            return False
        editor = self._editors.pop(note_id, None)
        if editor is not None and editor.is_editing:
            editor.cancel()
        self.notifier.success("Note deleted")
        return True
