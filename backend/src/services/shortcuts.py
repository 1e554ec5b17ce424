"""Keyboard shortcuts for the note editor."""
from dataclasses import dataclass
from enum import StrEnum

MODIFIERS = ("ctrl", "shift", "alt", "meta")
MODIFIER_ALIASES = {
    "control": "ctrl",
    "cmd": "meta",
    "command": "meta",
    "super": "meta",
    "option": "alt",
}


@dataclass(frozen=True)
class KeyEvent:
    """A key press as reported by the editing surface."""

    key: str
    ctrl: bool = False
    shift: bool = False
    alt: bool = False
    meta: bool = False


@dataclass(frozen=True)
class KeyChord:
    """A key combined with one or more modifiers, e.g. Ctrl+Shift+H."""

    key: str
    ctrl: bool = False
    shift: bool = False
    alt: bool = False
    meta: bool = False

    @classmethod
    def parse(cls, text: str) -> "KeyChord":
        """
        Parse a chord such as 'ctrl+shift+h'.

        Raises:
            ValueError: If the chord is empty, uses an unknown or repeated
                modifier, has no modifier, or has no non-modifier key.
        """
        parts = [part.strip().lower() for part in text.split("+")]
        if any(not part for part in parts):
            raise ValueError(f"Invalid shortcut: '{text}'")
        *modifiers, key = parts
        key = MODIFIER_ALIASES.get(key, key)
        if key in MODIFIERS:
            raise ValueError(f"Shortcut '{text}' needs a non-modifier key")
        if not modifiers:
            raise ValueError(f"Shortcut '{text}' needs at least one modifier")

        flags: dict[str, bool] = {}
        for modifier in modifiers:
            modifier = MODIFIER_ALIASES.get(modifier, modifier)
            if modifier not in MODIFIERS:
                raise ValueError(f"Unknown modifier '{modifier}' in shortcut '{text}'")
            if modifier in flags:
                raise ValueError(f"Modifier '{modifier}' repeated in shortcut '{text}'")
            flags[modifier] = True
        return cls(key=key, **flags)

    def matches(self, event: KeyEvent) -> bool:
        """Whether a key press is exactly this chord (no extra modifiers)."""
        return (
            event.key.lower() == self.key
            and event.ctrl == self.ctrl
            and event.shift == self.shift
            and event.alt == self.alt
            and event.meta == self.meta
        )

    def __str__(self) -> str:
        names = [name.capitalize() for name in MODIFIERS if getattr(self, name)]
        return "+".join([*names, self.key.upper() if len(self.key) == 1 else self.key.capitalize()])


class ShortcutAction(StrEnum):
    """Editor operations reachable from the keyboard."""

    HIGHLIGHT = "highlight"
    REMOVE_HIGHLIGHT = "remove_highlight"


SHORTCUT_DESCRIPTIONS = {
    ShortcutAction.HIGHLIGHT: "Highlight selected text",
    ShortcutAction.REMOVE_HIGHLIGHT: "Remove highlight from selected text",
}


class ShortcutMap:
    """Maps key presses to editor actions."""

    def __init__(self, highlight: KeyChord, remove_highlight: KeyChord) -> None:
        if highlight == remove_highlight:
            raise ValueError("Highlight and remove-highlight shortcuts must differ")
        self._chords = {
            ShortcutAction.HIGHLIGHT: highlight,
            ShortcutAction.REMOVE_HIGHLIGHT: remove_highlight,
        }

    @classmethod
    def from_strings(cls, highlight: str, remove_highlight: str) -> "ShortcutMap":
        """Build the map from configured chord strings."""
        return cls(KeyChord.parse(highlight), KeyChord.parse(remove_highlight))

    def chord_for(self, action: ShortcutAction) -> KeyChord:
        """Return the chord bound to an action."""
        return self._chords[action]

    def resolve(self, event: KeyEvent) -> ShortcutAction | None:
        """Return the action a key press triggers, if any."""
        for action, chord in self._chords.items():
            if chord.matches(event):
                return action
        return None

    def help_text(self) -> list[str]:
        """Lines describing each shortcut, for display next to the editor."""
        return [
            f"{chord}: {SHORTCUT_DESCRIPTIONS[action]}"
            for action, chord in self._chords.items()
        ]
