from __future__ import annotations

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, Static

KEY_SECTIONS = [
    ("BROWSING", [
        ("j/k", "Move down/up in the folder list"),
        ("Enter", "Open folder / play track"),
        ("Backspace", "Go to parent folder"),
        ("o", "Open a folder by path"),
    ]),
    ("PLAYBACK", [
        ("Space", "Play/Pause (plays the first track when idle)"),
        ("n", "Next track (wraps to the first)"),
        ("p", "Previous track (restarts if past 3 seconds)"),
        ("←/→", "Seek back/forward 5 seconds"),
    ]),
    ("VOLUME", [
        ("+ or =", "Louder"),
        ("-", "Quieter"),
    ]),
    ("DISPLAY", [
        ("t", "Toggle light/dark theme"),
        ("v", "Show/hide visualizations"),
        ("l", "Show/hide lyrics"),
        ("h or ?", "Show this help"),
        ("q", "Quit"),
    ]),
]

LIBRARY_NOTES = [
    "Plays MP3, OGG and WAV files",
    "♪ marks the loaded track",
    "The last opened folder is reopened on start",
]


def help_markup() -> str:
    lines = ["[bold #ff8c00]🎵 FOLDERPLAY[/bold #ff8c00]"]
    for title, keys in KEY_SECTIONS:
        lines.append("")
        lines.append(f"[bold]{title}[/bold]")
        lines.extend(f"  {key:<12}{description}" for key, description in keys)
    lines.append("")
    lines.append("[bold]LIBRARY[/bold]")
    lines.extend(f"  • {note}" for note in LIBRARY_NOTES)
    return "\n".join(lines)


class HelpScreen(ModalScreen[None]):
    """Key reference shown over the player."""

    BINDINGS = [
        Binding("escape", "dismiss", "Close"),
        Binding("j", "scroll_help(1)", show=False),
        Binding("k", "scroll_help(-1)", show=False),
    ]

    def compose(self) -> ComposeResult:
        with Container(id="help-container"):
            with VerticalScroll(id="help-scroll"):
                yield Static(help_markup(), id="help-content")
            yield Button("Close (Esc)", id="help-close-button", variant="primary")

    def on_mount(self) -> None:
        self.query_one("#help-close-button", Button).focus()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "help-close-button":
            self.dismiss()

    def action_scroll_help(self, direction: int) -> None:
        scroll = self.query_one("#help-scroll", VerticalScroll)
        if direction > 0:
            scroll.scroll_down()
        else:
            scroll.scroll_up()
