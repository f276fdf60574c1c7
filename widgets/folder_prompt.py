from __future__ import annotations

import logging

from textual.app import ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label

logger = logging.getLogger(__name__)


class FolderPromptScreen(ModalScreen[str | None]):
    """Modal screen asking for a folder path to browse."""

    def __init__(self, initial_path: str = "") -> None:
        super().__init__()
        self.initial_path = initial_path

    def compose(self) -> ComposeResult:
        with Container(id="folder-prompt-container"):
            yield Label("📁 Open Folder", id="folder-prompt-title")
            yield Label("Enter the path of a folder with audio files:", id="folder-prompt-label")
            yield Input(
                value=self.initial_path,
                placeholder="~/Music",
                id="folder-input",
            )
            with Horizontal(id="folder-prompt-buttons"):
                yield Button("Open", id="folder-confirm-button", variant="success")
                yield Button("Cancel", id="folder-cancel-button", variant="default")

    def on_mount(self) -> None:
        self.call_after_refresh(self._focus_input)

    def _focus_input(self) -> None:
        try:
            self.query_one("#folder-input", Input).focus()
        except Exception as e:
            logger.error(f"Failed to focus input: {e}")

    def _submit(self) -> None:
        folder = self.query_one("#folder-input", Input).value.strip()
        self.dismiss(folder or None)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "folder-confirm-button":
            self._submit()
        elif event.button.id == "folder-cancel-button":
            self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._submit()

    def on_key(self, event) -> None:
        if event.key == "escape":
            self.dismiss(None)
            event.stop()
