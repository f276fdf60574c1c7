from __future__ import annotations

from pathlib import Path

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.css.query import NoMatches
from textual.reactive import reactive
from textual.widgets import Static

from styles import COLOR_BASS, COLOR_PRIMARY, COLOR_HIGHLIGHT, COLOR_MUTED, COLOR_DIM, COLOR_INACTIVE

FOLDERPLAY_BANNER = "▌▌ FOLDERPLAY ▐▐"

METER_WIDTH = 20
SEGMENT_SEPARATOR = "    │    "


def volume_meter(level: int, width: int = METER_WIDTH) -> Text:
    """Segmented volume meter, bass-coloured at the low end."""
    lit = int(level / 100 * width)
    meter = Text("│", style=COLOR_MUTED)
    for cell in range(width):
        if cell >= lit:
            meter.append("─", style=COLOR_INACTIVE)
            continue
        share = cell / width
        colour = COLOR_BASS if share < 0.5 else COLOR_PRIMARY if share < 0.75 else COLOR_HIGHLIGHT
        meter.append("█", style=colour)
    meter.append("│ ", style=COLOR_MUTED)
    if level == 0:
        meter.append("MUTED", style=f"{COLOR_MUTED} bold")
    else:
        meter.append(f"{level}%", style=f"{COLOR_PRIMARY} bold")
    return meter


def short_folder(folder: str) -> str:
    """Folder path with the home directory shown as ~."""
    path = Path(folder)
    try:
        return str(Path("~") / path.relative_to(Path.home()))
    except ValueError:
        return str(path)


class Header(Vertical):
    """Banner plus a one-line status bar: volume, theme and open folder."""

    volume_level: reactive[int] = reactive(100)
    theme_name: reactive[str] = reactive("dark")
    folder: reactive[str] = reactive("")

    def compose(self) -> ComposeResult:
        yield Static(Text(FOLDERPLAY_BANNER, style=f"{COLOR_PRIMARY} bold"), id="header-logo")
        yield Static(self.status_line(), id="header-volume")

    def status_line(self) -> Text:
        segments = [
            Text("Volume ", style=COLOR_MUTED) + volume_meter(self.volume_level),
            Text.assemble(("Theme ", COLOR_MUTED), (self.theme_name.upper(), f"{COLOR_PRIMARY} bold")),
        ]
        if self.folder:
            segments.append(Text(short_folder(self.folder), style=COLOR_DIM))
        return Text(SEGMENT_SEPARATOR, style=COLOR_MUTED).join(segments)

    def _redraw(self) -> None:
        try:
            status = self.query_one("#header-volume", Static)
        except NoMatches:
            return
        status.update(self.status_line())

    def watch_volume_level(self) -> None:
        self._redraw()

    def watch_theme_name(self) -> None:
        self._redraw()

    def watch_folder(self) -> None:
        self._redraw()
