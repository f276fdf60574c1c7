from pathlib import Path

from widgets.header import METER_WIDTH, short_folder, volume_meter
from widgets.help_screen import KEY_SECTIONS, help_markup


def test_meter_lights_proportionally():
    plain = volume_meter(50).plain
    assert plain.count("█") == METER_WIDTH // 2
    assert plain.endswith("50%")


def test_meter_shows_muted_at_zero():
    plain = volume_meter(0).plain
    assert "█" not in plain
    assert plain.endswith("MUTED")


def test_short_folder_uses_tilde():
    assert short_folder(str(Path.home() / "Music" / "jazz")) == str(Path("~") / "Music" / "jazz")
    assert short_folder("/srv/audio") == "/srv/audio"


def test_help_lists_every_key():
    markup = help_markup()
    for _, keys in KEY_SECTIONS:
        for key, description in keys:
            assert description in markup
