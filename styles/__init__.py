"""Shared style constants for FOLDERPLAY."""

COLORS = {
    "bass": "#cc5500",
    "primary": "#ff8c00",
    "highlight": "#ffb347",
    "background": "#1a1a1a",
    "surface": "#2d2d2d",
    "muted": "#888888",
    "dim": "#555555",
    "inactive": "#333333",
}

COLOR_BASS = COLORS["bass"]
COLOR_PRIMARY = COLORS["primary"]
COLOR_HIGHLIGHT = COLORS["highlight"]
COLOR_MUTED = COLORS["muted"]
COLOR_DIM = COLORS["dim"]
COLOR_INACTIVE = COLORS["inactive"]

# Visualization palettes. Spectrum entries are (saturation %, lightness %)
# for the top and bottom of each bar; hue comes from the bin index.
VISUALIZER_PALETTES = {
    "dark": {
        "spectrum_top": (100, 70),
        "spectrum_bottom": (80, 40),
        "glow": (100, 70),
        "waveform": ("#8c1aff", "#4da6ff", "#00ccff"),
        "stroke": "#ffffff",
        "background": "#1a1a1a",
    },
    "light": {
        "spectrum_top": (100, 60),
        "spectrum_bottom": (80, 30),
        "glow": (100, 70),
        "waveform": ("#ff3366", "#007bff", "#00cccc"),
        "stroke": "#000000",
        "background": "#f4f4f4",
    },
}
