"""LED strip widget: paints the engine's HSV8 buffer as a row of colored cells."""
import numpy as np
import mingus.core.notes as notes
from textual.widgets import Static
from typing import Iterable, Tuple


def hsv8_to_rgb(hsv8: np.ndarray) -> np.ndarray:
    """Convert an (N, 3) array of 8-bit HSV colors to (N, 3) 8-bit RGB."""
    hsv = np.asarray(hsv8, dtype=np.float64).reshape(-1, 3) / 0xFF
    h, s, v = hsv[:, 0], hsv[:, 1], hsv[:, 2]
    i = np.floor(h * 6)
    f = h * 6 - i
    p = v * (1 - s)
    q = v * (1 - f * s)
    t = v * (1 - (1 - f) * s)
    sector = i.astype(np.int64) % 6
    r = np.choose(sector, [v, q, p, p, t, v])
    g = np.choose(sector, [t, v, v, q, p, p])
    b = np.choose(sector, [p, p, t, v, v, q])
    return np.floor(np.stack([r, g, b], axis=1) * 0xFF).astype(np.uint8)


def note_label(note: int) -> str:
    """MIDI note to name with octave, middle C (60) being C4."""
    return f"{notes.int_to_note(note % 12)}{note // 12 - 1}"


def build_strip_markup(leds: np.ndarray, note_min: int) -> str:
    """Render the buffer as two lines: colored cells, then C octave labels."""
    rgb = hsv8_to_rgb(leds)
    cells = "".join(f"[#{r:02x}{g:02x}{b:02x}]█[/]" for r, g, b in rgb)

    labels = [" "] * len(rgb)
    for index in range(len(rgb)):
        note = note_min + index
        if note % 12 == 0:
            for offset, char in enumerate(note_label(note)):
                if index + offset < len(labels):
                    labels[index + offset] = char
    return f"{cells}\n[#666666]{''.join(labels)}[/]"


def describe_held_notes(held: Iterable[Tuple[int, int]]) -> str:
    """Format held (channel, note) pairs as e.g. 'C4 E4 (ch 1)'."""
    by_channel = {}
    for channel, note in sorted(held):
        by_channel.setdefault(channel, []).append(note_label(note))
    return "  ".join(f"{' '.join(names)} (ch {channel + 1})" for channel, names in by_channel.items())


class LedStripWidget(Static):
    """Shows one terminal cell per LED, refreshed every frame."""

    DEFAULT_CSS = """
    LedStripWidget {
        width: auto;
        height: auto;
        min-height: 2;
        background: #0a0a0a;
    }
    """

    def __init__(self, note_min: int, note_max: int, **kwargs):
        self.note_min = note_min
        self.note_max = note_max
        blank = np.zeros((note_max - note_min + 1, 3), dtype=np.uint8)
        super().__init__(build_strip_markup(blank, note_min), **kwargs)

    def update_leds(self, leds: np.ndarray):
        self.update(build_strip_markup(leds, self.note_min))
