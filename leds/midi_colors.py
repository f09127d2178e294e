"""ABOUTME: MIDI note to HSV8 color source with per-channel palettes.
ABOUTME: Palettes are a closed set of variants dispatched once per note-on."""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple, Union

from leds.channel_params import NUM_CHANNELS

HSV8 = Tuple[int, int, int]


class ColorMap(Enum):
    """Historical note-to-color associations (one color per pitch class)."""
    AEPPLI_1940 = 0
    BELMONT_1944 = 1
    BERTRAND_1734 = 2
    BISHOP_1893 = 3
    FIELD_1816 = 4
    HELMHOLTZ_1910 = 5
    JAMESON_1844 = 6
    KLEIN_1930 = 7
    NEWTON_1704 = 8
    RIMINGTON_1893 = 9
    SCRIABIN_1911 = 10
    SEEMANN_1881 = 11
    ZIEVERINK_2004 = 12


# HSV8 for pitch classes C, C#, D ... B
COLOR_MAP_DATA = {
    ColorMap.AEPPLI_1940: [(0, 245, 250), (10, 240, 250), (20, 238, 248), (32, 209, 248), (42, 192, 245), (69, 232, 220),
                           (96, 220, 143), (122, 207, 145), (136, 209, 156), (150, 209, 161), (194, 227, 125), (214, 240, 125)],
    ColorMap.BELMONT_1944: [(0, 245, 250), (9, 238, 245), (20, 238, 248), (35, 235, 248), (42, 192, 245), (51, 192, 225),
                            (96, 220, 143), (122, 207, 145), (176, 230, 130), (222, 225, 168), (231, 232, 217), (240, 235, 174)],
    ColorMap.BERTRAND_1734: [(176, 230, 130), (122, 207, 145), (96, 220, 143), (56, 189, 145), (42, 192, 245), (34, 192, 245),
                             (20, 238, 248), (0, 245, 250), (0, 240, 158), (231, 232, 217), (194, 227, 125), (214, 240, 125)],
    ColorMap.BISHOP_1893: [(0, 245, 250), (0, 240, 158), (20, 238, 248), (35, 235, 248), (42, 192, 245), (51, 192, 225),
                           (96, 220, 143), (115, 197, 166), (214, 240, 125), (231, 232, 217), (243, 225, 215), (0, 245, 250)],
    ColorMap.FIELD_1816: [(176, 230, 130), (196, 235, 133), (214, 240, 125), (236, 245, 192), (0, 245, 250), (20, 238, 248),
                          (32, 209, 248), (42, 192, 245), (49, 220, 220), (56, 189, 145), (76, 207, 151), (96, 220, 143)],
    ColorMap.HELMHOLTZ_1910: [(42, 192, 245), (96, 220, 143), (122, 207, 145), (150, 209, 161), (214, 240, 125), (231, 232, 217),
                              (234, 232, 161), (0, 245, 250), (7, 243, 209), (7, 243, 209), (5, 240, 248), (19, 240, 243)],
    ColorMap.JAMESON_1844: [(0, 245, 250), (9, 238, 245), (20, 238, 248), (34, 192, 245), (42, 192, 245), (96, 220, 143),
                            (122, 207, 145), (176, 230, 130), (194, 227, 125), (214, 240, 125), (222, 225, 168), (231, 232, 217)],
    ColorMap.KLEIN_1930: [(0, 243, 194), (0, 245, 250), (9, 238, 245), (20, 238, 248), (42, 192, 245), (51, 192, 225),
                          (96, 220, 143), (122, 207, 145), (176, 230, 130), (207, 209, 135), (231, 232, 217), (234, 232, 161)],
    ColorMap.NEWTON_1704: [(0, 245, 250), (10, 240, 250), (20, 238, 248), (32, 209, 248), (42, 192, 245), (96, 220, 143),
                           (136, 227, 143), (176, 230, 130), (196, 235, 133), (214, 240, 125), (223, 238, 176), (231, 232, 217)],
    ColorMap.RIMINGTON_1893: [(0, 245, 250), (0, 240, 158), (9, 238, 245), (20, 238, 248), (42, 192, 245), (56, 189, 145),
                              (96, 220, 143), (115, 197, 166), (122, 207, 145), (214, 240, 125), (176, 230, 130), (231, 232, 217)],
    ColorMap.SCRIABIN_1911: [(0, 245, 250), (231, 232, 217), (42, 192, 245), (174, 89, 133), (150, 209, 161), (0, 240, 158),
                             (176, 230, 130), (20, 238, 248), (214, 240, 125), (96, 220, 143), (174, 89, 133), (150, 209, 161)],
    ColorMap.SEEMANN_1881: [(0, 186, 104), (0, 245, 250), (20, 238, 248), (34, 192, 245), (42, 192, 245), (96, 220, 143),
                            (122, 207, 145), (176, 230, 130), (214, 240, 125), (231, 232, 217), (0, 186, 104), (0, 0, 7)],
    ColorMap.ZIEVERINK_2004: [(51, 192, 225), (96, 220, 143), (122, 207, 145), (176, 230, 130), (214, 240, 125), (231, 232, 217),
                              (231, 225, 110), (0, 240, 158), (0, 245, 250), (20, 238, 248), (44, 110, 240), (42, 192, 245)],
}


def _scale(velocity: int, value: int) -> int:
    return round((velocity / 0x7F) * value)


@dataclass(frozen=True)
class ColorMapPalette:
    """Color by pitch class from one of the historical color maps."""
    color_map: ColorMap = ColorMap.NEWTON_1704

    def color(self, note: int, velocity: int, note_min: int, note_max: int) -> HSV8:
        hue, saturation, value = COLOR_MAP_DATA[self.color_map][note % 12]
        return (hue, saturation, _scale(velocity, value))


@dataclass(frozen=True)
class RainbowPalette:
    """Spread the full hue circle across the channel's note window."""

    def color(self, note: int, velocity: int, note_min: int, note_max: int) -> HSV8:
        hue = round((note - note_min) * (0xFF / (note_max - note_min + 1)))
        return (hue, 0xFF, _scale(velocity, 0xFF))


@dataclass(frozen=True)
class FixedHuePalette:
    """Same hue for every note."""
    hue: int = 0x00

    def color(self, note: int, velocity: int, note_min: int, note_max: int) -> HSV8:
        return (self.hue & 0xFF, 0xFF, _scale(velocity, 0xFF))


Palette = Union[ColorMapPalette, RainbowPalette, FixedHuePalette]

# Palette numbers as sent over MIDI CC
PALETTE_COLOR_MAP = 0
PALETTE_RAINBOW = 1
PALETTE_FIXED_HUE = 2


@dataclass
class ColorParameters:
    note_min: int = 0x00
    note_max: int = 0x7F
    palette: Palette = field(default_factory=ColorMapPalette)
    # Remembered so switching palettes back and forth keeps them
    color_map: ColorMap = ColorMap.NEWTON_1704
    fixed_hue: int = 0x00
    ignore_velocity: bool = True


class MidiColors:
    """Per-channel color source.

    Instances are callable as ``colors(channel, note, velocity)`` and return
    an (hue, saturation, value) triple, or None when the note is outside the
    channel's note window.
    """

    def __init__(self):
        self._parameters: List[ColorParameters] = [ColorParameters() for _ in range(NUM_CHANNELS)]

    def reset(self, channel: int):
        self._parameters[channel & 0xF] = ColorParameters()

    def get_note_min(self, channel: int) -> int:
        return self._parameters[channel & 0xF].note_min

    def set_note_min(self, channel: int, note_min: int):
        self._parameters[channel & 0xF].note_min = note_min & 0x7F

    def get_note_max(self, channel: int) -> int:
        return self._parameters[channel & 0xF].note_max

    def set_note_max(self, channel: int, note_max: int):
        self._parameters[channel & 0xF].note_max = note_max & 0x7F

    def get_palette(self, channel: int) -> Palette:
        return self._parameters[channel & 0xF].palette

    def set_palette(self, channel: int, palette: Union[Palette, int]):
        """Select the palette for a channel.

        Args:
            channel: MIDI channel.
            palette: A palette instance, or a palette number (0 color map,
                1 rainbow, 2 fixed hue). Selecting by number uses the
                channel's remembered color map and fixed hue. Unknown
                numbers are ignored.
        """
        p = self._parameters[channel & 0xF]
        if isinstance(palette, ColorMapPalette):
            p.color_map = palette.color_map
        elif isinstance(palette, FixedHuePalette):
            p.fixed_hue = palette.hue & 0xFF
        elif palette == PALETTE_COLOR_MAP:
            palette = ColorMapPalette(p.color_map)
        elif palette == PALETTE_RAINBOW:
            palette = RainbowPalette()
        elif palette == PALETTE_FIXED_HUE:
            palette = FixedHuePalette(p.fixed_hue)
        elif isinstance(palette, int):
            return
        p.palette = palette

    def get_color_map(self, channel: int) -> ColorMap:
        return self._parameters[channel & 0xF].color_map

    def set_color_map(self, channel: int, color_map: Union[ColorMap, int]):
        """Set the channel's color map, by enum or by index (unknown indexes are ignored)."""
        if not isinstance(color_map, ColorMap):
            try:
                color_map = ColorMap(color_map)
            except ValueError:
                return
        p = self._parameters[channel & 0xF]
        p.color_map = color_map
        if isinstance(p.palette, ColorMapPalette):
            p.palette = ColorMapPalette(color_map)

    def get_fixed_hue(self, channel: int) -> int:
        return self._parameters[channel & 0xF].fixed_hue

    def set_fixed_hue(self, channel: int, hue: int):
        p = self._parameters[channel & 0xF]
        p.fixed_hue = hue & 0xFF
        if isinstance(p.palette, FixedHuePalette):
            p.palette = FixedHuePalette(p.fixed_hue)

    def is_ignore_velocity(self, channel: int) -> bool:
        return self._parameters[channel & 0xF].ignore_velocity

    def set_ignore_velocity(self, channel: int, state: bool):
        self._parameters[channel & 0xF].ignore_velocity = bool(state)

    def get(self, channel: int, note: int, velocity: int) -> Optional[HSV8]:
        p = self._parameters[channel & 0xF]
        note &= 0x7F
        if note < p.note_min or note > p.note_max:
            return None
        _velocity = 0x7F if p.ignore_velocity else velocity & 0x7F
        return p.palette.color(note, _velocity, p.note_min, p.note_max)

    __call__ = get
