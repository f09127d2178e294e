"""ABOUTME: Routes MIDI Control Change messages to LED engine and color parameters.
ABOUTME: Controller values (0-127) are scaled to each parameter's own range."""
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from leds.midi_leds import MidiLeds
    from leds.midi_colors import MidiColors

CC_PALETTE = 0x14
CC_COLOR_MAP = 0x15
CC_FIXED_HUE = 0x16
CC_ATTACK_TIME = 0x17
CC_DECAY_TIME = 0x18
CC_SUSTAIN_LEVEL = 0x19
CC_RELEASE_TIME = 0x1A
CC_IGNORE_VELOCITY = 0x1B
CC_BASE_BRIGHTNESS = 0x1C
CC_ENABLED = 0x1D
CC_ALL_SOUND_OFF = 0x78
CC_ALL_NOTES_OFF = 0x7B


class CCHelper:
    """Maps controller numbers onto MidiLeds / MidiColors setters."""

    def __init__(self, midi_leds: 'MidiLeds', midi_colors: 'MidiColors', time_range: float = 5000):
        """
        Args:
            midi_leds: Engine receiving envelope, brightness and enable changes.
            midi_colors: Color source receiving palette changes.
            time_range: Envelope time (ms) reached at controller value 127.
        """
        self.midi_leds = midi_leds
        self.midi_colors = midi_colors
        self.time_range = time_range

    def get_time_range(self) -> float:
        return self.time_range

    def set_time_range(self, time_range: float):
        self.time_range = max(1, time_range)

    def _scale_time(self, value: int) -> int:
        return round(self.time_range * (value / 0x7F))

    def control_change(self, channel: int, control: int, value: int) -> bool:
        """Apply a Control Change message.

        Returns:
            True if the controller is one this helper handles.
        """
        channel &= 0xF
        value &= 0x7F

        if control == CC_PALETTE:
            self.midi_colors.set_palette(channel, value)
        elif control == CC_COLOR_MAP:
            self.midi_colors.set_color_map(channel, value)
        elif control == CC_FIXED_HUE:
            self.midi_colors.set_fixed_hue(channel, round(0xFF * (value / 0x7F)))
        elif control == CC_ATTACK_TIME:
            self.midi_leds.set_attack_time(channel, self._scale_time(value))
        elif control == CC_DECAY_TIME:
            self.midi_leds.set_decay_time(channel, self._scale_time(value))
        elif control == CC_SUSTAIN_LEVEL:
            self.midi_leds.set_sustain_level(channel, value / 0x7F)
        elif control == CC_RELEASE_TIME:
            self.midi_leds.set_release_time(channel, self._scale_time(value))
        elif control == CC_IGNORE_VELOCITY:
            self.midi_colors.set_ignore_velocity(channel, value >= 0x40)
        elif control == CC_BASE_BRIGHTNESS:
            self.midi_leds.set_base_brightness(channel, round(0xFF * (value / 0x7F)))
        elif control == CC_ENABLED:
            self.midi_leds.set_enabled(channel, value >= 0x40)
        elif control in (CC_ALL_SOUND_OFF, CC_ALL_NOTES_OFF):
            self.midi_leds.all_leds_off(channel)
        else:
            return False
        return True
