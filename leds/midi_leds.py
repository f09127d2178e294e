"""Polyphonic ADSR voice engine that renders MIDI notes into an LED buffer."""
import math
from typing import Callable, List, Optional, Set, Tuple

import numpy as np

from leds.adsr_envelope import AdsrEnvelope
from leds.channel_params import ChannelParameterStore

HSV8 = Tuple[int, int, int]
ColorSource = Callable[[int, int, int], Optional[HSV8]]


class Voice:
    """One slot of polyphony: a (channel, note) identity bound to an envelope."""

    def __init__(self, index: int):
        self.index = index
        self.channel: Optional[int] = None
        self.note: Optional[int] = None
        self.hsv8: HSV8 = (0x00, 0x00, 0x00)
        self.envelope = AdsrEnvelope()
        self.age = 0

    def is_idle(self) -> bool:
        return self.envelope.is_idle()

    def is_bound_to(self, channel: int, note: int) -> bool:
        return self.channel == channel and self.note == note

    def is_playing(self, channel: int, note: int) -> bool:
        return self.is_bound_to(channel, note) and not self.is_idle()


class MidiLeds:
    """Drives a strip of LEDs (one per note) from MIDI note events.

    The pool holds a fixed number of voices. A note-on reuses the voice
    already bound to the same (channel, note), else takes the first idle
    voice, else steals the voice with the greatest age (lowest slot index on
    ties). Every ``tick`` advances the active envelopes and writes
    (hue, saturation, brightness) into ``leds[note - note_min]``; voices are
    composited in slot order, so on a shared position the higher slot wins.
    """

    def __init__(self, note_min: int, note_max: int, num_voices: int,
                 color_source: ColorSource):
        """
        Args:
            note_min: Lowest note mapped to an LED (masked to 7 bits).
            note_max: Highest note mapped to an LED (masked to 7 bits).
            num_voices: Size of the voice pool, fixed for the engine's lifetime.
            color_source: Callable returning the base HSV8 color for
                (channel, note, velocity), or None to drop the note.
        """
        self.note_min = note_min & 0x7F
        self.note_max = note_max & 0x7F
        if self.note_max < self.note_min:
            self.note_min, self.note_max = self.note_max, self.note_min
        self.num_voices = max(1, int(num_voices))
        self.color_source = color_source

        self.leds = np.zeros((self.note_max - self.note_min + 1, 3), dtype=np.uint8)
        self.voices: List[Voice] = [Voice(i) for i in range(self.num_voices)]
        self.parameters = ChannelParameterStore()
        self._active_voices = 0
        # LED positions left behind by stolen voices, cleared on the next tick
        self._pending_blank: Set[int] = set()

    # ── Parameter access ─────────────────────────────────────────

    def get_attack_time(self, channel: int) -> float:
        return self.parameters.get_attack_time(channel)

    def set_attack_time(self, channel: int, attack_time: float):
        self.parameters.set_attack_time(channel, attack_time)

    def get_decay_time(self, channel: int) -> float:
        return self.parameters.get_decay_time(channel)

    def set_decay_time(self, channel: int, decay_time: float):
        self.parameters.set_decay_time(channel, decay_time)

    def get_sustain_level(self, channel: int) -> float:
        return self.parameters.get_sustain_level(channel)

    def set_sustain_level(self, channel: int, sustain_level: float):
        self.parameters.set_sustain_level(channel, sustain_level)

    def get_release_time(self, channel: int) -> float:
        return self.parameters.get_release_time(channel)

    def set_release_time(self, channel: int, release_time: float):
        self.parameters.set_release_time(channel, release_time)

    def get_base_brightness(self, channel: int) -> int:
        return self.parameters.get_base_brightness(channel)

    def set_base_brightness(self, channel: int, base_brightness: int):
        self.parameters.set_base_brightness(channel, base_brightness)

    def is_enabled(self, channel: int) -> bool:
        return self.parameters.is_enabled(channel)

    def set_enabled(self, channel: int, enabled: bool):
        self.parameters.set_enabled(channel, enabled)

    def reset(self, channel: int):
        """Restore a channel's parameters to their defaults."""
        self.parameters.reset(channel)

    def get_active_voices(self) -> int:
        """Number of voices that were active when the last tick started."""
        return self._active_voices

    # ── Voice pool ───────────────────────────────────────────────

    def allocate(self, channel: int, note: int) -> Voice:
        """Pick a voice for (channel, note) and bind it, resetting its age."""
        bound = None
        idle = None
        oldest = None
        for voice in self.voices:
            if voice.is_bound_to(channel, note):
                assert bound is None, f"voices {bound.index} and {voice.index} both bound to {channel}:{note}"
                bound = voice
            if idle is None and voice.is_idle():
                idle = voice
            if oldest is None or voice.age > oldest.age:
                oldest = voice

        if bound is not None:
            voice = bound
        elif idle is not None:
            voice = idle
        else:
            voice = oldest
            self._pending_blank.add(voice.note - self.note_min)

        voice.channel = channel
        voice.note = note
        voice.age = 0
        return voice

    def find_voice(self, channel: int, note: int) -> Optional[Voice]:
        """Return the active voice playing (channel, note), if any."""
        for voice in self.voices:
            if voice.is_playing(channel, note):
                return voice
        return None

    def release(self, channel: int, note: int):
        voice = self.find_voice(channel, note)
        if voice is not None:
            voice.envelope.note_off()

    def _in_range(self, note: int) -> bool:
        return self.note_min <= note <= self.note_max

    # ── MIDI entry points ────────────────────────────────────────

    def note_on(self, channel: int, note: int, velocity: int):
        """Process a Note-On event."""
        channel &= 0xF
        note &= 0x7F
        velocity &= 0x7F
        p = self.parameters[channel]
        if not p.enabled or not self._in_range(note):
            return

        hsv8 = self.color_source(channel, note, velocity)
        if hsv8 is None:
            return

        voice = self.allocate(channel, note)
        voice.hsv8 = tuple(hsv8)
        voice.envelope.note_on(p.attack_time, p.decay_time, p.sustain_level, p.release_time)
        voice.age = 0

    def note_off(self, channel: int, note: int):
        """Process a Note-Off event."""
        channel &= 0xF
        note &= 0x7F
        if not self.parameters[channel].enabled or not self._in_range(note):
            return
        self.release(channel, note)

    def all_leds_off(self, channel: int):
        """Release every active voice on a channel."""
        channel &= 0xF
        for voice in self.voices:
            if voice.channel == channel and not voice.is_idle():
                voice.envelope.note_off()

    def tick(self, time_ms: float):
        """Advance all active voices to ``time_ms`` and refresh the LED buffer."""
        for index in self._pending_blank:
            self.leds[index] = (0x00, 0x00, 0x00)
        self._pending_blank.clear()

        active = 0
        for voice in self.voices:
            if voice.is_idle():
                continue
            active += 1
            voice.envelope.tick(time_ms)
            voice.age += 1
            hue, saturation, value = voice.hsv8
            brightness = math.floor(value * voice.envelope.get_output() + 0.5)
            base_brightness = self.parameters[voice.channel].base_brightness
            if brightness < base_brightness:
                brightness = base_brightness
            self.leds[voice.note - self.note_min] = (hue, saturation, brightness)
        self._active_voices = active
