"""ABOUTME: ADSR envelope generator driven by an external millisecond clock.
ABOUTME: One instance per voice; re-armed by note_on and released by note_off."""
import math
from enum import Enum
from typing import Optional


class EnvelopeState(Enum):
    """Envelope phases."""
    IDLE = 0
    ATTACK = 1
    DECAY = 2
    SUSTAIN = 3
    RELEASE = 4


def _rate(amount: float, duration: float) -> float:
    """Ramp slope in units per millisecond, infinite for zero-length phases."""
    if duration <= 0:
        return math.inf
    return amount / duration


class AdsrEnvelope:
    """Attack/Decay/Sustain/Release envelope with a single output in [0, 1].

    Times are in milliseconds and the output is recomputed from the time
    elapsed since the current phase started, so irregular tick spacing never
    accumulates error. A phase whose duration is zero snaps straight to its
    target on the next tick.
    """

    def __init__(self):
        self.state = EnvelopeState.IDLE
        self.output = 0.0
        self.target = 0.0
        self.attack_rate = 0.0
        self.decay_start = 0.0
        self.decay_rate = 0.0
        self.sustain_level = 0.0
        self.release_start = 0.0
        self.release_rate = 0.0
        self.release_time = 0.0
        # None until the first tick of the phase has been observed
        self.phase_start: Optional[float] = None
        # Latest tick time seen since the last note_on
        self.last_time: Optional[float] = None

    def note_on(self, attack_time: float, decay_time: float,
                sustain_level: float, release_time: float):
        """Start the envelope from zero, whatever state it was in.

        Args:
            attack_time: Time to rise from 0 to 1 (ms).
            decay_time: Time to fall from 1 to the sustain level (ms).
            sustain_level: Level held while the note is down (0.0-1.0).
            release_time: Time to fall from 1 to 0 after note_off (ms).
        """
        self.state = EnvelopeState.ATTACK
        self.output = 0.0
        self.target = 1.0
        self.attack_rate = _rate(1.0, attack_time)
        self.decay_rate = _rate(1.0 - sustain_level, decay_time)
        self.sustain_level = sustain_level
        self.release_time = release_time
        self.phase_start = None
        self.last_time = None

    def note_off(self):
        """Move into the release phase from the level currently reached."""
        if self.state == EnvelopeState.IDLE:
            return
        self.state = EnvelopeState.RELEASE
        self.target = 0.0
        self.release_start = self.output
        self.release_rate = _rate(self.release_start, self.release_time)
        # The release begins at the last clock reading of this note cycle
        self.phase_start = self.last_time

    def tick(self, now: float):
        """Advance the envelope to time ``now`` (ms, non-decreasing)."""
        if self.state == EnvelopeState.IDLE:
            return

        self.last_time = now
        if self.phase_start is None:
            self.phase_start = now
        elapsed = now - self.phase_start

        if self.state == EnvelopeState.ATTACK:
            if math.isfinite(self.attack_rate):
                self.output = elapsed * self.attack_rate
            else:
                self.output = self.target
            if self.output >= self.target:
                self.state = EnvelopeState.DECAY
                self.output = self.target
                self.phase_start = now
                self.decay_start = self.target
                self.target = self.sustain_level

        elif self.state == EnvelopeState.DECAY:
            if math.isfinite(self.decay_rate):
                self.output = self.decay_start - elapsed * self.decay_rate
            else:
                self.output = self.target
            if self.output <= self.target:
                self.state = EnvelopeState.SUSTAIN
                self.output = self.target
                self.phase_start = None

        elif self.state == EnvelopeState.SUSTAIN:
            self.phase_start = None
            if self.output == 0.0:
                self.state = EnvelopeState.IDLE

        elif self.state == EnvelopeState.RELEASE:
            if math.isfinite(self.release_rate):
                self.output = self.release_start - elapsed * self.release_rate
            else:
                self.output = self.target
            if self.output <= self.target:
                self.state = EnvelopeState.IDLE
                self.output = self.target
                self.phase_start = None

    def get_output(self) -> float:
        return self.output

    def is_idle(self) -> bool:
        return self.state == EnvelopeState.IDLE
