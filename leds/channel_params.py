"""Per-channel envelope and brightness parameters."""
from dataclasses import dataclass
from typing import List

NUM_CHANNELS = 16


@dataclass
class ChannelParameters:
    """Tunables consulted when a note starts on a channel."""
    attack_time: float = 80.0      # ms
    decay_time: float = 3000.0     # ms
    sustain_level: float = 0.0     # 0.0-1.0
    release_time: float = 400.0    # ms
    base_brightness: int = 0x00    # 0x00-0xFF
    enabled: bool = True


class ChannelParameterStore:
    """Fixed table of 16 independent parameter records, one per MIDI channel.

    Every setter masks the channel to 4 bits and coerces the value into its
    valid range instead of rejecting it.
    """

    def __init__(self):
        self._parameters: List[ChannelParameters] = [ChannelParameters() for _ in range(NUM_CHANNELS)]

    def __getitem__(self, channel: int) -> ChannelParameters:
        return self._parameters[channel & 0xF]

    def reset(self, channel: int):
        """Restore the documented defaults for a channel."""
        self._parameters[channel & 0xF] = ChannelParameters()

    # ── Envelope times ───────────────────────────────────────────

    def get_attack_time(self, channel: int) -> float:
        return self[channel].attack_time

    def set_attack_time(self, channel: int, attack_time: float):
        self[channel].attack_time = max(0.0, float(attack_time))

    def get_decay_time(self, channel: int) -> float:
        return self[channel].decay_time

    def set_decay_time(self, channel: int, decay_time: float):
        self[channel].decay_time = max(0.0, float(decay_time))

    def get_sustain_level(self, channel: int) -> float:
        return self[channel].sustain_level

    def set_sustain_level(self, channel: int, sustain_level: float):
        """Set the sustain level, clamped to [0, 1]."""
        self[channel].sustain_level = max(0.0, min(1.0, float(sustain_level)))

    def get_release_time(self, channel: int) -> float:
        return self[channel].release_time

    def set_release_time(self, channel: int, release_time: float):
        self[channel].release_time = max(0.0, float(release_time))

    # ── Brightness / enable ──────────────────────────────────────

    def get_base_brightness(self, channel: int) -> int:
        return self[channel].base_brightness

    def set_base_brightness(self, channel: int, base_brightness: int):
        self[channel].base_brightness = int(base_brightness) & 0xFF

    def is_enabled(self, channel: int) -> bool:
        return self[channel].enabled

    def set_enabled(self, channel: int, enabled: bool):
        self[channel].enabled = bool(enabled)
