"""Configuration file management."""
import json
from pathlib import Path
from typing import Optional, Union


class ConfigManager:
    """Manages application configuration."""

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        if config_file is None:
            config_file = Path(__file__).parent / "config.json"
        self.config_file = Path(config_file)
        self.config = self._load_config()

    def _load_config(self) -> dict:
        """Load configuration from file, filling in missing keys with defaults."""
        config = self._default_config()
        if self.config_file.exists():
            try:
                with open(self.config_file, 'r') as f:
                    loaded = json.load(f)
                if isinstance(loaded, dict):
                    config.update(loaded)
            except Exception as e:
                print(f"Error loading config: {e}")
                return self._default_config()
        return config

    def _default_config(self) -> dict:
        """Return default configuration."""
        return {
            "selected_midi_device": None,
            "note_min": 21,      # A0, lowest key of an 88-key piano
            "note_max": 108,     # C8
            "num_voices": 32,
            "frame_rate": 60,
            "time_range": 5000,  # ms, envelope time at CC value 127
        }

    def save_config(self):
        """Save configuration to file."""
        try:
            with open(self.config_file, 'w') as f:
                json.dump(self.config, f, indent=2)
        except Exception as e:
            print(f"Error saving config: {e}")

    def _get_int(self, key: str) -> int:
        try:
            return int(self.config.get(key))
        except (TypeError, ValueError):
            return self._default_config()[key]

    # ── MIDI device ──────────────────────────────────────────────

    def get_selected_device(self) -> Optional[str]:
        """Get the saved MIDI device."""
        return self.config.get("selected_midi_device")

    def set_selected_device(self, device_name: Optional[str]):
        """Save the selected MIDI device."""
        self.config["selected_midi_device"] = device_name
        self.save_config()

    # ── LED strip ────────────────────────────────────────────────

    def get_note_range(self) -> tuple:
        """Return (note_min, note_max), masked to 7 bits and ordered."""
        note_min = self._get_int("note_min") & 0x7F
        note_max = self._get_int("note_max") & 0x7F
        return (min(note_min, note_max), max(note_min, note_max))

    def set_note_range(self, note_min: int, note_max: int):
        self.config["note_min"] = int(note_min) & 0x7F
        self.config["note_max"] = int(note_max) & 0x7F
        self.save_config()

    def get_num_voices(self) -> int:
        """Return the voice pool size (at least 1)."""
        return max(1, self._get_int("num_voices"))

    def get_frame_rate(self) -> int:
        """Return the render rate in frames per second. Clamped to [1, 240]."""
        return max(1, min(240, self._get_int("frame_rate")))

    def get_time_range(self) -> int:
        """Return the CC envelope time range in ms (at least 1)."""
        return max(1, self._get_int("time_range"))
