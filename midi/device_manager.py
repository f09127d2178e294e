"""MIDI input port discovery and selection."""
import mido
import os
import sys
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from config_manager import ConfigManager


class MIDIDeviceManager:
    """Lists MIDI inputs and remembers which one drives the LEDs."""

    def __init__(self, config_manager: 'ConfigManager' = None):
        self.config_manager = config_manager
        self.selected_device: Optional[str] = None
        self.last_error: Optional[str] = None

        if self.config_manager:
            self.selected_device = self._restore_device(self.config_manager.get_selected_device())

    def _restore_device(self, saved_device: Optional[str]) -> Optional[str]:
        """Match the saved port against the ports plugged in now.

        ALSA names end in a client:port number that changes on replug, so a
        saved name that is gone is retried without that suffix.
        """
        if not saved_device:
            return None
        if saved_device in self.get_input_devices():
            return saved_device
        return self.find_device(saved_device.rsplit(" ", 1)[0])

    def get_input_devices(self) -> List[str]:
        """Get list of available MIDI input port names.

        Backend errors are not raised; they are kept in ``last_error`` and an
        empty list is returned.
        """
        try:
            # ALSA prints its own diagnostics to stderr
            stderr_backup = sys.stderr
            with open(os.devnull, 'w') as devnull:
                sys.stderr = devnull
                try:
                    devices = mido.get_input_names()
                finally:
                    sys.stderr = stderr_backup

            self.last_error = None
            return devices
        except Exception as e:
            error_msg = str(e).lower()
            if "no such file" in error_msg and "snd/seq" in error_msg:
                self.last_error = "ALSA sequencer not available. Run: sudo modprobe snd-seq"
            else:
                self.last_error = f"Error: {e}"
            return []

    def find_device(self, pattern: str) -> Optional[str]:
        """Return the first input whose name contains ``pattern`` (case-insensitive)."""
        pattern = pattern.lower()
        for device in self.get_input_devices():
            if pattern in device.lower():
                return device
        return None

    def select_device(self, device_name: str) -> bool:
        """Select a MIDI input device.

        Args:
            device_name: Exact port name, as listed by get_input_devices().

        Returns:
            True if the port exists and is now selected.
        """
        if device_name in self.get_input_devices():
            self.selected_device = device_name
            if self.config_manager:
                self.config_manager.set_selected_device(device_name)
            return True
        return False

    def get_selected_device(self) -> Optional[str]:
        return self.selected_device
