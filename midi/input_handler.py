"""Non-blocking MIDI input: dispatches note and control messages per channel."""
import mido
from typing import Callable, Optional, Set, Tuple
from threading import Lock

NoteOnCallback = Callable[[int, int, int], None]
NoteOffCallback = Callable[[int, int], None]
ControlChangeCallback = Callable[[int, int, int], None]


class MIDIInputHandler:
    """Reads a mido input port and forwards events to callbacks.

    Held notes are tracked as (channel, note) pairs so the display can show
    what is physically pressed independently of the LED envelopes.
    """

    def __init__(self):
        self.port: Optional[mido.ports.BaseInput] = None
        self.held_notes: Set[Tuple[int, int]] = set()
        self.notes_lock = Lock()
        self._note_on_callback: Optional[NoteOnCallback] = None
        self._note_off_callback: Optional[NoteOffCallback] = None
        self._control_change_callback: Optional[ControlChangeCallback] = None

    def open_device(self, device_name: str) -> bool:
        """Open a MIDI input device.

        Returns:
            True if device opened successfully, False otherwise.
        """
        try:
            self.close_device()
            self.port = mido.open_input(device_name)
            return True
        except Exception as e:
            print(f"Error opening MIDI device: {e}")
            return False

    def close_device(self):
        """Close the current MIDI input device and forget held notes."""
        if self.port:
            try:
                self.port.close()
            except Exception as e:
                print(f"Error closing MIDI device: {e}")
            finally:
                self.port = None

        with self.notes_lock:
            self.held_notes.clear()

    def set_callbacks(self, note_on: NoteOnCallback, note_off: NoteOffCallback,
                      control_change: Optional[ControlChangeCallback] = None):
        """Set callbacks for MIDI events.

        Args:
            note_on: Called with (channel, note, velocity) for note-on.
            note_off: Called with (channel, note) for note-off, including
                note-on messages with velocity 0.
            control_change: Called with (channel, control, value).
        """
        self._note_on_callback = note_on
        self._note_off_callback = note_off
        self._control_change_callback = control_change

    def poll_messages(self):
        """Dispatch every pending message on the open port (non-blocking)."""
        if not self.port:
            return

        try:
            for msg in self.port.iter_pending():
                self.handle_message(msg)
        except AssertionError:
            # Voice pool corruption is a bug, not a port error
            raise
        except Exception as e:
            print(f"Error polling MIDI messages: {e}")

    def handle_message(self, msg: mido.Message):
        """Dispatch a single MIDI message."""
        if msg.type == 'note_on' and msg.velocity > 0:
            self._handle_note_on(msg.channel, msg.note, msg.velocity)
        elif msg.type == 'note_off' or (msg.type == 'note_on' and msg.velocity == 0):
            self._handle_note_off(msg.channel, msg.note)
        elif msg.type == 'control_change':
            if self._control_change_callback:
                self._control_change_callback(msg.channel, msg.control, msg.value)

    def _handle_note_on(self, channel: int, note: int, velocity: int):
        with self.notes_lock:
            self.held_notes.add((channel, note))

        if self._note_on_callback:
            self._note_on_callback(channel, note, velocity)

    def _handle_note_off(self, channel: int, note: int):
        with self.notes_lock:
            self.held_notes.discard((channel, note))

        if self._note_off_callback:
            self._note_off_callback(channel, note)

    def get_held_notes(self) -> Set[Tuple[int, int]]:
        """Return a copy of the currently pressed (channel, note) pairs."""
        with self.notes_lock:
            return self.held_notes.copy()

    def is_device_open(self) -> bool:
        return self.port is not None
