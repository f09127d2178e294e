"""ABOUTME: Live LED display mode - feeds MIDI into the engine and repaints each frame.
ABOUTME: MIDI polling and envelope ticks share the Textual event loop, so no locking."""
import time

from textual.widget import Widget
from textual.containers import Center, Vertical
from textual.widgets import Label
from textual.binding import Binding
from typing import TYPE_CHECKING

from components.header_widget import HeaderWidget
from components.led_strip_widget import LedStripWidget, describe_held_notes
from leds.channel_params import NUM_CHANNELS

if TYPE_CHECKING:
    from midi.input_handler import MIDIInputHandler
    from midi.device_manager import MIDIDeviceManager
    from leds.midi_leds import MidiLeds
    from leds.cc_helper import CCHelper


class LedsMode(Widget):
    """Renders the LED strip and drives the engine clock."""

    can_focus = True

    BINDINGS = [
        Binding("space", "panic", "All off", show=True),
        Binding("r", "reset_channels", "Reset params", show=True),
    ]

    DEFAULT_CSS = """
    LedsMode {
        layout: vertical;
        height: 100%;
        width: 100%;
    }

    #strip-section {
        width: 100%;
        height: auto;
        align: center middle;
        padding: 1;
    }

    #held-notes {
        width: 100%;
        height: auto;
        content-align: center middle;
        color: #888888;
        text-style: italic;
    }
    """

    def __init__(self, midi_handler: 'MIDIInputHandler', device_manager: 'MIDIDeviceManager',
                 midi_leds: 'MidiLeds', cc_helper: 'CCHelper', frame_rate: int = 60):
        super().__init__()
        self.midi_handler = midi_handler
        self.device_manager = device_manager
        self.midi_leds = midi_leds
        self.cc_helper = cc_helper
        self.frame_rate = frame_rate
        self.header = None
        self.strip = None
        self.held_label = None

    def compose(self):
        self.header = HeaderWidget("M I D I   L E D S")
        yield self.header
        with Vertical(id="strip-section"):
            with Center():
                self.strip = LedStripWidget(self.midi_leds.note_min, self.midi_leds.note_max, id="strip")
                yield self.strip
        self.held_label = Label("", id="held-notes")
        yield self.held_label

    def on_mount(self):
        self.midi_handler.set_callbacks(
            note_on=self.midi_leds.note_on,
            note_off=self.midi_leds.note_off,
            control_change=self.cc_helper.control_change,
        )
        self.set_interval(1.0 / self.frame_rate, self._on_frame)

    def _on_frame(self):
        """Poll MIDI, advance envelopes, repaint."""
        self.midi_handler.poll_messages()
        self.midi_leds.tick(time.monotonic() * 1000.0)

        self.strip.update_leds(self.midi_leds.leds)
        device = self.device_manager.get_selected_device() if self.midi_handler.is_device_open() else None
        self.header.update_status(device,
                                  self.midi_leds.get_active_voices(),
                                  self.midi_leds.num_voices)
        self.held_label.update(describe_held_notes(self.midi_handler.get_held_notes()))

    def action_panic(self):
        """Release every voice on every channel."""
        for channel in range(NUM_CHANNELS):
            self.midi_leds.all_leds_off(channel)

    def action_reset_channels(self):
        """Restore default envelope, brightness and color settings on all channels."""
        colors = self.cc_helper.midi_colors
        for channel in range(NUM_CHANNELS):
            note_min = colors.get_note_min(channel)
            note_max = colors.get_note_max(channel)
            self.midi_leds.reset(channel)
            colors.reset(channel)
            colors.set_note_min(channel, note_min)
            colors.set_note_max(channel, note_max)
        self.app.notify("Channel parameters reset")
