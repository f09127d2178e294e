#!/usr/bin/env python3
"""MIDI LEDs TUI Application - Main Entry Point."""
import os
from typing import Tuple

from textual.app import App
from textual.binding import Binding
from textual.widgets import Header, Footer
from textual.containers import Container
from textual.screen import Screen

from config_manager import ConfigManager
from midi.device_manager import MIDIDeviceManager
from midi.input_handler import MIDIInputHandler
from leds.cc_helper import CCHelper
from leds.channel_params import NUM_CHANNELS
from leds.midi_colors import MidiColors
from leds.midi_leds import MidiLeds
from modes.config_mode import ConfigMode
from modes.leds_mode import LedsMode


def create_engine(config_manager: ConfigManager) -> Tuple[MidiLeds, MidiColors, CCHelper]:
    """Build the color source, voice engine and CC router from the config."""
    note_min, note_max = config_manager.get_note_range()
    midi_colors = MidiColors()
    # Spread rainbow palettes over the physical strip rather than all 128 notes
    for channel in range(NUM_CHANNELS):
        midi_colors.set_note_min(channel, note_min)
        midi_colors.set_note_max(channel, note_max)
    midi_leds = MidiLeds(note_min, note_max, config_manager.get_num_voices(), midi_colors)
    cc_helper = CCHelper(midi_leds, midi_colors, config_manager.get_time_range())
    return midi_leds, midi_colors, cc_helper


class MainScreen(Screen):
    """Header, LED strip and footer."""

    CSS = """
    MainScreen {
        layout: vertical;
    }

    #content-area {
        height: 1fr;
        width: 100%;
        align: center middle;
    }
    """

    BINDINGS = [
        Binding("c", "show_config", "Config", show=True),
        Binding("escape", "quit_app", "Quit", show=True),
    ]

    def __init__(self, app_context: dict):
        super().__init__()
        self.app_context = app_context

    def compose(self):
        yield Header()
        with Container(id="content-area"):
            yield LedsMode(
                self.app_context["midi_handler"],
                self.app_context["device_manager"],
                self.app_context["midi_leds"],
                self.app_context["cc_helper"],
                self.app_context["config_manager"].get_frame_rate(),
            )
        yield Footer()

    def on_mount(self):
        self.query_one(LedsMode).focus()

    def action_show_config(self):
        """Open the device picker; reopen the port when it closes."""
        def on_closed(result):
            self.app.update_sub_title()
            # Notes held on the old port would never get their note-off
            for channel in range(NUM_CHANNELS):
                self.app_context["midi_leds"].all_leds_off(channel)
            selected = self.app_context["device_manager"].get_selected_device()
            if selected:
                self.app_context["midi_handler"].open_device(selected)
            self.query_one(LedsMode).focus()

        config = ConfigMode(self.app_context["device_manager"], self.app_context["config_manager"])
        self.app.push_screen(config, on_closed)

    def action_quit_app(self):
        self.app.exit()


class MidiLedsApp(App):
    """MIDI-driven LED strip visualizer."""

    VERSION = "1.0.0"

    def __init__(self, config_manager: ConfigManager = None):
        super().__init__()
        self.title = f"MIDI LEDs v{self.VERSION}"
        self.config_manager = config_manager or ConfigManager()
        self.device_manager = MIDIDeviceManager(self.config_manager)
        self.midi_handler = MIDIInputHandler()
        self.midi_leds, self.midi_colors, self.cc_helper = create_engine(self.config_manager)

        selected_device = self.device_manager.get_selected_device()
        if selected_device:
            self.midi_handler.open_device(selected_device)

        self.app_context = {
            "config_manager": self.config_manager,
            "device_manager": self.device_manager,
            "midi_handler": self.midi_handler,
            "midi_leds": self.midi_leds,
            "midi_colors": self.midi_colors,
            "cc_helper": self.cc_helper,
        }

    def on_mount(self):
        """Ask for a device first if none is configured."""
        main_screen = MainScreen(self.app_context)
        if not self.device_manager.get_selected_device():
            def on_config_closed(result):
                self.update_sub_title()
                selected = self.device_manager.get_selected_device()
                if selected:
                    self.midi_handler.open_device(selected)
                self.push_screen(main_screen)

            self.push_screen(ConfigMode(self.device_manager, self.config_manager), on_config_closed)
        else:
            self.push_screen(main_screen)

        self.update_sub_title()

    def update_sub_title(self):
        selected = self.device_manager.get_selected_device()
        if selected:
            self.sub_title = f"Device: {selected}"
        else:
            self.sub_title = "⚠ No MIDI device selected (press C to configure)"

    def on_unmount(self):
        self.midi_handler.close_device()
        os.system('cls' if os.name == 'nt' else 'clear')


def main():
    """Main entry point."""
    app = MidiLedsApp()
    app.run()


if __name__ == "__main__":
    main()
