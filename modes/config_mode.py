"""MIDI input selection screen."""
from textual.screen import Screen
from textual.containers import Vertical
from textual.widgets import Header, Footer, ListView, ListItem, Label
from textual.binding import Binding
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from midi.device_manager import MIDIDeviceManager
    from config_manager import ConfigManager


class ConfigMode(Screen):
    """Pick the MIDI input that drives the LEDs."""

    BINDINGS = [
        Binding("escape", "dismiss", "Close", show=True),
        Binding("r", "refresh_devices", "Refresh", show=True),
        Binding("space", "select_and_close", "Select", show=True),
    ]

    CSS = """
    ConfigMode {
        align: center middle;
    }

    #config-container {
        width: 70;
        height: auto;
        border: thick $accent;
        background: #1a1a1a;
        padding: 1 2;
    }

    #title {
        width: 100%;
        content-align: center middle;
        text-style: bold;
        margin-bottom: 1;
    }

    #device-list {
        width: 100%;
        height: 12;
        border: solid $accent;
        margin: 1 0;
    }

    #strip-info, #instructions {
        width: 100%;
        content-align: center middle;
        color: #888888;
    }

    #selected-device {
        width: 100%;
        content-align: center middle;
        color: #00ff00;
    }
    """

    def __init__(self, device_manager: 'MIDIDeviceManager', config_manager: 'ConfigManager'):
        super().__init__()
        self.device_manager = device_manager
        self.config_manager = config_manager
        self.devices = []

    def compose(self):
        note_min, note_max = self.config_manager.get_note_range()
        yield Header()
        with Vertical(id="config-container"):
            yield Label("MIDI Input", id="title")
            yield ListView(id="device-list")
            yield Label("", id="selected-device")
            yield Label(
                f"LEDs: notes {note_min}-{note_max} | "
                f"{self.config_manager.get_num_voices()} voices | "
                f"{self.config_manager.get_frame_rate()} fps",
                id="strip-info"
            )
            yield Label("↑↓: Navigate | Space: Select & Close | R: Refresh | Esc: Close", id="instructions")
        yield Footer()

    def on_mount(self):
        self.refresh_device_list()
        list_view = self.query_one("#device-list", ListView)
        if self.devices:
            list_view.index = 0

    def refresh_device_list(self):
        list_view = self.query_one("#device-list", ListView)
        list_view.clear()

        self.devices = self.device_manager.get_input_devices()
        selected = self.device_manager.get_selected_device()

        if not self.devices:
            message = self.device_manager.last_error or "No MIDI inputs found"
            list_view.append(ListItem(Label(message)))
        else:
            for device in self.devices:
                mark = "☑" if device == selected else "☐"
                list_view.append(ListItem(Label(f"{mark} {device}")))

        label = self.query_one("#selected-device", Label)
        label.update(f"Active: {selected}" if selected else "No device selected")

    def action_refresh_devices(self):
        self.refresh_device_list()
        self.app.notify("Device list refreshed")

    def action_select_and_close(self):
        """Select the highlighted input and close."""
        list_view = self.query_one("#device-list", ListView)
        index = list_view.index
        if index is None or not (0 <= index < len(self.devices)):
            return

        device = self.devices[index]
        if self.device_manager.select_device(device):
            self.app.notify(f"✓ Selected: {device}")
            self.dismiss(device)
        else:
            self.app.notify(f"✗ Failed to select: {device}")

    def on_list_view_selected(self, event: ListView.Selected):
        self.action_select_and_close()
