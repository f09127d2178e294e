"""Title box and live status line shown above the LED strip."""
from textual.widgets import Static
from textual.containers import Center, Vertical
from textual.app import ComposeResult
from typing import Optional


class HeaderWidget(Vertical):
    """Boxed title with a status line for device and voice usage."""

    DEFAULT_CSS = """
    HeaderWidget {
        width: 100%;
        height: auto;
        align: center top;
        margin-bottom: 1;
    }

    .header-boxed {
        width: auto;
        height: auto;
        text-align: center;
        color: $accent;
    }

    #header-status {
        width: 100%;
        text-align: center;
        content-align: center middle;
    }
    """

    def __init__(self, title: str, **kwargs):
        super().__init__(**kwargs)
        self.title_text = title

    def compose(self) -> ComposeResult:
        with Center():
            yield Static(boxed_title(self.title_text), classes="header-boxed")
        with Center():
            yield Static("", id="header-status")

    def update_status(self, device: Optional[str], active_voices: int, num_voices: int):
        """Refresh the status line."""
        self.query_one("#header-status", Static).update(
            f"[italic #666666]{format_status(device, active_voices, num_voices)}[/]")


def boxed_title(title: str, width: int = 48) -> str:
    """Frame a title in double-line box drawing characters."""
    title_padded = f" {title} "
    inner_width = max(width - 2, len(title_padded))
    padding = inner_width - len(title_padded)
    left_pad = padding // 2
    right_pad = padding - left_pad
    return (f"╔{'═' * inner_width}╗\n"
            f"║{' ' * left_pad}{title_padded}{' ' * right_pad}║\n"
            f"╚{'═' * inner_width}╝")


def format_status(device: Optional[str], active_voices: int, num_voices: int) -> str:
    device_text = device or "no MIDI device"
    return f"{device_text} | voices {active_voices}/{num_voices}"
