#!/usr/bin/env python3
"""ABOUTME: Control Change routing tests - controller numbers, value scaling and panic messages.
ABOUTME: Runs against a real MidiLeds / MidiColors pair."""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from leds.adsr_envelope import EnvelopeState
from leds.cc_helper import CCHelper
from leds.midi_colors import ColorMap, ColorMapPalette, FixedHuePalette, MidiColors, RainbowPalette
from leds.midi_leds import MidiLeds


def make_helper(time_range=5000):
    colors = MidiColors()
    leds = MidiLeds(0, 127, 8, colors)
    return CCHelper(leds, colors, time_range), leds, colors


def test_envelope_times_scale_to_time_range():
    helper, leds, _ = make_helper()
    assert helper.control_change(1, 0x17, 127)
    assert leds.get_attack_time(1) == 5000
    helper.control_change(1, 0x18, 0)
    assert leds.get_decay_time(1) == 0
    helper.control_change(1, 0x1A, 64)
    assert leds.get_release_time(1) == 2520
    assert leds.get_attack_time(0) == 80


def test_time_range_is_adjustable():
    helper, leds, _ = make_helper(time_range=1270)
    helper.control_change(0, 0x17, 1)
    assert leds.get_attack_time(0) == 10
    helper.set_time_range(0)
    assert helper.get_time_range() == 1


def test_sustain_level_and_base_brightness():
    helper, leds, _ = make_helper()
    helper.control_change(0, 0x19, 127)
    assert leds.get_sustain_level(0) == 1.0
    helper.control_change(0, 0x19, 0)
    assert leds.get_sustain_level(0) == 0.0
    helper.control_change(0, 0x1C, 127)
    assert leds.get_base_brightness(0) == 255
    helper.control_change(0, 0x1C, 64)
    assert leds.get_base_brightness(0) == 129


def test_switches_use_midpoint():
    helper, leds, colors = make_helper()
    helper.control_change(4, 0x1D, 63)
    assert not leds.is_enabled(4)
    helper.control_change(4, 0x1D, 64)
    assert leds.is_enabled(4)
    helper.control_change(4, 0x1B, 0)
    assert not colors.is_ignore_velocity(4)
    helper.control_change(4, 0x1B, 127)
    assert colors.is_ignore_velocity(4)


def test_palette_controllers():
    helper, _, colors = make_helper()
    helper.control_change(0, 0x15, ColorMap.SCRIABIN_1911.value)
    assert colors.get_palette(0) == ColorMapPalette(ColorMap.SCRIABIN_1911)
    helper.control_change(0, 0x16, 127)
    assert colors.get_fixed_hue(0) == 255
    helper.control_change(0, 0x14, 2)
    assert colors.get_palette(0) == FixedHuePalette(255)
    helper.control_change(0, 0x14, 1)
    assert colors.get_palette(0) == RainbowPalette()
    helper.control_change(0, 0x14, 3)
    assert colors.get_palette(0) == RainbowPalette()


def test_all_notes_off_releases_channel():
    helper, leds, _ = make_helper()
    leds.note_on(2, 60, 127)
    leds.note_on(3, 61, 127)
    assert helper.control_change(2, 0x7B, 0)
    assert leds.voices[0].envelope.state == EnvelopeState.RELEASE
    assert leds.voices[1].envelope.state == EnvelopeState.ATTACK
    assert helper.control_change(3, 0x78, 0)
    assert leds.voices[1].envelope.state == EnvelopeState.RELEASE


def test_unknown_controller_is_reported():
    helper, leds, _ = make_helper()
    assert not helper.control_change(0, 0x07, 100)
    assert not helper.control_change(0, 0x40, 127)
    assert leds.get_attack_time(0) == 80


def test_channel_and_value_are_masked():
    helper, leds, _ = make_helper()
    helper.control_change(0x15, 0x17, 0x80 + 127)
    assert leds.get_attack_time(5) == 5000


def main():
    """Run all tests."""
    print("=" * 60)
    print("CC ROUTING TESTS")
    print("=" * 60)
    tests = [fn for name, fn in list(globals().items()) if name.startswith("test_") and callable(fn)]
    failed = 0
    for test in tests:
        try:
            test()
            print(f"✓ {test.__name__}")
        except AssertionError as e:
            failed += 1
            print(f"✗ {test.__name__}: {e}")
    print(f"\nTest Results: {len(tests) - failed}/{len(tests)} passed")
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
