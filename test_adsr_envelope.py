#!/usr/bin/env python3
"""ABOUTME: ADSR envelope tests - phase order, timing, retrigger and zero-length phases.
ABOUTME: Drives the envelope with a hand-stepped millisecond clock."""

import math
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from leds.adsr_envelope import AdsrEnvelope, EnvelopeState


def run_until_idle(env, start, step, limit=100000):
    """Tick until idle, returning the list of distinct states visited in order."""
    visited = [env.state]
    t = start
    while not env.is_idle() and t < start + limit:
        env.tick(t)
        if env.state != visited[-1]:
            visited.append(env.state)
        assert 0.0 <= env.output <= 1.0, f"output {env.output} out of range at t={t}"
        t += step
    return visited, t


def test_new_envelope_is_idle():
    env = AdsrEnvelope()
    assert env.is_idle()
    assert env.get_output() == 0.0
    assert env.phase_start is None


def test_full_cycle_timing():
    """A=100 D=100 S=0.5 R=100 follows the documented timeline."""
    env = AdsrEnvelope()
    env.note_on(100, 100, 0.5, 100)
    assert env.state == EnvelopeState.ATTACK

    env.tick(0)
    assert env.state == EnvelopeState.ATTACK
    assert env.output == 0.0

    env.tick(50)
    assert math.isclose(env.output, 0.5)

    env.tick(100)
    assert env.state == EnvelopeState.DECAY
    assert env.output == 1.0
    assert env.target == 0.5

    env.tick(150)
    assert math.isclose(env.output, 0.75)

    env.tick(200)
    assert env.state == EnvelopeState.SUSTAIN
    assert env.output == 0.5

    env.tick(1000)
    assert env.state == EnvelopeState.SUSTAIN
    assert env.output == 0.5
    assert env.phase_start is None

    env.note_off()
    assert env.state == EnvelopeState.RELEASE
    env.tick(1050)
    assert math.isclose(env.output, 0.25)
    env.tick(1100)
    assert env.state == EnvelopeState.IDLE
    assert env.output == 0.0
    print("  - attack/decay/sustain/release timeline verified")


def test_state_order_with_sustain():
    env = AdsrEnvelope()
    env.note_on(30, 70, 0.3, 50)
    visited = [env.state]
    t = 0
    while env.state != EnvelopeState.SUSTAIN:
        env.tick(t)
        if env.state != visited[-1]:
            visited.append(env.state)
        t += 7
    env.note_off()
    rest, _ = run_until_idle(env, t, 7)
    visited.extend(rest)
    assert visited == [EnvelopeState.ATTACK, EnvelopeState.DECAY, EnvelopeState.SUSTAIN,
                       EnvelopeState.RELEASE, EnvelopeState.IDLE], visited


def test_zero_sustain_goes_idle_without_note_off():
    """A sustain level of 0 makes a one-shot envelope."""
    env = AdsrEnvelope()
    env.note_on(10, 10, 0.0, 400)
    visited, _ = run_until_idle(env, 0, 5)
    assert visited == [EnvelopeState.ATTACK, EnvelopeState.DECAY,
                       EnvelopeState.SUSTAIN, EnvelopeState.IDLE], visited
    assert env.output == 0.0


def test_zero_duration_phases_snap():
    env = AdsrEnvelope()
    env.note_on(0, 0, 0.5, 0)
    env.tick(5)
    assert env.state == EnvelopeState.DECAY
    assert env.output == 1.0
    env.tick(5)
    assert env.state == EnvelopeState.SUSTAIN
    assert env.output == 0.5
    env.note_off()
    assert math.isinf(env.release_rate)
    env.tick(6)
    assert env.state == EnvelopeState.IDLE
    assert env.output == 0.0
    assert not math.isnan(env.output)


def test_zero_release_from_zero_level():
    """0 level over 0 ms must not produce NaN."""
    env = AdsrEnvelope()
    env.note_on(100, 100, 0.5, 0)
    env.note_off()
    assert env.release_start == 0.0
    env.tick(10)
    assert env.is_idle()
    assert env.output == 0.0


def test_tick_on_idle_changes_nothing():
    env = AdsrEnvelope()
    env.note_on(10, 10, 0.5, 10)
    env.tick(0)
    env.tick(10)
    env.tick(20)
    env.note_off()
    env.tick(20)
    env.tick(30)
    assert env.is_idle()

    before = dict(vars(env))
    env.tick(40)
    env.tick(10000)
    assert vars(env) == before


def test_note_off_on_idle_is_noop():
    env = AdsrEnvelope()
    before = dict(vars(env))
    env.note_off()
    assert vars(env) == before


def test_retrigger_during_release_restarts_attack():
    env = AdsrEnvelope()
    env.note_on(100, 100, 0.5, 1000)
    for t in (0, 100, 200):
        env.tick(t)
    env.note_off()
    env.tick(300)
    assert env.state == EnvelopeState.RELEASE
    assert env.output > 0.0

    env.note_on(100, 100, 0.5, 1000)
    assert env.state == EnvelopeState.ATTACK
    assert env.output == 0.0
    assert env.phase_start is None
    env.tick(400)
    assert env.output == 0.0
    env.tick(450)
    assert math.isclose(env.output, 0.5)


def test_release_rate_proportional_to_level():
    """Releasing at 0.5 takes exactly the release time to reach 0."""
    env = AdsrEnvelope()
    env.note_on(100, 3000, 0.0, 400)
    env.tick(0)
    env.tick(50)
    assert math.isclose(env.output, 0.5)

    env.note_off()
    assert math.isclose(env.release_start, 0.5)
    assert math.isclose(env.release_rate, 0.5 / 400)

    env.tick(250)
    assert math.isclose(env.output, 0.25)
    env.tick(449)
    assert env.state == EnvelopeState.RELEASE
    env.tick(450)
    assert env.state == EnvelopeState.IDLE
    assert env.output == 0.0


def test_note_off_before_first_tick_captures_lazily():
    env = AdsrEnvelope()
    env.note_on(100, 100, 0.5, 100)
    env.note_off()
    assert env.phase_start is None
    env.tick(1234)
    assert env.is_idle()


def test_output_stays_in_range_with_irregular_ticks():
    for attack, decay, sustain, release in [(80, 3000, 0.0, 400), (1, 1, 1.0, 1),
                                            (0, 250, 0.7, 50), (33, 0, 0.2, 0)]:
        env = AdsrEnvelope()
        env.note_on(attack, decay, sustain, release)
        t = 0.0
        for step in [0, 3, 17, 1, 250, 9, 40, 2]:
            t += step
            env.tick(t)
            assert 0.0 <= env.output <= 1.0
        env.note_off()
        run_until_idle(env, t, 13)
        assert env.is_idle()
        assert env.output == 0.0


def main():
    """Run all tests."""
    print("=" * 60)
    print("ADSR ENVELOPE TESTS")
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
