# tests/test_animation.py
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sustained.animation import AnimationState, advance, reset_animation, start_transition
from sustained.easing import ease_in_out_expo


def test_initial_state_is_speed_view():
    state = AnimationState()
    assert state.progress == 0 and not state.running
    assert state.view == "speed"


def test_full_transition_to_coefficients():
    state = start_transition(AnimationState(), now=100.0)
    assert state.running
    assert state.start_progress == 0 and state.target_progress == 1

    mid = advance(state, now=103.0)
    assert mid.running
    assert abs(mid.progress - ease_in_out_expo(0.5)) < 1e-12

    done = advance(state, now=106.5)
    assert done.progress == 1 and not done.running
    assert done.view == "coeff"


def test_second_toggle_returns_to_speed():
    state = advance(start_transition(AnimationState(), now=0.0), now=6.0)
    state = start_transition(state, now=10.0)
    assert state.start_progress == 1 and state.target_progress == 0
    state = advance(state, now=16.0)
    assert state.progress == 0 and not state.running


def test_progress_stays_in_range_and_monotonic():
    state = start_transition(AnimationState(), now=0.0)
    last = 0.0
    for i in range(121):
        state = advance(state, now=i * 0.05)
        assert 0 <= state.progress <= 1
        assert state.progress >= last
        last = state.progress
    assert state.progress == 1


def test_toggle_while_running_is_ignored():
    state = start_transition(AnimationState(), now=0.0)
    state = advance(state, now=2.0)
    again = start_transition(state, now=2.5)
    assert again is state
    assert again.start_time == 0.0 and again.target_progress == 1


def test_reset():
    running = start_transition(AnimationState(), now=0.0)
    assert reset_animation(running) is running

    settled = advance(running, now=60.0)
    fresh = reset_animation(settled)
    assert fresh.progress == 0 and not fresh.running
    assert fresh.duration_ms == settled.duration_ms


def test_advance_idle_state_is_noop():
    state = AnimationState(progress=1.0)
    assert advance(state, now=5.0) is state


def test_custom_duration():
    state = start_transition(AnimationState(duration_ms=1000), now=0.0)
    assert advance(state, now=0.999).running
    assert not advance(state, now=1.0).running


if __name__ == "__main__":
    test_initial_state_is_speed_view()
    test_full_transition_to_coefficients()
    test_second_toggle_returns_to_speed()
    test_progress_stays_in_range_and_monotonic()
    test_toggle_while_running_is_ignored()
    test_reset()
    test_advance_idle_state_is_noop()
    test_custom_duration()
    print("\n✓ All animation tests passed!")
