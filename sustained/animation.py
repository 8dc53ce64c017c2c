# sustained/animation.py

"""
View-morph animation state machine.

    Idle-Speed (progress 0)  --toggle-->  Transitioning  --done-->  Idle-Coeff (progress 1)
    Idle-Coeff (progress 1)  --toggle-->  Transitioning  --done-->  Idle-Speed (progress 0)

A toggle while Transitioning is ignored; there is no mid-flight cancel.
All functions are pure: they take a state and return a new one.
Timestamps are seconds from time.perf_counter().
"""

import time
from dataclasses import dataclass, replace

from .constants import ANIMATION_DURATION_MS
from .datasets import dprint
from .easing import ease_in_out_expo


@dataclass(frozen=True)
class AnimationState:
    progress: float = 0.0          # 0 = speed view, 1 = coefficient view
    running: bool = False
    start_progress: float = 0.0
    target_progress: float = 0.0
    start_time: float = 0.0
    duration_ms: float = ANIMATION_DURATION_MS

    @property
    def view(self):
        """Settled view while idle, or the view currently dominating the morph."""
        return "coeff" if self.progress > 0.5 else "speed"

    @property
    def target_view(self):
        return "coeff" if self.target_progress >= 1 else "speed"


def start_transition(state, now=None):
    """
    Begin a morph toward the other view.
    Returns the state unchanged while a transition is already running.
    """
    if state.running:
        dprint("[ANIM] Transition already running, toggle ignored")
        return state

    if now is None:
        now = time.perf_counter()

    target = 0.0 if state.progress >= 0.5 else 1.0
    dprint(f"[ANIM] Transition {state.progress} -> {target}")
    return replace(
        state,
        running=True,
        start_progress=state.progress,
        target_progress=target,
        start_time=now,
    )


def advance(state, now=None):
    """
    Advance a running transition to wall time ``now``.

    progress = start + (target - start) * ease(min(elapsed / duration, 1)),
    snapped exactly to the target once the raw progress reaches 1.
    """
    if not state.running:
        return state

    if now is None:
        now = time.perf_counter()

    elapsed_ms = max(0.0, (now - state.start_time) * 1000.0)
    t = min(elapsed_ms / state.duration_ms, 1.0) if state.duration_ms > 0 else 1.0

    if t >= 1.0:
        dprint(f"[ANIM] Transition complete at {state.target_progress}")
        return replace(state, progress=state.target_progress, running=False)

    eased = ease_in_out_expo(t)
    progress = state.start_progress + (state.target_progress - state.start_progress) * eased
    return replace(state, progress=progress)


def reset_animation(state):
    """Back to the speed view. Ignored while a transition is running."""
    if state.running:
        return state
    return AnimationState(duration_ms=state.duration_ms)
