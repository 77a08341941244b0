"""
Frame-to-frame hand motion tracking.
Velocity is the instantaneous wrist speed between two consecutive detections.
"""
from dataclasses import dataclass
from typing import Optional, Tuple
import math
import time

from .landmarks import HandLandmarks


@dataclass(frozen=True)
class MotionState:
    """Previous detection used as the reference for the next velocity sample."""
    previous_hand: Optional[HandLandmarks] = None
    previous_timestamp: float = 0.0


def advance(
    state: MotionState,
    hand: Optional[HandLandmarks],
    now: float,
) -> Tuple[float, MotionState]:
    """
    Compute the wrist velocity for this frame and the state for the next one.

    Args:
        state: State left by the previous frame
        hand: Current landmarks, or None if the hand was lost
        now: Current time in seconds

    Returns:
        (velocity in normalized units per second, new state)
    """
    if hand is None:
        return 0.0, MotionState()

    new_state = MotionState(previous_hand=hand, previous_timestamp=now)
    if state.previous_hand is None:
        return 0.0, new_state

    delta_time = now - state.previous_timestamp
    if delta_time == 0:
        return 0.0, new_state

    current = hand.wrist
    previous = state.previous_hand.wrist
    dx = current.x - previous.x
    dy = current.y - previous.y
    dz = current.z - previous.z
    distance = math.sqrt(dx*dx + dy*dy + dz*dz)

    return distance / delta_time, new_state


class MotionTracker:
    """Owns the MotionState and replaces it on every hand-detection event."""

    def __init__(self):
        self._state = MotionState()

    @property
    def state(self) -> MotionState:
        return self._state

    def update(self, hand: Optional[HandLandmarks], now: Optional[float] = None) -> float:
        """Return the velocity for this frame. Passing None clears the state."""
        if now is None:
            now = time.perf_counter()
        velocity, self._state = advance(self._state, hand, now)
        return velocity

    def reset(self) -> None:
        """Forget the previous frame so the next velocity starts from 0."""
        self._state = MotionState()
