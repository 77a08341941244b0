"""
Cursor and eye positions derived from landmarks.
"""
from typing import NamedTuple, Optional

from .landmarks import FaceLandmarks, HandLandmarks


class CursorPosition(NamedTuple):
    x: float
    y: float


class EyePosition(NamedTuple):
    x: float
    y: float


class EyePositions(NamedTuple):
    left_eye: EyePosition
    right_eye: EyePosition


def cursor_position(hand: HandLandmarks) -> CursorPosition:
    """Index fingertip position, already normalized to 0-1. No scaling or smoothing."""
    tip = hand.index_tip
    return CursorPosition(tip.x, tip.y)


def eye_positions(face: Optional[FaceLandmarks]) -> Optional[EyePositions]:
    """Approximate eye centers from the face mesh, or None without a face."""
    if face is None:
        return None
    left = face[FaceLandmarks.LEFT_EYE]
    right = face[FaceLandmarks.RIGHT_EYE]
    return EyePositions(
        left_eye=EyePosition(left.x, left.y),
        right_eye=EyePosition(right.x, right.y),
    )
