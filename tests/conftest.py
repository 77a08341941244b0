"""
Shared fixtures and synthetic landmark builders.
"""
import pytest

from gestures.landmarks import FaceLandmarks, HandDetection, HandLandmarks, FaceDetection

WRIST = (0.5, 0.8, 0.0)

# Wrist -> MCP vectors in image space (y grows downward, fingers point up)
THUMB_UP_VECTOR = (-0.1, -0.05)
FINGER_VECTORS = {
    'index': (-0.06, -0.2),
    'middle': (-0.02, -0.21),
    'ring': (0.02, -0.2),
    'pinky': (0.06, -0.18),
}
FINGER_BASE = {'index': 5, 'middle': 9, 'ring': 13, 'pinky': 17}

# Ratios of tip-to-wrist over MCP-to-wrist distance
EXTENDED = 1.2
CURLED = 0.9
THUMB_REST = 1.0
THUMB_OUT = 1.5


def _along(wrist, vector, scale):
    wx, wy, wz = wrist
    return (wx + vector[0] * scale, wy + vector[1] * scale, wz)


def make_hand(thumb=THUMB_REST, index=CURLED, middle=CURLED, ring=CURLED, pinky=CURLED,
              wrist=WRIST, thumb_vector=THUMB_UP_VECTOR, overrides=None) -> HandLandmarks:
    """
    Build 21 landmarks where each digit is a straight ray from the wrist.
    A digit's ratio places its tip at ratio * (MCP distance) from the wrist.
    overrides: {index: (x, y, z)} applied last.
    """
    points = [wrist] * 21
    points[1] = _along(wrist, thumb_vector, 0.5)
    points[2] = _along(wrist, thumb_vector, 1.0)
    points[3] = _along(wrist, thumb_vector, (1.0 + thumb) / 2)
    points[4] = _along(wrist, thumb_vector, thumb)

    ratios = {'index': index, 'middle': middle, 'ring': ring, 'pinky': pinky}
    for name, ratio in ratios.items():
        base = FINGER_BASE[name]
        vector = FINGER_VECTORS[name]
        points[base] = _along(wrist, vector, 1.0)
        points[base + 1] = _along(wrist, vector, 1.0 + (ratio - 1.0) / 3)
        points[base + 2] = _along(wrist, vector, 1.0 + 2 * (ratio - 1.0) / 3)
        points[base + 3] = _along(wrist, vector, ratio)

    for idx, point in (overrides or {}).items():
        points[idx] = point
    return HandLandmarks(points)


def make_face(left=(0.4, 0.35), right=(0.6, 0.35), count=468) -> FaceLandmarks:
    points = [(0.5, 0.5, 0.0)] * count
    points[FaceLandmarks.LEFT_EYE] = (left[0], left[1], 0.0)
    points[FaceLandmarks.RIGHT_EYE] = (right[0], right[1], 0.0)
    return FaceLandmarks(points)


def hand_event(hand=None, t=0.0, handedness="Right") -> HandDetection:
    if hand is None:
        return HandDetection(timestamp=t)
    return HandDetection(landmarks=hand, handedness=handedness, timestamp=t)


def face_event(face=None, t=0.0) -> FaceDetection:
    return FaceDetection(landmarks=face, timestamp=t)


class ResultSink:
    """Consumer callback that records every Result it receives."""

    def __init__(self):
        self.results = []

    def __call__(self, result):
        self.results.append(result)

    @property
    def last(self):
        return self.results[-1]


@pytest.fixture
def sink():
    return ResultSink()
