"""
Landmark types shared by the gesture pipeline.
Points are normalized to the image frame as reported by MediaPipe.
"""
from dataclasses import dataclass, field
from typing import NamedTuple, Optional, Sequence, Tuple
import time


class Point3(NamedTuple):
    """A single landmark. x, y in [0, 1]; z is relative depth (smaller = closer)."""
    x: float
    y: float
    z: float = 0.0


def _as_points(points: Sequence) -> Tuple[Point3, ...]:
    return tuple(p if isinstance(p, Point3) else Point3(*p) for p in points)


@dataclass(frozen=True)
class HandLandmarks:
    """
    The 21 hand landmarks of one detected hand.

    Attributes:
        points: Exactly 21 points, indexed by MediaPipe hand topology
    """
    points: Tuple[Point3, ...]

    # MediaPipe landmark indices
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20

    COUNT = 21

    def __post_init__(self):
        points = _as_points(self.points)
        if len(points) != self.COUNT:
            raise ValueError(
                f"Hand landmark set must have {self.COUNT} points, got {len(points)}"
            )
        object.__setattr__(self, 'points', points)

    def __getitem__(self, index: int) -> Point3:
        return self.points[index]

    def __len__(self) -> int:
        return len(self.points)

    @property
    def wrist(self) -> Point3:
        return self.points[self.WRIST]

    @property
    def thumb_tip(self) -> Point3:
        return self.points[self.THUMB_TIP]

    @property
    def index_tip(self) -> Point3:
        return self.points[self.INDEX_TIP]


@dataclass(frozen=True)
class FaceLandmarks:
    """Face mesh landmarks. Only the eye reference points are consumed."""
    points: Tuple[Point3, ...]

    LEFT_EYE = 159
    RIGHT_EYE = 386

    def __post_init__(self):
        points = _as_points(self.points)
        if len(points) <= self.RIGHT_EYE:
            raise ValueError(
                f"Face landmark set must cover index {self.RIGHT_EYE}, got {len(points)} points"
            )
        object.__setattr__(self, 'points', points)

    def __getitem__(self, index: int) -> Point3:
        return self.points[index]

    def __len__(self) -> int:
        return len(self.points)


@dataclass(frozen=True)
class HandDetection:
    """
    One hand-detection event from the landmark source.
    landmarks is None when no hand was found in the frame.
    """
    landmarks: Optional[HandLandmarks] = None
    handedness: Optional[str] = None  # 'Left' or 'Right'
    timestamp: float = field(default_factory=time.perf_counter)

    @property
    def hand_present(self) -> bool:
        return self.landmarks is not None


@dataclass(frozen=True)
class FaceDetection:
    """One face-detection event. landmarks is None when no face was found."""
    landmarks: Optional[FaceLandmarks] = None
    timestamp: float = field(default_factory=time.perf_counter)

    @property
    def face_present(self) -> bool:
        return self.landmarks is not None
