"""
Joins the hand and face detection streams into one Result per hand event.

Face detections arrive on their own cadence and only refresh a single-slot
cache; every hand detection reads whatever face data is latest.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional
import logging
import threading

from .classifier import GestureCategory, classify
from .landmarks import FaceDetection, FaceLandmarks, HandDetection, HandLandmarks
from .motion import MotionTracker
from .positions import CursorPosition, EyePositions, cursor_position, eye_positions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Result:
    """Combined control signal delivered to the consumer."""
    hand_detected: bool
    landmarks: Optional[HandLandmarks] = None
    cursor_position: Optional[CursorPosition] = None
    gesture: GestureCategory = GestureCategory.IDLE
    velocity: float = 0.0
    handedness: Optional[str] = None  # 'Left', 'Right' or 'Unknown' with a hand
    eye_positions: Optional[EyePositions] = None

    def to_dict(self) -> Dict[str, Any]:
        """Plain camelCase record for JSON consumers."""
        data: Dict[str, Any] = {
            'handDetected': self.hand_detected,
            'landmarks': None,
            'cursorPosition': None,
            'gesture': self.gesture.name,
        }
        if self.hand_detected:
            data['landmarks'] = [p._asdict() for p in self.landmarks.points]
            data['cursorPosition'] = self.cursor_position._asdict()
            data['velocity'] = self.velocity
            data['handedness'] = self.handedness
        if self.eye_positions is None:
            data['eyePositions'] = None
        else:
            data['eyePositions'] = {
                'leftEye': self.eye_positions.left_eye._asdict(),
                'rightEye': self.eye_positions.right_eye._asdict(),
            }
        return data


ResultCallback = Callable[[Result], None]


class FrameAggregator:
    """
    Turns detection events into Results.

    The latest-face slot, the motion state and the open flag share one lock:
    the landmark source delivers events on its capture thread while close()
    is called from the host thread. Results are delivered while holding it,
    so nothing reaches the consumer once close() has returned.
    """

    def __init__(self, on_result: ResultCallback):
        self._on_result = on_result
        self._motion = MotionTracker()
        self._latest_face: Optional[FaceLandmarks] = None
        # Reentrant so a consumer may call close() from inside its callback
        self._lock = threading.RLock()
        self._is_open = True

    @property
    def is_open(self) -> bool:
        return self._is_open

    def handle_face(self, event: FaceDetection) -> None:
        """Refresh the latest-face cache. Never emits a Result."""
        with self._lock:
            if not self._is_open:
                return
            self._latest_face = event.landmarks

    def handle_hand(self, event: HandDetection) -> Optional[Result]:
        """Build the Result for a hand event and deliver it to the consumer."""
        with self._lock:
            if not self._is_open:
                return None
            eyes = eye_positions(self._latest_face)

            if event.landmarks is None:
                self._motion.reset()
                result = Result(hand_detected=False, eye_positions=eyes)
            else:
                hand = event.landmarks
                result = Result(
                    hand_detected=True,
                    landmarks=hand,
                    cursor_position=cursor_position(hand),
                    gesture=classify(hand),
                    velocity=self._motion.update(hand, event.timestamp),
                    handedness=event.handedness or "Unknown",
                    eye_positions=eyes,
                )

            logger.debug("Result: %s velocity=%.3f", result.gesture.name, result.velocity)
            self._on_result(result)
        return result

    def close(self) -> None:
        """Discard all further events and forget cross-frame state."""
        with self._lock:
            self._is_open = False
            self._latest_face = None
            self._motion.reset()
