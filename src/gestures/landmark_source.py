"""
Landmark sources feeding the gesture pipeline.

MediaPipeLandmarkSource wraps camera capture and the MediaPipe Tasks hand and
face landmarkers. ReplaySource plays back recorded detection events.
"""
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union
import logging
import threading
import time

import cv2
import numpy as np
import mediapipe as mp
import yaml

from .config import Config, CameraConfig, MediaPipeConfig, resolve_path
from .landmarks import FaceDetection, FaceLandmarks, HandDetection, HandLandmarks

logger = logging.getLogger(__name__)

# MediaPipe Tasks API imports
BaseOptions = mp.tasks.BaseOptions
HandLandmarker = mp.tasks.vision.HandLandmarker
HandLandmarkerOptions = mp.tasks.vision.HandLandmarkerOptions
FaceLandmarker = mp.tasks.vision.FaceLandmarker
FaceLandmarkerOptions = mp.tasks.vision.FaceLandmarkerOptions
VisionRunningMode = mp.tasks.vision.RunningMode

HAND_MODEL_URL = "https://storage.googleapis.com/mediapipe-models/hand_landmarker/hand_landmarker/float16/1/hand_landmarker.task"
FACE_MODEL_URL = "https://storage.googleapis.com/mediapipe-models/face_landmarker/face_landmarker/float16/1/face_landmarker.task"

HandCallback = Callable[[HandDetection], None]
FaceCallback = Callable[[FaceDetection], None]
Event = Union[HandDetection, FaceDetection]

# Hand connections for drawing (same as MediaPipe's HAND_CONNECTIONS)
HAND_CONNECTIONS = [
    (0, 1), (1, 2), (2, 3), (3, 4),      # Thumb
    (0, 5), (5, 6), (6, 7), (7, 8),      # Index
    (0, 9), (9, 10), (10, 11), (11, 12), # Middle
    (0, 13), (13, 14), (14, 15), (15, 16), # Ring
    (0, 17), (17, 18), (18, 19), (19, 20), # Pinky
    (5, 9), (9, 13), (13, 17),           # Palm
]


class LandmarkSourceError(RuntimeError):
    """The landmark source could not be started (model or camera unavailable)."""


class LandmarkSource:
    """
    Producer of hand and face detection events.

    start() must raise LandmarkSourceError before delivering any event if it
    cannot initialize. After stop() returns no further events are delivered.
    """

    def start(self, on_hand: HandCallback, on_face: FaceCallback) -> None:
        raise NotImplementedError

    def stop(self) -> None:
        raise NotImplementedError

    @property
    def is_running(self) -> bool:
        raise NotImplementedError


def to_hand_detection(result, timestamp: float) -> HandDetection:
    """Convert a HandLandmarkerResult to a HandDetection (first hand only)."""
    if not result.hand_landmarks:
        return HandDetection(timestamp=timestamp)

    hand = HandLandmarks([(lm.x, lm.y, lm.z) for lm in result.hand_landmarks[0]])
    handedness = None
    if result.handedness and result.handedness[0]:
        handedness = result.handedness[0][0].category_name
    return HandDetection(landmarks=hand, handedness=handedness, timestamp=timestamp)


def to_face_detection(result, timestamp: float) -> FaceDetection:
    """Convert a FaceLandmarkerResult to a FaceDetection (first face only)."""
    if not result.face_landmarks:
        return FaceDetection(timestamp=timestamp)
    face = FaceLandmarks([(lm.x, lm.y, lm.z) for lm in result.face_landmarks[0]])
    return FaceDetection(landmarks=face, timestamp=timestamp)


def draw_landmarks(frame: np.ndarray, hand: Optional[HandLandmarks],
                   black_background: bool = False) -> np.ndarray:
    """Return a copy of frame with the hand skeleton drawn on it."""
    frame = np.zeros_like(frame) if black_background else frame.copy()
    if hand is None:
        return frame

    h, w = frame.shape[:2]
    for x, y, _ in hand.points:
        cv2.circle(frame, (int(x * w), int(y * h)), 5, (0, 255, 0), -1)

    for start_idx, end_idx in HAND_CONNECTIONS:
        start = hand[start_idx]
        end = hand[end_idx]
        start_pos = (int(start.x * w), int(start.y * h))
        end_pos = (int(end.x * w), int(end.y * h))
        cv2.line(frame, start_pos, end_pos, (0, 255, 0), 2)

    return frame


class MediaPipeLandmarkSource(LandmarkSource):
    """
    Camera capture plus MediaPipe hand and face landmarkers.
    Frames are read and processed on a background thread; each frame yields
    one hand event and, every face_every_n_frames, one face event.
    """

    def __init__(self, config: Config):
        self._camera_config: CameraConfig = config.camera
        self._mp_config: MediaPipeConfig = config.mediapipe
        self._hand_model_path = resolve_path(self._mp_config.hand_model_path)
        self._face_model_path = resolve_path(self._mp_config.face_model_path)

        self._cap: Optional[cv2.VideoCapture] = None
        self._hand_landmarker: Optional[HandLandmarker] = None
        self._face_landmarker: Optional[FaceLandmarker] = None
        self._thread: Optional[threading.Thread] = None
        self._on_hand: Optional[HandCallback] = None
        self._on_face: Optional[FaceCallback] = None

        # State
        self._is_running = False
        self._frame_count = 0
        self._start_perf: float = 0
        self._last_timestamp_ms: int = -1
        self._last_frame: Optional[np.ndarray] = None
        self._last_hand: Optional[HandLandmarks] = None
        self._frame_lock = threading.Lock()
        self._stop_event: Optional[threading.Event] = None

    @property
    def face_enabled(self) -> bool:
        return self._mp_config.face_every_n_frames > 0

    def start(self, on_hand: HandCallback, on_face: FaceCallback) -> None:
        """
        Open the camera, load the models and start the capture thread.

        Raises:
            LandmarkSourceError: if a model file is missing, a landmarker
                cannot be created or the camera cannot be opened.
        """
        if self._is_running:
            return

        self._check_model(self._hand_model_path, HAND_MODEL_URL)
        if self.face_enabled:
            self._check_model(self._face_model_path, FACE_MODEL_URL)

        try:
            self._create_landmarkers()
        except (RuntimeError, ValueError) as e:
            self._close_landmarkers()
            raise LandmarkSourceError(f"Could not initialize MediaPipe: {e}") from e

        self._cap = cv2.VideoCapture(self._camera_config.device_id)
        if not self._cap.isOpened():
            self._cap.release()
            self._cap = None
            self._close_landmarkers()
            raise LandmarkSourceError(
                f"Could not open camera {self._camera_config.device_id}"
            )

        self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, self._camera_config.width)
        self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self._camera_config.height)
        self._cap.set(cv2.CAP_PROP_FPS, self._camera_config.fps)

        self._on_hand = on_hand
        self._on_face = on_face
        self._frame_count = 0
        self._start_perf = time.perf_counter()
        self._last_timestamp_ms = -1
        self._stop_event = threading.Event()
        self._is_running = True

        # The capture thread owns the camera and models from here on and
        # releases them when it exits.
        self._thread = threading.Thread(
            target=self._capture_loop,
            args=(self._cap, self._hand_landmarker, self._face_landmarker, self._stop_event),
            name="LandmarkSource",
            daemon=True,
        )
        self._cap = None
        self._hand_landmarker = None
        self._face_landmarker = None
        self._thread.start()
        logger.info("Landmark source started on camera %d", self._camera_config.device_id)

    def stop(self) -> None:
        """Stop the capture thread. No event is delivered after this returns."""
        self._is_running = False
        if self._stop_event is not None:
            self._stop_event.set()

        thread, self._thread = self._thread, None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=2.0)
            if thread.is_alive():
                logger.warning("Capture thread still busy; it releases the camera when its frame is done")

        with self._frame_lock:
            self._last_frame = None
            self._last_hand = None
        logger.info("Landmark source stopped")

    @property
    def is_running(self) -> bool:
        return self._is_running

    @property
    def frame_count(self) -> int:
        return self._frame_count

    def annotated_frame(self, black_background: bool = False) -> Optional[np.ndarray]:
        """Last captured frame with the last detected hand drawn, for debugging."""
        with self._frame_lock:
            frame, hand = self._last_frame, self._last_hand
        if frame is None:
            return None
        return draw_landmarks(frame, hand, black_background)

    @staticmethod
    def _check_model(path: Path, url: str) -> None:
        if not path.exists():
            raise LandmarkSourceError(
                f"Model file not found: {path}\nDownload from: {url}"
            )

    def _create_landmarkers(self) -> None:
        hand_options = HandLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=str(self._hand_model_path)),
            running_mode=VisionRunningMode.VIDEO,
            num_hands=self._mp_config.max_num_hands,
            min_hand_detection_confidence=self._mp_config.min_hand_detection_confidence,
            min_hand_presence_confidence=self._mp_config.min_hand_detection_confidence,
            min_tracking_confidence=self._mp_config.min_hand_tracking_confidence,
        )
        self._hand_landmarker = HandLandmarker.create_from_options(hand_options)

        if self.face_enabled:
            face_options = FaceLandmarkerOptions(
                base_options=BaseOptions(model_asset_path=str(self._face_model_path)),
                running_mode=VisionRunningMode.VIDEO,
                num_faces=self._mp_config.max_num_faces,
                min_face_detection_confidence=self._mp_config.min_face_detection_confidence,
                min_face_presence_confidence=self._mp_config.min_face_detection_confidence,
                min_tracking_confidence=self._mp_config.min_face_tracking_confidence,
            )
            self._face_landmarker = FaceLandmarker.create_from_options(face_options)

    def _close_landmarkers(self) -> None:
        if self._hand_landmarker:
            self._hand_landmarker.close()
            self._hand_landmarker = None
        if self._face_landmarker:
            self._face_landmarker.close()
            self._face_landmarker = None

    def _capture_loop(self, cap, hand_landmarker, face_landmarker,
                      stop_event: threading.Event) -> None:
        """Read frames until stopped, run detection on each, then release everything."""
        try:
            while not stop_event.is_set():
                ret, frame = cap.read()
                if not ret:
                    time.sleep(0.01)
                    continue
                try:
                    self._process_frame(frame, hand_landmarker, face_landmarker, stop_event)
                except Exception:
                    logger.exception("Frame %d failed, continuing", self._frame_count)
                    time.sleep(0.1)  # Cool down on error
        finally:
            hand_landmarker.close()
            if face_landmarker is not None:
                face_landmarker.close()
            cap.release()
            logger.debug("Camera and models released")

    def _next_timestamp_ms(self) -> int:
        # detect_for_video requires strictly increasing timestamps
        timestamp_ms = int((time.perf_counter() - self._start_perf) * 1000)
        if timestamp_ms <= self._last_timestamp_ms:
            timestamp_ms = self._last_timestamp_ms + 1
        self._last_timestamp_ms = timestamp_ms
        return timestamp_ms

    def _process_frame(self, frame: np.ndarray, hand_landmarker, face_landmarker,
                       stop_event: threading.Event) -> None:
        self._frame_count += 1

        if self._camera_config.mirror:
            frame = cv2.flip(frame, 1)

        rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
        rgb_frame.flags.writeable = False
        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb_frame)

        timestamp_ms = self._next_timestamp_ms()
        now = time.perf_counter()

        hand_event = to_hand_detection(
            hand_landmarker.detect_for_video(mp_image, timestamp_ms), now
        )
        with self._frame_lock:
            self._last_frame = frame
            self._last_hand = hand_event.landmarks

        if stop_event.is_set():
            return
        self._on_hand(hand_event)

        n = self._mp_config.face_every_n_frames
        if face_landmarker is None or n <= 0 or self._frame_count % n != 0:
            return
        face_event = to_face_detection(
            face_landmarker.detect_for_video(mp_image, timestamp_ms), now
        )
        if not stop_event.is_set():
            self._on_face(face_event)


class ReplaySource(LandmarkSource):
    """
    Plays back a recorded sequence of detection events synchronously.
    start() returns once every event has been delivered or stop() was called.
    """

    def __init__(self, events: Iterable[Event]):
        self._events: List[Event] = list(events)
        self._is_running = False

    @classmethod
    def from_yaml(cls, path: Path) -> "ReplaySource":
        """
        Load a recording. Expected layout:

            events:
              - {type: face, t: 0.00, landmarks: [[x, y, z], ...]}
              - {type: hand, t: 0.03, handedness: Right, landmarks: [[x, y, z], ...]}
              - {type: hand, t: 0.06, landmarks: null}
        """
        with open(path, 'r') as f:
            data = yaml.safe_load(f) or {}

        events: List[Event] = []
        for entry in data.get('events') or []:
            kind = entry.get('type')
            t = float(entry.get('t', 0.0))
            points = entry.get('landmarks')
            if kind == 'hand':
                events.append(HandDetection(
                    landmarks=HandLandmarks(points) if points else None,
                    handedness=entry.get('handedness'),
                    timestamp=t,
                ))
            elif kind == 'face':
                events.append(FaceDetection(
                    landmarks=FaceLandmarks(points) if points else None,
                    timestamp=t,
                ))
            else:
                raise ValueError(f"Unknown event type in recording: {kind!r}")
        return cls(events)

    @property
    def events(self) -> List[Event]:
        return list(self._events)

    def start(self, on_hand: HandCallback, on_face: FaceCallback) -> None:
        self._is_running = True
        try:
            for event in self._events:
                if not self._is_running:
                    break
                if isinstance(event, HandDetection):
                    on_hand(event)
                else:
                    on_face(event)
        finally:
            self._is_running = False

    def stop(self) -> None:
        self._is_running = False

    @property
    def is_running(self) -> bool:
        return self._is_running
