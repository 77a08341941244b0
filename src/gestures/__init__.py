"""
Myelin Gestures

Hand gesture, motion and eye-position signals from MediaPipe landmarks.
"""
from .config import Config, load_config
from .landmarks import Point3, HandLandmarks, FaceLandmarks, HandDetection, FaceDetection
from .classifier import GestureCategory, classify, finger_bend_angles
from .motion import MotionState, MotionTracker
from .positions import CursorPosition, EyePositions, cursor_position, eye_positions
from .aggregator import FrameAggregator, Result
from .landmark_source import (
    LandmarkSource,
    LandmarkSourceError,
    MediaPipeLandmarkSource,
    ReplaySource,
)
from .recognizer import GestureRecognizer
from .worker import RecognizerWorker

__all__ = [
    'Config',
    'load_config',
    'Point3',
    'HandLandmarks',
    'FaceLandmarks',
    'HandDetection',
    'FaceDetection',
    'GestureCategory',
    'classify',
    'finger_bend_angles',
    'MotionState',
    'MotionTracker',
    'CursorPosition',
    'EyePositions',
    'cursor_position',
    'eye_positions',
    'FrameAggregator',
    'Result',
    'LandmarkSource',
    'LandmarkSourceError',
    'MediaPipeLandmarkSource',
    'ReplaySource',
    'GestureRecognizer',
    'RecognizerWorker',
]
