"""
Qt bridge for the gesture pipeline.
Re-emits Results as Qt signals so a rendering layer can consume them on its own thread.
"""
from typing import Optional
from PyQt5.QtCore import QObject, pyqtSignal

from .aggregator import Result
from .config import Config
from .landmark_source import LandmarkSource, LandmarkSourceError, MediaPipeLandmarkSource
from .recognizer import GestureRecognizer


class RecognizerWorker(QObject):
    """
    Worker that runs a GestureRecognizer and emits signals for UI updates.
    """
    # Signals
    result_ready = pyqtSignal(object)  # Emits Result
    hand_lost = pyqtSignal()
    error = pyqtSignal(str)

    def __init__(self, config: Config, source: Optional[LandmarkSource] = None, parent=None):
        super().__init__(parent)
        self._config = config
        self._source = source
        self._recognizer = GestureRecognizer()
        self._hand_was_detected = False

    @property
    def is_running(self) -> bool:
        return self._recognizer.is_running

    def _handle_result(self, result: Result) -> None:
        self.result_ready.emit(result)
        if self._hand_was_detected and not result.hand_detected:
            self.hand_lost.emit()
        self._hand_was_detected = result.hand_detected

    def start_process(self):
        """Start the recognizer. Initialization failures are reported on error."""
        source = self._source or MediaPipeLandmarkSource(self._config)
        self._hand_was_detected = False
        try:
            self._recognizer.start(source, self._handle_result)
        except LandmarkSourceError as e:
            self.error.emit(str(e))

    def stop_process(self):
        """Stop the recognizer and release the camera."""
        self._recognizer.stop()
