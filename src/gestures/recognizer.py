"""
Start/stop facade tying a landmark source to the frame aggregator.
"""
from typing import Optional
import logging

from .aggregator import FrameAggregator, ResultCallback
from .landmark_source import LandmarkSource, LandmarkSourceError

logger = logging.getLogger(__name__)


class GestureRecognizer:
    """
    Runs a LandmarkSource and delivers one Result per hand detection.

    Usage:
        recognizer = GestureRecognizer()
        recognizer.start(MediaPipeLandmarkSource(config), on_result)
        ...
        recognizer.stop()
    """

    def __init__(self):
        self._source: Optional[LandmarkSource] = None
        self._aggregator: Optional[FrameAggregator] = None

    @property
    def is_running(self) -> bool:
        return self._aggregator is not None and self._aggregator.is_open

    def start(self, source: LandmarkSource, on_result: ResultCallback) -> None:
        """
        Start delivering Results from source to on_result.

        Raises:
            LandmarkSourceError: if the source fails to initialize. No Result
                has been delivered in that case.
            RuntimeError: if the recognizer is already running.
        """
        if self.is_running:
            raise RuntimeError("GestureRecognizer is already running")

        aggregator = FrameAggregator(on_result)
        self._source = source
        self._aggregator = aggregator
        try:
            source.start(aggregator.handle_hand, aggregator.handle_face)
        except LandmarkSourceError as e:
            logger.error("Failed to start landmark source: %s", e)
            aggregator.close()
            self._source = None
            self._aggregator = None
            raise

    def stop(self) -> None:
        """Stop the source. No Result is delivered after this returns."""
        if self._aggregator is not None:
            self._aggregator.close()
        if self._source is not None:
            self._source.stop()
        self._source = None
        self._aggregator = None
