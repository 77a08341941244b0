import pytest

QtCore = pytest.importorskip("PyQt5.QtCore")

from gestures.config import Config
from gestures.landmark_source import LandmarkSource, LandmarkSourceError, ReplaySource
from gestures.worker import RecognizerWorker
from conftest import hand_event, make_hand


@pytest.fixture(scope="module")
def qt_app():
    return QtCore.QCoreApplication.instance() or QtCore.QCoreApplication([])


class FailingSource(LandmarkSource):
    def start(self, on_hand, on_face):
        raise LandmarkSourceError("no camera")

    def stop(self):
        pass

    @property
    def is_running(self):
        return False


def test_results_are_reemitted(qt_app):
    source = ReplaySource([
        hand_event(make_hand(), t=0.0),
        hand_event(make_hand(), t=0.1),
        hand_event(None, t=0.2),
        hand_event(None, t=0.3),
    ])
    worker = RecognizerWorker(Config(), source=source)
    results, lost = [], []
    worker.result_ready.connect(results.append)
    worker.hand_lost.connect(lambda: lost.append(True))

    worker.start_process()
    worker.stop_process()

    assert len(results) == 4
    assert len(lost) == 1
    assert not worker.is_running


def test_start_failure_emits_error(qt_app):
    worker = RecognizerWorker(Config(), source=FailingSource())
    errors = []
    worker.error.connect(errors.append)

    worker.start_process()

    assert errors == ["no camera"]
    assert not worker.is_running


def test_worker_is_exported_from_package():
    import gestures
    assert gestures.RecognizerWorker is RecognizerWorker
    assert 'RecognizerWorker' in gestures.__all__
