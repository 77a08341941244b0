import logging

import pytest
import yaml

from gestures.config import Config, PROJECT_ROOT, load_config, resolve_path
from gestures.log import setup_logging


def test_missing_file_gives_defaults(tmp_path):
    config = load_config(tmp_path / "nope.yaml")
    assert config == Config()
    assert config.mediapipe.max_num_hands == 1
    assert config.mediapipe.min_hand_detection_confidence == 0.7
    assert config.mediapipe.min_face_detection_confidence == 0.5
    assert (config.camera.width, config.camera.height) == (640, 480)


def test_partial_sections_and_unknown_keys(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "camera:\n"
        "  device_id: 2\n"
        "  colour: blue\n"
        "mediapipe:\n"
        "  face_every_n_frames: 3\n"
    )
    config = load_config(path)
    assert config.camera.device_id == 2
    assert config.camera.width == 640
    assert config.mediapipe.face_every_n_frames == 3
    assert config.logging.level == "INFO"


def test_empty_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert load_config(path) == Config()


def test_malformed_yaml_propagates(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("camera: [unclosed\n")
    with pytest.raises(yaml.YAMLError):
        load_config(path)


def test_shipped_config_matches_defaults():
    assert load_config(PROJECT_ROOT / "config.yaml") == Config()


def test_resolve_path():
    assert resolve_path("models/x.task") == PROJECT_ROOT / "models" / "x.task"
    assert resolve_path("/abs/x.task").is_absolute()


def test_setup_logging_with_file(tmp_path):
    log_file = tmp_path / "logs" / "gestures.log"
    root = setup_logging("debug", str(log_file))
    try:
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 2
        logging.getLogger("gestures.test").info("hello")
        for handler in root.handlers:
            handler.flush()
        assert "hello" in log_file.read_text()
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers.clear()
