"""
Config loader for the gesture pipeline.
Loads YAML configuration into dataclasses.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml

PROJECT_ROOT = Path(__file__).parent.parent.parent


@dataclass
class CameraConfig:
    device_id: int = 0
    width: int = 640
    height: int = 480
    fps: int = 30
    mirror: bool = True


@dataclass
class MediaPipeConfig:
    hand_model_path: str = "models/hand_landmarker.task"
    face_model_path: str = "models/face_landmarker.task"
    max_num_hands: int = 1
    min_hand_detection_confidence: float = 0.7
    min_hand_tracking_confidence: float = 0.7
    max_num_faces: int = 1
    min_face_detection_confidence: float = 0.5
    min_face_tracking_confidence: float = 0.5
    face_every_n_frames: int = 1   # Run face detection on every Nth frame (0 = off)


@dataclass
class LoggingConfig:
    level: str = "INFO"
    file: Optional[str] = None


@dataclass
class Config:
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _dict_to_dataclass(cls, data: dict):
    """Convert a dict to a dataclass, ignoring unknown keys."""
    if data is None:
        return cls()
    field_names = {f.name for f in cls.__dataclass_fields__.values()}
    filtered = {k: v for k, v in data.items() if k in field_names}
    return cls(**filtered)


def resolve_path(path: str) -> Path:
    """Resolve a config path; relative paths are taken from the project root."""
    p = Path(path)
    return p if p.is_absolute() else PROJECT_ROOT / p


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses config.yaml
                    in project root.

    Returns:
        Config dataclass with all settings.
    """
    if config_path is None:
        config_path = PROJECT_ROOT / "config.yaml"

    config_path = Path(config_path)

    if not config_path.exists():
        return Config()

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    return Config(
        camera=_dict_to_dataclass(CameraConfig, data.get('camera')),
        mediapipe=_dict_to_dataclass(MediaPipeConfig, data.get('mediapipe')),
        logging=_dict_to_dataclass(LoggingConfig, data.get('logging')),
    )
