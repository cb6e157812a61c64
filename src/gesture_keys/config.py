import logging
from pathlib import Path

import platformdirs
from pydantic import BaseModel, Field

from .gestures import Gestures
from .models.bindings import Profiles

logger = logging.getLogger("gesture_keys.config")


class ClassifierConfig(BaseModel):
    acceptance_threshold: float = Field(
        0.8, description="A gesture check must exceed this confidence to be accepted"
    )
    ok_sign_touch_distance: float = Field(
        0.05, description="Max normalized distance between thumb and index tips for the OK sign"
    )
    disabled_gestures: list[Gestures] = Field(
        default_factory=list, description="Gestures that are never reported by the classifier"
    )


class StabilizerConfig(BaseModel):
    history_size: int = Field(5, ge=1, description="Number of recent samples kept for consensus")
    consensus_size: int = Field(
        3, ge=1, description="Number of most recent samples that must agree to confirm a gesture"
    )


class ActuationConfig(BaseModel):
    repeat_interval: float = Field(0.1, gt=0, description="Delay (seconds) between two key pulses")
    stop_timeout: float = Field(
        0.5, ge=0, description="Max time (seconds) to wait for the repeat thread to end after a stop"
    )


class PipelineConfig(BaseModel):
    min_hand_confidence: float = Field(
        0.0, ge=0, le=1, description="Hands detected with a lower handedness score are ignored"
    )


class RecognizerConfig(BaseModel):
    model_path: str = Field("hand_landmarker.task", description="Path of the MediaPipe hand landmarker model")
    num_hands: int = Field(2, ge=1, description="Max number of hands to detect")
    min_hand_detection_confidence: float = Field(0.5, description="MediaPipe palm detection confidence")
    min_hand_presence_confidence: float = Field(0.8, description="MediaPipe hand presence confidence")
    min_tracking_confidence: float = Field(0.5, description="MediaPipe hand tracking confidence")
    use_gpu: bool = Field(False, description="Run the model on GPU when available")


class CLIConfig(BaseModel):
    """Configuration for CLI settings."""

    camera: int = Field(0, description="Index of the camera to open")
    mirror: bool = Field(False, description="Mirror the landmarks horizontally")


class Config(BaseModel):
    classifier: ClassifierConfig = Field(
        default_factory=lambda: ClassifierConfig(), description="Gesture classification"
    )
    stabilizer: StabilizerConfig = Field(
        default_factory=lambda: StabilizerConfig(), description="Temporal stabilization of gestures"
    )
    actuation: ActuationConfig = Field(
        default_factory=lambda: ActuationConfig(), description="Key repeat while a gesture is held"
    )
    pipeline: PipelineConfig = Field(default_factory=lambda: PipelineConfig(), description="Frame processing")
    recognizer: RecognizerConfig = Field(
        default_factory=lambda: RecognizerConfig(), description="Hand landmarks inference"
    )
    cli: CLIConfig = Field(default_factory=lambda: CLIConfig(), description="CLI configuration")
    profiles: Profiles = Field(default_factory=lambda: Profiles(), description="Keybinding profiles")

    @classmethod
    def get_user_path(cls) -> Path:
        app_name = "gesture-keys"
        config_dir = Path(platformdirs.user_config_dir(app_name))
        return config_dir / "config.json"

    @classmethod
    def validate_path(cls, path: Path | str | None) -> Path:
        if path is None:
            path = cls.get_user_path()
        elif isinstance(path, str):
            path = Path(path)

        return path.resolve()

    @classmethod
    def load(cls, path: Path | str | None = None) -> "Config":
        path = cls.validate_path(path)

        if not path.exists():
            # If the config file does not exist, return a default config
            logger.info(f"Config file {path} does not exist. Using default config.")
            return cls()

        if not path.is_file():
            raise ValueError(f"Path {path} exists and is not a file.")

        try:
            return cls.model_validate_json(path.read_text())
        except Exception as e:
            logger.error(f"Error loading config from {path}: {e}")
            logger.warning("Using default config.")
            return cls()

    def save(self, path: Path | str | None = None) -> None:
        path = self.validate_path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        if path.exists() and not path.is_file():
            raise ValueError(f"Path {path} exists and is not a file.")

        try:
            path.write_text(self.model_dump_json(indent=2))
        except Exception as e:
            logger.error(f"Error saving config to {path}: {e}")
            raise e
