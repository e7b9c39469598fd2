"""
Config loader for AirSpace.
Loads YAML configuration with dataclass validation.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple
import yaml


class ConfigError(ValueError):
    """Raised when a config value breaks a gesture or interaction constraint."""


@dataclass
class CameraConfig:
    device_id: int = 0
    width: int = 1280
    height: int = 720
    fps: int = 30


@dataclass
class MediaPipeConfig:
    max_num_hands: int = 2
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5


@dataclass
class GestureConfig:
    # Index-thumb tap (hysteresis band between the two)
    tap_threshold: float = 0.04
    release_threshold: float = 0.06

    # Index-middle double tap
    middle_index_tap_threshold: float = 0.035
    middle_index_release_threshold: float = 0.055
    double_tap_window_ms: float = 500.0

    # Cursor lerp (higher = less smoothing)
    lerp_factor: float = 0.3

    def validate(self) -> None:
        if not self.release_threshold > self.tap_threshold:
            raise ConfigError(
                f"release_threshold ({self.release_threshold}) must be greater "
                f"than tap_threshold ({self.tap_threshold})"
            )
        if not self.middle_index_release_threshold > self.middle_index_tap_threshold:
            raise ConfigError(
                f"middle_index_release_threshold ({self.middle_index_release_threshold}) "
                f"must be greater than middle_index_tap_threshold "
                f"({self.middle_index_tap_threshold})"
            )
        if not 0.0 < self.lerp_factor <= 1.0:
            raise ConfigError(f"lerp_factor must be in (0, 1], got {self.lerp_factor}")
        if self.double_tap_window_ms <= 0:
            raise ConfigError("double_tap_window_ms must be positive")


@dataclass
class TrackingConfig:
    max_match_distance: float = 0.25  # Normalized frame units
    max_missed_frames: int = 15


@dataclass
class InteractionConfig:
    depth_scale: float = 1000.0          # Landmark z -> pixel-like depth units
    window_depth_tolerance: float = 150.0
    icon_hover_tolerance: float = 100.0
    icon_press_offset: float = 25.0
    min_window_width: float = 300.0
    min_window_height: float = 200.0
    default_window_size: Tuple[float, float] = (600.0, 450.0)
    window_sizes: Dict[str, Tuple[float, float]] = field(
        default_factory=lambda: {"draw": (800.0, 600.0)}
    )

    def window_size_for(self, app_id: str) -> Tuple[float, float]:
        width, height = self.window_sizes.get(app_id, self.default_window_size)
        return (float(width), float(height))


@dataclass
class DockConfig:
    hide_timeout_ms: float = 4000.0


@dataclass
class UIConfig:
    viewport_width: int = 1280
    viewport_height: int = 720
    grid_plane: float = -600.0
    window_plane: float = -400.0
    dock_plane: float = 0.0
    arc_radius: float = 800.0
    arc_angle: float = 8.0      # Degrees between neighbouring icons
    apps: Tuple[str, ...] = ("camera", "photos", "draw")
    debug_overlay: bool = False


@dataclass
class Config:
    camera: CameraConfig = field(default_factory=CameraConfig)
    mediapipe: MediaPipeConfig = field(default_factory=MediaPipeConfig)
    gestures: GestureConfig = field(default_factory=GestureConfig)
    tracking: TrackingConfig = field(default_factory=TrackingConfig)
    interaction: InteractionConfig = field(default_factory=InteractionConfig)
    dock: DockConfig = field(default_factory=DockConfig)
    ui: UIConfig = field(default_factory=UIConfig)


def _dict_to_dataclass(cls, data: dict):
    """Convert a dict to a dataclass, ignoring unknown keys."""
    if data is None:
        return cls()
    field_names = {f.name for f in cls.__dataclass_fields__.values()}
    filtered = {k: v for k, v in data.items() if k in field_names}
    return cls(**filtered)


def _load_interaction(data: Optional[dict]) -> InteractionConfig:
    # YAML gives lists; sizes are stored as tuples
    interaction = _dict_to_dataclass(InteractionConfig, data)
    interaction.default_window_size = tuple(interaction.default_window_size)
    interaction.window_sizes = {
        app_id: tuple(size) for app_id, size in interaction.window_sizes.items()
    }
    return interaction


def load_config(config_path: Optional[Path] = None) -> Config:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to config file. If None, uses default config.yaml
                    in project root.

    Returns:
        Config dataclass with all settings.

    Raises:
        ConfigError: If gesture thresholds are inconsistent.
    """
    if config_path is None:
        # Default to config.yaml in project root
        config_path = Path(__file__).parent.parent.parent / "config.yaml"

    config_path = Path(config_path)

    if not config_path.exists():
        # Return defaults if no config file
        return Config()

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    ui = _dict_to_dataclass(UIConfig, data.get('ui'))
    ui.apps = tuple(ui.apps)

    config = Config(
        camera=_dict_to_dataclass(CameraConfig, data.get('camera')),
        mediapipe=_dict_to_dataclass(MediaPipeConfig, data.get('mediapipe')),
        gestures=_dict_to_dataclass(GestureConfig, data.get('gestures')),
        tracking=_dict_to_dataclass(TrackingConfig, data.get('tracking')),
        interaction=_load_interaction(data.get('interaction')),
        dock=_dict_to_dataclass(DockConfig, data.get('dock')),
        ui=ui,
    )
    config.gestures.validate()
    return config
