"""Central configuration for Gorillas AI."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parents[2]


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return int(raw.strip())


@dataclass(frozen=True)
class RuntimeFlags:
    use_gpu: bool
    show_game: bool


@dataclass(frozen=True)
class WorldConfig:
    """Immutable world geometry and shot ranges shared by every component."""

    world_width: int = 1280
    world_height: int = 720
    gravity: float = 980.0
    tile_size: int = 32
    num_buildings: int = 10
    skyline_tiles: int = 40
    min_building_tiles: int = 3
    max_building_tiles: int = 7
    min_building_height_tiles: int = 4
    max_building_height_tiles: int = 12
    min_angle: int = 55
    max_angle: int = 82
    min_power: int = 500
    max_power: int = 2200
    power_step: int = 40
    background_color: tuple[int, int, int] = (0, 120, 210)
    combatant_width: int = 64
    combatant_height: int = 64
    play_scale: float = 0.5
    collect_scale_x: float = 1 / 12
    collect_scale_y: float = 1 / 6
    projectile_size: int = 16
    launch_offset_y_scale: float = 40.0

    @property
    def projectile_radius(self) -> int:
        return self.projectile_size // 2

    @property
    def angle_range(self) -> range:
        return range(self.min_angle, self.max_angle + 1)

    @property
    def power_range(self) -> range:
        return range(self.min_power, self.max_power + 1, self.power_step)

    def clamp_angle(self, angle: float) -> float:
        return min(max(angle, self.min_angle), self.max_angle)

    def clamp_power(self, power: float) -> float:
        return min(max(power, self.min_power), self.max_power)


FLAGS = RuntimeFlags(
    use_gpu=_env_flag("GORILLAS_USE_GPU", False),
    show_game=_env_flag("GORILLAS_SHOW_GAME", True),
)

WORLD = WorldConfig()

# Quick toggles
SHOW_GAME_OVERRIDE: bool | None = None
USE_GPU = FLAGS.use_gpu
# Iteration count of a pre-trained model in MODEL_DIR; 0 starts from scratch.
PRETRAINED_MODEL = _env_int("GORILLAS_PRETRAINED_MODEL", 0)

# Runtime
FPS = 60
TICK_SECONDS = 1 / FPS
WINDOW_TITLE = "Gorillas AI"
HUMAN_WINDOW_TITLE = "Gorillas"

# Rendering
FONT_SIZE_STATUS = 18
FONT_SIZE_BANNER = 36
STATUS_BAR_Y = 25
COLOR_BUILDING = (120, 120, 128)
COLOR_BUILDING_WINDOW = (250, 220, 110)
COLOR_GORILLA_1 = (150, 90, 40)
COLOR_GORILLA_2 = (190, 144, 111)
COLOR_BANANA = (255, 224, 130)
COLOR_VIEW_LINE_1 = (0, 0, 0)
COLOR_VIEW_LINE_2 = (190, 144, 111)
COLOR_LAUNCHER_ACTIVE = (0, 221, 0)
COLOR_LAUNCHER_LAST = (238, 0, 0)
COLOR_TRAJECTORY = (255, 255, 255, 230)
COLOR_TEXT_DARK = (0, 0, 0)
COLOR_TEXT_LIGHT = (255, 255, 255)
EXPLOSION_RADIUS_FACTOR = 2

# Match
LEFT_PLATFORM_RANGE = (0, 3)
RIGHT_PLATFORM_RANGE = (6, 9)

# Human play
POINTER_POWER_FACTOR = 6

# Shot correction
CORRECTION_POWER_DELTA = 60
CORRECTION_ANGLE_DELTA = 1
SELF_PROXIMITY_PX = 60
MAX_CORRECTION_SHOTS = 50

# Trajectory search / data collection
SEARCH_TIME_STEP = 0.06
SEARCH_FINE_TIME_STEP = 0.01
SEARCH_FINE_DISTANCE_PX = 20
SEARCH_MAX_TIME = 10.0
SEARCH_VELOCITY_FACTOR = 0.99
SEARCH_PROJECTILE_SIZE = 8
MAX_SEARCH_RETRIES = 32
SHOOTER_PLATFORMS = (0, 1, 2, 3)
TARGET_PLATFORMS = (6, 7, 8, 9)
POSITIONS_PER_LAYOUT = len(SHOOTER_PLATFORMS) * len(TARGET_PLATFORMS)
RECORDS_TO_COLLECT = _env_int("GORILLAS_RECORDS_TO_COLLECT", 1000)

# Dataset codec
RECORD_SIZE = 5
THETA_OFFSET = 90
DIST_SCALE = 16
POWER_SCALE = 40
THETA_BOUNDS = (-90.0, 90.0)
DATA_DIR = PROJECT_ROOT / "data"
DATASET_PATH = DATA_DIR / "dataset.bin"
DATASET_SAVE_RETRIES = 5
DATASET_SAVE_RETRY_DELAY_SECONDS = 0.2

# Model and training
MODEL_INPUT_SIZE = 3
MODEL_HIDDEN_SIZE = 16
MODEL_OUTPUT_SIZE = 2
LEARNING_RATE = 0.1
LEARNING_RATE_PRETRAINED = 0.05
BATCH_SIZE = 100
EPOCHS_PER_TRAIN = 1
TRAIN_ITERATIONS = _env_int("GORILLAS_TRAIN_ITERATIONS", 10)
MODEL_DIR = PROJECT_ROOT / "model"
MODEL_NAME_PREFIX = "trained_model_"
MODEL_SAVE_RETRIES = 5
MODEL_SAVE_RETRY_DELAY_SECONDS = 0.2
MODEL_LOAD_TIMEOUT_SECONDS = 30.0


def resolve_show_game(default_value: bool) -> bool:
    if SHOW_GAME_OVERRIDE is None:
        return bool(default_value) and FLAGS.show_game
    return SHOW_GAME_OVERRIDE


def model_path_for_iteration(iteration: int) -> Path:
    return MODEL_DIR / f"{MODEL_NAME_PREFIX}{int(iteration)}.pth"
