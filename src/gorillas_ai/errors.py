"""Exception taxonomy for Gorillas AI."""


class GorillasError(Exception):
    """Base class for recoverable Gorillas AI failures."""


class ModelLoadError(GorillasError):
    """A persisted model is missing, malformed or took too long to load."""


class DatasetFormatError(GorillasError):
    """A dataset blob does not hold a whole number of records."""


class TrainingError(GorillasError):
    """The model boundary failed while fitting a training request."""


class DataCollectionStalled(GorillasError):
    """Trajectory search kept missing a target after every hitbox enlargement."""

    def __init__(self, shooter_platform: int, target_platform: int, attempts: int):
        super().__init__(
            f"No trajectory from platform {shooter_platform} reached platform {target_platform} "
            f"after {attempts} attempts"
        )
        self.shooter_platform = shooter_platform
        self.target_platform = target_platform
        self.attempts = attempts


class WindowClosed(GorillasError):
    """The game window was closed by the user."""
