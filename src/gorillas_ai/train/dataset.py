"""Byte-packed training records and their conversion to model tensors."""

from __future__ import annotations

import logging
import math
import os
import random
import time
from dataclasses import dataclass
from pathlib import Path

import numpy as np

from gorillas_ai.config import (
    DATASET_SAVE_RETRIES,
    DATASET_SAVE_RETRY_DELAY_SECONDS,
    DIST_SCALE,
    POWER_SCALE,
    RECORD_SIZE,
    THETA_BOUNDS,
    THETA_OFFSET,
    WORLD,
    WorldConfig,
)
from gorillas_ai.core.viewing import ViewingSample
from gorillas_ai.errors import DatasetFormatError
from gorillas_ai.logging_utils import format_display_path

LOGGER = logging.getLogger("gorillas_ai.dataset")


@dataclass(frozen=True)
class TrainingRecord:
    theta1: float
    theta2: float
    dist: float
    angle: float
    power: float


def _to_byte(value: float) -> int:
    # Same truncation and wrap-around as storing into a Uint8Array.
    return math.trunc(value) & 0xFF


def encode_record(theta1: float, theta2: float, dist: float, angle: float, power: float) -> bytes:
    return bytes(
        (
            _to_byte(theta1 + THETA_OFFSET),
            _to_byte(theta2 + THETA_OFFSET),
            _to_byte(dist / DIST_SCALE),
            _to_byte(angle),
            _to_byte(power / POWER_SCALE),
        )
    )


def decode_record(record: bytes | bytearray | np.ndarray) -> TrainingRecord:
    if len(record) != RECORD_SIZE:
        raise DatasetFormatError(f"A record holds {RECORD_SIZE} bytes, got {len(record)}")
    theta1, theta2, dist, angle, power = (int(value) for value in record)
    return TrainingRecord(
        theta1=theta1 - THETA_OFFSET,
        theta2=theta2 - THETA_OFFSET,
        dist=dist * DIST_SCALE,
        angle=angle,
        power=power * POWER_SCALE,
    )


def decode_columns(records: np.ndarray) -> np.ndarray:
    """Vectorised inverse of :func:`encode_record` over an ``(n, 5)`` byte array."""
    values = records.astype(np.float32)
    decoded = np.empty_like(values)
    decoded[:, 0] = values[:, 0] - THETA_OFFSET
    decoded[:, 1] = values[:, 1] - THETA_OFFSET
    decoded[:, 2] = values[:, 2] * DIST_SCALE
    decoded[:, 3] = values[:, 3]
    decoded[:, 4] = values[:, 4] * POWER_SCALE
    return decoded


class Dataset:
    """Append-only sequence of 5-byte training records."""

    def __init__(self, data: bytes | bytearray = b""):
        if len(data) % RECORD_SIZE != 0:
            raise DatasetFormatError(
                f"Dataset length {len(data)} is not a multiple of the {RECORD_SIZE}-byte record size"
            )
        self._data = bytearray(data)

    def __len__(self) -> int:
        return len(self._data) // RECORD_SIZE

    @property
    def num_bytes(self) -> int:
        return len(self._data)

    def to_bytes(self) -> bytes:
        return bytes(self._data)

    def add(self, sample: ViewingSample, angle: float, power: float) -> bytes:
        record = encode_record(sample.theta1, sample.theta2, sample.dist, angle, power)
        self._data.extend(record)
        return record

    def records(self) -> np.ndarray:
        return np.frombuffer(bytes(self._data), dtype=np.uint8).reshape(-1, RECORD_SIZE)

    def record(self, index: int) -> TrainingRecord:
        start = index * RECORD_SIZE
        return decode_record(self._data[start : start + RECORD_SIZE])

    def decoded(self) -> np.ndarray:
        return decode_columns(self.records())

    @classmethod
    def load(cls, path: str | Path) -> "Dataset":
        path = Path(path)
        if not path.exists():
            LOGGER.info("No dataset at %s, starting empty", format_display_path(path))
            return cls()
        return cls(path.read_bytes())

    def save(self, path: str | Path) -> None:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_file = path.with_name(f"{path.name}.tmp.{os.getpid()}")
        last_error = None

        for attempt in range(DATASET_SAVE_RETRIES):
            try:
                temp_file.write_bytes(self.to_bytes())
                os.replace(temp_file, path)
                return
            except OSError as error:
                last_error = error
                if temp_file.exists():
                    try:
                        temp_file.unlink()
                    except OSError:
                        pass
                if attempt < DATASET_SAVE_RETRIES - 1:
                    time.sleep(DATASET_SAVE_RETRY_DELAY_SECONDS * (attempt + 1))

        raise RuntimeError(
            f"Failed to save dataset to '{path}' after {DATASET_SAVE_RETRIES} attempts."
        ) from last_error


@dataclass(frozen=True)
class NormalizationBounds:
    """Fixed min/max bounds shared by training and inference."""

    theta: tuple[float, float]
    dist: tuple[float, float]
    angle: tuple[float, float]
    power: tuple[float, float]

    @classmethod
    def from_config(cls, config: WorldConfig = WORLD) -> "NormalizationBounds":
        return cls(
            theta=THETA_BOUNDS,
            dist=(0.0, float(config.world_width)),
            angle=(float(config.min_angle), float(config.max_angle)),
            power=(float(config.min_power), float(config.max_power)),
        )


def normalize(values, bounds: tuple[float, float]):
    low, high = bounds
    return (values - low) / (high - low)


def unnormalize(values, bounds: tuple[float, float]):
    low, high = bounds
    return values * (high - low) + low


def feature_vector(theta1, theta2, dist, bounds: NormalizationBounds) -> np.ndarray:
    """Model inputs ``[n(theta1)^2, n(theta2)^3, n(dist)]`` stacked column-wise."""
    theta1 = normalize(np.asarray(theta1, dtype=np.float32), bounds.theta)
    theta2 = normalize(np.asarray(theta2, dtype=np.float32), bounds.theta)
    dist = normalize(np.asarray(dist, dtype=np.float32), bounds.dist)
    return np.stack([np.square(theta1), np.power(theta2, 3), dist], axis=-1).astype(np.float32)


def build_training_arrays(
    dataset: Dataset,
    bounds: NormalizationBounds,
    rng: random.Random | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """Shuffle the decoded records and return normalised ``(inputs, labels)``."""
    decoded = dataset.decoded()
    if len(decoded):
        order = list(range(len(decoded)))
        (rng or random.Random()).shuffle(order)
        decoded = decoded[order]

    inputs = feature_vector(decoded[:, 0], decoded[:, 1], decoded[:, 2], bounds)
    labels = np.stack(
        [normalize(decoded[:, 3], bounds.angle), normalize(decoded[:, 4], bounds.power)],
        axis=-1,
    ).astype(np.float32)
    return inputs.reshape(-1, 3), labels.reshape(-1, 2)
