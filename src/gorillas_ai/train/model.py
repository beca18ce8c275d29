"""Regression network mapping sightline features to an aiming action."""

from __future__ import annotations

import logging
import os
import pickle
import random
import time
from pathlib import Path
from typing import Any, Callable

import torch
import torch.nn as nn
import torch.optim as optim

from gorillas_ai.config import (
    BATCH_SIZE,
    EPOCHS_PER_TRAIN,
    LEARNING_RATE,
    LEARNING_RATE_PRETRAINED,
    MODEL_HIDDEN_SIZE,
    MODEL_INPUT_SIZE,
    MODEL_OUTPUT_SIZE,
    MODEL_SAVE_RETRIES,
    MODEL_SAVE_RETRY_DELAY_SECONDS,
    USE_GPU,
    WORLD,
    WorldConfig,
    model_path_for_iteration,
)
from gorillas_ai.core.entities import Action
from gorillas_ai.errors import ModelLoadError, TrainingError
from gorillas_ai.logging_utils import format_display_path, get_torch_device
from gorillas_ai.train.dataset import (
    Dataset,
    NormalizationBounds,
    build_training_arrays,
    feature_vector,
    unnormalize,
)

LOGGER = logging.getLogger("gorillas_ai.model")

device = get_torch_device(prefer_gpu=USE_GPU)

BatchCallback = Callable[[int, int, float], None]


class AimRegressor(nn.Module):
    """Two stacked linear layers; the hidden layer starts at zero and has no bias."""

    def __init__(
        self,
        input_size: int = MODEL_INPUT_SIZE,
        hidden_size: int = MODEL_HIDDEN_SIZE,
        output_size: int = MODEL_OUTPUT_SIZE,
    ):
        super().__init__()
        self.hidden = nn.Linear(input_size, hidden_size, bias=False)
        nn.init.zeros_(self.hidden.weight)
        self.output = nn.Linear(hidden_size, output_size)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        if x.dim() == 1:
            x = x.unsqueeze(0)
        return self.output(self.hidden(x))


def read_checkpoint(path: str | Path) -> dict[str, Any]:
    """Load a saved model bundle without touching any live model."""
    path = Path(path)
    try:
        payload = torch.load(path, map_location=device, weights_only=True)
    except (OSError, EOFError, RuntimeError, ValueError, pickle.UnpicklingError) as error:
        raise ModelLoadError(f"Could not load model from '{format_display_path(path)}': {error}") from error
    if not isinstance(payload, dict) or "state_dict" not in payload:
        raise ModelLoadError(f"'{format_display_path(path)}' is not a Gorillas AI model bundle")
    return payload


class AimBrain:
    """Learned-model boundary: train, predict, load and save."""

    def __init__(self, config: WorldConfig = WORLD):
        self.config = config
        self.bounds = NormalizationBounds.from_config(config)
        self.batch_size = BATCH_SIZE
        self.train_iteration = 0
        self.losses: list[float] = []
        self.inputs = torch.zeros((0, MODEL_INPUT_SIZE), dtype=torch.float32, device=device)
        self.labels = torch.zeros((0, MODEL_OUTPUT_SIZE), dtype=torch.float32, device=device)
        self.create_model()

    def create_model(self, learning_rate: float = LEARNING_RATE) -> None:
        self.model = AimRegressor().to(device)
        self._compile(learning_rate)

    def _compile(self, learning_rate: float) -> None:
        self.optimizer = optim.SGD(self.model.parameters(), lr=learning_rate)
        self.loss_fn = nn.MSELoss()

    @property
    def num_records(self) -> int:
        return int(self.inputs.shape[0])

    def prepare_data(self, dataset: Dataset, rng: random.Random | None = None) -> int:
        inputs, labels = build_training_arrays(dataset, self.bounds, rng)
        self.inputs = torch.as_tensor(inputs, dtype=torch.float32, device=device)
        self.labels = torch.as_tensor(labels, dtype=torch.float32, device=device)
        LOGGER.info("Data prepared. [data records = %d]", self.num_records)
        return self.num_records

    def train(
        self,
        inputs: torch.Tensor | None = None,
        labels: torch.Tensor | None = None,
        batch_size: int | None = None,
        epochs: int = EPOCHS_PER_TRAIN,
        on_batch_end: BatchCallback | None = None,
    ) -> float:
        """Fit the prepared (or given) tensors; returns the mean batch loss."""
        inputs = self.inputs if inputs is None else inputs
        labels = self.labels if labels is None else labels
        batch_size = int(batch_size or self.batch_size)
        if inputs.shape[0] == 0:
            raise TrainingError("Cannot train on an empty dataset")
        if epochs < 1:
            raise TrainingError(f"epochs must be at least 1, got {epochs}")
        if inputs.shape[0] != labels.shape[0]:
            raise TrainingError(f"Got {inputs.shape[0]} inputs but {labels.shape[0]} labels")

        self.model.train()
        batch_losses: list[float] = []
        try:
            for _ in range(epochs):
                order = torch.randperm(inputs.shape[0], device=inputs.device)
                num_batches = (inputs.shape[0] + batch_size - 1) // batch_size
                for batch_index in range(num_batches):
                    indices = order[batch_index * batch_size : (batch_index + 1) * batch_size]
                    prediction = self.model(inputs[indices])
                    loss = self.loss_fn(prediction, labels[indices])
                    self.optimizer.zero_grad()
                    loss.backward()
                    self.optimizer.step()
                    batch_losses.append(float(loss.item()))
                    if on_batch_end is not None:
                        on_batch_end(batch_index, num_batches, batch_losses[-1])
        except RuntimeError as error:
            raise TrainingError(f"Training iteration {self.train_iteration + 1} failed: {error}") from error
        finally:
            self.model.eval()

        self.train_iteration += 1
        mean_loss = sum(batch_losses) / len(batch_losses)
        self.losses.append(mean_loss)
        return mean_loss

    def predict(self, theta1: float, theta2: float, dist: float) -> Action:
        features = torch.as_tensor(feature_vector(theta1, theta2, dist, self.bounds), device=device)
        with torch.no_grad():
            output = self.model(features)[0].cpu().numpy()
        return Action(
            angle=float(unnormalize(output[0], self.bounds.angle)),
            power=float(unnormalize(output[1], self.bounds.power)),
        )

    def apply_checkpoint(self, payload: dict[str, Any], fallback_iteration: int = 0) -> None:
        model = AimRegressor().to(device)
        try:
            model.load_state_dict(payload["state_dict"])
        except (RuntimeError, KeyError) as error:
            raise ModelLoadError(f"Model weights do not fit the aim regressor: {error}") from error
        self.model = model
        self.model.eval()
        self._compile(LEARNING_RATE_PRETRAINED)
        self.train_iteration = int(payload.get("train_iteration", fallback_iteration))

    def load(self, path: str | Path) -> None:
        self.apply_checkpoint(read_checkpoint(path))

    def load_or_create(self, iteration: int) -> bool:
        """Load ``trained_model_<iteration>``; fall back to a fresh model on failure."""
        if iteration <= 0:
            self.create_model()
            self.train_iteration = 0
            return False
        try:
            self.load(model_path_for_iteration(iteration))
        except ModelLoadError as error:
            LOGGER.warning("The model could not be loaded: %s", error)
            self.create_model()
            self.train_iteration = 0
            return False
        LOGGER.info("Loaded a pre-trained model [training iterations = %d]", self.train_iteration)
        return True

    def checkpoint(self) -> dict[str, Any]:
        return {"state_dict": self.model.state_dict(), "train_iteration": self.train_iteration}

    def save(self, file_name: str | Path | None = None) -> Path:
        path = Path(file_name) if file_name is not None else model_path_for_iteration(self.train_iteration)
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_file = path.with_name(f"{path.name}.tmp.{os.getpid()}")
        last_error = None

        for attempt in range(MODEL_SAVE_RETRIES):
            try:
                torch.save(self.checkpoint(), temp_file)
                os.replace(temp_file, path)
                return path
            except (OSError, RuntimeError) as error:
                last_error = error
                if temp_file.exists():
                    try:
                        temp_file.unlink()
                    except OSError:
                        pass
                if attempt < MODEL_SAVE_RETRIES - 1:
                    delay = MODEL_SAVE_RETRY_DELAY_SECONDS * (attempt + 1)
                    time.sleep(delay)

        raise RuntimeError(
            f"Failed to save model to '{path}' after {MODEL_SAVE_RETRIES} attempts."
        ) from last_error
