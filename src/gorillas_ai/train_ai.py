"""Headless pipeline: synthesise records, fit the aim model and save it."""

from __future__ import annotations

if __package__ in {None, ""}:
    import sys
    from pathlib import Path

    sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import logging
import random
from pathlib import Path

from gorillas_ai.config import (
    BATCH_SIZE,
    DATASET_PATH,
    PRETRAINED_MODEL,
    RECORDS_TO_COLLECT,
    TRAIN_ITERATIONS,
    USE_GPU,
)
from gorillas_ai.errors import DataCollectionStalled, TrainingError
from gorillas_ai.game.ai_match import load_dataset
from gorillas_ai.logging_utils import configure_logging, format_display_path, log_key_values, log_run_context
from gorillas_ai.train.dataset import Dataset
from gorillas_ai.train.model import AimBrain
from gorillas_ai.train.search import CollectStep, DataCollector

LOGGER = logging.getLogger("gorillas_ai.train")

COLLECT_LOG_EVERY = 50


def try_save_model(brain: AimBrain, path: str | Path | None = None) -> Path | None:
    try:
        saved_path = brain.save(path)
    except RuntimeError as exc:
        LOGGER.warning("save failed (%s): %s", format_display_path(path or "model"), exc)
        return None
    LOGGER.info("Model Saved (%s)", format_display_path(saved_path))
    return saved_path


def try_save_dataset(dataset: Dataset, path: str | Path) -> bool:
    try:
        dataset.save(path)
    except RuntimeError as exc:
        LOGGER.warning("save failed (%s): %s", format_display_path(path), exc)
        return False
    return True


def collect_records(dataset: Dataset, records: int, rng: random.Random) -> int:
    """Append up to ``records`` new labelled samples to ``dataset``."""
    collector = DataCollector(dataset, rng=rng, records_to_collect=records)

    def on_step(step: CollectStep) -> None:
        if step.label is not None and collector.records_collected % COLLECT_LOG_EVERY == 0:
            log_key_values(
                LOGGER.name,
                {
                    "Collected": f"{collector.records_collected}/{records}",
                    "Hits": len(step.hits),
                    "Angle": step.label.angle,
                    "Power": step.label.power,
                },
            )

    try:
        collector.collect(on_step=on_step)
    except DataCollectionStalled as exc:
        LOGGER.warning("Data collection stopped early: %s", exc)
    return collector.records_collected


def train(
    records: int = RECORDS_TO_COLLECT,
    iterations: int = TRAIN_ITERATIONS,
    dataset_path: str | Path = DATASET_PATH,
    pretrained_model: int = PRETRAINED_MODEL,
    seed: int | None = None,
) -> Path | None:
    configure_logging()
    rng = random.Random(seed)
    dataset = load_dataset(dataset_path)
    brain = AimBrain()
    loaded = brain.load_or_create(pretrained_model)

    log_run_context(
        "train-ai",
        {
            "model": f"trained_model_{pretrained_model}" if loaded else "scratch",
            "gpu": USE_GPU,
            "dataset": Path(dataset_path),
            "dataset_records": len(dataset),
            "records_to_collect": records,
            "iterations": iterations,
            "batch": BATCH_SIZE,
        },
    )

    if records > 0:
        collected = collect_records(dataset, records, rng)
        log_key_values(LOGGER.name, {"Event": "Data Collected", "Records": collected, "Total": len(dataset)})
        try_save_dataset(dataset, dataset_path)

    brain.prepare_data(dataset, rng)
    for _ in range(iterations):
        try:
            loss = brain.train()
        except TrainingError as exc:
            LOGGER.error("Training stopped: %s", exc)
            break
        log_key_values(
            LOGGER.name,
            {
                "Iteration": brain.train_iteration,
                "Loss": f"{loss:.5f}",
            },
        )

    if brain.train_iteration == 0:
        LOGGER.warning("Nothing was trained, model not saved.")
        return None
    return try_save_model(brain)


if __name__ == "__main__":
    train()
