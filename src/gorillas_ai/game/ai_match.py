"""AI-vs-AI match: play, data collection, training and persistence in one tick loop."""

from __future__ import annotations

import logging
import random
from concurrent.futures import Executor
from pathlib import Path
from typing import Callable

from gorillas_ai.config import (
    DATASET_PATH,
    LEFT_PLATFORM_RANGE,
    MAX_CORRECTION_SHOTS,
    MODEL_LOAD_TIMEOUT_SECONDS,
    PRETRAINED_MODEL,
    RECORDS_TO_COLLECT,
    RIGHT_PLATFORM_RANGE,
    WORLD,
    WorldConfig,
    model_path_for_iteration,
)
from gorillas_ai.core.ballistics import is_hit_combatant, is_hit_obstacle, is_out_of_bounds
from gorillas_ai.core.correction import charge_shot, correct_shot
from gorillas_ai.core.entities import Combatant, Explosion
from gorillas_ai.core.skyline import Skyline
from gorillas_ai.core.viewing import ViewingSample, compute_viewing_geometry
from gorillas_ai.errors import DataCollectionStalled, DatasetFormatError, ModelLoadError, TrainingError
from gorillas_ai.game.status import USER_REQUEST_STATES, MatchStatus
from gorillas_ai.train.dataset import Dataset
from gorillas_ai.train.model import AimBrain, read_checkpoint
from gorillas_ai.train.search import DataCollector, Trajectory
from gorillas_ai.train.tasks import ModelTask, build_model_executor

LOGGER = logging.getLogger("gorillas_ai.match")


def load_dataset(path: str | Path) -> Dataset:
    """Read the dataset file, starting empty when it is malformed."""
    try:
        return Dataset.load(path)
    except DatasetFormatError as error:
        LOGGER.warning("Ignoring dataset: %s", error)
        return Dataset()


class AIMatch:
    """Two model-driven combatants that keep shooting until one of them is hit."""

    def __init__(
        self,
        config: WorldConfig = WORLD,
        brain: AimBrain | None = None,
        dataset: Dataset | None = None,
        dataset_path: str | Path = DATASET_PATH,
        rng: random.Random | None = None,
        pretrained_model: int = PRETRAINED_MODEL,
        records_to_collect: int = RECORDS_TO_COLLECT,
        load_timeout: float = MODEL_LOAD_TIMEOUT_SECONDS,
        executor: Executor | None = None,
        collector_factory: Callable[..., DataCollector] = DataCollector,
    ):
        self.config = config
        self.rng = rng or random.Random()
        self.brain = brain or AimBrain(config)
        self.dataset_path = Path(dataset_path)
        self.dataset = dataset if dataset is not None else load_dataset(self.dataset_path)
        self.pretrained_model = int(pretrained_model)
        self.records_to_collect = int(records_to_collect)
        self.load_timeout = load_timeout
        self._owns_executor = executor is None
        self.executor = executor or build_model_executor()
        self.collector_factory = collector_factory

        self.skyline = Skyline.generate(self.rng, config)
        self.left = Combatant(1, config)
        self.right = Combatant(2, config)
        self.status = MatchStatus.NEW
        self.levels_played = 0
        self.explosions: list[Explosion] = []
        self.view_sample: ViewingSample | None = None
        self.trajectories: tuple[Trajectory, ...] = ()
        self.collector: DataCollector | None = None
        self.collect_percent: float | None = None
        self.train_percent: float | None = None
        self._task: ModelTask | None = None
        self._finish_task: Callable[[ModelTask], None] | None = None

    def close(self) -> None:
        if self._owns_executor:
            self.executor.shutdown(wait=False)

    # User requests

    def request_data_collect(self) -> bool:
        if self.status == MatchStatus.DATA_COLLECT_WORK:
            self.status = MatchStatus.DATA_COLLECT_SAVE
            return True
        return self._change_status(MatchStatus.DATA_COLLECT_INIT)

    def request_train(self) -> bool:
        return self._change_status(MatchStatus.MODEL_TRAIN)

    def request_save(self) -> bool:
        return self._change_status(MatchStatus.MODEL_SAVE)

    def _change_status(self, status: MatchStatus) -> bool:
        if self.status not in USER_REQUEST_STATES:
            LOGGER.debug("Ignoring %s request while in %s", status.name, self.status.name)
            return False
        self.status = status
        return True

    @property
    def accepts_requests(self) -> bool:
        return self.status in USER_REQUEST_STATES or self.status == MatchStatus.DATA_COLLECT_WORK

    # Status text

    @property
    def dataset_text(self) -> str:
        return f"DATASET: {len(self.dataset)} data records"

    @property
    def training_text(self) -> str:
        return f"TRAINING: {self.brain.train_iteration} iterations"

    @property
    def progress_text(self) -> str:
        if self.collect_percent is not None:
            return f"Collecting Data: {self.collect_percent:.1f}%"
        if self.train_percent is not None:
            return f"Training: {self.train_percent:.0f} %"
        return ""

    # Tick

    def tick(self, dt: float) -> None:
        self._tick_handlers[self.status](dt)

    @property
    def _tick_handlers(self) -> dict[MatchStatus, Callable[[float], None]]:
        return {
            MatchStatus.NEW: self._tick_new,
            MatchStatus.INIT: self._tick_init,
            MatchStatus.CREATE_LEVEL: self._tick_create_level,
            MatchStatus.AIM: self._tick_aim,
            MatchStatus.SHOT: self._tick_shot,
            MatchStatus.DATA_COLLECT_INIT: self._tick_collect_init,
            MatchStatus.DATA_COLLECT_WORK: self._tick_collect_work,
            MatchStatus.DATA_COLLECT_SAVE: self._tick_collect_save,
            MatchStatus.MODEL_TRAIN: self._tick_train,
            MatchStatus.MODEL_LOAD: self._tick_load,
            MatchStatus.MODEL_SAVE: self._tick_save,
            MatchStatus.MODEL_WAIT: self._tick_wait,
        }

    def _tick_new(self, dt: float) -> None:
        LOGGER.info("Starting a new game.")
        self._kill_projectiles()
        self.status = MatchStatus.MODEL_LOAD

    def _tick_init(self, dt: float) -> None:
        LOGGER.info("Initializing game.")
        self.brain.prepare_data(self.dataset, self.rng)
        self.status = MatchStatus.CREATE_LEVEL

    def _tick_create_level(self, dt: float) -> None:
        LOGGER.debug("Creating new level.")
        self.skyline = Skyline.generate(self.rng, self.config)
        self.explosions = []
        self.trajectories = ()
        for combatant, (low, high) in ((self.left, LEFT_PLATFORM_RANGE), (self.right, RIGHT_PLATFORM_RANGE)):
            combatant.set_scale(self.config.play_scale)
            combatant.restart(self.skyline, self.rng.randint(low, high))
        self.levels_played += 1
        self.status = MatchStatus.AIM

    def _tick_aim(self, dt: float) -> None:
        sample = compute_viewing_geometry(self.left, self.right, self.skyline)
        self.view_sample = sample
        for combatant in (self.left, self.right):
            combatant.action = self.brain.predict(*sample.features_for(combatant.id))
            charge_shot(combatant)
        self.status = MatchStatus.SHOT

    def _tick_shot(self, dt: float) -> None:
        self._resolve_projectile(self.left, self.right, dt)
        self._resolve_projectile(self.right, self.left, dt)
        if not (self.left.projectile.alive or self.right.projectile.alive):
            self.status = MatchStatus.CREATE_LEVEL

    def _resolve_projectile(self, shooter: Combatant, target: Combatant, dt: float) -> None:
        projectile = shooter.projectile
        if not projectile.alive:
            return
        projectile.update(dt)

        if target.alive and is_hit_combatant(projectile.bounds(), target.bounds()):
            self._explode(target.explosion())
            projectile.kill()
            target.kill()
        elif is_hit_obstacle(projectile.x, projectile.y, projectile.radius, self.skyline):
            self._explode(projectile.explosion())
            correct_shot(shooter, target, MAX_CORRECTION_SHOTS)
        elif is_out_of_bounds(projectile.x, projectile.y, projectile.size, projectile.size, self.config):
            correct_shot(shooter, target, MAX_CORRECTION_SHOTS)

    def _explode(self, explosion: Explosion) -> None:
        self.explosions.append(explosion)
        self.skyline.carve_crater(explosion.x, explosion.y, explosion.radius)

    def _kill_projectiles(self) -> None:
        self.left.projectile.kill()
        self.right.projectile.kill()

    # Data collection

    def _tick_collect_init(self, dt: float) -> None:
        LOGGER.info("Collecting data...")
        self._kill_projectiles()
        self.view_sample = None
        self.collector = self.collector_factory(
            self.dataset,
            config=self.config,
            rng=self.rng,
            records_to_collect=self.records_to_collect,
            shooter=self.left,
            target=self.right,
        )
        self.collect_percent = 0.0
        self.status = MatchStatus.DATA_COLLECT_WORK

    def _tick_collect_work(self, dt: float) -> None:
        collector = self.collector
        try:
            step = collector.step()
        except DataCollectionStalled as error:
            LOGGER.warning("Data collection stalled: %s", error)
            self.status = MatchStatus.DATA_COLLECT_SAVE
            return

        self.skyline = collector.skyline
        self.explosions = []
        self.view_sample = step.sample
        self.trajectories = step.hits
        self.collect_percent = collector.progress * 100
        if collector.done:
            self.status = MatchStatus.DATA_COLLECT_SAVE

    def _tick_collect_save(self, dt: float) -> None:
        LOGGER.info("Collecting data completed. Saving dataset.")
        self.collect_percent = None
        self.trajectories = ()
        self.collector = None
        try:
            self.dataset.save(self.dataset_path)
        except RuntimeError as error:
            LOGGER.error("Dataset was not saved: %s", error)
        self.brain.prepare_data(self.dataset, self.rng)
        self.status = MatchStatus.CREATE_LEVEL

    # Model tasks

    def _start_task(
        self,
        name: str,
        fn: Callable,
        finish: Callable[[ModelTask], None],
        timeout: float | None = None,
    ) -> None:
        self._kill_projectiles()
        self._task = ModelTask.submit(self.executor, name, fn, timeout=timeout)
        self._finish_task = finish
        self.status = MatchStatus.MODEL_WAIT

    def _tick_wait(self, dt: float) -> None:
        task = self._task
        if task is None or not task.done():
            return
        finish = self._finish_task
        self._task = None
        self._finish_task = None
        finish(task)

    def _tick_load(self, dt: float) -> None:
        if self.pretrained_model <= 0:
            LOGGER.info("No pre-trained model selected, starting with a new model.")
            self.brain.create_model()
            self.brain.train_iteration = 0
            self.status = MatchStatus.INIT
            return
        LOGGER.info("Loading model...")
        path = model_path_for_iteration(self.pretrained_model)
        self._start_task("model load", lambda: read_checkpoint(path), self._finish_load, self.load_timeout)

    def _finish_load(self, task: ModelTask) -> None:
        try:
            self.brain.apply_checkpoint(task.result(), fallback_iteration=self.pretrained_model)
        except (ModelLoadError, TimeoutError) as error:
            LOGGER.warning("The model could not be loaded: %s", error)
            self.brain.create_model()
            self.brain.train_iteration = 0
        else:
            LOGGER.info("Loaded a pre-trained model [training iterations = %d]", self.brain.train_iteration)
        self.status = MatchStatus.INIT

    def _tick_train(self, dt: float) -> None:
        LOGGER.info("Training model...")
        self.train_percent = 0.0
        self._start_task("model training", lambda: self.brain.train(on_batch_end=self._on_batch_end), self._finish_train)

    def _on_batch_end(self, batch_index: int, num_batches: int, loss: float) -> None:
        self.train_percent = (batch_index + 1) / num_batches * 100

    def _finish_train(self, task: ModelTask) -> None:
        self.train_percent = None
        try:
            loss = task.result()
        except TrainingError as error:
            LOGGER.error("Training failed: %s", error)
        else:
            LOGGER.info(
                "Training completed. [training iterations = %d, loss = %.5f]",
                self.brain.train_iteration,
                loss,
            )
        self.status = MatchStatus.INIT

    def _tick_save(self, dt: float) -> None:
        LOGGER.info("Saving model...")
        self._start_task("model save", self.brain.save, self._finish_save)

    def _finish_save(self, task: ModelTask) -> None:
        try:
            path = task.result()
        except RuntimeError as error:
            LOGGER.error("Model was not saved: %s", error)
        else:
            LOGGER.info(
                "Saving model completed. [training iterations = %d, path = %s]",
                self.brain.train_iteration,
                path,
            )
        self.status = MatchStatus.CREATE_LEVEL
