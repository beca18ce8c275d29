import random

import pytest
import torch

import gorillas_ai.config as config
from gorillas_ai.core.entities import Action
from gorillas_ai.core.viewing import ViewingSample
from gorillas_ai.errors import ModelLoadError, TrainingError
from gorillas_ai.train.dataset import Dataset
from gorillas_ai.train.model import AimBrain, AimRegressor, read_checkpoint


def _dataset(count=12):
    rng = random.Random(5)
    dataset = Dataset()
    for _ in range(count):
        sample = ViewingSample(
            dist=rng.uniform(300, 1200),
            theta1=rng.randint(-30, 30),
            x1=0,
            y1=0,
            theta2=rng.randint(-30, 30),
            x2=0,
            y2=0,
        )
        dataset.add(sample, rng.randint(55, 82), rng.randrange(500, 2201, 40))
    return dataset


def test_regressor_accepts_single_feature_rows():
    model = AimRegressor()

    assert model(torch.zeros(3)).shape == (1, 2)
    assert model(torch.zeros((5, 3))).shape == (5, 2)
    assert model.hidden.bias is None
    assert torch.count_nonzero(model.hidden.weight) == 0


def test_predict_returns_an_action():
    action = AimBrain().predict(10, -5, 800)

    assert isinstance(action, Action)
    assert isinstance(action.angle, float)
    assert isinstance(action.power, float)


def test_train_reports_batches_and_counts_iterations():
    brain = AimBrain()
    brain.prepare_data(_dataset(12), random.Random(0))
    batches = []

    loss = brain.train(batch_size=5, on_batch_end=lambda index, total, value: batches.append((index, total)))

    assert brain.num_records == 12
    assert brain.train_iteration == 1
    assert loss >= 0
    assert brain.losses == [loss]
    assert batches == [(0, 3), (1, 3), (2, 3)]


def test_train_on_empty_dataset_fails():
    brain = AimBrain()
    brain.prepare_data(Dataset())

    with pytest.raises(TrainingError):
        brain.train()
    assert brain.train_iteration == 0


def test_failed_fit_keeps_iteration_count():
    brain = AimBrain()
    brain.prepare_data(_dataset(12), random.Random(0))

    def fail_on_second_batch(index, total, value):
        if index == 1:
            raise RuntimeError("device lost")

    with pytest.raises(TrainingError):
        brain.train(batch_size=5, on_batch_end=fail_on_second_batch)

    assert brain.train_iteration == 0
    assert brain.losses == []
    brain.train()
    assert brain.train_iteration == 1


def test_train_rejects_zero_epochs():
    brain = AimBrain()
    brain.prepare_data(_dataset(4))

    with pytest.raises(TrainingError):
        brain.train(epochs=0)


def test_train_rejects_mismatched_tensors():
    with pytest.raises(TrainingError):
        AimBrain().train(torch.zeros((4, 3)), torch.zeros((3, 2)))


def test_save_and_load_round_trip(tmp_path):
    brain = AimBrain()
    brain.prepare_data(_dataset(), random.Random(1))
    brain.train()
    expected = brain.predict(5, 5, 640)

    path = brain.save(tmp_path / "trained_model_1.pth")
    restored = AimBrain()
    restored.load(path)
    actual = restored.predict(5, 5, 640)

    assert restored.train_iteration == 1
    assert actual.angle == pytest.approx(expected.angle, rel=1e-5)
    assert actual.power == pytest.approx(expected.power, rel=1e-5)


def test_default_save_path_uses_iteration(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "MODEL_DIR", tmp_path)
    brain = AimBrain()
    brain.train_iteration = 7

    assert brain.save() == tmp_path / "trained_model_7.pth"


def test_missing_model_raises(tmp_path):
    with pytest.raises(ModelLoadError):
        read_checkpoint(tmp_path / "trained_model_3.pth")


def test_corrupt_model_raises(tmp_path):
    path = tmp_path / "trained_model_3.pth"
    path.write_bytes(b"not a model")

    with pytest.raises(ModelLoadError):
        read_checkpoint(path)


def test_load_or_create_falls_back_to_a_fresh_model(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "MODEL_DIR", tmp_path)
    brain = AimBrain()
    brain.train_iteration = 4

    assert not brain.load_or_create(9)
    assert brain.train_iteration == 0


def test_load_or_create_finds_saved_model(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "MODEL_DIR", tmp_path)
    saved = AimBrain()
    saved.train_iteration = 2
    saved.save()

    brain = AimBrain()
    assert brain.load_or_create(2)
    assert brain.train_iteration == 2
