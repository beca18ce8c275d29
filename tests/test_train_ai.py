import random

import gorillas_ai.config as config
from gorillas_ai.core.viewing import ViewingSample
from gorillas_ai.train.dataset import Dataset
from gorillas_ai.train_ai import train


def _write_dataset(path, count=20):
    rng = random.Random(4)
    dataset = Dataset()
    for _ in range(count):
        sample = ViewingSample(
            dist=rng.uniform(300, 1200), theta1=rng.randint(-20, 20), x1=0, y1=0,
            theta2=rng.randint(-20, 20), x2=0, y2=0,
        )
        dataset.add(sample, rng.randint(55, 82), rng.randrange(500, 2201, 40))
    dataset.save(path)


def test_train_fits_existing_dataset_and_saves(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "MODEL_DIR", tmp_path / "model")
    dataset_path = tmp_path / "dataset.bin"
    _write_dataset(dataset_path)

    saved = train(records=0, iterations=3, dataset_path=dataset_path, pretrained_model=0, seed=1)

    assert saved == tmp_path / "model" / "trained_model_3.pth"
    assert saved.exists()


def test_train_without_data_saves_nothing(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "MODEL_DIR", tmp_path / "model")

    saved = train(records=0, iterations=2, dataset_path=tmp_path / "absent.bin", pretrained_model=0)

    assert saved is None
    assert not (tmp_path / "model").exists()
