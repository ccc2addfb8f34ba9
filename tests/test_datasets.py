import json
from pathlib import Path

import numpy as np
import pytest
import torch
from PIL import Image

from modalkit.config import DataConfig
from modalkit.datasets import (
    ArrayDataset,
    Batch,
    Dataset,
    ImageFolderDataset,
    Usage,
    load_stats,
    make_transforms,
)


@pytest.fixture()
def tmp_imagefolder(tmp_path: Path):
    # Create ImageFolder structure with tiny RGB squares
    root = tmp_path / "dataset"
    for split in ("train", "val", "test"):
        for cls in ("class_a", "class_b"):
            (root / split / cls).mkdir(parents=True)

    def write_square(p: Path, color):
        arr = np.full((10, 10, 3), color, dtype=np.uint8)
        Image.fromarray(arr).convert("RGB").save(p)

    for i in range(5):
        write_square(root / "train" / "class_a" / f"a_{i}.jpg", (255, 0, 0))
        write_square(root / "train" / "class_b" / f"b_{i}.jpg", (0, 255, 0))
    for i in range(2):
        write_square(root / "val" / "class_a" / f"a_{i}.jpg", (0, 0, 255))
        write_square(root / "val" / "class_b" / f"b_{i}.jpg", (255, 255, 0))
    for i in range(2):
        write_square(root / "test" / "class_a" / f"a_{i}.jpg", (0, 255, 255))
        write_square(root / "test" / "class_b" / f"b_{i}.jpg", (255, 0, 255))

    return root


def _config(**overrides) -> DataConfig:
    params = {"batch_size": 4, "num_workers": 0}
    params.update(overrides)
    return DataConfig(**params)


def test_usage_split_directories():
    assert [u.dir_name for u in Usage] == ["train", "test", "val"]


def test_dataset_is_abstract():
    with pytest.raises(TypeError):
        Dataset()


def test_data_config_rejects_bad_batch_size():
    with pytest.raises(ValueError):
        DataConfig(batch_size=0)


def test_array_dataset_batches_and_reiterates():
    ds = ArrayDataset(torch.arange(10).float().unsqueeze(1), torch.arange(10), _config())
    data = ds.get_data()

    sizes = [batch.size for batch in data]
    assert sizes == [4, 4, 2]
    # A second pass starts over
    assert [batch.size for batch in data] == [4, 4, 2]
    assert len(data) == 3

    first = next(iter(data))
    assert isinstance(first, Batch)
    assert torch.equal(first.labels, torch.arange(4))


def test_array_dataset_drop_last():
    ds = ArrayDataset(torch.zeros(10, 2), torch.zeros(10), _config(drop_last=True))
    assert [batch.size for batch in ds.get_data()] == [4, 4]


def test_array_dataset_seeded_shuffle_is_reproducible():
    x, y = torch.arange(20).float().unsqueeze(1), torch.arange(20)
    order_a = torch.cat([b.labels for b in ArrayDataset(x, y, _config(shuffle=True, seed=3)).get_data()])
    order_b = torch.cat([b.labels for b in ArrayDataset(x, y, _config(shuffle=True, seed=3)).get_data()])
    assert torch.equal(order_a, order_b)
    assert sorted(order_a.tolist()) == list(range(20))


def test_array_dataset_length_mismatch():
    with pytest.raises(ValueError):
        ArrayDataset(torch.zeros(3, 2), torch.zeros(4))


def test_image_folder_dataset_reads_split(tmp_imagefolder: Path):
    ds = ImageFolderDataset(tmp_imagefolder, Usage.TRAIN, _config())
    assert len(ds) == 10
    assert ds.classes == ["class_a", "class_b"]

    batch = next(iter(ds.get_data()))
    assert isinstance(batch.data, torch.Tensor)
    assert batch.data.ndim == 4 and batch.data.shape[1] == 3
    assert batch.size <= 4


def test_image_folder_dataset_validation_uses_val_dir(tmp_imagefolder: Path):
    ds = ImageFolderDataset(tmp_imagefolder, Usage.VALIDATION, _config())
    assert len(ds) == 4
    assert sum(batch.size for batch in ds.get_data()) == 4


def test_image_folder_dataset_missing_split(tmp_path: Path):
    ds = ImageFolderDataset(tmp_path / "nowhere", Usage.TEST, _config())
    with pytest.raises(OSError):
        ds.get_data()


def test_image_folder_dataset_custom_transform(tmp_imagefolder: Path):
    tfm = make_transforms([0.0, 0.0, 0.0], [1.0, 1.0, 1.0], size=(6, 6), aug_flip=True)
    ds = ImageFolderDataset(tmp_imagefolder, Usage.TEST, _config(batch_size=2), transform=tfm)
    batch = next(iter(ds.get_data()))
    assert tuple(batch.data.shape) == (2, 3, 6, 6)
    assert batch.data.min() >= 0.0 and batch.data.max() <= 1.0


def test_make_transforms_with_aug():
    tfm = make_transforms([0.5, 0.4, 0.3], [0.2, 0.2, 0.2], aug_flip=True, aug_jitter=True, aug_rotation=True)
    out = tfm(Image.new("RGB", (8, 8), (128, 128, 128)))
    assert tuple(out.shape) == (3, 8, 8)


def test_load_stats(tmp_path: Path):
    stats_path = tmp_path / "stats.json"
    payload = {"mean": [0.1, 0.2, 0.3], "std": [0.9, 0.8, 0.7]}
    stats_path.write_text(json.dumps(payload))
    mean, std = load_stats(stats_path)
    assert mean == pytest.approx(payload["mean"])
    assert std == pytest.approx(payload["std"])


def test_load_stats_rescales_pixel_stats(tmp_path: Path):
    stats_path = tmp_path / "stats.json"
    stats_path.write_text(json.dumps({"mean": [255.0, 0.0, 51.0], "std": [25.5, 25.5, 25.5], "max_pixel_value": 255}))
    mean, std = load_stats(stats_path)
    assert mean == pytest.approx([1.0, 0.0, 0.2])
    assert std == pytest.approx([0.1, 0.1, 0.1])


def test_load_stats_rejects_wrong_channel_count(tmp_path: Path):
    stats_path = tmp_path / "stats.json"
    stats_path.write_text(json.dumps({"mean": [0.5], "std": [0.5]}))
    with pytest.raises(ValueError):
        load_stats(stats_path)


def test_image_folder_dataset_normalizes_with_stats_file(tmp_imagefolder: Path, tmp_path: Path):
    stats_path = tmp_path / "stats.json"
    stats_path.write_text(json.dumps({"mean": [0, 0, 0], "std": [255, 255, 255], "max_pixel_value": 255}))
    ds = ImageFolderDataset(tmp_imagefolder, Usage.TEST, _config(batch_size=4), stats_path=stats_path)
    batch = next(iter(ds.get_data()))
    # mean 0 / std 1 leaves ToTensor's [0, 1] range untouched
    assert batch.data.min() >= 0.0 and batch.data.max() <= 1.0
    assert batch.data.max() > 0.5
