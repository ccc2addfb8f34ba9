import logging
from pathlib import Path

import pytest
import torch
from PIL import Image

from modalkit.modality.cv import Classifications
from modalkit.zoo import (
    AlexNet,
    ImageClassificationModelLoader,
    MobileNetV2,
    ModelZoo,
    Repository,
    Resnet,
    Squeezenet,
)

CPU = torch.device("cpu")


@pytest.fixture()
def repo(tmp_path: Path) -> Repository:
    return Repository(tmp_path / "models", cache_dir=tmp_path / "cache")


def _artifact_dir(repo: Repository, loader) -> Path:
    path = repo.resolve(loader.group_id, loader.artifact_id, loader.version)
    path.mkdir(parents=True, exist_ok=True)
    return path


def test_squeezenet_constants(repo: Repository):
    loader = Squeezenet(repo)
    assert loader.artifact_id == "squeezenet"
    assert loader.version == "0.0.1"
    assert loader.group_id == "cv.classification"
    assert isinstance(loader, ImageClassificationModelLoader)


def test_repository_layout(repo: Repository, tmp_path: Path):
    path = repo.resolve("cv.classification", "squeezenet", "0.0.1")
    assert path == tmp_path / "models" / "cv" / "classification" / "squeezenet" / "0.0.1"
    assert not repo.is_remote


def test_repository_file_uri(tmp_path: Path):
    repo = Repository((tmp_path / "models").as_uri(), cache_dir=tmp_path / "cache")
    assert repo.base_dir == tmp_path / "models"


def test_open_file_missing_local(repo: Repository):
    with pytest.raises(FileNotFoundError):
        repo.open_file("cv.classification", "squeezenet", "0.0.1", "squeezenet.pth")


class _FakeStream:
    def __init__(self, status_code: int, body: bytes = b""):
        self.status_code = status_code
        self.body = body
        self.headers = {"content-length": str(len(body))}
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True
        return False

    def raise_for_status(self):
        if self.status_code >= 400:
            import requests
            raise requests.exceptions.HTTPError(f"{self.status_code}")

    def iter_content(self, chunk_size):
        for i in range(0, len(self.body), chunk_size):
            yield self.body[i:i + chunk_size]


def test_remote_repository_downloads_once(monkeypatch, tmp_path: Path):
    requested = []

    def fake_get(url, stream=False, timeout=None):
        requested.append(url)
        return _FakeStream(200, b"squeezenet\nresnet\n")

    monkeypatch.setattr("modalkit.core.io.requests.get", fake_get)
    repo = Repository("https://models.example.com/zoo/", cache_dir=tmp_path / "cache")
    path = repo.open_file("cv.classification", "squeezenet", "0.0.1", "synset.txt")

    assert requested == ["https://models.example.com/zoo/cv/classification/squeezenet/0.0.1/synset.txt"]
    assert path.read_text() == "squeezenet\nresnet\n"
    assert path.is_relative_to(tmp_path / "cache")

    repo.open_file("cv.classification", "squeezenet", "0.0.1", "synset.txt")
    assert len(requested) == 1


def test_remote_repository_missing_file(monkeypatch, tmp_path: Path):
    responses = []

    def fake_get(url, stream=False, timeout=None):
        responses.append(_FakeStream(404))
        return responses[-1]

    monkeypatch.setattr("modalkit.core.io.requests.get", fake_get)
    repo = Repository("https://models.example.com/zoo", cache_dir=tmp_path / "cache")
    with pytest.raises(FileNotFoundError):
        repo.open_file("cv.classification", "squeezenet", "0.0.1", "squeezenet.pth")
    assert not (tmp_path / "cache" / "cv" / "classification" / "squeezenet" / "0.0.1" / "squeezenet.pth").exists()
    # The connection is released even when the download is refused
    assert len(responses) == 1 and responses[0].closed


def test_load_model_without_weights_warns(repo: Repository, caplog):
    with caplog.at_level(logging.WARNING):
        model = Squeezenet(repo).load_model(num_classes=4, device=CPU)
    assert "Weight file not found" in caplog.text
    assert any(r.name == "modalkit.zoo.loader" for r in caplog.records)
    assert not model.training
    assert next(model.parameters()).device == CPU


def test_load_model_restores_weights(repo: Repository):
    loader = Squeezenet(repo)
    reference = loader.build_model(3)
    torch.save(reference.state_dict(), _artifact_dir(repo, loader) / loader.weight_file)

    model = loader.load_model(num_classes=3, device=CPU)
    for (name, expected), actual in zip(reference.state_dict().items(), model.state_dict().values()):
        assert torch.equal(expected, actual), name


def test_load_model_accepts_run_checkpoint(repo: Repository):
    loader = Squeezenet(repo)
    reference = loader.build_model(2)
    torch.save(
        {"model_state_dict": reference.state_dict(), "config": {"run_name": "baseline"}},
        _artifact_dir(repo, loader) / loader.weight_file,
    )
    model = loader.load_model(num_classes=2, device=CPU)
    first = next(iter(reference.state_dict()))
    assert torch.equal(model.state_dict()[first], reference.state_dict()[first])


def test_load_model_mismatched_weights_raise(repo: Repository):
    loader = Squeezenet(repo)
    torch.save(loader.build_model(5).state_dict(), _artifact_dir(repo, loader) / loader.weight_file)
    with pytest.raises(RuntimeError):
        loader.load_model(num_classes=3, device=CPU)


def test_predict_uses_synset(repo: Repository):
    loader = Squeezenet(repo)
    (_artifact_dir(repo, loader) / loader.SYNSET_FILE).write_text("cat\ndog\nbird\n")
    torch.manual_seed(0)
    model = loader.load_model(num_classes=3, device=CPU)

    result = loader.predict(model, Image.new("RGB", (32, 32), (120, 60, 30)))
    assert isinstance(result, Classifications)
    assert sorted(result.class_names) == ["bird", "cat", "dog"]
    assert sum(result.probabilities) == pytest.approx(1.0, abs=1e-5)


def test_predict_keeps_top_k(repo: Repository):
    loader = Squeezenet(repo)
    (_artifact_dir(repo, loader) / loader.SYNSET_FILE).write_text("cat\ndog\nbird\nfish\n")
    torch.manual_seed(0)
    model = loader.load_model(num_classes=4, device=CPU)

    result = loader.predict(model, Image.new("RGB", (32, 32)), top_k=2)
    assert len(result.class_names) == 2
    assert set(result.class_names) <= {"cat", "dog", "bird", "fish"}
    assert result.probabilities == sorted(result.probabilities, reverse=True)
    assert result.best()[0] == result.class_names[0]
    with pytest.raises(ValueError):
        loader.predict(model, Image.new("RGB", (32, 32)), top_k=0)


def test_predict_reads_synset_once(repo: Repository, monkeypatch):
    loader = Squeezenet(repo)
    model = loader.load_model(num_classes=3, device=CPU)
    calls = []
    original = repo.open_file

    def counting_open_file(*args):
        calls.append(args[-1])
        return original(*args)

    monkeypatch.setattr(repo, "open_file", counting_open_file)
    first = loader.predict(model, Image.new("RGB", (32, 32)))
    loader.predict(model, Image.new("RGB", (32, 32)))

    assert calls == [loader.SYNSET_FILE]
    assert sorted(first.class_names) == ["0", "1", "2"]


def test_synset_fallback_and_mismatch(repo: Repository):
    loader = Squeezenet(repo)
    assert loader.load_synset(3) == ["0", "1", "2"]
    (_artifact_dir(repo, loader) / loader.SYNSET_FILE).write_text("only\n")
    with pytest.raises(ValueError):
        loader.load_synset(3)


def test_classifications_ranking():
    result = Classifications(["a", "b", "c"], torch.tensor([0.2, 0.5, 0.3]))
    assert result.best() == ("b", pytest.approx(0.5))
    assert [name for name, _ in result.top_k(2)] == ["b", "c"]
    assert '"class_name": "b"' in result.to_json()
    with pytest.raises(ValueError):
        Classifications(["a"], [0.5, 0.5])


@pytest.mark.parametrize("loader_cls", [Resnet, MobileNetV2, AlexNet])
def test_other_loaders_build_requested_head(repo: Repository, loader_cls):
    model = loader_cls(repo).build_model(7)
    model.eval()
    with torch.no_grad():
        out = model(torch.zeros(1, 3, 224, 224))
    assert tuple(out.shape) == (1, 7)


def test_model_zoo_lookup(repo: Repository):
    zoo = ModelZoo(repo)
    assert zoo.list_models() == ["alexnet", "mobilenet_v2", "resnet", "squeezenet"]
    loader = zoo.get_model_loader("squeezenet")
    assert isinstance(loader, Squeezenet)
    assert loader.repository is repo
    with pytest.raises(ValueError):
        zoo.get_model_loader("vgg99")


def test_model_zoo_loader_with_other_repository(repo: Repository, tmp_path: Path):
    other = Repository(tmp_path / "mirror")
    zoo = ModelZoo(repo)
    loader = zoo.get_model_loader("resnet", repository=other)
    assert isinstance(loader, Resnet)
    assert loader.repository is other
    assert zoo.get_model_loader("resnet").repository is repo
