import json
from pathlib import Path

import pytest

from neuralnet.core.errors import (
    CheckpointIOError,
    CheckpointParseError,
    UnsupportedCheckpointVersion,
)
from neuralnet.core.network import Network
from neuralnet.training.checkpoint import (
    CHECKPOINT_VERSION,
    CheckpointMetadata,
    decode_checkpoint,
    encode_checkpoint,
    from_checkpoint,
    load_checkpoint,
    save_checkpoint,
    to_checkpoint,
)

FIXED_TIMESTAMP = "2025-10-13T12:00:00+00:00"


def _metadata(**overrides) -> CheckpointMetadata:
    fields = {
        "version": CHECKPOINT_VERSION,
        "example": "xor",
        "epoch": 100,
        "total_epochs": 1000,
        "learning_rate": 0.5,
        "timestamp": FIXED_TIMESTAMP,
    }
    fields.update(overrides)
    return CheckpointMetadata(**fields)


def _trained_network() -> Network:
    net = Network.new([2, 3, 1], seed=11)
    net.train([[0.0, 0.0], [0.0, 1.0], [1.0, 0.0], [1.0, 1.0]], [[0.0], [1.0], [1.0], [0.0]], 50)
    return net


def test_to_checkpoint_copies_network():
    net = _trained_network()
    checkpoint = to_checkpoint(net, _metadata())
    assert checkpoint.network == net
    assert checkpoint.network is not net
    net.train([[1.0, 1.0]], [[1.0]], 5)
    assert checkpoint.network != net


def test_from_checkpoint_returns_embedded_network():
    net = _trained_network()
    restored = from_checkpoint(to_checkpoint(net, _metadata()))
    assert restored == net


@pytest.mark.parametrize("version", ["999.0", "0.9", "1", ""])
def test_from_checkpoint_rejects_other_versions(version):
    checkpoint = to_checkpoint(_trained_network(), _metadata(version=version))
    with pytest.raises(UnsupportedCheckpointVersion) as excinfo:
        from_checkpoint(checkpoint)
    assert "Unsupported" in str(excinfo.value)


def test_save_then_load_preserves_predictions(tmp_path):
    net = _trained_network()
    path = tmp_path / "nested" / "dir" / "model.json"
    save_checkpoint(net, path, _metadata())
    assert path.exists()

    loaded, metadata = load_checkpoint(path)
    assert metadata == _metadata()
    assert loaded == net
    for x in ([0.0, 0.0], [0.5, 0.5], [1.0, 1.0], [0.123, -4.5]):
        assert loaded.feed_forward(x).data == net.feed_forward(x).data


def test_checkpoint_file_layout(tmp_path):
    path = tmp_path / "model.json"
    save_checkpoint(_trained_network(), path, _metadata())
    doc = json.loads(path.read_text())
    assert set(doc) == {"metadata", "network"}
    assert doc["metadata"]["version"] == "1.0"
    assert doc["metadata"]["epoch"] == 100
    assert doc["metadata"]["example"] == "xor"
    assert set(doc["network"]) == {"layers", "weights", "biases", "activation", "learning_rate"}
    assert doc["network"]["activation"] == "sigmoid"
    assert set(doc["network"]["weights"][0]) == {"rows", "cols", "data"}


def test_identical_input_produces_identical_bytes(tmp_path):
    net = _trained_network()
    first = tmp_path / "a.json"
    second = tmp_path / "b.json"
    save_checkpoint(net, first, _metadata())
    save_checkpoint(net.clone(), second, _metadata())
    assert first.read_bytes() == second.read_bytes()


def test_encode_decode_round_trip_is_exact():
    checkpoint = to_checkpoint(_trained_network(), _metadata())
    decoded = decode_checkpoint(encode_checkpoint(checkpoint))
    assert decoded == checkpoint


def test_load_missing_file_is_io_error(tmp_path):
    with pytest.raises(CheckpointIOError):
        load_checkpoint(tmp_path / "missing.json")


def test_save_into_unwritable_parent_is_io_error(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    with pytest.raises(CheckpointIOError):
        save_checkpoint(_trained_network(), blocker / "model.json", _metadata())


@pytest.mark.parametrize(
    "content",
    [
        "this is not json",
        "",
        "[1, 2, 3]",
        '{"metadata": {}}',
        '{"network": {}}',
    ],
)
def test_malformed_content_is_parse_error(tmp_path, content):
    path = tmp_path / "corrupt.json"
    path.write_text(content)
    with pytest.raises(CheckpointParseError):
        load_checkpoint(path)


def test_unknown_top_level_field_is_parse_error(tmp_path):
    path = tmp_path / "model.json"
    save_checkpoint(_trained_network(), path, _metadata())
    doc = json.loads(path.read_text())
    doc["extra"] = True
    path.write_text(json.dumps(doc))
    with pytest.raises(CheckpointParseError):
        load_checkpoint(path)


def test_malformed_network_is_parse_error(tmp_path):
    path = tmp_path / "model.json"
    save_checkpoint(_trained_network(), path, _metadata())
    doc = json.loads(path.read_text())
    doc["network"]["weights"][0]["data"].pop()
    path.write_text(json.dumps(doc))
    with pytest.raises(CheckpointParseError):
        load_checkpoint(path)


def test_unsupported_version_on_disk(tmp_path):
    path = tmp_path / "model.json"
    save_checkpoint(_trained_network(), path, _metadata(version="2.0"))
    with pytest.raises(UnsupportedCheckpointVersion):
        load_checkpoint(path)


def test_version_checked_regardless_of_network_validity(tmp_path):
    path: Path = tmp_path / "model.json"
    doc = {"metadata": _metadata(version="0.1").to_dict(), "network": {"layers": "bogus"}}
    path.write_text(json.dumps(doc))
    with pytest.raises(UnsupportedCheckpointVersion):
        load_checkpoint(path)


def test_metadata_create_stamps_version_and_timestamp():
    metadata = CheckpointMetadata.create("and", epoch=5, total_epochs=10, learning_rate=0.5)
    assert metadata.version == "1.0"
    assert metadata.timestamp
    assert metadata.epoch == 5 and metadata.total_epochs == 10
