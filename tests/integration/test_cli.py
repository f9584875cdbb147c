import json
import sys

import pytest

from cli.main import main


def _train(tmp_path, capsys, *extra):
    model = tmp_path / "model.json"
    main(["train", "--example", "and", "--epochs", "50", "--seed", "1", "--output", str(model), *extra])
    payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    return model, payload


def test_cli_list(capsys):
    main(["list"])
    out = capsys.readouterr().out
    for name in ("and", "or", "xor"):
        assert f"  {name} - " in out


def test_cli_train_writes_checkpoint(tmp_path, capsys):
    model, payload = _train(tmp_path, capsys)
    assert model.exists()
    assert payload["example"] == "and"
    assert payload["epochs"] == 50
    assert payload["architecture"] == [2, 2, 1]
    assert payload["checkpoint"] == str(model)
    doc = json.loads(model.read_text())
    assert doc["metadata"]["epoch"] == 50
    assert doc["metadata"]["example"] == "and"


def test_cli_train_metrics_and_plot(tmp_path, capsys):
    metrics = tmp_path / "metrics.jsonl"
    plots = tmp_path / "plots"
    _, payload = _train(tmp_path, capsys, "--metrics", str(metrics), "--plot-dir", str(plots))
    assert len(metrics.read_text().splitlines()) == 50
    assert (plots / "loss.png").exists()
    assert payload["plot"] == str(plots / "loss.png")


def test_cli_train_config_override(tmp_path, capsys):
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"epochs": 5}))
    _, payload = _train(tmp_path, capsys, "--config", str(config))
    assert payload["epochs"] == 5


def test_cli_train_yaml_config_override(tmp_path, capsys):
    config = tmp_path / "config.yaml"
    config.write_text("# shorter run\nepochs: 7\nverbose: false\n")
    model, payload = _train(tmp_path, capsys, "--config", str(config))
    assert payload["epochs"] == 7
    assert json.loads(model.read_text())["metadata"]["epoch"] == 7


@pytest.mark.parametrize(
    "name, text",
    [
        ("config.json", "[5]"),
        ("config.yaml", "- epochs\n- 5\n"),
    ],
)
def test_cli_train_rejects_non_mapping_override(tmp_path, capsys, name, text):
    config = tmp_path / name
    config.write_text(text)
    with pytest.raises(SystemExit) as excinfo:
        main(["train", "--example", "and", "--config", str(config)])
    assert excinfo.value.code == 1
    assert "must be a mapping" in capsys.readouterr().err


def test_cli_train_yaml_without_pyyaml(tmp_path, capsys, monkeypatch):
    config = tmp_path / "config.yml"
    config.write_text("epochs: 3\n")
    monkeypatch.setitem(sys.modules, "yaml", None)
    with pytest.raises(SystemExit) as excinfo:
        main(["train", "--example", "and", "--config", str(config)])
    assert excinfo.value.code == 1
    assert "PyYAML is required" in capsys.readouterr().err


def test_cli_train_unknown_example(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["train", "--example", "nand", "--epochs", "1"])
    assert excinfo.value.code == 1
    assert "Unknown example" in capsys.readouterr().err


def test_cli_info(tmp_path, capsys):
    model, _ = _train(tmp_path, capsys)
    main(["info", "--model", str(model)])
    info = json.loads(capsys.readouterr().out)
    assert info["metadata"]["example"] == "and"
    assert info["metadata"]["version"] == "1.0"
    assert info["architecture"] == [2, 2, 1]
    assert info["weights"] == [[2, 2], [1, 2]]
    assert info["parameters"] == 9


def test_cli_eval_single_input(tmp_path, capsys):
    model, _ = _train(tmp_path, capsys)
    main(["eval", "--model", str(model), "--input", "1.0,1.0"])
    out = capsys.readouterr().out
    assert "Output: [" in out
    assert out.count("Input:") == 1


def test_cli_eval_all_example_inputs(tmp_path, capsys):
    model, _ = _train(tmp_path, capsys)
    main(["eval", "--model", str(model)])
    assert capsys.readouterr().out.count("Input:") == 4


@pytest.mark.parametrize("raw", ["1.0", "a,b", "1,2,3"])
def test_cli_eval_rejects_bad_input(tmp_path, capsys, raw):
    model, _ = _train(tmp_path, capsys)
    with pytest.raises(SystemExit) as excinfo:
        main(["eval", "--model", str(model), "--input", raw])
    assert excinfo.value.code == 1


def test_cli_resume(tmp_path, capsys):
    model, _ = _train(tmp_path, capsys)
    resumed = tmp_path / "resumed.json"
    main(["resume", "--checkpoint", str(model), "--epochs", "50", "--output", str(resumed)])
    payload = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert payload["epoch"] == 100
    doc = json.loads(resumed.read_text())
    assert doc["metadata"]["epoch"] == 100
    assert doc["metadata"]["example"] == "and"


def test_cli_missing_model(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["info", "--model", str(tmp_path / "missing.json")])
    assert excinfo.value.code == 1
    assert "error:" in capsys.readouterr().err


def test_cli_corrupted_model(tmp_path, capsys):
    bad = tmp_path / "bad.json"
    bad.write_text("{ not json")
    with pytest.raises(SystemExit) as excinfo:
        main(["eval", "--model", str(bad), "--input", "0,0"])
    assert excinfo.value.code == 1
