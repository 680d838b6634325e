import json
from pathlib import Path

import pytest

from cli.main import main


def test_cli_canonical_preset(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    main(["--preset", "canonical_2_2_1"])
    run_dir = Path("runs/canonical-2-2-1")
    assert (run_dir / "trace.jsonl").exists()
    assert (run_dir / "manifest.json").exists()

    lines = capsys.readouterr().out.strip().splitlines()
    assert "Hidden Layer Output: " in lines
    payload = json.loads(lines[-1])
    assert payload["output"][0] == pytest.approx(0.69028, abs=1e-4)
    assert payload["trace"] == str(run_dir / "trace.jsonl")


def test_cli_config_override_and_dump(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    override = tmp_path / "override.json"
    override.write_text(json.dumps({"sample": {"target": [0.9]}}))
    main(
        [
            "--preset",
            "random_2_3_1",
            "--config",
            str(override),
            "--seed",
            "3",
            "--run-dir",
            "custom",
            "--dump-config",
            "resolved/config.json",
        ]
    )
    resolved = json.loads(Path("resolved/config.json").read_text())
    assert resolved["sample"]["target"] == [0.9]
    assert resolved["run"]["seed"] == 3
    assert resolved["run"]["run_dir"] == "custom"
    assert Path("custom/trace.jsonl").exists()
    capsys.readouterr()


def test_cli_list_presets(capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--list-presets"])
    assert excinfo.value.code == 0
    names = capsys.readouterr().out.split()
    assert {"canonical_2_2_1", "random_2_3_1", "deep_2_3_2_1"} <= set(names)
