"""Preset-driven single-sample demo runs."""

from __future__ import annotations

import json
import sys
import time
from copy import deepcopy
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Mapping, Sequence, TextIO

import numpy as np

from .core.layers import HiddenLayer, Layer
from .core.types import Array, LayerSnapshot
from .network import Network
from .reporting.artifacts import write_manifest
from .reporting.dump import dump
from .reporting.metrics import JsonlSink
from .reporting.plots import WeightPlotAdapter

_PRESETS: Dict[str, Mapping[str, object]] = {
    "canonical_2_2_1": {
        "model": {
            "dims": [2, 2, 1],
            "weights": [
                [[0.1, 0.8], [0.4, 0.6]],
                [[0.3, 0.9]],
            ],
        },
        "sample": {"inputs": [0.35, 0.9], "target": [0.5]},
        "run": {
            "seed": 0,
            "run_dir": "runs/canonical-2-2-1",
            "enable_plots": False,
        },
    },
    "random_2_3_1": {
        "model": {"dims": [2, 3, 1]},
        "sample": {"inputs": [1.0, 0.0], "target": [1.0]},
        "run": {
            "seed": 7,
            "run_dir": "runs/random-2-3-1",
            "enable_plots": False,
        },
    },
}

_REQUIRED_SECTIONS = {"model", "sample", "run"}
_PRESET_DIR = Path(__file__).resolve().parents[1] / "configs" / "presets"
_FILE_PRESETS_CACHE: Dict[str, Mapping[str, object]] | None = None


@dataclass(frozen=True)
class DemoResult:
    """Summary returned by :func:`run_demo`."""

    output: Array
    snapshots: List[LayerSnapshot]
    trace_path: str
    manifest_path: str
    config_path: str
    plot_path: str = ""


def read_config_file(path: Path) -> Mapping[str, object]:
    text = path.read_text()
    suffix = path.suffix.lower()
    if suffix in {".yaml", ".yml"}:
        try:
            import yaml  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("PyYAML is required to load config files in YAML format") from exc
        data = yaml.safe_load(text) or {}
    elif suffix == ".json":
        data = json.loads(text or "{}")
    else:
        raise ValueError(f"Unsupported config file type: {path.suffix}")

    if not isinstance(data, Mapping):
        raise TypeError(f"Config {path.name} must decode to a mapping")
    return data


def _file_presets() -> Dict[str, Mapping[str, object]]:
    global _FILE_PRESETS_CACHE
    if _FILE_PRESETS_CACHE is None:
        found: Dict[str, Mapping[str, object]] = {}
        if _PRESET_DIR.exists():
            for file in sorted(_PRESET_DIR.iterdir()):
                if file.suffix.lower() not in {".yaml", ".yml", ".json"}:
                    continue
                data = read_config_file(file)
                missing = _REQUIRED_SECTIONS - set(data)
                if missing:
                    missing_str = ", ".join(sorted(missing))
                    raise KeyError(f"Preset {file.name} is missing required sections: {missing_str}")
                found[file.stem] = json.loads(json.dumps(data))
        _FILE_PRESETS_CACHE = found
    cache = _FILE_PRESETS_CACHE or {}
    return {name: deepcopy(cfg) for name, cfg in cache.items()}


def presets() -> Mapping[str, Mapping[str, object]]:
    combined: Dict[str, Mapping[str, object]] = {}
    combined.update({name: deepcopy(cfg) for name, cfg in _PRESETS.items()})
    combined.update(_file_presets())
    return combined


def load_preset(name: str) -> Mapping[str, object]:
    file_overrides = _file_presets()
    if name in file_overrides:
        return file_overrides[name]
    try:
        return deepcopy(_PRESETS[name])
    except KeyError as exc:
        raise KeyError(f"Unknown preset: {name}") from exc


def merge_config(base: dict, override: Mapping[str, object]) -> dict:
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(base.get(key), dict):
            base[key] = merge_config(dict(base[key]), value)
        else:
            base[key] = value
    return base


def build_network(model_cfg: Mapping[str, object], seed: int) -> Network:
    dims = [int(d) for d in model_cfg["dims"]]  # type: ignore[union-attr]
    network = Network.from_dims(dims, rng=np.random.default_rng(seed))
    weights = model_cfg.get("weights")
    if weights is not None:
        network.set_weights(weights)  # type: ignore[arg-type]
    return network


def run_demo(config: Mapping[str, object], out: TextIO | None = None) -> DemoResult:
    """Run one forward/backward pass and report every intermediate value.

    Layers are driven one at a time so the dump can show each stage: the input,
    then weights and output of every layer on the way forward, then error and
    updated weights of every layer on the way back, output layer first.
    """

    out = out or sys.stdout
    missing = _REQUIRED_SECTIONS - set(config)
    if missing:
        raise KeyError(f"Config is missing required sections: {', '.join(sorted(missing))}")
    model_cfg = dict(config["model"])  # type: ignore[arg-type]
    sample_cfg = dict(config["sample"])  # type: ignore[arg-type]
    run_cfg = dict(config["run"])  # type: ignore[arg-type]

    seed = int(run_cfg.get("seed", 0))
    network = build_network(model_cfg, seed)
    names = _layer_names(network.layers)

    run_dir = _resolve_run_dir(run_cfg)
    run_dir.mkdir(parents=True, exist_ok=True)
    trace = JsonlSink(run_dir / "trace.jsonl", seed=seed)
    plotter = WeightPlotAdapter(run_dir, enable_plots=bool(run_cfg.get("enable_plots", False)))

    _print_startup_summary(
        dims=network.describe().layer_dims,
        seed=seed,
        explicit_weights="weights" in model_cfg,
        run_dir=run_dir,
        out=out,
    )

    network.source.set_output(sample_cfg["inputs"])  # type: ignore[arg-type]
    inputs = network.source.get_output()
    dump(inputs, out, title="Input Layer: ")
    trace.on_phase(0, "input", None, {"output": inputs})

    for idx, layer in enumerate(network.layers):
        layer.feedforward()
        dump(layer.weight, out, title=f"{names[idx]} Weights: ")
        dump(layer.get_output(), out, title=f"{names[idx]} Output: ")
        plotter.on_weights("initial", idx, layer.weight)
        trace.on_phase(0, "feedforward", idx, {"weight": layer.weight, "output": layer.get_output()})
    prediction = network.output.get_output()

    target = sample_cfg["target"]
    last = len(network.layers) - 1
    network.output.backpropagate(target)  # type: ignore[arg-type]
    _report_backward(network.output, last, names[last], out, trace, plotter)
    for idx in reversed(range(last)):
        layer = network.layers[idx]
        layer.backpropagate()  # type: ignore[call-arg]
        _report_backward(layer, idx, names[idx], out, trace, plotter)

    resolved = json.loads(json.dumps(config))
    resolved["run"]["seed"] = seed
    resolved["run"]["run_dir"] = str(run_dir)
    config_path = run_dir / "config.json"
    config_path.write_text(json.dumps(resolved, indent=2))
    manifest = write_manifest(
        run_dir / "manifest.json",
        config=resolved,
        model={
            "dims": network.describe().layer_dims,
            "kinds": [layer.kind for layer in network.layers],
            "parameters": _parameter_count(network),
        },
    )
    plot_path = plotter.close()

    return DemoResult(
        output=prediction,
        snapshots=network.snapshot(),
        trace_path=str(trace.path),
        manifest_path=manifest,
        config_path=str(config_path),
        plot_path=str(plot_path) if plot_path else "",
    )


def _report_backward(
    layer: Layer,
    idx: int,
    name: str,
    out: TextIO,
    trace: JsonlSink,
    plotter: WeightPlotAdapter,
) -> None:
    dump(layer.error, out, title=f"{name} Error: ")
    if isinstance(layer, HiddenLayer):
        title = f"{name} Updated Weights: "
    else:
        title = "Output Weights After Update: "
    dump(layer.weight, out, title=title)
    plotter.on_weights("updated", idx, layer.weight)
    trace.on_phase(0, "backpropagate", idx, {"error": layer.error, "weight": layer.weight})


def _layer_names(layers: Sequence[Layer]) -> List[str]:
    hidden_count = sum(1 for layer in layers if isinstance(layer, HiddenLayer))
    names: List[str] = []
    for idx, layer in enumerate(layers):
        if not isinstance(layer, HiddenLayer):
            names.append("Output Layer")
        elif hidden_count == 1:
            names.append("Hidden Layer")
        else:
            names.append(f"Hidden Layer {idx + 1}")
    return names


def _parameter_count(network: Network) -> int:
    dims = network.describe().layer_dims
    return sum(dims[i] * dims[i + 1] for i in range(len(dims) - 1))


def _resolve_run_dir(run_cfg: Mapping[str, object]) -> Path:
    if "run_dir" in run_cfg:
        return Path(str(run_cfg["run_dir"]))
    timestamp = time.strftime("%Y%m%d-%H%M%S")
    return Path("runs") / timestamp


def _print_startup_summary(
    *,
    dims: Sequence[int],
    seed: int,
    explicit_weights: bool,
    run_dir: Path,
    out: TextIO,
) -> None:
    print("=== backpropnet run ===", file=out)
    print(f"Dimensions    : {list(dims)}", file=out)
    print(f"Seed          : {seed}", file=out)
    print(f"Weights       : {'explicit' if explicit_weights else 'random'}", file=out)
    print(f"Run dir       : {run_dir}", file=out)
    print("=======================", file=out)


__all__ = ["run_demo", "load_preset", "presets", "merge_config", "build_network", "DemoResult"]
