"""Command line entry point for backpropnet demo runs."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import Iterable

from backpropnet import pipelines


def _format_result(result) -> str:
    payload = {
        "output": [float(v) for v in result.output],
        "trace": result.trace_path,
        "manifest": result.manifest_path,
        "config": result.config_path,
    }
    if getattr(result, "plot_path", ""):
        payload["plot"] = result.plot_path
    return json.dumps(payload, sort_keys=True)


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    preset_names = sorted(pipelines.presets().keys())
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=preset_names,
        default="canonical_2_2_1",
        help="Preset configuration to execute",
    )
    parser.add_argument(
        "--config", type=Path, help="Optional JSON/YAML config override"
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for random weight initialisation",
    )
    parser.add_argument("--run-dir", type=Path, help="Directory for run artifacts")
    parser.add_argument(
        "--enable-plots", action="store_true", help="Render weight heatmaps"
    )
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    parser.add_argument(
        "--dump-config", type=Path, help="Dump the resolved config to a JSON file"
    )
    return parser.parse_args(argv)


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)

    if args.list_presets:
        for name in sorted(pipelines.presets().keys()):
            print(name)
        raise SystemExit(0)

    config = json.loads(json.dumps(pipelines.load_preset(args.preset)))

    if args.config:
        override = pipelines.read_config_file(args.config)
        if {"model", "sample", "run"} <= set(override.keys()):
            config = json.loads(json.dumps(override))
        else:
            config = pipelines.merge_config(config, override)

    run_cfg = config.setdefault("run", {})
    if args.seed is not None:
        run_cfg["seed"] = int(args.seed)
    if args.run_dir is not None:
        run_cfg["run_dir"] = str(args.run_dir)
    if args.enable_plots:
        run_cfg["enable_plots"] = True

    if args.dump_config:
        args.dump_config.parent.mkdir(parents=True, exist_ok=True)
        args.dump_config.write_text(json.dumps(config, indent=2))

    result = pipelines.run_demo(config)
    print(_format_result(result))


if __name__ == "__main__":
    main()
