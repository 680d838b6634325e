"""Trace sinks for layer state during a forward/backward pass."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Mapping

import numpy as np


def _git_sha() -> str:
    try:
        out = subprocess.check_output(["git", "rev-parse", "HEAD"], stderr=subprocess.DEVNULL)
        return out.decode().strip()
    except Exception:  # pragma: no cover - git may be unavailable in tests
        return "unknown"


def _jsonable(value):
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, (np.floating, np.integer)):
        return value.item()
    return value


class JsonlSink:
    """Append-only JSONL writer, one record per phase of a step."""

    def __init__(
        self,
        path: str | Path,
        *,
        seed: int | None = None,
        sha: str | None = None,
    ) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.seed = seed
        self.sha = sha or _git_sha()
        self.records = 0

    def on_phase(
        self,
        step: int,
        phase: str,
        layer: int | None,
        values: Mapping[str, object],
    ) -> None:
        record = {
            "step": int(step),
            "phase": phase,
            "layer": layer,
            "seed": self.seed,
            "sha": self.sha,
        }
        record.update({k: _jsonable(v) for k, v in values.items()})
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")
        self.records += 1

    __call__ = on_phase
