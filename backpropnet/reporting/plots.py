"""Headless-safe plotting adapters."""

from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

import numpy as np

from ..core.types import Array


class WeightPlotAdapter:
    """Collect weight matrices per phase and optionally emit a matplotlib grid."""

    def __init__(self, run_dir: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self._frames: List[Tuple[str, int, Array]] = []
        if self.enable_plots:
            self.run_dir.mkdir(parents=True, exist_ok=True)

    def on_weights(self, label: str, layer: int, weight: Array) -> None:
        if not self.enable_plots:
            return
        self._frames.append((label, int(layer), np.array(weight, dtype=np.float64)))

    def close(self) -> Path | None:
        if not self.enable_plots or not self._frames:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        labels = sorted({label for label, _, _ in self._frames}, key=self._order)
        layers = sorted({layer for _, layer, _ in self._frames})
        fig, axes = plt.subplots(
            len(layers), len(labels), squeeze=False, figsize=(3 * len(labels), 2.5 * len(layers))
        )
        for label, layer, weight in self._frames:
            ax = axes[layers.index(layer)][labels.index(label)]
            image = ax.imshow(weight, cmap="coolwarm", vmin=-1.0, vmax=1.0)
            ax.set_title(f"layer {layer} ({label})")
            ax.set_xlabel("input")
            ax.set_ylabel("node")
        fig.colorbar(image, ax=axes.ravel().tolist())
        plot_path = self.run_dir / "weights.png"
        fig.savefig(plot_path)
        plt.close(fig)
        return plot_path

    def _order(self, label: str) -> int:
        for idx, (seen, _, _) in enumerate(self._frames):
            if seen == label:
                return idx
        return len(self._frames)
