"""Chain assembly and the two-phase forward/backward driver."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

import numpy as np

from .core.layers import HiddenLayer, Layer, OutputLayer
from .core.sources import InputSource
from .core.types import Array, DimensionMismatchError, LayerSnapshot, ModelDescription


@dataclass(frozen=True)
class StepResult:
    """Outcome of a single-sample forward/backward pass."""

    output: Array
    snapshots: List[LayerSnapshot]


class Network:
    """Strict chain ``InputSource -> HiddenLayer* -> OutputLayer``.

    The last layer is always the output layer; every earlier layer is a hidden
    layer whose sink is the layer that follows it.
    """

    def __init__(self, source: InputSource, layers: Sequence[Layer]) -> None:
        if not layers:
            raise ValueError("A network needs at least one layer")
        if not isinstance(layers[-1], OutputLayer):
            raise TypeError("The last layer of a network must be an OutputLayer")
        for layer in layers[:-1]:
            if not isinstance(layer, HiddenLayer):
                raise TypeError(f"{layer!r} is not a HiddenLayer")
        self.source = source
        self.layers: List[Layer] = list(layers)
        upstream = source
        for idx, layer in enumerate(self.layers):
            layer.set_source(upstream)
            if isinstance(layer, HiddenLayer):
                layer.set_sink(self.layers[idx + 1])
            upstream = layer

    @classmethod
    def from_dims(
        cls, dims: Sequence[int], rng: np.random.Generator | None = None
    ) -> "Network":
        dims = [int(d) for d in dims]
        if len(dims) < 2:
            raise ValueError(f"Need an input size and at least one layer size, got {dims}")
        rng = rng if rng is not None else np.random.default_rng()
        layers: List[Layer] = [HiddenLayer(d, rng=rng) for d in dims[1:-1]]
        layers.append(OutputLayer(dims[-1], rng=rng))
        return cls(InputSource(dims[0]), layers)

    @property
    def hidden(self) -> List[HiddenLayer]:
        return list(self.layers[:-1])  # type: ignore[arg-type]

    @property
    def output(self) -> OutputLayer:
        return self.layers[-1]  # type: ignore[return-value]

    def describe(self) -> ModelDescription:
        dims = [self.source.num_inputs] + [layer.num_nodes for layer in self.layers]
        return ModelDescription(layer_dims=dims)

    def set_weights(self, weights: Sequence[Sequence[Sequence[float]] | Array]) -> None:
        if len(weights) != len(self.layers):
            raise DimensionMismatchError(
                f"Expected {len(self.layers)} weight matrices, got {len(weights)}"
            )
        for layer, weight in zip(self.layers, weights):
            layer.set_weight(weight)

    def feedforward(self, inputs: Sequence[float] | Array) -> Array:
        self.source.set_output(inputs)
        for layer in self.layers:
            layer.feedforward()
        return self.output.get_output()

    def backpropagate(self, target: Sequence[float] | Array) -> None:
        # Output first: hidden layers read the sink's error, and with it the
        # sink's weights as already updated by this call.
        self.output.backpropagate(target)
        for layer in reversed(self.hidden):
            layer.backpropagate()

    def step(self, inputs: Sequence[float] | Array, target: Sequence[float] | Array) -> StepResult:
        output = self.feedforward(inputs)
        self.backpropagate(target)
        return StepResult(output=output, snapshots=self.snapshot())

    def snapshot(self) -> List[LayerSnapshot]:
        return [layer.snapshot() for layer in self.layers]

    def __repr__(self) -> str:
        return f"Network(dims={self.describe().layer_dims})"


__all__ = ["Network", "StepResult"]
