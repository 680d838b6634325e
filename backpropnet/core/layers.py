"""Sigmoid layers with in-place backpropagation updates."""

from __future__ import annotations

import weakref
from typing import Optional, Sequence

import numpy as np

from .activations import sigmoid, sigmoid_deriv
from .ops import inner_product, transpose, uniform_weights
from .sources import Source
from .types import Array, DimensionMismatchError, LayerSnapshot, UnsetDependencyError


class Layer:
    """Fully connected sigmoid layer reading from a single upstream source.

    ``weight`` has one row per node and one column per upstream output. It is
    only allocated once :meth:`set_source` has been called, and every call
    redraws it from U[-0.5, 0.5) using the layer's generator.
    """

    kind = "layer"

    def __init__(self, num_nodes: int, rng: np.random.Generator | None = None) -> None:
        if int(num_nodes) <= 0:
            raise ValueError(f"num_nodes must be positive, got {num_nodes}")
        self.num_nodes = int(num_nodes)
        self.rng = rng if rng is not None else np.random.default_rng()
        self.source: Optional[Source] = None
        self._output = np.zeros(self.num_nodes, dtype=np.float64)
        self._error = np.zeros(self.num_nodes, dtype=np.float64)
        self._weight: Optional[Array] = None

    @property
    def num_inputs(self) -> int:
        if self._weight is None:
            raise UnsetDependencyError(f"{self!r} has no source attached")
        return int(self._weight.shape[1])

    @property
    def weight(self) -> Array:
        if self._weight is None:
            raise UnsetDependencyError(f"{self!r} has no source attached")
        return self._weight.copy()

    @property
    def error(self) -> Array:
        return self._error.copy()

    def get_output(self) -> Array:
        return self._output.copy()

    def set_source(self, source: Source) -> None:
        self.source = source
        num_inputs = len(source.get_output())
        self._weight = uniform_weights(self.rng, self.num_nodes, num_inputs)

    def set_weight(self, weight: Sequence[Sequence[float]] | Array) -> None:
        """Overwrite the weight matrix; the shape must match the attached source."""

        if self._weight is None:
            raise UnsetDependencyError(f"{self!r} needs a source before weights can be set")
        weight = np.asarray(weight, dtype=np.float64)
        if weight.shape != self._weight.shape:
            raise DimensionMismatchError(
                f"Expected weight shape {self._weight.shape}, got {weight.shape}"
            )
        self._weight[...] = weight

    def feedforward(self) -> None:
        inputs = self._read_source()
        self._output[:] = sigmoid(inner_product(self._weight, inputs))

    def _read_source(self) -> Array:
        if self.source is None or self._weight is None:
            raise UnsetDependencyError(f"{self!r} has no source attached")
        inputs = self.source.get_output()
        if len(inputs) != self._weight.shape[1]:
            raise DimensionMismatchError(
                f"{self!r} was wired for {self._weight.shape[1]} inputs "
                f"but its source now produces {len(inputs)}"
            )
        return inputs

    def _apply_error(self, error: Array, inputs: Array) -> None:
        # Nothing is written before this point.
        self._error[:] = error
        self._update_weight(inputs)

    def _update_weight(self, inputs: Array) -> None:
        # Unit learning rate: the error already carries the step size.
        self._weight += np.outer(self._error, inputs)

    def snapshot(self) -> LayerSnapshot:
        weight = None if self._weight is None else self._weight.copy()
        return LayerSnapshot(
            kind=self.kind,
            weight=weight,
            output=self._output.copy(),
            error=self._error.copy(),
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(num_nodes={self.num_nodes})"


class HiddenLayer(Layer):
    """Layer whose error is pulled back from a downstream sink layer."""

    kind = "hidden"

    def __init__(self, num_nodes: int, rng: np.random.Generator | None = None) -> None:
        super().__init__(num_nodes, rng=rng)
        self._sink: Optional[weakref.ReferenceType[Layer]] = None

    @property
    def sink(self) -> Optional[Layer]:
        return self._sink() if self._sink is not None else None

    def set_sink(self, sink: Layer) -> None:
        self._sink = weakref.ref(sink)

    def backpropagate(self) -> None:
        inputs = self._read_source()
        self._apply_error(self._calculate_error(), inputs)

    def _calculate_error(self) -> Array:
        sink = self.sink
        if sink is None:
            raise UnsetDependencyError(f"{self!r} has no sink attached")
        if sink._weight is None:
            raise UnsetDependencyError(f"Sink {sink!r} has no source attached")
        if sink._weight.shape[1] != self.num_nodes:
            raise DimensionMismatchError(
                f"Sink {sink!r} expects {sink._weight.shape[1]} inputs "
                f"but {self!r} has {self.num_nodes} nodes"
            )
        # Reads the sink's weights as they are now, i.e. after the sink has
        # already applied its own update when driven output-first.
        product = inner_product(transpose(sink._weight), sink._error)
        return sigmoid_deriv(self._output) * product


class OutputLayer(Layer):
    """Final layer whose error comes straight from a target vector."""

    kind = "output"

    def backpropagate(self, target: Sequence[float] | Array) -> None:
        inputs = self._read_source()
        self._apply_error(self._calculate_error(target), inputs)

    def _calculate_error(self, target: Sequence[float] | Array) -> Array:
        target = np.asarray(target, dtype=np.float64)
        if target.ndim != 1:
            raise DimensionMismatchError(
                f"{self!r} expects a flat target vector, got shape {target.shape}"
            )
        if target.shape[0] != self.num_nodes:
            raise DimensionMismatchError(
                f"{self!r} expects a target of length {self.num_nodes}, got {target.shape[0]}"
            )
        return sigmoid_deriv(self._output) * (target - self._output)
