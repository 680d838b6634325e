"""Upstream sources feeding the first layer of a chain."""

from __future__ import annotations

from typing import Protocol, Sequence

import numpy as np

from .types import Array, DimensionMismatchError


class Source(Protocol):
    """Anything exposing a fixed-size output vector."""

    def get_output(self) -> Array:
        """Return a copy of the current output vector."""


class InputSource:
    """Mutable leaf source holding externally supplied input values."""

    def __init__(self, num_inputs: int) -> None:
        if int(num_inputs) <= 0:
            raise ValueError(f"num_inputs must be positive, got {num_inputs}")
        self._output = np.zeros(int(num_inputs), dtype=np.float64)

    @property
    def num_inputs(self) -> int:
        return int(self._output.shape[0])

    def set_output(self, values: Sequence[float] | Array) -> None:
        values = np.asarray(values, dtype=np.float64)
        if values.ndim != 1:
            raise DimensionMismatchError(
                f"InputSource expects a flat vector, got shape {values.shape}"
            )
        if values.shape[0] != self.num_inputs:
            raise DimensionMismatchError(
                f"InputSource expects {self.num_inputs} values, got {values.shape[0]}"
            )
        self._output[:] = values

    def get_output(self) -> Array:
        return self._output.copy()

    def __repr__(self) -> str:
        return f"InputSource(num_inputs={self.num_inputs})"
