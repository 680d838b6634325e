"""Plain-text dumps of vectors and matrices with five decimals."""

from __future__ import annotations

import sys
from typing import Sequence, TextIO

import numpy as np

from ..core.layers import Layer
from ..core.types import Array


def format_vector(vector: Sequence[float] | Array) -> str:
    """One value per line, followed by a blank line."""

    values = np.asarray(vector, dtype=np.float64).reshape(-1)
    return "".join(f"{value:.5f}\n" for value in values) + "\n"


def format_matrix(matrix: Sequence[Sequence[float]] | Array) -> str:
    """Tab-terminated cells, one row per line, followed by a blank line."""

    rows = np.asarray(matrix, dtype=np.float64)
    if rows.ndim != 2:
        raise ValueError(f"Expected a matrix, got shape {rows.shape}")
    lines = ["".join(f"{value:.5f}\t" for value in row) + "\n" for row in rows]
    return "".join(lines) + "\n"


def dump(values, out: TextIO | None = None, title: str | None = None) -> None:
    """Write ``values`` as a vector or matrix dump, optionally under ``title``."""

    out = out or sys.stdout
    if title:
        out.write(f"{title}\n")
    if np.ndim(values) == 2:
        out.write(format_matrix(values))
    else:
        out.write(format_vector(values))


def dump_layer(layer: Layer, out: TextIO | None = None) -> None:
    snap = layer.snapshot()
    name = type(layer).__name__
    if snap.weight is not None:
        dump(snap.weight, out, title=f"{name} Weights: ")
    dump(snap.output, out, title=f"{name} Output: ")
    dump(snap.error, out, title=f"{name} Error: ")
