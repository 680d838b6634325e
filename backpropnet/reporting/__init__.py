"""Reporting utilities for backpropnet."""

from .artifacts import write_manifest
from .dump import dump, dump_layer, format_matrix, format_vector
from .metrics import JsonlSink
from .plots import WeightPlotAdapter

__all__ = [
    "write_manifest",
    "dump",
    "dump_layer",
    "format_matrix",
    "format_vector",
    "JsonlSink",
    "WeightPlotAdapter",
]
