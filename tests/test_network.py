from __future__ import annotations

import numpy as np
import pytest

from backpropnet.core.layers import HiddenLayer, OutputLayer
from backpropnet.core.sources import InputSource
from backpropnet.core.types import DimensionMismatchError
from backpropnet.network import Network

HIDDEN_WEIGHTS = [[0.1, 0.8], [0.4, 0.6]]
OUTPUT_WEIGHTS = [[0.3, 0.9]]
INPUTS = [0.35, 0.9]


def _sigmoid(x):
    return 1.0 / (1.0 + np.exp(-np.asarray(x, dtype=np.float64)))


def _canonical() -> Network:
    network = Network.from_dims([2, 2, 1], rng=np.random.default_rng(0))
    network.set_weights([HIDDEN_WEIGHTS, OUTPUT_WEIGHTS])
    return network


def test_from_dims_selects_layer_kind_by_position():
    network = Network.from_dims([3, 4, 5, 2], rng=np.random.default_rng(0))
    assert [type(layer) for layer in network.layers] == [HiddenLayer, HiddenLayer, OutputLayer]
    assert network.describe().layer_dims == [3, 4, 5, 2]
    assert network.layers[0].weight.shape == (4, 3)
    assert network.layers[2].weight.shape == (2, 5)
    assert network.layers[0].sink is network.layers[1]
    assert network.layers[1].sink is network.layers[2]


def test_network_requires_output_layer_last():
    with pytest.raises(TypeError):
        Network(InputSource(2), [HiddenLayer(2), HiddenLayer(1)])
    with pytest.raises(ValueError):
        Network.from_dims([2])


def test_canonical_forward_pass():
    network = _canonical()
    output = network.feedforward(INPUTS)

    hidden = network.layers[0].get_output()
    assert np.allclose(hidden, _sigmoid([0.755, 0.68]), atol=1e-9)
    assert hidden == pytest.approx([0.68027, 0.66374], abs=1e-4)

    expected = _sigmoid(0.3 * hidden[0] + 0.9 * hidden[1])
    assert output[0] == pytest.approx(expected, abs=1e-9)
    assert output[0] == pytest.approx(0.69028, abs=1e-4)


def test_canonical_output_backpropagate():
    network = _canonical()
    network.feedforward(INPUTS)
    hidden = network.layers[0].get_output()
    o = network.output.get_output()[0]

    network.output.backpropagate([0.5])
    err = o * (1.0 - o) * (0.5 - o)
    assert network.output.error[0] == pytest.approx(err, abs=1e-12)
    assert network.output.error[0] == pytest.approx(-0.04068, abs=1e-4)
    updated = network.output.weight
    assert np.allclose(updated, [[0.3 + err * hidden[0], 0.9 + err * hidden[1]]], atol=1e-12)
    assert updated[0] == pytest.approx([0.27233, 0.87300], abs=1e-4)


def test_hidden_error_reads_updated_sink_weights():
    network = _canonical()
    network.feedforward(INPUTS)
    hidden = network.layers[0].get_output()
    original_sink = np.array(OUTPUT_WEIGHTS)

    network.output.backpropagate([0.5])
    sink_error = network.output.error
    updated_sink = network.output.weight
    network.layers[0].backpropagate()

    deriv = hidden * (1.0 - hidden)
    literal = deriv * (updated_sink.T @ sink_error)
    textbook = deriv * (original_sink.T @ sink_error)
    assert np.allclose(network.layers[0].error, literal, atol=1e-12)
    assert not np.allclose(network.layers[0].error, textbook, atol=1e-9)
    assert network.layers[0].error == pytest.approx([-0.0024096, -0.0079267], abs=1e-5)

    x = np.array(INPUTS)
    expected = np.array(HIDDEN_WEIGHTS) + np.outer(literal, x)
    assert np.allclose(network.layers[0].weight, expected, atol=1e-12)


def test_chain_matches_direct_composition():
    rng = np.random.default_rng(21)
    network = Network.from_dims([3, 4, 2, 1], rng=rng)
    weights = [layer.weight for layer in network.layers]
    x = rng.normal(size=3)
    target = np.array([0.25])

    a1 = _sigmoid(weights[0] @ x)
    a2 = _sigmoid(weights[1] @ a1)
    a3 = _sigmoid(weights[2] @ a2)
    output = network.feedforward(x)
    assert np.allclose(output, a3, atol=1e-9)
    assert np.allclose(network.layers[0].get_output(), a1, atol=1e-9)

    e3 = a3 * (1 - a3) * (target - a3)
    w3 = weights[2] + np.outer(e3, a2)
    e2 = a2 * (1 - a2) * (w3.T @ e3)
    w2 = weights[1] + np.outer(e2, a1)
    e1 = a1 * (1 - a1) * (w2.T @ e2)
    w1 = weights[0] + np.outer(e1, x)

    network.backpropagate(target)
    assert np.allclose(network.layers[2].weight, w3, atol=1e-12)
    assert np.allclose(network.layers[1].weight, w2, atol=1e-12)
    assert np.allclose(network.layers[0].weight, w1, atol=1e-12)


def test_step_reports_pre_update_output():
    network = _canonical()
    result = network.step(INPUTS, [0.5])
    assert result.output[0] == pytest.approx(0.69028, abs=1e-4)
    assert [snap.kind for snap in result.snapshots] == ["hidden", "output"]
    assert result.snapshots[1].weight[0] == pytest.approx([0.27233, 0.87300], abs=1e-4)


def test_repeated_steps_move_output_towards_target():
    network = _canonical()
    first = network.step(INPUTS, [0.5]).output[0]
    second = network.step(INPUTS, [0.5]).output[0]
    assert abs(second - 0.5) < abs(first - 0.5)


def test_set_weights_validates_count_and_shape():
    network = Network.from_dims([2, 2, 1], rng=np.random.default_rng(0))
    with pytest.raises(DimensionMismatchError):
        network.set_weights([HIDDEN_WEIGHTS])
    with pytest.raises(DimensionMismatchError):
        network.set_weights([HIDDEN_WEIGHTS, [[0.3, 0.9, 0.1]]])


def test_feedforward_rejects_wrong_input_length():
    network = _canonical()
    with pytest.raises(DimensionMismatchError):
        network.feedforward([0.1, 0.2, 0.3])
