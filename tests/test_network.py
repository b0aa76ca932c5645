"""
Tests for activations, initializers and controller networks.

Run with: python -m pytest tests/test_network.py -v
"""

import pytest
import numpy as np
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from neuroevo.core.activations import ACTIVATIONS, get_activation, list_activations
from neuroevo.core.initializers import (
    HeInitializer,
    UniformInitializer,
    XavierInitializer,
    create_initializer,
)
from neuroevo.core.network import LayerConfig, NetworkConfig, NeuralNetwork
from neuroevo.core.random import gaussian_deviate
from neuroevo.errors import ConfigurationError, ShapeError


@pytest.fixture
def small_config():
    return NetworkConfig(
        input_size=3,
        hidden_layers=(LayerConfig(4, 'relu'),),
        output_layer=LayerConfig(2, 'sigmoid'),
        seed=5,
    )


@pytest.fixture
def network(small_config):
    return NeuralNetwork(small_config)


class TestActivations:
    """Tests for activation functions."""

    def test_registry(self):
        assert set(list_activations()) == {'linear', 'relu', 'sigmoid', 'tanh'}
        assert get_activation('relu') is ACTIVATIONS['relu']

    def test_unknown_activation(self):
        with pytest.raises(ConfigurationError):
            get_activation('swish')

    def test_sigmoid_extremes_do_not_overflow(self):
        out = get_activation('sigmoid')(np.array([-1e6, 0.0, 1e6]))
        assert np.all(np.isfinite(out))
        assert out[1] == pytest.approx(0.5)

    def test_relu(self):
        out = get_activation('relu')(np.array([-2.0, 0.0, 3.0]))
        np.testing.assert_array_equal(out, [0.0, 0.0, 3.0])

    def test_linear_and_tanh(self):
        x = np.array([-3.0, 0.0, 2.0])
        np.testing.assert_array_equal(get_activation('linear')(x), x)
        np.testing.assert_allclose(get_activation('tanh')(x), np.tanh(x))

    def test_repr(self):
        assert repr(get_activation('sigmoid')) == 'Activation(sigmoid)'


class TestInitializers:
    """Tests for weight initializers."""

    def test_uniform_range(self):
        rng = iter(np.linspace(0.0, 0.99, 12))
        init = UniformInitializer(-2.0, 2.0)
        weights = init.initialize_weights(3, 4, lambda: next(rng))
        assert weights.shape == (3, 4)
        assert weights.min() >= -2.0
        assert weights.max() < 2.0

    def test_uniform_row_major_order(self):
        values = iter([0.0, 0.25, 0.5, 0.75])
        weights = UniformInitializer(0.0, 1.0).initialize_weights(2, 2, lambda: next(values))
        np.testing.assert_allclose(weights, [[0.0, 0.25], [0.5, 0.75]])

    def test_invalid_range(self):
        with pytest.raises(ConfigurationError):
            UniformInitializer(1.0, 1.0)

    def test_xavier_and_he_zero_biases(self):
        for init in (XavierInitializer(), HeInitializer()):
            np.testing.assert_array_equal(init.initialize_biases(3, lambda: 0.5), np.zeros(3))

    def test_he_weights_are_scaled_gaussian_deviates(self):
        draws = iter([0.3, 0.6, 0.1, 0.9])
        weights = HeInitializer().initialize_weights(2, 1, lambda: next(draws))

        replay = iter([0.3, 0.6, 0.1, 0.9])
        std = (2.0 / 2) ** 0.5
        expected = [[gaussian_deviate(lambda: next(replay), 0.0, std)] for _ in range(2)]
        np.testing.assert_allclose(weights, expected)

    def test_factory(self):
        assert isinstance(create_initializer('xavier'), XavierInitializer)
        with pytest.raises(ConfigurationError):
            create_initializer('orthogonal')


class TestNetworkConfig:
    """Tests for architecture configuration."""

    def test_total_params(self, small_config):
        # 3*4 + 4 + 4*2 + 2
        assert small_config.total_params == 26
        assert small_config.depth == 1
        assert small_config.output_size == 2

    def test_total_params_without_bias(self):
        config = NetworkConfig(input_size=2, output_layer=LayerConfig(3, 'linear', use_bias=False))
        assert config.total_params == 6

    def test_dict_layers_are_normalized(self):
        config = NetworkConfig(
            input_size=2,
            hidden_layers=[{'size': 3, 'activation': 'tanh'}],
            output_layer={'size': 1},
        )
        assert isinstance(config.hidden_layers, tuple)
        assert config.hidden_layers[0] == LayerConfig(3, 'tanh')

    def test_round_trip(self, small_config):
        assert NetworkConfig.from_dict(small_config.to_dict()) == small_config

    @pytest.mark.parametrize("kwargs", [
        {'input_size': 0},
        {'input_size': 2, 'weight_range': (1.0, -1.0)},
        {'input_size': 2, 'initializer': 'bogus'},
        {'input_size': 2, 'hidden_layers': ({'size': 3, 'activation': 'bogus'},)},
    ])
    def test_invalid(self, kwargs):
        with pytest.raises(ConfigurationError):
            NetworkConfig(**kwargs)

    def test_invalid_layer_size(self):
        with pytest.raises(ConfigurationError):
            LayerConfig(0)

    def test_invalid_layer_activation(self):
        with pytest.raises(ConfigurationError):
            LayerConfig(3, 'bogus')


class TestNeuralNetwork:
    """Tests for the feedforward network."""

    def test_shapes(self, network):
        assert network.n_layers == 2
        assert network.weights[0].shape == (3, 4)
        assert network.biases[0].shape == (4,)
        assert network.weights[1].shape == (4, 2)
        assert network.parameter_count == 26

    def test_same_config_same_parameters(self, small_config):
        a, b = NeuralNetwork(small_config), NeuralNetwork(small_config)
        for Wa, Wb in zip(a.weights, b.weights):
            np.testing.assert_array_equal(Wa, Wb)
        for ba, bb in zip(a.biases, b.biases):
            np.testing.assert_array_equal(ba, bb)

    def test_weights_within_range(self, network):
        for W in network.weights:
            assert W.min() >= -1.0 and W.max() < 1.0

    def test_process(self, network):
        out = network.process([0.1, -0.2, 0.3])
        assert out.shape == (2,)
        assert np.all((out > 0.0) & (out < 1.0))

    def test_process_matches_manual_forward(self, network):
        x = np.array([0.5, 0.25, -1.0])
        hidden = np.maximum(0, x @ network.weights[0] + network.biases[0])
        expected = 1.0 / (1.0 + np.exp(-(hidden @ network.weights[1] + network.biases[1])))
        np.testing.assert_allclose(network.process(x), expected)

    def test_process_wrong_size(self, network):
        with pytest.raises(ShapeError):
            network.process([1.0, 2.0])
        with pytest.raises(ShapeError):
            network.process([[1.0, 2.0, 3.0]])

    def test_get_state_returns_copies(self, network):
        state = network.get_state()
        state['layers'][0]['weights'][0, 0] = 99.0
        assert network.weights[0][0, 0] != 99.0

    def test_set_state_partial(self, network):
        original_biases = network.biases[0].copy()
        new_weights = np.zeros((3, 4))
        network.set_state({'layers': [{'weights': new_weights}, {}]})
        np.testing.assert_array_equal(network.weights[0], new_weights)
        np.testing.assert_array_equal(network.biases[0], original_biases)

    def test_set_state_rejected_without_writes(self, network):
        before = network.get_state()
        bad = {'layers': [
            {'weights': np.ones((3, 4))},
            {'weights': np.ones((5, 2))},
        ]}
        with pytest.raises(ShapeError):
            network.set_state(bad)
        np.testing.assert_array_equal(network.weights[0], before['layers'][0]['weights'])

    def test_set_state_layer_count(self, network):
        with pytest.raises(ShapeError):
            network.set_state({'layers': [{}]})

    def test_set_state_bias_on_biasless_layer(self):
        net = NeuralNetwork(NetworkConfig(
            input_size=2, output_layer=LayerConfig(1, 'linear', use_bias=False)
        ))
        with pytest.raises(ShapeError):
            net.set_state({'layers': [{'biases': [0.0]}]})

    def test_clone_is_independent(self, network):
        twin = network.clone()
        np.testing.assert_array_equal(twin.weights[0], network.weights[0])
        twin.weights[0][0, 0] += 1.0
        assert twin.weights[0][0, 0] != network.weights[0][0, 0]

    def test_serialize_round_trip(self, network, small_config):
        payload = network.serialize()
        other = NeuralNetwork(NetworkConfig(
            input_size=3,
            hidden_layers=(LayerConfig(4, 'relu'),),
            output_layer=LayerConfig(2, 'sigmoid'),
            seed=99,
        ))
        other.deserialize(payload)
        x = [0.3, 0.2, 0.1]
        np.testing.assert_allclose(other.process(x), network.process(x))

    def test_deserialize_mismatch(self, network):
        other = NeuralNetwork(NetworkConfig(input_size=3, output_layer=LayerConfig(1)))
        with pytest.raises(ShapeError):
            network.deserialize(other.serialize())

    def test_deserialize_malformed(self, network):
        with pytest.raises(ShapeError):
            network.deserialize('{"state": {}}')

    def test_from_dict(self, network):
        copy = NeuralNetwork.from_dict(network.to_dict())
        np.testing.assert_allclose(copy.weights[1], network.weights[1])

    def test_save_to_file(self, network, tmp_path):
        path = tmp_path / "net.json"
        path.write_text(network.serialize())
        restored = NeuralNetwork(network.config)
        restored.deserialize(path.read_text())
        np.testing.assert_allclose(restored.biases[1], network.biases[1])
