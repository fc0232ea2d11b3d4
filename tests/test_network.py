"""
Tests for the network container.
"""

import pytest

from spikelab import (
    LIFNeuron,
    Synapse,
    Network,
    ConfigurationError,
    UnknownNeuronError,
)


def make_neurons(*ids):
    return [LIFNeuron(i, threshold=1.0) for i in ids]


class TestNetworkLookup:
    """Test suite for id-based lookup."""

    def test_index_of_follows_array_order(self):
        net = Network(make_neurons(10, 3, 7), [])
        assert net.index_of(10) == 0
        assert net.index_of(3) == 1
        assert net.index_of(7) == 2
        assert net.neuron(7).id == 7

    def test_unknown_id_raises_lookup_error(self):
        net = Network(make_neurons(0, 1), [])
        with pytest.raises(UnknownNeuronError) as excinfo:
            net.index_of(42)

        assert isinstance(excinfo.value, LookupError)
        assert excinfo.value.neuron_id == 42
        # Failed lookup leaves the tables intact
        assert net.index_of(1) == 1
        assert not net.has_neuron(42)

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ConfigurationError, match="duplicate"):
            Network(make_neurons(0, 1, 0), [])


class TestNetworkAdjacency:
    """Test suite for outgoing / incoming synapse queries."""

    def test_adjacency_preserves_insertion_order(self):
        s_a = Synapse(0, 1, weight=0.1)
        s_b = Synapse(2, 1, weight=0.2)
        s_c = Synapse(0, 2, weight=0.3)
        s_d = Synapse(0, 1, weight=0.4)   # parallel connection
        net = Network(make_neurons(0, 1, 2), [s_a, s_b, s_c, s_d])

        assert net.outgoing_synapses(0) == [s_a, s_c, s_d]
        assert net.incoming_synapses(1) == [s_a, s_b, s_d]
        assert net.outgoing_synapses(1) == []
        assert net.incoming_synapses(0) == []

    def test_unknown_id_yields_empty(self):
        net = Network(make_neurons(0), [Synapse(0, 0, weight=1.0)])
        assert net.outgoing_synapses(99) == []
        assert net.incoming_synapses(99) == []

    def test_queries_return_copies(self):
        """Editing a returned list never rewires the network."""
        syn = Synapse(0, 1, weight=1.0)
        net = Network(make_neurons(0, 1), [syn])

        net.outgoing_synapses(0).append(Synapse(0, 0, weight=5.0))
        net.incoming_synapses(1).clear()
        net.outgoing_synapses(7).append(syn)

        assert net.outgoing_synapses(0) == [syn]
        assert net.incoming_synapses(1) == [syn]
        assert net.outgoing_synapses(7) == []

    def test_dangling_endpoints_tolerated(self):
        dangling_post = Synapse(0, 99, weight=1.0)
        dangling_pre = Synapse(98, 1, weight=1.0)
        ok = Synapse(0, 1, weight=1.0)
        net = Network(make_neurons(0, 1), [dangling_post, dangling_pre, ok])

        assert net.dangling_synapses() == [dangling_post, dangling_pre]
        assert net.incoming_synapses(99) == [dangling_post]
        assert net.outgoing_synapses(98) == [dangling_pre]

    def test_weights_in_synapse_order(self):
        net = Network(make_neurons(0, 1), [Synapse(0, 1, weight=0.5),
                                           Synapse(1, 0, weight=-2.0)])
        assert net.weights() == [0.5, -2.0]
        assert net.n_neurons == 2
        assert net.n_synapses == 2

    def test_reset_state(self):
        syn = Synapse(0, 1, weight=1.3)
        neurons = make_neurons(0, 1)
        net = Network(neurons, [syn])
        neurons[0].voltage = 0.6
        syn.notify_pre_spike(0.1)

        net.reset_state()

        assert neurons[0].voltage == 0.0
        assert syn.last_pre_spike is None
        assert syn.weight == 1.3
