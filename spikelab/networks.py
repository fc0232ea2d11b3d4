"""
Network container: a fixed set of neurons and the synapses between them.

Synapses reference neurons by id. Endpoints are not required to exist;
lookups for such ids return nothing rather than failing, so a wiring
mistake shows up as missing dynamics instead of a crash.
"""

import logging
from collections import defaultdict
from typing import Dict, List, Sequence

from .base import ConfigurationError, UnknownNeuronError
from .neurons import Neuron
from .synapses import Synapse

logger = logging.getLogger("spikelab.network")


class Network:
    """
    Ordered neurons plus ordered synapses, with id-keyed lookup tables.

    The id -> index table and the outgoing / incoming adjacency lists are
    built once at construction; the topology is fixed afterwards.
    """

    def __init__(self, neurons: Sequence[Neuron], synapses: Sequence[Synapse]):
        self.neurons: List[Neuron] = list(neurons)
        self.synapses: List[Synapse] = list(synapses)

        self.id_to_index: Dict[int, int] = {}
        for i, neuron in enumerate(self.neurons):
            if neuron.id in self.id_to_index:
                raise ConfigurationError(f"Network: duplicate neuron id {neuron.id}")
            self.id_to_index[neuron.id] = i

        self._outgoing: Dict[int, List[Synapse]] = defaultdict(list)
        self._incoming: Dict[int, List[Synapse]] = defaultdict(list)
        for syn in self.synapses:
            self._outgoing[syn.pre].append(syn)
            self._incoming[syn.post].append(syn)

        dangling = self.dangling_synapses()
        if dangling:
            logger.warning("Network has %d synapse(s) with endpoints outside the "
                           "neuron set: %s", len(dangling),
                           ", ".join(f"{s.pre}->{s.post}" for s in dangling))

    @property
    def n_neurons(self) -> int:
        return len(self.neurons)

    @property
    def n_synapses(self) -> int:
        return len(self.synapses)

    def index_of(self, neuron_id: int) -> int:
        idx = self.id_to_index.get(neuron_id)
        if idx is None:
            raise UnknownNeuronError(neuron_id)
        return idx

    def has_neuron(self, neuron_id: int) -> bool:
        return neuron_id in self.id_to_index

    def neuron(self, neuron_id: int) -> Neuron:
        return self.neurons[self.index_of(neuron_id)]

    def outgoing_synapses(self, neuron_id: int) -> List[Synapse]:
        """Synapses whose pre is neuron_id, in insertion order."""
        return list(self._outgoing.get(neuron_id, ()))

    def incoming_synapses(self, neuron_id: int) -> List[Synapse]:
        """Synapses whose post is neuron_id, in insertion order."""
        return list(self._incoming.get(neuron_id, ()))

    def dangling_synapses(self) -> List[Synapse]:
        """Synapses with a pre or post id that is not a neuron of this network."""
        return [s for s in self.synapses
                if s.pre not in self.id_to_index or s.post not in self.id_to_index]

    def weights(self) -> List[float]:
        """Current weight vector in synapse order."""
        return [syn.weight for syn in self.synapses]

    def reset_state(self):
        """Reset voltages and spike timestamps, keep learned weights."""
        for neuron in self.neurons:
            neuron.reset()
        for syn in self.synapses:
            syn.reset_dynamic_state()
