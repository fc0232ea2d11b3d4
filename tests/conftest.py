"""Shared fixtures: the reference two-neuron 0 -> 1 circuit."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from spikelab import LIFNeuron, Synapse, Network, STDP, Simulator

DT = 0.001
KICK = 30.0  # One tick of this current takes a resting LIF neuron over threshold


def make_pair(weight=1.0, stdp=True, delay=0.0):
    n0 = LIFNeuron(0, threshold=1.0)
    n1 = LIFNeuron(1, threshold=1.0)
    syn = Synapse(pre=0, post=1, weight=weight, delay=delay, tau=0.01)
    rule = STDP(tau_plus=0.02, tau_minus=0.02, a_plus=0.05, a_minus=0.04) if stdp else None
    return Simulator(Network([n0, n1], [syn]), dt=DT, stdp=rule), syn


@pytest.fixture
def pair():
    """Simulator and synapse for the plastic 0 -> 1 pair."""
    return make_pair()


@pytest.fixture
def pair_descriptors():
    neurons = [
        {"id": 0, "threshold": 1.0, "resetVoltage": 0.0, "tau": 0.02, "resistance": 1.0},
        {"id": 1, "threshold": 1.0},
    ]
    synapses = [{"pre": 0, "post": 1, "weight": 1.0, "delay": 0.0, "tau": 0.01}]
    plasticity = {"tauPlus": 0.02, "tauMinus": 0.02, "aPlus": 0.05, "aMinus": 0.04}
    return neurons, synapses, plasticity
