"""
spikelab

Deterministic fixed-step simulator for small networks of LIF neurons
connected by current-based synapses, with pairwise STDP.
Import individual classes or drive everything through SimulationSession.
"""

# Base types, errors and configuration
from .base import (
    LIFParams,
    SynapseParams,
    STDPParams,
    SimulationConfig,
    SpikelabError,
    ConfigurationError,
    UnknownNeuronError,
    SessionClosedError,
    load_config,
)

# Neuron models
from .neurons import (
    NeuronKind,
    Neuron,
    LIFNeuron,
    build_neuron,
)

# Synapses and plasticity
from .synapses import Synapse
from .plasticity import STDP

# Topology and orchestration
from .networks import Network
from .simulator import (
    Clock,
    Spike,
    Simulator,
)

# Session handle
from .session import (
    SimulationSession,
    StepResult,
    PairingProtocol,
)

__version__ = "0.1.0"
__all__ = [
    # Base
    "LIFParams", "SynapseParams", "STDPParams", "SimulationConfig",
    "SpikelabError", "ConfigurationError", "UnknownNeuronError",
    "SessionClosedError", "load_config",
    # Neurons
    "NeuronKind", "Neuron", "LIFNeuron", "build_neuron",
    # Synapses / plasticity
    "Synapse", "STDP",
    # Network / simulation
    "Network", "Clock", "Spike", "Simulator",
    # Session
    "SimulationSession", "StepResult", "PairingProtocol",
]
