"""
Scripted two-neuron harness.

Builds the reference 0 -> 1 network and, for n_ticks, forces a
presynaptic notification on even ticks and a postsynaptic notification
(stamped 5 ms ahead) on odd ticks before stepping. The recorded weight
trajectory is the fixed reference the test suite compares against.

Run directly for a printed trace:

    python -m spikelab.harness
"""

from typing import List, Optional, Tuple

from .neurons import LIFNeuron
from .synapses import Synapse
from .networks import Network
from .plasticity import STDP
from .simulator import Simulator

POST_OFFSET = 0.005  # Post notification lead (s)


def build_reference_simulator() -> Tuple[Simulator, Synapse]:
    """Two LIF neurons, one 0 -> 1 synapse, pairwise STDP, dt = 1 ms."""
    n0 = LIFNeuron(0, threshold=1.0, reset_voltage=0.0, tau=0.02, resistance=1.0)
    n1 = LIFNeuron(1, threshold=1.0, reset_voltage=0.0, tau=0.02, resistance=1.0)
    syn = Synapse(pre=0, post=1, weight=1.0, delay=0.0, tau=0.01)
    stdp = STDP(tau_plus=0.02, tau_minus=0.02, a_plus=0.05, a_minus=0.04)
    return Simulator(Network([n0, n1], [syn]), dt=0.001, stdp=stdp), syn


def run_pairing_harness(n_ticks: int = 20,
                        sim: Optional[Simulator] = None,
                        verbose: bool = False) -> List[Tuple[float, float]]:
    """
    Drive the scripted notification schedule.

    Returns (simulation time after the tick, synapse weight) per tick.
    """
    if sim is None:
        sim, syn = build_reference_simulator()
    else:
        syn = sim.network.synapses[0]

    if verbose:
        print("Starting simulation...")

    trajectory = []
    for i in range(n_ticks):
        t = sim.time
        if i % 2 == 0:
            syn.notify_pre_spike(t)
        else:
            syn.notify_post_spike(t + POST_OFFSET)

        sim.step()
        trajectory.append((sim.time, syn.weight))

        if verbose:
            print(f"t={sim.time:.3f}s : synapse weight = {syn.weight:.4f}")

    if verbose:
        print("Simulation complete.")
    return trajectory


if __name__ == "__main__":
    run_pairing_harness(verbose=True)
