"""
Example 01: Single LIF Neuron

Drives one leaky integrate-and-fire neuron with constant currents and
prints its firing rate, the numerical f-I curve of the Euler-integrated
model next to the analytic rate 1 / (tau * ln(RI / (RI - threshold))).

Level: Beginner
Runtime: ~1 second
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
from spikelab import LIFNeuron, Network, Simulator


def main():
    print("=== Example 01: Single LIF Neuron ===\n")

    dt = 0.0001         # s
    duration = 1.0      # s
    n_steps = int(duration / dt)

    print(f"{'I':>6} | {'simulated (Hz)':>14} | {'analytic (Hz)':>13}")
    for current in np.arange(0.8, 3.01, 0.2):
        neuron = LIFNeuron(0, threshold=1.0, reset_voltage=0.0, tau=0.02)
        sim = Simulator(Network([neuron], []), dt)

        spikes = sim.run(n_steps, [current])
        rate = len(spikes) / duration

        if current > neuron.threshold:
            analytic = 1.0 / (neuron.tau * np.log(current / (current - neuron.threshold)))
        else:
            analytic = 0.0
        print(f"{current:6.2f} | {rate:14.1f} | {analytic:13.1f}")


if __name__ == "__main__":
    main()
