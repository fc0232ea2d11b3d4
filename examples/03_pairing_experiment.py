"""
Example 03: Pairing-Induced Plasticity

Runs the interactive two-neuron session through repeated pre -> post
pulse pairings, then the reverse order, and prints how the synaptic
weight evolves. Causal pairings potentiate, anti-causal ones depress.

Level: Intermediate
Runtime: ~2 seconds
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from spikelab import SimulationSession, PairingProtocol, load_config


def run_protocol(session, protocol, label):
    session.run_pairing(protocol)
    n_ticks = protocol.repeats * protocol.interval_ticks
    n_spikes = 0
    for tick in range(n_ticks):
        result = session.step()
        n_spikes += len(result.spikes)
        if tick % protocol.interval_ticks == protocol.interval_ticks - 1:
            print(f"  {label} | t = {result.sim_time:6.3f} s | "
                  f"Spikes: {n_spikes:3d} | weight = {result.weights[0]:.4f}")
    return session.weights()[0]


def main():
    print("=== Example 03: Pairing-Induced Plasticity ===\n")

    config = load_config({"plasticity": {"tauPlus": 0.02, "tauMinus": 0.02,
                                         "aPlus": 0.05, "aMinus": 0.04,
                                         "wMin": 0.0, "wMax": 2.5}})
    session = SimulationSession(config)
    session.start()
    initial_w = session.weights()[0]
    print(f"Initial weight: {initial_w:.4f}\n")

    amplitude = 30.0
    causal = PairingProtocol(0, 1, repeats=8, delay_ticks=10, interval_ticks=220,
                             amplitude=amplitude, duration_ticks=1)
    w_causal = run_protocol(session, causal, "pre->post")

    session.restart()
    anti = PairingProtocol(1, 0, repeats=8, delay_ticks=10, interval_ticks=220,
                           amplitude=amplitude, duration_ticks=1)
    w_anti = run_protocol(session, anti, "post->pre")

    session.dispose()

    print(f"\n=== Results ===")
    print(f"Causal pairing:      {initial_w:.4f} -> {w_causal:.4f} ({w_causal - initial_w:+.4f})")
    print(f"Anti-causal pairing: {initial_w:.4f} -> {w_anti:.4f} ({w_anti - initial_w:+.4f})")


if __name__ == "__main__":
    main()
