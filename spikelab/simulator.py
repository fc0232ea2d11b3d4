"""
Fixed-step simulation orchestrator.

One call to `Simulator.step` is one tick, executed as five ordered phases:

  1. Current accumulation: external + synaptic current per neuron
  2. Neuron integration: every neuron in array order, spikes collected
  3. Timestamp propagation: spiking neurons notify their synapses
  4. Plasticity: STDP on synapses touching this tick's spikes
  5. Advance: simulation time += dt

Later phases read state written by earlier ones in the same tick, so the
order is part of the model. Per-tick anomalies (dangling synapse, non-finite
external current) contribute zero and never interrupt a tick.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np

from .base import ConfigurationError
from .networks import Network
from .plasticity import STDP

logger = logging.getLogger("spikelab.simulator")


@dataclass(frozen=True)
class Spike:
    """A spike emitted by neuron_id at simulation time `time` (s)."""
    neuron_id: int
    time: float


class Clock:
    """Simulation-time accumulator advancing by a fixed dt."""

    def __init__(self, dt: float):
        if not dt > 0:
            raise ConfigurationError(f"dt must be > 0 (got {dt})")
        self.dt = dt
        self.time = 0.0

    def tick(self) -> float:
        self.time += self.dt
        return self.time

    def reset(self):
        self.time = 0.0


class Simulator:
    """
    Drives a Network forward in fixed dt ticks with optional STDP.

    `last_spike_times` maps neuron id to the time of its most recent spike
    and is the timing source for plasticity.
    """

    def __init__(self, network: Network, dt: float, stdp: Optional[STDP] = None):
        self.network = network
        self.clock = Clock(dt)
        self.stdp = stdp
        self.last_spike_times: Dict[int, float] = {}
        self.skipped_contributions = 0

    @property
    def dt(self) -> float:
        return self.clock.dt

    @property
    def time(self) -> float:
        return self.clock.time

    def reset(self):
        """Back to t=0 with fresh voltages and timestamps; weights are kept."""
        self.clock.reset()
        self.network.reset_state()
        self.last_spike_times.clear()
        self.skipped_contributions = 0

    def _accumulate_currents(self, external_currents: Optional[Sequence[float]]) -> np.ndarray:
        net = self.network
        currents = np.zeros(net.n_neurons, dtype=np.float64)
        skipped = 0

        if external_currents is not None:
            m = min(net.n_neurons, len(external_currents))
            for i in range(m):
                try:
                    val = float(external_currents[i])
                except (TypeError, ValueError):
                    val = float("nan")
                if np.isfinite(val):
                    currents[i] += val
                else:
                    skipped += 1

        t = self.clock.time
        for syn in net.synapses:
            post_idx = net.id_to_index.get(syn.post)
            if post_idx is None:
                skipped += 1
                continue
            currents[post_idx] += syn.compute_current(t)

        self.skipped_contributions = skipped
        if skipped:
            logger.debug("t=%.6f: %d current contribution(s) skipped", t, skipped)
        return currents

    def _integrate(self, currents: np.ndarray) -> List[Spike]:
        t = self.clock.time
        dt = self.clock.dt
        spikes: List[Spike] = []
        for i, neuron in enumerate(self.network.neurons):
            if neuron.step(float(currents[i]), dt):
                spikes.append(Spike(neuron.id, t))
                self.last_spike_times[neuron.id] = t
        return spikes

    def _propagate_timestamps(self, spikes: List[Spike]):
        net = self.network
        for spike in spikes:
            for syn in net.outgoing_synapses(spike.neuron_id):
                syn.notify_pre_spike(spike.time)
            for syn in net.incoming_synapses(spike.neuron_id):
                syn.notify_post_spike(spike.time)

    def _apply_plasticity(self, spikes: List[Spike]):
        net = self.network
        for spike in spikes:
            # Pre just fired: pair with the post neuron's last spike
            for syn in net.outgoing_synapses(spike.neuron_id):
                post_time = self.last_spike_times.get(syn.post)
                if post_time is not None:
                    self.stdp.apply(syn, post_time - spike.time)

            # Post just fired: pair with the pre neuron's last spike
            for syn in net.incoming_synapses(spike.neuron_id):
                pre_time = self.last_spike_times.get(syn.pre)
                if pre_time is not None:
                    self.stdp.apply(syn, spike.time - pre_time)

    def step(self, external_currents: Optional[Sequence[float]] = None) -> List[Spike]:
        """
        Advance the simulation by one tick.

        external_currents is indexed by neuron position (network array
        order); missing, extra or non-finite entries count as zero.
        Returns the spikes of this tick in neuron array order.
        """
        currents = self._accumulate_currents(external_currents)
        spikes = self._integrate(currents)
        self._propagate_timestamps(spikes)
        if self.stdp is not None:
            self._apply_plasticity(spikes)
        self.clock.tick()
        return spikes

    def run(self, n_steps: int, external_currents: Optional[Sequence[float]] = None) -> List[Spike]:
        """Step n_steps times with the same external currents; return all spikes."""
        spikes: List[Spike] = []
        for _ in range(n_steps):
            spikes.extend(self.step(external_currents))
        return spikes
