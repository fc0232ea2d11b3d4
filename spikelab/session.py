"""
Session handle: the surface a hosting application drives.

A SimulationSession owns exactly one Simulator plus the input state that
controls it between ticks (persistent bias currents, transient pulses, a
scheduled pairing protocol) and a rolling history of spikes and weights.
Every control call only records intent; it takes effect on the next
`step()`, so a tick is never partially affected by a control change.

There is no timer in here. `rate_hz` is a hint for whatever drives
`step()` at a fixed cadence.
"""

import copy
import logging
import math
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import numpy as np

from .base import (
    SimulationConfig, SessionClosedError, ConfigurationError,
    neuron_params, synapse_params, stdp_params,
)
from .neurons import build_neuron
from .synapses import Synapse
from .networks import Network
from .plasticity import STDP
from .simulator import Simulator, Spike

logger = logging.getLogger("spikelab.session")


@dataclass
class StepResult:
    """Output of one session tick."""
    sim_time: float                 # Simulation time after the tick (s)
    spikes: List[Spike]
    weights: List[float]            # Synapse order

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sim_time": self.sim_time,
            "spikes": [{"neuron_id": s.neuron_id, "time": s.time} for s in self.spikes],
            "weights": list(self.weights),
        }


@dataclass
class PairingProtocol:
    """
    Repeated pre -> post pulse pairs for an STDP induction experiment.

    All timings are in ticks. Each repetition pulses pre_index, then
    post_index delay_ticks later; repetitions start interval_ticks apart.
    """
    pre_index: int
    post_index: int
    repeats: int = 8
    delay_ticks: int = 15
    interval_ticks: int = 220
    amplitude: float = 3.0
    duration_ticks: int = 10

    def __post_init__(self):
        if self.repeats < 1:
            raise ConfigurationError(f"Pairing: repeats must be >= 1 (got {self.repeats})")
        if self.delay_ticks < 0 or self.interval_ticks < 1 or self.duration_ticks < 1:
            raise ConfigurationError(
                "Pairing: delay_ticks must be >= 0, interval_ticks and "
                "duration_ticks must be >= 1")

    def schedule(self) -> List[Tuple[int, int]]:
        """(tick offset, neuron index) for every pulse, sorted by offset."""
        events = []
        for k in range(self.repeats):
            start = k * self.interval_ticks
            events.append((start, self.pre_index))
            events.append((start + self.delay_ticks, self.post_index))
        return sorted(events, key=lambda e: e[0])


@dataclass
class _Pulse:
    index: int
    amplitude: float
    remaining: int


@dataclass
class _History:
    """Rolling record of recent spikes and first-synapse weight points."""
    seconds: float
    spikes: deque = field(default_factory=deque)
    weights: deque = field(default_factory=deque)

    def record(self, result: StepResult):
        self.spikes.extend(result.spikes)
        w0 = result.weights[0] if result.weights else 0.0
        self.weights.append((result.sim_time, w0))

        cutoff = result.sim_time - self.seconds
        while self.spikes and self.spikes[0].time < cutoff:
            self.spikes.popleft()
        while self.weights and self.weights[0][0] < cutoff:
            self.weights.popleft()

    def clear(self):
        self.spikes.clear()
        self.weights.clear()


ConfigLike = Union[SimulationConfig, Dict[str, Any]]


def _finite_or_none(raw: Any) -> Optional[float]:
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


class SimulationSession:
    """
    Explicitly owned simulation instance with a create/start/pause/restart/
    dispose lifecycle.

    Construct with `SimulationSession(config)` or the descriptor-based
    `SimulationSession.construct(...)`.
    """

    def __init__(self, config: Optional[ConfigLike] = None):
        self.running = False
        self.disposed = False
        self.pairing: Optional[PairingProtocol] = None
        self._build(config)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def construct(cls, neuron_specs: Sequence[Any], synapse_specs: Sequence[Any],
                  plasticity_config: Optional[Any] = None,
                  dt: float = 0.001) -> Tuple['SimulationSession', int]:
        """Build a session from descriptors; returns (session, neuron_count)."""
        config = SimulationConfig(
            neurons=[neuron_params(n) for n in neuron_specs],
            synapses=[synapse_params(s) for s in synapse_specs],
            plasticity=None if plasticity_config is None else stdp_params(plasticity_config),
            dt=dt,
        )
        session = cls(config)
        return session, session.neuron_count

    def _build(self, config: Optional[ConfigLike]):
        if config is None:
            config = SimulationConfig()
        elif isinstance(config, dict):
            config = SimulationConfig.from_dict(config)
        config.validate()

        # Everything is built into locals first so a bad config leaves the
        # running session and its stored config untouched.
        neurons = [build_neuron(n) for n in config.neurons]
        synapses = [Synapse.from_params(s) for s in config.synapses]
        stdp = None if config.plasticity is None else STDP.from_params(config.plasticity)
        simulator = Simulator(Network(neurons, synapses), config.dt, stdp)
        stored = copy.deepcopy(config)

        self.config = stored
        self.simulator = simulator
        self.rate_hz = config.rate_hz
        self.bias = np.zeros(len(neurons), dtype=np.float64)
        self._pulses: List[_Pulse] = []
        self.pairing = None
        self._pairing_events: deque = deque()
        self._pairing_origin = 0
        self._tick = 0
        self.history = _History(config.history_seconds)

        logger.info("Session built: %d neurons, %d synapses, dt=%g s, plasticity=%s",
                    len(neurons), len(synapses), config.dt,
                    "on" if stdp is not None else "off")

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def network(self) -> Network:
        return self.simulator.network

    @property
    def neuron_count(self) -> int:
        return self.simulator.network.n_neurons

    @property
    def time(self) -> float:
        return self.simulator.time

    @property
    def tick_count(self) -> int:
        return self._tick

    def weights(self) -> List[float]:
        return self.simulator.network.weights()

    def pulse_ticks(self, duration_s: float) -> int:
        """Convert a duration in seconds to a whole number of ticks (>= 1)."""
        return max(1, int(round(duration_s / self.simulator.dt)))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def _check_open(self):
        if self.disposed:
            raise SessionClosedError("Session has been disposed")

    def start(self):
        self._check_open()
        self.running = True

    def pause(self):
        self._check_open()
        self.running = False

    def resume(self):
        self.start()

    def dispose(self):
        """Release the simulator; further use raises SessionClosedError."""
        self.running = False
        self.disposed = True
        self.stop_pairing()
        self._pulses.clear()
        self.history.clear()

    def restart(self, config: Optional[ConfigLike] = None):
        """
        Reset every piece of mutable state to construction defaults.

        With a config, the session is rebuilt from it and it replaces the
        stored configuration for later restarts. If the config is rejected
        the session keeps running on its previous state, pairing included.
        """
        self._check_open()
        self._build(self.config if config is None else config)
        logger.info("Session restarted")

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def _valid_index(self, neuron_index: int, what: str) -> bool:
        if 0 <= neuron_index < self.neuron_count:
            return True
        logger.warning("%s ignored: neuron index %s out of range [0, %d)",
                       what, neuron_index, self.neuron_count)
        return False

    def set_external_current(self, neuron_index: int, value: float):
        """Persistent bias current on one neuron from the next tick on."""
        self._check_open()
        if self._valid_index(neuron_index, "set_external_current"):
            self.bias[neuron_index] = value

    def set_external_current_all(self, value: float):
        """Persistent bias current on every neuron from the next tick on."""
        self._check_open()
        self.bias[:] = value

    def inject_pulse(self, neuron_index: int, amplitude: float, duration_ticks: int):
        """Add `amplitude` to a neuron's input for the next duration_ticks ticks."""
        self._check_open()
        if duration_ticks <= 0:
            return
        if self._valid_index(neuron_index, "inject_pulse"):
            self._pulses.append(_Pulse(neuron_index, amplitude, int(duration_ticks)))

    def set_weight_bounds(self, w_min: float, w_max: float):
        """
        Change the STDP clamp; applies from the next plasticity update.

        Not persisted: restart() goes back to the configured bounds.
        """
        self._check_open()
        stdp = self.simulator.stdp
        if stdp is None:
            logger.warning("set_weight_bounds ignored: plasticity is disabled")
            return
        stdp.set_bounds(w_min, w_max)

    def set_rate(self, hz: float):
        self._check_open()
        if not hz > 0:
            raise ConfigurationError(f"rate must be > 0 Hz (got {hz})")
        self.rate_hz = hz

    # ------------------------------------------------------------------
    # Pairing experiment
    # ------------------------------------------------------------------

    def run_pairing(self, protocol: PairingProtocol):
        """Arm a pairing protocol; its first pulse fires on the next tick."""
        self._check_open()
        for idx in (protocol.pre_index, protocol.post_index):
            if not 0 <= idx < self.neuron_count:
                raise ConfigurationError(
                    f"Pairing: neuron index {idx} out of range [0, {self.neuron_count})")
        self.stop_pairing()
        self.pairing = protocol
        self._pairing_origin = self._tick
        self._pairing_events = deque(protocol.schedule())

    def stop_pairing(self):
        self.pairing = None
        self._pairing_events = deque()

    def _fire_due_pairing_events(self):
        if not self._pairing_events:
            return
        offset = self._tick - self._pairing_origin
        p = self.pairing
        while self._pairing_events and self._pairing_events[0][0] <= offset:
            _, index = self._pairing_events.popleft()
            self._pulses.append(_Pulse(index, p.amplitude, p.duration_ticks))
        if not self._pairing_events:
            self.pairing = None

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    def _coerce_extra(self, extra: Optional[Sequence[Any]]) -> Tuple[List[Optional[float]], int]:
        """Per-neuron extra currents, None where an entry is unusable."""
        if extra is None:
            return [], 0
        values = []
        skipped = 0
        for raw in list(extra)[:self.neuron_count]:
            value = _finite_or_none(raw)
            if value is None:
                skipped += 1
            values.append(value)
        return values, skipped

    def _tick_currents(self, extra: List[Optional[float]]) -> Tuple[np.ndarray, int]:
        """
        Sum bias, active pulses and extra currents per neuron.

        Each term is dropped on its own when it is not a finite number, so
        a bad entry never cancels the other inputs of that neuron.
        """
        currents = np.zeros(self.neuron_count, dtype=np.float64)
        skipped = 0
        for i, value in enumerate(self.bias):
            if math.isfinite(value):
                currents[i] += value
            else:
                skipped += 1
        for pulse in self._pulses:
            amplitude = _finite_or_none(pulse.amplitude)
            if amplitude is None:
                skipped += 1
            else:
                currents[pulse.index] += amplitude
        for i, value in enumerate(extra):
            if value is not None:
                currents[i] += value
        return currents, skipped

    def step(self, external_currents: Optional[Sequence[Any]] = None) -> StepResult:
        """
        Run one tick with bias + active pulses (+ optional extra currents).

        Entries that are not finite numbers are skipped individually and
        counted in `simulator.skipped_contributions` for this tick. Pairing
        events only fire once the inputs have been read.
        """
        self._check_open()
        extra, skipped = self._coerce_extra(external_currents)
        self._fire_due_pairing_events()

        currents, skipped_terms = self._tick_currents(extra)
        skipped += skipped_terms
        spikes = self.simulator.step(currents)
        if skipped:
            self.simulator.skipped_contributions += skipped
            logger.debug("Tick %d: skipped %d non-finite input term(s)", self._tick, skipped)

        for pulse in self._pulses:
            pulse.remaining -= 1
        self._pulses = [p for p in self._pulses if p.remaining > 0]
        self._tick += 1

        result = StepResult(self.simulator.time, spikes, self.weights())
        self.history.record(result)
        return result

    def run(self, n_steps: int) -> List[StepResult]:
        return [self.step() for _ in range(n_steps)]
