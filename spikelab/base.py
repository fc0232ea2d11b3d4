"""
Shared data structures, parameters, errors, and configuration loading.

All parameter dataclasses and constants used across the simulator.

Units are SI throughout: seconds for time constants, delays and dt,
dimensionless for voltage, current and weight (threshold ~ 1).
Default STDP values follow the classic pairwise window
(Bi & Poo 1998; Song et al. 2000) rescaled to seconds.
"""

import json
import math
import logging
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger("spikelab.config")


# ============================================================================
# CONSTANTS
# ============================================================================

DEFAULT_DT = 0.001              # Tick duration (s)
DEFAULT_HISTORY_SECONDS = 10.0  # Rolling history kept by a session (s)
DEFAULT_RATE_HZ = 60.0          # Suggested stepping cadence for drivers


# ============================================================================
# ERRORS
# ============================================================================

class SpikelabError(Exception):
    """Base class for every error raised by spikelab."""


class ConfigurationError(SpikelabError, ValueError):
    """Invalid construction-time configuration (bad tau, dt, duplicate id...)."""


class UnknownNeuronError(SpikelabError, LookupError):
    """A neuron id was requested that the network does not contain."""

    def __init__(self, neuron_id):
        super().__init__(f"Network: unknown neuron_id={neuron_id}")
        self.neuron_id = neuron_id


class SessionClosedError(SpikelabError, RuntimeError):
    """A disposed session was asked to do work."""


# ============================================================================
# PARAMETER DATACLASSES
# ============================================================================

@dataclass
class LIFParams:
    """
    Leaky integrate-and-fire neuron descriptor.

    tau is the membrane time constant (s); resistance is the
    input-to-voltage gain.
    """
    id: int
    threshold: float = 1.0
    reset_voltage: float = 0.0
    tau: float = 0.02           # Membrane time constant (s)
    resistance: float = 1.0
    kind: str = "lif"

    def validate(self):
        if not self.tau > 0:
            raise ConfigurationError(
                f"Neuron {self.id}: tau must be > 0 (got {self.tau})")


@dataclass
class SynapseParams:
    """Current-based synapse descriptor with an exponential kernel."""
    pre: int
    post: int
    weight: float = 1.0         # Signed; negative = inhibitory
    delay: float = 0.0          # Propagation delay (s)
    tau: float = 0.01           # Current decay time constant (s)

    def validate(self):
        if not self.tau > 0:
            raise ConfigurationError(
                f"Synapse {self.pre}->{self.post}: tau must be > 0 (got {self.tau})")
        if not self.delay >= 0:
            raise ConfigurationError(
                f"Synapse {self.pre}->{self.post}: delay must be >= 0 (got {self.delay})")


@dataclass
class STDPParams:
    """
    Pairwise additive STDP parameters.

    Bounds default to an unbounded weight range; set w_min / w_max to clamp.
    """
    tau_plus: float = 0.02      # Potentiation window (s)
    tau_minus: float = 0.02     # Depression window (s)
    a_plus: float = 0.05        # Potentiation amplitude
    a_minus: float = 0.04       # Depression amplitude (LTD < LTP here)
    w_min: float = -math.inf
    w_max: float = math.inf

    def validate(self):
        if not (self.tau_plus > 0 and self.tau_minus > 0):
            raise ConfigurationError(
                f"STDP: tau_plus and tau_minus must be > 0 "
                f"(got {self.tau_plus}, {self.tau_minus})")
        if self.a_plus < 0 or self.a_minus < 0:
            raise ConfigurationError(
                f"STDP: a_plus and a_minus are magnitudes and must be >= 0 "
                f"(got {self.a_plus}, {self.a_minus})")
        if self.w_min > self.w_max:
            raise ConfigurationError(
                f"STDP: w_min ({self.w_min}) must not exceed w_max ({self.w_max})")


@dataclass
class SimulationConfig:
    """Everything needed to (re)build a session."""
    neurons: List[LIFParams] = field(default_factory=lambda: [
        LIFParams(id=0), LIFParams(id=1),
    ])
    synapses: List[SynapseParams] = field(default_factory=lambda: [
        SynapseParams(pre=0, post=1, weight=1.0),
    ])
    plasticity: Optional[STDPParams] = field(default_factory=STDPParams)
    dt: float = DEFAULT_DT
    history_seconds: float = DEFAULT_HISTORY_SECONDS
    rate_hz: float = DEFAULT_RATE_HZ

    def validate(self):
        if not self.dt > 0:
            raise ConfigurationError(f"dt must be > 0 (got {self.dt})")
        if not self.history_seconds > 0:
            raise ConfigurationError(
                f"history_seconds must be > 0 (got {self.history_seconds})")
        if not self.rate_hz > 0:
            raise ConfigurationError(f"rate_hz must be > 0 (got {self.rate_hz})")
        for n in self.neurons:
            n.validate()
        for s in self.synapses:
            s.validate()
        if self.plasticity is not None:
            self.plasticity.validate()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SimulationConfig':
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Simulation config must be a mapping (got {type(data).__name__})")
        defaults = cls()
        neurons = data.get("neurons")
        synapses = data.get("synapses")
        plasticity = data.get("plasticity", defaults.plasticity)
        return cls(
            neurons=(defaults.neurons if neurons is None
                     else [neuron_params(n) for n in neurons]),
            synapses=(defaults.synapses if synapses is None
                      else [synapse_params(s) for s in synapses]),
            plasticity=(None if plasticity is None else stdp_params(plasticity)),
            dt=_number(data, "dt", defaults.dt),
            history_seconds=_number(data, "history_seconds", defaults.history_seconds),
            rate_hz=_number(data, "rate_hz", defaults.rate_hz),
        )


# ============================================================================
# DESCRIPTOR PARSING
# ============================================================================

def _number(data: Dict[str, Any], key: str, default: float) -> float:
    value = data.get(key, default)
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{key} must be a number (got {value!r})") from exc


# Front-end payloads use camelCase keys.
_ALIASES = {
    "resetVoltage": "reset_voltage",
    "tauPlus": "tau_plus",
    "tauMinus": "tau_minus",
    "aPlus": "a_plus",
    "aMinus": "a_minus",
    "wMin": "w_min",
    "wMax": "w_max",
}


def _normalise(desc: Dict[str, Any], required: List[str], what: str) -> Dict[str, Any]:
    if not isinstance(desc, dict):
        raise ConfigurationError(f"{what} descriptor must be a mapping: {desc!r}")
    out = {_ALIASES.get(k, k): v for k, v in desc.items()}
    missing = [k for k in required if out.get(k) is None]
    if missing:
        raise ConfigurationError(f"{what} descriptor is missing {', '.join(missing)}: {desc!r}")
    return {k: v for k, v in out.items() if v is not None}


def neuron_params(desc) -> LIFParams:
    """Build LIFParams from a descriptor dict (or pass an instance through)."""
    if isinstance(desc, LIFParams):
        return desc
    d = _normalise(desc, ["id", "threshold"], "Neuron")
    try:
        return LIFParams(**d)
    except TypeError as exc:
        raise ConfigurationError(f"Neuron descriptor {desc!r}: {exc}") from exc


def synapse_params(desc) -> SynapseParams:
    """Build SynapseParams from a descriptor dict (or pass an instance through)."""
    if isinstance(desc, SynapseParams):
        return desc
    d = _normalise(desc, ["pre", "post", "weight"], "Synapse")
    try:
        return SynapseParams(**d)
    except TypeError as exc:
        raise ConfigurationError(f"Synapse descriptor {desc!r}: {exc}") from exc


def stdp_params(desc) -> STDPParams:
    """Build STDPParams from a descriptor dict (or pass an instance through)."""
    if isinstance(desc, STDPParams):
        return desc
    d = _normalise(desc, ["tau_plus", "tau_minus", "a_plus", "a_minus"], "Plasticity")
    try:
        return STDPParams(**d)
    except TypeError as exc:
        raise ConfigurationError(f"Plasticity descriptor {desc!r}: {exc}") from exc


# ============================================================================
# CONFIG LOADING
# ============================================================================

def load_config(overrides: Optional[Dict[str, Any]] = None,
                config_path: Optional[str] = None) -> SimulationConfig:
    """
    Build a SimulationConfig from defaults, a JSON file, and/or overrides.

    File values are applied first, then ``overrides`` on top. Top-level keys
    replace the default wholesale (a ``neurons`` list replaces the demo
    neurons, it is not merged element-wise).
    """
    data: Dict[str, Any] = {}

    if config_path is not None:
        path = Path(config_path).expanduser()
        try:
            with open(path) as fh:
                loaded = json.load(fh)
        except (OSError, json.JSONDecodeError) as exc:
            raise ConfigurationError(f"Cannot read config {path}: {exc}") from exc
        if not isinstance(loaded, dict):
            raise ConfigurationError(
                f"Config {path} must hold a JSON object (got {type(loaded).__name__})")
        data.update(loaded)
        logger.info("Loaded simulation config from %s", path)

    if overrides:
        data.update(overrides)

    config = SimulationConfig.from_dict(data)
    config.validate()
    return config
