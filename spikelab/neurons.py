"""
Neuron models: a uniform single-tick contract plus its concrete variants.

Neuron kinds form a closed set (NeuronKind). Every kind exposes the same
`step(input_current, dt) -> bool` operation and `reset()`; new models are
added by extending NeuronKind and the builder table below.
  - Neuron: shared identity, threshold and voltage state
  - LIFNeuron: leaky integrate-and-fire, forward-Euler integration
"""

from enum import Enum

from .base import LIFParams, ConfigurationError, neuron_params


class NeuronKind(Enum):
    LIF = "lif"


# ============================================================================
# BASE CONTRACT
# ============================================================================

class Neuron:
    """
    Point neuron with a single membrane-voltage state variable.

    Voltage starts at, and is reset to, reset_voltage. Subclasses implement
    `step` and must never leave voltage >= threshold between ticks.
    """

    kind: NeuronKind

    def __init__(self, neuron_id: int, threshold: float, reset_voltage: float = 0.0):
        self.id = neuron_id
        self.threshold = threshold
        self.reset_voltage = reset_voltage
        self.voltage = reset_voltage

    def step(self, input_current: float, dt: float) -> bool:
        raise NotImplementedError

    def reset(self):
        """Unconditionally return the membrane to reset_voltage."""
        self.voltage = self.reset_voltage

    def __repr__(self):
        return (f"{type(self).__name__}(id={self.id}, threshold={self.threshold}, "
                f"voltage={self.voltage:.4f})")


# ============================================================================
# LEAKY INTEGRATE-AND-FIRE
# ============================================================================

class LIFNeuron(Neuron):
    """
    Leaky integrate-and-fire neuron.

        tau * dV/dt = -V + R * I

    integrated with one explicit Euler step per tick. Crossing threshold
    resets the membrane and reports exactly one spike, however large the
    overshoot.
    """

    kind = NeuronKind.LIF

    def __init__(self, neuron_id: int, threshold: float, reset_voltage: float = 0.0,
                 tau: float = 0.02, resistance: float = 1.0):
        if not tau > 0:
            raise ConfigurationError(f"Neuron {neuron_id}: tau must be > 0 (got {tau})")
        super().__init__(neuron_id, threshold, reset_voltage)
        self.tau = tau
        self.resistance = resistance

    @classmethod
    def from_params(cls, params: LIFParams) -> 'LIFNeuron':
        return cls(params.id, params.threshold, params.reset_voltage,
                   params.tau, params.resistance)

    def step(self, input_current: float, dt: float) -> bool:
        """
        Advance the membrane by one tick.

        Returns True if the neuron spiked this step.
        """
        self.voltage += (dt / self.tau) * (-self.voltage + self.resistance * input_current)

        if self.voltage >= self.threshold:
            self.reset()
            return True
        return False


# ============================================================================
# BUILDER
# ============================================================================

_BUILDERS = {
    NeuronKind.LIF: LIFNeuron.from_params,
}


def build_neuron(desc) -> Neuron:
    """Create a neuron from a descriptor dict or LIFParams, dispatching on kind."""
    params = neuron_params(desc)
    try:
        kind = NeuronKind(str(params.kind).lower())
    except ValueError:
        raise ConfigurationError(
            f"Neuron {params.id}: unknown neuron kind {params.kind!r}") from None
    return _BUILDERS[kind](params)
