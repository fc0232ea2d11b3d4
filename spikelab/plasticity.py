"""
Pairwise additive spike-timing-dependent plasticity.

    dt > 0 (post after pre):  w += A+ * exp(-dt / tau+)     LTP
    dt < 0 (post before pre): w -= A- * exp( dt / tau-)     LTD
    dt == 0:                  no change

The update does not depend on the current weight; weights stay bounded
only through the [w_min, w_max] clamp applied after every nonzero update.

References:
    Bi GQ, Poo MM (1998). J Neurosci 18(24):10464-10472.
    Song S, Miller KD, Abbott LF (2000). Nat Neurosci 3(9):919-926.
"""

import math

import numpy as np

from .base import STDPParams, ConfigurationError, stdp_params


class STDP:
    """Stateless STDP rule; each `apply` touches exactly one synapse."""

    def __init__(self, tau_plus: float = 0.02, tau_minus: float = 0.02,
                 a_plus: float = 0.05, a_minus: float = 0.04,
                 w_min: float = -math.inf, w_max: float = math.inf):
        STDPParams(tau_plus, tau_minus, a_plus, a_minus, w_min, w_max).validate()
        self.tau_plus = tau_plus
        self.tau_minus = tau_minus
        self.a_plus = a_plus
        self.a_minus = a_minus
        self.w_min = w_min
        self.w_max = w_max

    @classmethod
    def from_params(cls, desc) -> 'STDP':
        p = stdp_params(desc)
        return cls(p.tau_plus, p.tau_minus, p.a_plus, p.a_minus, p.w_min, p.w_max)

    def weight_change(self, delta_t: float) -> float:
        """Signed, unclamped weight update for a post-minus-pre timing offset."""
        if delta_t > 0:
            return float(self.a_plus * np.exp(-delta_t / self.tau_plus))
        if delta_t < 0:
            return float(-self.a_minus * np.exp(delta_t / self.tau_minus))
        return 0.0

    def apply(self, synapse, delta_t: float):
        """Update synapse.weight in place for one spike pairing."""
        if delta_t == 0:
            return

        synapse.weight = float(np.clip(synapse.weight + self.weight_change(delta_t),
                                       self.w_min, self.w_max))

    def set_bounds(self, w_min: float, w_max: float):
        """Replace the clamp bounds; existing weights are left untouched."""
        if w_min > w_max:
            raise ConfigurationError(
                f"STDP: w_min ({w_min}) must not exceed w_max ({w_max})")
        self.w_min = w_min
        self.w_max = w_max

    def __repr__(self):
        return (f"STDP(tau_plus={self.tau_plus}, tau_minus={self.tau_minus}, "
                f"a_plus={self.a_plus}, a_minus={self.a_minus}, "
                f"w_min={self.w_min}, w_max={self.w_max})")
