"""
Current-based synapse with an exponentially decaying kernel.

A synapse remembers only the most recent pre- and postsynaptic spike
times. Its current is driven by the last presynaptic spike; the timing
pair feeds the plasticity rule.
"""

from typing import Optional

import numpy as np

from .base import SynapseParams, ConfigurationError, synapse_params


class Synapse:
    """
    Connection from neuron `pre` to neuron `post` (both neuron ids).

    When the presynaptic neuron fires at time t_pre, current arrives after
    `delay` and then decays:

        I(t) = weight * exp(-(t - t_pre - delay) / tau),   t >= t_pre + delay

    Negative weights are inhibitory.
    """

    def __init__(self, pre: int, post: int, weight: float,
                 delay: float = 0.0, tau: float = 0.01):
        if not tau > 0:
            raise ConfigurationError(f"Synapse {pre}->{post}: tau must be > 0 (got {tau})")
        if not delay >= 0:
            raise ConfigurationError(f"Synapse {pre}->{post}: delay must be >= 0 (got {delay})")
        self.pre = pre
        self.post = post
        self.weight = weight
        self.delay = delay
        self.tau = tau

        self.last_pre_spike: Optional[float] = None
        self.last_post_spike: Optional[float] = None

    @classmethod
    def from_params(cls, desc) -> 'Synapse':
        p: SynapseParams = synapse_params(desc)
        return cls(p.pre, p.post, p.weight, p.delay, p.tau)

    def notify_pre_spike(self, t: float):
        """Called when the presynaptic neuron fires."""
        self.last_pre_spike = t

    def notify_post_spike(self, t: float):
        """Called when the postsynaptic neuron fires."""
        self.last_post_spike = t

    def compute_current(self, t: float) -> float:
        """Get postsynaptic current at time t."""
        if self.last_pre_spike is None:
            return 0.0

        onset = self.last_pre_spike + self.delay
        if t < onset:
            return 0.0

        return float(self.weight * np.exp(-(t - onset) / self.tau))

    def compute_delta_t(self) -> Optional[float]:
        """
        Post-minus-pre spike time, or None until both have been seen.

        Positive: post fired after pre (potentiation side of the window).
        """
        if self.last_pre_spike is None or self.last_post_spike is None:
            return None
        return self.last_post_spike - self.last_pre_spike

    def reset_dynamic_state(self):
        """Forget spike timestamps, preserve learned weight."""
        self.last_pre_spike = None
        self.last_post_spike = None

    def __repr__(self):
        return (f"Synapse({self.pre}->{self.post}, weight={self.weight:.4f}, "
                f"delay={self.delay}, tau={self.tau})")
