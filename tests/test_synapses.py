"""
Tests for the current-based synapse.
"""

import math

import numpy as np
import pytest

from spikelab import Synapse, ConfigurationError


class TestSynapseCurrent:
    """Test suite for the exponential current kernel."""

    def test_synapse_initialization(self):
        """Test synapse initializes with correct parameters."""
        synapse = Synapse(pre=0, post=1, weight=5.0, delay=0.002, tau=0.01)

        assert synapse.pre == 0 and synapse.post == 1
        assert synapse.weight == 5.0
        assert synapse.delay == 0.002
        assert synapse.last_pre_spike is None
        assert synapse.last_post_spike is None

    def test_no_current_without_pre_spike(self):
        synapse = Synapse(0, 1, weight=5.0)
        synapse.notify_post_spike(0.0)
        assert synapse.compute_current(0.0) == 0.0
        assert synapse.compute_current(1.0) == 0.0

    def test_synaptic_delay(self):
        """Test that synaptic transmission is delayed."""
        synapse = Synapse(0, 1, weight=5.0, delay=0.002)
        synapse.notify_pre_spike(0.010)

        # No current before onset
        for t in np.linspace(0.0, 0.0119, 50):
            assert synapse.compute_current(t) == 0.0

        # Full weight exactly at onset
        onset = synapse.last_pre_spike + synapse.delay
        assert synapse.compute_current(onset) == 5.0
        assert synapse.compute_current(0.0125) == pytest.approx(5.0 * math.exp(-0.05))

    def test_exponential_decay(self):
        """Test the kernel value one tau after onset."""
        synapse = Synapse(0, 1, weight=2.0, delay=0.001, tau=0.01)
        synapse.notify_pre_spike(0.0)

        assert synapse.compute_current(0.011) == pytest.approx(2.0 * math.exp(-1.0))

    def test_monotone_decay(self):
        """Test that current magnitude shrinks as time moves past onset."""
        for weight in (1.5, -1.5):
            synapse = Synapse(0, 1, weight=weight, delay=0.003, tau=0.005)
            synapse.notify_pre_spike(0.0)

            magnitudes = [abs(synapse.compute_current(t))
                          for t in np.linspace(0.003, 0.1, 200)]
            assert all(a > b for a, b in zip(magnitudes, magnitudes[1:]))

    def test_inhibitory_current_is_negative(self):
        synapse = Synapse(0, 1, weight=-4.0)
        synapse.notify_pre_spike(0.0)
        assert synapse.compute_current(0.0) == -4.0
        assert synapse.compute_current(0.005) < 0.0

    def test_only_latest_pre_spike_counts(self):
        synapse = Synapse(0, 1, weight=1.0, tau=0.01)
        synapse.notify_pre_spike(0.0)
        synapse.notify_pre_spike(0.05)

        assert synapse.last_pre_spike == 0.05
        assert synapse.compute_current(0.04) == 0.0
        assert synapse.compute_current(0.05) == pytest.approx(1.0)


class TestSynapseTiming:
    """Test suite for spike timestamps and delta-t."""

    def test_delta_t_absent_until_both_seen(self):
        synapse = Synapse(0, 1, weight=1.0)
        assert synapse.compute_delta_t() is None

        synapse.notify_pre_spike(0.010)
        assert synapse.compute_delta_t() is None

        synapse.notify_post_spike(0.015)
        assert synapse.compute_delta_t() == pytest.approx(0.005)

    def test_delta_t_sign(self):
        synapse = Synapse(0, 1, weight=1.0)
        synapse.notify_post_spike(0.010)
        synapse.notify_pre_spike(0.013)
        assert synapse.compute_delta_t() == pytest.approx(-0.003)

    def test_reset_dynamic_state_keeps_weight(self):
        synapse = Synapse(0, 1, weight=1.7)
        synapse.notify_pre_spike(0.0)
        synapse.notify_post_spike(0.001)

        synapse.reset_dynamic_state()

        assert synapse.weight == 1.7
        assert synapse.compute_delta_t() is None
        assert synapse.compute_current(0.001) == 0.0


class TestSynapseConfig:

    @pytest.mark.parametrize("kwargs", [
        {"tau": 0.0},
        {"tau": -0.01},
        {"delay": -0.001},
    ])
    def test_invalid_parameters(self, kwargs):
        with pytest.raises(ConfigurationError):
            Synapse(0, 1, weight=1.0, **kwargs)

    def test_from_descriptor(self):
        synapse = Synapse.from_params({"pre": 2, "post": 5, "weight": -0.5})
        assert (synapse.pre, synapse.post, synapse.weight) == (2, 5, -0.5)
        assert synapse.delay == 0.0
        assert synapse.tau == 0.01

    def test_descriptor_missing_weight(self):
        with pytest.raises(ConfigurationError, match="weight"):
            Synapse.from_params({"pre": 0, "post": 1})
