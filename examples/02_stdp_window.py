"""
Example 02: STDP Learning Window

Prints the weight change produced by a single pre/post pairing as a
function of the timing offset (post minus pre), for the default rule.

Level: Beginner
Runtime: instant
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import numpy as np
from spikelab import STDP


def main():
    print("=== Example 02: STDP Learning Window ===\n")

    rule = STDP(tau_plus=0.02, tau_minus=0.02, a_plus=0.05, a_minus=0.04)
    print(rule, "\n")

    for delta_t in np.linspace(-0.06, 0.06, 25):
        dw = rule.weight_change(delta_t)
        bar = '+' * int(round(dw * 400)) if dw > 0 else '-' * int(round(-dw * 400))
        print(f"  dt = {delta_t * 1000:+6.1f} ms | dw = {dw:+.5f} {bar}")


if __name__ == "__main__":
    main()
