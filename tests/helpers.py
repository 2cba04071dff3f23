"""This file contains reusable helper functions for the test suite."""

import numpy as np
from scipy.optimize import brentq

from lightlink import constants as const
from lightlink.core.link_ends import LinkEndId

STATION = LinkEndId("Earth", "DSS-63")
SECOND_STATION = LinkEndId("Earth", "DSS-14")


def reference_light_time(transmitter_state, receiver_state, time, anchored_at_transmitter):
    """Geometric light time from an independent root find.

    Solves ``c * T = |r_rx(t_rx) - r_tx(t_tx)|`` for T with scipy's brentq,
    with either the transmission or the reception time fixed to ``time``.

    Args:
        transmitter_state (callable): State function of the transmitter.
        receiver_state (callable): State function of the receiver.
        time (float): Fixed time in seconds.
        anchored_at_transmitter (bool): Whether ``time`` is the transmission
            time (True) or the reception time (False).
    """

    def residual(light_time):
        if anchored_at_transmitter:
            tx = np.asarray(transmitter_state(time))
            rx = np.asarray(receiver_state(time + light_time))
        else:
            tx = np.asarray(transmitter_state(time - light_time))
            rx = np.asarray(receiver_state(time))
        return const.c * light_time - np.linalg.norm(rx[:3] - tx[:3])

    guess = np.linalg.norm(
        np.asarray(receiver_state(time))[:3] - np.asarray(transmitter_state(time))[:3]
    ) / const.c
    return brentq(residual, 0.5 * guess, 2.0 * guess + 1.0, xtol=1e-15, rtol=1e-15)


def central_difference(function, x, step):
    """Centred finite-difference derivative of a scalar function."""
    return (float(function(x + step)) - float(function(x - step))) / (2.0 * step)
