"""Iterative light-time solver for a single transmitter -> receiver leg.

The solver finds the propagation time between two moving link ends, given the
time at one of them. With the transmission time fixed (reference end is the
transmitter) it iterates

    t_rx(0)   = t_tx + |r_rx(t_tx) - r_tx(t_tx)| / c
    t_rx(k+1) = t_tx + |r_rx(t_rx(k)) - r_tx(t_tx)| / c + sum_i dt_i(t_tx, t_rx(k))

and symmetrically for a fixed reception time. Corrections dt_i are delays in
seconds; they do not perturb the link-end states.

Every call starts from scratch: no light-time result is cached between calls.
"""

from collections.abc import Callable
from typing import final

import equinox as eqx
import jax.numpy as jnp
import numpy as np
from jaxtyping import Array

from lightlink import constants as const
from lightlink.core.light_time_corrections import AbstractLightTimeCorrection
from lightlink.core.link_ends import LinkEndType
from lightlink.exceptions import (
    LightTimeConvergenceError,
    UnsupportedReferenceLinkEndError,
)
from lightlink.logger import logger

StateFunction = Callable[[float], Array]

# Relative floor on the convergence tolerance, in units of the light time.
# Below a few ulp of the light time the iteration only cycles on round-off.
_ROUNDOFF_FLOOR = 8.0 * float(np.finfo(np.float64).eps)


class LightTimeSolution(eqx.Module):
    """Resolved times and states of one leg."""

    light_time: float
    transmission_time: float
    reception_time: float
    transmitter_state: Array
    receiver_state: Array
    iterations: int


def geometric_light_time(transmitter_state: Array, receiver_state: Array) -> Array:
    """Straight-line distance between the two link ends divided by c."""
    return jnp.linalg.norm(receiver_state[:3] - transmitter_state[:3]) / const.c


@final
class LightTimeCalculator(eqx.Module):
    """Light-time solver for one leg with an additive correction stack.

    Attributes:
        transmitter_state: State function (time -> 6-vector) of the transmitting end.
        receiver_state: State function (time -> 6-vector) of the receiving end.
        corrections: Ordered correction stack, may be empty.
        tolerance: Absolute convergence tolerance on the light time in seconds.
        max_iterations: Iteration cap; exceeding it raises
            ``LightTimeConvergenceError``.
        iterate_corrections: Re-evaluate the corrections on every iterate. When
            False the corrections are evaluated once, on the converged
            geometric solution, and held fixed afterwards.
    """

    transmitter_state: StateFunction
    receiver_state: StateFunction
    corrections: tuple[AbstractLightTimeCorrection, ...]
    tolerance: float
    max_iterations: int
    iterate_corrections: bool

    def __init__(
        self,
        transmitter_state: StateFunction,
        receiver_state: StateFunction,
        corrections=(),
        tolerance: float = 1e-12,
        max_iterations: int = 50,
        iterate_corrections: bool = True,
    ):
        """Initialize the light-time calculator."""
        if tolerance <= 0.0:
            raise ValueError(f"Light-time tolerance must be positive, got {tolerance}.")
        if max_iterations < 1:
            raise ValueError(
                f"Light-time iteration cap must be at least 1, got {max_iterations}."
            )
        self.transmitter_state = transmitter_state
        self.receiver_state = receiver_state
        self.corrections = tuple(corrections)
        self.tolerance = float(tolerance)
        self.max_iterations = int(max_iterations)
        self.iterate_corrections = bool(iterate_corrections)

    @classmethod
    def from_settings(
        cls, transmitter_state, receiver_state, corrections=(), convergence=None
    ):
        """Build a calculator from ``LightTimeConvergenceSettings``."""
        if convergence is None:
            return cls(transmitter_state, receiver_state, corrections)
        return cls(
            transmitter_state,
            receiver_state,
            corrections,
            tolerance=convergence.tolerance,
            max_iterations=convergence.max_iterations,
            iterate_corrections=convergence.iterate_corrections,
        )

    def total_correction(
        self,
        transmitter_state,
        receiver_state,
        transmission_time,
        reception_time,
        ancillary=None,
        leg_index=0,
    ) -> float:
        """Sum of all corrections in seconds."""
        total = 0.0
        for correction in self.corrections:
            total += float(
                correction.value(
                    transmitter_state,
                    receiver_state,
                    transmission_time,
                    reception_time,
                    ancillary=ancillary,
                    leg_index=leg_index,
                )
            )
        return total

    def correction_partials(
        self, solution: LightTimeSolution, link_end: LinkEndType, ancillary=None, leg_index=0
    ) -> Array:
        """Summed d(delay)/d(position) of ``link_end`` over the correction stack."""
        partial = jnp.zeros(3)
        for correction in self.corrections:
            partial = partial + correction.partial_wrt_link_end_position(
                solution.transmitter_state,
                solution.receiver_state,
                solution.transmission_time,
                solution.reception_time,
                link_end,
                ancillary=ancillary,
                leg_index=leg_index,
            )
        return partial

    def correction_time_partials(
        self, solution: LightTimeSolution, link_end: LinkEndType, ancillary=None, leg_index=0
    ) -> Array:
        """Summed explicit d(delay)/d(time of ``link_end``) over the correction stack."""
        rate = jnp.zeros(())
        for correction in self.corrections:
            rate = rate + correction.partial_wrt_link_end_time(
                solution.transmitter_state,
                solution.receiver_state,
                solution.transmission_time,
                solution.reception_time,
                link_end,
                ancillary=ancillary,
                leg_index=leg_index,
            )
        return rate

    def solve(
        self,
        reference_time: float,
        reference_end: LinkEndType,
        ancillary=None,
        leg_index: int = 0,
    ) -> LightTimeSolution:
        """Resolve both end-point times and states of the leg.

        Args:
            reference_time: Time at ``reference_end`` in seconds.
            reference_end: ``TRANSMITTER`` to fix the transmission time and solve
                for reception, ``RECEIVER`` to fix the reception time and solve
                for transmission.
            ancillary: Optional ``ObservationAncillarySettings`` forwarded to the
                corrections.
            leg_index: Position of this leg in its observable, used by
                corrections that read per-leg ancillary data.

        Returns:
            A fresh ``LightTimeSolution``.

        Raises:
            UnsupportedReferenceLinkEndError: If ``reference_end`` is neither the
                transmitter nor the receiver.
            LightTimeConvergenceError: If the iteration cap is exceeded.
        """
        if reference_end == LinkEndType.TRANSMITTER:
            fixed_is_transmitter = True
        elif reference_end == LinkEndType.RECEIVER:
            fixed_is_transmitter = False
        else:
            raise UnsupportedReferenceLinkEndError(
                f"A single leg can only be anchored at its transmitter or receiver, "
                f"got {LinkEndType(reference_end).name}."
            )

        reference_time = float(reference_time)
        if fixed_is_transmitter:
            fixed_state = self.transmitter_state(reference_time)
            moving_function = self.receiver_state
            direction = 1.0
        else:
            fixed_state = self.receiver_state(reference_time)
            moving_function = self.transmitter_state
            direction = -1.0

        def arrange(moving_time, moving_state):
            # (tx state, rx state, tx time, rx time)
            if fixed_is_transmitter:
                return fixed_state, moving_state, reference_time, moving_time
            return moving_state, fixed_state, moving_time, reference_time

        # Zeroth iterate: moving end evaluated at the reference time
        initial_tx_state, initial_rx_state, _, _ = arrange(
            reference_time, moving_function(reference_time)
        )
        light_time = float(geometric_light_time(initial_tx_state, initial_rx_state))

        apply_corrections = self.iterate_corrections and len(self.corrections) > 0
        corrections_pending = len(self.corrections) > 0 and not self.iterate_corrections
        frozen_correction = 0.0
        change = np.inf
        for iteration in range(1, self.max_iterations + 1):
            moving_time = reference_time + direction * light_time
            tx_state, rx_state, tx_time, rx_time = arrange(
                moving_time, moving_function(moving_time)
            )
            new_light_time = float(geometric_light_time(tx_state, rx_state))
            if apply_corrections:
                new_light_time += self.total_correction(
                    tx_state, rx_state, tx_time, rx_time, ancillary, leg_index
                )
            else:
                new_light_time += frozen_correction

            change = abs(new_light_time - light_time)
            light_time = new_light_time
            if change <= max(self.tolerance, _ROUNDOFF_FLOOR * abs(light_time)):
                if corrections_pending:
                    # Geometry has converged: evaluate the corrections once
                    frozen_correction = self.total_correction(
                        tx_state, rx_state, tx_time, rx_time, ancillary, leg_index
                    )
                    corrections_pending = False
                    light_time += frozen_correction
                    continue
                break
        else:
            raise LightTimeConvergenceError(reference_time, self.max_iterations, change)

        moving_time = reference_time + direction * light_time
        tx_state, rx_state, tx_time, rx_time = arrange(
            moving_time, moving_function(moving_time)
        )
        logger.debug(
            "Light time %.15e s converged in %d iteration(s)", light_time, iteration
        )
        return LightTimeSolution(
            light_time=light_time,
            transmission_time=tx_time,
            reception_time=rx_time,
            transmitter_state=tx_state,
            receiver_state=rx_state,
            iterations=iteration,
        )

    def light_time(
        self,
        reference_time: float,
        reference_end: LinkEndType,
        ancillary=None,
        leg_index: int = 0,
    ) -> float:
        """Scalar light time for a reference time at ``reference_end``."""
        return self.solve(reference_time, reference_end, ancillary, leg_index).light_time
