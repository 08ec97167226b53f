# Fixed-step ODE integrators
# FORBIDDEN: logging, any I/O

from enum import Enum
from typing import Callable

import numpy as np

DerivativeFn = Callable[[np.ndarray], np.ndarray]


class Integrator(str, Enum):
    RK4 = "rk4"
    SEMI_IMPLICIT_EULER = "semi_implicit_euler"


def rk4_step(state: np.ndarray, deriv_fn: DerivativeFn, dt: float) -> np.ndarray:
    """Classic 4th-order Runge-Kutta step.

    Args:
        state: Current state vector
        deriv_fn: Function returning d(state)/dt
        dt: Step size in s

    Returns:
        New state vector (input is not modified)
    """
    k1 = deriv_fn(state)
    k2 = deriv_fn(state + 0.5 * dt * k1)
    k3 = deriv_fn(state + 0.5 * dt * k2)
    k4 = deriv_fn(state + dt * k3)
    return state + (dt / 6.0) * (k1 + 2.0 * k2 + 2.0 * k3 + k4)


def semi_implicit_euler_step(state: np.ndarray, deriv_fn: DerivativeFn, dt: float) -> np.ndarray:
    """Single derivative evaluation applied over the full step.

    Models that want the symplectic ordering (velocities first, positions from
    the updated velocities) call this once per sub-system in that order.
    """
    return state + dt * deriv_fn(state)


_STEPPERS = {
    Integrator.RK4: rk4_step,
    Integrator.SEMI_IMPLICIT_EULER: semi_implicit_euler_step,
}


def integrate(integrator: Integrator, state: np.ndarray, deriv_fn: DerivativeFn, dt: float) -> np.ndarray:
    """Advance ``state`` by one step with the selected integrator."""
    return _STEPPERS[Integrator(integrator)](np.asarray(state, dtype=np.float64), deriv_fn, dt)
