# Analytic step-steer response
# FORBIDDEN: logging, any I/O

import math
from dataclasses import dataclass
from typing import Any, Dict

import numpy as np

from ..core.types import VehicleParams
from .linalg import Matrix2, matrix_exponential
from .state_space import StateSpace, build_state_space


@dataclass(frozen=True)
class StepCurves:
    t: np.ndarray
    yaw_rate: np.ndarray
    ay: np.ndarray
    vy: np.ndarray


@dataclass(frozen=True)
class StepSteerTheory:
    """Second-order characteristics of the yaw response to a steer step.

    Attributes:
        system: State-space model the values were derived from
        gain_r_delta: Steady yaw rate per rad of steer (1/s)
        gain_vy_delta: Steady lateral velocity per rad of steer (m/s)
        gain_ay_delta: Steady lateral acceleration per rad of steer (m/s²)
        omega_n: Undamped natural frequency (rad/s), 0 if det(A) <= 0
        zeta: Damping ratio, 0 if omega_n is 0
        settling_time: 4 / (zeta omega_n), inf when the response does not decay
        overshoot: exp(-pi zeta / sqrt(1 - zeta²)) for zeta < 1, else 0
    """
    system: StateSpace
    gain_r_delta: float
    gain_vy_delta: float
    gain_ay_delta: float
    omega_n: float
    zeta: float
    settling_time: float
    overshoot: float

    @property
    def underdamped(self) -> bool:
        return 0.0 < self.zeta < 1.0

    def step_curves(self, times: np.ndarray, delta: float, t_step: float = 0.0) -> StepCurves:
        """Exact response to a steer step of ``delta`` rad applied at ``t_step``.

        x(tau) = A⁻¹ (exp(A tau) - I) B delta for tau >= 0, zero before.
        """
        times = np.asarray(times, dtype=np.float64)
        a = self.system.a
        b = self.system.b.scaled(delta)
        a_inv = a.inverse()
        identity = Matrix2.identity()
        vx = self.system.speed

        vy = np.zeros_like(times)
        yaw = np.zeros_like(times)
        ay = np.zeros_like(times)
        for i, t in enumerate(times):
            tau = t - t_step
            if tau < 0:
                continue
            x = a_inv.matmul(matrix_exponential(a, tau).minus(identity)).dot(b)
            x_dot = a.dot(x)
            vy[i] = x.x
            yaw[i] = x.y
            ay[i] = vx * x.y + x_dot.x + b.x
        return StepCurves(t=times, yaw_rate=yaw, ay=ay, vy=vy)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "speed": self.system.speed,
            "gainRDelta": self.gain_r_delta,
            "gainVyDelta": self.gain_vy_delta,
            "gainAyDelta": self.gain_ay_delta,
            "omegaN": self.omega_n,
            "zeta": self.zeta,
            "settlingTime": self.settling_time,
            "overshoot": self.overshoot,
        }


def create_step_steer_theory(vehicle: VehicleParams, speed: float) -> StepSteerTheory:
    """Derive step-steer characteristics from the linear bicycle at ``speed``.

    Raises:
        SingularSystem: If A is singular (no finite steady state)
    """
    system = build_state_space(vehicle, speed)
    a, b = system.a, system.b

    steady = a.inverse().dot(b).scaled(-1.0)
    det = a.det()
    omega_n = math.sqrt(det) if det > 0 else 0.0
    zeta = -a.trace() / (2.0 * omega_n) if omega_n > 0 else 0.0

    decay = zeta * omega_n
    settling_time = 4.0 / decay if decay > 0 else math.inf
    if 0.0 <= zeta < 1.0 and omega_n > 0:
        overshoot = math.exp(-math.pi * zeta / math.sqrt(1.0 - zeta * zeta))
    else:
        overshoot = 0.0

    return StepSteerTheory(
        system=system,
        gain_r_delta=steady.y,
        gain_vy_delta=steady.x,
        gain_ay_delta=system.speed * steady.y,
        omega_n=omega_n,
        zeta=zeta,
        settling_time=settling_time,
        overshoot=overshoot,
    )
