# Kinematic single-track model
# FORBIDDEN: logging, any I/O

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from ..core.guards import enforce_dt_bounds, validate_timestep
from ..core.integrators import Integrator, rk4_step, semi_implicit_euler_step
from ..core.types import Geometry, SimInputs, Telemetry
from .base import ModelParams, VehicleModel, draw_noise, param


@dataclass(frozen=True)
class UnicycleParams(ModelParams):
    v: float = param(25.0, 0.0, 100.0, "Speed", "m/s", "motion")
    l_eff: float = param(2.7, 0.5, 10.0, "Effective wheelbase", "m", "geometry")
    noise_std: float = param(0.02, 0.0, 1.0, "Yaw rate noise", "rad/s", "noise")


@dataclass(frozen=True)
class UnicycleState:
    t: float = 0.0
    x: float = 0.0
    y: float = 0.0
    psi: float = 0.0
    yaw_rate: float = 0.0
    curvature: float = 0.0
    dt_clamped: bool = False


class UnicycleModel(VehicleModel):
    """Constant-speed kinematic model: yaw rate = v * tan(steer) / L_eff.

    There is no tyre slip, so sideslip is zero and lateral acceleration is the
    centripetal term v * r.
    """

    id = "unicycle"
    label = "Kinematic unicycle"
    params_class = UnicycleParams

    def init(self, params: UnicycleParams) -> UnicycleState:
        return UnicycleState()

    def step(
        self,
        state: UnicycleState,
        inputs: SimInputs,
        dt: float,
        params: UnicycleParams,
        rng: Optional[np.random.Generator] = None,
    ) -> UnicycleState:
        guard = enforce_dt_bounds(self.id, validate_timestep(dt))
        h = guard.dt
        v = params.v

        curvature = math.tan(inputs.steer) / params.l_eff
        yaw_rate = v * curvature
        if params.noise_active:
            yaw_rate += draw_noise(rng, params.noise_std)

        if Integrator(params.integrator) is Integrator.RK4:
            def deriv(s: np.ndarray) -> np.ndarray:
                return np.array([v * math.cos(s[2]), v * math.sin(s[2]), yaw_rate])

            x, y, psi = rk4_step(np.array([state.x, state.y, state.psi]), deriv, h)
        else:
            # Heading first, then positions along the updated heading
            (psi,) = semi_implicit_euler_step(np.array([state.psi]), lambda s: np.array([yaw_rate]), h)
            x, y = semi_implicit_euler_step(
                np.array([state.x, state.y]),
                lambda s: np.array([v * math.cos(psi), v * math.sin(psi)]),
                h,
            )

        return UnicycleState(
            t=state.t + h,
            x=float(x),
            y=float(y),
            psi=float(psi),
            yaw_rate=float(yaw_rate),
            curvature=curvature,
            dt_clamped=guard.clamped,
        )

    def outputs(self, state: UnicycleState, params: UnicycleParams) -> Telemetry:
        return Telemetry(
            t=state.t,
            x=state.x,
            y=state.y,
            psi=state.psi,
            r=state.yaw_rate,
            ay=params.v * state.yaw_rate,
            beta=0.0,
            vy=0.0,
            notes={
                "curvature": state.curvature,
                "dt_clamped": float(state.dt_clamped),
            },
        )

    def geometry(self, params: UnicycleParams) -> Geometry:
        return Geometry(
            length=params.l_eff,
            width=max(1.4, 0.4 * params.l_eff),
            wheelbase=params.l_eff,
        )
