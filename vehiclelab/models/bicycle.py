# Linear 2-DOF bicycle model
# FORBIDDEN: logging, any I/O

from dataclasses import dataclass
from typing import NamedTuple, Optional

import numpy as np

from ..core.guards import enforce_dt_bounds, validate_timestep
from ..core.integrators import Integrator, rk4_step, semi_implicit_euler_step
from ..core.math_utils import rotate_2d
from ..core.params import create_vehicle_params, floor_speed
from ..core.physics import (
    clamp_lateral_forces,
    compute_slip_angles,
    lateral_acceleration,
    linear_lateral_force,
    sideslip_angle,
)
from ..core.types import Geometry, SimInputs, Telemetry, VehicleParams
from .base import ModelParams, VehicleModel, draw_noise, param


@dataclass(frozen=True)
class BicycleParams(ModelParams):
    m: float = param(1500.0, 100.0, 10000.0, "Mass", "kg", "chassis")
    iz: float = param(2250.0, 50.0, 50000.0, "Yaw inertia", "kg m²", "chassis")
    a: float = param(1.2, 0.2, 5.0, "CG to front axle", "m", "geometry")
    b: float = param(1.6, 0.2, 5.0, "CG to rear axle", "m", "geometry")
    cf: float = param(80000.0, 1000.0, 500000.0, "Front cornering stiffness", "N/rad", "tyres")
    cr: float = param(80000.0, 1000.0, 500000.0, "Rear cornering stiffness", "N/rad", "tyres")
    mu: float = param(1.0, 0.05, 3.0, "Friction coefficient", "", "tyres")
    track_width: float = param(1.6, 0.5, 3.0, "Track width", "m", "geometry")
    h_cg: float = param(0.55, 0.05, 3.0, "CG height", "m", "geometry")
    v: float = param(25.0, 0.0, 100.0, "Speed", "m/s", "motion")
    use_friction_clamp: bool = param(False, label="Friction circle clamp", group="tyres")
    noise_std: float = param(0.05, 0.0, 1.0, "Yaw acceleration noise", "rad/s²", "noise")

    def vehicle_params(self) -> VehicleParams:
        return create_vehicle_params(
            m=self.m,
            iz=self.iz,
            a=self.a,
            b=self.b,
            cf=self.cf,
            cr=self.cr,
            mu=self.mu,
            track=self.track_width,
            h_cg=self.h_cg,
        )


@dataclass(frozen=True)
class BicycleState:
    t: float = 0.0
    vy: float = 0.0
    r: float = 0.0
    psi: float = 0.0
    x: float = 0.0
    y: float = 0.0
    vy_dot: float = 0.0
    ay: float = 0.0
    slip_front: float = 0.0
    slip_rear: float = 0.0
    fy_front: float = 0.0
    fy_rear: float = 0.0
    front_limited: bool = False
    rear_limited: bool = False
    vx_effective: float = 0.0
    dt_clamped: bool = False


class _LateralDerivatives(NamedTuple):
    vy_dot: float
    r_dot: float
    slip_front: float
    slip_rear: float
    fy_front: float
    fy_rear: float
    front_limited: bool
    rear_limited: bool


def _lateral_derivatives(
    vy: float,
    r: float,
    steer: float,
    vx: float,
    vehicle: VehicleParams,
    friction_clamp: bool,
) -> _LateralDerivatives:
    slip_front, slip_rear = compute_slip_angles(vy, r, vx, vehicle.a, vehicle.b, steer)
    fy_front = linear_lateral_force(vehicle.cf, slip_front)
    fy_rear = linear_lateral_force(vehicle.cr, slip_rear)
    front_limited = rear_limited = False
    if friction_clamp:
        fy_front, fy_rear, front_limited, rear_limited = clamp_lateral_forces(fy_front, fy_rear, vehicle)

    vy_dot = (fy_front + fy_rear) / vehicle.m - vx * r
    r_dot = (vehicle.a * fy_front - vehicle.b * fy_rear) / vehicle.iz
    return _LateralDerivatives(
        vy_dot, r_dot, slip_front, slip_rear, fy_front, fy_rear, front_limited, rear_limited
    )


class BicycleModel(VehicleModel):
    """Linear single-track model with lateral velocity and yaw rate states.

    Forward speed is a parameter, floored in magnitude to keep the slip
    angles finite at rest. The optional friction clamp caps each axle force
    at mu times its static load and flags the saturated axle.
    """

    id = "bicycle"
    label = "Linear 2-DOF bicycle"
    params_class = BicycleParams

    def init(self, params: BicycleParams) -> BicycleState:
        return BicycleState(vx_effective=floor_speed(params.v))

    def step(
        self,
        state: BicycleState,
        inputs: SimInputs,
        dt: float,
        params: BicycleParams,
        rng: Optional[np.random.Generator] = None,
    ) -> BicycleState:
        guard = enforce_dt_bounds(self.id, validate_timestep(dt))
        h = guard.dt
        vehicle = params.vehicle_params()
        vx = floor_speed(params.v)
        steer = inputs.steer
        clamp = params.use_friction_clamp

        # One disturbance sample per step, held over all sub-stages
        yaw_disturbance = draw_noise(rng, params.noise_std) if params.noise_active else 0.0

        def lateral(s: np.ndarray) -> np.ndarray:
            d = _lateral_derivatives(s[0], s[1], steer, vx, vehicle, clamp)
            return np.array([d.vy_dot, d.r_dot + yaw_disturbance])

        if Integrator(params.integrator) is Integrator.RK4:
            def deriv(s: np.ndarray) -> np.ndarray:
                dvy, dr = lateral(s)
                dx, dy = rotate_2d(vx, s[0], s[2])
                return np.array([dvy, dr, s[1], dx, dy])

            vy, r, psi, x, y = rk4_step(
                np.array([state.vy, state.r, state.psi, state.x, state.y]), deriv, h
            )
        else:
            # Velocities first, then pose from the updated velocities
            vy, r = semi_implicit_euler_step(np.array([state.vy, state.r]), lateral, h)
            psi = state.psi + r * h
            dx, dy = rotate_2d(vx, vy, psi)
            x = state.x + dx * h
            y = state.y + dy * h

        diag = _lateral_derivatives(vy, r, steer, vx, vehicle, clamp)
        return BicycleState(
            t=state.t + h,
            vy=float(vy),
            r=float(r),
            psi=float(psi),
            x=float(x),
            y=float(y),
            vy_dot=float(diag.vy_dot),
            ay=float(lateral_acceleration(vx, r, diag.vy_dot)),
            slip_front=float(diag.slip_front),
            slip_rear=float(diag.slip_rear),
            fy_front=float(diag.fy_front),
            fy_rear=float(diag.fy_rear),
            front_limited=diag.front_limited,
            rear_limited=diag.rear_limited,
            vx_effective=vx,
            dt_clamped=guard.clamped,
        )

    def outputs(self, state: BicycleState, params: BicycleParams) -> Telemetry:
        vx = state.vx_effective or floor_speed(params.v)
        return Telemetry(
            t=state.t,
            x=state.x,
            y=state.y,
            psi=state.psi,
            r=state.r,
            ay=state.ay,
            beta=sideslip_angle(state.vy, vx),
            vy=state.vy,
            notes={
                "slip_front": state.slip_front,
                "slip_rear": state.slip_rear,
                "fy_front": state.fy_front,
                "fy_rear": state.fy_rear,
                "front_limited": float(state.front_limited),
                "rear_limited": float(state.rear_limited),
                "vx_effective": vx,
                "dt_clamped": float(state.dt_clamped),
            },
        )

    def geometry(self, params: BicycleParams) -> Geometry:
        wheelbase = params.a + params.b
        return Geometry(length=wheelbase, width=params.track_width, wheelbase=wheelbase)
