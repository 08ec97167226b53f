# Skidpad scenario: PID-held constant radius vs steady-state theory

from dataclasses import dataclass, field
from typing import Any, Mapping

import numpy as np

from ...core.errors import InvalidGeometry
from ...core.guards import enforce_dt_bounds, validate_timestep
from ...core.math_utils import relative_error
from ...core.types import SimInputs
from ...models.registry import ModelRegistry
from ...theory.skidpad import predict_skidpad
from ..controllers import PIDController
from .common import (
    CanonicalResult,
    SimulationConfig,
    common_flags,
    log_grades,
    run_simulation,
    run_speed,
    vehicle_params_from_model,
)

TOLERANCES = {
    "yawRate": (0.05, 0.10),
    "lateralAcceleration": (0.05, 0.10),
    "steer": (0.05, 0.08),   # absolute, rad
}
STEADY_FRACTION = 0.4


@dataclass(frozen=True)
class ControllerGains:
    kp: float = 0.1
    ki: float = 1.0
    kd: float = 0.0
    output_limit: float = 0.8


@dataclass(frozen=True)
class SkidpadConfig:
    speed: float
    radius: float
    duration: float = 20.0
    dt: float = 0.01
    model_id: str = "bicycle"
    model_params: Mapping[str, Any] = field(default_factory=dict)
    controller: ControllerGains = ControllerGains()


def run_skidpad(config: SkidpadConfig, registry: ModelRegistry) -> CanonicalResult:
    """Regulate yaw rate to v/R with a PID on steer and grade the steady window.

    The controller sees the previous tick's yaw rate. The last 40 % of the
    run is averaged and compared with the steady-state prediction.

    Raises:
        InvalidGeometry: If radius is not positive
    """
    if config.radius <= 0:
        raise InvalidGeometry(f"Radius must be positive, got {config.radius}")
    target_yaw = config.speed / config.radius
    gains = config.controller
    pid = PIDController(gains.kp, gains.ki, gains.kd, output_limit=gains.output_limit)
    control_dt = enforce_dt_bounds(config.model_id, validate_timestep(config.dt)).dt

    def steer_input(t, previous):
        if previous is None:
            pid.reset()
            measured = 0.0
        else:
            measured = previous.yaw_rate
        return SimInputs(steer=pid.update(target_yaw - measured, control_dt))

    run = run_simulation(
        SimulationConfig(
            dt=config.dt,
            duration=config.duration,
            input_fn=steer_input,
            model_id=config.model_id,
            params={"v": config.speed, **config.model_params},
        ),
        registry,
    )
    series = run.series
    vehicle = vehicle_params_from_model(run.params)
    theory = predict_skidpad(run_speed(run.params, config.speed), config.radius, vehicle)

    steady = series.tail(STEADY_FRACTION)
    avg_yaw = float(np.mean(steady.yaw_rate))
    avg_ay = float(np.mean(steady.ay))
    avg_steer = float(np.mean(steady.steer))

    yaw_error = relative_error(avg_yaw, theory.yaw_rate, 1e-6)
    ay_error = relative_error(avg_ay, theory.ay, 1e-6)
    steer_error = abs(avg_steer - theory.steer)

    flags = common_flags(run)
    column = 1 if flags["frictionLimited"] else 0
    grades = {
        "yawRate": yaw_error <= TOLERANCES["yawRate"][column],
        "lateralAcceleration": ay_error <= TOLERANCES["lateralAcceleration"][column],
        "steer": steer_error <= TOLERANCES["steer"][column],
    }
    metrics = {
        "avgYaw": avg_yaw,
        "avgAy": avg_ay,
        "avgSteer": avg_steer,
        "yawError": yaw_error,
        "ayError": ay_error,
        "steerError": steer_error,
        "maxSlip": steady.max_slip(),
    }

    result = CanonicalResult(
        scenario="skidpad",
        model_id=run.model_id,
        telemetry=series,
        theory=theory.to_dict(),
        metrics=metrics,
        grades=grades,
        flags=flags,
    )
    log_grades(result)
    return result
