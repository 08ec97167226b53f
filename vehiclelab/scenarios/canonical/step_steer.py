# Step-steer scenario: open-loop steer step graded against the analytic response

import math
from dataclasses import dataclass, field
from typing import Any, Mapping, Tuple

import numpy as np

from ...core.math_utils import relative_error
from ...core.types import SimInputs
from ...models.registry import ModelRegistry
from ...theory.step_steer import create_step_steer_theory
from .common import (
    CanonicalResult,
    SimulationConfig,
    common_flags,
    log_grades,
    run_simulation,
    run_speed,
    vehicle_params_from_model,
)

# (normal, friction-limited)
TOLERANCES = {
    "finalYaw": (0.05, 0.10),
    "settling": (0.15, 0.25),
    "overshoot": (0.05, 0.10),
}
# Overshoot allowed when theory predicts none (zeta >= 1)
OVERDAMPED_OVERSHOOT = 0.02
SETTLING_BAND = 0.02


@dataclass(frozen=True)
class StepSteerConfig:
    speed: float
    delta: float           # rad
    t_step: float = 1.0
    duration: float = 8.0
    dt: float = 0.01
    model_id: str = "bicycle"
    model_params: Mapping[str, Any] = field(default_factory=dict)


def find_settling_time(
    t: np.ndarray,
    values: np.ndarray,
    start_index: int,
    final_value: float,
    band: float = SETTLING_BAND,
) -> float:
    """First time after which ``values`` stays within ``band`` of ``final_value``.

    Returns the last sample time if the response never settles.
    """
    if len(t) == 0:
        return 0.0
    tolerance = abs(final_value) * band
    inside = np.abs(values[start_index:] - final_value) <= tolerance
    outside = np.flatnonzero(~inside)
    if outside.size == 0:
        return float(t[start_index])
    index = start_index + int(outside[-1]) + 1
    return float(t[index]) if index < len(t) else float(t[-1])


def _peak_overshoot(values: np.ndarray, final_value: float) -> Tuple[float, float]:
    if values.size == 0 or final_value == 0:
        return 0.0, 0.0
    peak = float(np.max(values)) if final_value > 0 else float(np.min(values))
    return peak, max(0.0, (peak - final_value) / abs(final_value))


def run_step_steer(config: StepSteerConfig, registry: ModelRegistry) -> CanonicalResult:
    """Apply a steer step of ``delta`` at ``t_step`` and compare with theory.

    Grades: final yaw rate (mean over the last second) relative to the
    steady-state gain, settling time relative to t_step + 4/(zeta omega_n),
    and overshoot against exp(-pi zeta / sqrt(1 - zeta²)) as an absolute
    difference when zeta < 1.

    Args:
        config: Scenario configuration
        registry: Model registry

    Returns:
        CanonicalResult
    """
    delta = config.delta
    t_step = config.t_step

    def steer_input(t, previous):
        return SimInputs(steer=delta if t >= t_step else 0.0)

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
    speed = run_speed(run.params, config.speed)
    theory = create_step_steer_theory(vehicle, speed)
    curves = theory.step_curves(series.t, delta, t_step)

    final_expected = theory.gain_r_delta * delta
    steady = series.since(config.duration - 1.0)
    avg_yaw = float(np.mean(steady.yaw_rate)) if len(steady) else float(series.yaw_rate[-1])
    final_error = 0.0 if final_expected == 0 else relative_error(avg_yaw, final_expected, 1e-6)

    after_step = series.t >= t_step
    _, overshoot = _peak_overshoot(series.yaw_rate[after_step], final_expected)
    _, analytic_overshoot = _peak_overshoot(curves.yaw_rate[after_step], final_expected)

    start_index = int(np.argmax(after_step)) if np.any(after_step) else len(series)
    if start_index < len(series):
        measured_settling = find_settling_time(series.t, series.yaw_rate, start_index, final_expected)
    else:
        measured_settling = config.duration
    if math.isfinite(theory.settling_time):
        theoretical_settling = t_step + theory.settling_time
    else:
        theoretical_settling = config.duration
    settling_error = relative_error(measured_settling, theoretical_settling, 1e-6)

    oscillatory = theory.zeta < 1.0 and theory.omega_n > 0
    overshoot_error = abs(overshoot - theory.overshoot) if oscillatory else overshoot

    flags = common_flags(run)
    column = 1 if flags["frictionLimited"] else 0
    grades = {
        "finalYaw": final_error <= TOLERANCES["finalYaw"][column],
        "settling": settling_error <= TOLERANCES["settling"][column],
        "overshoot": (
            overshoot_error <= TOLERANCES["overshoot"][column]
            if oscillatory
            else overshoot <= OVERDAMPED_OVERSHOOT
        ),
    }
    metrics = {
        "finalExpected": final_expected,
        "avgYaw": avg_yaw,
        "finalError": final_error,
        "measuredSettling": measured_settling,
        "theoreticalSettling": theoretical_settling,
        "settlingError": settling_error,
        "overshoot": overshoot,
        "theoreticalOvershoot": theory.overshoot,
        "analyticOvershoot": analytic_overshoot,
        "overshootError": overshoot_error,
        "maxSlip": series.max_slip(),
    }
    theory_bundle = {
        **theory.to_dict(),
        "t": curves.t,
        "yawRate": curves.yaw_rate,
        "ay": curves.ay,
        "vy": curves.vy,
    }

    result = CanonicalResult(
        scenario="step-steer",
        model_id=run.model_id,
        telemetry=series,
        theory=theory_bundle,
        metrics=metrics,
        grades=grades,
        flags=flags,
    )
    log_grades(result)
    return result
