# Ramp-to-limit scenario: slowly rising steer until the friction limit

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import numpy as np

from ...core.math_utils import relative_error
from ...core.types import SimInputs
from ...models.registry import ModelRegistry
from ...theory.friction_envelope import predict_limit
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
    "linearGain": 0.10,   # relative
    "ayLimit": 0.05,      # g
    "steerLimit": 0.05,   # rad
}
# Steer window used for the linear gain fit (rad)
SLOPE_WINDOW = 0.05
MIN_STEER = 1e-4


@dataclass(frozen=True)
class RampConfig:
    speed: float
    ramp_rate: float = 0.02          # rad/s
    duration: Optional[float] = None  # defaults to max(6, 0.4 / ramp_rate + 2)
    dt: float = 0.01
    model_id: str = "bicycle"
    model_params: Mapping[str, Any] = field(default_factory=dict)

    @property
    def effective_duration(self) -> float:
        if self.duration is not None:
            return self.duration
        return max(6.0, 0.4 / self.ramp_rate + 2.0)


def fit_linear_gain(steer: np.ndarray, ay: np.ndarray) -> float:
    """Least-squares slope of ay over steer (with intercept).

    The intercept absorbs the constant lag of the response behind a ramp.
    Falls back to a fit through the origin for fewer than two points.
    """
    if steer.size == 0:
        return 0.0
    if steer.size < 2 or np.ptp(steer) == 0:
        denom = float(np.sum(steer * steer))
        return float(np.sum(steer * ay) / denom) if denom > 0 else 0.0
    slope, _ = np.polyfit(steer, ay, 1)
    return float(slope)


def run_ramp_to_limit(config: RampConfig, registry: ModelRegistry) -> CanonicalResult:
    """Ramp steer linearly and compare linear gain and limit point with theory.

    The linear gain is fitted over samples with 1e-4 < |steer| <= 0.05 rad
    before the first friction-limited sample. The limit point is that first
    limited sample (the last sample when the limit is never reached).
    """
    rate = config.ramp_rate

    def ramp_input(t, previous):
        return SimInputs(steer=rate * t)

    run = run_simulation(
        SimulationConfig(
            dt=config.dt,
            duration=config.effective_duration,
            input_fn=ramp_input,
            model_id=config.model_id,
            params={"v": config.speed, **config.model_params},
        ),
        registry,
    )
    series = run.series
    vehicle = vehicle_params_from_model(run.params)
    theory = predict_limit(run_speed(run.params, config.speed), vehicle.mu, vehicle)

    limited = series.limited()
    limit_index = int(np.argmax(limited)) if np.any(limited) else len(series) - 1
    before_limit = np.arange(len(series)) < (limit_index if np.any(limited) else len(series))
    abs_steer = np.abs(series.steer)
    window = before_limit & (abs_steer > MIN_STEER) & (abs_steer <= SLOPE_WINDOW)
    gain_measured = fit_linear_gain(series.steer[window], series.ay[window])

    gain_theory = theory.linear_gain
    if gain_theory == 0:
        gain_error = abs(gain_measured)
    else:
        gain_error = relative_error(gain_measured, gain_theory, 1e-6)

    ay_at_limit = float(series.ay[limit_index])
    steer_at_limit = float(series.steer[limit_index])
    ay_error = abs(ay_at_limit - theory.ay_max) / vehicle.g
    steer_error = abs(steer_at_limit - theory.steer_at_limit)

    grades = {
        "linearGain": gain_error <= TOLERANCES["linearGain"],
        "ayLimit": ay_error <= TOLERANCES["ayLimit"],
        "steerLimit": steer_error <= TOLERANCES["steerLimit"],
    }
    metrics = {
        "linearGainMeasured": gain_measured,
        "linearGainTheory": gain_theory,
        "gainError": gain_error,
        "ayAtLimit": ay_at_limit,
        "ayExpected": theory.ay_max,
        "ayError": ay_error,
        "steerAtLimit": steer_at_limit,
        "steerExpected": theory.steer_at_limit,
        "steerError": steer_error,
        "maxSlip": series.max_slip(),
    }

    result = CanonicalResult(
        scenario="ramp",
        model_id=run.model_id,
        telemetry=series,
        theory=theory.to_dict(),
        metrics=metrics,
        grades=grades,
        flags=common_flags(run),
    )
    log_grades(result)
    return result
