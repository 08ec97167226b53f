# Validation harness: fixed-dt runs sampled against closed-form expectations

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

import numpy as np

from ..analysis.metrics import ErrorMetrics, compute_error_metrics
from ..core.guards import get_recommended_dt
from ..models.base import ModelParams
from ..models.registry import ModelRegistry
from .cases import GRAVITY, ValidationCaseRegistry, ValidationParams, create_default_cases

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationSeries:
    """Sampled signals; time is measured from the end of the settle period."""
    time: np.ndarray
    measured_yaw_rate: np.ndarray
    measured_ay: np.ndarray
    measured_ay_g: np.ndarray
    expected_yaw_rate: np.ndarray
    expected_ay: np.ndarray
    expected_ay_g: np.ndarray

    def to_dict(self) -> Dict[str, list]:
        return {
            "time": self.time.tolist(),
            "measuredYawRate": self.measured_yaw_rate.tolist(),
            "measuredLateralAccel": self.measured_ay.tolist(),
            "measuredLateralAccelG": self.measured_ay_g.tolist(),
            "expectedYawRate": self.expected_yaw_rate.tolist(),
            "expectedLateralAccel": self.expected_ay.tolist(),
            "expectedLateralAccelG": self.expected_ay_g.tolist(),
        }


@dataclass(frozen=True)
class ValidationRunResult:
    case_id: str
    model_id: str
    params: ValidationParams
    applied_params: ModelParams
    dt: float
    series: ValidationSeries
    metrics: Mapping[str, ErrorMetrics] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "metrics", MappingProxyType(dict(self.metrics)))

    @property
    def passed(self) -> bool:
        return bool(self.metrics) and all(m.passed for m in self.metrics.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "caseId": self.case_id,
            "modelId": self.model_id,
            "params": {
                "speed": self.params.speed,
                "duration": self.params.duration,
                "radius": self.params.radius,
            },
            "appliedParams": self.applied_params.to_dict(),
            "dt": self.dt,
            "series": self.series.to_dict(),
            "metrics": {name: m.to_dict() for name, m in self.metrics.items()},
            "passed": self.passed,
        }


def run_validation(
    case_id: str,
    registry: ModelRegistry,
    cases: Optional[ValidationCaseRegistry] = None,
    model_id: str = "bicycle",
    model_params: Optional[Mapping[str, Any]] = None,
    params: Optional[Mapping[str, Any]] = None,
) -> ValidationRunResult:
    """Run one validation case against a model.

    The model is stepped at its recommended dt through the settle time and
    then sampled at the case rate for ``duration`` seconds. Each metric
    passes when its max absolute error is within tolerance.

    Args:
        case_id: Validation case id
        registry: Model registry
        cases: Case registry (defaults to the built-in cases)
        model_id: Model to validate
        model_params: Base model parameter overrides
        params: Case parameter overrides (speed in km/h, duration, radius)

    Returns:
        ValidationRunResult

    Raises:
        UnknownValidationCase: If the case is not registered
        UnknownModel: If the model is not registered
        InvalidParameter: If a case parameter is out of range
    """
    cases = cases if cases is not None else create_default_cases()
    definition = cases.require(case_id)
    model = registry.require_model(model_id)

    case_params = definition.resolve_params(params)
    base = model.make_params(model_params)
    applied = definition.apply_config(model.id, base, case_params)
    trajectory = definition.build_input(model.id, applied, case_params)
    expected = definition.compute_expected(case_params)

    dt = get_recommended_dt(model.id)
    settle_time = definition.settle_time
    total_time = settle_time + case_params.duration
    interval = 1.0 / definition.sample_rate
    steps = int(math.ceil(total_time / dt - 1e-9))

    times, yaw, ay = [], [], []
    next_sample = settle_time
    state = model.init(applied)
    for i in range(steps):
        t = i * dt
        state = model.step(state, trajectory(t), dt, applied)
        elapsed = (i + 1) * dt
        if elapsed + 1e-6 < next_sample:
            continue
        telemetry = model.outputs(state, applied)
        times.append(round(max(0.0, elapsed - settle_time), 6))
        yaw.append(telemetry.r)
        ay.append(telemetry.ay)
        next_sample += interval

    n = len(times)
    measured_ay = np.array(ay, dtype=np.float64)
    series = ValidationSeries(
        time=np.array(times, dtype=np.float64),
        measured_yaw_rate=np.array(yaw, dtype=np.float64),
        measured_ay=measured_ay,
        measured_ay_g=measured_ay / GRAVITY,
        expected_yaw_rate=np.full(n, expected.yaw_rate),
        expected_ay=np.full(n, expected.lateral_acceleration),
        expected_ay_g=np.full(n, expected.lateral_accel_g),
    )
    metrics = {
        "yaw_rate": compute_error_metrics(
            series.measured_yaw_rate, series.expected_yaw_rate, definition.tolerances["yaw_rate"]
        ),
        "lateral_accel_g": compute_error_metrics(
            series.measured_ay_g, series.expected_ay_g, definition.tolerances["lateral_accel_g"]
        ),
    }

    result = ValidationRunResult(
        case_id=definition.id,
        model_id=model.id,
        params=case_params,
        applied_params=applied,
        dt=dt,
        series=series,
        metrics=metrics,
    )
    if result.passed:
        logger.info(f"Validation {case_id} on {model.id}: pass ({n} samples)")
    else:
        failing = [name for name, m in metrics.items() if not m.passed]
        logger.warning(f"Validation {case_id} on {model.id}: fail on {', '.join(failing)}")
    return result
