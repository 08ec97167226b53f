# Lightweight per-model baseline checks

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import numpy as np

from ..models.registry import ModelRegistry
from ..sim.samplers import ScenarioSampler, const_radius, step_steer

logger = logging.getLogger(__name__)

UNICYCLE_RADIUS = 50.0
UNICYCLE_DURATION = 30.0
UNICYCLE_MAX_RMS = 0.5          # m

BICYCLE_DURATION = 6.0
BICYCLE_STEP_DEG = 5.0
BICYCLE_T_STEP = 1.0
BICYCLE_MAX_YAW = 1.0           # rad/s
BICYCLE_MAX_OVERSHOOT = 0.15
RISE_TOLERANCE = 1e-3           # rad/s allowed dip between samples while rising


@dataclass(frozen=True)
class BaselineResult:
    model_id: str
    status: str
    metrics: Dict[str, float] = field(default_factory=dict)
    message: Optional[str] = None

    @property
    def passed(self) -> bool:
        return self.status == "pass"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "modelId": self.model_id,
            "status": self.status,
            "metrics": dict(self.metrics),
            "message": self.message,
        }


def _simulate(registry: ModelRegistry, model_id: str, overrides: Mapping[str, Any], duration: float, sampler: ScenarioSampler):
    model = registry.require_model(model_id)
    params = model.make_params({**overrides, "process_noise": False})
    dt = params.dt
    steps = int(math.ceil(duration / dt - 1e-9))
    state = model.init(params)
    samples = []
    for i in range(steps):
        t = i * dt
        state = model.step(state, sampler(t, model_id, params), dt, params)
        samples.append(model.outputs(state, params).at((i + 1) * dt))
    return samples


def _unicycle_baseline(registry: ModelRegistry, overrides: Mapping[str, Any]) -> BaselineResult:
    samples = _simulate(
        registry, "unicycle", overrides, UNICYCLE_DURATION, const_radius(UNICYCLE_RADIUS)
    )
    # Starting at the origin heading +x, the left-hand circle is centred on (0, R)
    x = np.array([s.x for s in samples])
    y = np.array([s.y for s in samples])
    radius = np.hypot(x, y - UNICYCLE_RADIUS)
    errors = np.abs(radius[np.isfinite(radius)] - UNICYCLE_RADIUS)
    rms = float(np.sqrt(np.mean(errors * errors))) if errors.size else math.inf
    passed = rms < UNICYCLE_MAX_RMS
    return BaselineResult(
        model_id="unicycle",
        status="pass" if passed else "fail",
        metrics={"rmsRadiusError": rms},
        message=None if passed else f"RMS radius error {rms:.3f} m exceeds {UNICYCLE_MAX_RMS} m",
    )


def _bicycle_baseline(registry: ModelRegistry, overrides: Mapping[str, Any]) -> BaselineResult:
    samples = _simulate(
        registry,
        "bicycle",
        overrides,
        BICYCLE_DURATION,
        step_steer(delta_deg=BICYCLE_STEP_DEG, t_step=BICYCLE_T_STEP),
    )
    t = np.array([s.t for s in samples])
    yaw = np.array([s.r for s in samples])

    steady = float(np.mean(yaw[t > BICYCLE_DURATION - 1.0]))
    peak_index = int(np.argmax(yaw))
    peak = float(yaw[peak_index])
    overshoot = (peak - steady) / steady if steady > 0 else math.inf

    # Rising phase: from the step up to the first peak
    rising = yaw[(t >= BICYCLE_T_STEP) & (np.arange(len(yaw)) <= peak_index)]
    monotonic_rise = bool(np.all(np.diff(rising) >= -RISE_TOLERANCE)) if rising.size > 1 else True
    non_negative = bool(np.all(yaw >= -RISE_TOLERANCE))

    checks = {
        "steady yaw rate positive": steady > 0,
        "non-negative": non_negative,
        "bounded": peak < BICYCLE_MAX_YAW,
        "peak reaches steady": peak >= steady,
        "monotonic rise": monotonic_rise,
        "overshoot within band": overshoot <= BICYCLE_MAX_OVERSHOOT,
    }
    failed = [name for name, ok in checks.items() if not ok]
    return BaselineResult(
        model_id="bicycle",
        status="fail" if failed else "pass",
        metrics={
            "steadyYawRate": steady,
            "peakYawRate": peak,
            "overshoot": overshoot,
        },
        message=f"Failed checks: {', '.join(failed)}" if failed else None,
    )


_BASELINES = {
    "unicycle": _unicycle_baseline,
    "bicycle": _bicycle_baseline,
}


def run_baseline(
    model_id: str,
    registry: ModelRegistry,
    params: Optional[Mapping[str, Any]] = None,
) -> Optional[BaselineResult]:
    """Run the baseline check for ``model_id``.

    Unicycle: constant-radius circle, RMS radius error below 0.5 m over 30 s.
    Bicycle: 5 deg step at 1 s, yaw rate non-negative, bounded, rising
    monotonically to its peak and settling within 15 % overshoot.

    Returns:
        BaselineResult, or None when no baseline exists for the model
    """
    check = _BASELINES.get(model_id)
    if check is None:
        return None
    result = check(registry, params or {})
    if result.passed:
        logger.info(f"Baseline {model_id}: pass {result.metrics}")
    else:
        logger.warning(f"Baseline {model_id}: {result.message}")
    return result
