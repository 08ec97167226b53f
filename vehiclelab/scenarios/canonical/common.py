# Shared simulation loop and result type for canonical scenarios

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional

import numpy as np

from ...core.guards import enforce_dt_bounds, validate_timestep
from ...core.params import create_vehicle_params
from ...core.types import SimInputs, VehicleParams
from ...models.base import ModelParams
from ...models.bicycle import BicycleParams
from ...models.registry import ModelRegistry
from ...telemetry.series import CanonicalSample, TelemetrySeries

logger = logging.getLogger(__name__)

# (t, previous sample or None) -> inputs
InputFn = Callable[[float, Optional[CanonicalSample]], SimInputs]


@dataclass(frozen=True)
class SimulationConfig:
    dt: float
    duration: float
    input_fn: InputFn = field(repr=False)
    model_id: str = "bicycle"
    params: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SimulationRun:
    series: TelemetrySeries
    params: ModelParams
    model_id: str
    dt: float
    dt_clamped: bool


def run_simulation(config: SimulationConfig, registry: ModelRegistry) -> SimulationRun:
    """Drive a model at fixed dt for a fixed duration.

    Inputs are sampled at t_i = i dt with the previous tick's sample (closed
    loop), telemetry is stamped at t_i + dt. The friction clamp is enabled
    unless the caller sets it and process noise is always disabled.

    Args:
        config: Simulation configuration
        registry: Model registry

    Returns:
        SimulationRun with the telemetry series and the parameters used

    Raises:
        UnknownModel: If the model id is not registered
        InvalidTimestep: If dt is not finite and positive
    """
    model = registry.require_model(config.model_id)
    overrides = dict(config.params)
    overrides.setdefault("use_friction_clamp", True)
    overrides["process_noise"] = False
    params = model.make_params(overrides)

    guard = enforce_dt_bounds(model.id, validate_timestep(config.dt))
    if guard.clamped:
        logger.warning(guard.message)
    dt = guard.dt
    steps = max(1, int(math.ceil(config.duration / dt - 1e-9)))

    state = model.init(params)
    samples = []
    previous: Optional[CanonicalSample] = None
    for i in range(steps):
        t = i * dt
        inputs = config.input_fn(t, previous)
        state = model.step(state, inputs, dt, params)
        telemetry = model.outputs(state, params).at(t + dt)
        previous = CanonicalSample.from_telemetry(telemetry, inputs.steer)
        samples.append(previous)

    series = TelemetrySeries.from_samples(samples)
    logger.debug(f"Simulated {model.id} for {steps} steps at dt={dt}")
    return SimulationRun(
        series=series,
        params=params,
        model_id=model.id,
        dt=dt,
        dt_clamped=guard.clamped or series.any_dt_clamped(),
    )


def vehicle_params_from_model(params: ModelParams) -> VehicleParams:
    """Vehicle parameters matching a run's model parameters.

    Fields a model does not have (the unicycle has no mass or tyres) fall
    back to the bicycle defaults.
    """
    defaults = BicycleParams()

    def pick(name: str) -> float:
        return getattr(params, name, getattr(defaults, name))

    return create_vehicle_params(
        m=pick("m"),
        iz=pick("iz"),
        a=pick("a"),
        b=pick("b"),
        cf=pick("cf"),
        cr=pick("cr"),
        mu=pick("mu"),
        track=pick("track_width"),
        h_cg=pick("h_cg"),
    )


def run_speed(params: ModelParams, fallback: float) -> float:
    return float(getattr(params, "v", fallback))


def _jsonable(value: Any) -> Any:
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, (np.floating, np.integer)):
        return value.item()
    if isinstance(value, np.bool_):
        return bool(value)
    if isinstance(value, Mapping):
        return {k: _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


@dataclass(frozen=True)
class CanonicalResult:
    """Outcome of one canonical scenario run. Read-only once returned."""
    scenario: str
    model_id: str
    telemetry: TelemetrySeries
    theory: Mapping[str, Any]
    metrics: Mapping[str, float]
    grades: Mapping[str, bool]
    flags: Mapping[str, bool]

    def __post_init__(self):
        object.__setattr__(self, "theory", MappingProxyType(dict(self.theory)))
        object.__setattr__(
            self, "metrics", MappingProxyType({k: float(v) for k, v in self.metrics.items()})
        )
        object.__setattr__(
            self, "grades", MappingProxyType({k: bool(v) for k, v in self.grades.items()})
        )
        object.__setattr__(
            self, "flags", MappingProxyType({k: bool(v) for k, v in self.flags.items()})
        )

    @property
    def passed(self) -> bool:
        return all(self.grades.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "telemetry": self.telemetry.to_dict(),
            "theory": _jsonable(dict(self.theory)),
            "metrics": dict(self.metrics),
            "grades": dict(self.grades),
            "flags": dict(self.flags),
        }


def common_flags(run: SimulationRun, series: Optional[TelemetrySeries] = None) -> Dict[str, bool]:
    """Flags reported by every scenario."""
    series = series if series is not None else run.series
    return {
        "frictionLimited": series.any_friction_limited(),
        "linearRegion": series.in_linear_region(),
        "dtClamped": run.dt_clamped,
        "finite": series.is_finite(),
    }


def log_grades(result: CanonicalResult) -> None:
    failed = [name for name, ok in result.grades.items() if not ok]
    if failed:
        logger.warning(f"{result.scenario} ({result.model_id}) failed grades: {', '.join(failed)}")
    else:
        logger.info(f"{result.scenario} ({result.model_id}) passed all grades")
    if result.flags.get("frictionLimited"):
        logger.info(f"{result.scenario}: friction limit reached, widened tolerances applied")
