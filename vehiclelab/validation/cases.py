# Validation case definitions
# FORBIDDEN: logging, any I/O

import math
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Mapping, NamedTuple, Optional, Tuple

from ..core.errors import InvalidParameter, UnknownValidationCase
from ..core.params import linear_cornering_steer_angle
from ..core.types import SimInputs
from ..models.base import ModelParams

GRAVITY = 9.81
DEFAULT_WHEELBASE = 2.8


def kmh_to_mps(speed_kmh: float) -> float:
    return speed_kmh / 3.6


@dataclass(frozen=True)
class ValidationField:
    """Descriptor for one case parameter (bounds and default)."""
    key: str
    label: str
    unit: str
    min: float
    max: float
    step: float
    default: float


@dataclass(frozen=True)
class ValidationParams:
    speed: float                    # km/h
    duration: float                 # s of sampling after the settle time
    radius: Optional[float] = None  # m

    @property
    def speed_mps(self) -> float:
        return kmh_to_mps(self.speed)


class ExpectedValues(NamedTuple):
    yaw_rate: float
    lateral_acceleration: float
    lateral_accel_g: float


# Input trajectory as a function of time
InputTrajectory = Callable[[float], SimInputs]


@dataclass(frozen=True)
class ValidationCaseDefinition:
    """Static description of one validation case.

    Attributes:
        compute_expected: Closed-form expected yaw rate and lateral acceleration
        tolerances: Max absolute error per metric (``yaw_rate`` in rad/s,
            ``lateral_accel_g`` in g)
        apply_config: Model parameters to run the case with
        build_input: Input trajectory for the applied parameters
    """
    id: str
    label: str
    description: str
    fields: Tuple[ValidationField, ...]
    sample_rate: float
    settle_time: float
    compute_expected: Callable[[ValidationParams], ExpectedValues] = field(repr=False)
    tolerances: Mapping[str, float] = field(default_factory=dict)
    apply_config: Callable[[str, ModelParams, ValidationParams], ModelParams] = field(default=None, repr=False)
    build_input: Callable[[str, ModelParams, ValidationParams], InputTrajectory] = field(default=None, repr=False)

    def default_params(self) -> ValidationParams:
        values = {f.key: f.default for f in self.fields}
        return ValidationParams(**values)

    def resolve_params(self, overrides: Optional[Mapping[str, Any]] = None) -> ValidationParams:
        """Defaults merged with ``overrides`` and checked against field bounds.

        Raises:
            InvalidParameter: If a value is outside its field's range
        """
        params = self.default_params()
        known = {f.key: f for f in self.fields}
        updates: Dict[str, float] = {}
        for key, value in (overrides or {}).items():
            if value is None or key not in known:
                continue
            spec = known[key]
            number = float(value)
            if not math.isfinite(number) or number < spec.min or number > spec.max:
                raise InvalidParameter(
                    f"{self.id}: {key}={value} outside [{spec.min}, {spec.max}] {spec.unit}"
                )
            updates[key] = number
        return replace(params, **updates)


class ValidationCaseRegistry:
    """Validation cases by id, filled once at startup."""

    def __init__(self):
        self._cases: Dict[str, ValidationCaseDefinition] = {}

    def register(self, case: ValidationCaseDefinition) -> ValidationCaseDefinition:
        if case.id in self._cases:
            raise ValueError(f"Validation case already registered: {case.id}")
        self._cases[case.id] = case
        return case

    def get(self, case_id: str) -> Optional[ValidationCaseDefinition]:
        return self._cases.get(case_id)

    def require(self, case_id: str) -> ValidationCaseDefinition:
        case = self._cases.get(case_id)
        if case is None:
            raise UnknownValidationCase(case_id)
        return case

    def list_cases(self) -> List[ValidationCaseDefinition]:
        return list(self._cases.values())

    def __contains__(self, case_id: str) -> bool:
        return case_id in self._cases

    def __len__(self) -> int:
        return len(self._cases)


def _speed_field(minimum: float, default: float) -> ValidationField:
    return ValidationField("speed", "Speed", "km/h", minimum, 200.0, 1.0, default)


_DURATION_FIELD = ValidationField("duration", "Sample window", "s", 3.0, 8.0, 0.5, 5.0)


# no-steer-flat

def _no_steer_expected(params: ValidationParams) -> ExpectedValues:
    return ExpectedValues(0.0, 0.0, 0.0)


def _no_steer_config(model_id: str, base: ModelParams, params: ValidationParams) -> ModelParams:
    return base.merged({"v": params.speed_mps, "mu": 1.0, "process_noise": False})


def _no_steer_input(model_id: str, applied: ModelParams, params: ValidationParams) -> InputTrajectory:
    return lambda t: SimInputs(steer=0.0)


# constant-radius-skidpad

def _skidpad_expected(params: ValidationParams) -> ExpectedValues:
    radius = params.radius
    v = params.speed_mps
    if not radius or radius <= 0:
        return ExpectedValues(0.0, 0.0, 0.0)
    ay = v * v / radius
    return ExpectedValues(v / radius, ay, ay / GRAVITY)


def _skidpad_config(model_id: str, base: ModelParams, params: ValidationParams) -> ModelParams:
    overrides: Dict[str, Any] = {
        "v": params.speed_mps,
        "use_friction_clamp": True,
        "process_noise": False,
    }
    mu = getattr(base, "mu", None)
    if mu is not None:
        overrides["mu"] = max(mu, 1.0)
    return base.merged(overrides)


def skidpad_steer_angle(applied: ModelParams, params: ValidationParams) -> float:
    """Steer holding the case radius.

    Kinematic atan(L_eff / R) for models without tyres, the steer the
    linear bicycle settles at for models exposing vehicle parameters.
    """
    radius = params.radius
    if not radius or radius <= 0:
        return 0.0
    vehicle_params = getattr(applied, "vehicle_params", None)
    if callable(vehicle_params):
        return linear_cornering_steer_angle(params.speed_mps, radius, vehicle_params())
    wheelbase = getattr(applied, "l_eff", DEFAULT_WHEELBASE)
    return math.atan(wheelbase / radius)


def _skidpad_input(model_id: str, applied: ModelParams, params: ValidationParams) -> InputTrajectory:
    steer = skidpad_steer_angle(applied, params)
    return lambda t: SimInputs(steer=steer)


NO_STEER_FLAT = ValidationCaseDefinition(
    id="no-steer-flat",
    label="No-steer flat road",
    description="Zero steering on a flat road: baseline stability check.",
    fields=(_speed_field(20.0, 80.0), _DURATION_FIELD),
    sample_rate=20.0,
    settle_time=1.0,
    compute_expected=_no_steer_expected,
    tolerances={"yaw_rate": 0.05, "lateral_accel_g": 0.03},
    apply_config=_no_steer_config,
    build_input=_no_steer_input,
)

CONSTANT_RADIUS_SKIDPAD = ValidationCaseDefinition(
    id="constant-radius-skidpad",
    label="Constant-radius skidpad",
    description="Circular path at constant speed and radius.",
    fields=(
        _speed_field(30.0, 60.0),
        ValidationField("radius", "Radius", "m", 15.0, 120.0, 1.0, 50.0),
        _DURATION_FIELD,
    ),
    sample_rate=20.0,
    settle_time=1.0,
    compute_expected=_skidpad_expected,
    tolerances={"yaw_rate": 0.05, "lateral_accel_g": 0.05},
    apply_config=_skidpad_config,
    build_input=_skidpad_input,
)


def create_default_cases() -> ValidationCaseRegistry:
    """Registry with the no-steer and constant-radius cases."""
    cases = ValidationCaseRegistry()
    cases.register(NO_STEER_FLAT)
    cases.register(CONSTANT_RADIUS_SKIDPAD)
    return cases
