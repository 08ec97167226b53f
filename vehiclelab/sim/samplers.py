# Scenario input samplers for incremental simulation and baseline checks
# FORBIDDEN: logging, any I/O

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..core.errors import UnknownScenario
from ..core.types import SimInputs
from ..models.base import ModelParams

# (t, model_id, params) -> inputs
ScenarioSampler = Callable[[float, str, ModelParams], SimInputs]

DEFAULT_WHEELBASE = 2.7


@dataclass(frozen=True)
class ScenarioPreset:
    id: str
    label: str
    description: str
    defaults: Mapping[str, Any]
    create: Callable[..., ScenarioSampler] = field(repr=False)


def infer_effective_wheelbase(params: ModelParams) -> float:
    """l_eff for the unicycle, a + b for the bicycle, 2.7 m otherwise."""
    l_eff = getattr(params, "l_eff", None)
    if l_eff is not None:
        return float(l_eff)
    a = getattr(params, "a", None)
    b = getattr(params, "b", None)
    if a is not None and b is not None:
        return float(a + b)
    return DEFAULT_WHEELBASE


def step_steer(delta_deg: float = 5.0, t_step: float = 1.0) -> ScenarioSampler:
    delta = math.radians(delta_deg)

    def sample(t: float, model_id: str, params: ModelParams) -> SimInputs:
        return SimInputs(steer=delta if t >= t_step else 0.0)

    return sample


def const_radius(radius: float = 50.0) -> ScenarioSampler:
    """Kinematic steer angle atan(L / R) for a circle of ``radius``."""

    def sample(t: float, model_id: str, params: ModelParams) -> SimInputs:
        return SimInputs(steer=math.atan(infer_effective_wheelbase(params) / radius))

    return sample


def sine_steer(amplitude_deg: float = 2.0, frequency: float = 0.5) -> ScenarioSampler:
    amplitude = math.radians(amplitude_deg)
    omega = 2.0 * math.pi * frequency

    def sample(t: float, model_id: str, params: ModelParams) -> SimInputs:
        return SimInputs(steer=amplitude * math.sin(omega * t))

    return sample


def ramp_steer(rate_deg: float = 1.0, max_deg: float = 30.0) -> ScenarioSampler:
    rate = math.radians(rate_deg)
    ceiling = math.radians(max_deg)

    def sample(t: float, model_id: str, params: ModelParams) -> SimInputs:
        return SimInputs(steer=min(rate * t, ceiling))

    return sample


SCENARIO_PRESETS: List[ScenarioPreset] = [
    ScenarioPreset(
        id="step-steer",
        label="Step Steer",
        description="Applies a steering step at a specific time.",
        defaults={"delta_deg": 5.0, "t_step": 1.0},
        create=step_steer,
    ),
    ScenarioPreset(
        id="const-radius",
        label="Constant Radius",
        description="Commands the kinematic steer angle for a target turn radius.",
        defaults={"radius": 50.0},
        create=const_radius,
    ),
    ScenarioPreset(
        id="sine-steer",
        label="Sine Steer",
        description="Sinusoidal steering at a fixed amplitude and frequency.",
        defaults={"amplitude_deg": 2.0, "frequency": 0.5},
        create=sine_steer,
    ),
    ScenarioPreset(
        id="ramp-steer",
        label="Ramp Steer",
        description="Steer angle rising linearly with time.",
        defaults={"rate_deg": 1.0, "max_deg": 30.0},
        create=ramp_steer,
    ),
]


def list_scenario_presets() -> List[ScenarioPreset]:
    return list(SCENARIO_PRESETS)


def get_scenario_preset(scenario_id: str) -> Optional[ScenarioPreset]:
    for preset in SCENARIO_PRESETS:
        if preset.id == scenario_id:
            return preset
    return None


def create_scenario(scenario_id: str, overrides: Optional[Mapping[str, Any]] = None) -> ScenarioSampler:
    """Build a sampler from a preset id and option overrides.

    Unknown override keys are ignored.

    Raises:
        UnknownScenario: If no preset has ``scenario_id``
    """
    preset = get_scenario_preset(scenario_id)
    if preset is None:
        raise UnknownScenario(scenario_id)
    options: Dict[str, Any] = dict(preset.defaults)
    for key, value in (overrides or {}).items():
        if key in options:
            options[key] = float(value)
    return preset.create(**options)
