# Model contract shared by all vehicle models
# FORBIDDEN: logging, any I/O

import math
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Type

import numpy as np

from ..core.conventions import AXES
from ..core.errors import InvalidParameter
from ..core.integrators import Integrator
from ..core.types import Geometry, SimInputs, Telemetry


class ParameterSpec(NamedTuple):
    """Schema entry describing one tunable model parameter."""
    name: str
    kind: str
    default: Any
    min: Optional[float]
    max: Optional[float]
    label: str
    unit: str
    group: str


def param(
    default: Any,
    min_val: Optional[float] = None,
    max_val: Optional[float] = None,
    label: str = "",
    unit: str = "",
    group: str = "general",
):
    """Dataclass field carrying range and display metadata."""
    return field(
        default=default,
        metadata={
            "min": min_val,
            "max": max_val,
            "label": label,
            "unit": unit,
            "group": group,
        },
    )


@dataclass(frozen=True)
class ModelParams:
    """Base class for typed, range-checked model parameters.

    Validation runs once at construction. Steps never re-validate.
    """
    dt: float = param(0.01, 1e-4, 1.0, "Timestep", "s", "integration")
    noise_std: float = param(0.0, 0.0, 1.0, "Process noise amplitude", "", "noise")
    process_noise: bool = param(False, label="Enable process noise", group="noise")
    integrator: str = param(Integrator.RK4.value, label="Integrator", group="integration")

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if f.name == "integrator":
                try:
                    object.__setattr__(self, f.name, Integrator(value).value)
                except ValueError:
                    choices = [i.value for i in Integrator]
                    raise InvalidParameter(f"integrator must be one of {choices}, got {value!r}") from None
                continue
            if isinstance(f.default, bool):
                if not isinstance(value, (bool, np.bool_)):
                    raise InvalidParameter(f"{f.name} must be a boolean, got {value!r}")
                object.__setattr__(self, f.name, bool(value))
                continue
            try:
                number = float(value)
            except (TypeError, ValueError):
                raise InvalidParameter(f"{f.name} must be a number, got {value!r}") from None
            if not math.isfinite(number):
                raise InvalidParameter(f"{f.name} must be finite, got {value}")
            low = f.metadata.get("min")
            high = f.metadata.get("max")
            if low is not None and number < low:
                raise InvalidParameter(f"{f.name}={number} below minimum {low}")
            if high is not None and number > high:
                raise InvalidParameter(f"{f.name}={number} above maximum {high}")
            object.__setattr__(self, f.name, number)

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    @classmethod
    def from_mapping(cls, values: Optional[Mapping[str, Any]] = None) -> "ModelParams":
        """Build from a mapping, ignoring keys the model does not know."""
        values = values or {}
        known = set(cls.field_names())
        return cls(**{k: v for k, v in values.items() if k in known})

    def merged(self, overrides: Optional[Mapping[str, Any]] = None) -> "ModelParams":
        """Return a copy with ``overrides`` applied (unknown keys ignored)."""
        overrides = overrides or {}
        known = set(self.field_names())
        return replace(self, **{k: v for k, v in overrides.items() if k in known})

    @classmethod
    def schema(cls) -> List[ParameterSpec]:
        specs = []
        for f in fields(cls):
            if isinstance(f.default, bool):
                kind = "bool"
            elif f.name == "integrator":
                kind = "choice"
            else:
                kind = "float"
            specs.append(ParameterSpec(
                name=f.name,
                kind=kind,
                default=f.default,
                min=f.metadata.get("min"),
                max=f.metadata.get("max"),
                label=f.metadata.get("label", f.name),
                unit=f.metadata.get("unit", ""),
                group=f.metadata.get("group", "general"),
            ))
        return specs

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @property
    def noise_active(self) -> bool:
        return self.process_noise and self.noise_std > 0


def draw_noise(rng: Optional[np.random.Generator], std: float) -> float:
    """Uniform sample in [-std, std] from an explicit generator.

    Raises:
        InvalidParameter: If process noise is requested without a generator
    """
    if rng is None:
        raise InvalidParameter("Process noise is enabled but no random generator was passed")
    return float(rng.uniform(-std, std))


class VehicleModel(ABC):
    """Common contract for every vehicle model.

    A model is stateless: all evolving quantities live in the state value
    passed to and returned from ``step``.
    """

    id: str = ""
    label: str = ""
    params_class: Type[ModelParams] = ModelParams
    conventions: Mapping[str, str] = AXES

    @property
    def defaults(self) -> ModelParams:
        return self.params_class()

    def parameter_schema(self) -> List[ParameterSpec]:
        return self.params_class.schema()

    def make_params(self, overrides: Optional[Mapping[str, Any]] = None) -> ModelParams:
        """Defaults merged with ``overrides``, range-checked once."""
        return self.params_class.from_mapping(overrides)

    @abstractmethod
    def init(self, params: ModelParams):
        """Initial state at t=0."""

    @abstractmethod
    def step(
        self,
        state,
        inputs: SimInputs,
        dt: float,
        params: ModelParams,
        rng: Optional[np.random.Generator] = None,
    ):
        """Advance one fixed step and return a new state.

        Deterministic for the same arguments unless process noise is enabled,
        in which case ``rng`` is the only source of randomness.
        """

    @abstractmethod
    def outputs(self, state, params: ModelParams) -> Telemetry:
        """Derived telemetry for ``state``."""

    def geometry(self, params: ModelParams) -> Optional[Geometry]:
        return None

    def state_to_dict(self, state) -> Dict[str, Any]:
        return asdict(state)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"
