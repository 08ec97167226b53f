# Core type definitions
# FORBIDDEN: logging, any I/O

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, NamedTuple


@dataclass(frozen=True)
class VehicleParams:
    """Immutable physical parameters shared by simulation and theory.

    Units are SI throughout: kg, kg m², m, N/rad, m/s².
    Build through ``create_vehicle_params`` so the wheelbase is checked.
    """
    m: float
    iz: float
    a: float
    b: float
    cf: float
    cr: float
    mu: float = 1.0
    track: float = 1.6
    h_cg: float = 0.55
    g: float = 9.81

    @property
    def wheelbase(self) -> float:
        return self.a + self.b


class StaticLoadSplit(NamedTuple):
    """Static normal load per axle in N."""
    front: float
    rear: float


@dataclass(frozen=True)
class LinearBicycleCoefficients:
    """Entries of the 2x2 lateral state matrix over (vy, r) and the steer input vector.

    ``vx`` is the effective forward speed after the low-speed floor.
    """
    a11: float
    a12: float
    a21: float
    a22: float
    b1: float
    b2: float
    vx: float
    loads: StaticLoadSplit


@dataclass(frozen=True)
class SimInputs:
    """Driver inputs for one integration step."""
    steer: float = 0.0     # rad, positive turns left
    throttle: float = 0.0  # [0, 1]
    brake: float = 0.0     # [0, 1]


@dataclass(frozen=True)
class Telemetry:
    """Read-only per-tick output derived from a model state."""
    t: float
    x: float
    y: float
    psi: float
    r: float
    ay: float
    beta: float
    vy: float = 0.0
    notes: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "notes", MappingProxyType(dict(self.notes)))

    def at(self, t: float) -> "Telemetry":
        """Return a copy stamped with time ``t``."""
        return replace(self, t=t, notes=dict(self.notes))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "t": self.t,
            "x": self.x,
            "y": self.y,
            "psi": self.psi,
            "r": self.r,
            "ay": self.ay,
            "beta": self.beta,
            "vy": self.vy,
            "notes": dict(self.notes),
        }


@dataclass(frozen=True)
class Geometry:
    """Visualization hint for a model's footprint in m."""
    length: float
    width: float
    wheelbase: float
