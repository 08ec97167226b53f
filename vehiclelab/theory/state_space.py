# Continuous state-space form of the linear bicycle
# FORBIDDEN: logging, any I/O

from dataclasses import dataclass

from ..core.params import derive_linear_bicycle_coeffs
from ..core.types import LinearBicycleCoefficients, VehicleParams
from .linalg import Matrix2, Vector2


@dataclass(frozen=True)
class StateSpace:
    """d/dt [vy, r] = A [vy, r] + B steer."""
    a: Matrix2
    b: Vector2
    coeffs: LinearBicycleCoefficients

    @property
    def speed(self) -> float:
        return self.coeffs.vx


def build_state_space(vehicle: VehicleParams, speed: float) -> StateSpace:
    """Build (A, B) at ``speed`` (floored like the simulation)."""
    c = derive_linear_bicycle_coeffs(vehicle, speed)
    return StateSpace(
        a=Matrix2(c.a11, c.a12, c.a21, c.a22),
        b=Vector2(c.b1, c.b2),
        coeffs=c,
    )
