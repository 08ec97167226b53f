# Steady-state skidpad prediction
# FORBIDDEN: logging, any I/O

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict

from ..core.errors import InvalidGeometry
from ..core.params import compute_understeer_gradient, steady_state_steer_angle
from ..core.types import VehicleParams


@dataclass(frozen=True)
class SkidpadPrediction:
    speed: float
    radius: float
    yaw_rate: float             # rad/s
    ay: float                   # m/s²
    ay_g: float
    understeer_gradient: float  # rad per m/s²
    steer: float                # rad

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def predict_skidpad(speed: float, radius: float, vehicle: VehicleParams) -> SkidpadPrediction:
    """Yaw rate, lateral acceleration and steer holding a circle of ``radius``.

    Raises:
        InvalidGeometry: If radius is not positive
    """
    if not math.isfinite(radius) or radius <= 0:
        raise InvalidGeometry(f"Radius must be positive, got {radius}")
    ay = speed * speed / radius
    return SkidpadPrediction(
        speed=speed,
        radius=radius,
        yaw_rate=speed / radius,
        ay=ay,
        ay_g=ay / vehicle.g,
        understeer_gradient=compute_understeer_gradient(vehicle),
        steer=steady_state_steer_angle(speed, radius, vehicle),
    )
