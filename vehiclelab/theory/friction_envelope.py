# Friction-limited steady cornering prediction
# FORBIDDEN: logging, any I/O

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict

from ..core.errors import InvalidGeometry
from ..core.params import compute_understeer_gradient
from ..core.types import VehicleParams


@dataclass(frozen=True)
class FrictionLimitPrediction:
    speed: float
    mu: float
    ay_max: float               # m/s²
    ay_max_g: float
    understeer_gradient: float  # rad per m/s²
    linear_gain: float          # steady ay per rad of steer
    steer_at_limit: float       # rad

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def predict_limit(speed: float, mu: float, vehicle: VehicleParams) -> FrictionLimitPrediction:
    """Lateral acceleration ceiling and the steer angle that reaches it.

    The linear gain is the steady ay per rad of the bicycle, v² / (L + U v²).
    The limit steer is (L + U v² / g) * ay_max / v².

    Args:
        speed: Forward speed in m/s
        mu: Friction coefficient
        vehicle: Vehicle parameters

    Raises:
        InvalidGeometry: If speed is zero or not finite
    """
    if not math.isfinite(speed) or speed == 0:
        raise InvalidGeometry(f"Friction limit is undefined at speed {speed}")
    understeer = compute_understeer_gradient(vehicle)
    v2 = speed * speed
    ay_max = mu * vehicle.g
    wheelbase = vehicle.wheelbase
    return FrictionLimitPrediction(
        speed=speed,
        mu=mu,
        ay_max=ay_max,
        ay_max_g=mu,
        understeer_gradient=understeer,
        linear_gain=v2 / (wheelbase + understeer * v2),
        steer_at_limit=(wheelbase + understeer * v2 / vehicle.g) * ay_max / v2,
    )
