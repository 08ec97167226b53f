# Tyre and chassis physics for the linear bicycle
# FORBIDDEN: logging, any I/O

import math
from typing import NamedTuple, Tuple

from .params import compute_friction_limits, floor_speed
from .types import VehicleParams


class AxleForces(NamedTuple):
    """Lateral axle forces after the optional friction clamp."""
    fy_front: float
    fy_rear: float
    front_limited: bool
    rear_limited: bool


def compute_slip_angles(
    vy: float,
    r: float,
    vx: float,
    a: float,
    b: float,
    steer: float,
) -> Tuple[float, float]:
    """Front and rear slip angles in rad.

    Args:
        vy: Lateral velocity at the CG in m/s
        r: Yaw rate in rad/s
        vx: Forward speed in m/s (floored in magnitude, sign kept)
        a: CG to front axle in m
        b: CG to rear axle in m
        steer: Front steer angle in rad

    Returns:
        (alpha_front, alpha_rear)
    """
    v = floor_speed(vx)
    alpha_front = (vy + a * r) / v - steer
    alpha_rear = (vy - b * r) / v
    return alpha_front, alpha_rear


def linear_lateral_force(stiffness: float, slip: float) -> float:
    """Linear tyre: Fy = -C * alpha."""
    return -stiffness * slip


def clamp_lateral_force(force: float, limit: float) -> Tuple[float, bool]:
    """Clamp a force to the friction circle radius ``limit``.

    Returns:
        (clamped force, whether the limit was hit)
    """
    limit = max(limit, 0.0)
    if abs(force) > limit:
        return math.copysign(limit, force), True
    return force, False


def clamp_lateral_forces(fy_front: float, fy_rear: float, params: VehicleParams) -> AxleForces:
    """Apply |Fy| <= mu * static axle load on both axles."""
    limits = compute_friction_limits(params)
    front, front_limited = clamp_lateral_force(fy_front, limits.front)
    rear, rear_limited = clamp_lateral_force(fy_rear, limits.rear)
    return AxleForces(front, rear, front_limited, rear_limited)


def lateral_acceleration(vx: float, r: float, vy_dot: float) -> float:
    """Body lateral acceleration ay = vx * r + dvy/dt."""
    return vx * r + vy_dot


def sideslip_angle(vy: float, vx: float) -> float:
    """Vehicle sideslip at the CG in rad."""
    return math.atan2(vy, vx)
