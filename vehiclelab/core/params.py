# Vehicle parameter derivations
# FORBIDDEN: logging, any I/O
# Pure functions: static loads, linear bicycle coefficients, friction envelope

import math

from .errors import InvalidGeometry
from .types import LinearBicycleCoefficients, StaticLoadSplit, VehicleParams

# Lowest forward speed magnitude used in any division by vx (m/s)
SPEED_FLOOR = 0.5


def _check_wheelbase(wheelbase: float) -> None:
    if not math.isfinite(wheelbase) or wheelbase <= 0:
        raise InvalidGeometry(f"Wheelbase must be positive, got {wheelbase}")


def create_vehicle_params(
    m: float,
    iz: float,
    a: float,
    b: float,
    cf: float,
    cr: float,
    mu: float = 1.0,
    track: float = 1.6,
    h_cg: float = 0.55,
    g: float = 9.81,
) -> VehicleParams:
    """Build a vehicle parameter set.

    Args:
        m: Mass in kg
        iz: Yaw inertia in kg m²
        a: CG to front axle distance in m
        b: CG to rear axle distance in m
        cf: Front axle cornering stiffness in N/rad
        cr: Rear axle cornering stiffness in N/rad
        mu: Tyre-road friction coefficient
        track: Track width in m
        h_cg: CG height in m
        g: Gravity in m/s²

    Returns:
        Frozen VehicleParams

    Raises:
        InvalidGeometry: If a + b is not positive
    """
    _check_wheelbase(a + b)
    return VehicleParams(
        m=float(m),
        iz=float(iz),
        a=float(a),
        b=float(b),
        cf=float(cf),
        cr=float(cr),
        mu=float(mu),
        track=float(track),
        h_cg=float(h_cg),
        g=float(g),
    )


def compute_static_loads(params: VehicleParams) -> StaticLoadSplit:
    """Distribute vehicle weight over the axles by lever arms.

    Args:
        params: Vehicle parameters

    Returns:
        Front and rear normal loads in N
    """
    wheelbase = params.a + params.b
    _check_wheelbase(wheelbase)
    weight = params.m * params.g
    return StaticLoadSplit(
        front=weight * params.b / wheelbase,
        rear=weight * params.a / wheelbase,
    )


def compute_friction_limits(params: VehicleParams) -> StaticLoadSplit:
    """Maximum lateral force magnitude per axle (mu times static load)."""
    loads = compute_static_loads(params)
    return StaticLoadSplit(front=params.mu * loads.front, rear=params.mu * loads.rear)


def floor_speed(vx: float, floor: float = SPEED_FLOOR) -> float:
    """Floor |vx| to ``floor`` keeping its sign (zero counts as forward)."""
    sign = -1.0 if vx < 0 else 1.0
    return sign * max(abs(vx), floor)


def derive_linear_bicycle_coeffs(params: VehicleParams, vx: float) -> LinearBicycleCoefficients:
    """Linear 2-DOF bicycle state-space entries at forward speed ``vx``.

    States are lateral velocity vy and yaw rate r, input is the front steer
    angle. Slip angles follow alpha = (lateral velocity at axle) / vx - steer
    with Fy = -C * alpha.

    Args:
        params: Vehicle parameters
        vx: Forward speed in m/s (floored in magnitude to SPEED_FLOOR)

    Returns:
        LinearBicycleCoefficients
    """
    loads = compute_static_loads(params)
    v = floor_speed(vx)
    m, iz, a, b, cf, cr = params.m, params.iz, params.a, params.b, params.cf, params.cr

    moment = b * cr - a * cf
    return LinearBicycleCoefficients(
        a11=-(cf + cr) / (m * v),
        a12=moment / (m * v) - v,
        a21=moment / (iz * v),
        a22=-(a * a * cf + b * b * cr) / (iz * v),
        b1=cf / m,
        b2=a * cf / iz,
        vx=v,
        loads=loads,
    )


def compute_understeer_gradient(params: VehicleParams) -> float:
    """Understeer gradient U in rad per m/s² of lateral acceleration.

    Positive values mean the vehicle understeers.
    """
    loads = compute_static_loads(params)
    return (loads.front / params.cf - loads.rear / params.cr) / params.g


def steady_state_steer_angle(speed: float, radius: float, params: VehicleParams) -> float:
    """Steer angle holding a circle of ``radius`` at ``speed``.

    L/R + U v² / (R g), the skidpad reference steer.

    Raises:
        InvalidGeometry: If radius is not positive
    """
    if not math.isfinite(radius) or radius <= 0:
        raise InvalidGeometry(f"Radius must be positive, got {radius}")
    understeer = compute_understeer_gradient(params)
    return params.wheelbase / radius + understeer * speed * speed / (radius * params.g)


def linear_cornering_steer_angle(speed: float, radius: float, params: VehicleParams) -> float:
    """Steer at which the linear bicycle settles on ``radius`` at ``speed``.

    Ackermann angle L/R plus U * ay with ay = v²/R, the inverse of the
    steady yaw gain v / (L + U v²).

    Raises:
        InvalidGeometry: If radius is not positive
    """
    if not math.isfinite(radius) or radius <= 0:
        raise InvalidGeometry(f"Radius must be positive, got {radius}")
    understeer = compute_understeer_gradient(params)
    return params.wheelbase / radius + understeer * speed * speed / radius
