# Core module - Pure functions, no side effects
# FORBIDDEN: logging, pathlib, any I/O

from .errors import (
    VehicleLabError,
    InvalidGeometry,
    InvalidTimestep,
    InvalidParameter,
    UnknownModel,
    UnknownScenario,
    UnknownValidationCase,
    SingularSystem,
)
from .types import VehicleParams, StaticLoadSplit, LinearBicycleCoefficients, SimInputs, Telemetry, Geometry
from .params import (
    create_vehicle_params,
    compute_static_loads,
    compute_friction_limits,
    derive_linear_bicycle_coeffs,
    compute_understeer_gradient,
    steady_state_steer_angle,
    linear_cornering_steer_angle,
)
from .guards import DT_BOUNDS, enforce_dt_bounds, get_recommended_dt, validate_timestep
from .integrators import Integrator, rk4_step, semi_implicit_euler_step, integrate
