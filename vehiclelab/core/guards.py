# Timestep guards
# FORBIDDEN: logging, any I/O

import math
from dataclasses import dataclass
from typing import Dict, NamedTuple, Optional

from .errors import InvalidTimestep


class DtBounds(NamedTuple):
    """Stable fixed-step range for one model in s."""
    min: float
    max: float
    recommended: float


DT_BOUNDS: Dict[str, DtBounds] = {
    "bicycle": DtBounds(min=0.002, max=0.02, recommended=0.01),
    "unicycle": DtBounds(min=0.005, max=0.05, recommended=0.02),
}

DEFAULT_DT = 0.01


@dataclass(frozen=True)
class DtGuardResult:
    dt: float
    clamped: bool
    message: Optional[str] = None


def validate_timestep(dt: float) -> float:
    """Reject non-finite and non-positive steps.

    Raises:
        InvalidTimestep: If dt is NaN, infinite, zero or negative
    """
    try:
        value = float(dt)
    except (TypeError, ValueError):
        raise InvalidTimestep(f"Timestep must be a number, got {dt!r}") from None
    if not math.isfinite(value) or value <= 0:
        raise InvalidTimestep(f"Timestep must be finite and positive, got {dt}")
    return value


def enforce_dt_bounds(model_id: str, dt: float) -> DtGuardResult:
    """Clamp ``dt`` into the stable band of ``model_id``.

    Total and idempotent: the returned dt always lies inside the bounds and
    ``clamped`` is True exactly when the input was outside them. Non-finite
    input maps to the recommended step. Unknown ids pass through unchanged.

    Args:
        model_id: Model identifier
        dt: Requested step in s

    Returns:
        DtGuardResult
    """
    bounds = DT_BOUNDS.get(model_id)
    if bounds is None:
        return DtGuardResult(dt=dt, clamped=False)

    if not math.isfinite(dt):
        return DtGuardResult(
            dt=bounds.recommended,
            clamped=True,
            message=f"dt {dt} is not finite; using {bounds.recommended}s for {model_id}",
        )
    if dt < bounds.min:
        return DtGuardResult(
            dt=bounds.min,
            clamped=True,
            message=f"dt {dt}s below stable range for {model_id}; clamped to {bounds.min}s",
        )
    if dt > bounds.max:
        return DtGuardResult(
            dt=bounds.max,
            clamped=True,
            message=f"dt {dt}s above stable range for {model_id}; clamped to {bounds.max}s",
        )
    return DtGuardResult(dt=dt, clamped=False)


def get_recommended_dt(model_id: str) -> float:
    bounds = DT_BOUNDS.get(model_id)
    return bounds.recommended if bounds is not None else DEFAULT_DT
