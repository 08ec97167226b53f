# Closed-loop controllers for scenario inputs
# FORBIDDEN: logging, any I/O

from typing import Optional

from ..core.guards import validate_timestep
from ..core.math_utils import clamp


class PIDController:
    """Positional PID with a clamped output.

    The integrator only accumulates while the output is unsaturated, or when
    the error would drive it back inside the limits.
    """

    def __init__(
        self,
        kp: float,
        ki: float = 0.0,
        kd: float = 0.0,
        output_limit: float = 0.8,
    ):
        """Initialize controller.

        Args:
            kp: Proportional gain
            ki: Integral gain
            kd: Derivative gain
            output_limit: Symmetric output clamp
        """
        self.kp = kp
        self.ki = ki
        self.kd = kd
        self.output_limit = abs(output_limit)
        self.integral = 0.0
        self._previous_error: Optional[float] = None

    def reset(self) -> None:
        self.integral = 0.0
        self._previous_error = None

    def update(self, error: float, dt: float) -> float:
        """Controller output for ``error`` after a step of ``dt`` seconds."""
        dt = validate_timestep(dt)
        derivative = 0.0
        if self._previous_error is not None:
            derivative = (error - self._previous_error) / dt
        self._previous_error = error

        candidate = self.integral + error * dt
        raw = self.kp * error + self.ki * candidate + self.kd * derivative
        output = clamp(raw, -self.output_limit, self.output_limit)
        if raw == output or error * raw < 0:
            self.integral = candidate
        return output
