# Telemetry plausibility checks
# FORBIDDEN: logging, models.*, scenarios.*

import numpy as np
from typing import List, Tuple

from .series import TelemetrySeries


class SeriesValidator:
    """Check telemetry values are physically plausible for a passenger car."""

    # Physical bounds
    BOUNDS = {
        "steer": (-1.0, 1.0),          # rad
        "yaw_rate": (-5.0, 5.0),       # rad/s
        "ay": (-50.0, 50.0),           # m/s²
        "vy": (-50.0, 50.0),           # m/s
        "beta": (-np.pi / 2, np.pi / 2),
        "slip_front": (-np.pi / 2, np.pi / 2),
        "slip_rear": (-np.pi / 2, np.pi / 2),
    }

    @classmethod
    def validate(cls, series: TelemetrySeries) -> Tuple[bool, List[str]]:
        """Check every bounded column.

        Args:
            series: Telemetry series

        Returns:
            (is_valid, list of violations)
        """
        violations = []

        # Check for NaN/Inf first
        if not series.is_finite():
            violations.append("Telemetry contains NaN or Inf")
            return False, violations

        for name, (low, high) in cls.BOUNDS.items():
            column = series[name]
            if column.size == 0:
                continue
            if np.any(column < low) or np.any(column > high):
                violations.append(
                    f"{name} out of bounds: min={column.min():.4g}, max={column.max():.4g}"
                )

        return len(violations) == 0, violations
