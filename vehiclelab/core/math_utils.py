# Mathematical utilities
# FORBIDDEN: logging, any I/O

import numpy as np
from typing import Tuple


def rotate_2d(x: float, y: float, angle: float) -> Tuple[float, float]:
    """Rotate 2D point by angle.

    Args:
        x, y: Point coordinates
        angle: Rotation angle in radians

    Returns:
        Rotated (x, y) coordinates
    """
    cos_a = np.cos(angle)
    sin_a = np.sin(angle)
    return (
        float(x * cos_a - y * sin_a),
        float(x * sin_a + y * cos_a),
    )


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp value to range."""
    return max(min_val, min(max_val, value))


def relative_error(measured: float, expected: float, eps: float = 1e-9) -> float:
    """|measured - expected| / max(|expected|, eps)."""
    return float(abs(measured - expected) / max(abs(expected), eps))
