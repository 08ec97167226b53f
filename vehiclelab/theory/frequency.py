# Frequency response of the linear bicycle
# FORBIDDEN: logging, any I/O

import cmath
import math
from dataclasses import dataclass
from typing import Any, Dict, Sequence, Tuple

import numpy as np

from ..core.types import VehicleParams
from .linalg import Complex, solve_complex_2x2
from .state_space import StateSpace, build_state_space


@dataclass(frozen=True)
class FrequencyPrediction:
    """Per-unit-steer Bode data.

    Gains are yaw rate (1/s) and lateral acceleration (m/s²) per rad of
    steer; phases are in rad. ``freqs`` are in Hz.
    """
    freqs: np.ndarray
    yaw_gain: np.ndarray
    yaw_phase: np.ndarray
    ay_gain: np.ndarray
    ay_phase: np.ndarray

    @property
    def dc_gain(self) -> float:
        return float(self.yaw_gain[0])

    @property
    def peak_frequency(self) -> float:
        return float(self.freqs[int(np.argmax(self.yaw_gain))])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "freqs": self.freqs.tolist(),
            "yawGain": self.yaw_gain.tolist(),
            "yawPhase": self.yaw_phase.tolist(),
            "ayGain": self.ay_gain.tolist(),
            "ayPhase": self.ay_phase.tolist(),
        }


def transfer_at(system: StateSpace, omega: float) -> Tuple[Complex, Complex]:
    """Solve (j omega I - A) X = B for X = (Vy, R).

    Raises:
        SingularSystem: If j omega is an eigenvalue of A
    """
    s = complex(0.0, omega)
    a = system.a
    return solve_complex_2x2(
        s - a.a11, -a.a12,
        -a.a21, s - a.a22,
        complex(system.b.x), complex(system.b.y),
    )


def predict_bode(speed: float, freqs: Sequence[float], vehicle: VehicleParams) -> FrequencyPrediction:
    """Yaw-rate and lateral-acceleration response at each frequency.

    Lateral acceleration follows ay = vx r + d(vy)/dt, i.e. vx R + j omega Vy.

    Args:
        speed: Forward speed in m/s
        freqs: Frequencies in Hz
        vehicle: Vehicle parameters

    Returns:
        FrequencyPrediction in the order of ``freqs``
    """
    system = build_state_space(vehicle, speed)
    vx = system.speed
    freqs = np.asarray(freqs, dtype=np.float64)

    yaw_gain = np.zeros_like(freqs)
    yaw_phase = np.zeros_like(freqs)
    ay_gain = np.zeros_like(freqs)
    ay_phase = np.zeros_like(freqs)
    for i, f in enumerate(freqs):
        omega = 2.0 * math.pi * f
        vy, r = transfer_at(system, omega)
        ay = vx * r + complex(0.0, omega) * vy
        yaw_gain[i] = abs(r)
        yaw_phase[i] = cmath.phase(r)
        ay_gain[i] = abs(ay)
        ay_phase[i] = cmath.phase(ay)

    return FrequencyPrediction(
        freqs=freqs,
        yaw_gain=yaw_gain,
        yaw_phase=yaw_phase,
        ay_gain=ay_gain,
        ay_phase=ay_phase,
    )
