# Frequency-response scenario: sinusoidal steer per frequency vs closed-form Bode data

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Sequence, Tuple

import numpy as np

from ...core.errors import InvalidParameter
from ...core.math_utils import relative_error
from ...core.types import SimInputs
from ...models.registry import ModelRegistry
from ...telemetry.series import TelemetrySeries
from ...theory.frequency import predict_bode
from .common import (
    CanonicalResult,
    SimulationConfig,
    common_flags,
    log_grades,
    run_simulation,
    run_speed,
    vehicle_params_from_model,
)

TOLERANCES = {
    "dcGain": (0.05, 0.10),
    "peakFrequency": (0.10, 0.20),
    "magnitudeRms": (0.15, 0.25),
}


@dataclass(frozen=True)
class FrequencyConfig:
    speed: float
    freqs: Sequence[float]                      # Hz, swept in ascending order
    amplitude: float = math.radians(2.0)        # rad
    cycles: int = 6
    settle_cycles: int = 2
    dt: float = 0.01
    model_id: str = "bicycle"
    model_params: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class FrequencyRun:
    frequency: float
    telemetry: TelemetrySeries
    yaw_gain: float
    yaw_phase: float
    ay_gain: float
    ay_phase: float
    friction_limited: bool
    max_slip: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "frequency": self.frequency,
            "yawGain": self.yaw_gain,
            "yawPhase": self.yaw_phase,
            "ayGain": self.ay_gain,
            "ayPhase": self.ay_phase,
            "frictionLimited": self.friction_limited,
            "maxSlip": self.max_slip,
        }


@dataclass(frozen=True)
class FrequencyResult(CanonicalResult):
    runs: Tuple[FrequencyRun, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["runs"] = [run.to_dict() for run in self.runs]
        return data


def estimate_sine_response(
    t: np.ndarray,
    values: np.ndarray,
    omega: float,
    amplitude: float,
) -> Tuple[float, float]:
    """Gain and phase of ``values`` against amplitude * sin(omega t).

    In-phase and quadrature correlation over a window holding a whole number
    of periods.

    Returns:
        (gain per unit input, phase in rad)
    """
    if len(t) == 0 or amplitude == 0:
        return 0.0, 0.0
    s = np.sin(omega * t)
    c = np.cos(omega * t)
    norm = float(np.sum(s * s))
    if norm <= 0:
        norm = len(t) / 2.0
    in_phase = float(np.sum(values * s))
    quadrature = float(np.sum(values * c))
    response_amplitude = math.hypot(in_phase, quadrature) / max(norm, 1e-6)
    return response_amplitude / amplitude, math.atan2(quadrature, in_phase)


def run_frequency_response(config: FrequencyConfig, registry: ModelRegistry) -> FrequencyResult:
    """Sweep sinusoidal steer over ``config.freqs`` and grade against Bode theory.

    Each frequency is simulated separately for ``cycles`` periods; the first
    ``settle_cycles`` periods are discarded before estimating gain and phase.
    The returned telemetry is all runs joined end to end in time.

    Raises:
        InvalidParameter: If ``freqs`` is empty or holds a non-positive value
    """
    freqs = sorted(float(f) for f in config.freqs)
    if not freqs:
        raise InvalidParameter("Frequency sweep needs at least one frequency")
    if any(not math.isfinite(f) or f <= 0 for f in freqs):
        raise InvalidParameter(f"Frequencies must be positive, got {freqs}")

    amplitude = config.amplitude
    runs = []
    sims = []
    for freq in freqs:
        omega = 2.0 * math.pi * freq
        period = 1.0 / freq

        def sine_input(t, previous, omega=omega):
            return SimInputs(steer=amplitude * math.sin(omega * t))

        sim = run_simulation(
            SimulationConfig(
                dt=config.dt,
                duration=config.cycles * period,
                input_fn=sine_input,
                model_id=config.model_id,
                params={"v": config.speed, **config.model_params},
            ),
            registry,
        )
        window = sim.series.since(config.settle_cycles * period)
        yaw_gain, yaw_phase = estimate_sine_response(window.t, window.yaw_rate, omega, amplitude)
        ay_gain, ay_phase = estimate_sine_response(window.t, window.ay, omega, amplitude)
        runs.append(FrequencyRun(
            frequency=freq,
            telemetry=sim.series,
            yaw_gain=yaw_gain,
            yaw_phase=yaw_phase,
            ay_gain=ay_gain,
            ay_phase=ay_phase,
            friction_limited=sim.series.any_friction_limited(),
            max_slip=sim.series.max_slip(),
        ))
        sims.append(sim)

    reference = sims[0]
    vehicle = vehicle_params_from_model(reference.params)
    theory = predict_bode(run_speed(reference.params, config.speed), freqs, vehicle)

    measured = np.array([run.yaw_gain for run in runs])
    expected = theory.yaw_gain

    dc_expected = float(expected[0])
    dc_error = 0.0 if dc_expected == 0 else relative_error(measured[0], dc_expected, 1e-6)

    sim_peak = freqs[int(np.argmax(measured))]
    theory_peak = theory.peak_frequency
    peak_error = relative_error(sim_peak, theory_peak, 1e-6)

    nonzero = expected != 0
    if np.any(nonzero):
        rel = (measured[nonzero] - expected[nonzero]) / expected[nonzero]
        rms_error = float(np.sqrt(np.mean(rel * rel)))
    else:
        rms_error = 0.0

    offsets = np.concatenate([[0.0], np.cumsum([config.cycles / f for f in freqs])[:-1]])
    telemetry = TelemetrySeries.concatenate([run.telemetry for run in runs], offsets)

    flags = common_flags(sims[0], telemetry)
    flags["dtClamped"] = any(sim.dt_clamped for sim in sims)
    column = 1 if flags["frictionLimited"] else 0
    grades = {
        "dcGain": dc_error <= TOLERANCES["dcGain"][column],
        "peakFrequency": peak_error <= TOLERANCES["peakFrequency"][column],
        "magnitudeRms": rms_error <= TOLERANCES["magnitudeRms"][column],
    }
    metrics = {
        "dcGainMeasured": float(measured[0]),
        "dcGainTheory": dc_expected,
        "dcGainError": dc_error,
        "peakFrequencyMeasured": sim_peak,
        "peakFrequencyTheory": theory_peak,
        "peakFreqError": peak_error,
        "rmsError": rms_error,
        "maxSlip": max(run.max_slip for run in runs),
    }

    result = FrequencyResult(
        scenario="frequency",
        model_id=reference.model_id,
        telemetry=telemetry,
        theory=theory.to_dict(),
        metrics=metrics,
        grades=grades,
        flags=flags,
        runs=tuple(runs),
    )
    log_grades(result)
    return result
