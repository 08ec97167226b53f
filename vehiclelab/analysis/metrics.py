# Metrics computation

from dataclasses import asdict, dataclass
from typing import Any, Dict, List

import numpy as np

from ..telemetry.validation import SeriesValidator


@dataclass(frozen=True)
class ErrorMetrics:
    """Measured-vs-expected error summary for one signal."""
    rmse: float
    mean_error: float
    max_error: float
    tolerance: float
    passed: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def compute_error_metrics(
    measured: np.ndarray,
    expected: np.ndarray,
    tolerance: float,
) -> ErrorMetrics:
    """Compute RMSE, signed mean error and max absolute error.

    Args:
        measured: Measured samples
        expected: Expected samples (same length)
        tolerance: Maximum allowed absolute error

    Returns:
        ErrorMetrics; ``passed`` is max_error <= tolerance and False for
        empty or mismatched inputs
    """
    measured = np.asarray(measured, dtype=np.float64)
    expected = np.asarray(expected, dtype=np.float64)
    if measured.size == 0 or measured.shape != expected.shape:
        return ErrorMetrics(rmse=0.0, mean_error=0.0, max_error=0.0, tolerance=tolerance, passed=False)

    error = measured - expected
    max_error = float(np.max(np.abs(error)))
    return ErrorMetrics(
        rmse=float(np.sqrt(np.mean(error * error))),
        mean_error=float(np.mean(error)),
        max_error=max_error,
        tolerance=tolerance,
        passed=max_error <= tolerance,
    )


def summarize_grades(results: List[Any]) -> Dict[str, Any]:
    """Aggregate pass/fail over canonical results.

    Args:
        results: CanonicalResult-like objects with ``scenario``, ``model_id``
            and ``grades``

    Returns:
        Dict with totals and per-run grades
    """
    runs = []
    passed = 0
    for result in results:
        ok = all(result.grades.values())
        passed += int(ok)
        runs.append({
            "scenario": result.scenario,
            "model": result.model_id,
            "passed": ok,
            "grades": dict(result.grades),
        })
    return {
        "total": len(runs),
        "passed": passed,
        "failed": len(runs) - passed,
        "runs": runs,
    }


def check_result_health(result: Any) -> List[str]:
    """Check a canonical result for signs of a numerically broken run.

    Args:
        result: CanonicalResult

    Returns:
        List of warnings (empty if healthy)
    """
    warnings = []

    if not result.flags.get("finite", True):
        warnings.append("NON-FINITE TELEMETRY: simulation diverged")
    else:
        _, violations = SeriesValidator.validate(result.telemetry)
        warnings.extend(f"IMPLAUSIBLE TELEMETRY: {v}" for v in violations)

    if result.flags.get("dtClamped", False):
        warnings.append("DT CLAMPED: requested timestep outside the stable range")

    if not result.flags.get("linearRegion", True):
        max_slip = result.metrics.get("maxSlip", float("nan"))
        warnings.append(f"NONLINEAR SLIP: peak slip {np.degrees(max_slip):.1f} deg exceeds linear region")

    if result.flags.get("frictionLimited", False):
        warnings.append("FRICTION LIMITED: grades use widened tolerances")

    for name, value in result.metrics.items():
        if not np.isfinite(value):
            warnings.append(f"NON-FINITE METRIC: {name}={value}")

    failed = [name for name, ok in result.grades.items() if not ok]
    if failed:
        warnings.append(f"FAILED GRADES: {', '.join(failed)}")

    return warnings
