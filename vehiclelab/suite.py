# Scenario suite: runs the configured scenarios, validation cases and baselines

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from .models.registry import ModelRegistry
from .scenarios.canonical import (
    CanonicalResult,
    ControllerGains,
    FrequencyConfig,
    RampConfig,
    SkidpadConfig,
    StepSteerConfig,
    run_frequency_response,
    run_ramp_to_limit,
    run_skidpad,
    run_step_steer,
)
from .validation import (
    BaselineResult,
    ValidationCaseRegistry,
    ValidationRunResult,
    create_default_cases,
    run_baseline,
    run_validation,
)

logger = logging.getLogger(__name__)


@dataclass
class SuiteResult:
    scenarios: List[CanonicalResult] = field(default_factory=list)
    validations: List[ValidationRunResult] = field(default_factory=list)
    baselines: List[BaselineResult] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return (
            all(r.passed for r in self.scenarios)
            and all(v.passed for v in self.validations)
            and all(b.passed for b in self.baselines)
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "passed": self.passed,
            "scenarios": [
                {"scenario": r.scenario, "model": r.model_id, "passed": r.passed,
                 "grades": dict(r.grades), "metrics": dict(r.metrics)}
                for r in self.scenarios
            ],
            "validations": [
                {"case": v.case_id, "model": v.model_id, "passed": v.passed,
                 "metrics": {k: m.to_dict() for k, m in v.metrics.items()}}
                for v in self.validations
            ],
            "baselines": [b.to_dict() for b in self.baselines],
        }


def _enabled(section: Optional[Mapping[str, Any]]) -> bool:
    return section is not None and section.get("enabled", True)


def _step_steer(section: Mapping[str, Any], model_id: str, model_params: Mapping[str, Any]) -> StepSteerConfig:
    return StepSteerConfig(
        speed=float(section.get("speed", 20.0)),
        delta=math.radians(section.get("delta_deg", 4.0)),
        t_step=float(section.get("t_step", 1.0)),
        duration=float(section.get("duration", 8.0)),
        dt=float(section.get("dt", 0.01)),
        model_id=model_id,
        model_params=model_params,
    )


def _frequency(section: Mapping[str, Any], model_id: str, model_params: Mapping[str, Any]) -> FrequencyConfig:
    return FrequencyConfig(
        speed=float(section.get("speed", 18.0)),
        freqs=tuple(float(f) for f in section.get("freqs", (0.5, 0.8, 1.2))),
        amplitude=math.radians(section.get("amplitude_deg", 3.0)),
        cycles=int(section.get("cycles", 6)),
        settle_cycles=int(section.get("settle_cycles", 2)),
        dt=float(section.get("dt", 0.01)),
        model_id=model_id,
        model_params=model_params,
    )


def _skidpad(section: Mapping[str, Any], model_id: str, model_params: Mapping[str, Any]) -> SkidpadConfig:
    gains = section.get("controller") or {}
    return SkidpadConfig(
        speed=float(section.get("speed", 20.0)),
        radius=float(section.get("radius", 50.0)),
        duration=float(section.get("duration", 20.0)),
        dt=float(section.get("dt", 0.01)),
        model_id=model_id,
        model_params=model_params,
        controller=ControllerGains(**gains),
    )


def _ramp(section: Mapping[str, Any], model_id: str, model_params: Mapping[str, Any]) -> RampConfig:
    duration = section.get("duration")
    return RampConfig(
        speed=float(section.get("speed", 20.0)),
        ramp_rate=float(section.get("ramp_rate", 0.02)),
        duration=float(duration) if duration is not None else None,
        dt=float(section.get("dt", 0.01)),
        model_id=model_id,
        model_params=model_params,
    )


_SCENARIOS = (
    ("step_steer", _step_steer, run_step_steer),
    ("frequency", _frequency, run_frequency_response),
    ("skidpad", _skidpad, run_skidpad),
    ("ramp", _ramp, run_ramp_to_limit),
)


def run_suite(
    config: Mapping[str, Any],
    registry: ModelRegistry,
    cases: Optional[ValidationCaseRegistry] = None,
) -> SuiteResult:
    """Run every enabled scenario for every configured model.

    Validation cases run once against ``validation.model``; baselines run
    for each configured model when ``validation.baseline`` is set.

    Args:
        config: Suite configuration (see configs/default.yaml)
        registry: Model registry
        cases: Validation case registry (defaults to the built-in cases)

    Returns:
        SuiteResult
    """
    result = SuiteResult()
    models = config.get("models") or ["bicycle"]
    all_model_params = config.get("model_params") or {}
    scenarios = config.get("scenarios") or {}

    for model_id in models:
        registry.require_model(model_id)
        model_params = dict(all_model_params.get(model_id) or {})
        for name, build, run in _SCENARIOS:
            section = scenarios.get(name)
            if not _enabled(section):
                continue
            logger.info(f"Running {name} on {model_id}")
            result.scenarios.append(run(build(section, model_id, model_params), registry))

    validation = config.get("validation") or {}
    case_ids = validation.get("cases") or []
    if case_ids:
        cases = cases if cases is not None else create_default_cases()
        validation_model = validation.get("model", "bicycle")
        validation_params = dict(all_model_params.get(validation_model) or {})
        for case_id in case_ids:
            result.validations.append(
                run_validation(
                    case_id,
                    registry,
                    cases=cases,
                    model_id=validation_model,
                    model_params=validation_params,
                    params=(validation.get("params") or {}).get(case_id),
                )
            )

    if validation.get("baseline", False):
        for model_id in models:
            baseline = run_baseline(model_id, registry, all_model_params.get(model_id))
            if baseline is not None:
                result.baselines.append(baseline)

    status = "PASS" if result.passed else "FAIL"
    logger.info(
        f"Suite {status}: {len(result.scenarios)} scenarios, "
        f"{len(result.validations)} validations, {len(result.baselines)} baselines"
    )
    return result
