# Configuration loading, overrides and validation

from pathlib import Path
from typing import Any, Dict, List

import yaml

SCENARIO_SECTIONS = ("step_steer", "frequency", "skidpad", "ramp")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def load_config(config_path: Path) -> dict:
    """Load configuration from YAML file.

    Args:
        config_path: Path to config file

    Returns:
        Configuration dictionary
    """
    with open(config_path) as f:
        config = yaml.safe_load(f)
    return config or {}


def _infer_value(value: str) -> Any:
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    return value


def apply_overrides(config: dict, overrides: List[str]) -> dict:
    """Apply command-line overrides to config.

    Args:
        config: Base configuration
        overrides: List of "key.subkey=value" strings

    Returns:
        Modified configuration
    """
    for override in overrides:
        if "=" not in override:
            raise ValueError(f"Invalid override format: {override}. Expected key=value")

        key, value = override.split("=", 1)
        keys = key.split(".")

        # Navigate to nested key
        d = config
        for k in keys[:-1]:
            if k not in d or not isinstance(d[k], dict):
                d[k] = {}
            d = d[k]

        d[keys[-1]] = _infer_value(value)

    return config


def _positive(section: Dict[str, Any], key: str, prefix: str, errors: List[str]) -> None:
    if key not in section:
        return
    value = section[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        errors.append(f"{prefix}.{key} must be positive, got {value}")


def validate_config(config: dict) -> List[str]:
    """Validate configuration.

    Args:
        config: Configuration dictionary

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    if not isinstance(config, dict):
        return ["Configuration must be a mapping"]

    # Required sections
    for section in ("experiment", "models", "scenarios"):
        if section not in config:
            errors.append(f"Missing required section: {section}")

    if "experiment" in config:
        if not config["experiment"] or "name" not in config["experiment"]:
            errors.append("experiment.name is required")

    if "logging" in config:
        level = str(config["logging"].get("level", "INFO")).upper()
        if level not in LOG_LEVELS:
            errors.append(f"logging.level must be one of {', '.join(LOG_LEVELS)}, got '{level}'")

    if "models" in config:
        models = config["models"]
        if not isinstance(models, list) or not models:
            errors.append("models must be a non-empty list of model ids")
        elif not all(isinstance(m, str) and m for m in models):
            errors.append(f"models must contain model id strings, got {models}")

    if "model_params" in config and not isinstance(config["model_params"], dict):
        errors.append("model_params must map model ids to parameter overrides")

    if "scenarios" in config:
        scenarios = config["scenarios"] or {}
        for name in scenarios:
            if name not in SCENARIO_SECTIONS:
                errors.append(f"Unknown scenario section: scenarios.{name}")

        for name in SCENARIO_SECTIONS:
            section = scenarios.get(name)
            if not section:
                continue
            prefix = f"scenarios.{name}"
            for key in ("speed", "duration", "dt"):
                _positive(section, key, prefix, errors)

        step = scenarios.get("step_steer") or {}
        if "delta_deg" in step and step["delta_deg"] == 0:
            errors.append("scenarios.step_steer.delta_deg must be non-zero")

        frequency = scenarios.get("frequency") or {}
        if "freqs" in frequency:
            freqs = frequency["freqs"]
            if not isinstance(freqs, list) or not freqs:
                errors.append("scenarios.frequency.freqs must be a non-empty list")
            elif any(not isinstance(f, (int, float)) or f <= 0 for f in freqs):
                errors.append(f"scenarios.frequency.freqs must all be positive, got {freqs}")
        _positive(frequency, "amplitude_deg", "scenarios.frequency", errors)
        _positive(frequency, "cycles", "scenarios.frequency", errors)

        skidpad = scenarios.get("skidpad") or {}
        _positive(skidpad, "radius", "scenarios.skidpad", errors)

        ramp = scenarios.get("ramp") or {}
        _positive(ramp, "ramp_rate", "scenarios.ramp", errors)

    if "validation" in config:
        validation = config["validation"] or {}
        cases = validation.get("cases", [])
        if not isinstance(cases, list):
            errors.append(f"validation.cases must be a list, got {cases}")
        if "model" in validation and not isinstance(validation["model"], str):
            errors.append(f"validation.model must be a model id, got {validation['model']}")

    return errors
