#!/usr/bin/env python3
"""Scenario suite entry point for VehicleLab."""

import argparse
import logging
import sys
from pathlib import Path

# Add repo root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from vehiclelab.analysis.logger import LOGGER_NAME, ExperimentLogger
from vehiclelab.config import apply_overrides, load_config, validate_config
from vehiclelab.models import create_default_registry
from vehiclelab.suite import run_suite


def main():
    parser = argparse.ArgumentParser(description="Run the VehicleLab scenario suite")
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("configs/default.yaml"),
        help="Path to configuration file",
    )
    parser.add_argument(
        "--model",
        action="append",
        default=None,
        help="Model id to run (repeatable, overrides config)",
    )
    parser.add_argument(
        "--override",
        action="append",
        default=[],
        help="Config overrides in format key.subkey=value",
    )
    parser.add_argument(
        "--experiment-name",
        type=str,
        default=None,
        help="Experiment name (overrides config)",
    )

    args = parser.parse_args()

    # Load config
    config = load_config(args.config)

    # Apply overrides
    if args.override:
        config = apply_overrides(config, args.override)

    if args.model:
        config["models"] = args.model

    if args.experiment_name:
        config.setdefault("experiment", {})["name"] = args.experiment_name

    errors = validate_config(config)
    if errors:
        print("Configuration validation failed:")
        for error in errors:
            print(f"  - {error}")
        sys.exit(1)

    # Setup logging
    experiment = config.get("experiment", {})
    experiment_name = experiment.get("name", "default")
    exp_logger = ExperimentLogger(
        experiment_name,
        base_dir=Path(experiment.get("output_dir", "experiments")),
        level=config.get("logging", {}).get("level", "INFO"),
    )
    exp_logger.save_config(config)

    logger = logging.getLogger(LOGGER_NAME)
    logger.info(f"Starting experiment: {experiment_name}")
    logger.info(f"Models: {', '.join(config['models'])}")

    registry = create_default_registry()
    suite = run_suite(config, registry)

    for result in suite.scenarios:
        exp_logger.results.log_result(result)
    exp_logger.results.log_extra("validations", [v.to_dict() for v in suite.validations])
    exp_logger.results.log_extra("baselines", [b.to_dict() for b in suite.baselines])
    summary_path = exp_logger.results.save_summary()

    logger.info(f"Summary written to {summary_path}")
    logger.info("Done")
    sys.exit(0 if suite.passed else 1)


if __name__ == "__main__":
    main()
