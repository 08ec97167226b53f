#!/usr/bin/env python3
"""Validate configuration file."""

import argparse
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from vehiclelab.config import load_config, validate_config
from vehiclelab.models import create_default_registry
from vehiclelab.validation import create_default_cases


def main():
    parser = argparse.ArgumentParser(description="Validate configuration file")
    parser.add_argument(
        "config",
        type=Path,
        help="Path to configuration file",
    )

    args = parser.parse_args()

    if not args.config.exists():
        print(f"Error: Config file not found: {args.config}")
        sys.exit(1)

    config = load_config(args.config)
    errors = validate_config(config)

    # Ids are checked against the built-in registries
    registry = create_default_registry()
    for model_id in config.get("models") or []:
        if model_id not in registry:
            errors.append(f"Unknown model id in models: {model_id}")
    cases = create_default_cases()
    for case_id in (config.get("validation") or {}).get("cases") or []:
        if case_id not in cases:
            errors.append(f"Unknown validation case: {case_id}")

    if errors:
        print("Configuration validation failed:")
        for error in errors:
            print(f"  - {error}")
        sys.exit(1)
    else:
        print("Configuration is valid")
        sys.exit(0)


if __name__ == "__main__":
    main()
