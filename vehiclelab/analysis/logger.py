# Logging utilities

import csv
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .metrics import check_result_health, summarize_grades

LOGGER_NAME = "vehiclelab"


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """Setup logging configuration.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file path for logging

    Returns:
        Configured logger
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper()))

    # Console handler (once)
    if not any(getattr(h, "_vehiclelab_console", False) for h in logger.handlers):
        console_handler = logging.StreamHandler()
        console_handler._vehiclelab_console = True
        console_format = logging.Formatter(
            "%(asctime)s | %(levelname)s | %(message)s",
            datefmt="%H:%M:%S",
        )
        console_handler.setFormatter(console_format)
        logger.addHandler(console_handler)
    for handler in logger.handlers:
        if getattr(handler, "_vehiclelab_console", False):
            handler.setLevel(getattr(logging, level.upper()))

    # File handler
    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_format = logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        )
        file_handler.setFormatter(file_format)
        logger.addHandler(file_handler)

    return logger


class ResultLogger:
    """Writes canonical results to JSON and their telemetry to CSV."""

    def __init__(self, output_dir: Path):
        """Initialize result logger.

        Args:
            output_dir: Directory for result files
        """
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        self._results: List[Any] = []
        self._extra: Dict[str, Any] = {}

    def log_result(self, result) -> Path:
        """Write one result.

        Args:
            result: Canonical scenario result

        Returns:
            Path of the JSON file
        """
        stem = f"{result.scenario}_{result.model_id}"
        json_path = self.output_dir / f"{stem}.json"
        with open(json_path, "w") as f:
            json.dump(result.to_dict(), f, indent=2)

        records = result.telemetry.to_records()
        if records:
            csv_path = self.output_dir / f"{stem}_telemetry.csv"
            with open(csv_path, "w", newline="") as f:
                writer = csv.DictWriter(f, fieldnames=list(records[0].keys()))
                writer.writeheader()
                writer.writerows(records)

        warnings = check_result_health(result)
        if warnings:
            logging.getLogger(LOGGER_NAME).warning(f"{stem}: " + "; ".join(warnings))

        self._results.append(result)
        return json_path

    def log_extra(self, name: str, payload: Dict[str, Any]) -> None:
        """Attach a JSON-serialisable record (validation, baseline) to the summary."""
        self._extra[name] = payload

    def save_summary(self) -> Path:
        """Save aggregated grades as summary.json."""
        summary = summarize_grades(self._results)
        summary.update(self._extra)
        path = self.output_dir / "summary.json"
        with open(path, "w") as f:
            json.dump(summary, f, indent=2)
        return path

    @property
    def results(self) -> List[Any]:
        return list(self._results)


class ExperimentLogger:
    """Output directory, log file and config snapshot for one suite run."""

    def __init__(
        self,
        experiment_name: str,
        base_dir: Path = Path("experiments"),
        level: str = "INFO",
    ):
        """Initialize experiment logger.

        Args:
            experiment_name: Name of experiment
            base_dir: Base directory for experiments
            level: Console logging level
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.experiment_dir = Path(base_dir) / f"{timestamp}_{experiment_name}"
        self.experiment_dir.mkdir(parents=True, exist_ok=True)

        self.logs_dir = self.experiment_dir / "logs"
        self.logs_dir.mkdir(exist_ok=True)

        self.logger = setup_logging(
            level=level,
            log_file=self.logs_dir / "run.log",
        )
        self.results = ResultLogger(self.experiment_dir / "results")

    def save_config(self, config: Dict[str, Any]) -> None:
        """Save experiment configuration.

        Args:
            config: Configuration dict
        """
        config_path = self.experiment_dir / "config.yaml"
        with open(config_path, "w") as f:
            yaml.dump(config, f, default_flow_style=False)
