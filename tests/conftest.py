# Pytest configuration and fixtures

import pytest
import numpy as np
from pathlib import Path
import tempfile
import yaml

from vehiclelab.core import create_vehicle_params
from vehiclelab.models import create_default_registry
from vehiclelab.validation import create_default_cases


@pytest.fixture
def seed():
    """Fixed seed for reproducibility."""
    return 42


@pytest.fixture
def rng(seed):
    """Seeded generator for noise-enabled runs."""
    return np.random.default_rng(seed)


@pytest.fixture
def vehicle():
    """Reference passenger car (matches the bicycle model defaults)."""
    return create_vehicle_params(
        m=1500.0,
        iz=2250.0,
        a=1.2,
        b=1.6,
        cf=80000.0,
        cr=80000.0,
        mu=1.0,
    )


@pytest.fixture
def registry():
    """Registry with the unicycle and bicycle models."""
    return create_default_registry()


@pytest.fixture
def cases():
    """Built-in validation cases."""
    return create_default_cases()


@pytest.fixture
def config():
    """Small suite configuration."""
    return {
        "experiment": {
            "name": "test",
            "output_dir": "experiments",
        },
        "logging": {
            "level": "WARNING",
        },
        "models": ["bicycle"],
        "model_params": {
            "bicycle": {
                "mu": 1.0,
            },
        },
        "scenarios": {
            "step_steer": {
                "enabled": True,
                "speed": 20.0,
                "delta_deg": 4.0,
                "t_step": 1.0,
                "duration": 8.0,
                "dt": 0.01,
            },
            "frequency": {
                "enabled": False,
                "speed": 18.0,
                "freqs": [0.5, 0.8, 1.2],
                "amplitude_deg": 3.0,
            },
            "skidpad": {
                "enabled": False,
                "speed": 20.0,
                "radius": 50.0,
            },
            "ramp": {
                "enabled": False,
                "speed": 20.0,
                "ramp_rate": 0.02,
            },
        },
        "validation": {
            "model": "bicycle",
            "cases": ["no-steer-flat"],
            "baseline": False,
        },
    }


@pytest.fixture
def temp_dir():
    """Create temporary directory for test outputs."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def config_file(config, temp_dir):
    """Create temporary config file."""
    config_path = temp_dir / "config.yaml"
    with open(config_path, "w") as f:
        yaml.dump(config, f)
    return config_path
