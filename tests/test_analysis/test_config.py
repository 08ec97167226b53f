# Tests for configuration loading and validation

from pathlib import Path

import pytest
from vehiclelab.config import apply_overrides, load_config, validate_config

DEFAULT_CONFIG = Path(__file__).resolve().parents[2] / "configs" / "default.yaml"


class TestLoadConfig:

    def test_load(self, config_file, config):
        """Config files should round-trip through YAML."""
        assert load_config(config_file) == config

    def test_default_config_valid(self):
        """The shipped default config should validate."""
        assert validate_config(load_config(DEFAULT_CONFIG)) == []


class TestOverrides:

    def test_type_inference(self):
        """Overrides should infer int, float, bool and string."""
        config = apply_overrides({}, [
            "a.int=3",
            "a.float=0.5",
            "a.flag=true",
            "a.name=bicycle",
        ])
        assert config["a"] == {"int": 3, "float": 0.5, "flag": True, "name": "bicycle"}

    def test_nested_existing(self, config):
        """Overrides should update nested keys in place."""
        apply_overrides(config, ["scenarios.step_steer.speed=25"])
        assert config["scenarios"]["step_steer"]["speed"] == 25
        assert config["scenarios"]["step_steer"]["delta_deg"] == 4.0

    def test_invalid_format(self):
        """Overrides without '=' should raise ValueError."""
        with pytest.raises(ValueError):
            apply_overrides({}, ["scenarios.step_steer.speed"])


class TestValidateConfig:

    def test_valid(self, config):
        """The fixture config should validate."""
        assert validate_config(config) == []

    def test_missing_sections(self):
        """Missing sections should be reported."""
        errors = validate_config({})
        assert any("experiment" in e for e in errors)
        assert any("models" in e for e in errors)

    def test_bad_values(self, config):
        """Non-positive values and bad levels should be reported."""
        config["scenarios"]["step_steer"]["dt"] = 0
        config["scenarios"]["frequency"]["freqs"] = [0.5, -1.0]
        config["scenarios"]["skidpad"]["radius"] = -5
        config["logging"]["level"] = "LOUD"
        errors = validate_config(config)
        assert len(errors) == 4

    def test_unknown_scenario_section(self, config):
        """Unknown scenario sections should be reported."""
        config["scenarios"]["moose"] = {}
        assert validate_config(config) == ["Unknown scenario section: scenarios.moose"]
