# Tests for baseline checks and the no-steer test

import pytest
from vehiclelab.validation import run_baseline, run_no_steer_test


class TestBaseline:

    def test_unicycle(self, registry):
        """The unicycle should trace the 50 m circle."""
        result = run_baseline("unicycle", registry)
        assert result.passed, result.message
        assert result.metrics["rmsRadiusError"] < 0.5

    def test_bicycle(self, registry):
        """The bicycle step response should be bounded and settle."""
        result = run_baseline("bicycle", registry)
        assert result.passed, result.message
        assert result.metrics["steadyYawRate"] > 0
        assert result.metrics["overshoot"] <= 0.15

    def test_bicycle_failure_reported(self, registry):
        """An oversteering car above its critical speed should fail and say why."""
        result = run_baseline("bicycle", registry, {"v": 60.0, "cf": 200000.0, "cr": 20000.0})
        assert result.status == "fail"
        assert result.message

    def test_unknown_model(self, registry):
        """Models without a baseline should return None."""
        assert run_baseline("tank", registry) is None

    def test_to_dict(self, registry):
        """to_dict should expose status and metrics."""
        data = run_baseline("unicycle", registry).to_dict()
        assert data["modelId"] == "unicycle"
        assert data["status"] == "pass"


class TestNoSteer:

    def test_passes(self, registry):
        """Straight driving should produce no yaw."""
        result = run_no_steer_test(registry)
        assert result.passed
        assert result.max_yaw_rate == 0.0
        assert result.samples_evaluated > 0

    def test_noise_ignored(self, registry):
        """Process noise should be forced off."""
        result = run_no_steer_test(registry, model_params={"process_noise": True})
        assert result.passed
