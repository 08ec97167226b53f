# Tests for the validation harness

import json

import numpy as np
import pytest
from vehiclelab.core import InvalidParameter, UnknownModel, UnknownValidationCase
from vehiclelab.validation import run_validation


class TestRunValidation:

    def test_no_steer_passes(self, registry, cases):
        """Zero steer should show no yaw or lateral acceleration."""
        result = run_validation("no-steer-flat", registry, cases)
        assert result.passed
        assert result.metrics["yaw_rate"].max_error == 0.0
        assert result.dt == 0.01

    def test_skidpad_passes(self, registry, cases):
        """The bicycle should hold the default skidpad circle."""
        result = run_validation("constant-radius-skidpad", registry, cases)
        assert result.passed, {k: m.to_dict() for k, m in result.metrics.items()}
        assert result.applied_params.use_friction_clamp

    def test_sampling(self, registry, cases):
        """Samples should be taken at the case rate after the settle time."""
        result = run_validation("no-steer-flat", registry, cases, params={"duration": 4.0})
        times = result.series.time
        assert times[0] == pytest.approx(0.0)
        assert np.allclose(np.diff(times), 0.05, atol=1e-6)
        assert len(times) in (80, 81)
        assert np.all(result.series.expected_yaw_rate == 0.0)

    def test_unicycle_skidpad(self, registry, cases):
        """The unicycle should also follow the circle exactly."""
        result = run_validation("constant-radius-skidpad", registry, cases, model_id="unicycle")
        assert result.passed
        assert result.dt == 0.02

    def test_errors(self, registry, cases):
        """Unknown ids and bad parameters should raise."""
        with pytest.raises(UnknownValidationCase):
            run_validation("moose-test", registry, cases)
        with pytest.raises(UnknownModel):
            run_validation("no-steer-flat", registry, cases, model_id="tank")
        with pytest.raises(InvalidParameter):
            run_validation("constant-radius-skidpad", registry, cases, params={"speed": 10.0})

    def test_to_dict(self, registry, cases):
        """Results should serialise to JSON."""
        data = json.loads(json.dumps(run_validation("no-steer-flat", registry, cases).to_dict()))
        assert data["caseId"] == "no-steer-flat"
        assert data["passed"] is True
        assert len(data["series"]["time"]) == len(data["series"]["measuredYawRate"])
