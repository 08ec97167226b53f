# Tests for timestep guards, conventions and errors

import math

import pytest
from vehiclelab.core import (
    DT_BOUNDS,
    InvalidParameter,
    InvalidTimestep,
    UnknownModel,
    VehicleLabError,
    enforce_dt_bounds,
    get_recommended_dt,
    validate_timestep,
)
from vehiclelab.core.conventions import AXES, assert_conventions


class TestValidateTimestep:

    @pytest.mark.parametrize("dt", [0.0, -0.01, float("nan"), float("inf")])
    def test_rejects_invalid(self, dt):
        """Non-finite and non-positive steps should raise InvalidTimestep."""
        with pytest.raises(InvalidTimestep):
            validate_timestep(dt)

    def test_accepts_positive(self):
        """Positive finite steps should pass through as floats."""
        assert validate_timestep(0.01) == 0.01

    def test_is_value_error(self):
        """InvalidTimestep should also be a ValueError."""
        with pytest.raises(ValueError):
            validate_timestep(0.0)


class TestEnforceDtBounds:

    @pytest.mark.parametrize("model_id", ["bicycle", "unicycle"])
    @pytest.mark.parametrize("dt", [1e-5, 0.001, 0.01, 0.02, 0.05, 1.0, float("nan")])
    def test_result_within_bounds(self, model_id, dt):
        """Guarded dt should always lie inside the model's band."""
        bounds = DT_BOUNDS[model_id]
        result = enforce_dt_bounds(model_id, dt)
        assert bounds.min <= result.dt <= bounds.max

    @pytest.mark.parametrize("dt", [1e-5, 0.01, 1.0])
    def test_idempotent(self, dt):
        """Guarding a guarded dt should change nothing."""
        first = enforce_dt_bounds("bicycle", dt)
        second = enforce_dt_bounds("bicycle", first.dt)
        assert second.dt == first.dt
        assert not second.clamped

    def test_clamped_flag(self):
        """clamped should be set exactly when the input was outside the band."""
        assert not enforce_dt_bounds("bicycle", 0.01).clamped
        low = enforce_dt_bounds("bicycle", 0.0001)
        assert low.clamped and low.dt == 0.002
        high = enforce_dt_bounds("bicycle", 0.1)
        assert high.clamped and high.dt == 0.02
        assert high.message

    def test_nan_uses_recommended(self):
        """NaN should map to the recommended step."""
        result = enforce_dt_bounds("unicycle", float("nan"))
        assert result.clamped
        assert result.dt == get_recommended_dt("unicycle")

    def test_unknown_model_passthrough(self):
        """Models without bounds should keep the requested dt."""
        result = enforce_dt_bounds("custom", 0.5)
        assert result.dt == 0.5
        assert not result.clamped
        assert get_recommended_dt("custom") == 0.01


class TestConventions:

    def test_shared_axes_accepted(self):
        """The shared axes should pass the check."""
        assert_conventions(AXES)

    def test_mismatch_rejected(self):
        """A model declaring clockwise yaw should be rejected."""
        with pytest.raises(InvalidParameter):
            assert_conventions({**AXES, "yaw": "clockwise"})


class TestErrors:

    def test_unknown_model_message(self):
        """UnknownModel should carry the id and be a LookupError."""
        error = UnknownModel("tank")
        assert error.model_id == "tank"
        assert "tank" in str(error)
        assert isinstance(error, LookupError)
        assert isinstance(error, VehicleLabError)
