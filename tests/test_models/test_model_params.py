# Tests for typed model parameters

import pytest
from vehiclelab.core import InvalidParameter
from vehiclelab.models import BicycleParams, UnicycleParams


class TestModelParams:

    def test_defaults(self):
        """Defaults should match the documented reference vehicle."""
        params = BicycleParams()
        assert params.m == 1500.0
        assert params.a + params.b == pytest.approx(2.8)
        assert params.dt == 0.01
        assert params.integrator == "rk4"
        assert not params.process_noise
        assert not params.use_friction_clamp

    def test_out_of_range_rejected(self):
        """Values outside the declared range should raise InvalidParameter."""
        with pytest.raises(InvalidParameter):
            BicycleParams(m=-1.0)
        with pytest.raises(InvalidParameter):
            UnicycleParams(v=1000.0)

    def test_non_finite_rejected(self):
        """NaN should raise InvalidParameter."""
        with pytest.raises(InvalidParameter):
            BicycleParams(cf=float("nan"))

    def test_bool_type_checked(self):
        """Boolean fields should not accept numbers."""
        with pytest.raises(InvalidParameter):
            BicycleParams(use_friction_clamp=1.0)

    def test_unknown_integrator_rejected(self):
        """Only the known integrators should be accepted."""
        with pytest.raises(InvalidParameter):
            BicycleParams(integrator="euler")
        assert BicycleParams(integrator="semi_implicit_euler").integrator == "semi_implicit_euler"

    def test_from_mapping_ignores_unknown(self):
        """Unknown keys should be ignored."""
        params = UnicycleParams.from_mapping({"v": 10, "m": 1200})
        assert params.v == 10.0
        assert not hasattr(params, "m")

    def test_merged_returns_copy(self):
        """merged should apply overrides without touching the original."""
        base = BicycleParams()
        merged = base.merged({"mu": 0.5, "unknown": 1})
        assert merged.mu == 0.5
        assert base.mu == 1.0

    def test_merged_validates(self):
        """merged should re-run range checks."""
        with pytest.raises(InvalidParameter):
            BicycleParams().merged({"mu": 10.0})

    def test_schema(self):
        """schema should describe every field with its bounds."""
        schema = {spec.name: spec for spec in BicycleParams.schema()}
        assert schema["m"].min == 100.0
        assert schema["m"].unit == "kg"
        assert schema["use_friction_clamp"].kind == "bool"
        assert schema["integrator"].kind == "choice"
        assert set(schema) == set(BicycleParams.field_names())

    def test_noise_active(self):
        """Noise should be active only when enabled with a positive amplitude."""
        assert not BicycleParams().noise_active
        assert BicycleParams(process_noise=True).noise_active
        assert not BicycleParams(process_noise=True, noise_std=0.0).noise_active

    def test_vehicle_params(self):
        """Bicycle parameters should convert to vehicle parameters."""
        vehicle = BicycleParams(track_width=1.5).vehicle_params()
        assert vehicle.track == 1.5
        assert vehicle.wheelbase == pytest.approx(2.8)
