# Tests for validation case definitions

import math

import pytest
from vehiclelab.core import InvalidParameter, UnknownValidationCase, linear_cornering_steer_angle
from vehiclelab.models import BicycleParams, UnicycleParams
from vehiclelab.validation import ValidationCaseRegistry, ValidationParams
from vehiclelab.validation.cases import CONSTANT_RADIUS_SKIDPAD, NO_STEER_FLAT, skidpad_steer_angle


class TestCaseRegistry:

    def test_default_cases(self, cases):
        """Both built-in cases should be registered in order."""
        assert [c.id for c in cases.list_cases()] == ["no-steer-flat", "constant-radius-skidpad"]
        assert "no-steer-flat" in cases

    def test_require_unknown(self, cases):
        """Unknown ids should raise UnknownValidationCase."""
        assert cases.get("moose-test") is None
        with pytest.raises(UnknownValidationCase):
            cases.require("moose-test")

    def test_duplicate_rejected(self):
        """Registering the same id twice should fail."""
        registry = ValidationCaseRegistry()
        registry.register(NO_STEER_FLAT)
        with pytest.raises(ValueError):
            registry.register(NO_STEER_FLAT)


class TestCaseParams:

    def test_defaults(self):
        """Defaults should come from the field descriptors."""
        params = CONSTANT_RADIUS_SKIDPAD.default_params()
        assert params.speed == 60.0
        assert params.radius == 50.0
        assert params.duration == 5.0
        assert NO_STEER_FLAT.default_params().radius is None

    def test_resolve_overrides(self):
        """Overrides inside the field range should be applied."""
        params = CONSTANT_RADIUS_SKIDPAD.resolve_params({"speed": 40, "radius": None, "extra": 1})
        assert params.speed == 40.0
        assert params.radius == 50.0

    def test_resolve_out_of_range(self):
        """Values outside a field's range should raise InvalidParameter."""
        with pytest.raises(InvalidParameter):
            CONSTANT_RADIUS_SKIDPAD.resolve_params({"radius": 5.0})
        with pytest.raises(InvalidParameter):
            NO_STEER_FLAT.resolve_params({"speed": 500.0})


class TestExpectedValues:

    def test_no_steer_expected_zero(self):
        """Straight driving expects zero yaw and ay."""
        expected = NO_STEER_FLAT.compute_expected(ValidationParams(speed=80.0, duration=5.0))
        assert expected == (0.0, 0.0, 0.0)

    def test_skidpad_expected(self):
        """Skidpad expects v/R and v²/R."""
        expected = CONSTANT_RADIUS_SKIDPAD.compute_expected(
            ValidationParams(speed=72.0, duration=5.0, radius=40.0)
        )
        assert expected.yaw_rate == pytest.approx(0.5)
        assert expected.lateral_acceleration == pytest.approx(10.0)
        assert expected.lateral_accel_g == pytest.approx(10.0 / 9.81)

    def test_skidpad_config(self):
        """The skidpad case should enable the clamp and keep mu at least 1."""
        params = ValidationParams(speed=54.0, duration=5.0, radius=50.0)
        applied = CONSTANT_RADIUS_SKIDPAD.apply_config("bicycle", BicycleParams(mu=0.7), params)
        assert applied.use_friction_clamp
        assert applied.mu == 1.0
        assert applied.v == pytest.approx(15.0)

    def test_skidpad_steer(self):
        """Steer should be kinematic for the unicycle and the linear cornering steer for the bicycle."""
        params = ValidationParams(speed=54.0, duration=5.0, radius=50.0)
        unicycle = skidpad_steer_angle(UnicycleParams(l_eff=2.5), params)
        assert unicycle == pytest.approx(math.atan(2.5 / 50.0))

        bicycle = BicycleParams(v=15.0)
        expected = linear_cornering_steer_angle(15.0, 50.0, bicycle.vehicle_params())
        assert skidpad_steer_angle(bicycle, params) == pytest.approx(expected)
