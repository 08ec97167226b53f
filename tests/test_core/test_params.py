# Tests for vehicle parameter derivations

import math

import pytest
from vehiclelab.core import (
    InvalidGeometry,
    compute_static_loads,
    compute_understeer_gradient,
    create_vehicle_params,
    derive_linear_bicycle_coeffs,
    linear_cornering_steer_angle,
    steady_state_steer_angle,
)
from vehiclelab.core.params import SPEED_FLOOR, compute_friction_limits, floor_speed


class TestCreateVehicleParams:

    def test_values_stored_as_floats(self):
        """Parameters should be stored as floats with defaults filled in."""
        params = create_vehicle_params(m=1500, iz=2250, a=1, b=2, cf=80000, cr=90000)
        assert isinstance(params.m, float)
        assert params.mu == 1.0
        assert params.g == 9.81
        assert params.wheelbase == 3.0

    def test_zero_wheelbase_rejected(self):
        """a + b <= 0 should raise InvalidGeometry."""
        with pytest.raises(InvalidGeometry):
            create_vehicle_params(m=1500, iz=2250, a=0.0, b=0.0, cf=80000, cr=80000)

    def test_frozen(self, vehicle):
        """Vehicle parameters should be immutable."""
        with pytest.raises(AttributeError):
            vehicle.m = 1000.0


class TestStaticLoads:

    def test_loads_sum_to_weight(self, vehicle):
        """Axle loads should add up to m g."""
        loads = compute_static_loads(vehicle)
        assert loads.front + loads.rear == pytest.approx(vehicle.m * vehicle.g)

    def test_lever_arm_split(self, vehicle):
        """The axle nearer the CG should carry more load."""
        loads = compute_static_loads(vehicle)
        # a=1.2 < b=1.6: CG nearer the front
        assert loads.front > loads.rear
        assert loads.front == pytest.approx(vehicle.m * vehicle.g * 1.6 / 2.8)

    def test_friction_limits_scale_with_mu(self):
        """Friction limits should be mu times the static loads."""
        params = create_vehicle_params(m=1500, iz=2250, a=1.2, b=1.6, cf=80000, cr=80000, mu=0.5)
        loads = compute_static_loads(params)
        limits = compute_friction_limits(params)
        assert limits.front == pytest.approx(0.5 * loads.front)
        assert limits.rear == pytest.approx(0.5 * loads.rear)


class TestLinearCoefficients:

    def test_matches_closed_form(self, vehicle):
        """Coefficients should follow the linear bicycle equations."""
        v = 20.0
        c = derive_linear_bicycle_coeffs(vehicle, v)
        m, iz, a, b, cf, cr = 1500.0, 2250.0, 1.2, 1.6, 80000.0, 80000.0

        assert c.a11 == pytest.approx(-(cf + cr) / (m * v))
        assert c.a12 == pytest.approx((b * cr - a * cf) / (m * v) - v)
        assert c.a21 == pytest.approx((b * cr - a * cf) / (iz * v))
        assert c.a22 == pytest.approx(-(a * a * cf + b * b * cr) / (iz * v))
        assert c.b1 == pytest.approx(cf / m)
        assert c.b2 == pytest.approx(a * cf / iz)
        assert c.vx == v

    def test_low_speed_floor(self, vehicle):
        """Speeds below the floor should be raised to it."""
        c = derive_linear_bicycle_coeffs(vehicle, 0.0)
        assert c.vx == SPEED_FLOOR
        assert all(math.isfinite(x) for x in (c.a11, c.a12, c.a21, c.a22))

    def test_floor_keeps_sign(self):
        """Reverse speeds should keep their sign when floored."""
        assert floor_speed(-0.1) == -SPEED_FLOOR
        assert floor_speed(0.1) == SPEED_FLOOR
        assert floor_speed(0.0) == SPEED_FLOOR
        assert floor_speed(-3.0) == -3.0


class TestUndersteer:

    def test_understeer_sign(self, vehicle):
        """Equal stiffness with a front-heavy car should understeer."""
        assert compute_understeer_gradient(vehicle) > 0

    def test_neutral_steer(self):
        """Stiffness proportional to axle load should give U = 0."""
        params = create_vehicle_params(m=1500, iz=2250, a=1.4, b=1.4, cf=80000, cr=80000)
        assert compute_understeer_gradient(params) == pytest.approx(0.0, abs=1e-12)

    def test_steady_steer_angle(self, vehicle):
        """Steady steer should be L/R plus U v²/(R g)."""
        v, radius = 20.0, 50.0
        u = compute_understeer_gradient(vehicle)
        expected = vehicle.wheelbase / radius + u * v * v / (radius * vehicle.g)
        assert steady_state_steer_angle(v, radius, vehicle) == pytest.approx(expected)

    def test_linear_cornering_steer(self, vehicle):
        """Cornering steer should invert the steady yaw gain v / (L + U v²)."""
        v, radius = 20.0, 50.0
        u = compute_understeer_gradient(vehicle)
        steer = linear_cornering_steer_angle(v, radius, vehicle)
        assert steer * v / (vehicle.wheelbase + u * v * v) == pytest.approx(v / radius)
        with pytest.raises(InvalidGeometry):
            linear_cornering_steer_angle(v, 0.0, vehicle)

    def test_steady_steer_rejects_radius(self, vehicle):
        """Non-positive radius should raise InvalidGeometry."""
        with pytest.raises(InvalidGeometry):
            steady_state_steer_angle(20.0, 0.0, vehicle)
        with pytest.raises(InvalidGeometry):
            steady_state_steer_angle(20.0, -10.0, vehicle)
