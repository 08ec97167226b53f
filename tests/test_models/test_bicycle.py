# Tests for the linear bicycle model

import math

import numpy as np
import pytest
from vehiclelab.core import InvalidParameter, SimInputs, compute_static_loads
from vehiclelab.models import BicycleModel, BicycleParams


@pytest.fixture
def model():
    return BicycleModel()


def run(model, params, steer, duration, dt=0.01, rng=None):
    state = model.init(params)
    for _ in range(int(round(duration / dt))):
        state = model.step(state, SimInputs(steer=steer), dt, params, rng=rng)
    return state


class TestBicycle:

    def test_zero_steer_no_drift(self, model):
        """Zero steer should stay exactly straight over a long run."""
        params = BicycleParams(v=30.0)
        state = model.init(params)
        for _ in range(6000):
            state = model.step(state, SimInputs(steer=0.0), 0.01, params)
        assert state.r == 0.0
        assert state.vy == 0.0
        assert state.y == 0.0
        assert state.x == pytest.approx(30.0 * 60.0)

    def test_steady_yaw_rate(self, model):
        """Yaw rate should settle at v delta / (L + U v²)."""
        params = BicycleParams(v=20.0)
        vehicle = params.vehicle_params()
        loads = compute_static_loads(vehicle)
        understeer = (loads.front / vehicle.cf - loads.rear / vehicle.cr) / vehicle.g
        delta = math.radians(2.0)
        expected = 20.0 * delta / (vehicle.wheelbase + understeer * 400.0)

        state = run(model, params, delta, 5.0)
        assert state.r == pytest.approx(expected, rel=1e-3)

    def test_left_steer_turns_left(self, model):
        """Positive steer should give positive yaw rate and lateral position."""
        state = run(model, BicycleParams(v=20.0), 0.02, 3.0)
        assert state.r > 0
        assert state.psi > 0
        assert state.y > 0

    def test_dt_size_invariance(self, model):
        """Steady response should not depend on the step size."""
        params = BicycleParams(v=20.0)
        fine = run(model, params, 0.03, 4.0, dt=0.005)
        coarse = run(model, params, 0.03, 4.0, dt=0.01)
        assert fine.r == pytest.approx(coarse.r, rel=1e-3)
        assert fine.ay == pytest.approx(coarse.ay, rel=1e-3)

    def test_integrators_agree(self, model):
        """Both integrators should reach the same steady state."""
        rk4 = run(model, BicycleParams(v=20.0), 0.03, 5.0)
        euler = run(model, BicycleParams(v=20.0, integrator="semi_implicit_euler"), 0.03, 5.0)
        assert euler.r == pytest.approx(rk4.r, rel=1e-3)

    def test_friction_clamp_limits_force(self, model):
        """With the clamp on, axle forces should not exceed mu times load."""
        params = BicycleParams(v=25.0, mu=0.5, use_friction_clamp=True)
        state = run(model, params, 0.2, 3.0)
        loads = compute_static_loads(params.vehicle_params())
        assert abs(state.fy_front) <= 0.5 * loads.front + 1e-6
        assert abs(state.fy_rear) <= 0.5 * loads.rear + 1e-6
        assert state.front_limited or state.rear_limited

    def test_clamp_off_unlimited(self, model):
        """Without the clamp no axle should be flagged."""
        state = run(model, BicycleParams(v=25.0, mu=0.5), 0.2, 1.0)
        assert not state.front_limited
        assert not state.rear_limited

    def test_outputs_notes(self, model):
        """Telemetry notes should carry slip, forces and flags."""
        params = BicycleParams(v=20.0)
        state = run(model, params, 0.02, 1.0)
        telemetry = model.outputs(state, params)
        for key in ("slip_front", "slip_rear", "fy_front", "fy_rear",
                    "front_limited", "rear_limited", "vx_effective", "dt_clamped"):
            assert key in telemetry.notes
        assert telemetry.notes["vx_effective"] == 20.0
        assert telemetry.beta == pytest.approx(math.atan2(state.vy, 20.0))
        with pytest.raises(TypeError):
            telemetry.notes["slip_front"] = 0.0

    def test_low_speed_finite(self, model):
        """Zero speed should be floored and stay finite."""
        params = BicycleParams(v=0.0)
        state = run(model, params, 0.1, 1.0, dt=0.002)
        assert state.vx_effective == 0.5
        assert all(math.isfinite(x) for x in (state.vy, state.r, state.ay))

    def test_noise_requires_generator(self, model):
        """Enabled noise without a generator should raise."""
        params = BicycleParams(process_noise=True)
        with pytest.raises(InvalidParameter):
            model.step(model.init(params), SimInputs(), 0.01, params)

    def test_noise_reproducible(self, model, seed):
        """Noise should come only from the passed generator."""
        params = BicycleParams(process_noise=True)
        a = run(model, params, 0.0, 1.0, rng=np.random.default_rng(seed))
        b = run(model, params, 0.0, 1.0, rng=np.random.default_rng(seed))
        c = run(model, params, 0.0, 1.0, rng=np.random.default_rng(seed + 1))
        assert a == b
        assert a != c

    def test_state_to_dict(self, model):
        """state_to_dict should expose every state field."""
        data = model.state_to_dict(model.init(BicycleParams()))
        assert data["vy"] == 0.0
        assert "vx_effective" in data

    def test_geometry(self, model):
        """Geometry should use wheelbase and track width."""
        geometry = model.geometry(BicycleParams())
        assert geometry.wheelbase == pytest.approx(2.8)
        assert geometry.width == 1.6
