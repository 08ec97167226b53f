# Tests for the kinematic unicycle model

import math

import numpy as np
import pytest
from vehiclelab.core import InvalidParameter, InvalidTimestep, SimInputs
from vehiclelab.models import UnicycleModel, UnicycleParams


@pytest.fixture
def model():
    return UnicycleModel()


def run(model, params, steer, steps, dt=0.02, rng=None):
    state = model.init(params)
    for _ in range(steps):
        state = model.step(state, SimInputs(steer=steer), dt, params, rng=rng)
    return state


class TestUnicycle:

    def test_initial_state(self, model):
        """Initial state should be at rest at the origin."""
        state = model.init(UnicycleParams())
        assert state.t == 0.0
        assert (state.x, state.y, state.psi) == (0.0, 0.0, 0.0)

    def test_straight_line(self, model):
        """Zero steer should drive along +x at speed v."""
        params = UnicycleParams(v=10.0)
        state = run(model, params, 0.0, 50)
        assert state.x == pytest.approx(10.0)
        assert state.y == pytest.approx(0.0)
        assert state.t == pytest.approx(1.0)

    def test_yaw_rate(self, model):
        """Yaw rate should be v tan(steer) / L_eff."""
        params = UnicycleParams(v=20.0, l_eff=2.5)
        steer = 0.05
        state = run(model, params, steer, 1)
        assert state.yaw_rate == pytest.approx(20.0 * math.tan(steer) / 2.5)

    @pytest.mark.parametrize("integrator", ["rk4", "semi_implicit_euler"])
    def test_circle_radius(self, model, integrator):
        """Constant steer should trace a circle of radius L / tan(steer)."""
        radius = 50.0
        params = UnicycleParams(v=15.0, l_eff=2.7, integrator=integrator)
        steer = math.atan(2.7 / radius)
        state = model.init(params)
        errors = []
        for _ in range(1000):
            state = model.step(state, SimInputs(steer=steer), 0.02, params)
            errors.append(math.hypot(state.x, state.y - radius) - radius)
        rms = float(np.sqrt(np.mean(np.square(errors))))
        assert rms < 0.5

    def test_outputs(self, model):
        """Telemetry should report centripetal ay and zero sideslip."""
        params = UnicycleParams(v=20.0)
        state = run(model, params, 0.02, 10)
        telemetry = model.outputs(state, params)
        assert telemetry.beta == 0.0
        assert telemetry.ay == pytest.approx(20.0 * telemetry.r)
        assert telemetry.notes["curvature"] == pytest.approx(math.tan(0.02) / 2.7)
        assert telemetry.notes["dt_clamped"] == 0.0

    def test_dt_clamped(self, model):
        """Oversized steps should be clamped and flagged."""
        params = UnicycleParams()
        state = model.step(model.init(params), SimInputs(), 1.0, params)
        assert state.dt_clamped
        assert state.t == pytest.approx(0.05)
        assert model.outputs(state, params).notes["dt_clamped"] == 1.0

    def test_invalid_dt(self, model):
        """Non-positive steps should raise InvalidTimestep."""
        params = UnicycleParams()
        with pytest.raises(InvalidTimestep):
            model.step(model.init(params), SimInputs(), 0.0, params)

    def test_noise_requires_generator(self, model):
        """Enabled noise without a generator should raise."""
        params = UnicycleParams(process_noise=True)
        with pytest.raises(InvalidParameter):
            model.step(model.init(params), SimInputs(), 0.02, params)

    def test_noise_reproducible(self, model, seed):
        """Same seed should give identical trajectories."""
        params = UnicycleParams(process_noise=True)
        a = run(model, params, 0.0, 100, rng=np.random.default_rng(seed))
        b = run(model, params, 0.0, 100, rng=np.random.default_rng(seed))
        assert a == b
        assert a.y != 0.0

    def test_geometry(self, model):
        """Geometry should follow the effective wheelbase."""
        geometry = model.geometry(UnicycleParams(l_eff=3.0))
        assert geometry.length == 3.0
        assert geometry.wheelbase == 3.0
        assert geometry.width == 1.4
