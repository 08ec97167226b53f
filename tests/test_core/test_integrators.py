# Tests for fixed-step integrators and math utilities

import math

import numpy as np
import pytest
from vehiclelab.core import Integrator, integrate, rk4_step, semi_implicit_euler_step
from vehiclelab.core.math_utils import relative_error, rotate_2d


def decay(state):
    return -state


class TestRK4:

    def test_exponential_decay_accuracy(self):
        """RK4 should track exp(-t) to fourth order."""
        state = np.array([1.0])
        dt = 0.1
        for _ in range(10):
            state = rk4_step(state, decay, dt)
        assert state[0] == pytest.approx(math.exp(-1.0), abs=1e-6)

    def test_input_not_modified(self):
        """The input state should not be modified."""
        state = np.array([1.0, 2.0])
        rk4_step(state, decay, 0.1)
        assert np.array_equal(state, [1.0, 2.0])

    def test_harmonic_oscillator_energy(self):
        """RK4 should keep oscillator energy nearly constant over one period."""
        def oscillator(s):
            return np.array([s[1], -s[0]])

        state = np.array([1.0, 0.0])
        dt = 0.01
        for _ in range(int(2 * math.pi / dt)):
            state = rk4_step(state, oscillator, dt)
        energy = 0.5 * (state[0] ** 2 + state[1] ** 2)
        assert energy == pytest.approx(0.5, abs=1e-6)


class TestSemiImplicitEuler:

    def test_single_evaluation(self):
        """One step should apply the derivative once over the full step."""
        state = semi_implicit_euler_step(np.array([1.0]), decay, 0.1)
        assert state[0] == pytest.approx(0.9)

    def test_integrate_dispatch(self):
        """integrate should accept enum members and their string values."""
        a = integrate(Integrator.RK4, [1.0], decay, 0.1)
        b = integrate("rk4", [1.0], decay, 0.1)
        c = integrate("semi_implicit_euler", [1.0], decay, 0.1)
        assert np.allclose(a, b)
        assert c[0] == pytest.approx(0.9)

    def test_unknown_integrator(self):
        """Unknown integrator names should raise ValueError."""
        with pytest.raises(ValueError):
            integrate("leapfrog", [1.0], decay, 0.1)


class TestMathUtils:

    def test_rotate_2d(self):
        """Rotating +x by 90 degrees should give +y."""
        x, y = rotate_2d(1.0, 0.0, math.pi / 2)
        assert x == pytest.approx(0.0, abs=1e-12)
        assert y == pytest.approx(1.0)

    def test_relative_error(self):
        """relative_error should guard against a zero reference."""
        assert relative_error(1.1, 1.0) == pytest.approx(0.1)
        assert math.isfinite(relative_error(1.0, 0.0))
