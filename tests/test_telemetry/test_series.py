# Tests for telemetry series and plausibility checks

import math

import numpy as np
import pytest
from vehiclelab.telemetry import CanonicalSample, TelemetrySeries, SeriesValidator


def make_sample(t, yaw_rate=0.1, slip=0.01, limited=False):
    return CanonicalSample(
        t=t, steer=0.05, yaw_rate=yaw_rate, ay=2.0, vy=0.1, beta=0.005,
        x=20.0 * t, y=0.0, psi=yaw_rate * t,
        slip_front=slip, slip_rear=-slip,
        front_limited=limited, rear_limited=False, dt_clamped=False,
    )


@pytest.fixture
def series():
    return TelemetrySeries.from_samples([make_sample(0.1 * i) for i in range(10)])


class TestTelemetrySeries:

    def test_from_samples(self, series):
        """Columns should be built in sample order."""
        assert len(series) == 10
        assert series.t[3] == pytest.approx(0.3)
        assert series["yaw_rate"].dtype == np.float64
        assert series.front_limited.dtype == bool

    def test_columns_read_only(self, series):
        """Columns should reject in-place writes."""
        with pytest.raises(ValueError):
            series.t[0] = 5.0

    def test_mismatched_columns(self):
        """Columns of different lengths should be rejected."""
        with pytest.raises(ValueError):
            TelemetrySeries({"t": [0.0, 0.1], "steer": [0.0]})

    def test_since_and_tail(self, series):
        """since and tail should select trailing samples."""
        assert len(series.since(0.5)) == 5
        tail = series.tail(0.4)
        assert len(tail) == 4
        assert tail.t[0] == pytest.approx(0.6)

    def test_sample_roundtrip(self, series):
        """sample should rebuild the original tick."""
        assert series.sample(2) == make_sample(0.2)

    def test_concatenate_offsets_time(self, series):
        """Concatenated parts should have shifted time."""
        joined = TelemetrySeries.concatenate([series, series], [0.0, 1.0])
        assert len(joined) == 20
        assert joined.t[10] == pytest.approx(1.0)
        assert len(TelemetrySeries.concatenate([], [])) == 0

    def test_slip_and_limits(self):
        """Slip and friction flags should be summarised."""
        series = TelemetrySeries.from_samples(
            [make_sample(0.0), make_sample(0.1, slip=math.radians(8.0), limited=True)]
        )
        assert series.max_slip() == pytest.approx(math.radians(8.0))
        assert not series.in_linear_region()
        assert series.any_friction_limited()
        assert not series.any_dt_clamped()

    def test_records(self, series):
        """to_records should give plain Python values per tick."""
        records = series.to_records()
        assert len(records) == 10
        assert isinstance(records[0]["front_limited"], bool)
        assert records[1]["t"] == pytest.approx(0.1)


class TestSeriesValidator:

    def test_valid_series(self, series):
        """Plausible telemetry should pass."""
        valid, violations = SeriesValidator.validate(series)
        assert valid
        assert violations == []

    def test_out_of_bounds(self):
        """Implausible yaw rate should be reported."""
        series = TelemetrySeries.from_samples([make_sample(0.0, yaw_rate=9.0)])
        valid, violations = SeriesValidator.validate(series)
        assert not valid
        assert any("yaw_rate" in v for v in violations)

    def test_non_finite(self):
        """NaN telemetry should fail before bounds are checked."""
        series = TelemetrySeries.from_samples([make_sample(0.0, yaw_rate=float("nan"))])
        valid, violations = SeriesValidator.validate(series)
        assert not valid
        assert violations == ["Telemetry contains NaN or Inf"]
