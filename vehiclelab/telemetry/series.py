# Columnar telemetry series
# FORBIDDEN: logging, any I/O

import math
from dataclasses import dataclass, fields
from typing import Any, Dict, List, Sequence

import numpy as np

from ..core.types import Telemetry

LINEAR_REGION_SLIP = math.radians(6.0)


@dataclass(frozen=True)
class CanonicalSample:
    """One simulated tick as seen by scenario graders."""
    t: float
    steer: float
    yaw_rate: float
    ay: float
    vy: float
    beta: float
    x: float
    y: float
    psi: float
    slip_front: float
    slip_rear: float
    front_limited: bool
    rear_limited: bool
    dt_clamped: bool

    @classmethod
    def from_telemetry(cls, telemetry: Telemetry, steer: float) -> "CanonicalSample":
        notes = telemetry.notes
        return cls(
            t=telemetry.t,
            steer=steer,
            yaw_rate=telemetry.r,
            ay=telemetry.ay,
            vy=telemetry.vy,
            beta=telemetry.beta,
            x=telemetry.x,
            y=telemetry.y,
            psi=telemetry.psi,
            slip_front=notes.get("slip_front", 0.0),
            slip_rear=notes.get("slip_rear", 0.0),
            front_limited=notes.get("front_limited", 0.0) > 0,
            rear_limited=notes.get("rear_limited", 0.0) > 0,
            dt_clamped=notes.get("dt_clamped", 0.0) > 0,
        )


COLUMNS = tuple(f.name for f in fields(CanonicalSample))
_BOOL_COLUMNS = ("front_limited", "rear_limited", "dt_clamped")


class TelemetrySeries:
    """Ordered, read-only telemetry with one numpy column per field."""

    def __init__(self, columns: Dict[str, np.ndarray]):
        length = None
        self._columns: Dict[str, np.ndarray] = {}
        for name in COLUMNS:
            dtype = bool if name in _BOOL_COLUMNS else np.float64
            column = np.array(columns.get(name, ()), dtype=dtype)
            if length is None:
                length = len(column)
            elif len(column) != length:
                raise ValueError(f"Column {name} has length {len(column)}, expected {length}")
            column.flags.writeable = False
            self._columns[name] = column

    @classmethod
    def from_samples(cls, samples: Sequence[CanonicalSample]) -> "TelemetrySeries":
        return cls({name: [getattr(s, name) for s in samples] for name in COLUMNS})

    @classmethod
    def concatenate(cls, parts: Sequence["TelemetrySeries"], time_offsets: Sequence[float]) -> "TelemetrySeries":
        """Join series end to end, shifting each part's time by its offset."""
        if not parts:
            return cls({})
        columns = {}
        for name in COLUMNS:
            chunks = []
            for part, offset in zip(parts, time_offsets):
                chunk = part[name]
                chunks.append(chunk + offset if name == "t" else chunk)
            columns[name] = np.concatenate(chunks)
        return cls(columns)

    def __getitem__(self, name: str) -> np.ndarray:
        return self._columns[name]

    def __getattr__(self, name: str) -> np.ndarray:
        columns = self.__dict__.get("_columns", {})
        if name in columns:
            return columns[name]
        raise AttributeError(name)

    def __len__(self) -> int:
        return len(self._columns["t"])

    def sample(self, index: int) -> CanonicalSample:
        values = {}
        for name in COLUMNS:
            value = self._columns[name][index]
            values[name] = bool(value) if name in _BOOL_COLUMNS else float(value)
        return CanonicalSample(**values)

    def where(self, mask: np.ndarray) -> "TelemetrySeries":
        return TelemetrySeries({name: col[mask] for name, col in self._columns.items()})

    def since(self, t_start: float) -> "TelemetrySeries":
        """Samples with t >= t_start."""
        return self.where(self._columns["t"] >= t_start)

    def tail(self, fraction: float) -> "TelemetrySeries":
        """Last ``fraction`` of the samples (e.g. 0.4 for the last 40 %)."""
        start = int(math.floor(len(self) * (1.0 - fraction)))
        return self.where(np.arange(len(self)) >= start)

    def max_slip(self) -> float:
        if len(self) == 0:
            return 0.0
        return float(max(np.max(np.abs(self.slip_front)), np.max(np.abs(self.slip_rear))))

    def limited(self) -> np.ndarray:
        """Per-sample flag: either axle at the friction limit."""
        return self.front_limited | self.rear_limited

    def any_friction_limited(self) -> bool:
        return bool(np.any(self.limited()))

    def any_dt_clamped(self) -> bool:
        return bool(np.any(self.dt_clamped))

    def in_linear_region(self) -> bool:
        return self.max_slip() < LINEAR_REGION_SLIP

    def is_finite(self) -> bool:
        return all(
            bool(np.all(np.isfinite(col)))
            for name, col in self._columns.items()
            if name not in _BOOL_COLUMNS
        )

    def to_dict(self) -> Dict[str, List[Any]]:
        return {name: col.tolist() for name, col in self._columns.items()}

    def to_records(self) -> List[Dict[str, Any]]:
        return [
            {name: (bool(col[i]) if name in _BOOL_COLUMNS else float(col[i])) for name, col in self._columns.items()}
            for i in range(len(self))
        ]

    def __repr__(self) -> str:
        return f"TelemetrySeries(samples={len(self)})"
