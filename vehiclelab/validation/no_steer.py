# Zero-steer stability check for the bicycle model

import logging
import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping, Optional

from ..core.types import SimInputs
from ..models.registry import ModelRegistry
from .cases import GRAVITY, kmh_to_mps

logger = logging.getLogger(__name__)

DT = 0.01
TEST_DURATION = 5.0
SETTLE_TIME = 1.0
YAW_THRESHOLD = 0.01           # rad/s
LATERAL_THRESHOLD_G = 0.02


@dataclass(frozen=True)
class NoSteerTestResult:
    max_yaw_rate: float
    max_lateral_acceleration: float
    max_lateral_acceleration_g: float
    passed: bool
    yaw_threshold: float
    lateral_threshold_g: float
    samples_evaluated: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def run_no_steer_test(
    registry: ModelRegistry,
    speed_kmh: float = 80.0,
    model_params: Optional[Mapping[str, Any]] = None,
    model_id: str = "bicycle",
) -> NoSteerTestResult:
    """Drive straight with zero steer and check for spurious yaw or lateral motion.

    The first second is ignored; afterwards |r| must stay within 0.01 rad/s
    and |ay| within 0.02 g.
    """
    model = registry.require_model(model_id)
    params = model.make_params({**(model_params or {}), "v": kmh_to_mps(speed_kmh), "process_noise": False})
    steps = int(math.ceil(TEST_DURATION / DT - 1e-9))

    state = model.init(params)
    max_yaw = 0.0
    max_ay = 0.0
    evaluated = 0
    for i in range(steps):
        state = model.step(state, SimInputs(steer=0.0), DT, params)
        if (i + 1) * DT < SETTLE_TIME:
            continue
        telemetry = model.outputs(state, params)
        evaluated += 1
        max_yaw = max(max_yaw, abs(telemetry.r))
        max_ay = max(max_ay, abs(telemetry.ay))

    max_ay_g = max_ay / GRAVITY
    passed = max_yaw <= YAW_THRESHOLD and max_ay_g <= LATERAL_THRESHOLD_G
    if not passed:
        logger.warning(f"No-steer test failed: max yaw {max_yaw:.4f} rad/s, max ay {max_ay_g:.4f} g")
    return NoSteerTestResult(
        max_yaw_rate=max_yaw,
        max_lateral_acceleration=max_ay,
        max_lateral_acceleration_g=max_ay_g,
        passed=passed,
        yaw_threshold=YAW_THRESHOLD,
        lateral_threshold_g=LATERAL_THRESHOLD_G,
        samples_evaluated=evaluated,
    )
