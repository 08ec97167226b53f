# Scenarios module - Canonical manoeuvres and closed-loop controllers
# FORBIDDEN: validation.*

from .controllers import PIDController
from .canonical import (
    CanonicalResult,
    StepSteerConfig,
    FrequencyConfig,
    SkidpadConfig,
    RampConfig,
    run_step_steer,
    run_frequency_response,
    run_skidpad,
    run_ramp_to_limit,
)
