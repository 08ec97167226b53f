# Canonical scenarios graded against linear theory

from .common import CanonicalResult, SimulationConfig, SimulationRun, run_simulation, vehicle_params_from_model
from .step_steer import StepSteerConfig, run_step_steer
from .frequency import FrequencyConfig, FrequencyResult, run_frequency_response
from .skidpad import SkidpadConfig, ControllerGains, run_skidpad
from .ramp import RampConfig, run_ramp_to_limit
