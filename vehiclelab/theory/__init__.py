# Theory module - Closed-form linear predictions
# FORBIDDEN: logging, models.*, scenarios.*

from .linalg import Matrix2, Vector2, solve_complex_2x2, matrix_exponential
from .state_space import StateSpace, build_state_space
from .step_steer import StepSteerTheory, StepCurves, create_step_steer_theory
from .frequency import FrequencyPrediction, predict_bode
from .skidpad import SkidpadPrediction, predict_skidpad
from .friction_envelope import FrictionLimitPrediction, predict_limit
