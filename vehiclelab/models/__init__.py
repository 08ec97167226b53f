# Models module - Vehicle dynamics models and registry
# FORBIDDEN: logging, scenarios.*, validation.*

from .base import ModelParams, ParameterSpec, VehicleModel
from .unicycle import UnicycleModel, UnicycleParams, UnicycleState
from .bicycle import BicycleModel, BicycleParams, BicycleState
from .registry import ModelRegistry, create_default_registry
