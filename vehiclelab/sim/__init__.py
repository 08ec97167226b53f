# Sim module - Incremental sessions and scenario samplers
# FORBIDDEN: scenarios.*, validation.*

from .samplers import ScenarioSampler, create_scenario, list_scenario_presets, get_scenario_preset
from .session import SimulationSession
