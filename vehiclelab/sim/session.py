# Incremental simulation session driven by transport messages

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

import numpy as np

from ..core.errors import VehicleLabError
from ..core.guards import DtGuardResult, enforce_dt_bounds, validate_timestep
from ..core.types import SimInputs
from ..models.base import ModelParams, VehicleModel
from ..models.registry import ModelRegistry
from .samplers import ScenarioSampler, create_scenario

logger = logging.getLogger(__name__)

MIN_SPEED_MULTIPLIER = 0.01
# Upper bound on fixed steps run for one advance() call
MAX_STEPS_PER_ADVANCE = 2000

Message = Dict[str, Any]


class SimulationSession:
    """Fixed-step simulation advanced in wall-clock slices.

    Accepts the transport messages ``start``, ``pause``, ``resume``,
    ``reset``, ``updateParams``, ``updateScenario`` and ``setSpeed`` and
    answers with ``tick``, ``done`` and ``error`` messages. Each session owns
    its random generator, seeded from the ``start`` message.
    """

    def __init__(self, registry: ModelRegistry, emit: Optional[Callable[[Message], None]] = None):
        """Initialize session.

        Args:
            registry: Model registry
            emit: Optional callback receiving every outgoing message
        """
        self.registry = registry
        self._emit_callback = emit
        self._outbox: List[Message] = []

        self.model: Optional[VehicleModel] = None
        self.params: Optional[ModelParams] = None
        self.state = None
        self.sampler: Optional[ScenarioSampler] = None
        self.scenario_id: Optional[str] = None
        self.dt = 0.0
        self.dt_clamped = False
        self.seed: Optional[int] = None
        self.rng: Optional[np.random.Generator] = None
        self.speed_multiplier = 1.0
        self.running = False
        self._accumulator = 0.0

        self._handlers = {
            "start": self._on_start,
            "pause": self._on_pause,
            "resume": self._on_resume,
            "reset": self._on_reset,
            "updateParams": self._on_update_params,
            "updateScenario": self._on_update_scenario,
            "setSpeed": self._on_set_speed,
        }

    @property
    def started(self) -> bool:
        return self.model is not None

    @property
    def t(self) -> float:
        return self.state.t if self.state is not None else 0.0

    def handle(self, message: Mapping[str, Any]) -> List[Message]:
        """Process one incoming message.

        Returns:
            Messages emitted while handling it
        """
        start = len(self._outbox)
        kind = message.get("type")
        handler = self._handlers.get(kind)
        if handler is None:
            self._error(f"Unknown message type: {kind!r}")
        else:
            try:
                handler(message)
            except (VehicleLabError, ValueError, TypeError, KeyError) as e:
                self._error(str(e))
        return self._outbox[start:]

    def advance(self, wall_seconds: float) -> List[Message]:
        """Run the fixed steps covering ``wall_seconds`` of wall-clock time.

        Simulated time advances by wall_seconds times the speed multiplier.
        A single tick is emitted after the steps, none while paused.
        """
        start = len(self._outbox)
        if not self.running or not self.started:
            return []
        self._accumulator += max(0.0, wall_seconds) * self.speed_multiplier
        steps = int(self._accumulator / self.dt + 1e-9)
        if steps > MAX_STEPS_PER_ADVANCE:
            logger.warning(f"Dropping {steps - MAX_STEPS_PER_ADVANCE} steps to keep up")
            steps = MAX_STEPS_PER_ADVANCE
            self._accumulator = 0.0
        else:
            self._accumulator -= steps * self.dt
        self._run_steps(steps)
        return self._outbox[start:]

    def step_once(self) -> List[Message]:
        """Advance exactly one fixed step and emit a tick."""
        start = len(self._outbox)
        if self.started:
            self._run_steps(1)
        return self._outbox[start:]

    def drain(self) -> List[Message]:
        messages, self._outbox = self._outbox, []
        return messages

    # Handlers

    def _on_start(self, message: Mapping[str, Any]) -> None:
        model = self.registry.require_model(message["modelId"])
        params = model.make_params(message.get("params") or {})
        scenario_id = message["scenarioId"]
        sampler = create_scenario(scenario_id, message.get("scenarioOverrides"))
        guard = self._guard_dt(model.id, message.get("dt", params.dt))
        speed_multiplier = max(MIN_SPEED_MULTIPLIER, float(message.get("speedMultiplier", 1.0)))
        seed = message.get("seed")
        rng = np.random.default_rng(seed)
        state = model.init(params)

        # Nothing is committed until every field has been accepted
        self.model = model
        self.params = params
        self.sampler = sampler
        self.scenario_id = scenario_id
        self._apply_dt(guard)
        self.speed_multiplier = speed_multiplier
        self.seed = seed
        self.rng = rng
        self.state = state
        self._accumulator = 0.0
        self.running = True
        logger.info(f"Session started: model={model.id} scenario={scenario_id} dt={self.dt}")
        self._tick()

    def _on_pause(self, message: Mapping[str, Any]) -> None:
        self.running = False
        self._emit({"type": "done", "reason": "paused"})

    def _on_resume(self, message: Mapping[str, Any]) -> None:
        if self.started:
            self.running = True

    def _on_reset(self, message: Mapping[str, Any]) -> None:
        if not self.started:
            return
        self._reinitialize()
        self._tick()

    def _on_update_params(self, message: Mapping[str, Any]) -> None:
        if not self.started:
            return
        updates = message.get("params") or {}
        params = self.params.merged(updates)
        guard = self._guard_dt(self.model.id, params.dt) if "dt" in updates else None
        self.params = params
        if guard is not None:
            self._apply_dt(guard)

    def _on_update_scenario(self, message: Mapping[str, Any]) -> None:
        self.sampler = create_scenario(message["scenarioId"], message.get("overrides"))
        self.scenario_id = message["scenarioId"]

    def _on_set_speed(self, message: Mapping[str, Any]) -> None:
        self.speed_multiplier = max(MIN_SPEED_MULTIPLIER, float(message["multiplier"]))

    # Internals

    @staticmethod
    def _guard_dt(model_id: str, dt: float) -> DtGuardResult:
        guard = enforce_dt_bounds(model_id, validate_timestep(dt))
        if guard.clamped:
            logger.warning(guard.message)
        return guard

    def _apply_dt(self, guard: DtGuardResult) -> None:
        self.dt = guard.dt
        self.dt_clamped = guard.clamped

    def _reinitialize(self) -> None:
        self.state = self.model.init(self.params)
        self.rng = np.random.default_rng(self.seed)
        self._accumulator = 0.0

    def _run_steps(self, steps: int) -> None:
        try:
            for _ in range(steps):
                self._step()
        except (VehicleLabError, ValueError) as e:
            self.running = False
            self._error(str(e))
            return
        if steps > 0:
            self._tick()

    def _step(self) -> None:
        inputs: SimInputs = self.sampler(self.t, self.model.id, self.params)
        self.state = self.model.step(self.state, inputs, self.dt, self.params, rng=self.rng)

    def _tick(self) -> None:
        telemetry = self.model.outputs(self.state, self.params)
        self._emit({
            "type": "tick",
            "t": telemetry.t,
            "state": self.model.state_to_dict(self.state),
            "telemetry": telemetry.to_dict(),
        })

    def _error(self, text: str) -> None:
        logger.warning(f"Session error: {text}")
        self._emit({"type": "error", "message": text})

    def _emit(self, message: Message) -> None:
        self._outbox.append(message)
        if self._emit_callback is not None:
            self._emit_callback(message)
