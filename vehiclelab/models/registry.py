# Model registry
# FORBIDDEN: logging, any I/O

from typing import Dict, Iterator, List, Optional

from ..core.conventions import assert_conventions
from ..core.errors import UnknownModel
from .base import VehicleModel
from .bicycle import BicycleModel
from .unicycle import UnicycleModel


class ModelRegistry:
    """Lookup table from model id to model implementation.

    Owned by the caller and passed explicitly into runners, the validation
    harness and sessions. Iteration follows registration order.
    """

    def __init__(self):
        self._models: Dict[str, VehicleModel] = {}

    def register(self, model: VehicleModel, replace: bool = False) -> VehicleModel:
        """Add a model.

        Args:
            model: Model implementation with a non-empty ``id``
            replace: Allow overwriting an existing id

        Returns:
            The registered model

        Raises:
            ValueError: On an empty or duplicate id
            InvalidParameter: If the model's axis conventions differ
        """
        if not model.id:
            raise ValueError(f"Model {model!r} has no id")
        if model.id in self._models and not replace:
            raise ValueError(f"Model already registered: {model.id}")
        assert_conventions(model.conventions)
        self._models[model.id] = model
        return model

    def get_model(self, model_id: str) -> Optional[VehicleModel]:
        return self._models.get(model_id)

    def require_model(self, model_id: str) -> VehicleModel:
        """Like ``get_model`` but raises UnknownModel on a miss."""
        model = self._models.get(model_id)
        if model is None:
            raise UnknownModel(model_id)
        return model

    def list_models(self) -> List[VehicleModel]:
        return list(self._models.values())

    def ids(self) -> List[str]:
        return list(self._models)

    def __contains__(self, model_id: str) -> bool:
        return model_id in self._models

    def __len__(self) -> int:
        return len(self._models)

    def __iter__(self) -> Iterator[VehicleModel]:
        return iter(self.list_models())


def create_default_registry() -> ModelRegistry:
    """Registry holding the unicycle and bicycle models, in that order."""
    registry = ModelRegistry()
    registry.register(UnicycleModel())
    registry.register(BicycleModel())
    return registry
