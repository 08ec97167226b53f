# Error taxonomy
# FORBIDDEN: logging, any I/O
#
# Geometry, timestep and singularity errors are fatal to the call that raised
# them. Clamping and friction saturation are never errors: they are reported
# as notes and flags on returned values.


class VehicleLabError(Exception):
    """Base class for all vehiclelab errors."""


class InvalidGeometry(VehicleLabError, ValueError):
    """Non-positive wheelbase, radius or speed where a positive value is required."""


class InvalidTimestep(VehicleLabError, ValueError):
    """Non-finite or non-positive integration step."""


class InvalidParameter(VehicleLabError, ValueError):
    """Model parameter outside its declared range."""


class UnknownModel(VehicleLabError, LookupError):
    """Model id not present in the registry."""

    def __init__(self, model_id: str):
        self.model_id = model_id
        super().__init__(f"Unknown model: {model_id}")


class UnknownScenario(VehicleLabError, LookupError):
    """Scenario sampler id not present in the preset table."""

    def __init__(self, scenario_id: str):
        self.scenario_id = scenario_id
        super().__init__(f"Unknown scenario: {scenario_id}")


class UnknownValidationCase(VehicleLabError, LookupError):
    """Validation case id not registered."""

    def __init__(self, case_id: str):
        self.case_id = case_id
        super().__init__(f"Unknown validation case: {case_id}")


class SingularSystem(VehicleLabError, ArithmeticError):
    """Linear system whose determinant is numerically zero."""
