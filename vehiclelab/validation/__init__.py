# Validation module - Named cases and baseline checks against closed-form values
# FORBIDDEN: scenarios.*

from .cases import (
    ValidationCaseDefinition,
    ValidationCaseRegistry,
    ValidationField,
    ValidationParams,
    create_default_cases,
)
from .runner import ValidationRunResult, run_validation
from .baseline import BaselineResult, run_baseline
from .no_steer import NoSteerTestResult, run_no_steer_test
