# Telemetry module - Columnar series and plausibility checks
# FORBIDDEN: models.*, scenarios.*, validation.*

from .series import CanonicalSample, TelemetrySeries, LINEAR_REGION_SLIP
from .validation import SeriesValidator
