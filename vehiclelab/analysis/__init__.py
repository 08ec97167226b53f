# Analysis module - Logging, error metrics and result export

from .logger import setup_logging, ResultLogger, ExperimentLogger
from .metrics import ErrorMetrics, compute_error_metrics, check_result_health, summarize_grades
