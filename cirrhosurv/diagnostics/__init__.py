"""
Assumption checks and model comparison
"""

from .diagnostics import (
    weibull_diagnostic_table,
    log_odds_table,
    line_slopes,
    compare_aic
)

__all__ = [
    "weibull_diagnostic_table",
    "log_odds_table",
    "line_slopes",
    "compare_aic"
]
