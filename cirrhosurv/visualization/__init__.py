"""
Visualization module
"""

from .visualization import (
    plot_kaplan_meier,
    plot_weibull_diagnostic,
    plot_log_odds,
    plot_quantile_curve,
    plot_aic_comparison
)

__all__ = [
    'plot_kaplan_meier',
    'plot_weibull_diagnostic',
    'plot_log_odds',
    'plot_quantile_curve',
    'plot_aic_comparison'
]
