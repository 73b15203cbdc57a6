"""
Parametric survival regression models
"""

from .base import BaseParametricSurvival
from .exponential import ExponentialRegression
from .weibull import WeibullAFTRegression, WeibullPHRegression
from .prediction import hypothetical_patient, predict_quantile_curve

__all__ = [
    'BaseParametricSurvival',
    'ExponentialRegression',
    'WeibullAFTRegression',
    'WeibullPHRegression',
    'hypothetical_patient',
    'predict_quantile_curve'
]
