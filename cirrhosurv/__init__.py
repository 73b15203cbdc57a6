"""
cirrhosurv: Survival analysis of the Mayo Clinic cirrhosis cohort
"""

__version__ = "0.1.0"

import logging

from .data import Survival, load_cirrhosis, clean_cirrhosis, CirrhosisCleaner
from .descriptive import summarize_by_event
from .estimation import fit_kaplan_meier, fit_kaplan_meier_by_group, logrank_by_group
from .models import (
    ExponentialRegression,
    WeibullAFTRegression,
    WeibullPHRegression,
    hypothetical_patient,
    predict_quantile_curve
)
from .diagnostics import weibull_diagnostic_table, log_odds_table, compare_aic
from .config import ReportConfig

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Survival",
    "load_cirrhosis",
    "clean_cirrhosis",
    "CirrhosisCleaner",
    "summarize_by_event",
    "fit_kaplan_meier",
    "fit_kaplan_meier_by_group",
    "logrank_by_group",
    "ExponentialRegression",
    "WeibullAFTRegression",
    "WeibullPHRegression",
    "hypothetical_patient",
    "predict_quantile_curve",
    "weibull_diagnostic_table",
    "log_odds_table",
    "compare_aic",
    "ReportConfig"
]
