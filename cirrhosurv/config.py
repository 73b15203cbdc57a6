"""
Settings for the cirrhosis survival report
"""

import os
from dataclasses import dataclass, field
from typing import List, Tuple, Union

from .data.cleaning import DAYS_PER_YEAR, DEFAULT_COVARIATES


@dataclass
class ReportConfig:
    """
    Parameters of one report run

    Parameters
    ----------
    data_path : str or path-like
        Cirrhosis CSV file
    output_dir : str or path-like, default="report"
        Directory receiving tables, figures and ``report.md``
    covariates : list of str
        Covariates of the parametric models
    strata : list of str
        Categorical columns for stratified Kaplan-Meier curves and log-rank tests
    diagnostic_group : str, default="stage"
        Stratum used for the Weibull and log-odds diagnostics
    prediction_covariate : str, default="bilirubin"
        Covariate varied for the hypothetical-patient quantile curves
    prediction_values : tuple of float
        Values of ``prediction_covariate`` to predict for
    time_scale : float, default=365.25
        Divisor turning days into model time units
    alpha : float, default=0.05
        Significance level for confidence intervals
    """
    data_path: Union[str, os.PathLike]
    output_dir: Union[str, os.PathLike] = "report"
    covariates: List[str] = field(default_factory=lambda: list(DEFAULT_COVARIATES))
    strata: List[str] = field(default_factory=lambda: ["stage", "edema", "drug", "sex"])
    diagnostic_group: str = "stage"
    prediction_covariate: str = "bilirubin"
    prediction_values: Tuple[float, ...] = (1.0, 5.0)
    time_scale: float = DAYS_PER_YEAR
    alpha: float = 0.05

    def __post_init__(self):
        if self.prediction_covariate not in self.covariates:
            raise ValueError(f"prediction_covariate {self.prediction_covariate!r} is not a model covariate")
        if self.time_scale <= 0:
            raise ValueError("time_scale must be positive")
        if not 0 < self.alpha < 1:
            raise ValueError("alpha must be between 0 and 1")

    @property
    def required_columns(self) -> List[str]:
        """Cleaned columns whose missing values drop a patient"""
        columns = list(self.covariates)
        for col in self.strata + [self.diagnostic_group]:
            if col not in columns:
                columns.append(col)
        return columns
