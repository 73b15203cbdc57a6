"""
Exponential (constant hazard) survival regression
"""

from typing import List

import pandas as pd
from autograd import numpy as anp
from lifelines.fitters import ParametricRegressionFitter

from .base import BaseParametricSurvival


class ExponentialAFTFitter(ParametricRegressionFitter):
    """lifelines regression fitter with ``H(t|x) = t / lambda(x)``"""

    _fitted_parameter_names = ["lambda_"]

    def _cumulative_hazard(self, params, T, Xs):
        lambda_ = anp.exp(anp.dot(Xs["lambda_"], params["lambda_"]))
        return T / lambda_


class ExponentialRegression(BaseParametricSurvival):
    """
    Exponential survival regression

    The hazard is constant in time, ``h(t|x) = 1 / lambda(x)`` with
    ``log lambda(x) = x'beta``. ``exp(coef)`` are time ratios and
    ``hazard_ratios_`` holds ``exp(-beta)``.

    Examples
    --------
    >>> model = ExponentialRegression(covariates=["bilirubin", "stage"]).fit(table)
    >>> model.summary_[["coef", "exp_coef", "p"]]
    """

    family = "exponential"
    metric = "time_ratio"

    def _fit_lifelines(self, data: pd.DataFrame, features: List[str]):
        formula = " + ".join(["1"] + list(features))
        fitter = ExponentialAFTFitter(alpha=self.alpha)
        fitter.fit(data, duration_col="duration", event_col="event",
                   regressors={"lambda_": formula})
        return fitter
