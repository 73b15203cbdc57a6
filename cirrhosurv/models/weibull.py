"""
Weibull survival regression in accelerated-failure-time and
proportional-hazards parameterizations
"""

from typing import List

import numpy as np
import pandas as pd
from lifelines import WeibullAFTFitter

from .base import BaseParametricSurvival, INTERCEPT

SHAPE_TERM = "log(shape)"


class WeibullAFTRegression(BaseParametricSurvival):
    """
    Weibull accelerated-failure-time regression

    ``S(t|x) = exp(-(t / lambda(x)) ** rho)`` with ``log lambda(x) = x'beta``
    and a common shape ``rho``. ``exp(coef)`` are time ratios; the last
    row of ``summary_`` is the log shape.

    Examples
    --------
    >>> aft = WeibullAFTRegression(covariates=["bilirubin", "edema"]).fit(table)
    >>> aft.shape_
    """

    family = "weibull_aft"
    metric = "time_ratio"

    def _fit_lifelines(self, data: pd.DataFrame, features: List[str]):
        fitter = WeibullAFTFitter(alpha=self.alpha, fit_intercept=True)
        fitter.fit(data[list(features) + ["duration", "event"]],
                   duration_col="duration", event_col="event")
        self.shape_ = float(np.exp(fitter.params_.loc[("rho_", INTERCEPT)]))
        return fitter

    def _shape(self) -> float:
        return self.shape_

    def _coefficients(self):
        coef, se = super()._coefficients()
        coef[SHAPE_TERM] = self.fitter_.params_.loc[("rho_", INTERCEPT)]
        se[SHAPE_TERM] = self.fitter_.standard_errors_.loc[("rho_", INTERCEPT)]
        return coef, se


class WeibullPHRegression(WeibullAFTRegression):
    """
    Weibull proportional-hazards regression

    Same likelihood as ``WeibullAFTRegression`` written as
    ``h(t|x) = h0(t) exp(x'gamma)`` with ``gamma = -rho * beta``. Standard
    errors come from the delta method on the AFT variance matrix, so
    ``exp(coef)`` are hazard ratios and the AIC equals the AFT fit's.
    The intercept row is the log of the baseline hazard scale.
    """

    family = "weibull_ph"
    metric = "hazard_ratio"

    def _coefficients(self):
        beta = self._scale_coefficients()
        log_rho = self.fitter_.params_.loc[("rho_", INTERCEPT)]
        rho = np.exp(log_rho)
        cov = self.fitter_.variance_matrix_

        rho_key = ("rho_", INTERCEPT)
        coef = -rho * beta
        variances = []
        for term, b in beta.items():
            key = ("lambda_", term)
            # gradient of -exp(log_rho) * b is (-rho, -rho * b)
            grad = np.array([-rho, -rho * b])
            block = np.array([
                [cov.loc[key, key], cov.loc[key, rho_key]],
                [cov.loc[rho_key, key], cov.loc[rho_key, rho_key]],
            ])
            variances.append(grad @ block @ grad)
        se = pd.Series(np.sqrt(variances), index=beta.index)

        coef[SHAPE_TERM] = log_rho
        se[SHAPE_TERM] = self.fitter_.standard_errors_.loc[rho_key]
        return coef, se

    def _hazard_ratios(self) -> pd.Series:
        return np.exp(self.coef_.drop([INTERCEPT, SHAPE_TERM]))
