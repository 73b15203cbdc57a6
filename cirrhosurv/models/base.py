"""
Base class for parametric survival regression models
"""

import logging
from typing import List, Optional, Sequence, Union

import numpy as np
import pandas as pd
from scipy.stats import norm
from sklearn.base import BaseEstimator
from sklearn.utils.validation import check_is_fitted

from ..data import CovariateEncoder, Survival

logger = logging.getLogger(__name__)

INTERCEPT = "Intercept"

SUMMARY_COLUMNS = ["coef", "se", "lower", "upper", "z", "p", "exp_coef", "exp_lower", "exp_upper"]


class BaseParametricSurvival(BaseEstimator):
    """Base class for maximum-likelihood survival regression

    Subclasses wrap a lifelines fitter whose scale parameter ``lambda_``
    carries the linear predictor, ``log lambda(x) = x'beta``, and whose
    survival function is ``S(t|x) = exp(-(t / lambda(x)) ** rho)``.
    """

    family: Optional[str] = None
    metric = "time_ratio"

    def __init__(self, covariates: Optional[Sequence[str]] = None,
                 time_scale: float = 365.25,
                 alpha: float = 0.05):
        """
        Initialize parametric survival model

        Parameters
        ----------
        covariates : sequence of str, optional
            Columns of the cleaned table entering the linear predictor.
            ``None`` fits an intercept-only model.
        time_scale : float, default=365.25
            Divisor applied to the duration column before fitting; the
            default models days as years
        alpha : float, default=0.05
            Significance level for confidence intervals
        """
        self.covariates = covariates
        self.time_scale = time_scale
        self.alpha = alpha

    def _fit_lifelines(self, data: pd.DataFrame, features: List[str]):
        """
        Fit the underlying lifelines model

        Parameters
        ----------
        data : pandas.DataFrame
            Encoded covariates plus ``duration`` and ``event`` columns
        features : list of str
            Names of the encoded covariate columns

        Raises
        ------
        NotImplementedError
            This method must be implemented by subclasses
        """
        raise NotImplementedError("This method must be implemented by subclasses")

    def _shape(self) -> float:
        """Weibull shape ``rho`` of the fitted model"""
        return 1.0

    def fit(self, table: pd.DataFrame,
            time_col: str = "time",
            event_col: str = "event") -> "BaseParametricSurvival":
        """
        Fit the model on a cleaned patient table

        Parameters
        ----------
        table : pandas.DataFrame
            Cleaned table with duration, event and covariate columns
        time_col : str, default="time"
            Duration column, in days
        event_col : str, default="event"
            Binary event column

        Returns
        -------
        self
        """
        if self.time_scale <= 0:
            raise ValueError("time_scale must be positive")
        if not 0 < self.alpha < 1:
            raise ValueError("alpha must be between 0 and 1")

        y = Survival.from_frame(table, time_col, event_col)
        if np.any(y.time <= 0):
            raise ValueError("Parametric models need strictly positive durations")

        self.encoder_ = CovariateEncoder(list(self.covariates or [])).fit(table)
        features = self.encoder_.get_feature_names_out()
        data = self.encoder_.transform(table).reset_index(drop=True)
        data["duration"] = y.time / self.time_scale
        data["event"] = y.event

        logger.info("Fitting %s model on %d patients (%d deaths) with %d terms",
                    self.family, len(y), y.n_events, len(features))
        self.fitter_ = self._fit_lifelines(data, features)
        self.features_ = features
        self.n_obs_ = len(y)
        self.n_events_ = y.n_events
        self.log_likelihood_ = float(self.fitter_.log_likelihood_)
        self.aic_ = float(self.fitter_.AIC_)
        self.n_params_ = int(len(self.fitter_.params_))

        coef, se = self._coefficients()
        self.coef_ = coef
        self.summary_ = self._summarize(coef, se)
        self.hazard_ratios_ = self._hazard_ratios()
        return self

    def _scale_coefficients(self) -> pd.Series:
        """Coefficients of ``log lambda`` ordered intercept first"""
        params = self.fitter_.params_.loc["lambda_"]
        return params.reindex([INTERCEPT] + list(self.features_))

    def _coefficients(self):
        """Reported coefficients and standard errors, indexed by term"""
        se = self.fitter_.standard_errors_.loc["lambda_"]
        terms = [INTERCEPT] + list(self.features_)
        return self._scale_coefficients(), se.reindex(terms)

    def _hazard_ratios(self) -> pd.Series:
        """Hazard ratio per covariate, ``exp(-rho * beta)`` on the AFT scale"""
        coef = self._scale_coefficients().drop(INTERCEPT)
        return np.exp(-self._shape() * coef)

    def _summarize(self, coef: pd.Series, se: pd.Series) -> pd.DataFrame:
        z_crit = norm.ppf(1 - self.alpha / 2)
        summary = pd.DataFrame({"coef": coef, "se": se})
        summary["lower"] = summary["coef"] - z_crit * summary["se"]
        summary["upper"] = summary["coef"] + z_crit * summary["se"]
        summary["z"] = summary["coef"] / summary["se"]
        summary["p"] = 2 * norm.sf(np.abs(summary["z"]))
        summary["exp_coef"] = np.exp(summary["coef"])
        summary["exp_lower"] = np.exp(summary["lower"])
        summary["exp_upper"] = np.exp(summary["upper"])
        summary.index.name = "term"
        return summary[SUMMARY_COLUMNS]

    def _scale(self, X: pd.DataFrame) -> np.ndarray:
        """``lambda(x)`` for each row of ``X``, in model time units"""
        check_is_fitted(self, "fitter_")
        coef = self._scale_coefficients()
        design = self.encoder_.transform(X)
        lp = coef[INTERCEPT] + design.to_numpy() @ coef[self.features_].to_numpy()
        return np.exp(lp)

    def predict_survival(self, X: pd.DataFrame,
                         times: Union[np.ndarray, Sequence[float]]) -> pd.DataFrame:
        """
        Predict survival probabilities

        Parameters
        ----------
        X : pandas.DataFrame
            Rows holding the model covariates
        times : array-like
            Times in days

        Returns
        -------
        pandas.DataFrame
            Survival probabilities, one row per time and one column per row
            of ``X``
        """
        times = np.asarray(times, dtype=float)
        if np.any(times < 0):
            raise ValueError("Times cannot be negative")
        scale = self._scale(X)
        t = times[:, None] / self.time_scale
        survival = np.exp(-(t / scale[None, :]) ** self._shape())
        return pd.DataFrame(survival, index=pd.Index(times, name="time"), columns=X.index)

    def predict_quantiles(self, X: pd.DataFrame,
                          probabilities: Union[np.ndarray, Sequence[float]]) -> pd.DataFrame:
        """
        Predict the times by which given fractions of patients have died

        Parameters
        ----------
        X : pandas.DataFrame
            Rows holding the model covariates
        probabilities : array-like
            Cumulative death probabilities in (0, 1)

        Returns
        -------
        pandas.DataFrame
            Times in days, one row per probability and one column per row of
            ``X``
        """
        probabilities = np.asarray(probabilities, dtype=float)
        if np.any((probabilities <= 0) | (probabilities >= 1)):
            raise ValueError("Probabilities must lie strictly between 0 and 1")
        scale = self._scale(X)
        quantile = (-np.log1p(-probabilities)) ** (1.0 / self._shape())
        times = quantile[:, None] * scale[None, :] * self.time_scale
        return pd.DataFrame(times, index=pd.Index(probabilities, name="probability"), columns=X.index)
