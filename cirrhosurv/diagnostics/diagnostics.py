"""
Model diagnostics: Weibull and log-odds plots data, AIC comparison
"""

import logging
import warnings
from typing import Optional, Sequence

import numpy as np
import pandas as pd
from sklearn.linear_model import LinearRegression

from ..estimation import fit_kaplan_meier, fit_kaplan_meier_by_group
from ..models.base import BaseParametricSurvival
from ..utils import HazardTransforms

logger = logging.getLogger(__name__)

DIAGNOSTIC_COLUMNS = ["stratum", "time", "log_time", "survival", "value"]


def _transformed_curves(table: pd.DataFrame,
                        group: Optional[str],
                        transform: str,
                        time_col: str,
                        event_col: str) -> pd.DataFrame:
    if group is None:
        curves = {"all": fit_kaplan_meier(table[time_col], table[event_col])}
    else:
        curves = fit_kaplan_meier_by_group(table, group, time_col=time_col, event_col=event_col)

    frames = []
    for stratum, curve in curves.items():
        steps = curve.table
        usable = steps[(steps["observed"] > 0)
                       & (steps["survival"] > 0)
                       & (steps["survival"] < 1)
                       & (steps.index > 0)]
        if len(usable) < 2:
            warnings.warn(f"Stratum {stratum!r} has fewer than two usable event times")
        if usable.empty:
            continue
        survival = usable["survival"].to_numpy()
        frames.append(pd.DataFrame({
            "stratum": stratum,
            "time": usable.index.to_numpy(),
            "log_time": np.log(usable.index.to_numpy()),
            "survival": survival,
            "value": HazardTransforms.transform(survival, transform),
        }))
    if not frames:
        return pd.DataFrame(columns=DIAGNOSTIC_COLUMNS)
    return pd.concat(frames, ignore_index=True)[DIAGNOSTIC_COLUMNS]


def weibull_diagnostic_table(table: pd.DataFrame,
                             group: Optional[str] = None,
                             time_col: str = "time",
                             event_col: str = "event") -> pd.DataFrame:
    """
    Data for the Weibull diagnostic plot

    Kaplan-Meier survival per stratum transformed to ``log(-log S)`` at each
    event time, paired with ``log t``. Straight lines support a Weibull
    model; parallel lines support proportional hazards across strata.

    Parameters
    ----------
    table : pandas.DataFrame
        Cleaned patient table
    group : str, optional
        Stratifying column; ``None`` for the whole sample

    Returns
    -------
    pandas.DataFrame
        Columns ``stratum, time, log_time, survival, value``
    """
    return _transformed_curves(table, group, "cloglog", time_col, event_col)


def log_odds_table(table: pd.DataFrame,
                   group: Optional[str] = None,
                   time_col: str = "time",
                   event_col: str = "event") -> pd.DataFrame:
    """
    Data for the log-odds plot

    Kaplan-Meier survival per stratum transformed to ``log(S / (1 - S))``
    against ``log t``, for judging linearity and parallelism.
    """
    return _transformed_curves(table, group, "logodds", time_col, event_col)


def line_slopes(diagnostic: pd.DataFrame) -> pd.DataFrame:
    """
    Least-squares line through each stratum of a diagnostic table

    Parameters
    ----------
    diagnostic : pandas.DataFrame
        Output of ``weibull_diagnostic_table`` or ``log_odds_table``

    Returns
    -------
    pandas.DataFrame
        Indexed by stratum with ``slope, intercept, n_points``. Strata with
        fewer than two points get missing slope and intercept.
    """
    rows = []
    for stratum, points in diagnostic.groupby("stratum", sort=False):
        row = {"stratum": stratum, "slope": np.nan, "intercept": np.nan, "n_points": len(points)}
        if len(points) >= 2:
            reg = LinearRegression().fit(points[["log_time"]].to_numpy(), points["value"].to_numpy())
            row["slope"] = float(reg.coef_[0])
            row["intercept"] = float(reg.intercept_)
        rows.append(row)
    return pd.DataFrame(rows, columns=["stratum", "slope", "intercept", "n_points"]).set_index("stratum")


def compare_aic(models: Sequence[BaseParametricSurvival]) -> pd.DataFrame:
    """
    Rank fitted models by AIC

    Parameters
    ----------
    models : sequence of BaseParametricSurvival
        Fitted models on the same table

    Returns
    -------
    pandas.DataFrame
        Columns ``family, n_params, log_likelihood, aic, delta_aic``, best
        model first; ties keep the input order
    """
    if not models:
        raise ValueError("At least one model is required")
    n_obs = {model.n_obs_ for model in models}
    if len(n_obs) > 1:
        warnings.warn("Models were fitted on tables of different sizes; AIC values are not comparable")

    comparison = pd.DataFrame([{
        "family": model.family,
        "n_params": model.n_params_,
        "log_likelihood": model.log_likelihood_,
        "aic": model.aic_,
    } for model in models])
    comparison = comparison.sort_values("aic", kind="mergesort").reset_index(drop=True)
    comparison["delta_aic"] = comparison["aic"] - comparison["aic"].iloc[0]
    logger.info("Best model by AIC: %s (%.2f)", comparison["family"].iloc[0], comparison["aic"].iloc[0])
    return comparison
