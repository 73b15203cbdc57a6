"""
Kaplan-Meier estimation and log-rank comparison of survival curves
"""

import itertools
import logging
from dataclasses import dataclass
from typing import Dict, Union

import numpy as np
import pandas as pd
from lifelines import KaplanMeierFitter
from lifelines.statistics import logrank_test, multivariate_logrank_test

from ..data import Survival

logger = logging.getLogger(__name__)

CURVE_COLUMNS = ["at_risk", "observed", "censored", "survival", "lower", "upper"]


@dataclass(frozen=True)
class SurvivalCurve:
    """Step function of a Kaplan-Meier estimate

    ``table`` is indexed by time and carries the columns in
    ``CURVE_COLUMNS``. The first row is time 0 with survival 1.
    """
    label: str
    table: pd.DataFrame
    median: float
    n_obs: int
    n_events: int

    @property
    def times(self) -> np.ndarray:
        return self.table.index.to_numpy()

    @property
    def survival(self) -> np.ndarray:
        return self.table["survival"].to_numpy()


@dataclass(frozen=True)
class LogRankResult:
    """Outcome of a log-rank test across strata"""
    group: str
    statistic: float
    p_value: float
    degrees_of_freedom: int
    n_groups: int


def fit_kaplan_meier(time: Union[np.ndarray, pd.Series],
                     event: Union[np.ndarray, pd.Series],
                     label: str = "all",
                     alpha: float = 0.05) -> SurvivalCurve:
    """
    Kaplan-Meier estimate of the survival function

    Parameters
    ----------
    time : array-like
        Follow-up durations
    event : array-like
        Event indicators (1 for death, 0 for censored)
    label : str, default="all"
        Name of the curve
    alpha : float, default=0.05
        Level of the pointwise confidence band

    Returns
    -------
    SurvivalCurve
    """
    y = Survival(time, event)
    if len(y) == 0:
        raise ValueError("Cannot estimate a survival curve from an empty sample")

    kmf = KaplanMeierFitter(alpha=alpha)
    kmf.fit(y.time, event_observed=y.event, label=label)

    events = kmf.event_table
    ci = kmf.confidence_interval_
    timeline = kmf.survival_function_.index
    table = pd.DataFrame({
        "at_risk": events["at_risk"].reindex(timeline).to_numpy(),
        "observed": events["observed"].reindex(timeline).to_numpy(),
        "censored": events["censored"].reindex(timeline).to_numpy(),
        "survival": kmf.survival_function_.iloc[:, 0].to_numpy(),
        "lower": ci.iloc[:, 0].to_numpy(),
        "upper": ci.iloc[:, 1].to_numpy(),
    }, index=pd.Index(timeline.to_numpy(dtype=float), name="time"))

    return SurvivalCurve(
        label=str(label),
        table=table,
        median=float(kmf.median_survival_time_),
        n_obs=len(y),
        n_events=y.n_events,
    )


def fit_kaplan_meier_by_group(table: pd.DataFrame,
                              group: str,
                              time_col: str = "time",
                              event_col: str = "event",
                              alpha: float = 0.05) -> Dict[str, SurvivalCurve]:
    """
    Kaplan-Meier curves for each observed level of a categorical covariate

    Parameters
    ----------
    table : pandas.DataFrame
        Cleaned patient table
    group : str
        Stratifying column

    Returns
    -------
    dict
        Mapping from level label to its ``SurvivalCurve``, in level order
    """
    curves = {}
    for level, subset in table.groupby(group, observed=True, sort=True):
        curves[str(level)] = fit_kaplan_meier(subset[time_col], subset[event_col],
                                              label=f"{group}={level}", alpha=alpha)
    return curves


def logrank_by_group(table: pd.DataFrame,
                     group: str,
                     time_col: str = "time",
                     event_col: str = "event") -> LogRankResult:
    """
    Log-rank test for equality of survival across the levels of ``group``

    Raises
    ------
    ValueError
        If fewer than two levels are observed
    """
    data = table[[time_col, event_col, group]].dropna()
    levels = pd.Series(data[group]).astype(object)
    n_groups = levels.nunique()
    if n_groups < 2:
        raise ValueError(f"Log-rank test needs at least two groups in {group!r}, found {n_groups}")

    result = multivariate_logrank_test(data[time_col], levels, data[event_col])
    logger.debug("Log-rank on %s: chi2=%.3f p=%.4g", group, result.test_statistic, result.p_value)
    return LogRankResult(
        group=group,
        statistic=float(result.test_statistic),
        p_value=float(result.p_value),
        degrees_of_freedom=n_groups - 1,
        n_groups=n_groups,
    )


def pairwise_logrank(table: pd.DataFrame,
                     group: str,
                     time_col: str = "time",
                     event_col: str = "event") -> pd.DataFrame:
    """Two-sample log-rank tests between every pair of levels of ``group``"""
    data = table[[time_col, event_col, group]].dropna()
    rows = []
    levels = [level for level, _ in data.groupby(group, observed=True, sort=True)]
    for a, b in itertools.combinations(levels, 2):
        left = data[data[group] == a]
        right = data[data[group] == b]
        result = logrank_test(left[time_col], right[time_col],
                              event_observed_A=left[event_col],
                              event_observed_B=right[event_col])
        rows.append({
            "group": group,
            "level_a": str(a),
            "level_b": str(b),
            "statistic": float(result.test_statistic),
            "p_value": float(result.p_value),
        })
    return pd.DataFrame(rows, columns=["group", "level_a", "level_b", "statistic", "p_value"])


def survival_at(curve: SurvivalCurve, times: Union[np.ndarray, list, float]) -> np.ndarray:
    """Read the right-continuous step function ``curve`` at ``times``"""
    times = np.atleast_1d(np.asarray(times, dtype=float))
    idx = np.searchsorted(curve.times, times, side="right") - 1
    values = curve.survival[np.clip(idx, 0, None)]
    return np.where(idx < 0, 1.0, values)
