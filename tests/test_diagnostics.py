"""Tests for the Weibull and log-odds diagnostics and AIC comparison"""

import numpy as np
import pandas as pd
import pytest

from cirrhosurv.diagnostics import compare_aic, line_slopes, log_odds_table, weibull_diagnostic_table
from cirrhosurv.models import ExponentialRegression, WeibullAFTRegression, WeibullPHRegression
from cirrhosurv.utils import HazardTransforms


def weibull_sample(shape, n_samples=2000, seed=0):
    rng = np.random.RandomState(seed)
    return pd.DataFrame({
        "time": 1000 * rng.weibull(shape, n_samples) + 1e-6,
        "event": np.ones(n_samples, dtype=int),
    })


def test_hazard_transforms():
    """Closed-form values of the survival transforms"""
    survival = np.array([np.exp(-1), 0.5])
    np.testing.assert_allclose(HazardTransforms.cumulative_hazard(survival), [1.0, np.log(2)])
    np.testing.assert_allclose(HazardTransforms.log_cumulative_hazard(survival)[0], 0.0, atol=1e-12)
    np.testing.assert_allclose(HazardTransforms.log_odds([0.5, 0.75]), [0.0, np.log(3)])
    np.testing.assert_allclose(HazardTransforms.transform(survival, "logodds"),
                               HazardTransforms.log_odds(survival))
    with pytest.raises(ValueError):
        HazardTransforms.transform(survival, "probit")


def test_weibull_table_layout(cirrhosis_table):
    """Finite points for every stage"""
    diag = weibull_diagnostic_table(cirrhosis_table, "stage")
    assert list(diag.columns) == ["stratum", "time", "log_time", "survival", "value"]
    assert set(diag["stratum"]) <= {"1", "2", "3", "4"}
    assert np.isfinite(diag[["log_time", "value"]].to_numpy()).all()
    assert ((diag["survival"] > 0) & (diag["survival"] < 1)).all()
    np.testing.assert_allclose(diag["log_time"], np.log(diag["time"]))


def test_weibull_slope_recovers_shape():
    """For Weibull survival the log(-log S) line has slope equal to the shape"""
    diag = weibull_diagnostic_table(weibull_sample(2.0))
    slopes = line_slopes(diag)
    assert list(slopes.index) == ["all"]
    assert slopes.loc["all", "slope"] == pytest.approx(2.0, rel=0.1)


def test_log_odds_table(cirrhosis_table):
    """Log-odds values decrease with time within each stratum"""
    diag = log_odds_table(cirrhosis_table, "edema")
    np.testing.assert_allclose(diag["value"], np.log(diag["survival"] / (1 - diag["survival"])))
    for _, points in diag.groupby("stratum"):
        assert np.all(np.diff(points["value"].to_numpy()) <= 1e-12)


def test_line_slopes_short_strata():
    """Strata with a single point get a missing slope"""
    diag = pd.DataFrame({
        "stratum": ["a", "a", "a", "b"],
        "time": [1.0, np.e, np.e ** 2, 5.0],
        "log_time": [0.0, 1.0, 2.0, np.log(5.0)],
        "survival": [0.9, 0.8, 0.7, 0.5],
        "value": [1.0, 3.0, 5.0, 0.0],
    })
    slopes = line_slopes(diag)
    assert slopes.loc["a", "slope"] == pytest.approx(2.0)
    assert slopes.loc["a", "intercept"] == pytest.approx(1.0)
    assert np.isnan(slopes.loc["b", "slope"])
    assert slopes["n_points"].tolist() == [3, 1]


def test_sparse_stratum_warns():
    """A stratum without two usable event times is reported"""
    table = pd.DataFrame({
        "time": [1, 2, 3, 4, 5, 6, 7],
        "event": [1, 1, 1, 1, 1, 0, 0],
        "arm": ["a", "a", "a", "a", "a", "b", "b"],
    })
    with pytest.warns(UserWarning):
        diag = weibull_diagnostic_table(table, "arm")
    assert set(diag["stratum"]) == {"a"}


def test_compare_aic(cirrhosis_table):
    """Models are ranked with the best first"""
    covariates = ["bilirubin", "albumin", "stage"]
    models = [cls(covariates=covariates).fit(cirrhosis_table)
              for cls in (ExponentialRegression, WeibullAFTRegression, WeibullPHRegression)]
    comparison = compare_aic(models)
    assert list(comparison.columns) == ["family", "n_params", "log_likelihood", "aic", "delta_aic"]
    assert comparison["delta_aic"].iloc[0] == 0
    assert (comparison["delta_aic"] >= 0).all()
    assert comparison["aic"].is_monotonic_increasing
    assert set(comparison["family"]) == {"exponential", "weibull_aft", "weibull_ph"}
    # the two Weibull parameterisations tie and keep their input order
    weibull = comparison.loc[comparison["family"].str.startswith("weibull"), "family"].tolist()
    assert weibull == ["weibull_aft", "weibull_ph"]


def test_compare_aic_errors(cirrhosis_table):
    """No models is an error and different samples are warned about"""
    with pytest.raises(ValueError):
        compare_aic([])
    full = ExponentialRegression(covariates=["bilirubin"]).fit(cirrhosis_table)
    part = ExponentialRegression(covariates=["bilirubin"]).fit(cirrhosis_table.head(150))
    with pytest.warns(UserWarning):
        compare_aic([full, part])
