"""Tests for hypothetical patients and survival-quantile curves"""

import numpy as np
import pandas as pd
import pytest

from cirrhosurv.models import WeibullAFTRegression, hypothetical_patient, predict_quantile_curve

COVARIATES = ["bilirubin", "age_years", "edema", "stage", "albumin"]


@pytest.fixture
def weibull_model(cirrhosis_table):
    return WeibullAFTRegression(covariates=COVARIATES).fit(cirrhosis_table)


def test_hypothetical_patient_defaults(cirrhosis_table):
    """Medians for numeric covariates and modes for categoricals"""
    patient = hypothetical_patient(cirrhosis_table, COVARIATES)
    assert patient.shape == (1, len(COVARIATES))
    assert patient.loc[0, "bilirubin"] == pytest.approx(cirrhosis_table["bilirubin"].median())
    assert patient.loc[0, "edema"] == cirrhosis_table["edema"].mode().iloc[0]
    assert patient["stage"].dtype == cirrhosis_table["stage"].dtype


def test_hypothetical_patient_overrides(cirrhosis_table):
    """Keyword arguments replace the defaults"""
    patient = hypothetical_patient(cirrhosis_table, COVARIATES, bilirubin=5.0, stage=4)
    assert patient.loc[0, "bilirubin"] == 5.0
    assert patient.loc[0, "stage"] == 4
    with pytest.raises(ValueError):
        hypothetical_patient(cirrhosis_table, COVARIATES, copper=100)


def test_quantile_curve(weibull_model, cirrhosis_table):
    """Times increase with the cumulative death probability"""
    patient = hypothetical_patient(cirrhosis_table, COVARIATES)
    curve = predict_quantile_curve(weibull_model, patient)
    assert list(curve.columns) == ["probability", "survival", "time"]
    assert len(curve) == 99
    assert curve["probability"].iloc[0] == pytest.approx(0.01)
    np.testing.assert_allclose(curve["survival"], 1 - curve["probability"])
    assert np.all(np.diff(curve["time"].to_numpy()) > 0)
    assert (curve["time"] > 0).all()


def test_higher_bilirubin_shortens_survival(weibull_model, cirrhosis_table):
    """Every quantile comes earlier for a patient with higher bilirubin"""
    low = predict_quantile_curve(weibull_model, hypothetical_patient(cirrhosis_table, COVARIATES, bilirubin=1.0))
    high = predict_quantile_curve(weibull_model, hypothetical_patient(cirrhosis_table, COVARIATES, bilirubin=5.0))
    assert np.all(high["time"].to_numpy() < low["time"].to_numpy())


def test_custom_probabilities(weibull_model, cirrhosis_table):
    """Probabilities are returned sorted"""
    patient = hypothetical_patient(cirrhosis_table, COVARIATES)
    curve = predict_quantile_curve(weibull_model, patient, [0.9, 0.5, 0.1])
    assert curve["probability"].tolist() == [0.1, 0.5, 0.9]
    median = weibull_model.predict_quantiles(patient, [0.5]).iloc[0, 0]
    assert curve["time"].iloc[1] == pytest.approx(median)


def test_quantile_curve_single_row(weibull_model, cirrhosis_table):
    """Only one patient at a time"""
    with pytest.raises(ValueError):
        predict_quantile_curve(weibull_model, cirrhosis_table.head(2))


def test_hypothetical_patient_unknown_level(cirrhosis_table):
    """A categorical override outside the known levels is rejected"""
    with pytest.raises(ValueError):
        hypothetical_patient(cirrhosis_table, COVARIATES, stage=5)
    with pytest.raises(ValueError):
        hypothetical_patient(cirrhosis_table, COVARIATES, edema="y")


def test_override_changes_prediction(weibull_model, cirrhosis_table):
    """A valid non-reference level gives a different curve from the reference"""
    reference = predict_quantile_curve(
        weibull_model, hypothetical_patient(cirrhosis_table, COVARIATES, stage=1, edema="N"))
    advanced = predict_quantile_curve(
        weibull_model, hypothetical_patient(cirrhosis_table, COVARIATES, stage=4, edema="Y"))
    assert not np.allclose(reference["time"], advanced["time"])
