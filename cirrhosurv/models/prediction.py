"""
Survival-quantile predictions for hypothetical patients
"""

from typing import Optional, Sequence

import numpy as np
import pandas as pd

from .base import BaseParametricSurvival


def hypothetical_patient(table: pd.DataFrame, covariates: Sequence[str], **overrides) -> pd.DataFrame:
    """
    One-row covariate frame for a typical patient

    Numeric covariates default to the median of ``table`` and categorical
    ones to their most frequent level; keyword arguments override them.

    Parameters
    ----------
    table : pandas.DataFrame
        Cleaned patient table
    covariates : sequence of str
        Covariates of the model to predict with
    **overrides
        Covariate values to set explicitly

    Returns
    -------
    pandas.DataFrame

    Raises
    ------
    ValueError
        For unknown covariate names or categorical overrides outside the
        levels of ``table``
    """
    unknown = [name for name in overrides if name not in covariates]
    if unknown:
        raise ValueError(f"Unknown covariates for prediction: {unknown}")

    row = {}
    for col in covariates:
        values = table[col]
        if col in overrides:
            row[col] = overrides[col]
        elif isinstance(values.dtype, pd.CategoricalDtype) or values.dtype == object:
            row[col] = values.mode(dropna=True).iloc[0]
        else:
            row[col] = float(values.median())

    patient = pd.DataFrame([row], columns=list(covariates))
    for col in covariates:
        if isinstance(table[col].dtype, pd.CategoricalDtype):
            recoded = pd.Categorical(patient[col], dtype=table[col].dtype)
            if patient[col].notna().iloc[0] and pd.isna(recoded[0]):
                raise ValueError(f"{patient[col].iloc[0]!r} is not a level of {col!r}: "
                                 f"{list(table[col].cat.categories)}")
            patient[col] = recoded
    return patient


def predict_quantile_curve(model: BaseParametricSurvival,
                           patient: pd.DataFrame,
                           probabilities: Optional[Sequence[float]] = None) -> pd.DataFrame:
    """
    Survival-quantile curve for a single patient

    Parameters
    ----------
    model : BaseParametricSurvival
        Fitted parametric model
    patient : pandas.DataFrame
        One row of covariates, e.g. from ``hypothetical_patient``
    probabilities : sequence of float, optional
        Cumulative death probabilities; defaults to 0.01, 0.02, ..., 0.99

    Returns
    -------
    pandas.DataFrame
        Columns ``probability, survival, time`` with time in days
    """
    if len(patient) != 1:
        raise ValueError("Expected exactly one patient row")
    if probabilities is None:
        probabilities = np.round(np.arange(1, 100) / 100, 2)
    probabilities = np.sort(np.asarray(probabilities, dtype=float))

    quantiles = model.predict_quantiles(patient, probabilities)
    return pd.DataFrame({
        "probability": probabilities,
        "survival": 1.0 - probabilities,
        "time": quantiles.iloc[:, 0].to_numpy(),
    })
