"""Tests for the grouped descriptive summary"""

import numpy as np
import pandas as pd
import pytest
from scipy.stats import ttest_ind

from cirrhosurv.descriptive import counts_by_event, summarize_by_event


def test_summary_layout(cirrhosis_table):
    """One row per numeric variable and one per categorical level"""
    summary = summarize_by_event(cirrhosis_table, numeric=["bilirubin", "albumin"],
                                 categorical=["edema"])
    assert list(summary.columns) == ["variable", "level", "overall", "censored", "death", "test", "p_value"]
    assert summary["variable"].tolist() == ["bilirubin", "albumin", "edema", "edema", "edema"]
    assert summary.loc[summary["variable"] == "edema", "level"].tolist() == ["N", "S", "Y"]


def test_numeric_summary_values(cirrhosis_table):
    """Mean (SD) per group and a Welch t-test p-value"""
    summary = summarize_by_event(cirrhosis_table, numeric=["bilirubin"], categorical=[])
    row = summary.iloc[0]
    deaths = cirrhosis_table.loc[cirrhosis_table["event"] == 1, "bilirubin"]
    assert row["death"] == f"{deaths.mean():.2f} ({deaths.std():.2f})"
    assert row["test"] == "welch t"
    censored = cirrhosis_table.loc[cirrhosis_table["event"] == 0, "bilirubin"]
    expected = ttest_ind(censored, deaths, equal_var=False).pvalue
    assert row["p_value"] == pytest.approx(expected)


def test_categorical_summary_values(cirrhosis_table):
    """Counts and a single chi-square p-value per variable"""
    summary = summarize_by_event(cirrhosis_table, numeric=[], categorical=["sex"])
    assert summary["test"].tolist() == ["chi-square", ""]
    assert 0 <= summary["p_value"].iloc[0] <= 1
    assert np.isnan(summary["p_value"].iloc[1])
    n_female = int((cirrhosis_table["sex"] == "F").sum())
    assert summary["overall"].iloc[0].startswith(f"{n_female} (")


def test_default_variables(cirrhosis_table):
    """Without arguments every known clinical variable is summarised"""
    summary = summarize_by_event(cirrhosis_table)
    assert {"age_years", "cholesterol", "stage", "drug"} <= set(summary["variable"])
    p_values = summary["p_value"].dropna()
    assert ((p_values >= 0) & (p_values <= 1)).all()


def test_counts_by_event(cirrhosis_table):
    """Group sizes add up to the table size"""
    counts = counts_by_event(cirrhosis_table)
    assert list(counts.index) == ["censored", "death"]
    assert counts.sum() == len(cirrhosis_table)


def test_single_group():
    """A table with no deaths gives missing p-values instead of failing"""
    table = pd.DataFrame({"event": [0, 0, 0], "bilirubin": [1.0, 2.0, 3.0],
                          "sex": pd.Categorical(["F", "M", "F"])})
    summary = summarize_by_event(table, numeric=["bilirubin"], categorical=["sex"])
    assert summary["p_value"].isna().all()
    assert summary.loc[0, "death"] == ""
