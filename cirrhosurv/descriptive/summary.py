"""
Grouped descriptive statistics by event status
"""

import logging
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd
from scipy.stats import chi2_contingency, ttest_ind

logger = logging.getLogger(__name__)

EVENT_LABELS = {0: "censored", 1: "death"}

DEFAULT_NUMERIC = [
    "age_years", "bilirubin", "cholesterol", "albumin", "copper", "alk_phos",
    "sgot", "tryglicerides", "platelets", "prothrombin",
]
DEFAULT_CATEGORICAL = ["drug", "sex", "ascites", "hepatomegaly", "spiders", "edema", "stage"]


def counts_by_event(table: pd.DataFrame, event_col: str = "event") -> pd.Series:
    """Number of patients per event group, labelled censored/death"""
    counts = table[event_col].value_counts().reindex(list(EVENT_LABELS), fill_value=0)
    counts.index = [EVENT_LABELS[k] for k in counts.index]
    return counts


def _mean_sd(values: pd.Series) -> str:
    values = values.dropna()
    if values.empty:
        return ""
    return f"{values.mean():.2f} ({values.std(ddof=1):.2f})"


def _numeric_rows(table: pd.DataFrame, col: str, event_col: str) -> List[dict]:
    groups = {label: table.loc[table[event_col] == k, col].astype(float)
              for k, label in EVENT_LABELS.items()}
    censored = groups["censored"].dropna()
    death = groups["death"].dropna()
    p_value = np.nan
    if len(censored) > 1 and len(death) > 1:
        p_value = float(ttest_ind(censored, death, equal_var=False).pvalue)
    row = {"variable": col, "level": "mean (SD)", "overall": _mean_sd(table[col].astype(float))}
    row.update({label: _mean_sd(values) for label, values in groups.items()})
    row["test"] = "welch t"
    row["p_value"] = p_value
    return [row]


def _categorical_rows(table: pd.DataFrame, col: str, event_col: str) -> List[dict]:
    crosstab = pd.crosstab(table[col], table[event_col]).reindex(columns=list(EVENT_LABELS), fill_value=0)
    crosstab = crosstab.loc[crosstab.sum(axis=1) > 0]
    p_value = np.nan
    usable = crosstab.loc[:, crosstab.sum(axis=0) > 0]
    if usable.shape[0] > 1 and usable.shape[1] > 1:
        p_value = float(chi2_contingency(usable.to_numpy())[1])

    overall_total = crosstab.to_numpy().sum()
    rows = []
    for i, (level, counts) in enumerate(crosstab.iterrows()):
        row = {"variable": col, "level": str(level)}
        total = counts.sum()
        row["overall"] = f"{total} ({100 * total / overall_total:.1f}%)"
        for k, label in EVENT_LABELS.items():
            group_total = crosstab[k].sum()
            pct = 100 * counts[k] / group_total if group_total else 0.0
            row[label] = f"{counts[k]} ({pct:.1f}%)"
        row["test"] = "chi-square" if i == 0 else ""
        row["p_value"] = p_value if i == 0 else np.nan
        rows.append(row)
    return rows


def summarize_by_event(table: pd.DataFrame,
                       numeric: Optional[Sequence[str]] = None,
                       categorical: Optional[Sequence[str]] = None,
                       event_col: str = "event") -> pd.DataFrame:
    """
    Summary table of covariates split by event status

    Parameters
    ----------
    table : pandas.DataFrame
        Cleaned patient table
    numeric : sequence of str, optional
        Continuous variables, summarised as mean (SD) with a Welch t-test
    categorical : sequence of str, optional
        Categorical variables, summarised as n (%) with a chi-square test
    event_col : str, default="event"
        Binary event column

    Returns
    -------
    pandas.DataFrame
        Columns ``variable, level, overall, censored, death, test, p_value``
    """
    if numeric is None:
        numeric = [col for col in DEFAULT_NUMERIC if col in table.columns]
    if categorical is None:
        categorical = [col for col in DEFAULT_CATEGORICAL if col in table.columns]

    rows = []
    for col in numeric:
        rows += _numeric_rows(table, col, event_col)
    for col in categorical:
        rows += _categorical_rows(table, col, event_col)

    logger.debug("Summarised %d numeric and %d categorical variables", len(numeric), len(categorical))
    return pd.DataFrame(rows, columns=["variable", "level", "overall", "censored", "death", "test", "p_value"])
