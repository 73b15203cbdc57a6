"""
Cleaning and recoding of the raw cirrhosis table
"""

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np
import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.utils.validation import check_is_fitted

from .data_validator import DataValidator
from .loader import REQUIRED_COLUMNS

logger = logging.getLogger(__name__)

COLUMN_NAMES = {
    "ID": "id",
    "N_Days": "time",
    "Status": "status",
    "Drug": "drug",
    "Age": "age",
    "Sex": "sex",
    "Ascites": "ascites",
    "Hepatomegaly": "hepatomegaly",
    "Spiders": "spiders",
    "Edema": "edema",
    "Bilirubin": "bilirubin",
    "Cholesterol": "cholesterol",
    "Albumin": "albumin",
    "Copper": "copper",
    "Alk_Phos": "alk_phos",
    "SGOT": "sgot",
    "Tryglicerides": "tryglicerides",
    "Platelets": "platelets",
    "Prothrombin": "prothrombin",
    "Stage": "stage",
}

STATUS_CODES = ["C", "CL", "D"]
DEATH_CODE = "D"

# Levels of each categorical column, reference level first
CATEGORY_LEVELS: Dict[str, List] = {
    "drug": ["Placebo", "D-penicillamine"],
    "sex": ["F", "M"],
    "ascites": ["N", "Y"],
    "hepatomegaly": ["N", "Y"],
    "spiders": ["N", "Y"],
    "edema": ["N", "S", "Y"],
    "stage": [1, 2, 3, 4],
}

NUMERIC_COLUMNS = [
    "time", "age", "bilirubin", "cholesterol", "albumin", "copper",
    "alk_phos", "sgot", "tryglicerides", "platelets", "prothrombin",
]

DAYS_PER_YEAR = 365.25

DEFAULT_COVARIATES = ["bilirubin", "age_years", "edema", "stage", "albumin", "prothrombin"]


class CirrhosisCleaner(BaseEstimator, TransformerMixin):
    """
    Recode the raw cirrhosis table into a typed patient table

    Parameters
    ----------
    covariates : sequence of str, optional
        Cleaned column names used downstream. Rows missing any of them are
        dropped. Defaults to ``DEFAULT_COVARIATES``.
    drop_missing : bool, default=True
        Whether to drop rows with missing downstream covariates

    Examples
    --------
    >>> raw = load_cirrhosis("cirrhosis.csv")
    >>> table = CirrhosisCleaner(covariates=["bilirubin", "stage"]).fit_transform(raw)
    >>> table["event"].unique()
    array([1, 0])
    """

    def __init__(self, covariates: Optional[Sequence[str]] = None,
                 drop_missing: bool = True):
        self.covariates = covariates
        self.drop_missing = drop_missing

    def fit(self, X: pd.DataFrame, y=None) -> "CirrhosisCleaner":
        DataValidator().validate_schema(X, REQUIRED_COLUMNS)
        self.covariates_ = list(DEFAULT_COVARIATES if self.covariates is None else self.covariates)
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        """
        Clean a raw table

        Parameters
        ----------
        X : pandas.DataFrame
            Raw table as returned by ``load_cirrhosis``

        Returns
        -------
        pandas.DataFrame
            New table with a binary ``event`` column, typed categoricals and
            ``age_years``; rows missing downstream covariates removed
        """
        check_is_fitted(self, "covariates_")
        table = X.rename(columns=COLUMN_NAMES).copy()

        for col in NUMERIC_COLUMNS:
            if col in table.columns:
                table[col] = self._coerce_numeric(table[col], col)

        invalid_time = table["time"] <= 0
        if invalid_time.any():
            logger.warning("%d rows have non-positive follow-up and are treated as missing",
                           int(invalid_time.sum()))
            table.loc[invalid_time, "time"] = np.nan

        table["status"] = self._recode_status(table["status"])
        table["event"] = (table["status"] == DEATH_CODE).astype(int)

        if "age" in table.columns:
            table["age_years"] = table["age"] / DAYS_PER_YEAR

        for col, levels in CATEGORY_LEVELS.items():
            if col in table.columns:
                table[col] = self._recode_categorical(table[col], col, levels)

        unknown = [col for col in self.covariates_ if col not in table.columns]
        if unknown:
            raise ValueError(f"Unknown covariates: {unknown}")

        subset = ["time", "status"]
        if self.drop_missing:
            subset += self.covariates_
        keep = table[subset].notna().all(axis=1)
        n_dropped = int((~keep).sum())
        if n_dropped:
            logger.info("Dropping %d of %d rows with missing values in %s",
                        n_dropped, len(table), ", ".join(subset))
        table = table.loc[keep].reset_index(drop=True)
        table["event"] = table["event"].astype(int)
        return table

    @staticmethod
    def _coerce_numeric(values: pd.Series, name: str) -> pd.Series:
        coerced = pd.to_numeric(values, errors="coerce")
        failed = int((coerced.isna() & values.notna()).sum())
        if failed:
            logger.warning("Column %s: %d values could not be read as numbers", name, failed)
        return coerced

    @staticmethod
    def _recode_status(values: pd.Series) -> pd.Series:
        codes = values.astype("string").str.strip().str.upper()
        bad = DataValidator().validate_status(codes, STATUS_CODES)
        if bad.any():
            logger.warning("Unknown status codes treated as missing: %s",
                           sorted(codes[bad].unique().tolist()))
        codes = codes.where(~bad)
        return pd.Categorical(codes.astype(object).where(codes.notna(), None),
                              categories=STATUS_CODES)

    @staticmethod
    def _recode_categorical(values: pd.Series, name: str, levels: List) -> pd.Series:
        if all(isinstance(level, (int, np.integer)) for level in levels):
            numeric = pd.to_numeric(values, errors="coerce")
            cleaned = numeric.where(numeric.isin(levels)).astype("Int64")
            failed = int((cleaned.isna() & values.notna()).sum())
            recoded = pd.Categorical(cleaned.astype(object).where(cleaned.notna(), None),
                                     categories=levels, ordered=True)
        else:
            lookup = {str(level).lower(): level for level in levels}
            mapped = values.map(lambda v: lookup.get(str(v).strip().lower()) if pd.notna(v) else None)
            failed = int((mapped.isna() & values.notna()).sum())
            recoded = pd.Categorical(mapped, categories=levels)
        if failed:
            logger.warning("Column %s: %d values outside %s treated as missing", name, failed, levels)
        return recoded


def clean_cirrhosis(raw: pd.DataFrame,
                    covariates: Optional[Sequence[str]] = None,
                    drop_missing: bool = True) -> pd.DataFrame:
    """Clean a raw cirrhosis table; see ``CirrhosisCleaner``"""
    return CirrhosisCleaner(covariates=covariates, drop_missing=drop_missing).fit_transform(raw)
