"""
Design-matrix encoding of patient covariates
"""

from typing import Sequence

import pandas as pd
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.utils.validation import check_is_fitted


class CovariateEncoder(BaseEstimator, TransformerMixin):
    """
    Turn selected covariates into numeric model columns

    Numeric covariates pass through unchanged. Categorical covariates are
    treatment coded against their first level, one ``<name>_<level>``
    column per remaining level.

    Parameters
    ----------
    covariates : sequence of str
        Columns of the cleaned table to encode
    """

    def __init__(self, covariates: Sequence[str] = ()):
        self.covariates = covariates

    def fit(self, X: pd.DataFrame, y=None) -> "CovariateEncoder":
        missing = [col for col in self.covariates if col not in X.columns]
        if missing:
            raise ValueError(f"Covariates not in table: {missing}")
        self.levels_ = {}
        for col in self.covariates:
            if isinstance(X[col].dtype, pd.CategoricalDtype):
                # observed levels only, in category order
                self.levels_[col] = list(X[col].cat.remove_unused_categories().cat.categories)
            elif X[col].dtype == object or pd.api.types.is_string_dtype(X[col]):
                self.levels_[col] = sorted(X[col].dropna().unique().tolist())
        self.feature_names_ = []
        for col in self.covariates:
            if col in self.levels_:
                self.feature_names_ += [self._dummy_name(col, level) for level in self.levels_[col][1:]]
            else:
                self.feature_names_.append(col)
        return self

    def transform(self, X: pd.DataFrame) -> pd.DataFrame:
        check_is_fitted(self, "feature_names_")
        columns = {}
        for col in self.covariates:
            if col in self.levels_:
                values = X[col].astype(object)
                unseen = values.notna() & ~values.isin(self.levels_[col])
                if unseen.any():
                    raise ValueError(f"Levels of {col!r} not seen during fit: "
                                     f"{sorted(map(str, values[unseen].unique()))}")
                for level in self.levels_[col][1:]:
                    columns[self._dummy_name(col, level)] = (values == level).astype(float)
            else:
                columns[col] = pd.to_numeric(X[col], errors="coerce").astype(float)
        return pd.DataFrame(columns, index=X.index)[self.feature_names_]

    def get_feature_names_out(self, input_features=None):
        check_is_fitted(self, "feature_names_")
        return list(self.feature_names_)

    @staticmethod
    def _dummy_name(column: str, level) -> str:
        label = "".join(ch if ch.isalnum() else "_" for ch in str(level))
        return f"{column}_{label}"
