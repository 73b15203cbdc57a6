"""
Data validation utilities for the cirrhosis patient table
"""

import numpy as np
import pandas as pd
from typing import Union, Iterable


class SchemaError(ValueError):
    """Raised when an input table lacks required columns"""

    def __init__(self, missing):
        self.missing = sorted(missing)
        super().__init__(f"Missing required columns: {', '.join(self.missing)}")


class DataValidator:
    """Validator for raw and cleaned survival tables"""

    def validate_schema(self, data: pd.DataFrame, required: Iterable[str]) -> bool:
        """Check that every required column is present

        Args:
            data: Table to check
            required: Column names that must exist

        Returns:
            True if data is valid, raises SchemaError otherwise
        """
        missing = set(required) - set(data.columns)
        if missing:
            raise SchemaError(missing)
        return True

    def validate_survival(self,
                          time: Union[np.ndarray, pd.Series],
                          event: Union[np.ndarray, pd.Series]) -> bool:
        """Validate survival data

        Args:
            time: Array of event/censoring times
            event: Array of event indicators (0=censored, 1=death)

        Returns:
            True if data is valid, raises ValueError otherwise
        """
        time = np.asarray(time, dtype=float)
        event = np.asarray(event)

        if len(time) != len(event):
            raise ValueError("Time and event arrays must have same length")

        if np.any(np.isnan(time)):
            raise ValueError("Event times cannot be missing")

        if np.any(time < 0):
            raise ValueError("Event times cannot be negative")

        if not np.all(np.isin(event, [0, 1])):
            raise ValueError("Event indicators must be 0 or 1")

        return True

    def validate_status(self,
                        status: pd.Series,
                        vocabulary: Iterable[str]) -> pd.Series:
        """Flag status codes that fall outside the allowed vocabulary

        Args:
            status: Normalised status codes (missing values allowed)
            vocabulary: Allowed codes

        Returns:
            Boolean mask, True where a non-missing code is not allowed
        """
        return status.notna() & ~status.isin(list(vocabulary))
