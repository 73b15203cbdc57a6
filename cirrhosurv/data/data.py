"""
Data structures for survival analysis
"""

import numpy as np
import pandas as pd
from typing import Union

from .data_validator import DataValidator


class Survival:
    """Class for right-censored survival data"""

    def __init__(self, time: Union[np.ndarray, pd.Series],
                 event: Union[np.ndarray, pd.Series]):
        """
        Initialize survival data

        Parameters
        ----------
        time : array-like
            Time to event or censoring
        event : array-like
            Event indicator (1 for death, 0 for censored)
        """
        self.time = np.asarray(time, dtype=float)
        self.event = np.asarray(event)
        self._validate()
        self.event = self.event.astype(int)

    def _validate(self):
        """Validate the survival data"""
        DataValidator().validate_survival(self.time, self.event)

    def __len__(self) -> int:
        return len(self.time)

    @property
    def n_events(self) -> int:
        """Number of observed deaths"""
        return int(self.event.sum())

    @classmethod
    def from_frame(cls, table: pd.DataFrame,
                   time_col: str = "time",
                   event_col: str = "event") -> "Survival":
        """
        Build survival data from a cleaned patient table

        Parameters
        ----------
        table : pandas.DataFrame
            Cleaned table holding duration and event columns
        time_col : str, default="time"
            Name of the duration column
        event_col : str, default="event"
            Name of the binary event column

        Returns
        -------
        Survival
        """
        return cls(time=table[time_col].to_numpy(), event=table[event_col].to_numpy())
