"""
Transformations of survival probabilities used by model diagnostics.
"""
import numpy as np


class HazardTransforms:
    """Transforms of a survival curve onto linearising scales."""

    @staticmethod
    def cumulative_hazard(survival: np.ndarray) -> np.ndarray:
        """
        Cumulative hazard ``H = -log S``.

        Parameters
        ----------
        survival : np.ndarray
            Survival probabilities in (0, 1]

        Returns
        -------
        np.ndarray
            Cumulative hazard values
        """
        survival = np.asarray(survival, dtype=float)
        return -np.log(survival)

    @staticmethod
    def log_cumulative_hazard(survival: np.ndarray) -> np.ndarray:
        """
        Complementary log-log transform ``log(-log S)``.

        Linear in ``log t`` with slope equal to the shape when survival is
        Weibull; parallel across strata under proportional hazards.
        """
        return np.log(HazardTransforms.cumulative_hazard(survival))

    @staticmethod
    def log_odds(survival: np.ndarray) -> np.ndarray:
        """
        Survival log-odds ``log(S / (1 - S))``.

        Linear in ``log t`` for log-logistic survival; parallel across
        strata under proportional odds.
        """
        survival = np.asarray(survival, dtype=float)
        return np.log(survival) - np.log1p(-survival)

    @staticmethod
    def transform(survival: np.ndarray, transform: str = "cloglog") -> np.ndarray:
        """
        Apply a named transform.

        Parameters
        ----------
        survival : np.ndarray
            Survival probabilities strictly between 0 and 1
        transform : str
            ``"cloglog"`` for ``log(-log S)``, ``"logodds"`` for the log-odds

        Returns
        -------
        np.ndarray
            Transformed values
        """
        if transform == "cloglog":
            return HazardTransforms.log_cumulative_hazard(survival)
        elif transform == "logodds":
            return HazardTransforms.log_odds(survival)
        else:
            raise ValueError("Transform must be 'cloglog' or 'logodds'")
