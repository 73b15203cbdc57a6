"""
Nonparametric survival estimation
"""

from .kaplan_meier import (
    SurvivalCurve,
    LogRankResult,
    fit_kaplan_meier,
    fit_kaplan_meier_by_group,
    logrank_by_group,
    pairwise_logrank,
    survival_at
)

__all__ = [
    "SurvivalCurve",
    "LogRankResult",
    "fit_kaplan_meier",
    "fit_kaplan_meier_by_group",
    "logrank_by_group",
    "pairwise_logrank",
    "survival_at"
]
