"""
Visualization functions
"""

import numpy as np
import matplotlib.pyplot as plt
import seaborn as sns
from typing import Dict, Optional, Union
import pandas as pd
from ..estimation import SurvivalCurve

COLORS = ['#FF6B6B', '#4ECDC4', '#45B7D1', '#96CEB4', '#FFEEAD']


def plot_kaplan_meier(curves: Union[SurvivalCurve, Dict[str, SurvivalCurve]],
                      show_ci: bool = True,
                      title: str = "Kaplan-Meier Survival",
                      figsize: tuple = (10, 6)):
    """
    Plot Kaplan-Meier curves with confidence bands

    Parameters
    ----------
    curves : SurvivalCurve or dict of SurvivalCurve
        One curve or curves keyed by stratum
    show_ci : bool, default=True
        Whether to shade the pointwise confidence band
    title : str
        Plot title
    figsize : tuple, default=(10, 6)
        Figure size

    Returns
    -------
    matplotlib.figure.Figure
        The figure object
    """
    if isinstance(curves, SurvivalCurve):
        curves = {curves.label: curves}
    if not curves:
        raise ValueError("No curves to plot")

    fig = plt.figure(figsize=figsize)
    for i, (name, curve) in enumerate(curves.items()):
        color = COLORS[i % len(COLORS)]
        steps = curve.table
        plt.step(steps.index, steps["survival"], where="post",
                 label=f"{name} (n={curve.n_obs})", color=color)
        if show_ci:
            plt.fill_between(steps.index, steps["lower"], steps["upper"],
                             step="post", alpha=0.2, color=color)
        censored = steps[steps["censored"] > 0]
        plt.plot(censored.index, censored["survival"], "|", color=color, markersize=6)

    plt.ylim(0, 1.05)
    plt.xlabel("Time (days)")
    plt.ylabel("Survival Probability")
    plt.title(title)
    plt.grid(True, alpha=0.3)
    plt.legend()
    plt.tight_layout()
    return fig


def _plot_diagnostic(diagnostic: pd.DataFrame,
                     slopes: Optional[pd.DataFrame],
                     ylabel: str,
                     title: str,
                     figsize: tuple):
    fig = plt.figure(figsize=figsize)
    ax = plt.gca()
    strata = list(dict.fromkeys(diagnostic["stratum"]))
    palette = {stratum: COLORS[i % len(COLORS)] for i, stratum in enumerate(strata)}
    sns.scatterplot(data=diagnostic, x="log_time", y="value", hue="stratum",
                    palette=palette, ax=ax, s=20)
    if slopes is not None:
        for stratum, line in slopes.dropna().iterrows():
            points = diagnostic.loc[diagnostic["stratum"] == stratum, "log_time"]
            x = np.array([points.min(), points.max()])
            ax.plot(x, line["intercept"] + line["slope"] * x,
                    color=palette.get(stratum, "black"), linewidth=1)
    plt.xlabel("log(Time)")
    plt.ylabel(ylabel)
    plt.title(title)
    plt.grid(True, alpha=0.3)
    plt.tight_layout()
    return fig


def plot_weibull_diagnostic(diagnostic: pd.DataFrame,
                            slopes: Optional[pd.DataFrame] = None,
                            figsize: tuple = (10, 6)):
    """
    Plot log(-log S) against log t per stratum

    Parameters
    ----------
    diagnostic : pandas.DataFrame
        Output of ``weibull_diagnostic_table``
    slopes : pandas.DataFrame, optional
        Output of ``line_slopes``; fitted lines are drawn when given
    figsize : tuple, default=(10, 6)
        Figure size

    Returns
    -------
    matplotlib.figure.Figure
        The figure object
    """
    return _plot_diagnostic(diagnostic, slopes, "log(-log S(t))", "Weibull Diagnostic", figsize)


def plot_log_odds(diagnostic: pd.DataFrame,
                  slopes: Optional[pd.DataFrame] = None,
                  figsize: tuple = (10, 6)):
    """
    Plot survival log-odds against log t per stratum

    Returns
    -------
    matplotlib.figure.Figure
        The figure object
    """
    return _plot_diagnostic(diagnostic, slopes, "log(S(t) / (1 - S(t)))", "Log-Odds Diagnostic", figsize)


def plot_quantile_curve(curves: Dict[str, pd.DataFrame],
                        figsize: tuple = (10, 6)):
    """
    Plot predicted survival-quantile curves

    Parameters
    ----------
    curves : dict of pandas.DataFrame
        Output of ``predict_quantile_curve`` keyed by label
    figsize : tuple, default=(10, 6)
        Figure size

    Returns
    -------
    matplotlib.figure.Figure
        The figure object
    """
    if not curves:
        raise ValueError("No curves to plot")

    fig = plt.figure(figsize=figsize)
    for i, (label, curve) in enumerate(curves.items()):
        plt.plot(curve["time"], curve["survival"], label=label,
                 color=COLORS[i % len(COLORS)])
    plt.xlabel("Time (days)")
    plt.ylabel("Survival Probability")
    plt.title("Predicted Survival Quantiles")
    plt.grid(True, alpha=0.3)
    plt.legend()
    plt.tight_layout()
    return fig


def plot_aic_comparison(comparison: pd.DataFrame,
                        figsize: tuple = (8, 5)):
    """
    Bar chart of model AIC

    Parameters
    ----------
    comparison : pandas.DataFrame
        Output of ``compare_aic``

    Returns
    -------
    matplotlib.figure.Figure
        The figure object
    """
    fig = plt.figure(figsize=figsize)
    ax = plt.gca()
    sns.barplot(data=comparison, x="family", y="aic", color=COLORS[2], ax=ax)
    lower = comparison["aic"].min()
    upper = comparison["aic"].max()
    pad = max(1.0, 0.1 * (upper - lower))
    ax.set_ylim(lower - pad, upper + pad)
    plt.xlabel("Model")
    plt.ylabel("AIC")
    plt.title("Model Comparison")
    plt.tight_layout()
    return fig
