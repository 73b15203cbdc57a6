"""
End-to-end cirrhosis survival report

Usage::

    cirrhosurv-report cirrhosis.csv --output-dir report/
"""

import argparse
import logging
import os
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import matplotlib
matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pandas as pd

from .config import ReportConfig
from .data import clean_cirrhosis, load_cirrhosis
from .descriptive import counts_by_event, summarize_by_event
from .diagnostics import compare_aic, line_slopes, log_odds_table, weibull_diagnostic_table
from .estimation import LogRankResult, SurvivalCurve, fit_kaplan_meier, fit_kaplan_meier_by_group, logrank_by_group
from .models import (
    BaseParametricSurvival,
    ExponentialRegression,
    WeibullAFTRegression,
    WeibullPHRegression,
    hypothetical_patient,
    predict_quantile_curve
)
from .visualization import (
    plot_aic_comparison,
    plot_kaplan_meier,
    plot_log_odds,
    plot_quantile_curve,
    plot_weibull_diagnostic
)

logger = logging.getLogger(__name__)


@dataclass
class ReportResult:
    """Every intermediate object produced by ``run_report``"""
    config: ReportConfig
    table: pd.DataFrame
    descriptive: pd.DataFrame
    km_overall: SurvivalCurve
    km_by_group: Dict[str, Dict[str, SurvivalCurve]]
    logrank: List[LogRankResult]
    models: List[BaseParametricSurvival]
    weibull_diagnostic: pd.DataFrame
    log_odds: pd.DataFrame
    aic: pd.DataFrame
    quantiles: Dict[str, pd.DataFrame]
    files: List[str]


def fit_models(table: pd.DataFrame, config: ReportConfig) -> List[BaseParametricSurvival]:
    """Fit the exponential, Weibull AFT and Weibull PH models"""
    params = dict(covariates=config.covariates, time_scale=config.time_scale, alpha=config.alpha)
    return [
        ExponentialRegression(**params).fit(table),
        WeibullAFTRegression(**params).fit(table),
        WeibullPHRegression(**params).fit(table),
    ]


def _save_figure(fig, path: str, files: List[str]) -> None:
    fig.savefig(path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    files.append(path)


def _save_table(frame: pd.DataFrame, path: str, files: List[str], index: bool = False) -> None:
    frame.to_csv(path, index=index)
    files.append(path)


def _write_markdown(result: ReportResult, path: str) -> None:
    config = result.config
    table = result.table
    counts = counts_by_event(table)
    logrank = pd.DataFrame([vars(r) for r in result.logrank])

    lines = [
        "# Cirrhosis survival report",
        "",
        f"Data: `{config.data_path}`. Patients analysed: {len(table)} "
        f"({counts['death']} deaths, {counts['censored']} censored).",
        "",
        "## Descriptive statistics by event status",
        "",
        "[descriptive.csv](descriptive.csv)",
        "",
        "## Kaplan-Meier estimates",
        "",
        f"Median survival: {result.km_overall.median:.0f} days.",
        "",
        "![Overall](km_overall.png)",
        "",
    ]
    for group in result.km_by_group:
        lines += [f"![{group}](km_{group}.png)", ""]
    lines += ["### Log-rank tests", "", "```", logrank.to_string(index=False), "```", ""]

    lines += ["## Parametric models", ""]
    for model in result.models:
        lines += [
            f"### {model.family} ({model.metric.replace('_', ' ')}s)",
            "",
            "```",
            model.summary_[["coef", "se", "exp_coef", "exp_lower", "exp_upper", "p"]].to_string(float_format="%.4f"),
            "```",
            "",
        ]

    lines += [
        "## Diagnostics",
        "",
        f"![Weibull diagnostic](weibull_{config.diagnostic_group}.png)",
        "",
        f"![Log-odds diagnostic](logodds_{config.diagnostic_group}.png)",
        "",
        "### AIC",
        "",
        "```",
        result.aic.to_string(index=False, float_format="%.2f"),
        "```",
        "",
        "![AIC](aic.png)",
        "",
        "## Predicted survival quantiles",
        "",
        "![Quantiles](quantiles.png)",
        "",
    ]
    with open(path, "w", encoding="utf-8") as handle:
        handle.write("\n".join(lines))


def run_report(config: ReportConfig) -> ReportResult:
    """
    Run the whole analysis and write its outputs

    Parameters
    ----------
    config : ReportConfig
        Report settings

    Returns
    -------
    ReportResult
    """
    os.makedirs(config.output_dir, exist_ok=True)
    files: List[str] = []

    def out(name: str) -> str:
        return os.path.join(config.output_dir, name)

    raw = load_cirrhosis(config.data_path)
    table = clean_cirrhosis(raw, covariates=config.required_columns)
    if table["event"].sum() == 0:
        raise ValueError("No deaths in the cleaned table; survival models cannot be fitted")

    descriptive = summarize_by_event(table)
    _save_table(descriptive, out("descriptive.csv"), files)

    km_overall = fit_kaplan_meier(table["time"], table["event"], alpha=config.alpha)
    _save_table(km_overall.table, out("km_overall.csv"), files, index=True)
    _save_figure(plot_kaplan_meier(km_overall, title="Overall Survival"), out("km_overall.png"), files)

    km_by_group = {}
    logrank = []
    for group in config.strata:
        km_by_group[group] = fit_kaplan_meier_by_group(table, group, alpha=config.alpha)
        _save_figure(plot_kaplan_meier(km_by_group[group], title=f"Survival by {group}"),
                     out(f"km_{group}.png"), files)
        if len(km_by_group[group]) > 1:
            logrank.append(logrank_by_group(table, group))
        else:
            logger.warning("Skipping log-rank test for %s: only one level observed", group)
    _save_table(pd.DataFrame([vars(r) for r in logrank]), out("logrank.csv"), files)

    models = fit_models(table, config)
    for model in models:
        _save_table(model.summary_, out(f"coef_{model.family}.csv"), files, index=True)

    weibull = weibull_diagnostic_table(table, config.diagnostic_group)
    log_odds = log_odds_table(table, config.diagnostic_group)
    _save_figure(plot_weibull_diagnostic(weibull, line_slopes(weibull)),
                 out(f"weibull_{config.diagnostic_group}.png"), files)
    _save_figure(plot_log_odds(log_odds, line_slopes(log_odds)),
                 out(f"logodds_{config.diagnostic_group}.png"), files)

    aic = compare_aic(models)
    _save_table(aic, out("aic.csv"), files)
    _save_figure(plot_aic_comparison(aic), out("aic.png"), files)

    predictor = next(model for model in models if model.family == "weibull_aft")
    quantiles = {}
    for value in config.prediction_values:
        patient = hypothetical_patient(table, config.covariates, **{config.prediction_covariate: value})
        quantiles[f"{config.prediction_covariate}={value:g}"] = predict_quantile_curve(predictor, patient)
    _save_table(pd.concat(quantiles, names=["patient", "row"]).reset_index(level="row", drop=True),
                out("quantiles.csv"), files, index=True)
    _save_figure(plot_quantile_curve(quantiles), out("quantiles.png"), files)

    result = ReportResult(
        config=config,
        table=table,
        descriptive=descriptive,
        km_overall=km_overall,
        km_by_group=km_by_group,
        logrank=logrank,
        models=models,
        weibull_diagnostic=weibull,
        log_odds=log_odds,
        aic=aic,
        quantiles=quantiles,
        files=files,
    )
    _write_markdown(result, out("report.md"))
    files.append(out("report.md"))
    logger.info("Report written to %s (%d files)", config.output_dir, len(files))
    return result


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Survival analysis report for the cirrhosis dataset")
    parser.add_argument("data_path", help="Cirrhosis CSV file")
    parser.add_argument("--output-dir", default="report", help="Directory for tables and figures")
    parser.add_argument("--covariates", nargs="+", help="Model covariates (cleaned column names)")
    parser.add_argument("--strata", nargs="+", help="Columns for stratified Kaplan-Meier curves")
    parser.add_argument("--time-scale", type=float, default=None,
                        help="Divisor turning days into model time units")
    parser.add_argument("--prediction-covariate", default=None,
                        help="Covariate varied for the predicted survival quantiles")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug messages")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    overrides = {}
    if args.covariates:
        overrides["covariates"] = args.covariates
    if args.strata:
        overrides["strata"] = args.strata
    if args.time_scale is not None:
        overrides["time_scale"] = args.time_scale
    if args.prediction_covariate:
        overrides["prediction_covariate"] = args.prediction_covariate
    config = ReportConfig(data_path=args.data_path, output_dir=args.output_dir, **overrides)

    result = run_report(config)
    print(f"Wrote {len(result.files)} files to {config.output_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
