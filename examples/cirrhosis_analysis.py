"""
Example of a step-by-step survival analysis of the cirrhosis dataset with cirrhosurv
"""

import os
import sys

import matplotlib.pyplot as plt

from cirrhosurv.data import clean_cirrhosis, load_cirrhosis
from cirrhosurv.descriptive import summarize_by_event
from cirrhosurv.diagnostics import compare_aic, line_slopes, weibull_diagnostic_table
from cirrhosurv.estimation import fit_kaplan_meier, logrank_by_group
from cirrhosurv.models import (
    ExponentialRegression,
    WeibullAFTRegression,
    WeibullPHRegression,
    hypothetical_patient,
    predict_quantile_curve
)
from cirrhosurv.visualization import plot_kaplan_meier, plot_quantile_curve, plot_weibull_diagnostic

data_path = sys.argv[1] if len(sys.argv) > 1 else "cirrhosis.csv"
output_dir = "cirrhosis_example_output"
os.makedirs(output_dir, exist_ok=True)

# Load and clean the data
raw = load_cirrhosis(data_path)
table = clean_cirrhosis(raw)
print(f"Patients: {len(raw)} read, {len(table)} analysed, {table['event'].sum()} deaths")

# Descriptive statistics
print("\nDescriptive statistics by event status:")
print(summarize_by_event(table).to_string(index=False))

# Kaplan-Meier and log-rank
curve = fit_kaplan_meier(table["time"], table["event"])
print(f"\nMedian survival: {curve.median:.0f} days")
for group in ["stage", "edema", "drug"]:
    result = logrank_by_group(table, group)
    print(f"Log-rank by {group}: chi2={result.statistic:.2f}, p={result.p_value:.4g}")

fig = plot_kaplan_meier(curve, title="Overall Survival")
fig.savefig(os.path.join(output_dir, "km_overall.png"))
plt.close(fig)

# Parametric models
covariates = ["bilirubin", "age_years", "edema", "stage", "albumin", "prothrombin"]
models = [cls(covariates=covariates).fit(table)
          for cls in (ExponentialRegression, WeibullAFTRegression, WeibullPHRegression)]
for model in models:
    print(f"\n{model.family} ({model.metric}):")
    print(model.summary_[["coef", "se", "exp_coef", "p"]].round(4))

print("\nAIC comparison:")
print(compare_aic(models).to_string(index=False))

# Weibull diagnostic by stage
diagnostic = weibull_diagnostic_table(table, "stage")
slopes = line_slopes(diagnostic)
print("\nWeibull diagnostic slopes by stage:")
print(slopes)
fig = plot_weibull_diagnostic(diagnostic, slopes)
fig.savefig(os.path.join(output_dir, "weibull_stage.png"))
plt.close(fig)

# Predicted survival quantiles for typical patients with low and high bilirubin
weibull = models[1]
curves = {}
for bilirubin in (1.0, 5.0):
    patient = hypothetical_patient(table, covariates, bilirubin=bilirubin)
    curves[f"bilirubin={bilirubin:g}"] = predict_quantile_curve(weibull, patient)
    median = curves[f"bilirubin={bilirubin:g}"].set_index("probability").loc[0.5, "time"]
    print(f"Predicted median survival with bilirubin {bilirubin:g}: {median:.0f} days")

fig = plot_quantile_curve(curves)
fig.savefig(os.path.join(output_dir, "quantiles.png"))
plt.close(fig)
print(f"\nFigures saved to {output_dir}/")
