import numpy as np
import pandas as pd
import pytest

from cirrhosurv.data.loader import RAW_COLUMNS


def make_raw_cirrhosis(n_samples=300, seed=42):
    """Synthetic table in the layout of the published cirrhosis CSV

    Survival is Weibull (shape 1.3) with scale shortened by bilirubin,
    stage, age and edema and lengthened by albumin.
    """
    rng = np.random.RandomState(seed)

    stage = rng.choice([1, 2, 3, 4], size=n_samples, p=[0.1, 0.25, 0.35, 0.3])
    bilirubin = np.round(rng.lognormal(0.3, 0.9, n_samples), 1)
    albumin = np.round(rng.normal(3.5, 0.4, n_samples), 2)
    prothrombin = np.round(rng.normal(10.7, 1.0, n_samples), 1)
    age_years = rng.normal(50, 10, n_samples)
    edema = rng.choice(["N", "S", "Y"], size=n_samples, p=[0.8, 0.12, 0.08])

    log_scale = (3.2 - 0.12 * bilirubin - 0.3 * (stage - 1) - 0.01 * (age_years - 50)
                 + 0.5 * (albumin - 3.5) - 0.4 * (edema == "Y"))
    death_years = np.exp(log_scale) * (-np.log(rng.uniform(size=n_samples))) ** (1 / 1.3)
    censor_years = rng.uniform(1, 12, n_samples)
    died = death_years <= censor_years
    days = np.maximum(np.ceil(np.minimum(death_years, censor_years) * 365.25), 1).astype(int)
    status = np.where(died, "D", rng.choice(["C", "CL"], size=n_samples, p=[0.9, 0.1]))

    raw = pd.DataFrame({
        "ID": np.arange(1, n_samples + 1),
        "N_Days": days,
        "Status": status,
        "Drug": rng.choice(["D-penicillamine", "Placebo"], size=n_samples),
        "Age": np.round(age_years * 365.25).astype(int),
        "Sex": rng.choice(["F", "M"], size=n_samples, p=[0.88, 0.12]),
        "Ascites": rng.choice(["N", "Y"], size=n_samples, p=[0.92, 0.08]),
        "Hepatomegaly": rng.choice(["N", "Y"], size=n_samples),
        "Spiders": rng.choice(["N", "Y"], size=n_samples, p=[0.7, 0.3]),
        "Edema": edema,
        "Bilirubin": bilirubin,
        "Cholesterol": np.round(rng.normal(350, 120, n_samples)),
        "Albumin": albumin,
        "Copper": np.round(rng.lognormal(4.2, 0.7, n_samples)),
        "Alk_Phos": np.round(rng.lognormal(7.3, 0.6, n_samples), 1),
        "SGOT": np.round(rng.normal(120, 50, n_samples), 2),
        "Tryglicerides": np.round(rng.normal(120, 60, n_samples)),
        "Platelets": np.round(rng.normal(257, 95, n_samples)),
        "Prothrombin": prothrombin,
        "Stage": stage.astype(float),
    })[RAW_COLUMNS]

    raw = raw.astype({"Cholesterol": float, "Bilirubin": object, "Status": object})
    raw.loc[rng.choice(n_samples, size=60, replace=False), "Cholesterol"] = np.nan
    raw.loc[[3, 17, 29], "Prothrombin"] = np.nan
    raw.loc[5, "Status"] = "X"
    raw.loc[11, "Bilirubin"] = "abc"
    return raw


@pytest.fixture
def raw_cirrhosis():
    """Raw synthetic cirrhosis table"""
    return make_raw_cirrhosis()


@pytest.fixture
def cirrhosis_csv(tmp_path, raw_cirrhosis):
    """Synthetic cirrhosis table written to a CSV file"""
    path = tmp_path / "cirrhosis.csv"
    raw_cirrhosis.to_csv(path, index=False, na_rep="NA")
    return path


@pytest.fixture
def cirrhosis_table(raw_cirrhosis):
    """Cleaned synthetic cirrhosis table"""
    from cirrhosurv.data import clean_cirrhosis
    return clean_cirrhosis(raw_cirrhosis)
