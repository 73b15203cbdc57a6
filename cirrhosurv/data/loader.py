"""
Loading of the Mayo Clinic cirrhosis extract
"""

import logging
import os
from typing import Union

import pandas as pd

from .data_validator import DataValidator

logger = logging.getLogger(__name__)

# Header of the published CSV extract, in file order
RAW_COLUMNS = [
    "ID", "N_Days", "Status", "Drug", "Age", "Sex", "Ascites", "Hepatomegaly",
    "Spiders", "Edema", "Bilirubin", "Cholesterol", "Albumin", "Copper",
    "Alk_Phos", "SGOT", "Tryglicerides", "Platelets", "Prothrombin", "Stage",
]

REQUIRED_COLUMNS = ["ID", "N_Days", "Status"]

NA_VALUES = ["NA", "N/A", ""]


def load_cirrhosis(path: Union[str, os.PathLike]) -> pd.DataFrame:
    """
    Read the cirrhosis CSV into a raw table

    Parameters
    ----------
    path : str or path-like
        Location of the comma separated file

    Returns
    -------
    pandas.DataFrame
        Raw table with the file's columns, values not yet recoded

    Raises
    ------
    FileNotFoundError
        If ``path`` does not exist
    SchemaError
        If the id, follow-up or status columns are absent
    """
    raw = pd.read_csv(path, na_values=NA_VALUES, keep_default_na=True,
                      skipinitialspace=True)
    raw.columns = [str(col).strip() for col in raw.columns]
    DataValidator().validate_schema(raw, REQUIRED_COLUMNS)

    absent = [col for col in RAW_COLUMNS if col not in raw.columns]
    if absent:
        logger.warning("Optional columns absent from %s: %s", path, ", ".join(absent))
    logger.info("Loaded %d patients and %d columns from %s", raw.shape[0], raw.shape[1], path)
    return raw
