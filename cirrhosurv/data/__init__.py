"""
Data loading, cleaning and survival data structures
"""

from .data import Survival
from .data_validator import DataValidator, SchemaError
from .loader import load_cirrhosis
from .cleaning import CirrhosisCleaner, clean_cirrhosis
from .encoding import CovariateEncoder

__all__ = [
    "Survival",
    "DataValidator",
    "SchemaError",
    "load_cirrhosis",
    "CirrhosisCleaner",
    "clean_cirrhosis",
    "CovariateEncoder"
]
